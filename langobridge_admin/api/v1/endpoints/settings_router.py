from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status

from langobridge_admin.api.v1.dependencies import get_key_store
from langobridge_admin.core.local_store import GEMINI_KEY_STORAGE, LocalKeyValueStore, mask_key
from langobridge_admin.schemas.admin_schema import ApiKeyIn, ApiKeyOut

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/gemini-key", response_model=ApiKeyOut)
def get_gemini_key(key_store: LocalKeyValueStore = Depends(get_key_store)):
    value = key_store.get(GEMINI_KEY_STORAGE)
    return ApiKeyOut(configured=bool(value), masked_key=mask_key(value))


@router.put("/gemini-key", response_model=ApiKeyOut)
def save_gemini_key(payload: ApiKeyIn, key_store: LocalKeyValueStore = Depends(get_key_store)):
    value = payload.api_key.strip()
    key_store.set(GEMINI_KEY_STORAGE, value)
    logger.info("Clé API Gemini enregistrée localement")
    return ApiKeyOut(configured=True, masked_key=mask_key(value))


@router.delete("/gemini-key", status_code=status.HTTP_204_NO_CONTENT)
def delete_gemini_key(key_store: LocalKeyValueStore = Depends(get_key_store)):
    key_store.delete(GEMINI_KEY_STORAGE)
    logger.info("Clé API Gemini supprimée")
