from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, status

from langobridge_admin.api.v1.dependencies import DOMAIN_ERRORS, get_record_store, http_error
from langobridge_admin.schemas.vocabulary_schema import Vocabulary, VocabularyIn, VocabularyPage
from langobridge_admin.services.completeness import search_vocabularies
from langobridge_admin.services.content_service import build_vocabulary_payload, vocabulary_service
from langobridge_admin.services.record_store import SupabaseRecordStore
from langobridge_admin.utils.virtualization import VOCABULARY_LAYOUT, window_items

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=VocabularyPage)
def list_vocabulary(
    search: Optional[str] = None,
    scroll_top: Optional[int] = None,
    viewport_height: Optional[int] = None,
    store: SupabaseRecordStore = Depends(get_record_store),
):
    try:
        rows = vocabulary_service(store).list_all()
    except DOMAIN_ERRORS as exc:
        raise http_error(exc) from exc

    matches = search_vocabularies(rows, search, include_romanization=True)
    items, window = window_items(
        matches, VOCABULARY_LAYOUT, scroll_top=scroll_top, viewport_height=viewport_height
    )
    return {
        "items": items,
        "total": len(matches),
        "window": window.as_dict() if window else None,
    }


@router.post("", response_model=Vocabulary, status_code=status.HTTP_201_CREATED)
def create_vocabulary(payload: VocabularyIn, store: SupabaseRecordStore = Depends(get_record_store)):
    try:
        return vocabulary_service(store).create(build_vocabulary_payload(payload))
    except DOMAIN_ERRORS as exc:
        raise http_error(exc) from exc


@router.put("/{vocabulary_id}", response_model=Vocabulary)
def update_vocabulary(
    vocabulary_id: str,
    payload: VocabularyIn,
    store: SupabaseRecordStore = Depends(get_record_store),
):
    try:
        return vocabulary_service(store).update(vocabulary_id, build_vocabulary_payload(payload))
    except DOMAIN_ERRORS as exc:
        raise http_error(exc) from exc


@router.delete("/{vocabulary_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_vocabulary(vocabulary_id: str, store: SupabaseRecordStore = Depends(get_record_store)):
    try:
        vocabulary_service(store).delete(vocabulary_id)
    except DOMAIN_ERRORS as exc:
        raise http_error(exc) from exc
    logger.info("Vocabulaire %s supprimé", vocabulary_id)
