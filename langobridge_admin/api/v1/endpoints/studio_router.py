# Fichier : langobridge_admin/api/v1/endpoints/studio_router.py
"""AI studios: filtered word lists, single-word preview/apply and bulk batches.

The same routes serve both providers; ``{provider}`` is ``openai`` or ``gemini``.
Batches run in the background and are polled through ``/studio/batches/{id}``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status

from langobridge_admin.api.v1.dependencies import (
    DOMAIN_ERRORS,
    get_key_store,
    get_record_store,
    http_error,
)
from langobridge_admin.core.ai_service import (
    GeminiEnricher,
    VocabularyEnricher,
    generate_vocabulary_data,
    get_enricher,
)
from langobridge_admin.core.local_store import LocalKeyValueStore
from langobridge_admin.schemas.studio_schema import ApplyIn, BatchIn, BatchOut, GenerateIn, PreviewIn
from langobridge_admin.schemas.vocabulary_schema import FilterType, VocabularyPage
from langobridge_admin.services import enhancement_service
from langobridge_admin.services.completeness import filter_vocabularies
from langobridge_admin.services.content_service import vocabulary_service
from langobridge_admin.services.enhancement_service import (
    EnhancementBatch,
    batch_registry,
    select_records,
)
from langobridge_admin.services.record_store import SupabaseRecordStore

router = APIRouter()
logger = logging.getLogger(__name__)


def _enricher(provider: str, key_store: LocalKeyValueStore) -> VocabularyEnricher:
    if provider == GeminiEnricher.name:
        return GeminiEnricher(key_store=key_store)
    try:
        return get_enricher(provider)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="unknown_provider") from exc


def _find_vocabulary(store: SupabaseRecordStore, vocabulary_id: str) -> Mapping[str, Any]:
    for record in vocabulary_service(store).list_all():
        if str(record.get("id")) == str(vocabulary_id):
            return record
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="vocabulary_not_found")


@router.get("/batches/{batch_id}", response_model=BatchOut)
def get_batch(batch_id: str):
    batch = batch_registry.get(batch_id)
    if batch is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="batch_not_found")
    return batch.as_dict()


@router.post("/generate")
def generate_vocabulary(
    payload: GenerateIn,
    provider: str = "openai",
    key_store: LocalKeyValueStore = Depends(get_key_store),
):
    """Turn free text into vocabulary rows ready for the bulk-upload preview."""
    enricher = _enricher(provider, key_store)
    try:
        items = generate_vocabulary_data(payload.text, enricher)
    except DOMAIN_ERRORS as exc:
        raise http_error(exc) from exc
    logger.info("Génération IA (%s): %s mot(s) proposés", provider, len(items))
    return {"items": items}


@router.get("/{provider}/vocabulary", response_model=VocabularyPage)
def list_studio_vocabulary(
    provider: str,
    search: Optional[str] = None,
    filter_type: FilterType = "all",
    pos: Optional[str] = None,
    store: SupabaseRecordStore = Depends(get_record_store),
    key_store: LocalKeyValueStore = Depends(get_key_store),
):
    _enricher(provider, key_store)
    try:
        rows = vocabulary_service(store).list_all()
    except DOMAIN_ERRORS as exc:
        raise http_error(exc) from exc

    items = filter_vocabularies(rows, search, filter_type, pos)
    return {"items": items, "total": len(items), "window": None}


@router.post("/{provider}/preview")
def preview_enhancement(
    provider: str,
    payload: PreviewIn,
    store: SupabaseRecordStore = Depends(get_record_store),
    key_store: LocalKeyValueStore = Depends(get_key_store),
) -> Dict[str, Any]:
    enricher = _enricher(provider, key_store)
    try:
        record = _find_vocabulary(store, payload.vocabulary_id)
        proposed = enhancement_service.preview(record, payload.fields, enricher, payload.context)
    except DOMAIN_ERRORS as exc:
        raise http_error(exc) from exc
    return {"vocabulary_id": payload.vocabulary_id, "enhanced": proposed}


@router.post("/{provider}/apply")
def apply_enhancement(
    provider: str,
    payload: ApplyIn,
    store: SupabaseRecordStore = Depends(get_record_store),
    key_store: LocalKeyValueStore = Depends(get_key_store),
) -> Dict[str, Any]:
    _enricher(provider, key_store)
    try:
        return enhancement_service.apply(payload.vocabulary_id, payload.data, store)
    except DOMAIN_ERRORS as exc:
        raise http_error(exc) from exc


@router.post("/{provider}/batches", response_model=BatchOut, status_code=status.HTTP_202_ACCEPTED)
def start_batch(
    provider: str,
    payload: BatchIn,
    background_tasks: BackgroundTasks,
    store: SupabaseRecordStore = Depends(get_record_store),
    key_store: LocalKeyValueStore = Depends(get_key_store),
):
    enricher = _enricher(provider, key_store)
    if not payload.vocabulary_ids:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="empty_selection")

    try:
        records = select_records(vocabulary_service(store).list_all(), payload.vocabulary_ids)
    except DOMAIN_ERRORS as exc:
        raise http_error(exc) from exc
    if not records:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="empty_selection")

    batch = batch_registry.register(EnhancementBatch(records, payload.fields, enricher, store))
    background_tasks.add_task(batch.run)
    logger.info("Lot %s démarré (%s, %s mot(s))", batch.batch_id, provider, batch.total)
    return batch.as_dict()
