from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, status

from langobridge_admin.api.v1.dependencies import DOMAIN_ERRORS, get_record_store, http_error
from langobridge_admin.schemas.content_schema import ContentPage, ResourceIn, ResourceOut
from langobridge_admin.services.content_service import (
    build_resource_payload,
    decorate_resource,
    resource_service,
    search_rows,
)
from langobridge_admin.services.record_store import SupabaseRecordStore
from langobridge_admin.utils.virtualization import RESOURCE_LAYOUT, window_items

router = APIRouter()

SEARCH_KEYS = ("title", "description")


@router.get("", response_model=ContentPage)
def list_resources(
    search: Optional[str] = None,
    width: Optional[int] = None,
    scroll_top: Optional[int] = None,
    viewport_height: Optional[int] = None,
    store: SupabaseRecordStore = Depends(get_record_store),
):
    try:
        rows = resource_service(store).list_all()
    except DOMAIN_ERRORS as exc:
        raise http_error(exc) from exc

    matches = search_rows(rows, search, SEARCH_KEYS)
    items, window = window_items(
        matches,
        RESOURCE_LAYOUT,
        width=width,
        scroll_top=scroll_top,
        viewport_height=viewport_height,
    )
    return {
        "items": [decorate_resource(row) for row in items],
        "total": len(matches),
        "window": window.as_dict() if window else None,
    }


@router.post("", response_model=ResourceOut, status_code=status.HTTP_201_CREATED)
def create_resource(payload: ResourceIn, store: SupabaseRecordStore = Depends(get_record_store)):
    try:
        row = resource_service(store).create(build_resource_payload(payload))
    except DOMAIN_ERRORS as exc:
        raise http_error(exc) from exc
    return decorate_resource(row)


@router.put("/{resource_id}", response_model=ResourceOut)
def update_resource(
    resource_id: int,
    payload: ResourceIn,
    store: SupabaseRecordStore = Depends(get_record_store),
):
    try:
        row = resource_service(store).update(resource_id, build_resource_payload(payload))
    except DOMAIN_ERRORS as exc:
        raise http_error(exc) from exc
    return decorate_resource(row)


@router.delete("/{resource_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_resource(resource_id: int, store: SupabaseRecordStore = Depends(get_record_store)):
    try:
        resource_service(store).delete(resource_id)
    except DOMAIN_ERRORS as exc:
        raise http_error(exc) from exc
