from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, status

from langobridge_admin.api.v1.dependencies import DOMAIN_ERRORS, get_record_store, http_error
from langobridge_admin.schemas.content_schema import (
    BLOG_CATEGORIES,
    BlogIn,
    BlogOut,
    CategoryOut,
    ContentPage,
)
from langobridge_admin.services.content_service import (
    blog_service,
    build_blog_payload,
    decorate_blog,
    search_rows,
)
from langobridge_admin.services.record_store import SupabaseRecordStore
from langobridge_admin.utils.text_utils import format_category
from langobridge_admin.utils.virtualization import BLOG_LAYOUT, window_items

router = APIRouter()

SEARCH_KEYS = ("title", "category")


@router.get("/categories", response_model=list[CategoryOut])
def list_categories():
    return [CategoryOut(key=key, label=format_category(key)) for key in BLOG_CATEGORIES]


@router.get("", response_model=ContentPage)
def list_blogs(
    search: Optional[str] = None,
    width: Optional[int] = None,
    scroll_top: Optional[int] = None,
    viewport_height: Optional[int] = None,
    store: SupabaseRecordStore = Depends(get_record_store),
):
    try:
        rows = blog_service(store).list_all()
    except DOMAIN_ERRORS as exc:
        raise http_error(exc) from exc

    matches = search_rows(rows, search, SEARCH_KEYS)
    items, window = window_items(
        matches,
        BLOG_LAYOUT,
        width=width,
        scroll_top=scroll_top,
        viewport_height=viewport_height,
    )
    return {
        "items": [decorate_blog(row) for row in items],
        "total": len(matches),
        "window": window.as_dict() if window else None,
    }


@router.post("", response_model=BlogOut, status_code=status.HTTP_201_CREATED)
def create_blog(payload: BlogIn, store: SupabaseRecordStore = Depends(get_record_store)):
    try:
        row = blog_service(store).create(build_blog_payload(payload))
    except DOMAIN_ERRORS as exc:
        raise http_error(exc) from exc
    return decorate_blog(row)


@router.put("/{blog_id}", response_model=BlogOut)
def update_blog(blog_id: int, payload: BlogIn, store: SupabaseRecordStore = Depends(get_record_store)):
    try:
        row = blog_service(store).update(blog_id, build_blog_payload(payload))
    except DOMAIN_ERRORS as exc:
        raise http_error(exc) from exc
    return decorate_blog(row)


@router.delete("/{blog_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_blog(blog_id: int, store: SupabaseRecordStore = Depends(get_record_store)):
    try:
        blog_service(store).delete(blog_id)
    except DOMAIN_ERRORS as exc:
        raise http_error(exc) from exc
