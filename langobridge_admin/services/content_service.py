"""CRUD for the three managed tables, plus the form-to-row payload rules."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from langobridge_admin.core.cache import RecordCache, record_cache
from langobridge_admin.core.config import settings
from langobridge_admin.schemas.content_schema import BlogIn, ResourceIn
from langobridge_admin.schemas.vocabulary_schema import VocabularyIn
from langobridge_admin.services.record_store import (
    BLOGS_TABLE,
    RESOURCES_TABLE,
    VOCABULARY_TABLE,
    SupabaseRecordStore,
)
from langobridge_admin.utils.text_utils import (
    format_category,
    generate_slug,
    parse_int_list,
    split_csv_text,
)

logger = logging.getLogger(__name__)


# ----------------------------------------------------------------------
# Payload builders
# ----------------------------------------------------------------------
def build_vocabulary_payload(form: VocabularyIn) -> Dict[str, Any]:
    is_verb = form.part_of_speech == "verb"
    return {
        "korean_word": form.korean_word,
        "bangla_meaning": form.bangla_meaning,
        "romanization": form.romanization or None,
        "part_of_speech": form.part_of_speech or None,
        "explanation": form.explanation,
        "examples": [ex.model_dump() for ex in form.examples if ex.korean.strip()],
        "themes": form.themes or None,
        "chapters": parse_int_list(form.chapters),
        "verb_forms": form.verb_forms.model_dump() if is_verb and form.verb_forms else None,
    }


def build_resource_payload(form: ResourceIn) -> Dict[str, Any]:
    return {
        "title": form.title,
        "category": None,
        "description": form.description or None,
        "tags": split_csv_text(form.tags),
        "file_path": form.file_path,
        "thumbnail_path": form.thumbnail_path or None,
        "file_size": None,
    }


def build_blog_payload(form: BlogIn) -> Dict[str, Any]:
    return {
        "title": form.title,
        "slug": form.slug or generate_slug(form.title),
        "content": form.content,
        "thumbnail_url": form.thumbnail_url or None,
        "category": form.category or None,
        "tags": split_csv_text(form.tags),
    }


def resource_download_url(file_path: str) -> str:
    if file_path.startswith(("http://", "https://")):
        return file_path
    bucket = settings.SUPABASE_STORAGE_BUCKET
    return f"{settings.supabase_base_url}/storage/v1/object/public/{bucket}/{file_path}"


def decorate_resource(row: Dict[str, Any]) -> Dict[str, Any]:
    return {**row, "download_url": resource_download_url(row.get("file_path") or "")}


def decorate_blog(row: Dict[str, Any]) -> Dict[str, Any]:
    category = row.get("category")
    return {**row, "category_label": format_category(category) if category else None}


# ----------------------------------------------------------------------
# Search
# ----------------------------------------------------------------------
def _contains(value: Any, query: str) -> bool:
    return isinstance(value, str) and query in value.lower()


def search_rows(rows: Iterable[Dict[str, Any]], search: Optional[str], keys: Iterable[str]) -> List[Dict[str, Any]]:
    items = list(rows)
    query = (search or "").lower()
    if not query:
        return items
    keys = tuple(keys)
    return [row for row in items if any(_contains(row.get(key), query) for key in keys)]


# ----------------------------------------------------------------------
# Services
# ----------------------------------------------------------------------
class ContentService:
    """Table-scoped list/create/update/delete with cache invalidation on writes."""

    def __init__(
        self,
        store: SupabaseRecordStore,
        table: str,
        *,
        cache: RecordCache | None = None,
        order_by: str = "id",
    ):
        self.store = store
        self.table = table
        self.cache = cache if cache is not None else record_cache
        self.order_by = order_by

    def list_all(self) -> List[Dict[str, Any]]:
        return self.cache.get_or_load(
            self.table,
            lambda: self.store.fetch_all(self.table, order_by=self.order_by),
            scope=getattr(self.store, "access_token", None),
        )

    def create(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        rows = self.store.insert(self.table, [payload])
        self.cache.invalidate(self.table)
        logger.info("Ligne ajoutée dans '%s'", self.table)
        return rows[0] if rows else payload

    def create_many(self, payloads: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        rows = self.store.insert(self.table, payloads)
        self.cache.invalidate(self.table)
        return rows

    def update(self, record_id: Any, payload: Dict[str, Any]) -> Dict[str, Any]:
        row = self.store.update(self.table, record_id, payload)
        self.cache.invalidate(self.table)
        return row

    def delete(self, record_id: Any) -> None:
        self.store.delete(self.table, record_id)
        self.cache.invalidate(self.table)
        logger.info("Ligne %s supprimée de '%s'", record_id, self.table)


def vocabulary_service(store: SupabaseRecordStore, cache: RecordCache | None = None) -> ContentService:
    return ContentService(store, VOCABULARY_TABLE, cache=cache)


def resource_service(store: SupabaseRecordStore, cache: RecordCache | None = None) -> ContentService:
    return ContentService(store, RESOURCES_TABLE, cache=cache, order_by="created_at")


def blog_service(store: SupabaseRecordStore, cache: RecordCache | None = None) -> ContentService:
    return ContentService(store, BLOGS_TABLE, cache=cache)
