"""Dashboard statistics: table counts, incomplete vocabulary, recent activity."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Tuple

from langobridge_admin.services.completeness import is_incomplete
from langobridge_admin.services.record_store import (
    BLOGS_TABLE,
    RESOURCES_TABLE,
    VOCABULARY_TABLE,
    SupabaseRecordStore,
)

logger = logging.getLogger(__name__)

RECENT_PER_TABLE = 3
RECENT_LIMIT = 10


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _id_sort_key(value: Any) -> Tuple[int, int, str]:
    """Ids are opaque: numeric ids sort by value, anything else by its text, after them."""
    text = str(value)
    try:
        return (1, int(text), "")
    except ValueError:
        return (0, 0, text)


class DashboardService:
    def __init__(self, store: SupabaseRecordStore):
        self.store = store

    def count_incomplete(self) -> int:
        rows = self.store.fetch_all(
            VOCABULARY_TABLE,
            order_by=None,
            columns="explanation,examples,part_of_speech,verb_forms",
        )
        return sum(1 for row in rows if is_incomplete(row))

    def recent_activity(self) -> List[Dict[str, Any]]:
        vocab = self.store.select(
            VOCABULARY_TABLE, "id,korean_word,bangla_meaning", order_by="id", limit=RECENT_PER_TABLE
        )
        blogs = self.store.select(
            BLOGS_TABLE, "id,title,category,published_at", order_by="id", limit=RECENT_PER_TABLE
        )
        resources = self.store.select(
            RESOURCES_TABLE, "id,title,category,created_at", order_by="id", limit=RECENT_PER_TABLE
        )

        combined: List[Dict[str, Any]] = []
        for row in vocab:
            combined.append(
                {
                    "id": row["id"],
                    "type": "vocabulary",
                    "title": row.get("korean_word") or "",
                    "subtitle": row.get("bangla_meaning"),
                    "date": _now_iso(),
                }
            )
        for row in blogs:
            combined.append(
                {
                    "id": row["id"],
                    "type": "blog",
                    "title": row.get("title") or "",
                    "subtitle": row.get("category"),
                    "date": row.get("published_at") or _now_iso(),
                }
            )
        for row in resources:
            combined.append(
                {
                    "id": row["id"],
                    "type": "resource",
                    "title": row.get("title") or "",
                    "subtitle": row.get("category"),
                    "date": row.get("created_at") or _now_iso(),
                }
            )

        combined.sort(key=lambda item: _id_sort_key(item["id"]), reverse=True)
        return combined[:RECENT_LIMIT]

    def build_stats(self) -> Dict[str, Any]:
        stats = {
            "vocabulary": self.store.count(VOCABULARY_TABLE),
            "resources": self.store.count(RESOURCES_TABLE),
            "blogs": self.store.count(BLOGS_TABLE),
            "incomplete": self.count_incomplete(),
            "recent_activity": self.recent_activity(),
        }
        logger.info(
            "Dashboard: %s mots (%s incomplets), %s ressources, %s articles",
            stats["vocabulary"],
            stats["incomplete"],
            stats["resources"],
            stats["blogs"],
        )
        return stats
