# Fichier : langobridge_admin/core/cache.py
"""Process-wide cache of full-table fetches, invalidated after any mutation.

Entries are scoped by the caller's access token: rows loaded under one
Supabase session are never served to another session, which must reach the
store (and its auth checks) at least once.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

CacheKey = Tuple[Optional[str], str]


class RecordCache:
    def __init__(self) -> None:
        self._entries: Dict[CacheKey, List[Dict[str, Any]]] = {}
        self._lock = threading.Lock()

    def get_or_load(
        self,
        table: str,
        loader: Callable[[], List[Dict[str, Any]]],
        scope: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        key = (scope, table)
        with self._lock:
            cached = self._entries.get(key)
        if cached is not None:
            return cached

        rows = loader()
        with self._lock:
            self._entries[key] = rows
        return rows

    def invalidate(self, table: str) -> None:
        """Drop the table for every session."""
        with self._lock:
            for key in [key for key in self._entries if key[1] == table]:
                del self._entries[key]
        logger.info("Cache invalidé pour '%s'", table)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


record_cache = RecordCache()
