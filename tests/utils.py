"""Test helpers: an in-memory record store and row factories."""

from __future__ import annotations

import itertools
from typing import Any, Dict, Iterable, List, Mapping, Optional

from langobridge_admin.core.ai_service import VocabularyEnricher
from langobridge_admin.services.record_store import TABLES, RecordStoreError


class FakeRecordStore:
    """Stands in for ``SupabaseRecordStore``; rows live in plain lists."""

    def __init__(
        self,
        page_size: int = 1000,
        access_token: str = "admin-jwt",
        accepted_tokens: Optional[set[str]] = None,
    ):
        self.page_size = page_size
        self.access_token = access_token
        # None accepts every token; otherwise reads with another token get a 401.
        self.accepted_tokens = accepted_tokens
        self.tables: Dict[str, List[Dict[str, Any]]] = {table: [] for table in TABLES}
        self.fail_update_ids: set[str] = set()
        self.calls: List[tuple] = []
        self._ids = itertools.count(1)

    def seed(self, table: str, rows: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
        created = []
        for row in rows:
            record = dict(row)
            record.setdefault("id", next(self._ids))
            self.tables[table].append(record)
            created.append(record)
        return created

    def select(
        self,
        table: str,
        columns: str = "*",
        *,
        order_by: Optional[str] = None,
        ascending: bool = False,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
        filters: Optional[Mapping[str, Any]] = None,
    ) -> List[Dict[str, Any]]:
        self.calls.append(("select", table, offset, limit))
        if self.accepted_tokens is not None and self.access_token not in self.accepted_tokens:
            raise RecordStoreError("invalid_jwt", 401, "JWT rejected")
        rows = [dict(row) for row in self.tables[table]]
        if order_by:
            rows.sort(key=lambda row: row.get(order_by) or 0, reverse=not ascending)
        start = offset or 0
        end = start + limit if limit is not None else None
        return rows[start:end]

    def count(self, table: str) -> int:
        return len(self.tables[table])

    def insert(self, table: str, rows: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
        self.calls.append(("insert", table))
        return self.seed(table, rows)

    def update(self, table: str, record_id: Any, data: Mapping[str, Any]) -> Dict[str, Any]:
        self.calls.append(("update", table, str(record_id)))
        if str(record_id) in self.fail_update_ids:
            raise RecordStoreError("store_rejected", 500, f"update of {record_id} refused")
        for row in self.tables[table]:
            if str(row["id"]) == str(record_id):
                row.update(data)
                return dict(row)
        raise RecordStoreError("record_not_found", 404)

    def delete(self, table: str, record_id: Any) -> None:
        self.calls.append(("delete", table, str(record_id)))
        self.tables[table] = [row for row in self.tables[table] if str(row["id"]) != str(record_id)]

    def fetch_all(
        self,
        table: str,
        *,
        order_by: Optional[str] = "id",
        ascending: bool = False,
        columns: str = "*",
    ) -> List[Dict[str, Any]]:
        self.calls.append(("fetch_all", table))
        return self.select(table, columns, order_by=order_by, ascending=ascending)


class FakeEnricher(VocabularyEnricher):
    """Enricher answering from a callable instead of an LLM."""

    name = "fake"
    batch_delay_s = 0.25

    def __init__(self, answer=None, fail_words: Iterable[str] = ()):
        self.answer = answer or (lambda vocab, fields: {"explanation": f"{vocab['korean_word']} explained"})
        self.fail_words = set(fail_words)
        self.calls: List[tuple] = []

    def _complete(self, system_prompt: str, user_prompt: str) -> str:  # pragma: no cover - not reached
        raise AssertionError("enhance() is overridden")

    def enhance(self, vocab, fields=None, context=None):
        self.calls.append((vocab["korean_word"], fields, context))
        if vocab["korean_word"] in self.fail_words:
            raise RuntimeError(f"provider refused {vocab['korean_word']}")
        return self.answer(vocab, fields)


def make_vocab(**overrides: Any) -> Dict[str, Any]:
    row: Dict[str, Any] = {
        "korean_word": "가다",
        "bangla_meaning": "যাওয়া",
        "romanization": "gada",
        "part_of_speech": "noun",
        "explanation": "x" * 60,
        "examples": [{"korean": "집에 가요", "bangla": "বাড়ি যাই"}],
        "themes": ["daily_life"],
        "chapters": [1],
        "verb_forms": None,
    }
    row.update(overrides)
    return row


def make_bare_vocab(**overrides: Any) -> Dict[str, Any]:
    """A bulk-imported row carrying only the word and its meaning."""
    row = make_vocab(
        romanization=None,
        part_of_speech=None,
        explanation="",
        examples=[],
        themes=None,
        chapters=None,
    )
    row.update(overrides)
    return row
