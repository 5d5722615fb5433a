"""Bulk and single-record AI enhancement of vocabulary rows.

A batch walks the selected rows strictly one after the other: each row is
sent to the enrichment provider, the returned partial row is written back by
primary key, and a fixed pause separates two rows to stay under provider rate
limits. A failing row is marked ``error`` and the batch moves on; nothing is
retried and nothing spans more than one row. The record cache is invalidated
once, after the last row.
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Set, Union

from langobridge_admin.core.ai_service import VocabularyEnricher
from langobridge_admin.core.cache import RecordCache, record_cache
from langobridge_admin.services.record_store import VOCABULARY_TABLE, SupabaseRecordStore

logger = logging.getLogger(__name__)

ALL_FIELDS = "all"

FieldSelection = Union[Set[str], str]


@dataclass
class RecordResult:
    id: str
    korean_word: str
    status: str = "pending"
    error: Optional[str] = None
    enhanced: Optional[Dict[str, Any]] = None


def resolve_fields(fields: Optional[Iterable[str] | str]) -> Optional[List[str]]:
    """``"all"`` / ``["all"]`` / empty -> ``None`` (provider completes all missing fields)."""
    if fields is None or fields == ALL_FIELDS:
        return None
    selected = list(fields)
    if not selected or ALL_FIELDS in selected:
        return None
    return sorted(set(selected))


def select_records(records: Iterable[Mapping[str, Any]], ids: Iterable[str]) -> List[Mapping[str, Any]]:
    """Keep the fetched list order, not the order in which rows were ticked."""
    wanted = {str(record_id) for record_id in ids}
    return [record for record in records if str(record.get("id")) in wanted]


class EnhancementBatch:
    def __init__(
        self,
        records: List[Mapping[str, Any]],
        fields: Optional[Iterable[str] | str],
        enricher: VocabularyEnricher,
        store: SupabaseRecordStore,
        *,
        delay_s: float | None = None,
        cache: RecordCache | None = None,
        sleep: Callable[[float], None] = time.sleep,
        on_progress: Callable[["EnhancementBatch"], None] | None = None,
    ):
        self.batch_id = uuid.uuid4().hex
        self.records = list(records)
        self.fields = resolve_fields(fields)
        self.enricher = enricher
        self.store = store
        self.delay_s = enricher.batch_delay_s if delay_s is None else delay_s
        self.cache = cache if cache is not None else record_cache
        self._sleep = sleep
        self._on_progress = on_progress
        self.completed = 0
        self.finished = False
        self.results: List[RecordResult] = [
            RecordResult(id=str(record.get("id")), korean_word=record.get("korean_word") or "")
            for record in self.records
        ]

    # ------------------------------------------------------------------
    # Progress
    # ------------------------------------------------------------------
    @property
    def total(self) -> int:
        return len(self.records)

    @property
    def progress(self) -> float:
        """Percentage of rows already handled, success or not."""
        if not self.total:
            return 100.0
        return self.completed / self.total * 100

    @property
    def succeeded(self) -> int:
        return sum(1 for result in self.results if result.status == "success")

    @property
    def failed(self) -> int:
        return sum(1 for result in self.results if result.status == "error")

    def summary(self) -> Dict[str, int]:
        return {"total": self.total, "succeeded": self.succeeded, "failed": self.failed}

    def _notify(self) -> None:
        if self._on_progress is not None:
            self._on_progress(self)

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------
    def _process(self, record: Mapping[str, Any]) -> Dict[str, Any]:
        enhanced = self.enricher.enhance(record, self.fields)
        self.store.update(VOCABULARY_TABLE, record.get("id"), enhanced)
        return enhanced

    def run(self) -> Dict[str, int]:
        logger.info(
            "Enhancing %s items with %s (fields=%s)",
            self.total,
            self.enricher.name,
            ", ".join(self.fields) if self.fields else "all missing",
        )

        for index, (record, result) in enumerate(zip(self.records, self.results)):
            result.status = "processing"
            self._notify()
            logger.info(
                "Processing: %s (Item %s of %s, %s%%)",
                result.korean_word,
                index + 1,
                self.total,
                round(self.progress),
            )

            try:
                result.enhanced = self._process(record)
                result.status = "success"
            except Exception as exc:
                # A single failing row never aborts the batch.
                result.status = "error"
                result.error = str(exc) or exc.__class__.__name__
                logger.error("Failed: %s (%s)", result.korean_word, result.error)

            self.completed = index + 1
            self._notify()

            if index < self.total - 1:
                self._sleep(self.delay_s)

        self.finished = True
        self.cache.invalidate(VOCABULARY_TABLE)
        summary = self.summary()
        logger.info(
            "Bulk Enhancement Complete: %s succeeded, %s failed",
            summary["succeeded"],
            summary["failed"],
        )
        self._notify()
        return summary

    def as_dict(self) -> Dict[str, Any]:
        return {
            "batch_id": self.batch_id,
            "provider": self.enricher.name,
            "total": self.total,
            "completed": self.completed,
            "progress": round(self.progress, 1),
            "succeeded": self.succeeded,
            "failed": self.failed,
            "finished": self.finished,
            "results": [
                {
                    "id": result.id,
                    "korean_word": result.korean_word,
                    "status": result.status,
                    "error": result.error,
                }
                for result in self.results
            ],
        }


class BatchRegistry:
    """Batches started in the background, kept in memory for polling.

    At most ``max_batches`` are kept: the oldest finished batches are evicted
    first and a running batch is never dropped.
    """

    def __init__(self, max_batches: int = 50) -> None:
        self.max_batches = max_batches
        self._batches: Dict[str, EnhancementBatch] = {}
        self._lock = threading.Lock()

    def register(self, batch: EnhancementBatch) -> EnhancementBatch:
        with self._lock:
            self._batches[batch.batch_id] = batch
            self._evict_finished()
        return batch

    def _evict_finished(self) -> None:
        overflow = len(self._batches) - self.max_batches
        if overflow <= 0:
            return
        finished = [batch_id for batch_id, batch in self._batches.items() if batch.finished]
        for batch_id in finished[:overflow]:
            del self._batches[batch_id]
        logger.info("%s lot(s) terminé(s) retiré(s) du registre", min(overflow, len(finished)))

    def get(self, batch_id: str) -> Optional[EnhancementBatch]:
        with self._lock:
            return self._batches.get(batch_id)


batch_registry = BatchRegistry()


def preview(
    record: Mapping[str, Any],
    fields: Optional[Iterable[str] | str],
    enricher: VocabularyEnricher,
    context: str | None = None,
) -> Dict[str, Any]:
    """Ask the provider for a proposal without writing anything."""
    return enricher.enhance(record, resolve_fields(fields), context)


def apply(
    record_id: Any,
    proposed: Mapping[str, Any],
    store: SupabaseRecordStore,
    cache: RecordCache | None = None,
) -> Dict[str, Any]:
    """Persist the (possibly hand-edited) proposal as-is, then drop the cached list."""
    row = store.update(VOCABULARY_TABLE, record_id, dict(proposed))
    (cache if cache is not None else record_cache).invalidate(VOCABULARY_TABLE)
    logger.info("Vocabulary %s enhanced successfully", record_id)
    return row
