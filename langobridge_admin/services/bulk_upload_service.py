"""Bulk vocabulary import from pasted JSON, JSON files or CSV files."""

from __future__ import annotations

import csv
import io
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from langobridge_admin.services.content_service import ContentService
from langobridge_admin.utils.text_utils import parse_int_list

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("korean_word", "bangla_meaning")

TEMPLATES: Dict[str, str] = {
    "csv": (
        "korean_word,bangla_meaning,romanization,part_of_speech,explanation,themes,chapters,examples\n"
        '가다,যাওয়া,gada,verb,To move from one place to another,"daily_life, action",1,'
        '"[{""korean"":""집에 가요"",""bangla"":""I go home""}]"\n'
    ),
    "json": json.dumps(
        [
            {
                "korean_word": "가다",
                "bangla_meaning": "যাওয়া",
                "romanization": "gada",
                "part_of_speech": "verb",
                "explanation": "To move from one place to another",
                "themes": ["daily_life", "action"],
                "chapters": [1],
                "examples": [{"korean": "집에 가요", "bangla": "I go home"}],
            }
        ],
        ensure_ascii=False,
        indent=2,
    ),
}


@dataclass(slots=True)
class BulkUploadError(Exception):
    code: str
    status_code: int = 400
    message: str | None = None

    def __str__(self) -> str:  # pragma: no cover - human readable message
        return self.message or self.code


@dataclass
class BulkPreview:
    items: List[Dict[str, Any]] = field(default_factory=list)
    invalid_count: int = 0

    @property
    def warning(self) -> Optional[str]:
        if not self.invalid_count:
            return None
        return (
            f"{self.invalid_count} items are missing korean_word or bangla_meaning. "
            "Only valid items will be previewed."
        )


def _has_required(item: Any) -> bool:
    return isinstance(item, dict) and all(item.get(key) for key in REQUIRED_FIELDS)


def _preview(rows: List[Any]) -> BulkPreview:
    valid = [row for row in rows if _has_required(row)]
    return BulkPreview(items=valid, invalid_count=len(rows) - len(valid))


def parse_json_text(text: str) -> BulkPreview:
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as exc:
        raise BulkUploadError("invalid_json", message="Invalid JSON format.") from exc
    if not isinstance(parsed, list):
        raise BulkUploadError("invalid_json_root", message="Invalid JSON: Root must be an array.")
    return _preview(parsed)


def parse_csv_text(text: str) -> BulkPreview:
    reader = csv.DictReader(io.StringIO(text))
    try:
        rows = [dict(row) for row in reader if any((value or "").strip() for value in row.values())]
    except csv.Error as exc:
        raise BulkUploadError("invalid_csv", message=f"CSV Parsing Error: {exc}") from exc
    return _preview(rows)


def parse_upload(filename: str, content: bytes) -> BulkPreview:
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise BulkUploadError("invalid_encoding", message="File must be UTF-8 encoded.") from exc

    lowered = filename.lower()
    if lowered.endswith(".csv"):
        return parse_csv_text(text)
    if lowered.endswith(".json"):
        return parse_json_text(text)
    raise BulkUploadError("unsupported_file", message="Unsupported file type. Please upload CSV or JSON.")


def _normalise_examples(item: Dict[str, Any]) -> List[Any]:
    examples = item.get("examples")
    if isinstance(examples, list):
        return examples
    if isinstance(examples, str) and examples.strip().startswith("["):
        try:
            parsed = json.loads(examples)
        except json.JSONDecodeError:
            logger.warning("Exemples illisibles pour '%s'", item.get("korean_word"))
            return []
        return parsed if isinstance(parsed, list) else []
    return []


def _normalise_themes(item: Dict[str, Any]) -> Optional[List[str]]:
    themes = item.get("themes")
    if isinstance(themes, str):
        return [theme.strip() for theme in themes.split(",") if theme.strip()]
    if isinstance(themes, list):
        return themes
    return None


def normalise_rows(items: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Shape raw CSV/JSON rows into ``vocabulary`` rows; rows lacking the word or meaning are dropped."""
    rows: List[Dict[str, Any]] = []
    for item in items:
        if not _has_required(item):
            continue
        rows.append(
            {
                "korean_word": item["korean_word"],
                "bangla_meaning": item["bangla_meaning"],
                "romanization": item.get("romanization") or None,
                "part_of_speech": item.get("part_of_speech") or None,
                "explanation": item.get("explanation") or "",
                "examples": _normalise_examples(item),
                "themes": _normalise_themes(item),
                "chapters": parse_int_list(item.get("chapters")),
                "verb_forms": item.get("verb_forms") or None,
            }
        )
    return rows


def upload(service: ContentService, items: List[Dict[str, Any]]) -> int:
    rows = normalise_rows(items)
    if not rows:
        raise BulkUploadError("no_valid_rows", message="No valid data found to upload. Check required fields.")
    service.create_many(rows)
    logger.info("Import en masse: %s mot(s) ajoutés", len(rows))
    return len(rows)
