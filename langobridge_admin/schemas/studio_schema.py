# Fichier : langobridge_admin/schemas/studio_schema.py
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from langobridge_admin.schemas.vocabulary_schema import ENHANCEABLE_FIELDS

BatchStatus = Literal["pending", "processing", "success", "error"]


def _validate_fields(value: List[str]) -> List[str]:
    """``["all"]`` (ou une liste vide) signifie : compléter tout ce qui manque."""
    unknown = [field for field in value if field != "all" and field not in ENHANCEABLE_FIELDS]
    if unknown:
        raise ValueError(f"unknown_fields: {', '.join(unknown)}")
    return value


class PreviewIn(BaseModel):
    vocabulary_id: str
    fields: List[str] = Field(default_factory=lambda: ["all"])
    context: Optional[str] = None

    @field_validator("fields")
    @classmethod
    def _check_fields(cls, value: List[str]) -> List[str]:
        return _validate_fields(value)


class ApplyIn(BaseModel):
    vocabulary_id: str
    # Edited preview values are forwarded verbatim, without schema validation.
    data: Dict[str, Any]


class BatchIn(BaseModel):
    vocabulary_ids: List[str]
    fields: List[str] = Field(default_factory=lambda: ["all"])

    @field_validator("fields")
    @classmethod
    def _check_fields(cls, value: List[str]) -> List[str]:
        return _validate_fields(value)


class RecordResultOut(BaseModel):
    id: str
    korean_word: str
    status: BatchStatus
    error: Optional[str] = None


class BatchOut(BaseModel):
    batch_id: str
    provider: str
    total: int
    completed: int
    progress: float
    succeeded: int
    failed: int
    finished: bool
    results: List[RecordResultOut]


class GenerateIn(BaseModel):
    text: str = Field(..., min_length=1)
