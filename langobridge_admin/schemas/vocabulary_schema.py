# Fichier : langobridge_admin/schemas/vocabulary_schema.py
from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

PARTS_OF_SPEECH: tuple[str, ...] = (
    "noun",
    "pronoun",
    "numeral",
    "verb",
    "adjective",
    "adverb",
    "determiner",
    "particle",
    "ending",
    "auxiliary_verb",
    "interjection",
    "prefix",
    "suffix",
    "bound_noun",
    "counter",
    "copula",
    "conjunction",
)

THEMES: tuple[str, ...] = (
    "daily_life", "family", "friends", "food", "shopping", "housing", "transport",
    "health", "weather", "time_date", "hobbies", "emotions", "clothing", "workplace",
    "factory", "construction", "manufacturing", "safety", "tools", "machines",
    "instructions", "warnings", "permissions", "schedule", "salary", "overtime",
    "leave", "rules", "conversation", "question_answer", "commands", "requests",
    "suggestions", "apology", "agreement", "disagreement", "polite_speech",
    "honorifics", "formal", "informal", "travel", "directions", "airport",
    "immigration", "hotel", "restaurant", "public_service", "bank", "post_office",
    "police", "emergency", "education", "classroom", "exam", "study",
    "language_learning", "grammar", "vocabulary", "reading", "writing", "listening",
    "speaking", "medical", "hospital", "medicine", "injury", "accident", "first_aid",
    "fire_safety", "protective_equipment", "danger", "warning_signs", "numbers",
    "counting", "money", "measurement", "weight", "length", "quantity", "price",
    "percentage", "time_management", "technology", "mobile", "internet", "computer",
    "applications", "devices", "repair", "electricity", "nature", "animals", "plants",
    "environment", "pollution", "natural_disaster", "weather_alert", "movement",
    "action", "change", "state", "process", "cause_effect", "permission_prohibition",
    "culture", "tradition", "festival", "customs", "respect", "behavior", "social_rules",
)

# Champs que les studios IA savent compléter
ENHANCEABLE_FIELDS: tuple[str, ...] = (
    "explanation",
    "examples",
    "verb_forms",
    "romanization",
    "part_of_speech",
    "themes",
    "chapters",
)

FilterType = Literal[
    "all",
    "missing-all-fields",
    "missing-romanization",
    "missing-pos",
    "missing-explanation",
    "missing-examples",
    "missing-themes",
    "missing-chapters",
    "missing-verb",
]


class VocabularyExample(BaseModel):
    korean: str = ""
    bangla: str = ""


class VerbForms(BaseModel):
    present: str = ""
    past: str = ""
    future: str = ""
    polite: str = ""


class Vocabulary(BaseModel):
    """A vocabulary row as stored in the ``vocabulary`` table.

    Studio edits are saved without validation, so every column but ``id`` is
    echoed back as whatever JSON the row holds. ``VocabularyIn`` is the typed
    shape for the create/edit form.
    """

    model_config = ConfigDict(extra="ignore")

    id: str
    korean_word: Any = ""
    bangla_meaning: Any = ""
    romanization: Any = None
    part_of_speech: Any = None
    explanation: Any = ""
    examples: Any = None
    themes: Any = None
    chapters: Any = None
    verb_forms: Any = None

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value: Any) -> str:
        return str(value)


class VocabularyIn(BaseModel):
    """Create/edit form payload before normalisation."""

    korean_word: str = Field(..., min_length=1)
    bangla_meaning: str = Field(..., min_length=1)
    romanization: Optional[str] = None
    part_of_speech: Optional[str] = None
    explanation: str = ""
    examples: List[VocabularyExample] = Field(default_factory=list)
    themes: List[str] = Field(default_factory=list)
    chapters: Optional[str | List[int]] = None
    verb_forms: Optional[VerbForms] = None

    @field_validator("korean_word", "bangla_meaning")
    @classmethod
    def _require_text(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("required")
        return value

    @field_validator("part_of_speech")
    @classmethod
    def _known_part_of_speech(cls, value: Optional[str]) -> Optional[str]:
        if value and value not in PARTS_OF_SPEECH:
            raise ValueError("unknown_part_of_speech")
        return value


class VocabularyPage(BaseModel):
    items: List[Vocabulary]
    total: int
    window: Optional[Dict[str, int]] = None
