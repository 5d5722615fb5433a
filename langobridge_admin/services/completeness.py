"""Field-completeness rules for vocabulary rows.

Each rule is evaluated on its own so the studio badges, the filters and the
dashboard counter all agree on which individual fields are missing. Two
aggregate predicates sit on top of the rules:

* ``is_incomplete`` is an OR over ``verb_forms``, ``examples`` and
  ``explanation``. It drives the default ``all`` filter and the dashboard
  "Missing Fields" counter.
* ``is_missing_all_fields`` is an AND over the verb-forms condition,
  ``examples``, ``explanation``, ``romanization`` and ``themes``. It isolates
  bulk-imported rows that carry nothing but the word and its meaning.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Set

from langobridge_admin.utils.text_utils import utf16_length

MIN_EXPLANATION_LENGTH = 50

INCOMPLETE_FIELDS: frozenset[str] = frozenset({"verb_forms", "examples", "explanation"})


def _get(vocab: Any, key: str) -> Any:
    if isinstance(vocab, Mapping):
        return vocab.get(key)
    return getattr(vocab, key, None)


def _is_verb(vocab: Any) -> bool:
    return _get(vocab, "part_of_speech") == "verb"


def _empty(value: Any) -> bool:
    # Hand-edited rows may hold any JSON; only a non-empty list counts.
    return not isinstance(value, (list, tuple)) or len(value) == 0


def missing_verb_forms(vocab: Any) -> bool:
    return _is_verb(vocab) and _get(vocab, "verb_forms") is None


def missing_examples(vocab: Any) -> bool:
    return _empty(_get(vocab, "examples"))


def missing_explanation(vocab: Any) -> bool:
    explanation = _get(vocab, "explanation")
    if not isinstance(explanation, str):
        return True
    return utf16_length(explanation) < MIN_EXPLANATION_LENGTH


def missing_romanization(vocab: Any) -> bool:
    return not _get(vocab, "romanization")


def missing_part_of_speech(vocab: Any) -> bool:
    return not _get(vocab, "part_of_speech")


def missing_themes(vocab: Any) -> bool:
    return _empty(_get(vocab, "themes"))


def missing_chapters(vocab: Any) -> bool:
    return _empty(_get(vocab, "chapters"))


FIELD_RULES: Dict[str, Callable[[Any], bool]] = {
    "verb_forms": missing_verb_forms,
    "examples": missing_examples,
    "explanation": missing_explanation,
    "romanization": missing_romanization,
    "part_of_speech": missing_part_of_speech,
    "themes": missing_themes,
    "chapters": missing_chapters,
}


def missing_fields(vocab: Any) -> Set[str]:
    """Return the name of every field whose rule flags it as missing."""
    return {name for name, rule in FIELD_RULES.items() if rule(vocab)}


def is_incomplete(vocab: Any) -> bool:
    return bool(missing_fields(vocab) & INCOMPLETE_FIELDS)


def is_missing_all_fields(vocab: Any) -> bool:
    # Non-verbs have no verb forms to fill, so that condition holds for them.
    verb_forms_absent = missing_verb_forms(vocab) if _is_verb(vocab) else True
    return (
        verb_forms_absent
        and missing_examples(vocab)
        and missing_explanation(vocab)
        and missing_romanization(vocab)
        and missing_themes(vocab)
    )


FILTERS: Dict[str, Callable[[Any], bool]] = {
    "all": is_incomplete,
    "missing-all-fields": is_missing_all_fields,
    "missing-romanization": missing_romanization,
    "missing-pos": missing_part_of_speech,
    "missing-explanation": missing_explanation,
    "missing-examples": missing_examples,
    "missing-themes": missing_themes,
    "missing-chapters": missing_chapters,
    "missing-verb": missing_verb_forms,
}


def _matches(value: Any, query: str) -> bool:
    return isinstance(value, str) and query in value.lower()


def search_vocabularies(
    records: Iterable[Any], search: Optional[str], *, include_romanization: bool = False
) -> List[Any]:
    """Case-insensitive substring match on the Korean word and the Bangla meaning."""
    items = list(records)
    query = (search or "").strip().lower()
    if not query:
        return items

    keys = ["korean_word", "bangla_meaning"]
    if include_romanization:
        keys.append("romanization")
    return [item for item in items if any(_matches(_get(item, key), query) for key in keys)]


def filter_vocabularies(
    records: Iterable[Any],
    search: Optional[str] = None,
    filter_type: str = "all",
    part_of_speech: Optional[str] = None,
) -> List[Any]:
    """Apply search, then the part-of-speech filter, then the completeness mode."""
    if filter_type not in FILTERS:
        raise ValueError(f"unknown_filter: {filter_type}")

    filtered = search_vocabularies(records, search)
    if part_of_speech and part_of_speech != "all":
        filtered = [item for item in filtered if _get(item, "part_of_speech") == part_of_speech]

    predicate = FILTERS[filter_type]
    return [item for item in filtered if predicate(item)]
