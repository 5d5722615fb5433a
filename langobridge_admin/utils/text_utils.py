# Fichier : langobridge_admin/utils/text_utils.py
from __future__ import annotations

import re
from typing import Iterable, List, Optional

_NON_SLUG_RE = re.compile(r"[^a-z0-9]+")


def generate_slug(title: str) -> str:
    """
    "How to Master Korean Particles!" -> "how-to-master-korean-particles".
    Toute suite de caractères hors [a-z0-9] devient un seul tiret.
    """
    slug = _NON_SLUG_RE.sub("-", (title or "").lower())
    return slug.strip("-")


def format_category(category: str) -> str:
    """"study_tips" -> "Study Tips"."""
    return " ".join(word[:1].upper() + word[1:] for word in (category or "").split("_"))


def split_csv_text(value: Optional[str]) -> Optional[List[str]]:
    """Découpe "a, b , c" en ["a", "b", "c"]; None si le champ est vide."""
    if not value:
        return None
    return [part.strip() for part in value.split(",")]


def parse_int_list(value: str | Iterable | int | None) -> Optional[List[int]]:
    """Chapitres saisis en texte ("1, 5"), en liste ou en entier seul."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return [value]

    items = value.split(",") if isinstance(value, str) else list(value)
    parsed: List[int] = []
    for item in items:
        try:
            parsed.append(int(str(item).strip()))
        except ValueError:
            continue
    return parsed or None


def utf16_length(text: str) -> int:
    """Longueur en unités de code UTF-16, comme ``String.length`` côté navigateur."""
    return len(text.encode("utf-16-le")) // 2
