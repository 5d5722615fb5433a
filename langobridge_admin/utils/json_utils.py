# Fichier : langobridge_admin/utils/json_utils.py

from __future__ import annotations
import json
import re
from typing import Any, Optional

_FENCE_RE = re.compile(r"```(?:json)?")


def strip_code_fences(s: str) -> str:
    """Supprime toutes les fences ```json / ``` d'une réponse de modèle."""
    return _FENCE_RE.sub("", s).strip()


def _extract_balanced_json(s: str) -> Optional[str]:
    """
    Extrait le premier objet/array JSON équilibré en ignorant les accolades dans les chaînes.
    Retourne None si rien trouvé.
    """
    s = s.strip()
    start = None
    opener = None
    for i, ch in enumerate(s):
        if ch in "{[":
            start = i
            opener = ch
            break
    if start is None:
        return None

    closer = "}" if opener == "{" else "]"
    depth = 0
    in_string = False
    escape = False

    for i in range(start, len(s)):
        c = s[i]
        if escape:
            escape = False
            continue
        if c == "\\" and in_string:
            escape = True
            continue
        if c == '"':
            in_string = not in_string
            continue
        if in_string:
            continue

        if c == opener:
            depth += 1
        elif c == closer:
            depth -= 1
            if depth == 0:
                return s[start : i + 1]
    return None


def safe_json_loads(raw: str) -> Any:
    """
    Tente json.loads après suppression des fences; si échec, extrait le
    premier bloc JSON équilibré (objet ou array) et parse.
    Relève l'exception initiale si tout échoue.
    """
    if raw is None:
        raise ValueError("safe_json_loads: input is None")

    text = strip_code_fences(str(raw))
    try:
        return json.loads(text)
    except json.JSONDecodeError as first_exc:
        candidate = _extract_balanced_json(text)
        if candidate:
            return json.loads(candidate)
        raise first_exc


def first_object(payload: Any) -> Any:
    """Les fournisseurs renvoient parfois ``[{...}]`` au lieu de ``{...}``."""
    if isinstance(payload, list):
        return payload[0] if payload else {}
    return payload
