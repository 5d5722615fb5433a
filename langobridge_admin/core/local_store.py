# Fichier : langobridge_admin/core/local_store.py
"""Persistance clé/valeur locale (fichier JSON), relue à chaque appel."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Optional

from langobridge_admin.core.config import settings

logger = logging.getLogger(__name__)

GEMINI_KEY_STORAGE = "gemini_api_key"


class LocalKeyValueStore:
    def __init__(self, path: str | Path | None = None):
        self.path = Path(path or settings.LOCAL_STORE_PATH)

    def _read(self) -> Dict[str, str]:
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except FileNotFoundError:
            return {}
        except json.JSONDecodeError as exc:
            logger.warning("Stockage local illisible (%s), ignoré: %s", self.path, exc)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as handle:
            json.dump(data, handle, ensure_ascii=False, indent=2)

    def get(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def delete(self, key: str) -> None:
        data = self._read()
        if data.pop(key, None) is not None:
            self._write(data)


def mask_key(value: str | None) -> str | None:
    if not value:
        return None
    if len(value) <= 8:
        return "*" * len(value)
    return f"{value[:4]}{'*' * (len(value) - 8)}{value[-4:]}"
