# Fichier: langobridge_admin/core/ai_service.py
"""Vocabulary enrichment through the two interchangeable LLM providers.

Both providers receive the same rendered prompt and must answer with a JSON
object holding only the requested (or missing) fields. Answers are cleaned the
same way whatever the provider: markdown fences are stripped, a JSON-encoded
string is decoded a second time and an array yields its first element.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional

import openai
import requests
from openai import OpenAI

from langobridge_admin.core import prompt_manager
from langobridge_admin.core.config import settings
from langobridge_admin.core.local_store import GEMINI_KEY_STORAGE, LocalKeyValueStore
from langobridge_admin.schemas.vocabulary_schema import PARTS_OF_SPEECH, THEMES
from langobridge_admin.utils.json_utils import first_object, safe_json_loads

logger = logging.getLogger(__name__)

_GEMINI_ENDPOINT = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

ENHANCE_SYSTEM_PROMPT = "You are a Korean-Bangla language specialist. Respond only with JSON."
GENERATE_SYSTEM_PROMPT = "You are a Korean-Bangla language specialist."


@dataclass(slots=True)
class EnrichmentError(Exception):
    code: str
    status_code: int = 502
    message: str | None = None

    def __str__(self) -> str:  # pragma: no cover - human readable message
        return self.message or self.code


def parse_ai_payload(raw: Any) -> Any:
    """Decode a provider answer into Python data.

    ``raw`` may already be decoded JSON, a JSON string, a fenced JSON string,
    or a JSON string whose value is itself JSON-encoded.
    """

    data = raw
    try:
        for _ in range(2):
            if not isinstance(data, str):
                break
            data = safe_json_loads(data)
    except (json.JSONDecodeError, ValueError) as exc:
        logger.error("Réponse IA non JSON: %s", str(raw)[:200])
        raise EnrichmentError("invalid_ai_json", 502, "AI returned invalid JSON") from exc
    return data


def parse_enrichment(raw: Any) -> Dict[str, Any]:
    data = first_object(parse_ai_payload(raw))
    if not isinstance(data, dict):
        raise EnrichmentError("invalid_ai_json", 502, "AI response is not a JSON object")
    return data


def _vocab_context(vocab: Any) -> Dict[str, Any]:
    if isinstance(vocab, Mapping):
        return dict(vocab)
    if hasattr(vocab, "model_dump"):
        return vocab.model_dump()
    return dict(vars(vocab))


def build_enhance_prompt(vocab: Any, fields: Optional[Iterable[str]] = None, context: str | None = None) -> str:
    field_list = list(fields) if fields else []
    return prompt_manager.get_prompt(
        "vocabulary.enhance",
        ensure_json=True,
        vocab=_vocab_context(vocab),
        fields_label=", ".join(field_list) if field_list else "All missing fields",
        context_line=f"Extra Context: {context}" if context else "",
        themes=", ".join(THEMES),
        parts_of_speech=", ".join(PARTS_OF_SPEECH),
    )


def build_generate_prompt(text: str) -> str:
    return prompt_manager.get_prompt(
        "vocabulary.generate",
        ensure_json=True,
        input_text=text,
        themes=", ".join(THEMES),
        parts_of_speech=", ".join(PARTS_OF_SPEECH),
    )


class VocabularyEnricher(ABC):
    """Common prompt and parsing flow; subclasses only perform the HTTP call."""

    name: str = "base"
    batch_delay_s: float = 0.0

    @abstractmethod
    def _complete(self, system_prompt: str, user_prompt: str) -> str:
        """Return the provider's raw text answer."""

    def enhance(
        self,
        vocab: Any,
        fields: Optional[Iterable[str]] = None,
        context: str | None = None,
    ) -> Dict[str, Any]:
        """Ask the provider for the given fields (``None`` = all missing fields)."""
        prompt = build_enhance_prompt(vocab, fields, context)
        raw = self._complete(ENHANCE_SYSTEM_PROMPT, prompt)
        return parse_enrichment(raw)

    def generate(self, text: str) -> List[Dict[str, Any]]:
        """Turn free text into full vocabulary objects ready for bulk upload."""
        raw = self._complete(GENERATE_SYSTEM_PROMPT, build_generate_prompt(text))
        data = parse_ai_payload(raw)
        if isinstance(data, dict):
            data = [data]
        if not isinstance(data, list):
            raise EnrichmentError("invalid_ai_json", 502, "AI response is not a JSON array")
        return [item for item in data if isinstance(item, dict)]


class OpenAIEnricher(VocabularyEnricher):
    name = "openai"

    def __init__(self, api_key: str | None = None, client: Any = None):
        self.api_key = api_key or settings.OPENAI_API_KEY
        self.model = settings.OPENAI_MODEL
        self.temperature = settings.OPENAI_TEMPERATURE
        self.batch_delay_s = settings.OPENAI_BATCH_DELAY_MS / 1000
        self._client = client

    @property
    def client(self) -> Any:
        if self._client is None:
            if not self.api_key:
                raise EnrichmentError("missing_api_key", 400, "OpenAI API key not configured")
            self._client = OpenAI(api_key=self.api_key)
        return self._client

    def _complete(self, system_prompt: str, user_prompt: str) -> str:
        logger.info("Appel à l'API OpenAI avec le modèle %s", self.model)
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=self.temperature,
            )
        except openai.OpenAIError as exc:
            logger.error("Une erreur API est survenue avec OpenAI : %s", exc)
            raise EnrichmentError("enrichment_failed", 502, str(exc)) from exc

        content = response.choices[0].message.content
        if not content:
            raise EnrichmentError("invalid_ai_json", 502, "OpenAI returned an empty answer")
        return content


class GeminiEnricher(VocabularyEnricher):
    name = "gemini"

    def __init__(self, api_key: str | None = None, key_store: LocalKeyValueStore | None = None):
        self._api_key = api_key
        self.key_store = key_store or LocalKeyValueStore()
        self.model = settings.GEMINI_MODEL
        self.batch_delay_s = settings.GEMINI_BATCH_DELAY_MS / 1000

    def _resolve_api_key(self) -> str:
        # The locally saved key wins and is read at call time.
        api_key = self._api_key or self.key_store.get(GEMINI_KEY_STORAGE) or settings.GEMINI_API_KEY
        if not api_key:
            raise EnrichmentError("missing_api_key", 400, "Gemini API key not configured")
        return api_key

    def _complete(self, system_prompt: str, user_prompt: str) -> str:
        api_key = self._resolve_api_key()
        payload: dict[str, Any] = {
            "systemInstruction": {"parts": [{"text": system_prompt}]},
            "contents": [{"role": "user", "parts": [{"text": user_prompt}]}],
            "generationConfig": {"responseMimeType": "application/json"},
        }

        logger.info("Appel à l'API Gemini avec le modèle %s", self.model)
        try:
            response = requests.post(
                _GEMINI_ENDPOINT.format(model=self.model),
                params={"key": api_key},
                json=payload,
                timeout=60,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            logger.error("Erreur lors de l'appel à l'API Gemini : %s", exc)
            raise EnrichmentError("enrichment_failed", 502, str(exc)) from exc

        try:
            data: dict[str, Any] = response.json()
            for candidate in data.get("candidates") or []:
                parts = (candidate.get("content") or {}).get("parts") or []
                combined = "".join(part.get("text", "") for part in parts if isinstance(part, dict)).strip()
                if combined:
                    return combined
        except (KeyError, IndexError, TypeError, AttributeError, ValueError) as exc:
            logger.error("Réponse Gemini illisible: %s", exc)
            raise EnrichmentError("invalid_ai_json", 502, "Gemini returned an unreadable answer") from exc

        logger.error("Réponse Gemini sans contenu exploitable: %s", data)
        raise EnrichmentError("invalid_ai_json", 502, "Gemini returned an empty answer")


PROVIDERS = {
    OpenAIEnricher.name: OpenAIEnricher,
    GeminiEnricher.name: GeminiEnricher,
}


def get_enricher(provider: str) -> VocabularyEnricher:
    try:
        return PROVIDERS[provider]()
    except KeyError:
        raise ValueError(f"unknown_provider: {provider}") from None


def generate_vocabulary_data(text: str, enricher: VocabularyEnricher | None = None) -> List[Dict[str, Any]]:
    """Rows for the bulk-upload preview, generated by OpenAI unless another provider is given."""
    return (enricher or OpenAIEnricher()).generate(text)
