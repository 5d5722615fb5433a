from __future__ import annotations

import json
from types import SimpleNamespace

import openai
import pytest
import requests

from langobridge_admin.core import ai_service
from langobridge_admin.core.ai_service import (
    EnrichmentError,
    GeminiEnricher,
    OpenAIEnricher,
    build_enhance_prompt,
    build_generate_prompt,
    get_enricher,
    parse_ai_payload,
    parse_enrichment,
)
from langobridge_admin.core.local_store import GEMINI_KEY_STORAGE
from langobridge_admin.core.prompt_manager import JSON_GUARDRAIL
from tests.utils import make_bare_vocab


class FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content = content
        self.error = error
        self.kwargs = None

    def create(self, **kwargs):
        self.kwargs = kwargs
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _openai(content=None, error=None):
    completions = FakeCompletions(content, error)
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return OpenAIEnricher(api_key="sk-test", client=client), completions


class FakeGeminiResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self.payload


def _gemini_answer(text):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def test_parse_enrichment_accepts_every_answer_shape():
    expected = {"romanization": "gada"}
    assert parse_enrichment('{"romanization": "gada"}') == expected
    assert parse_enrichment('```json\n{"romanization": "gada"}\n```') == expected
    assert parse_enrichment('[{"romanization": "gada"}, {"romanization": "other"}]') == expected
    assert parse_enrichment(json.dumps('{"romanization": "gada"}')) == expected
    assert parse_enrichment(expected) == expected


def test_parse_ai_payload_rejects_prose():
    with pytest.raises(EnrichmentError) as exc:
        parse_ai_payload("Sorry, I cannot help with that.")
    assert exc.value.code == "invalid_ai_json"


def test_parse_enrichment_rejects_non_objects():
    with pytest.raises(EnrichmentError):
        parse_enrichment("42")


def test_enhance_prompt_mentions_word_and_requested_fields():
    vocab = make_bare_vocab(korean_word="먹다", bangla_meaning="খাওয়া")
    prompt = build_enhance_prompt(vocab, ["examples", "themes"], context="food topic")

    assert "Korean Word: 먹다" in prompt
    assert "Fields to Enhance: examples, themes" in prompt
    assert "Extra Context: food topic" in prompt
    assert "Part of Speech: Unknown" in prompt
    assert "daily_life" in prompt


def test_enhance_prompt_defaults_to_all_missing_fields():
    prompt = build_enhance_prompt(make_bare_vocab(), None)
    assert "Fields to Enhance: All missing fields" in prompt
    assert "Extra Context" not in prompt


def test_openai_enhance_returns_parsed_object():
    enricher, completions = _openai('```json\n{"explanation": "설명"}\n```')
    assert enricher.enhance(make_bare_vocab(), ["explanation"]) == {"explanation": "설명"}
    assert completions.kwargs["model"] == enricher.model
    assert completions.kwargs["messages"][0]["role"] == "system"


def test_openai_errors_become_enrichment_errors():
    enricher, _ = _openai(error=openai.OpenAIError("rate limited"))
    with pytest.raises(EnrichmentError) as exc:
        enricher.enhance(make_bare_vocab())
    assert exc.value.code == "enrichment_failed"


def test_openai_empty_answer_is_rejected():
    enricher, _ = _openai(content="")
    with pytest.raises(EnrichmentError) as exc:
        enricher.enhance(make_bare_vocab())
    assert exc.value.code == "invalid_ai_json"


def test_openai_without_key_is_a_client_error(monkeypatch):
    monkeypatch.setattr(ai_service.settings, "OPENAI_API_KEY", None)
    with pytest.raises(EnrichmentError) as exc:
        OpenAIEnricher().enhance(make_bare_vocab())
    assert exc.value.status_code == 400
    assert exc.value.code == "missing_api_key"


def test_generate_wraps_single_object_in_list():
    enricher, _ = _openai('{"korean_word": "물", "bangla_meaning": "পানি"}')
    assert enricher.generate("water") == [{"korean_word": "물", "bangla_meaning": "পানি"}]


def test_gemini_uses_locally_saved_key(monkeypatch, key_store):
    key_store.set(GEMINI_KEY_STORAGE, "saved-key")
    monkeypatch.setattr(ai_service.settings, "GEMINI_API_KEY", "env-key")
    sent = {}

    def fake_post(url, params=None, json=None, timeout=None):
        sent.update(url=url, params=params, json=json)
        return FakeGeminiResponse(_gemini_answer('[{"themes": ["food"]}]'))

    monkeypatch.setattr(ai_service.requests, "post", fake_post)
    result = GeminiEnricher(key_store=key_store).enhance(make_bare_vocab(), ["themes"])

    assert result == {"themes": ["food"]}
    assert sent["params"] == {"key": "saved-key"}
    assert ":generateContent" in sent["url"]
    assert sent["json"]["contents"][0]["parts"][0]["text"].startswith("You are a Korean-Bangla")


def test_gemini_falls_back_to_environment_key(monkeypatch, key_store):
    monkeypatch.setattr(ai_service.settings, "GEMINI_API_KEY", "env-key")
    enricher = GeminiEnricher(key_store=key_store)
    assert enricher._resolve_api_key() == "env-key"


def test_gemini_without_any_key(monkeypatch, key_store):
    monkeypatch.setattr(ai_service.settings, "GEMINI_API_KEY", None)
    with pytest.raises(EnrichmentError) as exc:
        GeminiEnricher(key_store=key_store).enhance(make_bare_vocab())
    assert exc.value.code == "missing_api_key"


def test_gemini_http_failure(monkeypatch, key_store):
    monkeypatch.setattr(
        ai_service.requests, "post", lambda *a, **k: FakeGeminiResponse({"error": {}}, status_code=429)
    )
    with pytest.raises(EnrichmentError) as exc:
        GeminiEnricher(api_key="k", key_store=key_store).enhance(make_bare_vocab())
    assert exc.value.code == "enrichment_failed"


def test_gemini_empty_candidates(monkeypatch, key_store):
    monkeypatch.setattr(ai_service.requests, "post", lambda *a, **k: FakeGeminiResponse({"candidates": []}))
    with pytest.raises(EnrichmentError) as exc:
        GeminiEnricher(api_key="k", key_store=key_store).enhance(make_bare_vocab())
    assert exc.value.code == "invalid_ai_json"


def test_provider_registry():
    assert isinstance(get_enricher("openai"), OpenAIEnricher)
    assert get_enricher("openai").batch_delay_s == 0.5
    with pytest.raises(ValueError):
        get_enricher("claude")


def test_prompts_end_with_the_json_only_guardrail():
    assert build_enhance_prompt(make_bare_vocab(), ["themes"]).endswith(JSON_GUARDRAIL)
    assert build_generate_prompt("water, fire").endswith(JSON_GUARDRAIL)


def test_gemini_non_json_body_is_invalid_ai_json(monkeypatch, key_store):
    class HtmlResponse(FakeGeminiResponse):
        def json(self):
            raise ValueError("Expecting value: line 1 column 1 (char 0)")

    monkeypatch.setattr(ai_service.requests, "post", lambda *a, **k: HtmlResponse(None))
    with pytest.raises(EnrichmentError) as exc:
        GeminiEnricher(api_key="k", key_store=key_store).enhance(make_bare_vocab())
    assert exc.value.code == "invalid_ai_json"
