from __future__ import annotations

import json

import pytest

from langobridge_admin.services import bulk_upload_service
from langobridge_admin.services.bulk_upload_service import (
    TEMPLATES,
    BulkUploadError,
    normalise_rows,
    parse_csv_text,
    parse_json_text,
    parse_upload,
)
from langobridge_admin.services.content_service import vocabulary_service
from langobridge_admin.services.record_store import VOCABULARY_TABLE


def test_json_preview_counts_invalid_rows():
    text = json.dumps(
        [
            {"korean_word": "물", "bangla_meaning": "পানি"},
            {"korean_word": "불"},
            "not an object",
        ]
    )
    preview = parse_json_text(text)
    assert [item["korean_word"] for item in preview.items] == ["물"]
    assert preview.invalid_count == 2
    assert preview.warning.startswith("2 items are missing")


@pytest.mark.parametrize(("text", "code"), [("{oops", "invalid_json"), ('{"korean_word": "물"}', "invalid_json_root")])
def test_json_errors(text, code):
    with pytest.raises(BulkUploadError) as exc:
        parse_json_text(text)
    assert exc.value.code == code
    assert exc.value.status_code == 400


def test_csv_template_parses_into_one_valid_row():
    preview = parse_csv_text(TEMPLATES["csv"])
    assert preview.invalid_count == 0
    assert preview.warning is None
    assert preview.items[0]["korean_word"] == "가다"
    assert preview.items[0]["themes"] == "daily_life, action"


def test_json_template_is_a_valid_upload():
    assert len(parse_json_text(TEMPLATES["json"]).items) == 1


def test_parse_upload_dispatches_on_extension():
    csv_bytes = "\ufeffkorean_word,bangla_meaning\n물,পানি\n,\n".encode("utf-8")
    assert len(parse_upload("words.CSV", csv_bytes).items) == 1

    with pytest.raises(BulkUploadError) as exc:
        parse_upload("words.xlsx", b"")
    assert exc.value.code == "unsupported_file"


def test_normalise_rows_shapes_loose_values():
    rows = normalise_rows(
        [
            {
                "korean_word": "가다",
                "bangla_meaning": "যাওয়া",
                "examples": '[{"korean": "가요", "bangla": "যাই"}]',
                "themes": "daily_life, action",
                "chapters": "1, 3",
            },
            {"korean_word": "물", "bangla_meaning": "পানি", "chapters": 2, "themes": ["food"]},
            {"korean_word": "", "bangla_meaning": "skip me"},
        ]
    )
    assert len(rows) == 2
    first, second = rows
    assert first["examples"] == [{"korean": "가요", "bangla": "যাই"}]
    assert first["themes"] == ["daily_life", "action"]
    assert first["chapters"] == [1, 3]
    assert first["romanization"] is None
    assert second["chapters"] == [2]
    assert second["themes"] == ["food"]
    assert second["examples"] == []


def test_unreadable_examples_become_empty():
    rows = normalise_rows([{"korean_word": "물", "bangla_meaning": "পানি", "examples": "[broken"}])
    assert rows[0]["examples"] == []


def test_upload_inserts_rows_and_invalidates_cache(store, cache):
    service = vocabulary_service(store, cache=cache)
    cache.get_or_load(VOCABULARY_TABLE, lambda: [])

    inserted = bulk_upload_service.upload(service, [{"korean_word": "물", "bangla_meaning": "পানি"}])

    assert inserted == 1
    assert len(store.tables[VOCABULARY_TABLE]) == 1
    assert cache.get_or_load(VOCABULARY_TABLE, lambda: ["reloaded"]) == ["reloaded"]


def test_upload_without_valid_rows_is_an_error(store):
    with pytest.raises(BulkUploadError) as exc:
        bulk_upload_service.upload(vocabulary_service(store), [{"korean_word": "물"}])
    assert exc.value.code == "no_valid_rows"
    assert store.tables[VOCABULARY_TABLE] == []
