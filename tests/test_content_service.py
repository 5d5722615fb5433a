from __future__ import annotations

from langobridge_admin.schemas.content_schema import BlogIn, ResourceIn
from langobridge_admin.schemas.vocabulary_schema import VocabularyIn
from langobridge_admin.services.content_service import (
    blog_service,
    build_blog_payload,
    build_resource_payload,
    build_vocabulary_payload,
    decorate_blog,
    resource_download_url,
    search_rows,
    vocabulary_service,
)
from langobridge_admin.services.record_store import VOCABULARY_TABLE


def test_vocabulary_payload_drops_empty_examples_and_non_verb_forms():
    form = VocabularyIn(
        korean_word="학교",
        bangla_meaning="বিদ্যালয়",
        part_of_speech="noun",
        examples=[{"korean": "학교에 가요", "bangla": "স্কুলে যাই"}, {"korean": "  ", "bangla": "x"}],
        chapters="2, 4",
        verb_forms={"present": "x"},
    )
    payload = build_vocabulary_payload(form)
    assert payload["examples"] == [{"korean": "학교에 가요", "bangla": "স্কুলে যাই"}]
    assert payload["chapters"] == [2, 4]
    assert payload["verb_forms"] is None
    assert payload["themes"] is None


def test_vocabulary_payload_keeps_verb_forms_for_verbs():
    form = VocabularyIn(
        korean_word="가다",
        bangla_meaning="যাওয়া",
        part_of_speech="verb",
        verb_forms={"present": "가요", "past": "갔어요", "future": "갈 거예요", "polite": "갑니다"},
        themes=["movement"],
    )
    payload = build_vocabulary_payload(form)
    assert payload["verb_forms"]["past"] == "갔어요"
    assert payload["themes"] == ["movement"]
    assert payload["chapters"] is None


def test_resource_payload():
    payload = build_resource_payload(ResourceIn(title="EPS PDF", tags="eps, pdf", file_path="books/eps.pdf"))
    assert payload["tags"] == ["eps", "pdf"]
    assert payload["category"] is None
    assert payload["file_size"] is None
    assert payload["description"] is None


def test_blog_payload_generates_slug_when_empty():
    payload = build_blog_payload(BlogIn(title="Top 10 Korean Particles!", content="...", category="grammar"))
    assert payload["slug"] == "top-10-korean-particles"
    assert build_blog_payload(BlogIn(title="x", slug="custom", content="y"))["slug"] == "custom"


def test_resource_download_url():
    assert resource_download_url("https://cdn.example.com/a.pdf") == "https://cdn.example.com/a.pdf"
    assert resource_download_url("books/eps.pdf") == (
        "https://project.supabase.co/storage/v1/object/public/resources/books/eps.pdf"
    )


def test_decorate_blog_adds_category_label():
    assert decorate_blog({"category": "study_tips"})["category_label"] == "Study Tips"
    assert decorate_blog({"category": None})["category_label"] is None


def test_search_rows():
    rows = [{"title": "Grammar basics", "description": None}, {"title": "EPS", "description": "Grammar drill"}]
    assert len(search_rows(rows, "grammar", ("title", "description"))) == 2
    assert search_rows(rows, "grammar", ("title",)) == [rows[0]]


def test_list_all_is_cached_until_a_write(store, cache):
    store.seed(VOCABULARY_TABLE, [{"korean_word": "물", "bangla_meaning": "পানি"}])
    service = vocabulary_service(store, cache=cache)

    service.list_all()
    service.list_all()
    assert [call for call in store.calls if call[0] == "fetch_all"] == [("fetch_all", VOCABULARY_TABLE)]

    created = service.create({"korean_word": "불", "bangla_meaning": "আগুন"})
    assert len(service.list_all()) == 2

    service.update(created["id"], {"romanization": "bul"})
    service.delete(created["id"])
    assert len(service.list_all()) == 1
    assert len([call for call in store.calls if call[0] == "fetch_all"]) == 3


def test_blog_service_targets_blogs_table(store, cache):
    service = blog_service(store, cache=cache)
    service.create({"title": "Hello", "slug": "hello", "content": "..."})
    assert store.tables["blogs"][0]["slug"] == "hello"


def test_cache_is_scoped_by_token_and_invalidated_for_all(cache):
    cache.get_or_load(VOCABULARY_TABLE, lambda: ["first"], scope="token-a")
    assert cache.get_or_load(VOCABULARY_TABLE, lambda: ["second"], scope="token-b") == ["second"]
    assert cache.get_or_load(VOCABULARY_TABLE, lambda: ["ignored"], scope="token-a") == ["first"]

    cache.invalidate(VOCABULARY_TABLE)
    assert cache.get_or_load(VOCABULARY_TABLE, lambda: ["fresh-a"], scope="token-a") == ["fresh-a"]
    assert cache.get_or_load(VOCABULARY_TABLE, lambda: ["fresh-b"], scope="token-b") == ["fresh-b"]
