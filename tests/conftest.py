"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import os

import pytest

os.environ.setdefault("SUPABASE_URL", "https://project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "anon-test-key")
os.environ.setdefault("IMGBB_API_KEY", "imgbb-test-key")
os.environ.setdefault("LOCAL_STORE_PATH", ".pytest_local_store.json")

from langobridge_admin.core.cache import RecordCache, record_cache
from langobridge_admin.core.local_store import LocalKeyValueStore
from tests.utils import FakeRecordStore


@pytest.fixture(autouse=True)
def clear_record_cache():
    record_cache.clear()
    yield
    record_cache.clear()


@pytest.fixture()
def store() -> FakeRecordStore:
    return FakeRecordStore()


@pytest.fixture()
def cache() -> RecordCache:
    return RecordCache()


@pytest.fixture()
def key_store(tmp_path) -> LocalKeyValueStore:
    return LocalKeyValueStore(tmp_path / "local_store.json")
