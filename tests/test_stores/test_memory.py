"""Tests for InMemoryDocumentStore."""

import pytest

from settings_provider import StoreError
from settings_provider.stores import InMemoryDocumentStore


@pytest.fixture
def store():
    return InMemoryDocumentStore()


async def test_fetch_nonexistent(store):
    assert await store.fetch("settings") is None
    assert await store.fetch("settings/g1/prefix") is None


async def test_update_and_fetch(store):
    await store.update("settings/g1", {"prefix": "?"})
    assert await store.fetch("settings/g1") == {"prefix": "?"}
    assert await store.fetch("settings/g1/prefix") == "?"
    assert await store.fetch("settings") == {"g1": {"prefix": "?"}}


async def test_update_merges(store):
    await store.update("settings/g1", {"prefix": "?", "cmd-ping": False})
    await store.update("settings/g1", {"prefix": "$"})
    assert await store.fetch("settings/g1") == {"prefix": "$", "cmd-ping": False}


async def test_update_root_rejected(store):
    with pytest.raises(StoreError):
        await store.update("", {"a": 1})


async def test_fetch_returns_copy(store):
    await store.update("settings/g1", {"prefix": "?"})
    doc = await store.fetch("settings/g1")
    doc["prefix"] = "mutated"
    assert await store.fetch("settings/g1/prefix") == "?"


async def test_update_copies_fields(store):
    fields = {"prefix": "?"}
    await store.update("settings/g1", fields)
    fields["prefix"] = "mutated"
    assert await store.fetch("settings/g1/prefix") == "?"


async def test_remove_document(store):
    await store.update("settings/g1", {"prefix": "?"})
    await store.update("settings/g2", {"prefix": "$"})
    await store.remove("settings/g1")
    assert await store.fetch("settings") == {"g2": {"prefix": "$"}}


async def test_remove_field(store):
    await store.update("settings/g1", {"prefix": "?", "cmd-ping": True})
    await store.remove("settings/g1/prefix")
    assert await store.fetch("settings/g1") == {"cmd-ping": True}


async def test_remove_last_field_prunes_parents(store):
    await store.update("settings/g1", {"prefix": "?"})
    await store.remove("settings/g1/prefix")
    assert await store.fetch("settings/g1") is None
    assert await store.fetch("settings") is None


async def test_remove_nonexistent(store):
    await store.remove("settings/nope/prefix")  # should not raise


async def test_seed_data():
    store = InMemoryDocumentStore({"settings": {"0": {"prefix": "!"}}})
    assert await store.fetch("settings/0") == {"prefix": "!"}


async def test_update_none_removes_field(store):
    await store.update("settings/g1", {"prefix": "?", "cmd-ping": True})
    await store.update("settings/g1", {"prefix": None})
    assert await store.fetch("settings/g1") == {"cmd-ping": True}


async def test_update_none_on_last_field_prunes(store):
    await store.update("settings/g1", {"prefix": "?"})
    await store.update("settings/g1", {"prefix": None})
    assert await store.fetch("settings") is None
