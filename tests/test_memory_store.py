"""Tests for the in-memory document store."""

import pytest

from doclock.core.exceptions import StoreError
from doclock.core.locks import InMemoryDocumentStore, StoreStatus


@pytest.mark.asyncio
async def test_create_then_conflict(memory_store):
    first = await memory_store.create("idx", "kind", "r1", {"owner": "a"})
    second = await memory_store.create("idx", "kind", "r1", {"owner": "b"})

    assert first.ok
    assert second.status is StoreStatus.CONFLICT
    fetched = await memory_store.get("idx", "kind", "r1")
    assert fetched.document.source == {"owner": "a"}


@pytest.mark.asyncio
async def test_stored_body_is_copied(memory_store):
    body = {"owner": "a"}
    await memory_store.create("idx", "kind", "r1", body)
    body["owner"] = "mutated"

    fetched = await memory_store.get("idx", "kind", "r1")
    assert fetched.document.source == {"owner": "a"}


@pytest.mark.asyncio
async def test_get_missing_document(memory_store):
    result = await memory_store.get("idx", "kind", "r1")
    assert result.status is StoreStatus.NOT_FOUND
    assert result.document is None


@pytest.mark.asyncio
async def test_delete_reports_not_found(memory_store):
    await memory_store.create("idx", "kind", "r1", {"owner": "a"})

    assert (await memory_store.delete("idx", "kind", "r1")).ok
    assert (await memory_store.delete("idx", "kind", "r1")).status is StoreStatus.NOT_FOUND


@pytest.mark.asyncio
async def test_search_missing_namespace_vs_empty(memory_store):
    assert (await memory_store.search("idx", "kind", 10)).status is StoreStatus.NOT_FOUND

    await memory_store.create("idx", "kind", "r1", {"owner": "a"})
    await memory_store.delete("idx", "kind", "r1")

    result = await memory_store.search("idx", "kind", 10)
    assert result.ok
    assert result.documents == []


@pytest.mark.asyncio
async def test_search_filters_kind_and_honours_size(memory_store):
    for resource in ("r1", "r2", "r3"):
        await memory_store.create("idx", "kind", resource, {"owner": "a"})
    await memory_store.create("idx", "other", "r4", {"owner": "b"})

    result = await memory_store.search("idx", "kind", 2)
    assert len(result.documents) == 2
    assert {document.doc_id for document in result.documents} <= {"r1", "r2", "r3"}


@pytest.mark.asyncio
async def test_delete_namespace_twice(memory_store):
    await memory_store.create("idx", "kind", "r1", {"owner": "a"})
    await memory_store.delete_namespace("idx")

    with pytest.raises(StoreError) as exc_info:
        await memory_store.delete_namespace("idx")
    assert exc_info.value.status_code == 404
    assert exc_info.value.operation == "delete_namespace"


@pytest.mark.asyncio
async def test_namespaces_are_isolated():
    store = InMemoryDocumentStore()
    await store.create("a", "kind", "r1", {"owner": "x"})

    assert (await store.create("b", "kind", "r1", {"owner": "y"})).ok
    await store.delete_namespace("a")
    assert (await store.get("b", "kind", "r1")).ok
    await store.close()
