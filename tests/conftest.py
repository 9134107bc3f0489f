"""Pytest configuration and fixtures for doclock tests"""
from unittest.mock import AsyncMock, Mock

import pytest

from doclock.core.locks import InMemoryDocumentStore, LockManager, StoreResult, StoreStatus


@pytest.fixture
def memory_store():
    """Fresh in-memory document store"""
    return InMemoryDocumentStore()


@pytest.fixture
def manager(memory_store):
    """Per-call lock manager on the in-memory store"""
    return LockManager(memory_store, index="lock-index", doc_type="lock-type")


@pytest.fixture
def bound_manager(memory_store):
    """Owner-bound lock manager sharing the in-memory store"""
    return LockManager.bound_to("unittest", memory_store, index="lock-index", doc_type="lock-type")


@pytest.fixture
def mock_store():
    """Document store double whose calls all succeed by default"""
    store = Mock()
    store.name = "mock"
    store.create = AsyncMock(return_value=StoreResult(status=StoreStatus.OK))
    store.get = AsyncMock(return_value=StoreResult(status=StoreStatus.NOT_FOUND))
    store.delete = AsyncMock(return_value=StoreResult(status=StoreStatus.OK))
    store.search = AsyncMock(return_value=StoreResult(status=StoreStatus.OK))
    store.delete_namespace = AsyncMock(return_value=None)
    store.close = AsyncMock(return_value=None)
    return store


@pytest.fixture
def mock_manager(mock_store):
    """Per-call lock manager on the mock store"""
    return LockManager(mock_store, index="lock-index", doc_type="lock-type")
