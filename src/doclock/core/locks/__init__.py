"""Locking subsystem built on a document store's atomic create.

This package keeps the lock protocol behind a store abstraction so the
same manager runs against Elasticsearch or an in-process store.
"""

from doclock.core.locks.elasticsearch_store import ElasticsearchStore, create_elasticsearch_client
from doclock.core.locks.manager import LockListing, LockManager, LockStatus, create_document_store
from doclock.core.locks.store import (
    Document,
    DocumentStore,
    InMemoryDocumentStore,
    StoreResult,
    StoreStatus,
)

__all__ = [
    "Document",
    "DocumentStore",
    "ElasticsearchStore",
    "InMemoryDocumentStore",
    "LockListing",
    "LockManager",
    "LockStatus",
    "StoreResult",
    "StoreStatus",
    "create_document_store",
    "create_elasticsearch_client",
]
