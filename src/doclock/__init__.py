"""
doclock - Distributed locks on a document store

Exclusive, owner-labelled locks whose only source of truth is a document
store's atomic "create if absent" primitive (Elasticsearch by default).
"""

from doclock.core.config import DocLockConfig, LockConfig, OwnerMode, StoreConfig
from doclock.core.exceptions import (
    DocLockError,
    InvalidConfiguration,
    InvalidParameters,
    LockNotHeld,
    StoreError,
)
from doclock.core.locks import (
    DocumentStore,
    ElasticsearchStore,
    InMemoryDocumentStore,
    LockManager,
    LockStatus,
    create_document_store,
)
from doclock.core.version import __version__

__all__ = [
    "__version__",
    "DocLockConfig",
    "DocLockError",
    "DocumentStore",
    "ElasticsearchStore",
    "InMemoryDocumentStore",
    "InvalidConfiguration",
    "InvalidParameters",
    "LockConfig",
    "LockManager",
    "LockNotHeld",
    "LockStatus",
    "OwnerMode",
    "StoreConfig",
    "StoreError",
    "create_document_store",
]
