"""Document store abstraction and the in-memory implementation.

Design principles:
- The store's atomic create is the only source of lock exclusivity.
- Outcomes the lock protocol branches on (conflict, not found) are
  reported as StoreStatus values; every other failure raises StoreError.
- Stores never retry on their own behalf beyond what their client's
  transport already does.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from doclock.core.exceptions import StoreError


class StoreStatus(Enum):
    """Classified outcome of a single store call."""

    OK = "ok"
    CONFLICT = "conflict"  # create: a document with this id already exists
    NOT_FOUND = "not_found"  # document (get/delete) or namespace (search) missing


@dataclass(frozen=True)
class Document:
    """A stored document: its id within the kind and its payload."""

    doc_id: str
    source: dict[str, Any]


@dataclass
class StoreResult:
    """Result of a document store call."""

    status: StoreStatus
    document: Document | None = None
    documents: list[Document] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status is StoreStatus.OK


class DocumentStore(Protocol):
    """Five operations the lock manager needs from a document store."""

    name: str

    async def create(self, index: str, doc_type: str, doc_id: str, body: dict[str, Any]) -> StoreResult:
        """Create a document, reporting CONFLICT if the id is taken."""

    async def get(self, index: str, doc_type: str, doc_id: str) -> StoreResult:
        """Fetch a document by id, reporting NOT_FOUND if absent."""

    async def delete(self, index: str, doc_type: str, doc_id: str) -> StoreResult:
        """Delete a document by id, reporting NOT_FOUND if absent."""

    async def search(self, index: str, doc_type: str, size: int) -> StoreResult:
        """List documents of a kind, reporting NOT_FOUND if the namespace is missing."""

    async def delete_namespace(self, index: str) -> None:
        """Drop a whole namespace. Raises StoreError on any failure."""

    async def close(self) -> None:
        """Release client resources."""


class InMemoryDocumentStore:
    """Dict-backed store for a single event loop.

    Mirrors Elasticsearch semantics: a namespace springs into existence on
    the first create, and searching or dropping a missing namespace is a
    404. Operations never await while mutating, so each is atomic with
    respect to other tasks on the same loop.
    """

    name = "memory"

    def __init__(self, logger: logging.Logger | None = None):
        self.logger = logger or logging.getLogger(__name__)
        self._namespaces: dict[str, dict[tuple[str, str], dict[str, Any]]] = {}

    async def create(self, index: str, doc_type: str, doc_id: str, body: dict[str, Any]) -> StoreResult:
        documents = self._namespaces.setdefault(index, {})
        key = (doc_type, doc_id)
        if key in documents:
            return StoreResult(status=StoreStatus.CONFLICT)
        documents[key] = dict(body)
        self.logger.debug("Created %s/%s/%s", index, doc_type, doc_id)
        return StoreResult(status=StoreStatus.OK, document=Document(doc_id, dict(body)))

    async def get(self, index: str, doc_type: str, doc_id: str) -> StoreResult:
        source = self._namespaces.get(index, {}).get((doc_type, doc_id))
        if source is None:
            return StoreResult(status=StoreStatus.NOT_FOUND)
        return StoreResult(status=StoreStatus.OK, document=Document(doc_id, dict(source)))

    async def delete(self, index: str, doc_type: str, doc_id: str) -> StoreResult:
        source = self._namespaces.get(index, {}).pop((doc_type, doc_id), None)
        if source is None:
            return StoreResult(status=StoreStatus.NOT_FOUND)
        self.logger.debug("Deleted %s/%s/%s", index, doc_type, doc_id)
        return StoreResult(status=StoreStatus.OK, document=Document(doc_id, source))

    async def search(self, index: str, doc_type: str, size: int) -> StoreResult:
        if index not in self._namespaces:
            return StoreResult(status=StoreStatus.NOT_FOUND)
        documents = [
            Document(doc_id, dict(source))
            for (kind, doc_id), source in self._namespaces[index].items()
            if kind == doc_type
        ]
        return StoreResult(status=StoreStatus.OK, documents=documents[:size])

    async def delete_namespace(self, index: str) -> None:
        if self._namespaces.pop(index, None) is None:
            raise StoreError("Namespace does not exist", operation="delete_namespace", index=index, status_code=404)
        self.logger.debug("Deleted namespace %s", index)

    async def close(self) -> None:
        return None
