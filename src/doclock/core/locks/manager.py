"""Lock manager translating lock operations into document store calls."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Awaitable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, Literal

from doclock.core.config import LockConfig, OwnerMode, StoreConfig
from doclock.core.constants import DEFAULT_DOC_TYPE, DEFAULT_SEARCH_SIZE, DEFAULT_STORE, DOC_ID_SEPARATOR
from doclock.core.exceptions import InvalidConfiguration, InvalidParameters, LockNotHeld, StoreError
from doclock.core.locks.elasticsearch_store import ElasticsearchStore
from doclock.core.locks.store import DocumentStore, InMemoryDocumentStore, StoreStatus
from doclock.core.logging import with_log_context

LockListing = dict[str, dict[str, Any]]


def create_document_store(
    backend_name: str | None = None,
    *,
    config: StoreConfig | None = None,
    logger: logging.Logger | None = None,
) -> DocumentStore:
    """Create document store from an explicit name or the store configuration."""
    log = logger or logging.getLogger(__name__)
    config = config or StoreConfig()
    requested = (backend_name or config.backend or DEFAULT_STORE).strip().lower()

    if requested == "memory":
        return InMemoryDocumentStore(logger=log)

    if requested == "elasticsearch":
        return ElasticsearchStore.from_config(config, logger=log)

    log.warning("Unknown document store '%s'; falling back to %s", requested, DEFAULT_STORE)
    return create_document_store(DEFAULT_STORE, config=config, logger=log)


@dataclass(frozen=True)
class LockStatus:
    """Outcome of a lock status read.

    When the store could not be read, ``locked`` is True (fail-closed)
    and ``error`` holds the store failure.
    """

    locked: bool
    owner: str | None = None
    error: StoreError | None = None

    def raise_for_error(self) -> None:
        if self.error is not None:
            raise self.error


def _is_identifier(value: object) -> bool:
    return isinstance(value, str) and bool(value)


class LockManager:
    """Exclusive locks stored as documents, one per resource.

    The existence of a document keyed by the resource is the lock. A
    manager either takes the owner on every acquire/release (per-call)
    or is bound to one owner at construction (see ``bound_to``).

    Release deletes the lock document unconditionally: the owner given to
    ``release`` is validated but not compared with the stored owner.
    """

    def __init__(
        self,
        store: DocumentStore,
        *,
        index: str,
        doc_type: str = DEFAULT_DOC_TYPE,
        owner_mode: OwnerMode = OwnerMode.PER_CALL,
        owner: str | None = None,
        search_size: int = DEFAULT_SEARCH_SIZE,
        logger: logging.Logger | None = None,
    ):
        if not _is_identifier(index):
            raise InvalidConfiguration("Lock index must be a non-empty string", field="index")
        if not _is_identifier(doc_type):
            raise InvalidConfiguration("Lock document type must be a non-empty string", field="doc_type")
        # Kind and resource share the document id; a separator in the kind makes ids ambiguous
        if DOC_ID_SEPARATOR in doc_type:
            raise InvalidConfiguration(
                f"Lock document type must not contain '{DOC_ID_SEPARATOR}'", field="doc_type", details=repr(doc_type)
            )
        if owner_mode is OwnerMode.BOUND and not _is_identifier(owner):
            raise InvalidConfiguration("Owner-bound lock manager requires a non-empty owner", field="owner")
        if owner_mode is OwnerMode.PER_CALL and owner is not None:
            raise InvalidConfiguration(
                "Owner is only accepted by an owner-bound lock manager",
                field="owner",
                details="use LockManager.bound_to()",
            )
        if search_size < 1:
            raise InvalidConfiguration("search_size must be at least 1", field="search_size")

        self._store = store
        self._index = index
        self._doc_type = doc_type
        self._owner_mode = owner_mode
        self._owner = owner
        self._search_size = search_size
        self.logger = with_log_context(logger or logging.getLogger(__name__), index=index, doc_type=doc_type)

    @classmethod
    def per_call(
        cls,
        store: DocumentStore,
        *,
        index: str,
        doc_type: str = DEFAULT_DOC_TYPE,
        search_size: int = DEFAULT_SEARCH_SIZE,
        logger: logging.Logger | None = None,
    ) -> LockManager:
        """Manager taking the owner on every acquire/release."""
        return cls(store, index=index, doc_type=doc_type, search_size=search_size, logger=logger)

    @classmethod
    def bound_to(
        cls,
        owner: str,
        store: DocumentStore,
        *,
        index: str,
        doc_type: str = DEFAULT_DOC_TYPE,
        search_size: int = DEFAULT_SEARCH_SIZE,
        logger: logging.Logger | None = None,
    ) -> LockManager:
        """Manager acting on behalf of a single owner."""
        return cls(
            store,
            index=index,
            doc_type=doc_type,
            owner_mode=OwnerMode.BOUND,
            owner=owner,
            search_size=search_size,
            logger=logger,
        )

    @classmethod
    def from_config(
        cls, config: LockConfig, store: DocumentStore, logger: logging.Logger | None = None
    ) -> LockManager:
        return cls(
            store,
            index=config.index,
            doc_type=config.doc_type,
            owner_mode=config.owner_mode,
            owner=config.owner if config.owner_mode is OwnerMode.BOUND else None,
            search_size=config.search_size,
            logger=logger,
        )

    @property
    def store(self) -> DocumentStore:
        return self._store

    @property
    def index(self) -> str:
        return self._index

    @property
    def doc_type(self) -> str:
        return self._doc_type

    @property
    def owner_mode(self) -> OwnerMode:
        return self._owner_mode

    @property
    def owner(self) -> str | None:
        return self._owner

    @property
    def search_size(self) -> int:
        return self._search_size

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(store={self._store.name!r}, index={self._index!r}, "
            f"doc_type={self._doc_type!r}, owner_mode={self._owner_mode.value!r})"
        )

    def _verify_parameters(self, resource: object, owner: object) -> str:
        """Validate caller input before any store call; returns the effective owner."""
        if not _is_identifier(resource):
            raise InvalidParameters("Resource must be a non-empty string", parameter="resource")
        effective_owner = owner if owner is not None else self._owner
        if not _is_identifier(effective_owner):
            raise InvalidParameters("Owner must be a non-empty string", parameter="owner")
        return effective_owner

    def acquire(self, resource: str, owner: str | None = None) -> Awaitable[bool]:
        """Try to take the lock on ``resource`` without waiting.

        Parameters are checked immediately and ``InvalidParameters`` is raised
        from this call, before anything is awaited. The returned awaitable
        resolves to True when the lock was taken and False when someone
        already holds it.
        """
        effective_owner = self._verify_parameters(resource, owner)
        return self._acquire_lock(resource, effective_owner)

    def release(self, resource: str, owner: str | None = None) -> Awaitable[None]:
        """Release the lock on ``resource``.

        The returned awaitable raises ``LockNotHeld`` when no lock document
        exists for the resource.
        """
        effective_owner = self._verify_parameters(resource, owner)
        return self._release_lock(resource, effective_owner)

    def is_locked(self, resource: str) -> Awaitable[LockStatus]:
        """Read the lock state of ``resource``.

        Store failures do not raise: the status reports the resource as
        locked and carries the error.
        """
        if not _is_identifier(resource):
            raise InvalidParameters("Resource must be a non-empty string", parameter="resource")
        return self._lock_status(resource)

    async def list_locks(self) -> LockListing | Literal[False]:
        """Map every locked resource to its lock payload.

        Returns False when the lock namespace has never been created.
        """
        result = await self._store.search(self._index, self._doc_type, self._search_size)
        if result.status is StoreStatus.NOT_FOUND:
            self.logger.debug("Lock namespace %s does not exist", self._index)
            return False
        return {document.doc_id: document.source for document in result.documents}

    async def delete(self) -> None:
        """Drop the whole lock namespace, releasing every lock at once."""
        await self._store.delete_namespace(self._index)
        self.logger.warning("Deleted lock namespace %s", self._index)

    @asynccontextmanager
    async def hold(self, resource: str, owner: str | None = None) -> AsyncIterator[bool]:
        """Acquire ``resource`` for the duration of the block.

        Yields whether the lock was acquired; it is released on exit only
        if it was. When the block raises and the lock document is already
        gone, the block's exception propagates and the missing lock is
        only logged.
        """
        acquired = await self.acquire(resource, owner)
        try:
            yield acquired
        except BaseException:
            if acquired:
                try:
                    await self.release(resource, owner)
                except LockNotHeld:
                    self.logger.warning("Lock on '%s' vanished while held by %s", resource, owner)
            raise
        if acquired:
            await self.release(resource, owner)

    async def _acquire_lock(self, resource: str, owner: str) -> bool:
        result = await self._store.create(self._index, self._doc_type, resource, {"owner": owner})
        if result.status is StoreStatus.CONFLICT:
            self.logger.info("Lock on '%s' is already held; not acquired by %s", resource, owner)
            return False
        if not result.ok:
            raise StoreError(
                "Unexpected create response",
                operation="create",
                index=self._index,
                doc_id=resource,
                details=result.status.value,
            )
        self.logger.info("Lock on '%s' acquired by %s", resource, owner)
        return True

    async def _release_lock(self, resource: str, owner: str) -> None:
        result = await self._store.delete(self._index, self._doc_type, resource)
        if result.status is StoreStatus.NOT_FOUND:
            self.logger.warning("Release of '%s' by %s found no lock", resource, owner)
            raise LockNotHeld(resource, index=self._index)
        self.logger.info("Lock on '%s' released by %s", resource, owner)

    async def _lock_status(self, resource: str) -> LockStatus:
        try:
            result = await self._store.get(self._index, self._doc_type, resource)
        except StoreError as e:
            self.logger.warning("Lock state of '%s' unknown; reporting it as locked (%s)", resource, e)
            return LockStatus(locked=True, error=e)
        if result.status is StoreStatus.NOT_FOUND:
            return LockStatus(locked=False)
        owner = result.document.source.get("owner") if result.document is not None else None
        return LockStatus(locked=True, owner=owner)
