"""Elasticsearch-backed document store.

Lock documents live in a single index per namespace. Elasticsearch 8 has
no mapping types, so the document kind is folded into the document id
(``<kind>:<resource>``) to keep create-uniqueness per kind, and is also
stored in the source so listings can filter on it.
"""

from __future__ import annotations

import logging
from typing import Any

from elastic_transport import TransportError
from elasticsearch import ApiError, AsyncElasticsearch, ConflictError, NotFoundError

from doclock.core.config import StoreConfig
from doclock.core.constants import DOC_ID_SEPARATOR, KIND_FIELD
from doclock.core.exceptions import StoreError
from doclock.core.locks.store import Document, StoreResult, StoreStatus


def create_elasticsearch_client(config: StoreConfig) -> AsyncElasticsearch:
    """Build an async client; retries and timeouts belong to its transport."""
    kwargs: dict[str, Any] = {
        "request_timeout": config.request_timeout,
        "max_retries": config.max_retries,
        "retry_on_timeout": config.retry_on_timeout,
    }
    if config.api_key:
        kwargs["api_key"] = config.api_key
    elif config.basic_auth() is not None:
        kwargs["basic_auth"] = config.basic_auth()
    return AsyncElasticsearch(config.hosts, **kwargs)


def _response_body(response: Any) -> dict[str, Any]:
    body = getattr(response, "body", response)
    return body if isinstance(body, dict) else {}


def _status_code(error: Exception) -> int | None:
    meta = getattr(error, "meta", None)
    status = getattr(meta, "status", None)
    return status if isinstance(status, int) else None


class ElasticsearchStore:
    """Document store on top of ``AsyncElasticsearch``."""

    name = "elasticsearch"

    def __init__(self, client: AsyncElasticsearch, logger: logging.Logger | None = None):
        self.client = client
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def from_config(cls, config: StoreConfig, logger: logging.Logger | None = None) -> ElasticsearchStore:
        return cls(create_elasticsearch_client(config), logger=logger)

    @staticmethod
    def document_id(doc_type: str, doc_id: str) -> str:
        return f"{doc_type}{DOC_ID_SEPARATOR}{doc_id}"

    def _store_error(
        self, operation: str, index: str, doc_id: str | None, error: ApiError | TransportError
    ) -> StoreError:
        status_code = _status_code(error)
        self.logger.error(
            "Elasticsearch %s failed for %s/%s (status=%s): %s",
            operation,
            index,
            doc_id or "",
            status_code,
            type(error).__name__,
        )
        return StoreError(
            "Document store request failed",
            operation=operation,
            index=index,
            doc_id=doc_id,
            status_code=status_code,
            details=type(error).__name__,
            original_error=error,
        )

    async def create(self, index: str, doc_type: str, doc_id: str, body: dict[str, Any]) -> StoreResult:
        source = {**body, KIND_FIELD: doc_type}
        self.logger.debug("Creating %s/%s", index, self.document_id(doc_type, doc_id))
        try:
            await self.client.create(index=index, id=self.document_id(doc_type, doc_id), document=source, refresh=True)
        except ConflictError:
            return StoreResult(status=StoreStatus.CONFLICT)
        except (ApiError, TransportError) as e:
            raise self._store_error("create", index, doc_id, e) from e
        return StoreResult(status=StoreStatus.OK, document=Document(doc_id, dict(body)))

    async def get(self, index: str, doc_type: str, doc_id: str) -> StoreResult:
        self.logger.debug("Fetching %s/%s", index, self.document_id(doc_type, doc_id))
        try:
            response = await self.client.get(index=index, id=self.document_id(doc_type, doc_id))
        except NotFoundError:
            return StoreResult(status=StoreStatus.NOT_FOUND)
        except (ApiError, TransportError) as e:
            raise self._store_error("get", index, doc_id, e) from e

        body = _response_body(response)
        if body.get("found") is False:
            return StoreResult(status=StoreStatus.NOT_FOUND)
        return StoreResult(status=StoreStatus.OK, document=Document(doc_id, self._strip_kind(body.get("_source"))))

    async def delete(self, index: str, doc_type: str, doc_id: str) -> StoreResult:
        self.logger.debug("Deleting %s/%s", index, self.document_id(doc_type, doc_id))
        try:
            response = await self.client.delete(index=index, id=self.document_id(doc_type, doc_id), refresh=True)
        except NotFoundError:
            return StoreResult(status=StoreStatus.NOT_FOUND)
        except (ApiError, TransportError) as e:
            raise self._store_error("delete", index, doc_id, e) from e

        if _response_body(response).get("result") == "not_found":
            return StoreResult(status=StoreStatus.NOT_FOUND)
        return StoreResult(status=StoreStatus.OK)

    async def search(self, index: str, doc_type: str, size: int) -> StoreResult:
        self.logger.debug("Searching %s for kind %s", index, doc_type)
        try:
            response = await self.client.search(
                index=index,
                query={"match_phrase": {KIND_FIELD: doc_type}},
                size=size,
            )
        except NotFoundError:
            return StoreResult(status=StoreStatus.NOT_FOUND)
        except (ApiError, TransportError) as e:
            raise self._store_error("search", index, None, e) from e

        prefix = self.document_id(doc_type, "")
        documents = []
        for hit in _response_body(response).get("hits", {}).get("hits", []):
            hit_id = hit.get("_id", "")
            source = hit.get("_source") or {}
            # match_phrase on an analyzed field can match neighbouring kinds
            if source.get(KIND_FIELD) != doc_type or not hit_id.startswith(prefix):
                continue
            documents.append(Document(hit_id[len(prefix) :], self._strip_kind(source)))
        return StoreResult(status=StoreStatus.OK, documents=documents)

    async def delete_namespace(self, index: str) -> None:
        self.logger.debug("Deleting index %s", index)
        try:
            await self.client.indices.delete(index=index)
        except (ApiError, TransportError) as e:
            raise self._store_error("delete_namespace", index, None, e) from e

    async def close(self) -> None:
        await self.client.close()

    @staticmethod
    def _strip_kind(source: dict[str, Any] | None) -> dict[str, Any]:
        return {key: value for key, value in (source or {}).items() if key != KIND_FIELD}
