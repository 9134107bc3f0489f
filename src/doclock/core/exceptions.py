"""Custom exceptions for doclock.

All exception classes carry enough context (parameter, resource, store
operation) to tell a caller what went wrong without inspecting the store.

Contention on acquire and a never-initialized lock namespace are normal
results, not exceptions, and have no class here.
"""


class DocLockError(Exception):
    """Base exception for all doclock errors."""

    def __init__(self, message: str, details: str | None = None):
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class InvalidConfiguration(DocLockError):
    """Exception raised when a lock manager or store is configured incorrectly.

    Examples:
        - Owner-bound manager without an owner
        - Empty index name
        - Unparseable numeric environment variable
    """

    def __init__(self, message: str, field: str | None = None, details: str | None = None):
        self.field = field
        super().__init__(message, details)


class InvalidParameters(DocLockError):
    """Exception raised for malformed caller input.

    Always raised before the document store is contacted.
    """

    def __init__(self, message: str, parameter: str | None = None, details: str | None = None):
        self.parameter = parameter
        super().__init__(message, details)


class StoreError(DocLockError):
    """Exception raised for document store failures.

    Wraps timeouts, unreachable clusters and unexpected responses with
    the operation and document that were being worked on.
    """

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        index: str | None = None,
        doc_id: str | None = None,
        status_code: int | None = None,
        details: str | None = None,
        original_error: Exception | None = None,
    ):
        self.operation = operation
        self.index = index
        self.doc_id = doc_id
        self.status_code = status_code
        self.original_error = original_error
        super().__init__(message, details)

    def __str__(self) -> str:
        parts = [self.message]
        if self.status_code:
            parts.append(f"HTTP {self.status_code}")
        if self.operation:
            target = self.index or ""
            if self.doc_id:
                target = f"{target}/{self.doc_id}"
            parts.append(f"during {self.operation} {target}".rstrip())
        if self.details:
            parts.append(self.details)
        return " - ".join(parts)


class LockNotHeld(DocLockError):
    """Exception raised when releasing a resource that has no lock document.

    Distinct from StoreError so callers can tell a double release apart
    from an infrastructure problem.
    """

    def __init__(self, resource: str, index: str | None = None):
        self.resource = resource
        self.index = index
        details = f"index '{index}'" if index else None
        super().__init__(f"No lock held for resource '{resource}'", details)
