"""Tests for the doclock exception hierarchy"""

import pytest

from doclock.core.exceptions import (
    DocLockError,
    InvalidConfiguration,
    InvalidParameters,
    LockNotHeld,
    StoreError,
)


@pytest.mark.parametrize("error_class", [InvalidConfiguration, InvalidParameters, StoreError])
def test_all_errors_share_base(error_class):
    assert issubclass(error_class, DocLockError)


def test_lock_not_held_is_not_a_store_error():
    assert not issubclass(LockNotHeld, StoreError)
    assert issubclass(LockNotHeld, DocLockError)


def test_base_error_formats_details():
    assert str(DocLockError("Something failed")) == "Something failed"
    assert str(DocLockError("Something failed", details="why")) == "Something failed: why"


def test_invalid_parameters_keeps_parameter():
    error = InvalidParameters("Resource must be a non-empty string", parameter="resource")
    assert error.parameter == "resource"
    assert str(error) == "Resource must be a non-empty string"


def test_store_error_str_includes_context():
    original = TimeoutError("read timed out")
    error = StoreError(
        "Document store request failed",
        operation="get",
        index="lock-index",
        doc_id="testresource",
        status_code=408,
        details="ConnectionTimeout",
        original_error=original,
    )
    assert str(error) == (
        "Document store request failed - HTTP 408 - during get lock-index/testresource - ConnectionTimeout"
    )
    assert error.original_error is original


def test_store_error_without_context():
    assert str(StoreError("Document store request failed")) == "Document store request failed"


def test_store_error_namespace_operation():
    error = StoreError("Namespace does not exist", operation="delete_namespace", index="lock-index", status_code=404)
    assert str(error) == "Namespace does not exist - HTTP 404 - during delete_namespace lock-index"


def test_lock_not_held_message():
    error = LockNotHeld("testresource", index="lock-index")
    assert error.resource == "testresource"
    assert str(error) == "No lock held for resource 'testresource': index 'lock-index'"
    assert str(LockNotHeld("testresource")) == "No lock held for resource 'testresource'"
