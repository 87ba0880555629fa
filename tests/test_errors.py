import pytest

from gitignore_client.services.errors import (
    ApiError,
    ErrorKind,
    NetworkError,
    NetworkErrorReason,
    ServiceError,
    StorageError,
    ValidationError,
    get_error_message,
)


def test_kinds_discriminate_error_types():
    assert NetworkError("x").kind == ErrorKind.NETWORK
    assert ApiError("x").kind == ErrorKind.API
    assert ValidationError("x").kind == ErrorKind.VALIDATION
    assert StorageError("x").kind == ErrorKind.STORAGE


def test_all_errors_share_base_class():
    for error in (NetworkError("a"), ApiError("b"), ValidationError("c"), StorageError("d")):
        assert isinstance(error, ServiceError)


def test_api_error_keeps_status_and_cause():
    cause = RuntimeError("underlying")
    error = ApiError("HTTP 404: Not Found", status_code=404, cause=cause)

    assert error.status_code == 404
    assert error.cause is cause
    assert error.__cause__ is cause
    assert str(error) == "HTTP 404: Not Found"


def test_only_api_errors_carry_status():
    assert NetworkError("x").status_code is None
    assert StorageError("x").status_code is None


def test_retryability():
    assert ApiError("x", status_code=500).is_retryable
    assert ApiError("x", status_code=429).is_retryable
    assert ApiError("x").is_retryable
    assert not ApiError("x", status_code=404).is_retryable
    assert NetworkError("x", reason=NetworkErrorReason.TIMEOUT).is_retryable
    assert not NetworkError("x", reason=NetworkErrorReason.CANCELLED).is_retryable
    assert not StorageError("x").is_retryable
    assert not ValidationError("x").is_retryable


def test_to_dict():
    data = ApiError("boom", status_code=503).to_dict()
    assert data == {
        "kind": "api",
        "message": "boom",
        "status_code": 503,
        "cause": None,
    }


def test_get_error_message():
    assert get_error_message(ValueError("bad value")) == "bad value"
    assert get_error_message(KeyError()) == "KeyError"
    assert get_error_message("plain") == "plain"
    assert get_error_message(42) == "42"


def test_base_error_requires_a_kind():
    with pytest.raises(TypeError, match="no error kind"):
        ServiceError("unclassified")


def test_subclass_inherits_kind():
    class ReadOnlyStoreError(StorageError):
        pass

    assert ReadOnlyStoreError("read only").kind == ErrorKind.STORAGE
