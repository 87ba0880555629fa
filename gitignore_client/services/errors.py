"""
Service layer exceptions.

Every error carries a ``kind`` discriminant so callers can branch on
``error.kind`` instead of inspecting the class.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Error categories."""

    NETWORK = "network"
    API = "api"
    VALIDATION = "validation"
    STORAGE = "storage"


class NetworkErrorReason(str, Enum):
    """Why a network request failed."""

    TIMEOUT = "timeout"
    CANCELLED = "cancelled"
    CONNECTION = "connection"
    UNKNOWN = "unknown"


class ServiceError(Exception):
    """
    Base exception for service layer errors.

    Not raised directly; every concrete subclass sets ``kind``.
    """

    kind: ErrorKind

    def __init__(self, message: str, cause: BaseException | None = None):
        if not hasattr(type(self), "kind"):
            raise TypeError(
                f"{type(self).__name__} has no error kind; raise NetworkError, "
                "ApiError, ValidationError or StorageError instead"
            )
        self.cause = cause
        self.status_code: int | None = None
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    @property
    def is_retryable(self) -> bool:
        """Whether retrying the failed operation may succeed."""
        return False

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary."""
        return {
            "kind": self.kind.value,
            "message": str(self),
            "status_code": self.status_code,
            "cause": repr(self.cause) if self.cause is not None else None,
        }


class NetworkError(ServiceError):
    """Timeout, cancellation, connection failure or unclassified transport fault."""

    kind = ErrorKind.NETWORK

    def __init__(
        self,
        message: str,
        cause: BaseException | None = None,
        reason: NetworkErrorReason = NetworkErrorReason.UNKNOWN,
    ):
        self.reason = reason
        super().__init__(message, cause)

    @property
    def is_retryable(self) -> bool:
        return self.reason != NetworkErrorReason.CANCELLED


class ApiError(ServiceError):
    """Non-2xx HTTP status, or an empty/invalid response payload."""

    kind = ErrorKind.API

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message, cause)
        self.status_code = status_code

    @property
    def is_retryable(self) -> bool:
        if self.status_code is None or self.status_code == 429:
            return True
        return not 400 <= self.status_code < 500


class ValidationError(ServiceError):
    """Invalid configuration or input."""

    kind = ErrorKind.VALIDATION


class StorageError(ServiceError):
    """Persistent store read or write failed."""

    kind = ErrorKind.STORAGE


def get_error_message(error: BaseException | object) -> str:
    """Extract a printable message from any error value."""
    if isinstance(error, BaseException):
        return str(error) or type(error).__name__
    return str(error)
