"""Structured errors for the notification dispatch layer.

Every failure raised by validators, providers and services is a
``NotificationError`` carrying a machine-readable ``ErrorCode``. Callers branch
on ``error.code`` rather than on message text; ``status_code`` gives the HTTP
status a REST layer would answer with.

Usage:
    from notification_dispatch.errors import ErrorCode, NotificationError

    try:
        service.send_sms(request)
    except NotificationError as e:
        if e.code == ErrorCode.VALIDATION_FAILED:
            ...
"""

from enum import Enum
from http import HTTPStatus
from typing import Any, Dict, List, Optional, Tuple


class ErrorCode(str, Enum):
    """Error kinds shared by every channel."""

    # General
    INTERNAL_ERROR = "INTERNAL_ERROR"
    INVALID_REQUEST = "INVALID_REQUEST"
    NOT_FOUND = "NOT_FOUND"
    UNAUTHORIZED = "UNAUTHORIZED"
    RATE_LIMITED = "RATE_LIMITED"
    TIMEOUT = "TIMEOUT"

    # Provider
    PROVIDER_NOT_FOUND = "PROVIDER_NOT_FOUND"
    PROVIDER_UNAVAILABLE = "PROVIDER_UNAVAILABLE"
    PROVIDER_CONFIG_ERROR = "PROVIDER_CONFIG_ERROR"
    PROVIDER_AUTH_ERROR = "PROVIDER_AUTH_ERROR"

    # Notification
    INVALID_RECIPIENT = "INVALID_RECIPIENT"
    INVALID_NOTIFICATION = "INVALID_NOTIFICATION"
    NOTIFICATION_FAILED = "NOTIFICATION_FAILED"
    DELIVERY_FAILED = "DELIVERY_FAILED"
    TEMPLATE_NOT_FOUND = "TEMPLATE_NOT_FOUND"

    # Validation
    VALIDATION_FAILED = "VALIDATION_FAILED"
    INVALID_EMAIL = "INVALID_EMAIL"
    INVALID_PHONE = "INVALID_PHONE"
    INVALID_TOKEN = "INVALID_TOKEN"

    # Queue
    QUEUE_FULL = "QUEUE_FULL"
    QUEUE_EMPTY = "QUEUE_EMPTY"
    QUEUE_TIMEOUT = "QUEUE_TIMEOUT"


_STATUS_BY_CODE: Dict[ErrorCode, HTTPStatus] = {
    ErrorCode.INVALID_REQUEST: HTTPStatus.BAD_REQUEST,
    ErrorCode.VALIDATION_FAILED: HTTPStatus.BAD_REQUEST,
    ErrorCode.INVALID_EMAIL: HTTPStatus.BAD_REQUEST,
    ErrorCode.INVALID_PHONE: HTTPStatus.BAD_REQUEST,
    ErrorCode.INVALID_TOKEN: HTTPStatus.BAD_REQUEST,
    ErrorCode.INVALID_RECIPIENT: HTTPStatus.BAD_REQUEST,
    ErrorCode.INVALID_NOTIFICATION: HTTPStatus.BAD_REQUEST,
    ErrorCode.UNAUTHORIZED: HTTPStatus.UNAUTHORIZED,
    ErrorCode.PROVIDER_AUTH_ERROR: HTTPStatus.UNAUTHORIZED,
    ErrorCode.NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorCode.PROVIDER_NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorCode.TEMPLATE_NOT_FOUND: HTTPStatus.NOT_FOUND,
    ErrorCode.RATE_LIMITED: HTTPStatus.TOO_MANY_REQUESTS,
    ErrorCode.TIMEOUT: HTTPStatus.REQUEST_TIMEOUT,
    ErrorCode.QUEUE_TIMEOUT: HTTPStatus.REQUEST_TIMEOUT,
    ErrorCode.PROVIDER_UNAVAILABLE: HTTPStatus.SERVICE_UNAVAILABLE,
    ErrorCode.NOTIFICATION_FAILED: HTTPStatus.SERVICE_UNAVAILABLE,
    ErrorCode.DELIVERY_FAILED: HTTPStatus.SERVICE_UNAVAILABLE,
    ErrorCode.QUEUE_FULL: HTTPStatus.INSUFFICIENT_STORAGE,
}


class NotificationError(Exception):
    """Structured error raised anywhere in the dispatch pipeline.

    Attributes:
        code: Machine-readable error kind.
        message: Human readable summary.
        details: Optional free-text detail (provider name, upstream reason).
        metadata: String-keyed context such as the failing ``field``.
        cause: Underlying exception, if any.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ):
        self.code = code
        self.message = message
        self.details = details
        self.metadata: Dict[str, Any] = dict(metadata or {})
        self.cause = cause
        super().__init__(str(self))
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        if self.details:
            return f"{self.code.value}: {self.message} - {self.details}"
        return f"{self.code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"NotificationError(code={self.code.value!r}, message={self.message!r})"

    @property
    def status_code(self) -> int:
        """HTTP status hint derived from the error code."""
        return int(_STATUS_BY_CODE.get(self.code, HTTPStatus.INTERNAL_SERVER_ERROR))

    @property
    def field(self) -> Optional[str]:
        """Name of the field that failed validation, when known."""
        return self.metadata.get("field")

    def with_metadata(self, key: str, value: Any) -> "NotificationError":
        self.metadata[key] = value
        return self

    def with_cause(self, cause: BaseException) -> "NotificationError":
        self.cause = cause
        self.__cause__ = cause
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the error for an API response body."""
        data: Dict[str, Any] = {
            "code": self.code.value,
            "message": self.message,
            "status_code": self.status_code,
        }
        if self.details:
            data["details"] = self.details
        if self.metadata:
            data["metadata"] = dict(self.metadata)
        return data

    @classmethod
    def validation(cls, field: str, message: str) -> "NotificationError":
        """Validation failure for a single field (fail-fast)."""
        return cls(
            ErrorCode.VALIDATION_FAILED,
            f"Validation failed for field '{field}': {message}",
            metadata={"field": field},
        )

    @classmethod
    def provider(
        cls, provider_name: str, code: ErrorCode, message: str
    ) -> "NotificationError":
        """Failure attributed to a named provider."""
        return cls(
            code,
            message,
            details=f"Provider: {provider_name}",
            metadata={"provider": provider_name},
        )

    @classmethod
    def rate_limited(cls, retry_after: int) -> "NotificationError":
        return cls(
            ErrorCode.RATE_LIMITED,
            "Rate limit exceeded",
            details=f"Retry after {retry_after} seconds",
            metadata={"retry_after": retry_after},
        )

    @classmethod
    def internal(
        cls, message: str, cause: Optional[BaseException] = None
    ) -> "NotificationError":
        return cls(ErrorCode.INTERNAL_ERROR, message, cause=cause)

    @classmethod
    def not_found(cls, message: str) -> "NotificationError":
        return cls(ErrorCode.NOT_FOUND, message)

    @classmethod
    def timeout(cls, message: str) -> "NotificationError":
        return cls(ErrorCode.TIMEOUT, message)

    @classmethod
    def wrap(
        cls, error: BaseException, code: ErrorCode, message: str
    ) -> "NotificationError":
        """Wrap an arbitrary exception, passing NotificationErrors through unchanged."""
        if isinstance(error, NotificationError):
            return error
        return cls(code, message, details=str(error), cause=error)


class BulkSendError(NotificationError):
    """Raised by bulk push sends when at least one notification failed.

    Attributes:
        responses: One response per input request, failed ones with status FAILED.
        failures: ``(index, error)`` pairs for every failed request.
    """

    def __init__(
        self,
        responses: List[Any],
        failures: List[Tuple[int, BaseException]],
        operation: str = "bulk push",
    ):
        joined = "; ".join(f"notification {index}: {err}" for index, err in failures)
        super().__init__(
            ErrorCode.NOTIFICATION_FAILED,
            f"{operation} operation had errors: {joined}",
            metadata={"failed": len(failures), "total": len(responses)},
        )
        self.responses = responses
        self.failures = failures
