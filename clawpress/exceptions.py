"""
Error types raised by ClawPress.

Each error class pins an error code, an HTTP-like status and a default message
as class attributes; call sites override the message and attach keyword
context (user ids, credential names, the failing model). Errors log
themselves once, on construction, at a level derived from the status: host
failures at ERROR with the cause's traceback, caller mistakes at WARNING.
"""

import threading
import uuid
from enum import Enum
from typing import Any, Optional

_thread_local = threading.local()


class ErrorCode(str, Enum):
    """Standardized error codes for API responses."""

    # System errors (1xxx)
    INTERNAL_ERROR = "1000"
    DATABASE_ERROR = "1001"
    CONFIGURATION_ERROR = "1003"

    # Validation errors (2xxx)
    VALIDATION_FAILED = "2000"
    INVALID_FORMAT = "2001"
    MISSING_REQUIRED = "2002"

    # Resource errors (3xxx)
    NOT_FOUND = "3000"
    DUPLICATE = "3001"

    # Access errors (4xxx)
    PERMISSION_DENIED = "4003"
    UNAUTHENTICATED = "4010"


class BaseError(Exception):
    """Root of every error ClawPress reports to a caller."""

    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR
    status_code: int = 500
    default_message: str = "ClawPress failed unexpectedly"

    def __init__(
        self,
        message: Optional[str] = None,
        error_code: Optional[ErrorCode] = None,
        status_code: Optional[int] = None,
        cause: Optional[Exception] = None,
        **context: Any,
    ):
        self.message = message or self.default_message
        if error_code is not None:
            self.error_code = error_code
        if status_code is not None:
            self.status_code = status_code
        self.cause = cause
        self.error_id = str(uuid.uuid4())

        self.context = context
        correlation_id = get_correlation_id()
        if correlation_id:
            self.context.setdefault("correlation_id", correlation_id)

        super().__init__(self.message)
        if cause is not None:
            self.__cause__ = cause

        self._log_error()

    def _log_error(self) -> None:
        # Lazy import, the logger module imports the request context which imports us
        from .utils.logger import get_logger

        logger = get_logger()
        extra = {
            "error_id": self.error_id,
            "error_code": self.error_code.value,
            "status_code": self.status_code,
            **self.context,
        }
        if self.cause is not None:
            extra["cause"] = f"{type(self.cause).__name__}: {self.cause}"

        if self.status_code >= 500:
            logger.error(f"{type(self).__name__}: {self.message}", extra=extra, exc_info=self.cause)
        else:
            logger.warning(f"{type(self).__name__}: {self.message}", extra=extra)

    def add_context(self, **kwargs: Any) -> "BaseError":
        """Attach more context after the fact; returns self."""
        self.context.update(kwargs)
        return self


# Layer-specific base exceptions
class RepositoryError(BaseError):
    """A host store refused or failed an operation."""

    error_code = ErrorCode.DATABASE_ERROR
    default_message = "Host store operation failed"


class ServiceError(BaseError):
    """Plugin wiring or service-level failure."""


class ValidationError(BaseError):
    """Caller-supplied input was rejected. Pass ``field=`` to name the input."""

    error_code = ErrorCode.VALIDATION_FAILED
    status_code = 400
    default_message = "Invalid input"


# ==================== INTEGRATION-SPECIFIC EXCEPTIONS ====================


class AlreadyExistsError(BaseError):
    """Raised when creating a credential that is already present."""

    error_code = ErrorCode.DUPLICATE
    status_code = 409
    default_message = "Credential already exists"


class CredentialNotFoundError(BaseError):
    """Raised when a requested credential is not found."""

    error_code = ErrorCode.NOT_FOUND
    status_code = 404
    default_message = "Credential not found"


class PermissionDeniedError(BaseError):
    """Raised when the caller lacks the required capability."""

    error_code = ErrorCode.PERMISSION_DENIED
    status_code = 403
    default_message = "You do not have permission to do this."


class UnauthenticatedError(BaseError):
    """Raised when a CSRF nonce or login check fails."""

    error_code = ErrorCode.UNAUTHENTICATED
    status_code = 401
    default_message = "The link you followed has expired."


class HostStorageError(RepositoryError):
    """Opaque failure bubbled up from one of the host stores."""

    default_message = "Host storage failure"


def _format_ids(identifiers: dict) -> str:
    if not identifiers:
        return ""
    return ": " + ", ".join(f"{k}={v}" for k, v in identifiers.items())


def not_found(
    resource_type: str, cause: Optional[Exception] = None, **identifiers
) -> RepositoryError:
    """A store lookup by id came back empty, e.g. ``not_found("User", user_id=3)``."""
    return RepositoryError(
        f"{resource_type} not found{_format_ids(identifiers)}",
        error_code=ErrorCode.NOT_FOUND,
        status_code=404,
        cause=cause,
        resource_type=resource_type,
        **identifiers,
    )


def duplicate(
    resource_type: str, cause: Optional[Exception] = None, **identifiers
) -> RepositoryError:
    """A unique constraint in a store rejected a write."""
    return RepositoryError(
        f"Duplicate {resource_type}{_format_ids(identifiers)}",
        error_code=ErrorCode.DUPLICATE,
        status_code=409,
        cause=cause,
        resource_type=resource_type,
        **identifiers,
    )


def permission_denied(
    action: str, resource: str, cause: Optional[Exception] = None, **context
) -> PermissionDeniedError:
    """The current user may not perform ``action`` on ``resource``."""
    return PermissionDeniedError(cause=cause, action=action, resource=resource, **context)


# Correlation ID management
def set_correlation_id(correlation_id: str) -> None:
    _thread_local.correlation_id = correlation_id


def get_correlation_id() -> Optional[str]:
    return getattr(_thread_local, "correlation_id", None)


def clear_correlation_id() -> None:
    if hasattr(_thread_local, "correlation_id"):
        delattr(_thread_local, "correlation_id")
