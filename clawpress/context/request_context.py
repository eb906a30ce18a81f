"""
Request context management for ClawPress.

This module tracks the authenticated state of the request being served on the
current thread: who the user is, which application password (if any)
authenticated them, whether the request came through the content API, and a
small per-request cache for values several hooks ask for.

IMPORTANT: Always import this module as 'clawpress.context.request_context' to
avoid multiple module instances which would split the thread-local state.
"""

import threading
import time
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Dict, Generator, Optional

from ..exceptions import ErrorCode, UnauthenticatedError, ValidationError
from ..utils.logger import get_logger


class RequestContext:
    """
    Manages request context throughout the application using thread-local storage.
    """

    _thread_local = threading.local()

    @classmethod
    def begin(cls, rest_request: bool = False) -> None:
        """
        Start a fresh request on the current thread.

        Args:
            rest_request: Whether the request is served by the content API
        """
        cls.end()
        cls._thread_local.rest_request = bool(rest_request)
        # Whole seconds, the same resolution attribution tags are written at
        cls._thread_local.started_at = int(time.time())
        cls._thread_local.cache = {}

    @classmethod
    def end(cls) -> None:
        """Drop all state held for the current request."""
        for attr in ("user_id", "app_password_uuid", "rest_request", "started_at", "cache"):
            if hasattr(cls._thread_local, attr):
                delattr(cls._thread_local, attr)

    @classmethod
    def set_current_user(cls, user_id: int) -> None:
        """
        Set the authenticated user for the current request.

        Raises:
            ValidationError: If user_id is not a positive integer
        """
        if not isinstance(user_id, int) or isinstance(user_id, bool) or user_id <= 0:
            raise ValidationError(
                "user_id must be a positive integer",
                error_code=ErrorCode.MISSING_REQUIRED,
                field="user_id",
                value=user_id,
            )

        cls._thread_local.user_id = user_id
        cls.clear_cache()
        get_logger().debug(f"Current user set to: {user_id}")

    @classmethod
    def get_current_user_id(cls) -> Optional[int]:
        """Return the authenticated user id, or None for anonymous requests."""
        return getattr(cls._thread_local, "user_id", None)

    @classmethod
    def set_authenticated_app_password(cls, app_password_uuid: Optional[str]) -> None:
        """Record which application password authenticated this request."""
        cls._thread_local.app_password_uuid = app_password_uuid
        cls.clear_cache()

    @classmethod
    def get_authenticated_app_password(cls) -> Optional[str]:
        """UUID of the application password used for this request, if any."""
        return getattr(cls._thread_local, "app_password_uuid", None)

    @classmethod
    def is_rest_request(cls) -> bool:
        return getattr(cls._thread_local, "rest_request", False)

    @classmethod
    def get_started_at(cls) -> Optional[int]:
        """Unix time, in whole seconds, at which the current request began."""
        return getattr(cls._thread_local, "started_at", None)

    @classmethod
    def clear_current_user(cls) -> None:
        """Log the current request out."""
        for attr in ("user_id", "app_password_uuid"):
            if hasattr(cls._thread_local, attr):
                delattr(cls._thread_local, attr)
        cls.clear_cache()
        get_logger().debug("Current user cleared")

    @classmethod
    def _cache(cls) -> Dict[str, Any]:
        if not hasattr(cls._thread_local, "cache"):
            cls._thread_local.cache = {}
        return cls._thread_local.cache

    @classmethod
    def get_cached(cls, key: str, default: Any = None) -> Any:
        return cls._cache().get(key, default)

    @classmethod
    def has_cached(cls, key: str) -> bool:
        return key in cls._cache()

    @classmethod
    def set_cached(cls, key: str, value: Any) -> None:
        cls._cache()[key] = value

    @classmethod
    def clear_cache(cls) -> None:
        """Clear the per-request cache."""
        if hasattr(cls._thread_local, "cache"):
            cls._thread_local.cache.clear()


@contextmanager
def request_context(
    user_id: Optional[int] = None,
    app_password_uuid: Optional[str] = None,
    rest_request: bool = False,
) -> Generator[None, None, None]:
    """
    Context manager wrapping a single request.

    Sets up the request state for the duration of the block and clears it
    afterward.

    Args:
        user_id: Authenticated user, if any
        app_password_uuid: Application password that authenticated the user
        rest_request: Whether the request is served by the content API
    """
    RequestContext.begin(rest_request=rest_request)
    try:
        if user_id is not None:
            RequestContext.set_current_user(user_id)
        if app_password_uuid is not None:
            RequestContext.set_authenticated_app_password(app_password_uuid)
        yield
    finally:
        RequestContext.end()


def user_required(func: Callable) -> Callable:
    """
    Decorator for operations that act on behalf of the current user.

    Raises:
        UnauthenticatedError: If no user is logged in for this request
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        if not RequestContext.get_current_user_id():
            raise UnauthenticatedError(
                "You must be logged in to do this.",
                operation=func.__name__,
            )
        return func(*args, **kwargs)

    return wrapper
