"""
Operation wrapper for service entry points.

``@operation()`` names a call after its module and qualified name, makes sure
the thread carries a correlation id, and logs entry and exit at DEBUG together
with the acting user. ClawPress errors propagate with the operation name
attached to their context (they already logged themselves); anything else is
logged with its traceback and propagates unchanged.
"""

import time
import uuid
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Dict, Iterator, Optional, TypeVar, Union, cast

from ..exceptions import BaseError, get_correlation_id, set_correlation_id
from ..utils.logger import get_logger
from .request_context import RequestContext


class OperationContext:
    """Identity and timing of one service call."""

    def __init__(self, name: str, correlation_id: Optional[str] = None):
        self.name = name
        self.operation_id = str(uuid.uuid4())
        self.correlation_id = correlation_id or get_correlation_id() or str(uuid.uuid4())
        set_correlation_id(self.correlation_id)
        self._started = time.perf_counter()

    @property
    def duration_ms(self) -> float:
        return (time.perf_counter() - self._started) * 1000

    def log_extra(self, **fields: Any) -> Dict[str, Any]:
        extra: Dict[str, Any] = {
            "operation_id": self.operation_id,
            "correlation_id": self.correlation_id,
        }
        user_id = RequestContext.get_current_user_id()
        if user_id:
            extra["acting_user"] = user_id
        extra.update(fields)
        return extra


@contextmanager
def operation_scope(name: str) -> Iterator[OperationContext]:
    """Run a block as a named operation."""
    logger = get_logger()
    op = OperationContext(name)
    logger.debug(f"ENTER: {name}", extra=op.log_extra())

    try:
        yield op
    except BaseError as e:
        # Innermost operation wins; that is where the error was raised
        if "operation_name" not in e.context:
            e.add_context(operation_name=name, operation_id=op.operation_id)
        logger.info(
            f"FAILED: {name} -> {e.error_code.value}",
            extra=op.log_extra(error_id=e.error_id, duration_ms=round(op.duration_ms, 2)),
        )
        raise
    except Exception as e:
        logger.exception(
            f"FAILED: {name} -> {type(e).__name__}: {e}",
            extra=op.log_extra(duration_ms=round(op.duration_ms, 2)),
        )
        raise

    logger.debug(f"EXIT: {name}", extra=op.log_extra(duration_ms=round(op.duration_ms, 2)))


F = TypeVar("F", bound=Callable[..., Any])


def operation(name: Union[Optional[str], Callable] = None):
    """
    Decorator running the wrapped callable inside ``operation_scope``.

    Usable bare (``@operation``) or called (``@operation()``,
    ``@operation(name="admin.create")``). The default name is
    ``<module>.<qualname>``, e.g. ``flash_service.FlashService.purge``.
    """

    def decorator(func: F) -> F:
        op_name = name or f"{func.__module__.rsplit('.', 1)[-1]}.{func.__qualname__}"

        @wraps(func)
        def wrapper(*args, **kwargs):
            with operation_scope(op_name):
                return func(*args, **kwargs)

        return cast(F, wrapper)

    if callable(name):
        func, name = name, None
        return decorator(func)

    return decorator
