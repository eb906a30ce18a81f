"""Context management for requests and operations."""

from .operation_context import OperationContext, operation, operation_scope
from .request_context import RequestContext, request_context, user_required

__all__ = [
    "operation",
    "operation_scope",
    "OperationContext",
    "RequestContext",
    "request_context",
    "user_required",
]
