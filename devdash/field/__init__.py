"""Fields: handler adapters, text viewport, edit state and async execution."""

from .adapter import HandlerAdapter, build_adapter, build_log_adapter, resolve_kind
from .executor import (
    AsyncExecutor,
    AsyncOperation,
    CancelToken,
    OperationHandle,
    OperationOutcome,
    format_duration,
)
from .field import Field
from .viewport import TextViewport

__all__ = [
    "AsyncExecutor",
    "AsyncOperation",
    "CancelToken",
    "Field",
    "HandlerAdapter",
    "OperationHandle",
    "OperationOutcome",
    "TextViewport",
    "build_adapter",
    "build_log_adapter",
    "format_duration",
    "resolve_kind",
]
