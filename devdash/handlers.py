"""Handler contracts consumed by the dashboard runtime.

Host applications implement one primary capability set (display, edit,
execution or interactive) and/or ``Loggable``. The optional traits below are
detected once at registration time and cached on the handler adapter.
"""

from __future__ import annotations

import enum
from collections.abc import Callable
from typing import Protocol, runtime_checkable

# Start (or update) the handler's tracked line and animate it until closed.
LOG_OPEN = "[..."
# Update the handler's tracked line and stop its animation.
LOG_CLOSE = "...]"

LogFunc = Callable[..., None]


class HandlerKind(enum.Enum):
    """Primary capability a handler was registered with."""

    DISPLAY = "display"
    EDIT = "edit"
    EXECUTION = "execution"
    INTERACTIVE = "interactive"
    LOGGABLE = "loggable"


@runtime_checkable
class HandlerDisplay(Protocol):
    """Read-only panel; ``content()`` is shown when the field is active."""

    def name(self) -> str: ...

    def content(self) -> str: ...


@runtime_checkable
class HandlerEdit(Protocol):
    """Editable text field; ``change()`` receives the committed value."""

    def name(self) -> str: ...

    def label(self) -> str: ...

    def value(self) -> str: ...

    def change(self, new_value: str) -> None: ...


@runtime_checkable
class HandlerExecution(Protocol):
    """Action button; ``execute()`` runs when the field is activated."""

    def name(self) -> str: ...

    def label(self) -> str: ...

    def execute(self) -> None: ...


@runtime_checkable
class HandlerInteractive(Protocol):
    """Multi-step prompt that can keep edit mode open between commits."""

    def name(self) -> str: ...

    def label(self) -> str: ...

    def value(self) -> str: ...

    def change(self, new_value: str) -> None: ...

    def waiting_for_user(self) -> bool: ...


@runtime_checkable
class Loggable(Protocol):
    """Receives a log function wired into the owning tab's message log."""

    def name(self) -> str: ...

    def set_log(self, logger: LogFunc) -> None: ...


@runtime_checkable
class StreamingLoggable(Protocol):
    def always_show_all_logs(self) -> bool: ...


@runtime_checkable
class Cancelable(Protocol):
    def cancel(self) -> None: ...


@runtime_checkable
class ShortcutProvider(Protocol):
    """Ordered ``[{key: description}, ...]`` of global single-key shortcuts."""

    def shortcuts(self) -> list[dict[str, str]]: ...


@runtime_checkable
class MessageTracker(Protocol):
    def get_last_operation_id(self) -> str: ...

    def set_last_operation_id(self, operation_id: str) -> None: ...


@runtime_checkable
class TabActivationAware(Protocol):
    def on_tab_active(self) -> None: ...


__all__ = [
    "LOG_OPEN",
    "LOG_CLOSE",
    "LogFunc",
    "HandlerKind",
    "HandlerDisplay",
    "HandlerEdit",
    "HandlerExecution",
    "HandlerInteractive",
    "Loggable",
    "StreamingLoggable",
    "Cancelable",
    "ShortcutProvider",
    "MessageTracker",
    "TabActivationAware",
]
