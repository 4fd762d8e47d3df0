"""Capability-erased adapter over registered handler objects.

Capability detection happens exactly once, in ``build_adapter``. The
resulting ``HandlerAdapter`` exposes a fixed surface where unsupported
operations return zero values, so callers never branch on handler shape.
"""

from __future__ import annotations

import datetime
from collections.abc import Callable
from dataclasses import dataclass

from ..handlers import (
    Cancelable,
    HandlerDisplay,
    HandlerEdit,
    HandlerExecution,
    HandlerInteractive,
    HandlerKind,
    Loggable,
    MessageTracker,
    ShortcutProvider,
    StreamingLoggable,
    TabActivationAware,
)


def _timeout_seconds(value: object) -> float:
    """Normalize numbers and ``timedelta`` values to non-negative seconds."""
    if isinstance(value, datetime.timedelta):
        return max(0.0, value.total_seconds())
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    return max(0.0, float(value))


@dataclass(frozen=True)
class HandlerAdapter:
    """Resolved handler record; immutable after construction."""

    kind: HandlerKind
    color: str
    handler_id: int
    name_fn: Callable[[], str]
    label_fn: Callable[[], str] | None = None
    value_fn: Callable[[], str] | None = None
    content_fn: Callable[[], str] | None = None
    change_fn: Callable[[str], None] | None = None
    execute_fn: Callable[[], None] | None = None
    waiting_fn: Callable[[], bool] | None = None
    timeout_fn: Callable[[], object] | None = None
    fixed_timeout: float = 0.0
    cancel_fn: Callable[[], None] | None = None
    get_operation_id_fn: Callable[[], str] | None = None
    set_operation_id_fn: Callable[[str], None] | None = None
    tab_active_fn: Callable[[], None] | None = None
    shortcuts_fn: Callable[[], list[dict[str, str]]] | None = None
    show_all_logs_fn: Callable[[], bool] | None = None
    exposes_value: bool = False

    def name(self) -> str:
        return str(self.name_fn())

    def label(self) -> str:
        return str(self.label_fn()) if self.label_fn is not None else ""

    def value(self) -> str:
        return str(self.value_fn()) if self.value_fn is not None else ""

    def content(self) -> str:
        return str(self.content_fn()) if self.content_fn is not None else ""

    def editable(self) -> bool:
        return self.kind in (HandlerKind.EDIT, HandlerKind.INTERACTIVE)

    def change(self, new_value: str) -> None:
        if self.change_fn is not None:
            self.change_fn(new_value)

    def execute(self) -> None:
        if self.execute_fn is not None:
            self.execute_fn()

    def timeout(self) -> float:
        """Deadline in seconds for one operation; ``0`` means no deadline."""
        if self.timeout_fn is not None:
            return _timeout_seconds(self.timeout_fn())
        return self.fixed_timeout

    def waiting_for_user(self) -> bool:
        return bool(self.waiting_fn()) if self.waiting_fn is not None else False

    def tracking_key(self) -> str:
        return self.name()

    @property
    def cancelable(self) -> bool:
        return self.cancel_fn is not None

    @property
    def tracks_messages(self) -> bool:
        return self.get_operation_id_fn is not None

    def cancel(self) -> bool:
        """Invoke the handler's ``cancel()`` if it has one."""
        if self.cancel_fn is None:
            return False
        self.cancel_fn()
        return True

    def last_operation_id(self) -> str:
        if self.get_operation_id_fn is None:
            return ""
        return str(self.get_operation_id_fn() or "")

    def remember_operation_id(self, operation_id: str) -> None:
        if self.set_operation_id_fn is not None:
            self.set_operation_id_fn(operation_id)

    def shortcuts(self) -> list[tuple[str, str]]:
        """Flatten declared shortcuts to ordered ``(key, description)`` pairs."""
        if self.shortcuts_fn is None:
            return []
        pairs: list[tuple[str, str]] = []
        for mapping in self.shortcuts_fn() or []:
            for key, description in mapping.items():
                pairs.append((str(key), str(description)))
        return pairs

    def always_show_all_logs(self) -> bool:
        return bool(self.show_all_logs_fn()) if self.show_all_logs_fn is not None else False

    def notify_tab_active(self) -> bool:
        if self.tab_active_fn is None:
            return False
        self.tab_active_fn()
        return True


def resolve_kind(handler: object) -> HandlerKind | None:
    """Return the primary capability of ``handler``.

    Interactive is checked before Edit because it is a superset, and
    Execution before Edit so action buttons exposing ``value()`` stay buttons.
    """
    if isinstance(handler, HandlerDisplay):
        return HandlerKind.DISPLAY
    if isinstance(handler, HandlerInteractive):
        return HandlerKind.INTERACTIVE
    if isinstance(handler, HandlerExecution):
        return HandlerKind.EXECUTION
    if isinstance(handler, HandlerEdit):
        return HandlerKind.EDIT
    return None


def _optional_traits(handler: object) -> dict[str, object]:
    traits: dict[str, object] = {}
    if isinstance(handler, Cancelable):
        traits["cancel_fn"] = handler.cancel
    if isinstance(handler, MessageTracker):
        traits["get_operation_id_fn"] = handler.get_last_operation_id
        traits["set_operation_id_fn"] = handler.set_last_operation_id
    if isinstance(handler, TabActivationAware):
        traits["tab_active_fn"] = handler.on_tab_active
    if isinstance(handler, StreamingLoggable):
        traits["show_all_logs_fn"] = handler.always_show_all_logs
    timeout_attr = getattr(handler, "timeout", None)
    if callable(timeout_attr):
        traits["timeout_fn"] = timeout_attr
    return traits


def build_adapter(
    handler: object,
    color: str = "",
    *,
    timeout: float | datetime.timedelta | None = None,
) -> HandlerAdapter | None:
    """Build the field adapter for ``handler``'s primary capability.

    Returns ``None`` when the handler exposes no primary capability (it may
    still be a log-only ``Loggable``).
    """
    kind = resolve_kind(handler)
    if kind is None:
        return None

    traits = _optional_traits(handler)
    common = dict(
        kind=kind,
        color=color or "",
        handler_id=id(handler),
        name_fn=handler.name,
        fixed_timeout=_timeout_seconds(timeout) if timeout is not None else 0.0,
        **traits,
    )

    if kind is HandlerKind.DISPLAY:
        # Display panels never time out and never run operations.
        common["fixed_timeout"] = 0.0
        common.pop("timeout_fn", None)
        return HandlerAdapter(
            value_fn=handler.content,
            content_fn=handler.content,
            **common,
        )

    if kind is HandlerKind.INTERACTIVE:
        return HandlerAdapter(
            label_fn=handler.label,
            value_fn=handler.value,
            change_fn=handler.change,
            waiting_fn=handler.waiting_for_user,
            exposes_value=True,
            **common,
        )

    if kind is HandlerKind.EXECUTION:
        value_attr = getattr(handler, "value", None)
        has_value = callable(value_attr)
        execute = handler.execute
        return HandlerAdapter(
            label_fn=handler.label,
            value_fn=value_attr if has_value else handler.label,
            execute_fn=execute,
            change_fn=lambda _value: execute(),
            exposes_value=has_value,
            **common,
        )

    return HandlerAdapter(
        label_fn=handler.label,
        value_fn=handler.value,
        change_fn=handler.change,
        shortcuts_fn=handler.shortcuts if isinstance(handler, ShortcutProvider) else None,
        exposes_value=True,
        **common,
    )


def build_log_adapter(handler: Loggable, color: str = "") -> HandlerAdapter:
    """Adapter for the log-writing side of a ``Loggable`` handler.

    The kind mirrors the handler's primary capability (interactive or
    display) so its entries are formatted the same way as its field output.
    """
    kind = HandlerKind.LOGGABLE
    primary = resolve_kind(handler)
    if primary in (HandlerKind.INTERACTIVE, HandlerKind.DISPLAY):
        kind = primary
    traits = _optional_traits(handler)
    traits.pop("timeout_fn", None)
    return HandlerAdapter(
        kind=kind,
        color=color or "",
        handler_id=id(handler),
        name_fn=handler.name,
        **traits,
    )


__all__ = [
    "HandlerKind",
    "HandlerAdapter",
    "resolve_kind",
    "build_adapter",
    "build_log_adapter",
]
