"""Per-handler field: transient edit buffer, cursor and operation state."""

from __future__ import annotations

import logging

from ..handlers import HandlerKind
from .adapter import HandlerAdapter
from .executor import AsyncExecutor, OperationHandle, Publisher
from .viewport import TextViewport

logger = logging.getLogger(__name__)


class Field:
    """Binds one adapter to a position in a tab.

    ``temp_edit_value`` is only meaningful while edit mode is open. All cursor
    arithmetic is in code points, with ``0 <= cursor <= len(temp_edit_value)``.
    The owning tab is referenced by index only.
    """

    def __init__(self, adapter: HandlerAdapter, index: int, tab_index: int, executor: AsyncExecutor) -> None:
        self.adapter = adapter
        self.index = index
        self.tab_index = tab_index
        self.executor = executor
        self.temp_edit_value = ""
        self.cursor = 0
        self.viewport = TextViewport()

    def __repr__(self) -> str:
        return f"Field(index={self.index}, tab={self.tab_index}, kind={self.adapter.kind.value}, name={self.adapter.name()!r})"

    @property
    def operation(self):
        return self.executor.operation

    def value(self) -> str:
        """Handler value, or ``""`` when the handler raises."""
        try:
            return self.adapter.value()
        except Exception:
            logger.exception("handler %r raised in value()", self.adapter.name())
            return ""

    def label(self) -> str:
        try:
            return self.adapter.label()
        except Exception:
            logger.exception("handler %r raised in label()", self.adapter.name())
            return ""

    def editable(self) -> bool:
        return self.adapter.editable()

    @property
    def is_display_only(self) -> bool:
        return self.adapter.kind is HandlerKind.DISPLAY

    @property
    def is_execution(self) -> bool:
        return self.adapter.kind is HandlerKind.EXECUTION

    @property
    def is_interactive(self) -> bool:
        return self.adapter.kind is HandlerKind.INTERACTIVE

    def should_auto_activate_edit_mode(self) -> bool:
        return self.is_interactive and self.adapter.waiting_for_user()

    def display_content(self) -> str:
        return self.adapter.content() if self.is_display_only else ""

    def footer_label(self) -> str:
        """Text shown across the footer value area for display and action fields."""
        if self.is_display_only:
            return self.adapter.name()
        if self.is_execution:
            return self.label()
        return ""

    def current_tracking_key(self) -> str:
        return self.executor.current_tracking_key() or self.adapter.tracking_key()

    # Edit buffer -----------------------------------------------------------

    def begin_edit(self) -> None:
        """Seed the edit buffer from the handler and put the cursor at the end."""
        self.temp_edit_value = self.value()
        self.cursor = len(self.temp_edit_value)
        self.viewport.reset()

    def end_edit(self) -> None:
        self.temp_edit_value = ""
        self.cursor = len(self.value())
        self.viewport.reset()

    def has_changes(self) -> bool:
        return self.temp_edit_value != self.value()

    def _clamp_cursor(self) -> None:
        self.cursor = max(0, min(self.cursor, len(self.temp_edit_value)))

    def move_cursor_left(self, view_width: int) -> None:
        if self.cursor > 0:
            self.cursor -= 1
            self.viewport.adjust_view_for_cursor(len(self.temp_edit_value), self.cursor, view_width)

    def move_cursor_right(self, view_width: int) -> None:
        if self.cursor < len(self.temp_edit_value):
            self.cursor += 1
            self.viewport.adjust_view_for_cursor(len(self.temp_edit_value), self.cursor, view_width)

    def backspace(self, view_width: int) -> None:
        self._clamp_cursor()
        if self.cursor == 0:
            return
        text = self.temp_edit_value
        self.temp_edit_value = text[: self.cursor - 1] + text[self.cursor :]
        self.cursor -= 1
        self.viewport.adjust_view_for_cursor(len(self.temp_edit_value), self.cursor, view_width)

    def insert(self, text: str, view_width: int) -> None:
        if not text:
            return
        self._clamp_cursor()
        current = self.temp_edit_value
        self.temp_edit_value = current[: self.cursor] + text + current[self.cursor :]
        self.cursor += len(text)
        self.viewport.adjust_view_for_cursor(len(self.temp_edit_value), self.cursor, view_width)

    def visible_window(self, editing: bool, view_width: int) -> tuple[str, int]:
        """Visible slice of the edit buffer (or current value) and cursor offset in it."""
        if editing:
            return self.viewport.calculate_visible_window(self.temp_edit_value, self.cursor, view_width)
        text = self.value()
        return self.viewport.calculate_visible_window(text, min(self.cursor, len(text)), view_width)

    # Operations ------------------------------------------------------------

    def run(self, value: str, publish: Publisher) -> OperationHandle | None:
        """Start an operation for ``value``; ``None`` for display fields or while busy."""
        if self.is_display_only or self.executor.is_running:
            return None
        return self.executor.run(self.adapter, value, publish)
