"""Keyboard state machine: Normal navigation vs. field Editing.

The dispatcher runs on the loop thread only. It mutates tab and field state
directly and launches operations through the owning tab; operation
completion comes back as ``OperationSettledEvent``s from the event queue.
"""

from __future__ import annotations

import logging
import sys
import threading
from collections.abc import Callable

from ..field import Field
from ..runtime.events import OperationSettledEvent
from ..shortcuts import ShortcutEntry, ShortcutRegistry
from ..tabs import TabSection
from .key_registry import KeyBinding, KeyBindingTable

logger = logging.getLogger(__name__)

DEFAULT_VIEW_WIDTH = 40
DEFAULT_PAGE_HEIGHT = 10


def _is_printable(key: str) -> bool:
    return len(key) == 1 and key.isprintable()


class KeyboardDispatcher:
    """Routes key tokens to navigation, editing, commits and shortcuts."""

    def __init__(
        self,
        tabs: list[TabSection],
        *,
        shortcuts: ShortcutRegistry,
        exit_event: threading.Event,
        view_width: Callable[[Field], int] | None = None,
        page_height: Callable[[], int] | None = None,
    ) -> None:
        self.tabs = tabs
        self.shortcuts = shortcuts
        self.exit_event = exit_event
        self._view_width = view_width or (lambda _field: DEFAULT_VIEW_WIDTH)
        self._page_height = page_height or (lambda: DEFAULT_PAGE_HEIGHT)
        self.active_tab_index = 0
        self.editing = False
        # Interactive field whose commit is still running; edit mode stays open.
        self._awaiting: Field | None = None

        scroll = (
            KeyBinding(("UP",), lambda: self._scroll(1)),
            KeyBinding(("DOWN",), lambda: self._scroll(-1)),
            KeyBinding(("PAGE_UP",), lambda: self._scroll(self._page())),
            KeyBinding(("PAGE_DOWN",), lambda: self._scroll(-self._page())),
            KeyBinding(("HOME",), lambda: self._scroll_to(sys.maxsize)),
            KeyBinding(("END",), lambda: self._scroll_to(0)),
        )
        self._normal_keys = KeyBindingTable(
            *scroll,
            KeyBinding(("LEFT",), lambda: self._cycle_field(-1)),
            KeyBinding(("RIGHT",), lambda: self._cycle_field(1)),
            KeyBinding(("TAB",), lambda: self._cycle_tab(1)),
            KeyBinding(("SHIFT_TAB",), lambda: self._cycle_tab(-1)),
            KeyBinding(("ENTER",), self._enter_normal),
        )
        self._editing_keys = KeyBindingTable(
            *scroll,
            KeyBinding(("LEFT",), self._cursor_left),
            KeyBinding(("RIGHT",), self._cursor_right),
            KeyBinding(("BACKSPACE",), self._backspace),
            KeyBinding(("ENTER",), self._commit),
            KeyBinding(("ESC",), self._cancel_edit),
        )

    # State -----------------------------------------------------------------

    @property
    def active_tab(self) -> TabSection | None:
        if not self.tabs:
            return None
        if not 0 <= self.active_tab_index < len(self.tabs):
            self.active_tab_index = 0
        return self.tabs[self.active_tab_index]

    @property
    def active_field(self) -> Field | None:
        tab = self.active_tab
        return tab.active_field if tab is not None else None

    @property
    def awaiting_operation(self) -> bool:
        return self._awaiting is not None

    def handle_key(self, key: str) -> bool:
        """Process one key token; returns ``True`` when the dashboard should quit."""
        if not key:
            return False
        if key == "CTRL_C":
            self.exit_event.set()
            return True
        if self.editing:
            self._handle_editing(key)
        else:
            self._handle_normal(key)
        return False

    # Normal mode -----------------------------------------------------------

    def _handle_normal(self, key: str) -> None:
        if self._normal_keys.dispatch(key) is not None:
            return
        if _is_printable(key):
            entry = self.shortcuts.get(key)
            if entry is not None:
                self.execute_shortcut(entry)

    def _page(self) -> int:
        return max(1, int(self._page_height()))

    def _scroll(self, delta: int) -> bool:
        tab = self.active_tab
        if tab is not None:
            tab.scroll_offset = max(0, tab.scroll_offset + delta)
        return True

    def _scroll_to(self, offset: int) -> bool:
        tab = self.active_tab
        if tab is not None:
            tab.scroll_offset = offset
        return True

    def _cycle_field(self, step: int) -> bool:
        tab = self.active_tab
        if tab is None or tab.cycle_field(step) is None:
            return True
        self.check_interactive_content()
        return True

    def _cycle_tab(self, step: int) -> bool:
        if self.tabs:
            self.switch_tab((self.active_tab_index + step) % len(self.tabs))
        return True

    def switch_tab(self, index: int, *, trigger_interactive: bool = True) -> bool:
        """Activate tab ``index`` and notify its tab-aware handlers."""
        if not 0 <= index < len(self.tabs):
            return False
        self.active_tab_index = index
        tab = self.tabs[index]
        tab.notify_tab_active()
        if trigger_interactive:
            self.check_interactive_content()
        return True

    def check_interactive_content(self) -> None:
        """Enter edit mode for a waiting interactive field, else ask it to show content."""
        if self.editing:
            return
        tab = self.active_tab
        field = self.active_field
        if tab is None or field is None or not field.is_interactive:
            return
        if self._waiting(field):
            self._open_edit(field)
            return
        tab.call_handler(field, "")

    def _enter_normal(self) -> bool:
        tab = self.active_tab
        field = self.active_field
        if tab is None or field is None:
            return True
        if field.editable():
            self._open_edit(field)
        elif field.is_execution:
            tab.run_field(field, field.value())
        return True

    def execute_shortcut(self, entry: ShortcutEntry) -> bool:
        """Navigate to the bound field and call its ``change`` synchronously."""
        if not 0 <= entry.tab_index < len(self.tabs):
            logger.warning("shortcut %r: invalid tab index %d", entry.key, entry.tab_index)
            return False
        tab = self.tabs[entry.tab_index]
        if not 0 <= entry.field_index < len(tab.fields):
            logger.warning("shortcut %r: invalid field index %d", entry.key, entry.field_index)
            return False
        self.active_tab_index = entry.tab_index
        tab.set_active_field(entry.field_index)
        return tab.call_handler(tab.fields[entry.field_index], entry.value)

    # Editing mode ----------------------------------------------------------

    def _open_edit(self, field: Field) -> None:
        field.begin_edit()
        self.editing = True

    def _close_edit(self, field: Field | None) -> None:
        if field is not None:
            field.end_edit()
        self.editing = False
        self._awaiting = None

    def _waiting(self, field: Field) -> bool:
        try:
            return field.should_auto_activate_edit_mode()
        except Exception:
            logger.exception("handler %r raised in waiting_for_user", field.adapter.name())
            return False

    def _handle_editing(self, key: str) -> None:
        field = self.active_field
        if field is None:
            self._close_edit(None)
            return
        if not field.editable():
            # Action fields only know Enter and Esc while edit mode is open.
            if key == "ENTER":
                tab = self.active_tab
                if tab is not None:
                    tab.run_field(field, field.value())
                self._close_edit(field)
            elif key == "ESC":
                self._close_edit(field)
            return
        if self._editing_keys.dispatch(key) is not None:
            return
        if self._awaiting is None and _is_printable(key):
            field.insert(key, self._width(field))

    def _width(self, field: Field) -> int:
        return max(1, int(self._view_width(field)))

    def _cursor_left(self) -> bool:
        field = self.active_field
        if field is not None and self._awaiting is None:
            field.move_cursor_left(self._width(field))
        return True

    def _cursor_right(self) -> bool:
        field = self.active_field
        if field is not None and self._awaiting is None:
            field.move_cursor_right(self._width(field))
        return True

    def _backspace(self) -> bool:
        field = self.active_field
        if field is not None and self._awaiting is None:
            field.backspace(self._width(field))
        return True

    def _commit(self) -> bool:
        tab = self.active_tab
        field = self.active_field
        if tab is None or field is None:
            self._close_edit(None)
            return True
        if self._awaiting is not None:
            logger.debug("commit ignored: %r still running", self._awaiting)
            return True
        if not (field.is_interactive or field.has_changes()):
            self._close_edit(field)
            return True

        handle = tab.run_field(field, field.temp_edit_value)
        if handle is None:
            return True
        if field.is_interactive:
            self._awaiting = field
            return True
        self._close_edit(field)
        return True

    def _cancel_edit(self) -> bool:
        field = self.active_field
        if field is not None:
            try:
                field.adapter.cancel()
            except Exception:
                logger.exception("handler %r raised in cancel()", field.adapter.name())
            field.executor.cancel()
        self._close_edit(field)
        return True

    def on_operation_settled(self, event: OperationSettledEvent) -> None:
        """Reseed a still-waiting interactive field, or close its edit mode."""
        field = self._awaiting
        if field is None or field.tab_index != event.tab_index or field.index != event.field_index:
            return
        self._awaiting = None
        if not self.editing:
            return
        if self._waiting(field):
            field.begin_edit()
        else:
            self._close_edit(field)
