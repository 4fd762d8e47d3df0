"""Dashboard runtime: tab ownership, handler registration and the event pump.

``DevDash`` is the only owner of its tabs. Tabs, fields and sinks reach
shared services through ``TabServices``; nothing below holds the runtime.
"""

from __future__ import annotations

import datetime
import logging
import os
import sys
import threading
import time

from ..errors import RegistrationError
from ..field import Field
from ..help_tab import SHORTCUTS_TAB_DESCRIPTION, SHORTCUTS_TAB_TITLE, ShortcutsGuide
from ..input import KeyboardDispatcher
from ..messages import UnixId
from ..render import RenderContext, clamp_scroll, content_lines, footer_state, footer_text_width, render_frame
from ..shortcuts import ShortcutRegistry
from ..tabs import TabSection, TabServices
from ..ui_theme import UITheme, resolve_theme
from .config import DashboardConfig
from .events import EventQueue, OperationSettledEvent, RefreshEvent

logger = logging.getLogger(__name__)


class DevDash:
    """Tabbed terminal dashboard hosting registered handlers."""

    def __init__(self, config: DashboardConfig | None = None) -> None:
        self.config = config if config is not None else DashboardConfig()
        self.theme: UITheme = resolve_theme(self.config.theme, no_color=self.config.no_color)
        self.exit_event = threading.Event()
        self._services = TabServices(
            ids=UnixId(),
            events=EventQueue(self.config.queue_capacity),
            shortcuts=ShortcutRegistry(),
            debug=self.config.debug,
            log_capacity=self.config.log_capacity,
            animation_interval=self.config.animation_interval,
        )
        self.tabs: list[TabSection] = []
        self.columns, self.lines = 80, 24
        self.dirty = True
        self.dispatcher = KeyboardDispatcher(
            self.tabs,
            shortcuts=self._services.shortcuts,
            exit_event=self.exit_event,
            view_width=lambda _field: footer_text_width(self.columns),
            page_height=lambda: max(1, self.lines - 2),
        )
        if self.config.show_shortcuts_tab:
            help_tab = self.new_tab_section(SHORTCUTS_TAB_TITLE, SHORTCUTS_TAB_DESCRIPTION)
            self.add_handler(ShortcutsGuide(self.config.app_name, self._services.shortcuts), "", help_tab)

    @property
    def shortcuts(self) -> ShortcutRegistry:
        return self._services.shortcuts

    @property
    def events(self) -> EventQueue:
        return self._services.events

    @property
    def active_tab(self) -> TabSection | None:
        return self.dispatcher.active_tab

    # Wiring ----------------------------------------------------------------

    def new_tab_section(self, title: str, description: str = "") -> TabSection:
        tab = TabSection(title, description, len(self.tabs), self._services)
        self.tabs.append(tab)
        return tab

    def _validate_tab(self, tab: object, method: str) -> TabSection:
        usage = f"Usage: tab = dash.new_tab_section(...); dash.{method}(..., tab)"
        if tab is None:
            raise RegistrationError(f"DevDash.{method}: tab section is None\n{usage}")
        if not isinstance(tab, TabSection):
            raise RegistrationError(
                f"DevDash.{method}: invalid tab section type {type(tab).__name__}\n"
                f"Expected: value returned by dash.new_tab_section()\n{usage}"
            )
        if tab.services is not self._services or tab not in self.tabs:
            raise RegistrationError(
                f"DevDash.{method}: tab section {tab.title!r} belongs to a different DevDash instance\n"
                "Each tab section can only be used with the DevDash that created it"
            )
        return tab

    def add_handler(
        self,
        handler: object,
        color: str,
        tab: object,
        *,
        timeout: float | datetime.timedelta | None = None,
    ) -> Field | None:
        """Register ``handler`` in ``tab``; raises ``RegistrationError`` on misuse."""
        section = self._validate_tab(tab, "add_handler")
        field = section.add_handler(handler, color, timeout=timeout)
        self.dirty = True
        return field

    def set_active_tab(self, tab: object) -> None:
        if not isinstance(tab, TabSection) or tab not in self.tabs:
            logger.warning("set_active_tab: ignoring unknown tab %r", tab)
            return
        self.dispatcher.switch_tab(tab.index, trigger_interactive=False)
        self.refresh_ui()

    def refresh_ui(self) -> None:
        """Ask the loop to redraw; safe from any thread."""
        self._services.events.post(RefreshEvent())

    def section_titles(self) -> list[str]:
        return [tab.title for tab in self.tabs]

    def tab_logs_plain(self, tab: TabSection) -> str:
        return tab.logs_plain()

    def export_tab_logs(self, title: str) -> str | None:
        """Plain-text log of the tab named ``title``; ``None`` if there is none."""
        for tab in self.tabs:
            if tab.title == title:
                return tab.logs_plain()
        return None

    # Loop-thread operations ------------------------------------------------

    def pump_events(self, timeout: float | None = None) -> int:
        """Apply queued events on the caller's thread; returns how many ran.

        With ``timeout``, waits up to that long for the first event.
        """
        events = []
        if timeout is not None:
            first = self._services.events.get(timeout)
            if first is not None:
                events.append(first)
        events.extend(self._services.events.drain())
        for event in events:
            if isinstance(event, OperationSettledEvent):
                self.dispatcher.on_operation_settled(event)
        if events:
            self.dirty = True
        return len(events)

    def handle_key(self, key: str) -> bool:
        """Feed one key token to the dispatcher; returns ``True`` to quit."""
        if not key:
            return False
        self.dirty = True
        return self.dispatcher.handle_key(key)

    def start(self) -> None:
        """Activate the current tab as if the user had just switched to it."""
        if self.tabs:
            self.dispatcher.switch_tab(self.dispatcher.active_tab_index)

    def resize(self, columns: int, lines: int) -> None:
        self.columns = max(20, columns)
        self.lines = max(4, lines)
        self.dirty = True

    def build_context(self, cursor_visible: bool = True) -> RenderContext:
        tab = self.active_tab
        ctx = RenderContext(
            theme=self.theme,
            width=self.columns,
            height=self.lines,
            app_name=self.config.app_name,
            tab_title=tab.title if tab is not None else "",
            tab_index=self.dispatcher.active_tab_index,
            tab_count=len(self.tabs),
            cursor_visible=cursor_visible,
        )
        if tab is None:
            return ctx
        ctx.lines = content_lines(tab.display_content(), tab.log.snapshot(), self.theme, self.columns)
        tab.scroll_offset = clamp_scroll(len(ctx.lines), ctx.content_rows, tab.scroll_offset)
        ctx.scroll_offset = tab.scroll_offset
        ctx.footer = footer_state(tab.fields, tab.active_field_index, self.dispatcher.editing, self.columns)
        return ctx

    def render(self, fd: int | None = None, cursor_visible: bool = True) -> None:
        render_frame(self.build_context(cursor_visible), fd)
        self.dirty = False

    def run(self) -> None:
        """Run the interactive terminal session until Ctrl+C."""
        from .loop import RuntimeLoopTiming, run_main_loop
        from .terminal import TerminalController

        stdin_fd = sys.stdin.fileno()
        stdout_fd = sys.stdout.fileno()
        if not os.isatty(stdin_fd):
            raise RuntimeError("devdash needs an interactive terminal on stdin")
        terminal = TerminalController(stdin_fd, stdout_fd)
        timing = RuntimeLoopTiming(
            key_timeout_ms=self.config.key_timeout_ms,
            cursor_blink_seconds=self.config.cursor_blink_seconds,
        )
        started = time.monotonic()
        try:
            self.start()
            run_main_loop(self, terminal, stdin_fd, timing)
        finally:
            self.close()
            logger.info("session ended after %.1fs", time.monotonic() - started)

    def close(self) -> None:
        self.exit_event.set()
        for tab in self.tabs:
            tab.close()

