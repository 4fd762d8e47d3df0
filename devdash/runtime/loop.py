"""Main interactive event loop for the dashboard.

Each iteration applies queued events, redraws when something changed and
waits briefly for one key. Handler work never runs here.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..input import read_key
from .terminal import TerminalController

if TYPE_CHECKING:
    from .app import DevDash


@dataclass(frozen=True)
class RuntimeLoopTiming:
    """Timing constants controlling interactive loop behavior."""

    key_timeout_ms: int
    cursor_blink_seconds: float


def run_main_loop(
    dash: DevDash,
    terminal: TerminalController,
    stdin_fd: int,
    timing: RuntimeLoopTiming,
) -> None:
    """Run until Ctrl+C or until ``dash.exit_event`` is set from elsewhere."""
    cursor_visible = True
    with terminal.raw_mode():
        while not dash.exit_event.is_set():
            columns, lines = terminal.size()
            if (columns, lines) != (dash.columns, dash.lines):
                dash.resize(columns, lines)

            dash.pump_events()

            if dash.dispatcher.editing:
                blink_phase = (int(time.monotonic() / timing.cursor_blink_seconds) % 2) == 0
                if blink_phase != cursor_visible:
                    cursor_visible = blink_phase
                    dash.dirty = True
            elif not cursor_visible:
                cursor_visible = True
                dash.dirty = True

            if dash.dirty:
                dash.render(terminal.stdout_fd, cursor_visible)

            key = read_key(stdin_fd, timeout_ms=timing.key_timeout_ms)
            if key and dash.handle_key(key):
                break
