"""Terminal control for the dashboard session.

Owns the raw-mode lifecycle, alternate screen and cursor visibility.
"""

from __future__ import annotations

import contextlib
import os
import shutil
import termios
import tty

ENTER_TUI = b"\x1b[?1049h\x1b[?25l"
LEAVE_TUI = b"\x1b[?25h\x1b[?1049l"


class TerminalController:
    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)

    def enable_tui_mode(self) -> None:
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        os.write(self.stdout_fd, ENTER_TUI)

    def disable_tui_mode(self) -> None:
        os.write(self.stdout_fd, LEAVE_TUI)
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    @staticmethod
    def size() -> tuple[int, int]:
        """Current ``(columns, lines)``, 80x24 when unknown."""
        term = shutil.get_terminal_size((80, 24))
        return term.columns, term.lines

    @contextlib.contextmanager
    def raw_mode(self):
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()
