"""Horizontal scrolling window for single-line text input.

Offsets are rune (code point) indices, so multi-byte text scrolls by
characters rather than bytes.
"""

from __future__ import annotations


class TextViewport:
    """Track the first visible character of an edited value."""

    def __init__(self) -> None:
        self.view_start = 0

    def adjust_view_for_cursor(self, text_len: int, cursor: int, view_width: int) -> None:
        """Scroll only when ``cursor`` leaves ``[view_start, view_start + view_width]``.

        The cursor may sit exactly on the right edge (one past the last
        visible character) without scrolling.
        """
        if view_width <= 0:
            return

        if cursor < self.view_start:
            self.view_start = cursor
        if cursor > self.view_start + view_width:
            self.view_start = cursor - view_width

        self.view_start = max(0, min(self.view_start, text_len))
        if text_len <= view_width:
            self.view_start = 0

    def calculate_visible_window(self, text: str, cursor: int, view_width: int) -> tuple[str, int]:
        """Return ``(visible_text, cursor_in_window)`` and update ``view_start``."""
        if view_width <= 0:
            return "", 0
        text_len = len(text)
        self.adjust_view_for_cursor(text_len, cursor, view_width)
        end = min(self.view_start + view_width, text_len)
        return text[self.view_start:end], cursor - self.view_start

    def reset(self) -> None:
        self.view_start = 0
