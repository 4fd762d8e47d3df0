"""Plain-text rendering of log entries (no ANSI codes)."""

from __future__ import annotations

from ..handlers import HandlerKind
from .ids import format_time
from .types import LogEntry

TIMESTAMP_COLUMN_WIDTH = 9
UI_COLUMN_WIDTH = 24
HANDLER_NAME_WIDTH = UI_COLUMN_WIDTH - TIMESTAMP_COLUMN_WIDTH


def pad_handler_name(name: str, width: int = HANDLER_NAME_WIDTH) -> str:
    """Center ``name`` in ``width`` columns, truncating when it is too long."""
    if len(name) >= width:
        return name[:width]
    padding = width - len(name)
    left = padding // 2
    return " " * left + name + " " * (padding - left)


def format_entry_plain(entry: LogEntry) -> str:
    if entry.handler_kind is HandlerKind.DISPLAY:
        return entry.content
    time_str = format_time(entry.timestamp)
    if entry.handler_kind is HandlerKind.INTERACTIVE:
        return f"{time_str} {entry.content}"
    if not entry.raw_handler_name:
        return f"{time_str} {entry.content}"
    return f"{time_str} {pad_handler_name(entry.raw_handler_name)} {entry.content}"
