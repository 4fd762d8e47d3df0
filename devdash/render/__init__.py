"""Frame rendering for the dashboard: header, scroll-back content, footer.

Frame composition is pure (``build_frame``); ``render_frame`` writes the
composed ANSI frame to the terminal in one call.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field

from ..ansi import display_width, hex_background, pad_ansi_line, wrap_text
from ..field import Field
from ..handlers import HandlerKind
from ..messages import LogEntry, format_time, pad_handler_name
from ..ui_theme import UITheme

PAGINATION_WIDTH = 5
LABEL_WIDTH = 20
SCROLL_ICON_WIDTH = 3
CURSOR_CHAR = "▋"

SCROLL_ALL_VISIBLE = " ■ "
SCROLL_DOWN = " ▼ "
SCROLL_UP = " ▲ "
SCROLL_BOTH = "▼ ▲"


def pagination(index: int, total: int) -> str:
    """`` 1/ 3`` style counter, clamped to two digits per side."""
    shown_total = min(total, 99)
    shown_index = min(index + 1, 99) if total else 0
    return f"{shown_index:>2}/{shown_total:>2}"


def footer_value_width(columns: int) -> int:
    """Columns available to the value box of an editable field."""
    return max(2, columns - PAGINATION_WIDTH - LABEL_WIDTH - SCROLL_ICON_WIDTH - 3)


def footer_text_width(columns: int) -> int:
    """Viewport width for edit text; one column is reserved for the cursor."""
    return max(1, footer_value_width(columns) - 1)


def clamp_scroll(total_lines: int, rows: int, offset: int) -> int:
    """Clamp a from-the-bottom scroll offset to the scrollable range."""
    return max(0, min(offset, max(0, total_lines - max(1, rows))))


def scroll_icon(total_lines: int, rows: int, offset: int) -> str:
    top_hidden = total_lines - rows - offset > 0
    bottom_hidden = offset > 0
    if top_hidden and bottom_hidden:
        return SCROLL_BOTH
    if top_hidden:
        return SCROLL_UP
    if bottom_hidden:
        return SCROLL_DOWN
    return SCROLL_ALL_VISIBLE


def _styled(style: str, text: str, theme: UITheme) -> str:
    if not style:
        return text
    return f"{style}{text}{theme.reset}"


def _name_badge(entry: LogEntry, theme: UITheme) -> str:
    style = theme.handler_name
    if entry.handler_color and theme.reset:
        style = f"\033[1;38;5;231m{hex_background(entry.handler_color)}"
    return _styled(style, pad_handler_name(entry.raw_handler_name), theme)


def format_entry_lines(entry: LogEntry, theme: UITheme, width: int) -> list[str]:
    """Styled screen lines for one entry; wrapped content keeps the prefix indent."""
    message_style = theme.message_style(entry.type)
    if entry.handler_kind is HandlerKind.DISPLAY:
        return [_styled(theme.display, chunk, theme) for chunk in wrap_text(entry.content, width)]

    prefix = _styled(theme.time, format_time(entry.timestamp), theme) + " "
    if entry.handler_kind is not HandlerKind.INTERACTIVE and entry.raw_handler_name:
        prefix += _name_badge(entry, theme) + " "
    indent = display_width(prefix)
    chunks = wrap_text(entry.content, max(1, width - indent))
    lines = [prefix + _styled(message_style, chunks[0], theme)]
    lines.extend(" " * indent + _styled(message_style, chunk, theme) for chunk in chunks[1:])
    return lines


def content_lines(display_content: str, entries: list[LogEntry], theme: UITheme, width: int) -> list[str]:
    """Active display content first, then every entry, oldest to newest."""
    lines: list[str] = []
    if display_content:
        lines.extend(_styled(theme.display, chunk, theme) for chunk in wrap_text(display_content, width))
        lines.append("")
    for entry in entries:
        lines.extend(format_entry_lines(entry, theme, width))
    return lines


@dataclass
class FooterState:
    """What the footer shows for the active field."""

    field_index: int = 0
    field_count: int = 0
    kind: HandlerKind | None = None
    label: str = ""
    text: str = ""
    cursor: int = 0
    editing: bool = False
    running: bool = False


def footer_state(fields: list[Field], active_index: int, editing: bool, columns: int) -> FooterState:
    if not fields:
        return FooterState()
    active = fields[active_index] if 0 <= active_index < len(fields) else fields[0]
    state = FooterState(
        field_index=active.index,
        field_count=len(fields),
        kind=active.adapter.kind,
        editing=editing and active.editable(),
        running=active.executor.is_running,
    )
    if active.is_display_only or active.is_execution:
        state.label = active.footer_label()
        return state
    state.label = active.label()
    state.text, state.cursor = active.visible_window(state.editing, footer_text_width(columns))
    return state


@dataclass
class RenderContext:
    theme: UITheme
    width: int
    height: int
    app_name: str
    tab_title: str
    tab_index: int
    tab_count: int
    lines: list[str] = field(default_factory=list)
    scroll_offset: int = 0
    footer: FooterState = field(default_factory=FooterState)
    cursor_visible: bool = True

    @property
    def content_rows(self) -> int:
        return max(1, self.height - 2)


def _header(ctx: RenderContext) -> str:
    theme = ctx.theme
    page = " " + pagination(ctx.tab_index, ctx.tab_count)
    title_width = max(1, ctx.width - len(page) - 1)
    title = pad_ansi_line(f" {ctx.app_name}/{ctx.tab_title}", title_width)
    return _styled(theme.header, title, theme) + " " + _styled(theme.pagination, page, theme)


def _footer(ctx: RenderContext, icon: str) -> str:
    theme = ctx.theme
    state = ctx.footer
    counter = _styled(theme.pagination, pagination(state.field_index, state.field_count), theme)
    wide = max(1, ctx.width - PAGINATION_WIDTH - SCROLL_ICON_WIDTH - 2)
    if state.kind is None:
        body = " " * wide
    elif state.kind in (HandlerKind.DISPLAY, HandlerKind.EXECUTION):
        style = theme.action if state.kind is HandlerKind.EXECUTION else theme.label
        body = _styled(style, pad_ansi_line(f" {state.label}", wide), theme)
    else:
        label_style = theme.label_active if state.editing else theme.label
        label = _styled(label_style, pad_ansi_line(f" {state.label}", LABEL_WIDTH), theme)
        value_width = max(1, wide - LABEL_WIDTH - 1)
        text = state.text
        if state.editing:
            mark = CURSOR_CHAR if ctx.cursor_visible else " "
            text = text[: state.cursor] + mark + text[state.cursor :]
        value_style = theme.value_editing if state.editing else theme.value
        value = _styled(value_style, pad_ansi_line(text, value_width), theme)
        body = f"{label} {value}"
    return f"{counter} {body} {_styled(theme.pagination, icon, theme)}"


def build_frame(ctx: RenderContext) -> str:
    """Compose one full-screen frame (cursor home, clear, rows joined by CRLF)."""
    rows = ctx.content_rows
    total = len(ctx.lines)
    offset = clamp_scroll(total, rows, ctx.scroll_offset)
    end = total - offset
    visible = ctx.lines[max(0, end - rows) : end]

    out: list[str] = ["\033[H\033[J", _header(ctx), "\r\n"]
    for row in range(rows):
        line = visible[row] if row < len(visible) else ""
        out.append(pad_ansi_line(line, ctx.width))
        if "\033" in line:
            out.append("\033[0m")
        out.append("\r\n")
    out.append(_footer(ctx, scroll_icon(total, rows, offset)))
    return "".join(out)


def render_frame(ctx: RenderContext, fd: int | None = None) -> None:
    target = sys.stdout.fileno() if fd is None else fd
    os.write(target, build_frame(ctx).encode("utf-8", errors="replace"))
