"""ANSI-aware text measurement, clipping and wrapping.

Widths are terminal columns: escape sequences count zero, East Asian
wide characters count two.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
_HEX_COLOR_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")
RESET = "\033[0m"


def char_display_width(ch: str) -> int:
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


def display_width(text: str) -> int:
    return sum(char_display_width(ch) for ch in strip_ansi(text))


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` columns, keeping escapes."""
    if max_cols <= 0 or not text:
        return ""
    out: list[str] = []
    col = 0
    i = 0
    while i < len(text):
        match = ANSI_ESCAPE_RE.match(text, i) if text[i] == "\x1b" else None
        if match:
            out.append(match.group(0))
            i = match.end()
            continue
        w = char_display_width(text[i])
        if col + w > max_cols:
            break
        out.append(text[i])
        col += w
        i += 1
    return "".join(out)


def pad_ansi_line(text: str, width: int) -> str:
    """Clip or right-pad ``text`` to exactly ``width`` columns."""
    clipped = clip_ansi_line(text, width)
    return clipped + " " * max(0, width - display_width(clipped))


def wrap_text(text: str, width: int) -> list[str]:
    """Hard-wrap unstyled ``text`` into chunks of at most ``width`` columns.

    Embedded newlines start new chunks; tabs become four spaces.
    """
    if width <= 0:
        return [text]
    wrapped: list[str] = []
    for line in text.replace("\t", "    ").split("\n"):
        chunk: list[str] = []
        col = 0
        for ch in line:
            w = char_display_width(ch)
            if col + w > width and chunk:
                wrapped.append("".join(chunk))
                chunk = []
                col = 0
            chunk.append(ch)
            col += w
        wrapped.append("".join(chunk))
    return wrapped


def hex_to_rgb(color: str) -> tuple[int, int, int] | None:
    match = _HEX_COLOR_RE.match(color.strip()) if color else None
    if match is None:
        return None
    raw = match.group(1)
    return int(raw[0:2], 16), int(raw[2:4], 16), int(raw[4:6], 16)


def hex_background(color: str) -> str:
    """24-bit background SGR for ``#rrggbb``; ``""`` for anything else."""
    rgb = hex_to_rgb(color)
    if rgb is None:
        return ""
    return "\033[48;2;{};{};{}m".format(*rgb)
