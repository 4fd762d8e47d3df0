"""Frame composition tests: layout helpers, entry formatting and footer."""

from __future__ import annotations

import unittest
from unittest import mock

from devdash.handlers import HandlerKind
from devdash.messages import LogEntry, UnixId
from devdash.render import (
    CURSOR_CHAR,
    SCROLL_ALL_VISIBLE,
    SCROLL_BOTH,
    SCROLL_DOWN,
    SCROLL_UP,
    RenderContext,
    build_frame,
    clamp_scroll,
    content_lines,
    footer_state,
    footer_text_width,
    footer_value_width,
    format_entry_lines,
    pagination,
    render_frame,
    scroll_icon,
)
from devdash.runtime.events import EventQueue
from devdash.shortcuts import ShortcutRegistry
from devdash.tabs import TabSection, TabServices
from devdash.ui_theme import DEFAULT_THEME, PLAIN_THEME


def entry(content: str, kind: HandlerKind = HandlerKind.LOGGABLE, name: str = "build", color: str = "") -> LogEntry:
    return LogEntry(
        id="1",
        timestamp="",
        content=content,
        raw_handler_name=name,
        handler_color=color,
        handler_kind=kind,
    )


class Mode:
    def __init__(self) -> None:
        self.val = "prod"

    def name(self) -> str:
        return "mode"

    def label(self) -> str:
        return "Mode"

    def value(self) -> str:
        return self.val

    def change(self, new_value: str) -> None:
        self.val = new_value


class LayoutHelperTests(unittest.TestCase):
    def test_pagination(self) -> None:
        self.assertEqual(pagination(0, 3), " 1/ 3")
        self.assertEqual(pagination(0, 0), " 0/ 0")
        self.assertEqual(pagination(150, 200), "99/99")

    def test_footer_widths(self) -> None:
        self.assertEqual(footer_value_width(80), 49)
        self.assertEqual(footer_text_width(80), 48)
        self.assertEqual(footer_value_width(10), 2)

    def test_clamp_scroll(self) -> None:
        self.assertEqual(clamp_scroll(10, 5, 100), 5)
        self.assertEqual(clamp_scroll(3, 5, 2), 0)
        self.assertEqual(clamp_scroll(10, 5, -4), 0)

    def test_scroll_icon(self) -> None:
        self.assertEqual(scroll_icon(3, 5, 0), SCROLL_ALL_VISIBLE)
        self.assertEqual(scroll_icon(10, 5, 0), SCROLL_UP)
        self.assertEqual(scroll_icon(10, 5, 5), SCROLL_DOWN)
        self.assertEqual(scroll_icon(10, 5, 2), SCROLL_BOTH)


class EntryFormattingTests(unittest.TestCase):
    def test_display_entries_show_content_only(self) -> None:
        lines = format_entry_lines(entry("panel", HandlerKind.DISPLAY), PLAIN_THEME, 40)
        self.assertEqual(lines, ["panel"])

    def test_interactive_entries_have_no_name_badge(self) -> None:
        lines = format_entry_lines(entry("Step 1", HandlerKind.INTERACTIVE), PLAIN_THEME, 40)
        self.assertEqual(lines, ["--:--:-- Step 1"])

    def test_wrapped_lines_keep_prefix_indent(self) -> None:
        lines = format_entry_lines(entry("abcdefghijklmnopqrst"), PLAIN_THEME, 40)

        prefix = "--:--:--      build      "
        self.assertEqual(lines[0], prefix + "abcdefghijklmno")
        self.assertEqual(lines[1], " " * len(prefix) + "pqrst")

    def test_handler_color_becomes_badge_background(self) -> None:
        lines = format_entry_lines(entry("ok", color="#ff0000"), DEFAULT_THEME, 60)
        self.assertIn("\033[48;2;255;0;0m", lines[0])

    def test_plain_theme_ignores_handler_color(self) -> None:
        lines = format_entry_lines(entry("ok", color="#ff0000"), PLAIN_THEME, 60)
        self.assertNotIn("\033", lines[0])

    def test_content_lines_put_display_content_first(self) -> None:
        lines = content_lines("Panel", [entry("hello")], PLAIN_THEME, 60)
        self.assertEqual(lines[:2], ["Panel", ""])
        self.assertTrue(lines[2].endswith("hello"))


class FrameTests(unittest.TestCase):
    def make_ctx(self, lines: list[str], **kwargs) -> RenderContext:
        return RenderContext(
            theme=PLAIN_THEME,
            width=40,
            height=5,
            app_name="DevDash",
            tab_title="BUILD",
            tab_index=0,
            tab_count=2,
            lines=lines,
            **kwargs,
        )

    def split(self, frame: str) -> list[str]:
        self.assertTrue(frame.startswith("\033[H\033[J"))
        return frame[len("\033[H\033[J") :].split("\r\n")

    def test_frame_has_header_rows_and_footer(self) -> None:
        rows = self.split(build_frame(self.make_ctx(["one", "two"])))

        self.assertEqual(len(rows), 5)
        self.assertTrue(rows[0].startswith(" DevDash/BUILD"))
        self.assertTrue(rows[0].endswith(" 1/ 2"))
        self.assertEqual(rows[1].rstrip(), "one")
        self.assertEqual(rows[2].rstrip(), "two")
        self.assertEqual(rows[3], " " * 40)
        self.assertTrue(rows[4].endswith(SCROLL_ALL_VISIBLE))
        self.assertTrue(all(len(row) == 40 for row in rows))

    def test_scroll_offset_counts_from_the_bottom(self) -> None:
        lines = [f"line {n}" for n in range(10)]
        rows = self.split(build_frame(self.make_ctx(lines, scroll_offset=2)))

        self.assertEqual([row.rstrip() for row in rows[1:4]], ["line 5", "line 6", "line 7"])
        self.assertTrue(rows[4].endswith(SCROLL_BOTH))

    def test_footer_shows_cursor_while_editing(self) -> None:
        services = TabServices(ids=UnixId(), events=EventQueue(), shortcuts=ShortcutRegistry())
        tab = TabSection("T", "", 0, services)
        field = tab.add_handler(Mode())
        field.begin_edit()

        state = footer_state(tab.fields, 0, True, 80)
        self.assertEqual((state.label, state.text, state.cursor), ("Mode", "prod", 4))

        ctx = self.make_ctx([], footer=state)
        ctx.width = 80
        footer = self.split(build_frame(ctx))[-1]
        self.assertIn("prod" + CURSOR_CHAR, footer)

        ctx.cursor_visible = False
        footer = self.split(build_frame(ctx))[-1]
        self.assertNotIn(CURSOR_CHAR, footer)

    def test_render_frame_writes_encoded_frame(self) -> None:
        with mock.patch("devdash.render.os.write") as write_mock:
            render_frame(self.make_ctx(["x"]), fd=7)

        fd, data = write_mock.call_args.args
        self.assertEqual(fd, 7)
        self.assertTrue(data.startswith(b"\x1b[H\x1b[J"))


if __name__ == "__main__":
    unittest.main()
