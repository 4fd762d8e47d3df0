"""Tests for ANSI-aware width, clipping, wrapping and hex colors."""

from __future__ import annotations

import unittest

from devdash import ansi


class AnsiTests(unittest.TestCase):
    def test_display_width_ignores_escapes_and_counts_wide_chars(self) -> None:
        self.assertEqual(ansi.display_width("\033[31mred\033[0m"), 3)
        self.assertEqual(ansi.display_width("日本"), 4)

    def test_clip_keeps_escape_sequences(self) -> None:
        clipped = ansi.clip_ansi_line("\033[1mbold text\033[0m", 4)
        self.assertEqual(ansi.strip_ansi(clipped), "bold")
        self.assertTrue(clipped.startswith("\033[1m"))

    def test_clip_does_not_split_wide_chars(self) -> None:
        self.assertEqual(ansi.clip_ansi_line("日本語", 3), "日")

    def test_pad_to_exact_width(self) -> None:
        self.assertEqual(ansi.pad_ansi_line("ab", 4), "ab  ")
        self.assertEqual(ansi.pad_ansi_line("abcdef", 4), "abcd")

    def test_wrap_text_splits_on_width_and_newlines(self) -> None:
        self.assertEqual(ansi.wrap_text("abcdef\ngh", 4), ["abcd", "ef", "gh"])
        self.assertEqual(ansi.wrap_text("a\tb", 10), ["a    b"])
        self.assertEqual(ansi.wrap_text("", 4), [""])

    def test_hex_colors(self) -> None:
        self.assertEqual(ansi.hex_to_rgb("#0a0B0c"), (10, 11, 12))
        self.assertEqual(ansi.hex_background("#ffffff"), "\033[48;2;255;255;255m")
        self.assertEqual(ansi.hex_background("red"), "")
        self.assertIsNone(ansi.hex_to_rgb(""))


if __name__ == "__main__":
    unittest.main()
