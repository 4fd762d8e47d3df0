"""Built-in SHORTCUTS tab: keyboard help and the registered shortcut table."""

from __future__ import annotations

from collections.abc import Callable

from .shortcuts import ShortcutRegistry

SHORTCUTS_TAB_TITLE = "SHORTCUTS"
SHORTCUTS_TAB_DESCRIPTION = "Keyboard navigation instructions"

HELP_SECTIONS: tuple[tuple[str, tuple[tuple[str, str], ...]], ...] = (
    ("Tabs", (("Tab/Shift+Tab", "switch tab"),)),
    (
        "Fields",
        (
            ("Left/Right", "switch field"),
            ("Enter", "edit / execute"),
            ("Esc", "cancel"),
        ),
    ),
    (
        "Editing",
        (
            ("Left/Right", "move cursor"),
            ("Backspace", "delete left of cursor"),
            ("Enter", "commit"),
        ),
    ),
    (
        "Viewport",
        (
            ("Up/Down", "scroll one line"),
            ("PgUp/PgDown", "scroll one page"),
            ("Home/End", "oldest / newest"),
        ),
    ),
    ("Quit", (("Ctrl+C", "quit"),)),
)

_KEY_COLUMN = 16


def _key_line(key: str, description: str) -> str:
    return f"  • {key.ljust(_KEY_COLUMN)} - {description}"


class ShortcutsGuide:
    """Interactive help handler shown as the first tab of every dashboard.

    ``change("")`` (sent when the field becomes active) logs the help text
    on the handler's tracked line, so it is refreshed rather than repeated.
    """

    def __init__(self, app_name: str, registry: ShortcutRegistry) -> None:
        self.app_name = app_name
        self.registry = registry
        self._log: Callable[..., None] | None = None
        self._last_op_id = ""

    def name(self) -> str:
        return "shortcutsGuide"

    def label(self) -> str:
        return "Shortcuts"

    def value(self) -> str:
        return f"{len(self.registry)} registered"

    def change(self, new_value: str) -> None:
        if self._log is not None:
            self._log(self.help_text())

    def waiting_for_user(self) -> bool:
        return False

    def set_log(self, log: Callable[..., None]) -> None:
        self._log = log

    def get_last_operation_id(self) -> str:
        return self._last_op_id

    def set_last_operation_id(self, operation_id: str) -> None:
        self._last_op_id = operation_id

    def help_text(self) -> str:
        lines = [f"{self.app_name} keyboard shortcuts", ""]
        for heading, rows in HELP_SECTIONS:
            lines.append(f"{heading}:")
            lines.extend(_key_line(key, description) for key, description in rows)
            lines.append("")

        entries = self.registry.all()
        if entries:
            lines.append("Registered shortcuts:")
            for key, entry in entries.items():
                lines.append(_key_line(key, f"{entry.description} ({entry.handler_name})"))
        return "\n".join(lines).rstrip("\n")
