"""UI theme definitions and selection helpers.

Themes are ANSI palettes for dashboard chrome and message types. Handler
colors are chosen by the host application per handler and are applied on
top of the theme.
"""

from __future__ import annotations

from dataclasses import dataclass

from .messages import MessageType


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by the renderer."""

    name: str
    reset: str
    header: str
    pagination: str
    divider: str
    label: str
    label_active: str
    value: str
    value_editing: str
    cursor: str
    action: str
    time: str
    handler_name: str
    display: str
    info: str
    success: str
    warning: str
    error: str

    def message_style(self, msg_type: MessageType) -> str:
        if msg_type is MessageType.ERROR:
            return self.error
        if msg_type is MessageType.WARNING:
            return self.warning
        if msg_type is MessageType.SUCCESS:
            return self.success
        return self.info


DEFAULT_THEME = UITheme(
    name="default",
    reset="\033[0m",
    header="\033[1;38;5;231;48;5;202m",
    pagination="\033[38;5;231;48;5;238m",
    divider="\033[2m",
    label="\033[38;5;231;48;5;240m",
    label_active="\033[1;38;5;231;48;5;202m",
    value="\033[38;5;252;48;5;236m",
    value_editing="\033[38;5;231;48;5;238m",
    cursor="\033[7m",
    action="\033[1;38;5;231;48;5;24m",
    time="\033[38;5;244m",
    handler_name="\033[1;38;5;231;48;5;240m",
    display="\033[38;5;252m",
    info="\033[38;5;252m",
    success="\033[38;5;42m",
    warning="\033[38;5;214m",
    error="\033[1;38;5;203m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reset="\033[0m",
    header="\033[1;38;5;231;48;5;24m",
    pagination="\033[38;5;153;48;5;23m",
    divider="\033[2;38;5;31m",
    label="\033[38;5;153;48;5;23m",
    label_active="\033[1;38;5;231;48;5;31m",
    value="\033[38;5;195;48;5;17m",
    value_editing="\033[38;5;231;48;5;18m",
    cursor="\033[7m",
    action="\033[1;38;5;231;48;5;31m",
    time="\033[38;5;73m",
    handler_name="\033[1;38;5;231;48;5;23m",
    display="\033[38;5;153m",
    info="\033[38;5;195m",
    success="\033[38;5;84m",
    warning="\033[38;5;215m",
    error="\033[1;38;5;210m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reset="",
    header="",
    pagination="",
    divider="",
    label="",
    label_active="",
    value="",
    value_editing="",
    cursor="",
    action="",
    time="",
    handler_name="",
    display="",
    info="",
    success="",
    warning="",
    error="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    candidate = str(name or "").strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
