"""Dashboard settings and persisted user preferences.

``DashboardConfig`` holds per-session settings. Preferences (theme, debug)
live in a JSON file under the platform config dir; all access is defensive:
malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from platformdirs import user_config_dir

from ..messages import DEFAULT_ANIMATION_INTERVAL, DEFAULT_LOG_CAPACITY
from .events import DEFAULT_QUEUE_CAPACITY

logger = logging.getLogger(__name__)

APP_NAME = "devdash"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME


@dataclass
class DashboardConfig:
    """Settings for one dashboard session."""

    app_name: str = "DevDash"
    theme: str | None = None
    no_color: bool = False
    # Show every Loggable line as a new entry instead of updating in place.
    debug: bool = False
    show_shortcuts_tab: bool = True
    log_capacity: int = DEFAULT_LOG_CAPACITY
    queue_capacity: int = DEFAULT_QUEUE_CAPACITY
    animation_interval: float = DEFAULT_ANIMATION_INTERVAL
    key_timeout_ms: int = 120
    cursor_blink_seconds: float = 0.5


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except Exception as exc:
        logger.debug("ignoring unreadable config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Write failures are logged and otherwise ignored; preferences are never
    worth crashing the dashboard over.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except Exception as exc:
        logger.warning("could not write config %s: %s", CONFIG_PATH, exc)


def load_theme_name() -> str | None:
    value = load_config().get("theme")
    if not isinstance(value, str):
        return None
    value = value.strip().lower()
    return value or None


def save_theme_name(name: str) -> None:
    config = load_config()
    config["theme"] = str(name).strip().lower()
    save_config(config)


def load_debug() -> bool:
    """Return the persisted debug preference; only explicit booleans count."""
    value = load_config().get("debug")
    return value if isinstance(value, bool) else False


def save_debug(debug: bool) -> None:
    config = load_config()
    config["debug"] = bool(debug)
    save_config(config)
