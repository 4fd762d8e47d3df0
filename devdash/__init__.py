"""Public package surface for devdash.

Host applications create a ``DevDash``, add tab sections and register
handlers into them. ``main`` runs the bundled CLI.
"""

from __future__ import annotations

from .errors import DevDashError, RegistrationError
from .handlers import (
    LOG_CLOSE,
    LOG_OPEN,
    Cancelable,
    HandlerDisplay,
    HandlerEdit,
    HandlerExecution,
    HandlerInteractive,
    HandlerKind,
    Loggable,
    MessageTracker,
    ShortcutProvider,
    StreamingLoggable,
    TabActivationAware,
)
from .messages import MessageType


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


def __getattr__(name: str):
    if name == "DevDash":
        from .runtime.app import DevDash

        return DevDash
    if name == "DashboardConfig":
        from .runtime.config import DashboardConfig

        return DashboardConfig
    if name == "TabSection":
        from .tabs import TabSection

        return TabSection
    raise AttributeError(f"module 'devdash' has no attribute {name!r}")


__all__ = [
    "Cancelable",
    "DashboardConfig",
    "DevDash",
    "DevDashError",
    "HandlerDisplay",
    "HandlerEdit",
    "HandlerExecution",
    "HandlerInteractive",
    "HandlerKind",
    "LOG_CLOSE",
    "LOG_OPEN",
    "Loggable",
    "MessageTracker",
    "MessageType",
    "RegistrationError",
    "ShortcutProvider",
    "StreamingLoggable",
    "TabActivationAware",
    "TabSection",
    "main",
]
