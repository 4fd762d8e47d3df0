"""Dashboard runtime: the ``DevDash`` owner object, event queue and loop.

``DevDash`` is imported lazily so lower layers can use the event types
without pulling in the whole runtime.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .app import DevDash
    from .config import DashboardConfig


def __getattr__(name: str):
    if name == "DevDash":
        from .app import DevDash

        return DevDash
    if name == "DashboardConfig":
        from .config import DashboardConfig

        return DashboardConfig
    raise AttributeError(name)


__all__ = ["DashboardConfig", "DevDash"]
