"""Global single-key shortcut table shared by every tab of one runtime."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShortcutEntry:
    """Binding from ``key`` to ``change(value)`` on one field."""

    key: str
    description: str
    tab_index: int
    field_index: int
    handler_name: str
    value: str


class ShortcutRegistry:
    """Flat ``key -> ShortcutEntry`` map; later registrations replace earlier ones."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: dict[str, ShortcutEntry] = {}

    def register(self, entry: ShortcutEntry) -> ShortcutEntry | None:
        """Bind ``entry.key`` and return the entry it replaced, if any."""
        with self._lock:
            previous = self._entries.get(entry.key)
            self._entries[entry.key] = entry
        if previous is not None and previous != entry:
            logger.warning(
                "shortcut %r rebound from %s (tab %d, field %d) to %s (tab %d, field %d)",
                entry.key,
                previous.handler_name,
                previous.tab_index,
                previous.field_index,
                entry.handler_name,
                entry.tab_index,
                entry.field_index,
            )
        return previous

    def get(self, key: str) -> ShortcutEntry | None:
        with self._lock:
            return self._entries.get(key)

    def all(self) -> dict[str, ShortcutEntry]:
        """Copy of the table in registration order."""
        with self._lock:
            return dict(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
