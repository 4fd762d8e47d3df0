"""Bounded, lock-guarded scroll-back log with update-in-place tracking."""

from __future__ import annotations

import dataclasses
import threading

from ..handlers import HandlerKind
from .ids import UnixId
from .types import LogEntry, MessageType

DEFAULT_LOG_CAPACITY = 500


class MessageLog:
    """Ordered log entries for one tab.

    Writers may call from any thread. Readers get copies via ``snapshot`` so
    rendering never holds the lock while formatting.
    """

    def __init__(self, ids: UnixId, capacity: int = DEFAULT_LOG_CAPACITY, tab_index: int = -1) -> None:
        self._ids = ids
        self._capacity = max(1, int(capacity))
        self._tab_index = tab_index
        self._lock = threading.Lock()
        self._entries: list[LogEntry] = []

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _evict_locked(self) -> None:
        overflow = len(self._entries) - self._capacity
        if overflow > 0:
            del self._entries[:overflow]

    def append_or_update(
        self,
        content: str,
        msg_type: MessageType = MessageType.INFO,
        *,
        handler_name: str = "",
        tracking_key: str = "",
        handler_color: str = "",
        handler_kind: HandlerKind = HandlerKind.LOGGABLE,
    ) -> tuple[bool, LogEntry]:
        """Update the entry tracked by ``(tracking_key, handler_name)`` or append.

        An updated entry moves to the tail. Returns ``(updated, entry_copy)``.
        """
        with self._lock:
            if tracking_key:
                for idx, entry in enumerate(self._entries):
                    if entry.tracking_key != tracking_key or entry.raw_handler_name != handler_name:
                        continue
                    entry.content = content
                    entry.type = msg_type
                    entry.timestamp = self._ids.new_id()
                    del self._entries[idx]
                    self._entries.append(entry)
                    return True, dataclasses.replace(entry)

            entry_id = self._ids.new_id()
            entry = LogEntry(
                id=entry_id,
                timestamp=entry_id,
                content=content,
                type=msg_type,
                raw_handler_name=handler_name,
                tracking_key=tracking_key,
                handler_color=handler_color,
                handler_kind=handler_kind,
                tab_index=self._tab_index,
            )
            self._entries.append(entry)
            self._evict_locked()
            return False, dataclasses.replace(entry)

    def add(self, content: str, msg_type: MessageType = MessageType.INFO) -> LogEntry:
        """Append an untracked, handler-less entry."""
        _updated, entry = self.append_or_update(content, msg_type)
        return entry

    def snapshot(self) -> list[LogEntry]:
        with self._lock:
            return [dataclasses.replace(entry) for entry in self._entries]
