"""Monotonic unix-nanosecond identifiers and their clock rendering."""

from __future__ import annotations

import threading
import time


class UnixId:
    """Thread-safe generator of strictly increasing nanosecond timestamps."""

    def __init__(self, clock=time.time_ns) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._last = 0

    def new_id(self) -> str:
        with self._lock:
            now = int(self._clock())
            if now <= self._last:
                now = self._last + 1
            self._last = now
            return str(now)


def format_time(unix_id: str) -> str:
    """Render a nanosecond id as local ``HH:MM:SS`` (``--:--:--`` if unusable)."""
    if not unix_id:
        return "--:--:--"
    try:
        seconds = int(unix_id) / 1_000_000_000
    except ValueError:
        return "--:--:--"
    return time.strftime("%H:%M:%S", time.localtime(seconds))
