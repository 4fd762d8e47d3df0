"""Single-consumer event queue feeding the render loop.

Producers (operation threads, log sinks, animations, ``refresh_ui`` callers)
only enqueue; the loop thread drains and applies events.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from queue import Empty, Queue

from ..field import OperationHandle
from ..messages import LogEntry

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_CAPACITY = 1000


@dataclass(frozen=True)
class LogEvent:
    tab_index: int
    entry: LogEntry
    updated: bool


@dataclass(frozen=True)
class RefreshEvent:
    pass


@dataclass(frozen=True)
class OperationSettledEvent:
    tab_index: int
    field_index: int
    handle: OperationHandle


Event = LogEvent | RefreshEvent | OperationSettledEvent


class EventQueue:
    """Single-consumer queue that never blocks producers.

    Log and refresh notifications beyond ``capacity`` are dropped; the
    message log still holds the entry. ``OperationSettledEvent`` is never
    dropped.
    """

    def __init__(self, capacity: int = DEFAULT_QUEUE_CAPACITY) -> None:
        self.capacity = max(1, int(capacity))
        self._queue: Queue[Event] = Queue()
        self._lock = threading.Lock()
        self.dropped = 0

    def post(self, event: Event) -> bool:
        with self._lock:
            if not isinstance(event, OperationSettledEvent) and self._queue.qsize() >= self.capacity:
                self.dropped += 1
                logger.debug("event queue full; dropped %s", type(event).__name__)
                return False
            self._queue.put_nowait(event)
        return True

    def get(self, timeout: float | None = None) -> Event | None:
        try:
            return self._queue.get(timeout=timeout)
        except Empty:
            return None

    def drain(self) -> list[Event]:
        out: list[Event] = []
        while True:
            try:
                out.append(self._queue.get_nowait())
            except Empty:
                return out

    def __len__(self) -> int:
        return self._queue.qsize()
