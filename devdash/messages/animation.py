"""Liveness dots for open-ended log lines (``LOG_OPEN`` ... ``LOG_CLOSE``)."""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass, field

from .types import MessageType

DEFAULT_ANIMATION_INTERVAL = 0.4
_MAX_DOTS = 3

TickPublisher = Callable[[str, MessageType, str, str], None]


@dataclass
class _Animation:
    stop_event: threading.Event = field(default_factory=threading.Event)
    # Held while publishing so ``stop`` never races a tick that is mid-write.
    publish_lock: threading.Lock = field(default_factory=threading.Lock)


class LivenessAnimator:
    """At most one ticking animation per handler name."""

    def __init__(self, interval: float = DEFAULT_ANIMATION_INTERVAL) -> None:
        self._interval = max(0.01, float(interval))
        self._lock = threading.Lock()
        self._running: dict[str, _Animation] = {}

    def is_running(self, handler_name: str) -> bool:
        with self._lock:
            return handler_name in self._running

    def stop(self, handler_name: str) -> None:
        with self._lock:
            animation = self._running.pop(handler_name, None)
        if animation is None:
            return
        with animation.publish_lock:
            animation.stop_event.set()

    def stop_all(self) -> None:
        with self._lock:
            names = list(self._running)
        for name in names:
            self.stop(name)

    def start(
        self,
        handler_name: str,
        base_message: str,
        msg_type: MessageType,
        color: str,
        publish: TickPublisher,
    ) -> None:
        """Start animating ``base_message``; replaces any animation for the handler.

        ``publish(content, msg_type, handler_name, color)`` is called from the
        ticker thread with the handler name as tracking key.
        """
        self.stop(handler_name)
        animation = _Animation()
        with self._lock:
            self._running[handler_name] = animation

        def tick() -> None:
            dots = 0
            while not animation.stop_event.wait(self._interval):
                dots = dots + 1 if dots < _MAX_DOTS else 0
                with animation.publish_lock:
                    if animation.stop_event.is_set():
                        return
                    publish(base_message + " ." * dots, msg_type, handler_name, color)

        worker = threading.Thread(
            target=tick,
            name=f"devdash-animation-{handler_name}",
            daemon=True,
        )
        worker.start()
