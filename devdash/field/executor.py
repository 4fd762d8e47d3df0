"""Deadline-aware execution of handler actions off the render thread.

Each committed operation runs the handler call on its own worker thread. A
supervisor thread races the worker's completion against the deadline and
explicit cancellation, emits the outcome entry, resets the field's operation
state and reports the settled handle. Nothing here ever raises into the
caller: handler faults are caught and logged.
"""

from __future__ import annotations

import enum
import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from ..handlers import HandlerKind
from ..messages import MessageType
from .adapter import HandlerAdapter

logger = logging.getLogger(__name__)

# ``publish(content, msg_type, tracking_key)``; a ``None`` type is classified from the text.
Publisher = Callable[[str, MessageType | None, str], None]


class OperationOutcome(enum.Enum):
    COMPLETED = "completed"
    FAILED = "failed"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"


def format_duration(seconds: float) -> str:
    """Compact duration text: ``50ms``, ``2s``, ``1.5s``, ``2m0s``."""
    if seconds < 1:
        return f"{seconds * 1000:g}ms"
    if seconds < 60:
        return f"{seconds:g}s"
    minutes, rest = divmod(seconds, 60)
    return f"{int(minutes)}m{rest:g}s"


class CancelToken:
    """Cooperative cancellation signal with an optional deadline."""

    def __init__(self, timeout: float = 0.0, *, monotonic: Callable[[], float] = time.monotonic) -> None:
        self._monotonic = monotonic
        self.timeout = timeout
        self.deadline = monotonic() + timeout if timeout > 0 else None
        self._event = threading.Event()
        self._listeners: list[Callable[[], None]] = []
        self._lock = threading.Lock()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def remaining(self) -> float | None:
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - self._monotonic())

    def add_listener(self, callback: Callable[[], None]) -> None:
        with self._lock:
            fire = self._event.is_set()
            if not fire:
                self._listeners.append(callback)
        if fire:
            callback()

    def cancel(self) -> None:
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            listeners = list(self._listeners)
            self._listeners.clear()
        for callback in listeners:
            callback()


@dataclass
class AsyncOperation:
    """Operation state embedded in each field."""

    is_running: bool = False
    tracking_key: str = ""
    cancel: CancelToken | None = None
    start_time: float = 0.0


class OperationHandle:
    """Caller-side view of one launched operation."""

    def __init__(self, tracking_key: str, timeout: float) -> None:
        self.tracking_key = tracking_key
        self.timeout = timeout
        self.outcome: OperationOutcome | None = None
        self.error: BaseException | None = None
        self._done = threading.Event()

    @property
    def done(self) -> bool:
        return self._done.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the operation settles; returns ``False`` on wait timeout."""
        return self._done.wait(timeout)

    def _settle(self, outcome: OperationOutcome, error: BaseException | None = None) -> None:
        self.outcome = outcome
        self.error = error
        self._done.set()


class AsyncExecutor:
    """Runs one field's mutating handler call under an optional deadline."""

    def __init__(
        self,
        *,
        new_id: Callable[[], str],
        on_settled: Callable[[OperationHandle], None] | None = None,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self._new_id = new_id
        self._on_settled = on_settled
        self._monotonic = monotonic
        self._lock = threading.Lock()
        self.operation = AsyncOperation()

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self.operation.is_running

    def current_tracking_key(self) -> str:
        """Tracking key of the running operation, or ``""`` when idle."""
        with self._lock:
            return self.operation.tracking_key if self.operation.is_running else ""

    def _select_tracking_key(self, adapter: HandlerAdapter) -> str:
        if not adapter.tracks_messages:
            return adapter.tracking_key()
        existing = adapter.last_operation_id()
        return existing if existing else self._new_id()

    def cancel(self) -> bool:
        """Signal cancellation of the running operation, if any."""
        with self._lock:
            token = self.operation.cancel if self.operation.is_running else None
        if token is None:
            return False
        token.cancel()
        return True

    def run(self, adapter: HandlerAdapter, value: str, publish: Publisher) -> OperationHandle:
        """Launch ``adapter.change(value)`` and return immediately."""
        timeout = adapter.timeout()
        token = CancelToken(timeout, monotonic=self._monotonic)
        tracking_key = self._select_tracking_key(adapter)
        handle = OperationHandle(tracking_key, timeout)

        with self._lock:
            self.operation = AsyncOperation(
                is_running=True,
                tracking_key=tracking_key,
                cancel=token,
                start_time=self._monotonic(),
            )

        wake = threading.Event()
        token.add_listener(wake.set)
        result: dict[str, object] = {}

        def work() -> None:
            try:
                adapter.change(value)
            except Exception as exc:
                result["error"] = exc
                logger.exception("handler %r raised during operation", adapter.name())
            finally:
                result["finished"] = True
                wake.set()

        def supervise() -> None:
            woke = wake.wait(token.remaining())
            finished = bool(result.get("finished"))
            if not woke and not finished:
                token.cancel()
                outcome = OperationOutcome.TIMED_OUT
            elif token.cancelled and not finished:
                outcome = OperationOutcome.CANCELLED
            elif "error" in result:
                outcome = OperationOutcome.FAILED
            else:
                outcome = OperationOutcome.COMPLETED
            error = result.get("error")
            try:
                self._report(adapter, outcome, error, tracking_key, timeout, publish)
            finally:
                with self._lock:
                    if self.operation.cancel is token:
                        self.operation = AsyncOperation()
                handle._settle(outcome, error if isinstance(error, BaseException) else None)
                if self._on_settled is not None:
                    self._on_settled(handle)

        name = adapter.name()
        threading.Thread(target=work, name=f"devdash-op-{name}", daemon=True).start()
        threading.Thread(target=supervise, name=f"devdash-op-{name}-wait", daemon=True).start()
        return handle

    def _report(
        self,
        adapter: HandlerAdapter,
        outcome: OperationOutcome,
        error: object,
        tracking_key: str,
        timeout: float,
        publish: Publisher,
    ) -> None:
        if outcome is OperationOutcome.TIMED_OUT:
            publish(f"Operation timed out after {format_duration(timeout)}", MessageType.WARNING, tracking_key)
            return
        if outcome is OperationOutcome.CANCELLED:
            publish("Operation was cancelled", MessageType.WARNING, tracking_key)
            return
        if outcome is OperationOutcome.FAILED:
            publish(f"{adapter.name()} failed: {error}", MessageType.ERROR, tracking_key)
            return

        try:
            if adapter.tracks_messages:
                adapter.remember_operation_id(tracking_key)
            if adapter.kind is HandlerKind.EDIT or (
                adapter.kind is HandlerKind.EXECUTION and adapter.exposes_value
            ):
                result_text = adapter.value()
                publish(result_text, None, tracking_key)
        except Exception as exc:
            logger.exception("handler %r raised while reading its value", adapter.name())
            publish(f"{adapter.name()} failed: {exc}", MessageType.ERROR, tracking_key)


__all__ = [
    "AsyncExecutor",
    "AsyncOperation",
    "CancelToken",
    "OperationHandle",
    "OperationOutcome",
    "Publisher",
    "format_duration",
]
