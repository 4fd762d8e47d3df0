"""Tab sections: fields, per-tab message log, log sinks and shortcut wiring."""

from __future__ import annotations

import logging
import threading
import weakref
from collections.abc import Callable
from dataclasses import dataclass

from .errors import RegistrationError
from .field import AsyncExecutor, Field, HandlerAdapter, OperationHandle, build_adapter, build_log_adapter
from .field.executor import Publisher
from .handlers import LOG_CLOSE, LOG_OPEN, HandlerKind, Loggable
from .messages import (
    DEFAULT_ANIMATION_INTERVAL,
    DEFAULT_LOG_CAPACITY,
    LivenessAnimator,
    LogEntry,
    MessageLog,
    MessageType,
    UnixId,
    classify,
    format_entry_plain,
    join_message,
)
from .runtime.events import EventQueue, LogEvent, OperationSettledEvent
from .shortcuts import ShortcutEntry, ShortcutRegistry

logger = logging.getLogger(__name__)


@dataclass
class TabServices:
    """Runtime-wide collaborators shared by every tab of one dashboard.

    Tabs hold this record instead of the runtime itself; ownership checks
    compare identity of the record.
    """

    ids: UnixId
    events: EventQueue
    shortcuts: ShortcutRegistry
    debug: bool = False
    log_capacity: int = DEFAULT_LOG_CAPACITY
    animation_interval: float = DEFAULT_ANIMATION_INTERVAL


class TabSection:
    """One tab: ordered fields, log-only writers and the tab's message log."""

    def __init__(self, title: str, description: str, index: int, services: TabServices) -> None:
        self.title = title
        self.description = description
        self.index = index
        self.services = services
        self.fields: list[Field] = []
        self.log = MessageLog(services.ids, services.log_capacity, tab_index=index)
        self.animator = LivenessAnimator(services.animation_interval)
        self.active_field_index = 0
        self.scroll_offset = 0
        self._writers_lock = threading.Lock()
        self._writing_handlers: list[HandlerAdapter] = []

    def __repr__(self) -> str:
        return f"TabSection(index={self.index}, title={self.title!r}, fields={len(self.fields)})"

    # Registration ----------------------------------------------------------

    def add_handler(self, handler: object, color: str = "", *, timeout=None) -> Field | None:
        """Wire ``handler`` into this tab.

        A ``Loggable`` gets a sink injected; a primary capability gets a field.
        A handler may be both. Returns the field, or ``None`` for log-only
        handlers.
        """
        adapter = build_adapter(handler, color, timeout=timeout)
        is_loggable = isinstance(handler, Loggable)
        if adapter is None and not is_loggable:
            raise RegistrationError(
                f"add_handler: {type(handler).__name__} implements no handler interface; "
                "expected one of display (name, content), edit (name, label, value, change), "
                "execution (name, label, execute), interactive (edit + waiting_for_user) "
                "or loggable (name, set_log)"
            )

        field: Field | None = None
        if adapter is not None:
            field = self._add_field(adapter)

        if is_loggable:
            log_adapter = build_log_adapter(handler, color)
            with self._writers_lock:
                self._writing_handlers.append(log_adapter)
            handler.set_log(self.make_log_sink(log_adapter, field))

        if field is not None and field.adapter.kind is HandlerKind.EDIT:
            self._register_shortcuts(field)
        return field

    def _add_field(self, adapter: HandlerAdapter) -> Field:
        index = len(self.fields)
        events = self.services.events
        tab_index = self.index

        def settled(handle: OperationHandle) -> None:
            events.post(OperationSettledEvent(tab_index, index, handle))

        executor = AsyncExecutor(new_id=self.services.ids.new_id, on_settled=settled)
        field = Field(adapter, index, tab_index, executor)
        self.fields.append(field)
        return field

    def _register_shortcuts(self, field: Field) -> None:
        adapter = field.adapter
        for key, description in adapter.shortcuts():
            self.services.shortcuts.register(
                ShortcutEntry(
                    key=key,
                    description=description,
                    tab_index=self.index,
                    field_index=field.index,
                    handler_name=adapter.name(),
                    value=key,
                )
            )

    @property
    def writing_handlers(self) -> list[HandlerAdapter]:
        with self._writers_lock:
            return list(self._writing_handlers)

    # Fields ----------------------------------------------------------------

    @property
    def active_field(self) -> Field | None:
        if not self.fields:
            return None
        if not 0 <= self.active_field_index < len(self.fields):
            self.active_field_index = 0
        return self.fields[self.active_field_index]

    def set_active_field(self, index: int) -> bool:
        if not 0 <= index < len(self.fields):
            return False
        self.active_field_index = index
        return True

    def cycle_field(self, step: int) -> Field | None:
        if not self.fields:
            return None
        self.active_field_index = (self.active_field_index + step) % len(self.fields)
        return self.fields[self.active_field_index]

    # Logging ---------------------------------------------------------------

    def publish(
        self,
        content: str,
        msg_type: MessageType | None = None,
        *,
        handler_name: str = "",
        tracking_key: str = "",
        color: str = "",
        kind: HandlerKind = HandlerKind.LOGGABLE,
    ) -> LogEntry:
        """Append or update a log entry and notify the render loop."""
        if msg_type is None:
            msg_type = classify(content)
        updated, entry = self.log.append_or_update(
            content,
            msg_type,
            handler_name=handler_name,
            tracking_key=tracking_key,
            handler_color=color,
            handler_kind=kind,
        )
        self.services.events.post(LogEvent(self.index, entry, updated))
        return entry

    def field_publisher(self, field: Field) -> Publisher:
        adapter = field.adapter

        def publish(content: str, msg_type: MessageType | None, tracking_key: str) -> None:
            entry = self.publish(
                content,
                msg_type,
                handler_name=adapter.name(),
                tracking_key=tracking_key,
                color=adapter.color,
                kind=adapter.kind,
            )
            if entry.type is MessageType.ERROR:
                logger.error("%s: %s", entry.raw_handler_name, content)

        return publish

    def make_log_sink(self, adapter: HandlerAdapter, field: Field | None) -> Callable[..., None]:
        """Return the ``log(*messages)`` callable injected into a Loggable."""
        tab_ref = weakref.ref(self)
        field_ref = weakref.ref(field) if field is not None else None
        debug = self.services.debug

        def log(*messages: object) -> None:
            if not messages:
                return
            tab = tab_ref()
            if tab is None:
                return
            message = join_message(messages)
            opening = message.startswith(LOG_OPEN)
            closing = message.startswith(LOG_CLOSE)
            if opening:
                message = message[len(LOG_OPEN) :]
            elif closing:
                message = message[len(LOG_CLOSE) :]

            msg_type = classify(message)
            name = adapter.name()
            streaming = debug or adapter.always_show_all_logs()
            tracking_key = name if (not streaming or opening or closing) else ""

            bound = field_ref() if field_ref is not None else None
            if bound is not None and tracking_key:
                running_key = bound.executor.current_tracking_key()
                if running_key:
                    tracking_key = running_key

            if not opening and (closing or not tracking_key):
                tab.animator.stop(name)

            tab.publish(
                message,
                msg_type,
                handler_name=name,
                tracking_key=tracking_key,
                color=adapter.color,
                kind=adapter.kind,
            )
            if msg_type is MessageType.ERROR:
                logger.error("%s: %s", name, message)

            if opening:
                key = tracking_key

                def tick(content: str, tick_type: MessageType, handler_name: str, color: str) -> None:
                    current = tab_ref()
                    if current is None:
                        return
                    current.publish(
                        content,
                        tick_type,
                        handler_name=handler_name,
                        tracking_key=key,
                        color=color,
                        kind=adapter.kind,
                    )

                tab.animator.start(name, message, msg_type, adapter.color, tick)

        return log

    # Handler calls ---------------------------------------------------------

    def run_field(self, field: Field, value: str) -> OperationHandle | None:
        """Commit ``value`` to ``field`` through its executor."""
        handle = field.run(value, self.field_publisher(field))
        if handle is None:
            logger.debug("ignored commit on %r: busy or display-only", field)
        return handle

    def call_handler(self, field: Field, value: str) -> bool:
        """Synchronous ``change(value)`` with the fault logged and contained."""
        adapter = field.adapter
        try:
            adapter.change(value)
        except Exception as exc:
            logger.exception("handler %r raised in change(%r)", adapter.name(), value)
            self.publish(
                f"{adapter.name()} failed: {exc}",
                MessageType.ERROR,
                handler_name=adapter.name(),
                tracking_key=adapter.tracking_key(),
                color=adapter.color,
                kind=adapter.kind,
            )
            return False
        return True

    def notify_tab_active(self) -> int:
        """Run ``on_tab_active`` once per aware handler on this activation, off the loop thread."""
        adapters = [field.adapter for field in self.fields] + self.writing_handlers
        seen: set[int] = set()
        pending: list[HandlerAdapter] = []
        for adapter in adapters:
            if adapter.tab_active_fn is None or adapter.handler_id in seen:
                continue
            seen.add(adapter.handler_id)
            pending.append(adapter)

        def notify(adapter: HandlerAdapter) -> None:
            try:
                adapter.notify_tab_active()
            except Exception:
                logger.exception("handler %r raised in on_tab_active", adapter.name())

        for adapter in pending:
            threading.Thread(
                target=notify,
                args=(adapter,),
                name=f"devdash-tab-active-{adapter.name()}",
                daemon=True,
            ).start()
        return len(pending)

    # Export ----------------------------------------------------------------

    def display_content(self) -> str:
        field = self.active_field
        if field is None or not field.is_display_only:
            return ""
        try:
            return field.display_content()
        except Exception:
            logger.exception("handler %r raised in content()", field.adapter.name())
            return ""

    def logs_plain(self) -> str:
        """Display content (if any) followed by formatted entries, no ANSI codes.

        Empty when the tab has no entries yet.
        """
        entries = self.log.snapshot()
        if not entries:
            return ""
        lines: list[str] = []
        content = self.display_content()
        if content:
            lines.extend((content, ""))
        lines.extend(format_entry_plain(entry) for entry in entries)
        return "\n".join(lines)

    def close(self) -> None:
        self.animator.stop_all()
        for field in self.fields:
            field.executor.cancel()
