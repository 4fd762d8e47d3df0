"""Per-tab message logging: entries, tracking, ids and liveness animation."""

from .animation import DEFAULT_ANIMATION_INTERVAL, LivenessAnimator
from .classify import classify, join_message
from .format import HANDLER_NAME_WIDTH, format_entry_plain, pad_handler_name
from .ids import UnixId, format_time
from .log import DEFAULT_LOG_CAPACITY, MessageLog
from .types import LogEntry, MessageType

__all__ = [
    "DEFAULT_ANIMATION_INTERVAL",
    "DEFAULT_LOG_CAPACITY",
    "HANDLER_NAME_WIDTH",
    "LivenessAnimator",
    "LogEntry",
    "MessageLog",
    "MessageType",
    "UnixId",
    "classify",
    "format_entry_plain",
    "format_time",
    "join_message",
    "pad_handler_name",
]
