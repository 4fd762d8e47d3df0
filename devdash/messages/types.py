"""Log entry records stored in per-tab message logs."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from ..handlers import HandlerKind


class MessageType(enum.Enum):
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class LogEntry:
    """One scroll-back line.

    ``id`` never changes after creation. ``timestamp``, ``content`` and
    ``type`` are refreshed in place when a later write carries the same
    tracking key and handler name.
    """

    id: str
    timestamp: str
    content: str
    type: MessageType = MessageType.INFO
    raw_handler_name: str = ""
    tracking_key: str = ""
    handler_color: str = ""
    handler_kind: HandlerKind = HandlerKind.LOGGABLE
    tab_index: int = -1
