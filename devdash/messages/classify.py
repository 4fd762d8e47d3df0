"""Keyword-based message type detection for handler output."""

from __future__ import annotations

import re

from .types import MessageType

_ERROR_RE = re.compile(r"\b(error|errors|failed|fail|fails|failure|panic|exception|fatal)\b", re.IGNORECASE)
_WARNING_RE = re.compile(r"\b(warning|warnings|warn|deprecated)\b", re.IGNORECASE)
_SUCCESS_RE = re.compile(r"\b(success|successful|successfully|completed|complete|done|ok)\b", re.IGNORECASE)


def classify(text: str) -> MessageType:
    """Return the message type implied by ``text``; errors win over warnings."""
    if _ERROR_RE.search(text):
        return MessageType.ERROR
    if _WARNING_RE.search(text):
        return MessageType.WARNING
    if _SUCCESS_RE.search(text):
        return MessageType.SUCCESS
    return MessageType.INFO


def join_message(parts: tuple[object, ...]) -> str:
    """Join log-call arguments the way ``print`` would, without the newline."""
    if len(parts) == 1 and isinstance(parts[0], str):
        return parts[0]
    return " ".join(str(part) for part in parts)
