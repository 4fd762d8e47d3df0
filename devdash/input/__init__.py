"""Input layer: terminal key decoding and the keyboard state machine."""

from .dispatcher import KeyboardDispatcher
from .key_registry import KeyBinding, KeyBindingTable
from .reader import ESC_SEQUENCE_TIMEOUT_MS, read_key

__all__ = [
    "ESC_SEQUENCE_TIMEOUT_MS",
    "KeyBinding",
    "KeyBindingTable",
    "KeyboardDispatcher",
    "read_key",
]
