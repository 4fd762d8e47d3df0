"""Exception types raised by devdash.

Only wiring-time misuse raises. Faults inside handler callbacks are
contained by the runtime and reported through the tab message log instead.
"""

from __future__ import annotations


class DevDashError(RuntimeError):
    """Base class for devdash errors."""


class RegistrationError(DevDashError):
    """Raised when a handler or tab handle is wired incorrectly."""
