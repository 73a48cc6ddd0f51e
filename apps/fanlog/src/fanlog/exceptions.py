"""
Exception hierarchy for fanlog.

Logging calls never raise these into the application except ``LoggerPanic``,
which is the deliberate escalation of ``Logger.panic``.
"""

from __future__ import annotations


class FanlogError(Exception):
    """Root of all fanlog exceptions."""


class LoggerConfigurationError(FanlogError):
    """The logger cannot be built from the given configuration.

    Callers should treat this as fatal to their own startup.
    """


class LoggerPanic(FanlogError):
    """Raised in the calling thread after a panic-level record is delivered."""

    def __init__(self, message: str, *, fields: dict | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.fields = fields or {}


class DeliveryError(FanlogError):
    """A network sink could not deliver a notification.

    Raised inside background workers only; reported and swallowed there.
    """
