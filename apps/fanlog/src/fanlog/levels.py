"""
Severity levels.
"""

from __future__ import annotations

from enum import IntEnum

from .exceptions import LoggerConfigurationError


class Level(IntEnum):
    """Ordered severity: DEBUG < INFO < WARN < ERROR < PANIC < FATAL."""

    DEBUG = 10
    INFO = 20
    WARN = 30
    ERROR = 40
    PANIC = 50
    FATAL = 60

    @classmethod
    def parse(cls, value: "Level | int | str") -> "Level":
        """Coerce a level, its integer value or a case-insensitive name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, int):
            try:
                return cls(value)
            except ValueError as exc:
                raise LoggerConfigurationError(f"unknown log level: {value!r}") from exc
        name = str(value).strip().upper()
        name = _ALIASES.get(name, name)
        try:
            return cls[name]
        except KeyError as exc:
            raise LoggerConfigurationError(f"unknown log level: {value!r}") from exc

    @classmethod
    def from_method(cls, method_name: str) -> "Level":
        """Map a structlog method name (``info``, ``warning``, ``exception``...) to a level."""
        return cls.parse(_METHOD_ALIASES.get(method_name, method_name))


_ALIASES = {
    "WARNING": "WARN",
    "CRITICAL": "FATAL",
}

_METHOD_ALIASES = {
    "exception": "error",
    "msg": "info",
}
