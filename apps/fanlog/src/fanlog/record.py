"""
Immutable log record handed from the logger facade to the fan-out core.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from structlog.typing import EventDict

from .levels import Level

# Application fields travel nested under this key so processor keys never clash with them.
FIELDS_KEY = "_fanlog_fields"

# Event-dict keys consumed by the record itself; everything else becomes a field.
_RESERVED_KEYS = frozenset({"event", "message", "level", "timestamp", "logger", "filename", "lineno", FIELDS_KEY})

# Record attributes that a field of the same name must not shadow in ``to_dict``.
_RECORD_KEYS = ("timestamp", "level", "logger", "caller", "message")


@dataclass(frozen=True)
class LogRecord:
    """One log call, consumed independently by every configured formatter."""

    timestamp: datetime
    level: Level
    logger: str
    message: str
    caller: str | None = None
    fields: tuple[tuple[str, Any], ...] = field(default_factory=tuple)

    @classmethod
    def from_event_dict(cls, event_dict: EventDict, method_name: str) -> "LogRecord":
        """Build a record from a processed structlog event dict."""
        level = Level.from_method(str(event_dict.get("level", method_name)))

        raw_timestamp = event_dict.get("timestamp")
        if isinstance(raw_timestamp, datetime):
            timestamp = raw_timestamp
        elif isinstance(raw_timestamp, str):
            timestamp = datetime.fromisoformat(raw_timestamp.replace("Z", "+00:00"))
        else:
            timestamp = datetime.now(timezone.utc)

        caller = None
        filename = event_dict.get("filename")
        if filename:
            lineno = event_dict.get("lineno")
            caller = f"{filename}:{lineno}" if lineno is not None else str(filename)

        message = event_dict.get("event", event_dict.get("message", ""))
        nested = event_dict.get(FIELDS_KEY) or {}
        fields = tuple(nested.items()) + tuple(
            (k, v) for k, v in event_dict.items() if k not in _RESERVED_KEYS
        )

        return cls(
            timestamp=timestamp,
            level=level,
            logger=str(event_dict.get("logger", "")),
            message=str(message),
            caller=caller,
            fields=fields,
        )

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready mapping; fields named like a record attribute get a ``field_`` prefix."""
        payload: dict[str, Any] = {
            "timestamp": self.timestamp.isoformat(),
            "level": self.level.name,
            "logger": self.logger,
            "caller": self.caller,
            "message": self.message,
        }
        for key, value in self.fields:
            if key in _RECORD_KEYS:
                key = f"field_{key}"
            payload.setdefault(key, value)
        return payload
