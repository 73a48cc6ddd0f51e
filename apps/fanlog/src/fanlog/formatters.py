"""
Record formatters and color utilities.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Protocol

import orjson

from .levels import Level
from .record import LogRecord


def orjson_dumps(v: Any, *, default: Any = str) -> str:
    """Fast JSON serialization using orjson."""
    return orjson.dumps(v, default=default, option=orjson.OPT_UTC_Z | orjson.OPT_NAIVE_UTC).decode()


class Formatter(Protocol):
    """Renders a record as a single logical line (without trailing newline)."""

    def format(self, record: LogRecord) -> str: ...


def render_line(formatter: Formatter, record: LogRecord) -> bytes:
    """Render ``record`` into the UTF-8 bytes handed to a sink."""
    return (formatter.format(record) + "\n").encode("utf-8")


# =============================================================================
# Console Formatter (Aligned Columns)
# =============================================================================

COLORS = {
    "reset": "\033[0m",
    "dim": "\033[2m",
    "timestamp": "\033[90m",
    "logger": "\033[35m",
    "caller": "\033[90m",
    "key": "\033[34m",
}

LEVEL_COLORS = {
    Level.DEBUG: "\033[36m",
    Level.INFO: "\033[32m",
    Level.WARN: "\033[33m",
    Level.ERROR: "\033[31m",
    Level.PANIC: "\033[1;31m",
    Level.FATAL: "\033[1;41m",
}


def colorize(text: str, color: str) -> str:
    """Apply ANSI color to text."""
    return f"{COLORS.get(color, '')}{text}{COLORS['reset']}"


class ConsoleFormatter:
    """Human-readable console rendering (fixed width, right-aligned columns).

    Args:
        use_color: Wrap columns in ANSI colors, one distinct color per level.
        timestamp_format: ``strftime`` format for the timestamp column.
        level_width: Width of the level column.
        logger_width: Width of the logger column; 0 disables padding.
        separator: String placed between columns.
    """

    EXCEPTION_KEY = "exception"

    def __init__(
        self,
        *,
        use_color: bool = False,
        timestamp_format: str = "%Y-%m-%d %H:%M:%S",
        level_width: int = 5,
        logger_width: int = 0,
        separator: str = " | ",
    ) -> None:
        self.use_color = use_color
        self.timestamp_format = timestamp_format
        self.level_width = level_width
        self.logger_width = logger_width
        self.separator = separator

    @staticmethod
    def _fit_right(text: str, width: int) -> str:
        if width <= 0:
            return text
        if len(text) > width:
            if width <= 3:
                text = text[-width:]
            else:
                text = "..." + text[-(width - 3) :]
        return f"{text:>{width}}"

    def _format_timestamp(self, timestamp: datetime) -> str:
        return timestamp.astimezone().strftime(self.timestamp_format)

    def _maybe_color(self, text: str, color: str) -> str:
        if not self.use_color:
            return text
        return colorize(text, color)

    def _colorize_level(self, text: str, level: Level) -> str:
        if not self.use_color:
            return text
        return f"{LEVEL_COLORS[level]}{text}{COLORS['reset']}"

    def format(self, record: LogRecord) -> str:
        """Format a record into an aligned string."""
        columns = [
            self._maybe_color(self._format_timestamp(record.timestamp), "timestamp"),
            self._colorize_level(self._fit_right(record.level.name, self.level_width), record.level),
        ]
        if record.logger:
            columns.append(self._maybe_color(self._fit_right(record.logger, self.logger_width), "logger"))
        if record.caller:
            columns.append(self._maybe_color(record.caller, "caller"))

        message_text = record.message
        traceback = None
        extras = []
        for k, v in record.fields:
            if k == self.EXCEPTION_KEY:
                traceback = str(v)
                continue
            extras.append(f"{self._maybe_color(k, 'key')}={self._maybe_color(str(v), 'dim')}")
        if extras:
            message_text = f"{message_text} " + " ".join(extras)
        columns.append(message_text)

        line = self.separator.join(columns)
        if traceback:
            line = f"{line}\n{traceback.rstrip()}"
        return line


# =============================================================================
# JSON Formatter
# =============================================================================


class JsonFormatter:
    """Machine-readable rendering: one JSON object per record."""

    def format(self, record: LogRecord) -> str:
        return orjson_dumps(record.to_dict())
