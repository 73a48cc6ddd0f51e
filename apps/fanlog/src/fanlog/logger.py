"""
Application-facing logger facade.

Each ``Logger`` owns its own structlog processor chain (no global
``structlog.configure``), ending in a processor that turns the event dict into
an immutable ``LogRecord`` for the fan-out core.
"""

from __future__ import annotations

import copy
import os
from datetime import datetime, timezone
from typing import Any

import orjson
import structlog
from pydantic import BaseModel
from structlog.processors import CallsiteParameter, CallsiteParameterAdder
from structlog.typing import EventDict, Processor, WrappedLogger

from .diagnostics import report
from .exceptions import LoggerPanic
from .fanout import FanOut
from .levels import Level
from .record import FIELDS_KEY, LogRecord

FATAL_EXIT_CODE = 1

# Exits without unwinding; patched in tests.
_terminate = os._exit


# =============================================================================
# Structlog Processors
# =============================================================================


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add an aware UTC timestamp to the event."""
    event_dict["timestamp"] = datetime.now(timezone.utc)
    return event_dict


def drop_below(min_level: Level | None) -> Processor:
    """Drop events no sink would accept before any further work is done."""

    def processor(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
        if min_level is None or Level.from_method(method_name) < min_level:
            raise structlog.DropEvent
        return event_dict

    return processor


def to_record(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> tuple[tuple[LogRecord], dict]:
    """Final processor: hand the wrapped logger a ``LogRecord`` instead of a string."""
    return (LogRecord.from_event_dict(event_dict, method_name),), {}


def build_processors(min_level: Level | None) -> list[Processor]:
    return [
        drop_below(min_level),
        structlog.processors.add_log_level,
        add_timestamp,
        CallsiteParameterAdder(
            parameters=[CallsiteParameter.FILENAME, CallsiteParameter.LINENO],
            additional_ignores=["fanlog."],
        ),
        structlog.processors.format_exc_info,
        to_record,
    ]


class _FanOutTarget:
    """Wrapped logger receiving finished records; every level method dispatches."""

    def __init__(self, fanout: FanOut):
        self._fanout = fanout

    def msg(self, record: LogRecord) -> None:
        self._fanout.dispatch(record)

    debug = info = warn = warning = error = exception = panic = fatal = msg


def describe(value: Any) -> str:
    """Serialize an arbitrary structured value for ``info_struct``."""
    if isinstance(value, str):
        return value
    try:
        return orjson.dumps(value, default=_json_fallback, option=orjson.OPT_NON_STR_KEYS).decode()
    except orjson.JSONEncodeError:
        return repr(value)


def _json_fallback(obj: Any) -> Any:
    if isinstance(obj, BaseModel):
        return obj.model_dump(mode="json")
    if isinstance(obj, (set, frozenset)):
        return list(obj)
    return repr(obj)


# =============================================================================
# Facade
# =============================================================================


class Logger:
    """Leveled logging with a ``[service]`` prefix on every message.

    Log calls never raise into the application, except the deliberate
    escalations: ``panic`` raises ``LoggerPanic`` and ``fatal`` terminates
    the process, both after the record has been delivered.

    Args:
        fanout: Sink bindings every record is delivered through.
        service_name: Prefix for all messages and the record's logger name.
        initial_fields: Fields attached to every record.
    """

    def __init__(
        self,
        fanout: FanOut,
        service_name: str = "",
        *,
        initial_fields: dict[str, Any] | None = None,
    ):
        self._fanout = fanout
        self._service_name = service_name
        self._log = structlog.wrap_logger(
            _FanOutTarget(fanout),
            processors=build_processors(fanout.min_level),
            wrapper_class=structlog.BoundLogger,
            context_class=dict,
        ).bind(logger=service_name)
        self._fields: dict[str, Any] = dict(initial_fields or {})

    @property
    def service_name(self) -> str:
        return self._service_name

    @property
    def fanout(self) -> FanOut:
        return self._fanout

    def bind(self, **fields: Any) -> "Logger":
        """Return a logger sharing this one's sinks, with extra fields on every record."""
        child = copy.copy(self)
        child._fields = {**self._fields, **fields}
        return child

    def _prefix(self, message: str) -> str:
        if not self._service_name:
            return message
        return f"[{self._service_name}] {message}"

    def _emit(
        self,
        method_name: str,
        message: str,
        fields: dict[str, Any],
        exc_info: BaseException | None = None,
    ) -> None:
        # Application fields stay nested so names like "event" or "level" reach the record intact.
        extra: dict[str, Any] = {FIELDS_KEY: {**self._fields, **fields}}
        if exc_info is not None:
            extra["exc_info"] = exc_info
        try:
            getattr(self._log, method_name)(self._prefix(message), **extra)
        except Exception as exc:  # noqa: BLE001
            report(f"log call failed: {exc!r}")

    def debug(self, message: str, /, **fields: Any) -> None:
        self._emit("debug", message, fields)

    def info(self, message: str, /, **fields: Any) -> None:
        self._emit("info", message, fields)

    def warn(self, message: str, /, **fields: Any) -> None:
        self._emit("warn", message, fields)

    warning = warn

    def error(self, message: str, /, **fields: Any) -> None:
        self._emit("error", message, fields)

    def panic(self, message: str, /, **fields: Any) -> None:
        self._emit("panic", message, fields)
        raise LoggerPanic(self._prefix(message), fields=fields)

    def fatal(self, message: str, /, **fields: Any) -> None:
        self._emit("fatal", message, fields)
        self.sync()
        _terminate(FATAL_EXIT_CODE)

    def error_err(self, exc: BaseException, /, **fields: Any) -> None:
        """Log an exception at ERROR with its message and traceback."""
        fields.setdefault("error", str(exc))
        traceback = exc if exc.__traceback__ is not None else None
        self._emit("error", "An error occurred", fields, exc_info=traceback)

    def info_struct(self, message: str, value: Any, /, **fields: Any) -> None:
        self._emit("info", f"{message}: {describe(value)}", fields)

    def sync(self) -> None:
        """Flush buffered sinks; in-flight network deliveries are not awaited."""
        self._fanout.sync()

    def shutdown(self) -> None:
        """Flush and close every sink; network workers drain in the background."""
        self._fanout.close()
