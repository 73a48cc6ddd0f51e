"""
fanlog: one log call, many sinks.

Provides structured logging with multiple sink support:
- file: Local append-only file
- console: Standard output (console/json format)
- webhook: Team-chat webhook (fire-and-forget)
- bot: Messaging-bot channel (fire-and-forget)

Design Pattern: Strategy Pattern for sink abstraction.
Library: structlog + orjson, httpx for outbound notifications.
"""

from .builder import build_dev_logger, build_logger, default_log_path
from .exceptions import DeliveryError, FanlogError, LoggerConfigurationError, LoggerPanic
from .fanout import FanOut, SinkBinding
from .formatters import ConsoleFormatter, JsonFormatter
from .levels import Level
from .logger import Logger
from .record import LogRecord
from .sinks import BotChannelSink, ConsoleSink, FileSink, SinkWriter, WebhookSink

__all__ = [
    "BotChannelSink",
    "ConsoleFormatter",
    "ConsoleSink",
    "DeliveryError",
    "FanOut",
    "FanlogError",
    "FileSink",
    "JsonFormatter",
    "Level",
    "LogRecord",
    "Logger",
    "LoggerConfigurationError",
    "LoggerPanic",
    "SinkBinding",
    "SinkWriter",
    "WebhookSink",
    "build_dev_logger",
    "build_logger",
    "default_log_path",
]
