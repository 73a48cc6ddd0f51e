"""
Configuration-driven logger construction.

One constructor assembles whichever sinks the settings enable: file and
console by default, the webhook sink when a URL is set, the bot sink when
both a token and a chat id are set. A sink that fails to build is reported
on stderr and left out; the logger runs with the rest.
"""

from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path
from typing import Callable

import httpx

from .config.logging import LogFormat, LoggingSettings, LogLevel
from .config.notifications import NotificationSettings
from .diagnostics import report
from .fanout import FanOut, SinkBinding
from .formatters import ConsoleFormatter, Formatter, JsonFormatter
from .levels import Level
from .logger import Logger
from .sinks import BotChannelSink, ConsoleSink, FileSink, SinkWriter, WebhookSink

_UNSAFE_FILENAME_CHARS = re.compile(r"[^\w.-]+")


def default_log_path(settings: LoggingSettings, now: datetime | None = None) -> Path:
    """Resolve the file sink path from the settings."""
    if settings.file_path:
        return Path(settings.file_path)
    if settings.timestamped_file:
        now = now or datetime.now()
        service = _UNSAFE_FILENAME_CHARS.sub("_", settings.service_name) or "app"
        return Path(settings.file_dir) / f"log_{service}_{now:%Y-%m-%d_%H-%M-%S}.log"
    return Path(FileSink.DEFAULT_PATH)


def _level(value: LogLevel | None, default: Level) -> Level:
    return default if value is None else Level.parse(value.value)


def _console_formatter(settings: LoggingSettings, *, use_color: bool) -> ConsoleFormatter:
    return ConsoleFormatter(
        use_color=use_color,
        timestamp_format=settings.console_timestamp_format,
        level_width=settings.console_level_width,
        logger_width=settings.console_logger_width,
        separator=settings.console_separator,
    )


def _try_build(name: str, factory: Callable[[], SinkWriter]) -> SinkWriter | None:
    try:
        return factory()
    except Exception as exc:  # noqa: BLE001
        report(f"{name} sink disabled: {exc}")
        return None


def build_logger(
    log_settings: LoggingSettings | None = None,
    notify_settings: NotificationSettings | None = None,
    *,
    client: httpx.Client | None = None,
) -> Logger:
    """
    Build a logger from settings (loaded from the environment when omitted).

    Args:
        log_settings: Service name, levels, file and console sinks.
        notify_settings: Webhook and bot sinks.
        client: Shared httpx client for the network sinks; each sink creates
            and owns its own when omitted.

    Raises:
        LoggerConfigurationError: The settings cannot produce a logger.
    """
    log_settings = log_settings or LoggingSettings()
    notify_settings = notify_settings or NotificationSettings()
    default_level = Level.parse(log_settings.level.value)
    plain = _console_formatter(log_settings, use_color=False)

    bindings: list[SinkBinding] = []

    def add(name: str, factory: Callable[[], SinkWriter], formatter: Formatter, level: LogLevel | None) -> None:
        sink = _try_build(name, factory)
        if sink is not None:
            bindings.append(SinkBinding(sink, formatter, _level(level, default_level)))

    if log_settings.file_enabled:
        path = default_log_path(log_settings)
        file_formatter: Formatter = JsonFormatter() if log_settings.file_format == LogFormat.JSON else plain
        add("file", lambda: FileSink(path), file_formatter, log_settings.file_level)

    if log_settings.console_enabled:
        console = ConsoleSink()
        if log_settings.console_format == LogFormat.JSON:
            console_formatter: Formatter = JsonFormatter()
        else:
            use_color = {"always": True, "never": False}.get(log_settings.console_color, console.isatty())
            console_formatter = _console_formatter(log_settings, use_color=use_color)
        add("console", lambda: console, console_formatter, log_settings.console_level)

    if notify_settings.webhook_enabled:
        add(
            "webhook",
            lambda: WebhookSink(
                notify_settings.webhook_url,
                username=notify_settings.webhook_username,
                avatar_url=notify_settings.webhook_avatar_url,
                client=client,
                timeout=notify_settings.timeout_seconds,
                max_pending=notify_settings.max_pending,
            ),
            plain,
            notify_settings.webhook_level,
        )

    if notify_settings.bot_enabled:
        add(
            "bot",
            lambda: BotChannelSink(
                notify_settings.bot_token.get_secret_value(),
                notify_settings.bot_chat_id,
                api_base=notify_settings.bot_api_base,
                client=client,
                timeout=notify_settings.timeout_seconds,
                max_pending=notify_settings.max_pending,
            ),
            plain,
            notify_settings.bot_level,
        )

    return Logger(FanOut(bindings), log_settings.service_name)


def build_dev_logger(service_name: str = "") -> Logger:
    """Console-only, colored, DEBUG-level logger for local development."""
    fanout = FanOut([SinkBinding(ConsoleSink(), ConsoleFormatter(use_color=True), Level.DEBUG)])
    logger = Logger(fanout, service_name)
    logger.info("Develop Running")
    return logger
