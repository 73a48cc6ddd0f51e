"""
Logging Configuration.
"""

from enum import Enum
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"
    PANIC = "PANIC"
    FATAL = "FATAL"


class LogFormat(str, Enum):
    CONSOLE = "console"
    JSON = "json"


ColorMode = Literal["auto", "always", "never"]


class LoggingSettings(BaseSettings):
    """Local sinks (file, console) and the service identity."""

    model_config = SettingsConfigDict(
        env_prefix="FANLOG_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    service_name: str = Field(default="", description="Prefix for every message, e.g. [billing]")
    level: LogLevel = Field(default=LogLevel.DEBUG, description="Default minimum level for every sink")

    file_enabled: bool = Field(default=True, description="Enable the local file sink")
    file_path: str = Field(default="", description="Log file path; empty selects a default")
    file_dir: str = Field(default="logs", description="Directory for timestamped default file names")
    timestamped_file: bool = Field(
        default=False,
        description="When file_path is empty, name the file after the service and start time",
    )
    file_format: LogFormat = Field(default=LogFormat.CONSOLE, description="File sink format")
    file_level: LogLevel | None = Field(default=None, description="File sink minimum level")

    console_enabled: bool = Field(default=True, description="Enable the stdout sink")
    console_format: LogFormat = Field(default=LogFormat.CONSOLE, description="Console sink format")
    console_level: LogLevel | None = Field(default=None, description="Console sink minimum level")
    console_color: ColorMode = Field(default="auto", description="ANSI colors on the console sink")
    console_timestamp_format: str = Field(
        default="%Y-%m-%d %H:%M:%S",
        description="Console timestamp format",
    )
    console_level_width: int = Field(default=5, description="Console level column width")
    console_logger_width: int = Field(default=0, description="Console logger column width")
    console_separator: str = Field(default=" | ", description="Console column separator")
