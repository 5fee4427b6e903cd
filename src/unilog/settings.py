"""
Logging Configuration.

Environment-driven settings (``UNILOG_`` prefix, ``.env`` supported) that
build the handler set for the global logger. The core itself never reads the
environment; only this layer does.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .core import configure_logging, create_log_folder
from .formatters import Formatter, JsonFormatter, RecordFormatter
from .handlers import ConsoleHandler, FileHandler, Handler
from .levels import CanonicalLevel
from .logger import Logger
from .types import LoggerConfiguration


class LogLevel(str, Enum):
    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"


class LogFormat(str, Enum):
    TEXT = "text"
    JSON = "json"


class LoggingSettings(BaseSettings):
    """Logging infrastructure configuration."""

    model_config = SettingsConfigDict(
        env_prefix="UNILOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    level: LogLevel = Field(default=LogLevel.TRACE, description="Minimum level")
    sinks: str = Field(default="console", description="Comma-separated sink names (console, file)")
    format: LogFormat = Field(default=LogFormat.TEXT, description="Output format")
    log_dir: str = Field(default="./logs", description="Directory created before file sinks attach")
    file_pattern: str = Field(default="unilog%u.log", description="File name pattern inside log_dir")
    max_bytes: Optional[int] = Field(default=None, description="Rotate when a file would exceed this size")
    backup_count: int = Field(default=1, ge=1, description="Files kept, the live one included")
    append: bool = Field(default=True, description="Append to existing log files")
    print_timestamp: bool = True
    print_level: bool = True
    print_thread: bool = True
    print_caller: bool = True
    excluded_packages: list[str] = Field(default_factory=list, description="Extra caller packages to skip")
    capture_stdlib: bool = Field(default=False, description="Route stdlib logging records here")

    @property
    def canonical_level(self) -> CanonicalLevel:
        return CanonicalLevel[self.level.value]

    @property
    def sink_names(self) -> list[str]:
        return [s.strip().lower() for s in self.sinks.split(",") if s.strip()]

    def to_configuration(self) -> LoggerConfiguration:
        return LoggerConfiguration(
            level=self.canonical_level,
            excluded_packages=self.excluded_packages,
            print_timestamp=self.print_timestamp,
            print_level=self.print_level,
            print_thread=self.print_thread,
            print_caller=self.print_caller,
        )

    def build_formatter(self, config: LoggerConfiguration) -> Formatter:
        if self.format == LogFormat.JSON:
            return JsonFormatter(config)
        return RecordFormatter(config)

    def build_handlers(self) -> list[Handler]:
        """Create the requested sinks; unknown sink names are ignored."""
        config = self.to_configuration()
        handlers: list[Handler] = []
        for name in self.sink_names:
            if name == "console":
                handlers.append(ConsoleHandler(config, formatter=self.build_formatter(config)))
            elif name == "file":
                folder = create_log_folder(self.log_dir)
                handlers.append(
                    FileHandler(
                        config,
                        Path(folder, self.file_pattern),
                        formatter=self.build_formatter(config),
                        max_bytes=self.max_bytes,
                        backup_count=self.backup_count,
                        append=self.append,
                    )
                )
        return handlers


def configure_from_settings(settings: Optional[LoggingSettings] = None) -> Logger:
    """Configure the global logger from ``settings`` (default: the environment)."""
    settings = settings or LoggingSettings()
    return configure_logging(
        *settings.build_handlers(),
        level=settings.canonical_level,
        config=settings.to_configuration(),
        capture_stdlib=settings.capture_stdlib,
    )
