"""
unilog: a single global logger with call-site aware formatting.

Records are formatted with optional timestamp, level, thread and caller
metadata and routed to level-gated handlers:
- console: WARN/ERROR to stderr, everything else to stdout
- file: UTF-8 text file with size/count limited rotation

Library: structlog processor chain, orjson for the JSON layout,
pydantic-settings for environment configuration.
"""

from .core import configure_logging, create_default_log_folder, create_log_folder, get_logger, global_logger
from .exceptions import LoggingError, NoCallerFound, SinkConfigurationError
from .facade import (
    debug,
    entry,
    error,
    exception,
    exit,
    info,
    is_debug_enabled,
    is_error_enabled,
    is_info_enabled,
    is_trace_enabled,
    is_warn_enabled,
    trace,
    warn,
    warning,
)
from .formatters import JsonFormatter, RecordFormatter
from .handlers import ConsoleHandler, FileHandler, Handler
from .levels import CanonicalLevel, unify
from .logger import Logger
from .registry import LoggerRegistry
from .settings import LoggingSettings, configure_from_settings
from .types import LogRecord, LoggerConfiguration

__all__ = [
    "CanonicalLevel",
    "ConsoleHandler",
    "FileHandler",
    "Handler",
    "JsonFormatter",
    "LogRecord",
    "Logger",
    "LoggerConfiguration",
    "LoggerRegistry",
    "LoggingError",
    "LoggingSettings",
    "NoCallerFound",
    "RecordFormatter",
    "SinkConfigurationError",
    "configure_from_settings",
    "configure_logging",
    "create_default_log_folder",
    "create_log_folder",
    "debug",
    "entry",
    "error",
    "exception",
    "exit",
    "get_logger",
    "global_logger",
    "info",
    "is_debug_enabled",
    "is_error_enabled",
    "is_info_enabled",
    "is_trace_enabled",
    "is_warn_enabled",
    "trace",
    "unify",
    "warn",
    "warning",
]
