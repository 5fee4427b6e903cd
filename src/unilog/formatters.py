"""
Record formatters.

``RecordFormatter`` renders the human-readable line layout::

    [dd-MM-yyyy HH:mm:ss.SSS] [LEVEL] [thread] [pkg.mod.Class.method(int) : 42] message

``JsonFormatter`` renders one JSON object per record for machine consumption.
"""

from __future__ import annotations

import re
import threading
import traceback
from abc import ABC, abstractmethod
from datetime import timezone
from typing import Any, Optional

import orjson

from .callers import CallerResolver
from .levels import level_name
from .types import LogRecord, LoggerConfiguration

_LINE_BREAK = re.compile(r"\r\n|\n")
_reporting = threading.local()


def orjson_dumps(v: Any, *, default: Any = None) -> str:
    """Fast JSON serialization using orjson."""
    return orjson.dumps(v, default=default, option=orjson.OPT_UTC_Z | orjson.OPT_NAIVE_UTC).decode()


def _report_failure(message: str, exc: BaseException) -> None:
    """Send a formatter failure to the global logger, once per thread at a time."""
    if getattr(_reporting, "active", False):
        return
    _reporting.active = True
    try:
        from .core import global_logger

        global_logger().error(message, exc_info=exc)
    finally:
        _reporting.active = False


class Formatter(ABC):
    """Turns a record into the text a handler writes."""

    LINE_SEPARATOR = "\n"

    def __init__(self, config: Optional[LoggerConfiguration] = None) -> None:
        self.config = config or LoggerConfiguration()
        self._resolver = self._build_resolver(self.config)

    def _build_resolver(self, config: LoggerConfiguration) -> CallerResolver:
        return CallerResolver(
            excluded_classes=config.excluded_classes | {type(self)},
            excluded_packages=config.excluded_packages,
        )

    def _resolver_for(self, config: LoggerConfiguration) -> CallerResolver:
        if config is self.config:
            return self._resolver
        return self._build_resolver(config)

    def throwable_text(self, thrown: BaseException) -> str:
        """Full traceback of ``thrown``; empty if it cannot be rendered."""
        try:
            return "".join(traceback.format_exception(thrown))
        except Exception as exc:
            _report_failure("Failed to log exception", exc)
            return ""

    @abstractmethod
    def format(self, record: LogRecord, config: Optional[LoggerConfiguration] = None) -> str:
        ...


class RecordFormatter(Formatter):
    """Prefixes every physical line of a record with the enabled metadata fields."""

    TIMESTAMP_FORMAT = "%d-%m-%Y %H:%M:%S"
    LEVEL_WIDTH = 5

    @classmethod
    def timestamp_text(cls, record: LogRecord) -> str:
        ts = record.timestamp.astimezone(timezone.utc)
        return f"[{ts.strftime(cls.TIMESTAMP_FORMAT)}.{ts.microsecond // 1000:03d}]"

    @classmethod
    def level_text(cls, record: LogRecord) -> str:
        return f" [{level_name(record.level):<{cls.LEVEL_WIDTH}}]"

    @staticmethod
    def thread_text(record: LogRecord) -> str:
        return f" [{record.thread_name}]"

    def caller_text(self, config: LoggerConfiguration) -> str:
        rendered = self._resolver_for(config).render()
        return f" {rendered}" if rendered else ""

    def prefix(self, record: LogRecord, config: Optional[LoggerConfiguration] = None) -> str:
        """Enabled fields in fixed order: timestamp, level, thread, caller."""
        config = config or self.config
        parts = []
        if config.print_timestamp:
            parts.append(self.timestamp_text(record))
        if config.print_level:
            parts.append(self.level_text(record))
        if config.print_thread:
            parts.append(self.thread_text(record))
        if config.print_caller:
            parts.append(self.caller_text(config))
        return "".join(parts)

    def format(self, record: LogRecord, config: Optional[LoggerConfiguration] = None) -> str:
        config = config or self.config
        prefix = self.prefix(record, config)

        text = record.message + self.LINE_SEPARATOR
        if record.thrown is not None:
            text += self.throwable_text(record.thrown)

        lines = _LINE_BREAK.split(text)
        while lines and not lines[-1]:
            lines.pop()
        if not lines:
            lines = [""]

        lead = f"{prefix} " if prefix else ""
        return "".join(f"{lead}{line}{self.LINE_SEPARATOR}" for line in lines)


class JsonFormatter(Formatter):
    """One JSON object per record; the print toggles select the optional keys."""

    def format(self, record: LogRecord, config: Optional[LoggerConfiguration] = None) -> str:
        config = config or self.config
        payload: dict[str, Any] = {"message": record.message, "logger": record.logger_name}
        if config.print_timestamp:
            payload["timestamp"] = record.timestamp
        if config.print_level:
            payload["level"] = level_name(record.level)
        if config.print_thread:
            payload["thread"] = record.thread_name
        if config.print_caller:
            payload["caller"] = self._resolver_for(config).render()
        if record.thrown is not None:
            payload["exception"] = self.throwable_text(record.thrown)
        return orjson_dumps(payload) + self.LINE_SEPARATOR
