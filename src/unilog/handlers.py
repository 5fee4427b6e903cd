"""
Level-gated handlers: a formatter plus an exclusively owned sink.
"""

from __future__ import annotations

import sys
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional, TextIO

from .exceptions import SinkConfigurationError
from .formatters import Formatter, RecordFormatter
from .levels import CanonicalLevel, unify
from .sinks import RotatingFileWriter
from .types import LogRecord, LoggerConfiguration

DEFAULT_FILE_PATTERN = "./logs/unilog%u.log"


class Handler(ABC):
    """Base handler.

    Formatting runs without holding the handler lock; only the sink write is
    serialized so concurrent publishers never interleave partial lines.
    """

    def __init__(
        self,
        config: Optional[LoggerConfiguration] = None,
        *,
        formatter: Optional[Formatter] = None,
        level: Any = None,
    ):
        self.config = config or LoggerConfiguration()
        self.formatter = formatter or RecordFormatter(self.config)
        self.level: CanonicalLevel = unify(level) if level is not None else self.config.level
        self._lock = threading.RLock()

    def is_loggable(self, record: LogRecord) -> bool:
        return record.level >= self.level

    def publish(self, record: LogRecord) -> None:
        if not self.is_loggable(record):
            return
        try:
            text = self.formatter.format(record)
            with self._lock:
                self.emit(record, text)
        except Exception as exc:
            self.handle_error(record, exc)

    @abstractmethod
    def emit(self, record: LogRecord, text: str) -> None:
        """Write already formatted text to the sink."""
        ...

    def alternate_stream(self, record: LogRecord) -> TextIO:
        return sys.stderr

    def handle_error(self, record: LogRecord, exc: BaseException) -> None:
        """Best-effort report of a failed write; never raises."""
        try:
            stream = self.alternate_stream(record)
            stream.write(f"unilog: {type(self).__name__} dropped a {record.level.name} record: {exc!r}\n")
            stream.flush()
        except Exception:
            pass  # Nowhere left to report to

    def flush(self) -> None:
        pass

    def close(self) -> None:
        pass

    def __enter__(self) -> "Handler":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class ConsoleHandler(Handler):
    """Prints ERROR and WARN records to the error stream, everything else to stdout.

    Streams that are not injected are looked up on every write, so redirections
    of ``sys.stdout``/``sys.stderr`` are honoured.
    """

    def __init__(
        self,
        config: Optional[LoggerConfiguration] = None,
        *,
        formatter: Optional[Formatter] = None,
        level: Any = None,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
    ):
        super().__init__(config, formatter=formatter, level=level)
        self._stdout = stdout
        self._stderr = stderr

    @property
    def stdout(self) -> TextIO:
        return self._stdout or sys.stdout

    @property
    def stderr(self) -> TextIO:
        return self._stderr or sys.stderr

    def stream_for(self, record: LogRecord) -> TextIO:
        if record.level >= CanonicalLevel.WARN:
            return self.stderr
        return self.stdout

    def alternate_stream(self, record: LogRecord) -> TextIO:
        if record.level >= CanonicalLevel.WARN:
            return self.stdout
        return self.stderr

    def emit(self, record: LogRecord, text: str) -> None:
        stream = self.stream_for(record)
        stream.write(text)
        stream.flush()

    def flush(self) -> None:
        with self._lock:
            self.stdout.flush()
            self.stderr.flush()


class FileHandler(Handler):
    """Appends formatted records to a (optionally rotating) UTF-8 file.

    Args:
        config: Formatter/level configuration
        pattern: Target path pattern, see :mod:`unilog.sinks`
        max_bytes: Size limit per file before rotation
        backup_count: Number of files kept, the live one included
        append: Keep existing file content
    """

    def __init__(
        self,
        config: Optional[LoggerConfiguration] = None,
        pattern: str | Path = DEFAULT_FILE_PATTERN,
        *,
        formatter: Optional[Formatter] = None,
        level: Any = None,
        max_bytes: Optional[int] = None,
        backup_count: int = 1,
        append: bool = True,
    ):
        super().__init__(config, formatter=formatter, level=level)
        try:
            self._writer = RotatingFileWriter(
                pattern,
                max_bytes=max_bytes,
                backup_count=backup_count,
                append=append,
            )
        except (OSError, ValueError) as exc:
            raise SinkConfigurationError(target=str(pattern), reason=str(exc)) from exc

    @property
    def path(self) -> Path:
        return self._writer.path

    def emit(self, record: LogRecord, text: str) -> None:
        self._writer.write(text)

    def flush(self) -> None:
        with self._lock:
            self._writer.flush()

    def close(self) -> None:
        with self._lock:
            self._writer.close()
