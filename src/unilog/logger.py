"""
The logger: a structlog processor chain whose last step hands a finished
``LogRecord`` to every attached handler.
"""

from __future__ import annotations

import sys
import threading
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

import structlog
from structlog.typing import EventDict, WrappedLogger

from .callers import CallerResolver, parameter_names
from .handlers import Handler
from .levels import CanonicalLevel, unify
from .types import LogRecord

GLOBAL_LOGGER_NAME = "GLOBAL"
PLACEHOLDER = "{}"


class _NopFile:
    def write(self, s: str) -> None:
        pass

    def flush(self) -> None:
        pass


_NOP_FILE = _NopFile()


# =============================================================================
# Structlog Processors
# =============================================================================


def add_canonical_level(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Unify the requested level (or the method name) onto the canonical scale."""
    event_dict["level"] = unify(event_dict.get("level", method_name))
    return event_dict


def add_timestamp(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Stamp the record with the current UTC instant."""
    event_dict.setdefault("timestamp", datetime.now(timezone.utc))
    return event_dict


def add_thread_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Capture the producing thread's name."""
    event_dict.setdefault("thread_name", threading.current_thread().name)
    return event_dict


def add_logger_name(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict["logger"] = event_dict.pop("_name", GLOBAL_LOGGER_NAME)
    return event_dict


def format_placeholders(message: str, args: tuple[Any, ...]) -> tuple[str, tuple[Any, ...]]:
    """Fill ``{}`` placeholders from ``args`` in order; return the unused args."""
    if not args:
        return message, ()
    parts = message.split(PLACEHOLDER)
    used = min(len(parts) - 1, len(args))
    out = [parts[0]]
    for i, part in enumerate(parts[1:]):
        out.append(str(args[i]) if i < used else PLACEHOLDER)
        out.append(part)
    return "".join(out), tuple(args[used:])


def interpolate_positional_args(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Render ``{}`` placeholders; a trailing unused exception becomes the thrown payload."""
    args = tuple(event_dict.pop("positional_args", ()))
    message, leftover = format_placeholders(str(event_dict.get("event", "")), args)
    if leftover and isinstance(leftover[-1], BaseException) and event_dict.get("exc_info") is None:
        event_dict["exc_info"] = leftover[-1]
    event_dict["event"] = message
    return event_dict


def capture_thrown(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Normalise ``exc_info`` (``True``, a tuple or an exception) into ``thrown``."""
    exc_info = event_dict.pop("exc_info", None)
    if exc_info is True:
        exc_info = sys.exc_info()[1]
    elif isinstance(exc_info, tuple):
        exc_info = exc_info[1] if len(exc_info) > 1 else None
    event_dict["thrown"] = exc_info if isinstance(exc_info, BaseException) else None
    return event_dict


# =============================================================================
# Logger
# =============================================================================


class Logger:
    """Synchronous logger dispatching every enabled record to its handlers.

    The level here gates records before any processing; each handler then
    applies its own minimum level.
    """

    def __init__(
        self,
        name: str = GLOBAL_LOGGER_NAME,
        level: Any = CanonicalLevel.TRACE,
        handlers: Iterable[Handler] = (),
    ):
        self.name = name
        self._level = unify(level)
        self._handlers: tuple[Handler, ...] = tuple(handlers)
        self._lock = threading.Lock()
        self._resolver = CallerResolver()
        self._bound = structlog.wrap_logger(
            structlog.PrintLogger(file=_NOP_FILE),
            processors=[
                add_canonical_level,
                add_timestamp,
                add_thread_name,
                add_logger_name,
                interpolate_positional_args,
                capture_thrown,
                self._dispatch,
            ],
            wrapper_class=structlog.BoundLogger,
            context_class=dict,
            cache_logger_on_first_use=True,
            _name=name,
        )

    def __repr__(self) -> str:
        return f"<Logger {self.name} level={self._level.name} handlers={len(self._handlers)}>"

    # -------------------------------------------------------------------------
    # Handlers and level
    # -------------------------------------------------------------------------

    @property
    def level(self) -> CanonicalLevel:
        return self._level

    @level.setter
    def level(self, value: Any) -> None:
        self._level = unify(value)

    @property
    def handlers(self) -> tuple[Handler, ...]:
        return self._handlers

    def add_handler(self, handler: Handler) -> None:
        with self._lock:
            self._handlers = (*self._handlers, handler)

    def set_handlers(self, handlers: Iterable[Handler]) -> None:
        """Replace all handlers, closing the ones no longer attached."""
        new = tuple(handlers)
        with self._lock:
            old, self._handlers = self._handlers, new
        for handler in old:
            if handler not in new:
                handler.close()

    def flush(self) -> None:
        for handler in self._handlers:
            handler.flush()

    def close(self) -> None:
        for handler in self._handlers:
            handler.close()

    def _dispatch(self, logger: WrappedLogger, method_name: str, event_dict: EventDict) -> str:
        """Build the record and publish it. Returns empty to suppress default output."""
        record = LogRecord(
            timestamp=event_dict["timestamp"],
            level=event_dict["level"],
            message=event_dict["event"],
            thread_name=event_dict["thread_name"],
            logger_name=event_dict["logger"],
            thrown=event_dict["thrown"],
        )
        for handler in self._handlers:
            handler.publish(record)
        return ""

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def is_enabled(self, level: Any) -> bool:
        return unify(level) >= self._level

    def is_trace_enabled(self) -> bool:
        return self.is_enabled(CanonicalLevel.TRACE)

    def is_debug_enabled(self) -> bool:
        return self.is_enabled(CanonicalLevel.DEBUG)

    def is_info_enabled(self) -> bool:
        return self.is_enabled(CanonicalLevel.INFO)

    def is_warn_enabled(self) -> bool:
        return self.is_enabled(CanonicalLevel.WARN)

    def is_error_enabled(self) -> bool:
        return self.is_enabled(CanonicalLevel.ERROR)

    # -------------------------------------------------------------------------
    # Entry points
    # -------------------------------------------------------------------------

    def log(self, level: Any, message: Any, *args: Any, exc_info: Any = None) -> None:
        level = unify(level)
        if not self.is_enabled(level):
            return
        try:
            self._bound.msg(message, level=level, positional_args=args, exc_info=exc_info)
        except Exception as exc:
            try:
                sys.stderr.write(f"unilog: failed to log a {level.name} record: {exc!r}\n")
            except Exception:
                pass  # Logging must never raise into the caller

    def trace(self, message: Any, *args: Any, exc_info: Any = None) -> None:
        self.log(CanonicalLevel.TRACE, message, *args, exc_info=exc_info)

    def debug(self, message: Any, *args: Any, exc_info: Any = None) -> None:
        self.log(CanonicalLevel.DEBUG, message, *args, exc_info=exc_info)

    def info(self, message: Any, *args: Any, exc_info: Any = None) -> None:
        self.log(CanonicalLevel.INFO, message, *args, exc_info=exc_info)

    def warn(self, message: Any, *args: Any, exc_info: Any = None) -> None:
        self.log(CanonicalLevel.WARN, message, *args, exc_info=exc_info)

    warning = warn

    def error(self, message: Any, *args: Any, exc_info: Any = None) -> None:
        self.log(CanonicalLevel.ERROR, message, *args, exc_info=exc_info)

    def exception(self, message: Any, *args: Any, exc_info: Any = True) -> None:
        """ERROR record carrying the exception currently being handled."""
        self.log(CanonicalLevel.ERROR, message, *args, exc_info=exc_info)

    def entry(self, *values: Any) -> None:
        """TRACE ``ENTRY [param = value]...`` for the calling function's parameters."""
        if not self.is_trace_enabled():
            return
        if not values:
            self.trace("ENTRY")
            return
        frame = self._resolver.find_frame()
        names = parameter_names(frame) if frame is not None else ()
        del frame
        rendered = "".join(
            f"[{name} = {values[i] if i < len(values) else ''}]" for i, name in enumerate(names)
        )
        self.trace(f"ENTRY {rendered}".rstrip())

    def exit(self, *value: Any) -> None:
        """TRACE ``EXIT`` or ``EXIT [return = value]``."""
        if not value:
            self.trace("EXIT")
        else:
            self.trace(f"EXIT [return = {value[0]}]")
