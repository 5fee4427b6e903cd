"""
Process-wide logger registry.

Every requested name is canonicalised to ``GLOBAL``: the registry hands out one
shared logger, created lazily on first access.
"""

from __future__ import annotations

import sys
import threading
from typing import Any, Callable, Dict, Optional

from .logger import GLOBAL_LOGGER_NAME, Logger

LoggerFactory = Callable[[str], Logger]


class LoggerRegistry:
    """Name -> logger cache with insert-if-absent semantics.

    Lookups take no lock. On a miss a candidate is fully constructed and then
    published with ``dict.setdefault``, which is atomic; a thread that loses
    the race drops its candidate and returns the winner. ``on_first_create``
    runs once, for the instance that won.
    """

    def __init__(
        self,
        factory: LoggerFactory = Logger,
        on_first_create: Optional[Callable[[Logger], None]] = None,
    ):
        self._factory = factory
        self._on_first_create = on_first_create
        self._loggers: Dict[str, Logger] = {}

    @staticmethod
    def canonical_name(name: Optional[str]) -> str:
        return GLOBAL_LOGGER_NAME

    def get_logger(self, name: Optional[str] = None) -> Logger:
        key = self.canonical_name(name)
        logger = self._loggers.get(key)
        if logger is not None:
            return logger

        candidate = self._factory(key)
        winner = self._loggers.setdefault(key, candidate)
        if winner is candidate and self._on_first_create is not None:
            self._on_first_create(winner)
        return winner

    def __contains__(self, name: Optional[str]) -> bool:
        return self.canonical_name(name) in self._loggers

    def __len__(self) -> int:
        return len(self._loggers)


# =============================================================================
# Uncaught error hook
# =============================================================================

_hook_lock = threading.Lock()
_hook_installed = False


def _route_uncaught(logger: Logger, thread_name: str, exc: Optional[BaseException]) -> None:
    logger.error(f"Uncaught exception on thread {thread_name}", exc_info=exc)


def install_uncaught_hook(logger: Logger) -> bool:
    """Route uncaught errors on any thread to ``logger``.

    While ``logger`` has no handlers, errors are passed to the hooks that were
    in place before, so nothing is lost before logging is configured.

    Returns ``True`` if this call installed the hooks, ``False`` if they were
    already in place.
    """
    global _hook_installed

    with _hook_lock:
        if _hook_installed:
            return False

        previous_hook = sys.excepthook
        previous_thread_hook = threading.excepthook

        def excepthook(exc_type: type[BaseException], exc: BaseException, tb: Any) -> None:
            if issubclass(exc_type, KeyboardInterrupt) or not logger.handlers:
                previous_hook(exc_type, exc, tb)
                return
            _route_uncaught(logger, threading.current_thread().name, exc)

        def thread_excepthook(args: threading.ExceptHookArgs) -> None:
            if args.exc_type is SystemExit:
                return
            if not logger.handlers:
                previous_thread_hook(args)
                return
            name = args.thread.name if args.thread is not None else "<unknown>"
            _route_uncaught(logger, name, args.exc_value)

        sys.excepthook = excepthook
        threading.excepthook = thread_excepthook
        _hook_installed = True
        return True


default_registry = LoggerRegistry(on_first_create=install_uncaught_hook)
