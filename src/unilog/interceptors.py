"""
Interceptors for capturing standard library logs.
"""

import logging
from typing import Any

from .core import global_logger
from .levels import CanonicalLevel, unify


class RedirectStdLibHandler(logging.Handler):
    """
    Redirect standard library logging records to the global logger.
    Native stdlib levels are unified onto the canonical scale, so third-party
    output shares the same handlers, layout and filtering.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = record.getMessage()
            exc = record.exc_info[1] if record.exc_info else None
            global_logger().log(unify(record.levelno), msg, exc_info=exc)
        except Exception:
            self.handleError(record)


def intercept_stdlib_logging(level: Any = CanonicalLevel.TRACE) -> RedirectStdLibHandler:
    """Replace the root logger's handlers with a single redirecting handler."""
    handler = RedirectStdLibHandler()
    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(int(unify(level)))
    return handler
