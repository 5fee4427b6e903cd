"""
unilog exception hierarchy.

Only configuration errors ever leave the library: handlers refuse to be built
around a sink they cannot open. Everything raised on the logging hot path is
recovered internally.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class LoggingError(Exception):
    """Root of all unilog errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}


class SinkConfigurationError(LoggingError):
    """A handler's sink target cannot be opened or written."""

    def __init__(self, *, target: str, reason: str) -> None:
        super().__init__(
            f"Cannot open log sink '{target}': {reason}",
            code="SINK_CONFIGURATION",
            details={"target": target, "reason": reason},
        )


class NoCallerFound(LoggingError):
    """Every frame on the inspected stack belongs to an excluded class or package."""

    def __init__(self, *, depth: int) -> None:
        super().__init__(
            f"No caller frame outside the excluded set within {depth} frames",
            code="NO_CALLER_FOUND",
            details={"depth": depth},
        )
