"""
Core logging configuration and initialization logic.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from .handlers import ConsoleHandler, Handler
from .levels import CanonicalLevel
from .logger import Logger
from .registry import LoggerRegistry, default_registry
from .types import LoggerConfiguration

DEFAULT_LOG_FOLDER = "./logs"

# =============================================================================
# Global State
# =============================================================================

_registry: LoggerRegistry = default_registry


def get_registry() -> LoggerRegistry:
    return _registry


def use_registry(registry: LoggerRegistry) -> LoggerRegistry:
    """Swap the process-wide registry (tests, embedding). Returns the previous one."""
    global _registry
    previous, _registry = _registry, registry
    return previous


def get_logger(name: Optional[str] = None) -> Logger:
    """Get the shared logger. Every name resolves to the same global instance."""
    return _registry.get_logger(name)


def global_logger() -> Logger:
    return _registry.get_logger()


# =============================================================================
# Configuration Logic
# =============================================================================


def configure_logging(
    *handlers: Handler,
    level: Any = CanonicalLevel.TRACE,
    config: Optional[LoggerConfiguration] = None,
    capture_stdlib: bool = False,
) -> Logger:
    """
    Configure the global logger.

    Args:
        handlers: Handlers to attach; existing handlers are closed and replaced.
            With none given a ``ConsoleHandler`` built from ``config`` is used.
        level: Minimum level of the logger itself. Handlers filter further.
        config: Configuration for the default console handler
        capture_stdlib: Route records of the standard ``logging`` module here too
    """
    logger = global_logger()
    if not handlers:
        handlers = (ConsoleHandler(config or LoggerConfiguration(level=level)),)

    logger.level = level
    logger.set_handlers(handlers)

    if capture_stdlib:
        from .interceptors import intercept_stdlib_logging

        intercept_stdlib_logging(level)
    return logger


def create_log_folder(path: str | Path = DEFAULT_LOG_FOLDER) -> Path:
    folder = Path(path)
    folder.mkdir(parents=True, exist_ok=True)
    return folder


def create_default_log_folder() -> Path:
    return create_log_folder(DEFAULT_LOG_FOLDER)
