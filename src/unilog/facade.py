"""
Module-level convenience API forwarding to the global logger.

    import unilog

    unilog.info("loaded {} entries", count)
    unilog.warn("disk low")
"""

from __future__ import annotations

from typing import Any

from .core import global_logger


def trace(message: Any, *args: Any, exc_info: Any = None) -> None:
    global_logger().trace(message, *args, exc_info=exc_info)


def debug(message: Any, *args: Any, exc_info: Any = None) -> None:
    global_logger().debug(message, *args, exc_info=exc_info)


def info(message: Any, *args: Any, exc_info: Any = None) -> None:
    global_logger().info(message, *args, exc_info=exc_info)


def warn(message: Any, *args: Any, exc_info: Any = None) -> None:
    global_logger().warn(message, *args, exc_info=exc_info)


warning = warn


def error(message: Any, *args: Any, exc_info: Any = None) -> None:
    global_logger().error(message, *args, exc_info=exc_info)


def exception(message: Any, *args: Any) -> None:
    global_logger().exception(message, *args)


def is_trace_enabled() -> bool:
    return global_logger().is_trace_enabled()


def is_debug_enabled() -> bool:
    return global_logger().is_debug_enabled()


def is_info_enabled() -> bool:
    return global_logger().is_info_enabled()


def is_warn_enabled() -> bool:
    return global_logger().is_warn_enabled()


def is_error_enabled() -> bool:
    return global_logger().is_error_enabled()


def entry(*values: Any) -> None:
    global_logger().entry(*values)


def exit(*value: Any) -> None:
    global_logger().exit(*value)
