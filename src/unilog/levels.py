"""
Canonical log levels and backend level unification.

Every record that reaches a handler carries one of five canonical severities.
Levels coming from other backends (stdlib ``logging`` integers, structlog
method names, the fine-grained ``CONFIG``/``FINE``/``FINER``/``FINEST``
vocabulary) are collapsed onto that scale by :func:`unify`.
"""

from __future__ import annotations

import logging
from enum import IntEnum
from typing import Any


class CanonicalLevel(IntEnum):
    """Five-value severity scale; the integer order is the filtering order."""

    TRACE = 5
    DEBUG = 10
    INFO = 20
    WARN = 30
    ERROR = 40


# =============================================================================
# Native (backend) levels
# =============================================================================

TRACE = 5
FINEST = TRACE
FINER = 7
FINE = logging.DEBUG
CONFIG = 15
DEBUG = logging.DEBUG
INFO = logging.INFO
WARNING = logging.WARNING
ERROR = logging.ERROR
CRITICAL = logging.CRITICAL

_NUMERIC_LEVELS: dict[int, CanonicalLevel] = {
    WARNING: CanonicalLevel.WARN,
    INFO: CanonicalLevel.INFO,
    CONFIG: CanonicalLevel.INFO,
    DEBUG: CanonicalLevel.DEBUG,
    FINER: CanonicalLevel.DEBUG,
    TRACE: CanonicalLevel.TRACE,
}

_NAMED_LEVELS: dict[str, CanonicalLevel] = {
    "critical": CanonicalLevel.ERROR,
    "fatal": CanonicalLevel.ERROR,
    "severe": CanonicalLevel.ERROR,
    "exception": CanonicalLevel.ERROR,
    "error": CanonicalLevel.ERROR,
    "err": CanonicalLevel.ERROR,
    "warning": CanonicalLevel.WARN,
    "warn": CanonicalLevel.WARN,
    "info": CanonicalLevel.INFO,
    "config": CanonicalLevel.INFO,
    "debug": CanonicalLevel.DEBUG,
    "fine": CanonicalLevel.DEBUG,
    "finer": CanonicalLevel.DEBUG,
    "finest": CanonicalLevel.TRACE,
    "trace": CanonicalLevel.TRACE,
}


def unify(native_level: Any) -> CanonicalLevel:
    """Translate a backend-specific level into a canonical one.

    Anything above the warning threshold collapses to ERROR. Unrecognised
    values fall back to DEBUG; this function never raises.
    """
    if isinstance(native_level, CanonicalLevel):
        return native_level
    if isinstance(native_level, bool):
        return CanonicalLevel.DEBUG
    if isinstance(native_level, int):
        if native_level > WARNING:
            return CanonicalLevel.ERROR
        return _NUMERIC_LEVELS.get(native_level, CanonicalLevel.DEBUG)
    if isinstance(native_level, str):
        return _NAMED_LEVELS.get(native_level.strip().lower(), CanonicalLevel.DEBUG)
    return CanonicalLevel.DEBUG


def level_name(level: Any) -> str:
    """Canonical name of ``level`` after unification."""
    return unify(level).name
