from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from .levels import CanonicalLevel, unify


def qualified_name(target: Any) -> str:
    """``module.QualName`` of a class, or the string itself."""
    if isinstance(target, str):
        return target
    return f"{target.__module__}.{target.__qualname__}"


@dataclass(frozen=True)
class LogRecord:
    """A single log event.

    Created on the calling thread and consumed synchronously by the handlers;
    timestamp and thread name are captured here, never at format time.
    """

    timestamp: datetime
    level: CanonicalLevel
    message: str
    thread_name: str
    logger_name: str
    thrown: Optional[BaseException] = None

    @classmethod
    def create(
        cls,
        level: Any,
        message: str,
        *,
        logger_name: str,
        thrown: Optional[BaseException] = None,
        timestamp: Optional[datetime] = None,
        thread_name: Optional[str] = None,
    ) -> "LogRecord":
        return cls(
            timestamp=timestamp or datetime.now(timezone.utc),
            level=unify(level),
            message=message,
            thread_name=thread_name if thread_name is not None else threading.current_thread().name,
            logger_name=logger_name,
            thrown=thrown,
        )


class LoggerConfiguration(BaseModel):
    """Immutable snapshot of the settings one formatter/handler pair is built from.

    Handlers keep the instance they were constructed with; deriving a new
    configuration with :meth:`with_overrides` never affects them.
    """

    model_config = ConfigDict(frozen=True)

    level: CanonicalLevel = CanonicalLevel.TRACE
    excluded_classes: frozenset[str] = frozenset()
    excluded_packages: frozenset[str] = frozenset()
    print_timestamp: bool = True
    print_level: bool = True
    print_thread: bool = True
    print_caller: bool = True

    @field_validator("level", mode="before")
    @classmethod
    def _unify_level(cls, value: Any) -> CanonicalLevel:
        return unify(value)

    @field_validator("excluded_classes", "excluded_packages", mode="before")
    @classmethod
    def _normalize_names(cls, value: Any) -> frozenset[str]:
        return as_names(value)

    def with_overrides(self, **changes: Any) -> "LoggerConfiguration":
        """Return a new configuration with the given fields replaced."""
        return type(self).model_validate({**self.model_dump(), **changes})


def as_names(items: Any) -> frozenset[str]:
    """Qualified names for a single class/name or an iterable of them."""
    if not items:
        return frozenset()
    if isinstance(items, (str, type)):
        items = [items]
    return frozenset(qualified_name(item) for item in items)
