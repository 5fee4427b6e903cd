"""
Call-site resolution by stack introspection.

The resolver walks the live stack from the innermost frame outward and picks
the first frame that does not belong to the logging machinery itself, so the
rendered call site names the code that invoked the logging entry point rather
than the formatter or handler doing the work.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from types import FrameType
from typing import Any, Iterator, Optional

from .exceptions import NoCallerFound
from .types import as_names

DEFAULT_EXCLUDED_PACKAGES = frozenset({"unilog", "structlog", "logging"})
MAX_STACK_DEPTH = 128

_RECEIVER_NAMES = ("self", "cls")


@dataclass(frozen=True)
class CallSite:
    """Identity of the code that emitted a record."""

    class_name: str
    method: str
    parameter_types: tuple[str, ...]
    line: int

    def render(self) -> str:
        params = ", ".join(self.parameter_types)
        return f"[{self.class_name}.{self.method}({params}) : {self.line}]"


def declaring_class(frame: FrameType) -> str:
    """Module-qualified owner of the code running in ``frame``.

    ``pkg.mod.Worker.run`` is owned by ``pkg.mod.Worker``; a module-level
    function is owned by its module.
    """
    code = frame.f_code
    module = frame.f_globals.get("__name__", "")
    qualname = getattr(code, "co_qualname", code.co_name)
    owner, _, _ = qualname.rpartition(".")
    return f"{module}.{owner}" if owner else module


def parameter_names(frame: FrameType) -> tuple[str, ...]:
    """Declared parameters of the function running in ``frame``, receiver excluded."""
    code = frame.f_code
    count = code.co_argcount + code.co_kwonlyargcount
    if code.co_flags & inspect.CO_VARARGS:
        count += 1
    if code.co_flags & inspect.CO_VARKEYWORDS:
        count += 1
    names = code.co_varnames[:count]
    if code.co_argcount and names and names[0] in _RECEIVER_NAMES:
        names = names[1:]
    return names


def parameter_types(frame: FrameType) -> tuple[str, ...]:
    """Runtime type names of the arguments bound in ``frame``."""
    values = frame.f_locals
    return tuple(
        type(values[name]).__name__ if name in values else "?"
        for name in parameter_names(frame)
    )


class CallerResolver:
    """Finds the first stack frame outside the excluded classes and packages."""

    def __init__(
        self,
        excluded_classes: Any = None,
        excluded_packages: Any = None,
        max_depth: int = MAX_STACK_DEPTH,
    ) -> None:
        self.excluded_classes = as_names(excluded_classes)
        self.excluded_packages = DEFAULT_EXCLUDED_PACKAGES | as_names(excluded_packages)
        self.max_depth = max_depth

    def is_excluded(self, frame: FrameType) -> bool:
        owner = declaring_class(frame)
        if owner in self.excluded_classes:
            return True
        return any(owner == pkg or owner.startswith(pkg + ".") for pkg in self.excluded_packages)

    def _walk(self, start: Optional[FrameType]) -> Iterator[FrameType]:
        frame = start if start is not None else inspect.currentframe()
        depth = 0
        while frame is not None and depth < self.max_depth:
            yield frame
            frame = frame.f_back
            depth += 1

    def find_frame(self, start: Optional[FrameType] = None) -> Optional[FrameType]:
        """First qualifying frame at or above ``start`` (default: the current frame)."""
        for frame in self._walk(start):
            if not self.is_excluded(frame):
                return frame
        return None

    def resolve(self, start: Optional[FrameType] = None) -> CallSite:
        frame = self.find_frame(start)
        if frame is None:
            raise NoCallerFound(depth=self.max_depth)
        try:
            return CallSite(
                class_name=declaring_class(frame),
                method=frame.f_code.co_name,
                parameter_types=parameter_types(frame),
                line=frame.f_lineno,
            )
        finally:
            del frame

    def render(self, start: Optional[FrameType] = None) -> str:
        """Rendered call site, or an empty string when no caller qualifies."""
        try:
            return self.resolve(start).render()
        except NoCallerFound:
            return ""
