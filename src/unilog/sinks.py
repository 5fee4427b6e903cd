"""
File-writing primitive with size/count limited rotation.

Path patterns understand ``%u`` (unique number, always ``0``), ``%g``
(generation number) and ``%%``. Without ``%g`` older generations get a
numeric suffix: ``app.log`` rotates to ``app.log.1``, ``app.log.2``, ...
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import IO, Optional

_TOKEN = re.compile(r"%[ug%]")


def expand_pattern(pattern: str, generation: int = 0) -> Path:
    has_generation = "%g" in pattern.replace("%%", "")

    def substitute(match: re.Match[str]) -> str:
        token = match.group(0)
        if token == "%g":
            return str(generation)
        if token == "%u":
            return "0"
        return "%"

    path = _TOKEN.sub(substitute, pattern)
    if generation and not has_generation:
        path = f"{path}.{generation}"
    return Path(path)


class RotatingFileWriter:
    """Append UTF-8 text to a file, rotating when ``max_bytes`` would be exceeded.

    Args:
        pattern: Target path pattern
        max_bytes: Size limit per file (``None`` disables rotation)
        backup_count: Total number of files kept, the live one included
        append: Keep existing content instead of truncating on open
    """

    def __init__(
        self,
        pattern: str | Path,
        max_bytes: Optional[int] = None,
        backup_count: int = 1,
        append: bool = True,
    ):
        self._pattern = str(pattern)
        self._max_bytes = max_bytes if max_bytes and max_bytes > 0 else None
        self._backup_count = max(backup_count, 1)
        self._path = expand_pattern(self._pattern)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._file: Optional[IO[str]] = self._open("a" if append else "w")

    @property
    def path(self) -> Path:
        return self._path

    @property
    def closed(self) -> bool:
        return self._file is None

    def _open(self, mode: str) -> IO[str]:
        return open(self._path, mode, encoding="utf-8")

    def write(self, text: str) -> None:
        if self._file is None:
            raise ValueError(f"write to closed log file {self._path}")
        if self._max_bytes is not None:
            self._maybe_rotate(len(text.encode("utf-8")))
        self._file.write(text)
        self._file.flush()

    def _maybe_rotate(self, incoming: int) -> None:
        size = self._file.tell() if self._file is not None else 0
        if size == 0 or size + incoming <= self._max_bytes:
            return

        self._file.close()
        self._file = None
        rotated = False
        try:
            if self._backup_count > 1:
                for i in range(self._backup_count - 2, 0, -1):
                    src = expand_pattern(self._pattern, i)
                    if src.exists():
                        src.replace(expand_pattern(self._pattern, i + 1))
                self._path.replace(expand_pattern(self._pattern, 1))
            rotated = True
        finally:
            # A failed move keeps appending to the live file.
            self._file = self._open("w" if rotated else "a")

    def flush(self) -> None:
        if self._file is not None:
            self._file.flush()

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None
