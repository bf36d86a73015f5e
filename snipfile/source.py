"""Forward-only line sources feeding the parser."""

from __future__ import annotations

import io
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import IO

import structlog

from snipfile.errors import SourceUnavailable

LOGGER = structlog.get_logger(__name__)


def strip_terminator(line: str) -> str:
    """Drop one trailing ``\\r\\n``, ``\\n`` or ``\\r``."""
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith(("\n", "\r")):
        return line[:-1]
    return line


class LineSource:
    """Hands out one line at a time from any iterable of strings.

    When built around an open handle the handle is closed as soon as the
    iterable is exhausted, or on ``close()``.
    """

    def __init__(
        self,
        lines: Iterable[str],
        *,
        handle: IO[str] | None = None,
        path: str | Path | None = None,
    ) -> None:
        self._iterator: Iterator[str] | None = iter(lines)
        self._handle = handle
        self.path = path
        self.line_number = 0

    @property
    def exhausted(self) -> bool:
        return self._iterator is None

    def readline(self) -> str | None:
        """Return the next line without its terminator, or None at the end."""
        if self._iterator is None:
            return None
        try:
            raw = next(self._iterator)
        except StopIteration:
            self.close()
            return None
        except (OSError, UnicodeDecodeError) as exc:
            LOGGER.error(
                "source.unavailable",
                path=str(self.path) if self.path else None,
                line_number=self.line_number + 1,
                error=str(exc),
            )
            self.close()
            raise SourceUnavailable(
                f"failed to read line {self.line_number + 1}: {exc}", path=self.path
            ) from exc
        self.line_number += 1
        return strip_terminator(raw)

    def close(self) -> None:
        self._iterator = None
        if self._handle is not None:
            self._handle.close()
            self._handle = None


def open_lines(path: str | Path, *, encoding: str = "utf-8") -> LineSource:
    """Open ``path`` for lazy line reading."""

    try:
        handle = Path(path).open("r", encoding=encoding)
    except (OSError, LookupError) as exc:
        LOGGER.error("source.unavailable", path=str(path), error=str(exc))
        raise SourceUnavailable(f"cannot open {path}: {exc}", path=path) from exc
    return LineSource(handle, handle=handle, path=path)


def text_lines(text: str) -> LineSource:
    """Wrap an in-memory string; lines are split lazily."""
    return LineSource(io.StringIO(text, newline=None))
