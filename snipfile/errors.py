"""Exceptions raised while reading and assembling snippet files."""

from __future__ import annotations

from pathlib import Path


class SnippetError(Exception):
    """Base class for every error raised by the library."""


class SourceUnavailable(SnippetError):
    """The underlying file or stream could not be opened or read."""

    def __init__(self, message: str, *, path: str | Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class UnterminatedBlock(SnippetError):
    """The source ended while a block was still open."""

    def __init__(self, title: str, *, line_number: int) -> None:
        super().__init__(
            f"snippet '{title}' opened on line {line_number} has no end marker"
        )
        self.title = title
        self.line_number = line_number


class DuplicateTitle(SnippetError):
    """A snippet with the same title is already buffered."""

    def __init__(self, title: str) -> None:
        super().__init__(f"a snippet titled '{title}' already exists")
        self.title = title
