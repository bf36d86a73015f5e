"""Streaming parser for snippet files.

The parser pulls lines from its source only when asked for the next snippet,
so memory use is bounded by the largest open block rather than the file.
Every collection-style helper is built on :meth:`SnippetParser.next_snippet`.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from enum import Enum
from pathlib import Path
from typing import IO

import structlog

from snipfile import fmt, metrics
from snipfile.errors import DuplicateTitle, SourceUnavailable, UnterminatedBlock
from snipfile.model import Snippet
from snipfile.settings import Settings, get_settings
from snipfile.source import LineSource, open_lines, text_lines

LOGGER = structlog.get_logger(__name__)


class ScanState(str, Enum):
    """Position of the scanner relative to block boundaries."""

    IDLE = "idle"
    IN_BLOCK = "in_block"
    EXHAUSTED = "exhausted"


class SnippetParser:
    """Reads a snippet file lazily, or holds snippets built in memory.

    The buffer keeps snippets completed by scanning, in source order, followed
    by snippets added by the caller, in the order they were added. Titles are
    unique across the whole buffer; a repeated title raises
    :class:`~snipfile.errors.DuplicateTitle`.

    Iterating a parser yields the snippets still to be scanned from its
    source, then the caller-added snippets it has not yielded yet.
    """

    def __init__(
        self,
        source: LineSource | None = None,
        *,
        settings: Settings | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._source = source
        self._state = ScanState.IDLE if source is not None else ScanState.EXHAUSTED
        self._scanned: dict[str, Snippet] = {}
        self._added: dict[str, Snippet] = {}
        self._title = ""
        self._body: list[str] = []
        self._block_line = 0
        self._added_cursor = 0

    # construction -------------------------------------------------------

    @classmethod
    def read(cls, path: str | Path, *, settings: Settings | None = None) -> SnippetParser:
        """Open ``path`` and bind a parser to it; nothing is scanned yet."""

        settings = settings or get_settings()
        try:
            source = open_lines(path, encoding=settings.encoding)
        except SourceUnavailable:
            if settings.metrics_enabled:
                metrics.observe_error("source_unavailable")
            raise
        return cls(source, settings=settings)

    @classmethod
    def from_text(cls, text: str, *, settings: Settings | None = None) -> SnippetParser:
        return cls(text_lines(text), settings=settings)

    @classmethod
    def from_lines(
        cls, lines: Iterable[str], *, settings: Settings | None = None
    ) -> SnippetParser:
        """Bind a parser to any iterable of lines, such as an open file."""
        return cls(LineSource(lines), settings=settings)

    @classmethod
    def from_snippets(
        cls, snippets: Iterable[Snippet], *, settings: Settings | None = None
    ) -> SnippetParser:
        """Build a parser with nothing left to scan and a pre-filled buffer."""

        parser = cls(settings=settings)
        for snippet in snippets:
            parser.add_snippet(snippet)
        return parser

    # scanning -----------------------------------------------------------

    @property
    def state(self) -> ScanState:
        return self._state

    @property
    def line_number(self) -> int:
        """Number of source lines consumed so far."""
        return self._source.line_number if self._source is not None else 0

    def next_snippet(self) -> Snippet | None:
        """Scan forward to the next complete snippet.

        Returns None once the source is exhausted, on this and every later
        call. Raises UnterminatedBlock if the source ends inside a block,
        SourceUnavailable if a read fails, and DuplicateTitle if the completed
        snippet's title is already buffered.
        """

        while self._state is not ScanState.EXHAUSTED:
            line = self._read_line()
            if line is None:
                self._finish()
                return None
            if self._state is ScanState.IDLE:
                title = fmt.parse_start_marker(line)
                if title is not None:
                    self._open_block(title)
            elif fmt.is_end_marker(line):
                return self._close_block()
            else:
                self._body.append(line)
        return None

    def __iter__(self) -> Iterator[Snippet]:
        return self

    def __next__(self) -> Snippet:
        snippet = self.next_snippet()
        if snippet is not None:
            return snippet
        if self._added_cursor < len(self._added):
            snippet = list(self._added.values())[self._added_cursor]
            self._added_cursor += 1
            return snippet
        raise StopIteration

    def _read_line(self) -> str | None:
        if self._source is None:
            return None
        try:
            line = self._source.readline()
        except SourceUnavailable:
            self._reset_block()
            self._state = ScanState.EXHAUSTED
            self._observe_error("source_unavailable")
            raise
        if line is not None and self._settings.metrics_enabled:
            metrics.observe_lines()
        return line

    def _open_block(self, title: str) -> None:
        self._state = ScanState.IN_BLOCK
        self._title = title
        self._body = []
        self._block_line = self.line_number

    def _close_block(self) -> Snippet:
        snippet = Snippet(self._title, "\n".join(self._body))
        body_lines = len(self._body)
        block_line = self._block_line
        self._reset_block()
        self._state = ScanState.IDLE

        if snippet.title in self:
            LOGGER.warning(
                "parser.duplicate_title", title=snippet.title, line_number=block_line
            )
            self._observe_error("duplicate_title")
            raise DuplicateTitle(snippet.title)

        self._scanned[snippet.title] = snippet
        if self._settings.metrics_enabled:
            metrics.observe_snippet(body_lines=body_lines)
        LOGGER.debug(
            "parser.snippet", title=snippet.title, line_number=block_line, lines=body_lines
        )
        return snippet

    def _finish(self) -> None:
        open_title = self._title if self._state is ScanState.IN_BLOCK else None
        block_line = self._block_line
        self._reset_block()
        self._state = ScanState.EXHAUSTED
        if open_title is None:
            LOGGER.debug("parser.exhausted", snippets=len(self._scanned))
            return
        LOGGER.warning(
            "parser.unterminated_block", title=open_title, line_number=block_line
        )
        self._observe_error("unterminated_block")
        raise UnterminatedBlock(open_title, line_number=block_line)

    def _reset_block(self) -> None:
        self._title = ""
        self._body = []
        self._block_line = 0

    def _observe_error(self, kind: str) -> None:
        if self._settings.metrics_enabled:
            metrics.observe_error(kind)

    # collection helpers -------------------------------------------------

    def get_snippets(self) -> list[Snippet]:
        """Drain the source and return the whole buffer.

        On error the buffer keeps every snippet completed before it.
        """

        while self.next_snippet() is not None:
            pass
        return [*self._scanned.values(), *self._added.values()]

    def get_snippet(self, title: str) -> Snippet | None:
        """Return the snippet titled ``title``, scanning only as far as needed.

        Snippets scanned past on the way stay buffered.
        """

        buffered = self._lookup(title)
        if buffered is not None:
            return buffered
        while (snippet := self.next_snippet()) is not None:
            if snippet.title == title:
                return snippet
        return None

    def add_snippet(self, snippet: Snippet) -> None:
        """Append ``snippet`` to the buffer; the source is left untouched."""

        if snippet.title in self:
            LOGGER.warning("parser.duplicate_title", title=snippet.title)
            raise DuplicateTitle(snippet.title)
        self._added[snippet.title] = snippet

    def titles(self) -> list[str]:
        return [*self._scanned, *self._added]

    def _lookup(self, title: str) -> Snippet | None:
        if title in self._scanned:
            return self._scanned[title]
        return self._added.get(title)

    def __contains__(self, title: object) -> bool:
        return title in self._scanned or title in self._added

    def __len__(self) -> int:
        return len(self._scanned) + len(self._added)

    # serialization ------------------------------------------------------

    def to_text(self) -> str:
        """Drain the source and render the buffer. Comments are not kept."""
        return fmt.render_snippets(self.get_snippets())

    def __str__(self) -> str:
        return self.to_text()

    def write(self, sink: IO[str]) -> None:
        sink.write(self.to_text())

    def save(self, path: str | Path) -> None:
        text = self.to_text()
        Path(path).write_text(text, encoding=self._settings.encoding)
        LOGGER.info("parser.saved", path=str(path), snippets=len(self))

    # resources ----------------------------------------------------------

    def close(self) -> None:
        """Release the source. Already completed snippets stay available."""

        if self._source is not None:
            self._source.close()
        self._reset_block()
        self._state = ScanState.EXHAUSTED

    def __enter__(self) -> SnippetParser:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(state={self._state.value!r}, "
            f"snippets={len(self)}, line_number={self.line_number})"
        )
