"""Marker recognition and rendering for the snippet text format.

A block looks like::

    -- <title> --
    <body lines>
    -- end --

Start markers are matched on the whitespace-stripped line; the end marker
must match the whole line exactly. Body lines are kept verbatim.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from snipfile.model import Snippet

LOGGER = structlog.get_logger(__name__)

START_PREFIX = "-- "
START_SUFFIX = " --"
END_MARKER = "-- end --"

_MIN_START_LENGTH = len(START_PREFIX) + len(START_SUFFIX)


def is_end_marker(line: str) -> bool:
    return line == END_MARKER


def parse_start_marker(line: str) -> str | None:
    """Return the title carried by a start marker line, or None."""

    candidate = line.strip()
    if len(candidate) < _MIN_START_LENGTH or candidate == END_MARKER:
        return None
    if not (candidate.startswith(START_PREFIX) and candidate.endswith(START_SUFFIX)):
        return None
    return candidate[len(START_PREFIX) : -len(START_SUFFIX)].strip()


def render_start_marker(title: str) -> str:
    return f"{START_PREFIX}{title}{START_SUFFIX}"


def render_snippet(snippet: Snippet) -> str:
    return f"{render_start_marker(snippet.title)}\n{snippet.body}\n{END_MARKER}"


def is_round_trip_safe(snippet: Snippet) -> bool:
    """Whether parsing the rendered snippet gives back an equal snippet."""

    title = snippet.title
    if title != title.strip() or "\n" in title or "\r" in title:
        return False
    if parse_start_marker(render_start_marker(title)) != title:
        return False
    if "\r" in snippet.body:
        return False
    return not any(is_end_marker(line) for line in snippet.lines())


def render_snippets(snippets: Iterable[Snippet]) -> str:
    """Render snippets back to back, each followed by a newline."""

    chunks: list[str] = []
    for snippet in snippets:
        if not is_round_trip_safe(snippet):
            LOGGER.warning("fmt.unsafe_snippet", title=snippet.title)
        chunks.append(render_snippet(snippet))
        chunks.append("\n")
    return "".join(chunks)
