"""Snippet value type."""

from __future__ import annotations

from dataclasses import dataclass

from snipfile import fmt


@dataclass(slots=True, frozen=True, order=True)
class Snippet:
    """A named, immutable block of multi-line text.

    ``body`` separates lines with ``\\n`` and carries no trailing terminator.
    Equality and ordering compare ``(title, body)``.
    """

    title: str
    body: str = ""

    def lines(self) -> list[str]:
        return self.body.split("\n")

    def render(self) -> str:
        """Return the delimited text form, without a trailing newline."""
        return fmt.render_snippet(self)

    def __str__(self) -> str:
        return self.render()
