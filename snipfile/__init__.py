"""
Reader/writer for snippet files.

A snippet file is a sequence of named blocks::

    -- greeting --
    Hello there.
    -- end --

Any line outside a block is a comment and is ignored.

Usage:
    from snipfile import Snippet, SnippetParser

    with SnippetParser.read("notes.snip") as parser:
        for snippet in parser:
            print(snippet.title)

    parser = SnippetParser.from_snippets([Snippet("greeting", "Hello there.")])
    parser.save("out.snip")
"""

from snipfile.errors import (
    DuplicateTitle,
    SnippetError,
    SourceUnavailable,
    UnterminatedBlock,
)
from snipfile.model import Snippet
from snipfile.parser import ScanState, SnippetParser

__all__ = [
    "Snippet",
    "SnippetParser",
    "ScanState",
    "SnippetError",
    "SourceUnavailable",
    "UnterminatedBlock",
    "DuplicateTitle",
]
