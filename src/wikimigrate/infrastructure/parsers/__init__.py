"""Format parsers and the factory that picks one per file.

``.tid`` files always use :class:`TidParser`. HTML exports are sniffed:
a page with an embedded JSON tiddler store is TiddlyWiki 5, anything
else is treated as a classic ``div.tiddler`` export.
"""

from __future__ import annotations

import logging
from pathlib import Path

from wikimigrate.infrastructure.parsers.base import Parser, derive_title
from wikimigrate.infrastructure.parsers.html import HtmlWikiParser
from wikimigrate.infrastructure.parsers.tid import TidParser
from wikimigrate.infrastructure.parsers.tw5 import TiddlyWiki5Parser, find_store

logger = logging.getLogger(__name__)

__all__ = [
    "HtmlWikiParser",
    "Parser",
    "ParserFactory",
    "TiddlyWiki5Parser",
    "TidParser",
    "derive_title",
]

_HTML_SUFFIXES = frozenset({".html", ".htm"})


class ParserFactory:
    """Selects a parser for a path by extension and, for HTML, by content."""

    def __init__(self) -> None:
        self._tid = TidParser()
        self._html = HtmlWikiParser()
        self._tw5 = TiddlyWiki5Parser()

    def get_parser(self, path: Path | str) -> Parser | None:
        """Return the parser for *path*, or None for unsupported files."""
        path = Path(path)
        suffix = path.suffix.lower()
        if suffix == ".tid":
            return self._tid
        if suffix not in _HTML_SUFFIXES:
            return None
        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except OSError:
            logger.debug("Cannot sniff %s, assuming classic HTML", path, exc_info=True)
            return self._html
        return self.for_html(text)

    def for_html(self, text: str) -> Parser:
        """Pick the HTML parser for already-loaded page text."""
        if find_store(text) is not None:
            return self._tw5
        return self._html
