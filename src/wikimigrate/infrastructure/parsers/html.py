"""TiddlyWiki classic HTML exports.

Each tiddler is a ``<div class="tiddler">`` carrying ``data-tags``,
``data-created`` and ``data-modified`` attributes, with nested
``div.title`` and ``div.body`` elements.
"""

from __future__ import annotations

import logging

import lxml.html
from lxml import etree

from wikimigrate.domain.dates import parse_wiki_date
from wikimigrate.domain.documents import Document
from wikimigrate.domain.tags import parse_tags
from wikimigrate.infrastructure.parsers.base import derive_title

logger = logging.getLogger(__name__)


class HtmlWikiParser:
    """Parses ``div.tiddler`` blocks with lxml."""

    def parse(self, text: str) -> list[Document]:
        if not text or not text.strip():
            return []
        try:
            root = lxml.html.document_fromstring(text.encode("utf-8"))
        except etree.ParserError:
            logger.warning("HTML export could not be parsed")
            return []

        return [self._parse_tiddler(node) for node in root.xpath("//div[@class='tiddler']")]

    def _parse_tiddler(self, node: lxml.html.HtmlElement) -> Document:
        title = ""
        title_nodes = node.xpath(".//div[@class='title']")
        if title_nodes:
            title = title_nodes[0].text_content().strip()
        if not title:
            title = (node.get("id") or "").strip()

        body = ""
        body_nodes = node.xpath(".//div[@class='body']")
        if body_nodes:
            body = body_nodes[0].text_content().strip()

        return Document(
            title=title or derive_title(body),
            body=body,
            created=parse_wiki_date(node.get("data-created")),
            modified=parse_wiki_date(node.get("data-modified")),
            tags=parse_tags(node.get("data-tags"), separators=" ,;"),
        )
