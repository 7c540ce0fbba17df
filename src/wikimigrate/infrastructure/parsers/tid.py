"""TiddlyWiki ``.tid`` files.

A header block of ``key: value`` lines, then the body. The body starts
after the first blank line, or after a line beginning with ``==``.
"""

from __future__ import annotations

import re

from wikimigrate.domain.dates import parse_wiki_date
from wikimigrate.domain.documents import Document
from wikimigrate.domain.tags import parse_tags
from wikimigrate.infrastructure.parsers.base import derive_title

_BODY_DELIMITER = "=="
_FIELD_NAME = re.compile(r"^[\w\-]+$")


class TidParser:
    """Parses a single tiddler from ``.tid`` text."""

    def parse(self, text: str) -> list[Document]:
        if not text or not text.strip():
            return []

        lines = text.replace("\r\n", "\n").split("\n")
        headers: dict[str, str] = {}
        fields: dict[str, str] = {}
        body_start = len(lines)

        for index, line in enumerate(lines):
            if line.lstrip().startswith(_BODY_DELIMITER) or not line.strip():
                body_start = index + 1
                break
            key, sep, value = line.partition(":")
            key = key.strip()
            if not sep or not key:
                # Not a header line: the header block ended without a blank line.
                body_start = index
                break
            lowered = key.lower()
            if lowered in ("title", "created", "modified", "tags", "creator", "author"):
                headers[lowered] = value.strip()
            elif _FIELD_NAME.match(key):
                fields[key] = value.strip()

        body_lines = []
        for line in lines[body_start:]:
            if line.lstrip().startswith(_BODY_DELIMITER):
                break
            body_lines.append(line)
        body = "\n".join(body_lines).strip()

        document = Document(
            title=headers.get("title") or derive_title(body),
            body=body,
            created=parse_wiki_date(headers.get("created")),
            modified=parse_wiki_date(headers.get("modified")),
            tags=parse_tags(headers.get("tags")),
            fields=fields,
            author=headers.get("creator") or headers.get("author") or None,
        )
        return [document]
