"""TiddlyWiki 5 HTML exports with an embedded JSON tiddler store."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from wikimigrate.domain.dates import parse_wiki_date
from wikimigrate.domain.documents import Document
from wikimigrate.domain.tags import parse_tiddlywiki_tags
from wikimigrate.infrastructure.parsers.base import derive_title

logger = logging.getLogger(__name__)

JSON_STORE = re.compile(
    r"<script[^>]*type\s*=\s*[\"']application/json[\"'][^>]*>(.*?)</script>",
    re.IGNORECASE | re.DOTALL,
)
TIDDLERS_STORE = re.compile(
    r"<script[^>]*id\s*=\s*[\"']tiddlers[\"'][^>]*>(.*?)</script>",
    re.IGNORECASE | re.DOTALL,
)

# Standard tiddler keys; anything else is kept as a custom field.
_KNOWN_KEYS = frozenset({"title", "text", "tags", "created", "modified", "creator", "modifier", "type"})


def find_store(html: str) -> str | None:
    """Return the raw JSON of the tiddler store, if the page has one."""
    match = JSON_STORE.search(html) or TIDDLERS_STORE.search(html)
    return match.group(1) if match else None


class TiddlyWiki5Parser:
    """Reads tiddlers out of the JSON store script."""

    def parse(self, text: str) -> list[Document]:
        if not text or not text.strip():
            return []
        raw = find_store(text)
        if raw is None:
            return []
        try:
            store = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Tiddler store is not valid JSON")
            return []

        documents: list[Document] = []
        for name, entry in _entries(store):
            if isinstance(entry, dict):
                documents.append(_document(entry, name))
        return documents


def _entries(store: Any) -> list[tuple[str | None, Any]]:
    # Either a bare array, or {"tiddlers": [...]} / {"tiddlers": {title: {...}}}.
    if isinstance(store, list):
        return [(None, entry) for entry in store]
    if isinstance(store, dict):
        tiddlers = store.get("tiddlers")
        if isinstance(tiddlers, list):
            return [(None, entry) for entry in tiddlers]
        if isinstance(tiddlers, dict):
            return list(tiddlers.items())
    return []


def _string(entry: dict[str, Any], key: str) -> str | None:
    value = entry.get(key)
    return value if isinstance(value, str) else None


def _tags(value: Any) -> list[str]:
    if isinstance(value, list):
        return [tag.strip() for tag in value if isinstance(tag, str) and tag.strip()]
    if isinstance(value, str):
        return parse_tiddlywiki_tags(value)
    return []


def _document(entry: dict[str, Any], name: str | None) -> Document:
    body = _string(entry, "text") or ""
    title = (_string(entry, "title") or name or "").strip()
    fields = {
        key: value
        for key, value in entry.items()
        if key not in _KNOWN_KEYS and isinstance(value, str)
    }
    return Document(
        title=title or derive_title(body),
        body=body,
        created=parse_wiki_date(_string(entry, "created")),
        modified=parse_wiki_date(_string(entry, "modified")),
        tags=_tags(entry.get("tags")),
        fields=fields,
        author=_string(entry, "creator"),
    )
