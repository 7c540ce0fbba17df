"""LinkResolver — rewrite ``[[wikilinks]]`` against the title registry.

The registry maps normalized titles to slugs and is built once per run,
before any document is resolved, so every reference sees every slug
regardless of discovery order. Unregistered targets still produce a
best-effort link to ``sanitize_title(target)``; callers may ask for
those to be recorded as broken references.
"""

from __future__ import annotations

import logging
import posixpath
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from wikimigrate.domain.links import WIKILINK_PATTERN, wikilink_from_match
from wikimigrate.domain.slugs import normalize_title, sanitize_title
from wikimigrate.errors import InvalidArgumentError

if TYPE_CHECKING:
    import re

    from wikimigrate.domain.documents import Document

logger = logging.getLogger(__name__)


class LinkStyle(StrEnum):
    """How a resolved reference is rendered."""

    MARKDOWN = "markdown"  # [display](slug.md)
    WIKI = "wiki"  # [[slug|display]]


@dataclass(frozen=True)
class BrokenReference:
    """A reference whose target is not a registered title."""

    source_title: str
    target: str


class LinkResolver:
    """Title registry plus reference rewriting.

    Not shared between runs unless :meth:`clear` is called in between.
    """

    def __init__(self) -> None:
        self._registry: dict[str, str] = {}
        self._folders: dict[str, str] = {}
        self._broken: list[BrokenReference] = []

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    def register_title(self, title: str, slug: str) -> None:
        """Map *title* to *slug*. A later registration of the same title wins."""
        if title is None or not title.strip():
            raise InvalidArgumentError("title must not be blank")
        if slug is None or not slug.strip():
            raise InvalidArgumentError("slug must not be blank")
        key = normalize_title(title)
        previous = self._registry.get(key)
        if previous is not None and previous != slug:
            logger.warning("Duplicate title %r: %s replaces %s", title, slug, previous)
        self._registry[key] = slug

    def register_folder(self, title: str, folder: str) -> None:
        """Record that *title* is written under *folder* (relative to the output root)."""
        if title and title.strip():
            self._folders[normalize_title(title)] = folder

    def register_documents(
        self,
        documents: Iterable[Document],
        folder_for: Callable[[Document], str | None] | None = None,
    ) -> None:
        for document in documents:
            self.register_title(document.title, sanitize_title(document.title))
            folder = folder_for(document) if folder_for is not None else None
            if folder:
                self.register_folder(document.title, folder)

    def slug_for(self, title: str) -> str | None:
        """Registered slug for *title*, or None."""
        if not title or not title.strip():
            return None
        return self._registry.get(normalize_title(title))

    def has_title(self, title: str) -> bool:
        return self.slug_for(title) is not None

    def registry(self) -> dict[str, str]:
        """Copy of the normalized-title to slug mapping."""
        return dict(self._registry)

    def clear(self) -> None:
        """Reset every registration and the broken-reference list."""
        self._registry.clear()
        self._folders.clear()
        self._broken.clear()

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def link_to(
        self,
        target: str,
        display: str | None = None,
        style: LinkStyle = LinkStyle.MARKDOWN,
        from_folder: str | None = None,
    ) -> str:
        """Render one link to *target*, falling back to its sanitized slug.

        With *from_folder*, Markdown links are relative to that folder and
        reach the target in its registered folder, or at the output root
        when it has none. Paths with spaces are wrapped in angle brackets.
        """
        slug = self.slug_for(target) or sanitize_title(target)
        text = display or target
        if style is LinkStyle.WIKI:
            return f"[[{slug}|{text}]]"
        href = f"{slug}.md"
        if from_folder is not None:
            folder = self._folders.get(normalize_title(target)) if self.has_title(target) else None
            href = posixpath.relpath(posixpath.join(folder or "", href), from_folder or ".")
        if " " in href:
            href = f"<{href}>"
        return f"[{text}]({href})"

    def resolve(
        self,
        body: str,
        source_title: str | None = None,
        track_broken: bool = False,
        style: LinkStyle = LinkStyle.MARKDOWN,
        from_folder: str | None = None,
    ) -> str:
        """Rewrite every reference in *body*; other text passes through unchanged.

        With *track_broken* and a *source_title*, each unregistered target
        is recorded once per call, however often the body mentions it.
        """
        if not body:
            return ""
        seen: set[str] = set()

        def replace(match: re.Match[str]) -> str:
            link = wikilink_from_match(match)
            if link is None:
                return match.group(0)
            key = normalize_title(link.raw)
            if (
                track_broken
                and source_title is not None
                and key not in seen
                and not self.has_title(link.raw)
            ):
                seen.add(key)
                self._broken.append(BrokenReference(source_title, link.raw))
            return self.link_to(link.raw, link.display, style, from_folder)

        return WIKILINK_PATTERN.sub(replace, body)

    def broken_references(self) -> list[BrokenReference]:
        """Every broken reference recorded since the last :meth:`clear`."""
        return list(self._broken)

    def broken_references_for(self, source_title: str) -> list[BrokenReference]:
        key = normalize_title(source_title)
        return [ref for ref in self._broken if normalize_title(ref.source_title) == key]
