"""Markdown output — frontmatter rendering and file writing.

Pure rendering lives in :mod:`wikimigrate.domain.content`; this module
assembles a document's frontmatter, resolves output paths and performs
the file I/O.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from wikimigrate.domain.content import render_frontmatter
from wikimigrate.domain.documents import Document
from wikimigrate.domain.para import TaskStatus, classify_para_folder, task_status
from wikimigrate.domain.tags import expand_tag_hierarchy

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIX = ".md"


# ---------------------------------------------------------------------------
# Path resolution
# ---------------------------------------------------------------------------


def resolve_output_path(output_root: Path, slug: str, folder: str | None = None) -> Path:
    """``{output}/{folder}/{slug}.md``; *folder* is optional."""
    base = output_root / folder if folder else output_root
    return base / f"{slug}{MARKDOWN_SUFFIX}"


# ---------------------------------------------------------------------------
# Writer
# ---------------------------------------------------------------------------


class MarkdownWriter:
    """Renders documents to Markdown with YAML frontmatter and writes them."""

    def build_frontmatter(
        self,
        document: Document,
        backlinks: list[str] | None = None,
        para: bool = False,
    ) -> dict[str, Any]:
        """Frontmatter for *document*.

        *backlinks* are already-formatted links. When *para* is set the
        PARA bucket is recorded alongside the task status.
        """
        fm: dict[str, Any] = dict(document.fields)
        fm["title"] = document.title
        if document.created is not None:
            fm["created"] = document.created.date()
        if document.modified is not None:
            fm["modified"] = document.modified.date()
        fm["author"] = document.author
        fm["tags"] = expand_tag_hierarchy(document.tags)

        status = task_status(document.tags)
        if status is not TaskStatus.NONE:
            fm["status"] = status.value
        if para:
            fm["para"] = classify_para_folder(document.tags).value

        fm["backlinks"] = list(backlinks or [])
        return fm

    def render_document(
        self,
        document: Document,
        body: str,
        backlinks: list[str] | None = None,
        para: bool = False,
    ) -> str:
        """Full Markdown text: frontmatter block then *body*."""
        return render_frontmatter(self.build_frontmatter(document, backlinks, para), body)

    def write(self, path: Path, content: str) -> bool:
        """Write *content* to *path*, creating parent directories.

        Returns False (and logs) when the filesystem refuses.
        """
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError:
            logger.error("Failed to write %s", path, exc_info=True)
            return False
        logger.debug("Wrote %s", path)
        return True
