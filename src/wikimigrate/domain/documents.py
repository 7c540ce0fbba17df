"""Document and discovered-file records.

A :class:`Document` is produced by a parser from one input file. Its title
is fixed at creation; ``backlinks`` is overwritten by the pipeline on every
run. :class:`FileInfo` describes a file found by the directory scanner.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from pathlib import Path


class WikiFileType(StrEnum):
    """Input formats recognized by the scanner."""

    TID = "tid"
    HTML = "html"


@dataclass
class Document:
    """One migratable unit of content."""

    title: str
    body: str = ""
    backlinks: list[str] = field(default_factory=list)
    created: datetime | None = None
    modified: datetime | None = None
    tags: list[str] = field(default_factory=list)
    fields: dict[str, str] = field(default_factory=dict)
    author: str | None = None
    source_path: Path | None = None


@dataclass(frozen=True)
class FileInfo:
    """A candidate input file and the dates sniffed from it."""

    full_path: Path
    relative_path: Path
    file_name: str
    file_type: WikiFileType
    size: int
    modified: datetime
    document_created: datetime | None = None
    document_modified: datetime | None = None

    @property
    def sort_date(self) -> datetime:
        """Processing-order date: document created, then document modified, then mtime."""
        return self.document_created or self.document_modified or self.modified
