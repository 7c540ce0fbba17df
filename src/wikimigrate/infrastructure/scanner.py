"""Directory scanning — discover wiki export files and their dates.

Walks the source tree recursively for ``.tid``, ``.html`` and ``.htm``
files (any case) and orders them by the document's own creation date,
falling back to its modified date and then the filesystem mtime.
"""

from __future__ import annotations

import logging
import re
from datetime import UTC, datetime
from itertools import islice
from pathlib import Path

from wikimigrate.domain.dates import parse_wiki_date
from wikimigrate.domain.documents import FileInfo, WikiFileType

logger = logging.getLogger(__name__)

FILE_TYPES: dict[str, WikiFileType] = {
    ".tid": WikiFileType.TID,
    ".html": WikiFileType.HTML,
    ".htm": WikiFileType.HTML,
}

# Directories never descended into.
_SKIP_DIRS = frozenset({".git", ".obsidian", "$__StoryList"})

# Only the header block of a .tid file carries metadata.
_TID_HEADER_LINES = 40

_HTML_DATE = re.compile(r'data-(created|modified)\s*=\s*"([^"]+)"', re.IGNORECASE)


class DirectoryScanner:
    """Discovers candidate input files under a directory."""

    def scan(self, directory: Path | str | None, base_path: Path | None = None) -> list[FileInfo]:
        """Return discovered files in processing order.

        A blank or missing *directory* yields an empty list, not an error.
        Relative paths are computed against *base_path* (default: *directory*).
        """
        if directory is None or not str(directory).strip():
            return []
        root = Path(directory)
        if not root.is_dir():
            logger.debug("Scan skipped, not a directory: %s", root)
            return []

        base = base_path or root
        files: list[FileInfo] = []
        for path in root.rglob("*"):
            if not path.is_file():
                continue
            if any(part in _SKIP_DIRS for part in path.relative_to(root).parts):
                continue
            file_type = FILE_TYPES.get(path.suffix.lower())
            if file_type is None:
                continue
            info = self._file_info(path, base, file_type)
            if info is not None:
                files.append(info)

        files.sort(key=lambda f: (f.sort_date, f.file_name))
        logger.debug("Scanned %s: %d files", root, len(files))
        return files

    def _file_info(self, path: Path, base: Path, file_type: WikiFileType) -> FileInfo | None:
        try:
            stat = path.stat()
        except OSError:
            logger.warning("Cannot stat %s", path, exc_info=True)
            return None

        created, modified = self._sniff_dates(path, file_type)
        try:
            relative = path.relative_to(base)
        except ValueError:
            relative = Path(path.name)

        return FileInfo(
            full_path=path,
            relative_path=relative,
            file_name=path.name,
            file_type=file_type,
            size=stat.st_size,
            modified=datetime.fromtimestamp(stat.st_mtime, tz=UTC),
            document_created=created,
            document_modified=modified,
        )

    def _sniff_dates(
        self, path: Path, file_type: WikiFileType
    ) -> tuple[datetime | None, datetime | None]:
        """Read created/modified dates from the file contents, if present.

        Unreadable files fall back to filesystem dates.
        """
        try:
            if file_type is WikiFileType.TID:
                return _tid_dates(path)
            return _html_dates(path.read_text(encoding="utf-8", errors="replace"))
        except OSError:
            logger.debug("Date sniffing failed for %s", path, exc_info=True)
            return None, None


def _tid_dates(path: Path) -> tuple[datetime | None, datetime | None]:
    values: dict[str, str] = {}
    with path.open(encoding="utf-8", errors="replace") as fh:
        for line in islice(fh, _TID_HEADER_LINES):
            if not line.strip():
                break
            key, sep, value = line.partition(":")
            if not sep:
                break
            key = key.strip().lower()
            if key in ("created", "modified"):
                values[key] = value.strip()
    return parse_wiki_date(values.get("created")), parse_wiki_date(values.get("modified"))


def _html_dates(html: str) -> tuple[datetime | None, datetime | None]:
    values: dict[str, str] = {}
    for match in _HTML_DATE.finditer(html):
        values.setdefault(match.group(1).lower(), match.group(2))
    return parse_wiki_date(values.get("created")), parse_wiki_date(values.get("modified"))
