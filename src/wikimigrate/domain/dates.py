"""Wiki timestamp parsing.

TiddlyWiki stores timestamps as compact UTC digit strings
(``YYYYMMDDHHMMSSmmm``, often truncated). Exports also carry ISO and
slash-separated dates. All results are timezone-aware UTC.
"""

from __future__ import annotations

from datetime import UTC, datetime

_COMPACT_FORMATS: tuple[tuple[int, str], ...] = (
    (14, "%Y%m%d%H%M%S"),
    (12, "%Y%m%d%H%M"),
    (8, "%Y%m%d"),
)

_SEPARATED_FORMATS = ("%Y/%m/%d", "%Y-%m-%d %H:%M:%S", "%Y/%m/%d %H:%M:%S")


def parse_wiki_date(value: str | None) -> datetime | None:
    """Parse a wiki timestamp, returning None when it is not recognizable.

    Examples:
        >>> parse_wiki_date("20220224140634868").isoformat()
        '2022-02-24T14:06:34+00:00'
        >>> parse_wiki_date("2024-01-15").isoformat()
        '2024-01-15T00:00:00+00:00'
        >>> parse_wiki_date("soon") is None
        True
    """
    if value is None:
        return None
    text = value.strip()
    if not text:
        return None

    if text.isdigit():
        for length, fmt in _COMPACT_FORMATS:
            if len(text) >= length:
                try:
                    return datetime.strptime(text[:length], fmt).replace(tzinfo=UTC)
                except ValueError:
                    continue
        return None

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        parsed = None
    if parsed is None:
        for fmt in _SEPARATED_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)
