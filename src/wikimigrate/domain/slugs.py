"""Title sanitization — human titles to filesystem- and URL-safe slugs.

INVARIANT: ``sanitize_title`` is total, deterministic, and idempotent.
It never returns an empty string.
"""

from __future__ import annotations

import re

FALLBACK_SLUG = "untitled"

# Characters rejected by at least one mainstream filesystem, plus C0 controls.
_INVALID_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')
_SEPARATOR_RUN = re.compile(r"[\s_]+")
_NON_SLUG_CHARS = re.compile(r"[^\w\-]")


def sanitize_title(title: str | None) -> str:
    """Map a document title to a slug.

    Steps: drop filesystem-invalid characters, collapse whitespace and
    underscore runs to a single hyphen, lowercase, drop anything that is
    not a word character or hyphen, trim hyphens. Falls back to
    ``"untitled"`` when nothing survives.

    Examples:
        >>> sanitize_title("Test Page")
        'test-page'
        >>> sanitize_title("What? Why: How")
        'what-why-how'
        >>> sanitize_title("***")
        'untitled'
    """
    if title is None or not title.strip():
        return FALLBACK_SLUG

    slug = _INVALID_FILENAME_CHARS.sub("", title)
    slug = _SEPARATOR_RUN.sub("-", slug)
    # Lowercase before the final filter: some code points lowercase into
    # combining sequences that the filter would strip on a second pass.
    slug = slug.lower()
    slug = _NON_SLUG_CHARS.sub("", slug)
    slug = slug.strip("-")
    return slug or FALLBACK_SLUG


def normalize_title(title: str) -> str:
    """Return the case-insensitive lookup key for *title*.

    Uses ``str.casefold`` so comparisons never depend on the process locale.
    """
    return title.casefold()
