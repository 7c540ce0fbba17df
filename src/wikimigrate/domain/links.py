"""Reference extraction — parse ``[[wikilinks]]`` out of document bodies.

Pure functions, no infrastructure dependencies. Consumed by the graph
builder (forward edges) and the link resolver (rewriting).
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from wikimigrate.domain.slugs import normalize_title

# [[Target]] or [[Target|Display Text]]. Neither part may contain brackets,
# so unterminated or nested sequences never produce partial matches.
WIKILINK_PATTERN = re.compile(r"\[\[([^\[\]|]+)(?:\|([^\[\]]+))?\]\]")


@dataclass(frozen=True)
class WikiLink:
    """A wikilink extracted from body text."""

    raw: str  # trimmed target portion
    display: str | None = None  # trimmed text after | if present


def wikilink_from_match(match: re.Match[str]) -> WikiLink | None:
    """Build a :class:`WikiLink` from a :data:`WIKILINK_PATTERN` match.

    Returns None when the target is blank (``[[   ]]``).
    """
    target = match.group(1).strip()
    if not target:
        return None
    display = match.group(2)
    return WikiLink(raw=target, display=display.strip() if display is not None else None)


def extract_wikilinks(body: str | None) -> list[WikiLink]:
    """Extract every ``[[wikilink]]`` occurrence from *body*, in order.

    Duplicates are kept; use :func:`extract_references` for the
    de-duplicated target list.
    """
    if not body:
        return []
    results: list[WikiLink] = []
    for match in WIKILINK_PATTERN.finditer(body):
        link = wikilink_from_match(match)
        if link is not None:
            results.append(link)
    return results


def extract_references(body: str | None) -> list[str]:
    """Return the reference targets in *body*.

    Targets appear in first-occurrence order and are de-duplicated
    case-insensitively; the first casing seen wins.
    """
    seen: set[str] = set()
    targets: list[str] = []
    for link in extract_wikilinks(body):
        key = normalize_title(link.raw)
        if key in seen:
            continue
        seen.add(key)
        targets.append(link.raw)
    return targets
