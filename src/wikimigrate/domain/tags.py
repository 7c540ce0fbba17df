"""Tag domain logic — parsing and hierarchy expansion."""

from __future__ import annotations

import re

# TiddlyWiki quotes multi-word tags as [[two words]] in space-separated lists.
_TIDDLYWIKI_TAG = re.compile(r"\[\[([^\]]+)\]\]|(\S+)")


def parse_tags(text: str | None, separators: str = ",;") -> list[str]:
    """Split a delimited tag string, trimming and dropping blanks.

    Examples:
        >>> parse_tags("project, draft; ideas")
        ['project', 'draft', 'ideas']
        >>> parse_tags("")
        []
    """
    if not text:
        return []
    pattern = "[" + re.escape(separators) + "]"
    return [tag.strip() for tag in re.split(pattern, text) if tag.strip()]


def parse_tiddlywiki_tags(text: str | None) -> list[str]:
    """Split a TiddlyWiki tag field (space-separated, ``[[...]]`` for spaces).

    Examples:
        >>> parse_tiddlywiki_tags("Journal [[Reading List]] done")
        ['Journal', 'Reading List', 'done']
    """
    if not text:
        return []
    tags: list[str] = []
    for match in _TIDDLYWIKI_TAG.finditer(text):
        tag = (match.group(1) or match.group(2)).strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def expand_tag_hierarchy(tags: list[str]) -> list[str]:
    """Add every ancestor of ``parent/child`` tags, preserving order.

    Examples:
        >>> expand_tag_hierarchy(["area/health/sleep", "misc"])
        ['area/health/sleep', 'area', 'area/health', 'misc']
    """
    expanded: list[str] = []
    for tag in tags:
        if tag not in expanded:
            expanded.append(tag)
        parts = tag.split("/")
        for depth in range(1, len(parts)):
            ancestor = "/".join(parts[:depth])
            if ancestor and ancestor not in expanded:
                expanded.append(ancestor)
    return expanded
