"""Wiki markup to Markdown conversion.

Line- and token-level rewrites of classic TiddlyWiki markup. Runs after
link resolution, so ``[[...]]`` references are already gone from the body.

Order matters: code first (protects its content from later passes), then
tables, lists (before headings, since ``#`` starts both), headings, and
inline formatting.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from wikimigrate.domain.documents import Document

_INLINE_CODE = re.compile(r"\{\{\{(.+?)\}\}\}")
_BOLD = re.compile(r"''(.*?)''")
# Skip ``scheme://`` so URLs survive the italic pass.
_ITALIC = re.compile(r"(?<![:*])//(.*?)//(?!\*)")
_HEADING = re.compile(r"^(!{1,6})\s*(.*)$")


def convert_code(text: str) -> str:
    """``{{{code}}}`` to inline backticks."""
    return _INLINE_CODE.sub(lambda m: f"`{m.group(1)}`", text)


def convert_bold(text: str) -> str:
    """``''bold''`` to ``**bold**``."""
    return _BOLD.sub(r"**\1**", text)


def convert_italic(text: str) -> str:
    """``//italic//`` to ``*italic*``."""
    return _ITALIC.sub(r"*\1*", text)


def _inline(text: str) -> str:
    return convert_bold(convert_italic(text))


def convert_tables(text: str) -> str:
    """Convert ``|cell|cell|`` rows; ``|!header|`` rows get a separator line."""
    result: list[str] = []
    in_table = False
    header_written = False

    for line in text.split("\n"):
        stripped = line.strip()
        if len(stripped) > 1 and stripped.startswith("|") and stripped.endswith("|"):
            if not in_table:
                in_table = True
                header_written = False
            cells = [cell.strip() for cell in stripped[1:-1].split("|")]
            is_header = any(cell.startswith(("!", "~")) for cell in cells)
            if is_header:
                cells = [cell[1:] if cell.startswith(("!", "~")) else cell for cell in cells]
            result.append("| " + " | ".join(_inline(cell) for cell in cells) + " |")
            if is_header and not header_written:
                result.append("| " + " | ".join("---" for _ in cells) + " |")
                header_written = True
            continue

        if in_table:
            result.append("")
            in_table = False
        result.append(line)

    return "\n".join(result)


def convert_lists(text: str) -> str:
    """``*item`` to ``- item`` and ``#item`` to ``1. item``."""
    result: list[str] = []
    for line in text.split("\n"):
        stripped = line.lstrip()
        if stripped.startswith("*") and not stripped.startswith("**"):
            result.append("- " + _inline(stripped[1:].lstrip()))
        elif stripped.startswith("#") and not stripped.startswith("##"):
            result.append("1. " + _inline(stripped[1:].lstrip()))
        else:
            result.append(line)
    return "\n".join(result)


def convert_headings(text: str) -> str:
    """``!``, ``!!``, ``!!!`` to ``#``, ``##``, ``###``."""
    result: list[str] = []
    for line in text.split("\n"):
        match = _HEADING.match(line.lstrip())
        if match:
            result.append("#" * len(match.group(1)) + " " + match.group(2))
        else:
            result.append(line)
    return "\n".join(result)


def convert_markup(text: str) -> str:
    """Run every conversion pass over *text*."""
    if not text:
        return ""
    converted = convert_code(text)
    converted = convert_tables(converted)
    converted = convert_lists(converted)
    converted = convert_headings(converted)
    return _inline(converted)


class WikiSyntaxConverter:
    """Converter collaborator: turns a resolved document body into Markdown."""

    def convert(self, document: Document) -> str:
        return convert_markup(document.body)
