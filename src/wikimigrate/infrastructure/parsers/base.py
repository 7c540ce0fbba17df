"""Parser protocol and helpers shared by the format parsers."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Protocol

from wikimigrate.domain.documents import Document

_MAX_DERIVED_TITLE = 50


class Parser(Protocol):
    """Turns the text of one input file into documents."""

    def parse(self, text: str) -> list[Document]: ...


def derive_title(body: str, now: datetime | None = None) -> str:
    """Title for a document that declares none.

    Uses the first body line, shortened to fit, or ``Untitled_<timestamp>``.

    Examples:
        >>> derive_title("Shopping list\\nmilk")
        'Shopping list'
    """
    first_line = body.strip().split("\n", 1)[0].strip() if body else ""
    if not first_line:
        stamp = (now or datetime.now(UTC)).strftime("%Y%m%d%H%M%S")
        return f"Untitled_{stamp}"
    if len(first_line) > _MAX_DERIVED_TITLE:
        return first_line[: _MAX_DERIVED_TITLE - 3] + "..."
    return first_line
