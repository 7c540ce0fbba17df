"""Frontmatter rendering for migrated Markdown files.

Pure rendering utilities live here so that the dependency direction stays
clean: infrastructure -> domain, never the reverse.
"""

from __future__ import annotations

from io import StringIO
from typing import Any

from ruamel.yaml import YAML


def _new_yaml() -> YAML:
    """Create a fresh YAML emitter.

    A new instance per call avoids corrupted internal emitter state from
    propagating across documents (ruamel.yaml's YAML object is stateful
    and a failed dump can leave it broken).
    """
    y = YAML()
    y.default_flow_style = False
    y.width = 4096
    return y


CANONICAL_KEY_ORDER: list[str] = [
    "title",
    "created",
    "modified",
    "author",
    "tags",
    "para",
    "status",
    "backlinks",
]

_FRONTMATTER_DELIMITER = "---"


def order_frontmatter(fm: dict[str, Any]) -> dict[str, Any]:
    """Return *fm* with keys in canonical order.

    Keys present in :data:`CANONICAL_KEY_ORDER` come first (in that
    order), followed by any remaining keys sorted alphabetically.
    ``None`` values and empty lists are omitted.
    """
    def keep(value: Any) -> bool:
        return value is not None and value != []

    ordered: dict[str, Any] = {}
    for key in CANONICAL_KEY_ORDER:
        if key in fm and keep(fm[key]):
            ordered[key] = fm[key]

    for key in sorted(fm.keys()):
        if key not in ordered and keep(fm[key]):
            ordered[key] = fm[key]

    return ordered


def render_frontmatter(frontmatter: dict[str, Any], body: str) -> str:
    """Render a frontmatter dict and body text into markdown.

    An empty frontmatter dict renders the body alone.
    """
    ordered = order_frontmatter(frontmatter)
    if not ordered:
        return body

    buf = StringIO()
    _new_yaml().dump(ordered, buf)
    yaml_text = buf.getvalue()

    parts = [_FRONTMATTER_DELIMITER, "\n", yaml_text, _FRONTMATTER_DELIMITER, "\n"]
    if body:
        parts.append("\n")
        parts.append(body)
        if not body.endswith("\n"):
            parts.append("\n")
    return "".join(parts)
