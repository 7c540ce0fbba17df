"""Rich Console factory and theme.

Consoles render into a StringIO buffer so every renderer keeps the
``format_result() -> str`` contract. Rich drops color codes on its own
when the output is not a terminal (tests, pipes).
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

WIKIMIGRATE_THEME = Theme(
    {
        "wm.ok": "bold green",
        "wm.error": "bold red",
        "wm.warning": "bold yellow",
        "wm.op": "bold cyan",
        "wm.key": "dim",
        "wm.path": "dim",
        "wm.title": "bold",
        "wm.count": "magenta",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Console writing to an in-memory buffer (default width 120)."""
    return Console(
        file=StringIO(),
        theme=WIKIMIGRATE_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Text rendered so far by a :func:`create_console` console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
