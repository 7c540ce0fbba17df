"""Subcommands for wikimigrate.

:func:`register_commands` imports command modules lazily so that
``wikimigrate --help`` stays fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Attach the ``graph`` group and the standalone commands to *cli*."""
    from wikimigrate.commands.graph import graph
    from wikimigrate.commands.migrate import migrate
    from wikimigrate.commands.scan import scan

    cli.add_command(migrate)
    cli.add_command(scan)
    cli.add_command(graph)
