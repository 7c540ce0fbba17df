"""Command: list the files a migration would process."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from wikimigrate.commands._base import WikiCommand
from wikimigrate.services.migrate import MigrationService

if TYPE_CHECKING:
    from wikimigrate.commands._context import AppContext


@click.command(
    cls=WikiCommand,
    examples="""\
  wikimigrate scan ./wiki
  wikimigrate -q scan ./wiki
  wikimigrate --json scan""",
)
@click.argument("source", required=False, type=click.Path(file_okay=False))
@click.pass_obj
def scan(app: AppContext, source: str | None) -> None:
    """List wiki files under SOURCE in processing order."""
    app.emit(MigrationService(app.settings).scan(source))
