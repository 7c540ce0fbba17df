"""Command: migrate a wiki export into Markdown."""

from __future__ import annotations

import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.progress import BarColumn, MofNCompleteColumn, Progress, TextColumn

from wikimigrate.commands._base import WikiCommand
from wikimigrate.services.migrate import MigrationService
from wikimigrate.services.resolver import LinkStyle

if TYPE_CHECKING:
    from wikimigrate.commands._context import AppContext
    from wikimigrate.services.pipeline import MigrationProgress, ProgressCallback


@contextmanager
def _progress_bar(enabled: bool) -> Iterator[ProgressCallback | None]:
    """A rich progress bar on stderr, or None when it would not be seen."""
    if not enabled or not sys.stderr.isatty():
        yield None
        return

    with Progress(
        TextColumn("{task.description}"),
        BarColumn(),
        MofNCompleteColumn(),
        TextColumn("{task.fields[file]}", style="dim"),
        console=Console(stderr=True),
        transient=True,
    ) as bar:
        task = bar.add_task("scanning", total=None, file="")

        def update(event: MigrationProgress) -> None:
            bar.update(
                task,
                description=event.phase.value,
                completed=event.current,
                total=event.total or None,
                file=event.current_file or "",
            )

        yield update


@click.command(
    cls=WikiCommand,
    examples="""\
  wikimigrate migrate ./wiki --output ./vault
  wikimigrate migrate ./wiki -o ./vault --para --link-style wiki
  wikimigrate migrate --dry-run
  wikimigrate --json migrate ./wiki -o ./vault --report ./report.json""",
)
@click.argument("source", required=False, type=click.Path(file_okay=False))
@click.option(
    "-o", "--output", type=click.Path(file_okay=False), default=None, help="Output folder."
)
@click.option("--dry-run", is_flag=True, help="Process everything, write nothing.")
@click.option("--para", is_flag=True, help="Sort notes into PARA folders.")
@click.option("--no-para", is_flag=True, help="Keep every note in the output root.")
@click.option(
    "--link-style",
    type=click.Choice([style.value for style in LinkStyle]),
    default=None,
    help="Markdown links or [[slug|Title]] wikilinks.",
)
@click.option("--report", "report_path", default=None, help="Where to save the JSON report.")
@click.pass_obj
def migrate(
    app: AppContext,
    source: str | None,
    output: str | None,
    dry_run: bool,
    para: bool,
    no_para: bool,
    link_style: str | None,
    report_path: str | None,
) -> None:
    """Migrate wiki files from SOURCE into linked Markdown notes.

    SOURCE and unset options fall back to the [migration] config section.
    """
    para_folders = True if para else False if no_para else None
    service = MigrationService(app.settings)
    with _progress_bar(app.interactive) as progress:
        result = service.migrate(
            source,
            output,
            dry_run=dry_run or None,
            para_folders=para_folders,
            link_style=LinkStyle(link_style) if link_style else None,
            report_path=report_path,
            progress=progress,
        )
    app.emit(result)
