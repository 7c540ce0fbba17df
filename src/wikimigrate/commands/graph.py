"""Command group: reference-graph analysis."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from wikimigrate.commands._base import WikiGroup
from wikimigrate.services.graph import GRAPH_FORMATS, GraphService

if TYPE_CHECKING:
    from wikimigrate.commands._context import AppContext

_GRAPH_EXAMPLES = """\
  wikimigrate graph analyze ./wiki
  wikimigrate graph export ./wiki --format dot > refs.dot
  wikimigrate graph export ./wiki --format json"""


@click.group(cls=WikiGroup, examples=_GRAPH_EXAMPLES)
def graph() -> None:
    """Inspect the reference graph without writing any notes."""


@graph.command(
    examples="""\
  wikimigrate graph analyze ./wiki
  wikimigrate --json graph analyze ./wiki"""
)
@click.argument("source", required=False, type=click.Path(file_okay=False))
@click.pass_obj
def analyze(app: AppContext, source: str | None) -> None:
    """Report orphans, cycles and broken references."""
    app.emit(GraphService(app.settings).analyze(source))


@graph.command(
    examples="""\
  wikimigrate graph export ./wiki > refs.dot
  wikimigrate graph export ./wiki --format json"""
)
@click.argument("source", required=False, type=click.Path(file_okay=False))
@click.option(
    "--format", "fmt", type=click.Choice(GRAPH_FORMATS), default="dot", help="Output format."
)
@click.pass_obj
def export(app: AppContext, source: str | None, fmt: str) -> None:
    """Print the reference graph as DOT or JSON."""
    app.emit(GraphService(app.settings).export(source, fmt=fmt))
