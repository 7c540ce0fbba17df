"""AppContext — shared state for every command.

Created once by the root group and handed to subcommands through
``@click.pass_obj``. Owns logging setup and result emission (stdout or
stderr, plus the exit code).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from wikimigrate.config.logging import configure_logging
from wikimigrate.output.formatters import OutputSettings, format_result
from wikimigrate.services.telemetry import enable_telemetry

if TYPE_CHECKING:
    from wikimigrate.config.settings import MigrateSettings
    from wikimigrate.services.result import ServiceResult


class AppContext:
    """Settings plus output handling, shared down the command tree."""

    def __init__(self, settings: MigrateSettings) -> None:
        self.settings = settings
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)
        if settings.verbose:
            enable_telemetry()

    @property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    @property
    def interactive(self) -> bool:
        """Whether human-oriented extras (progress bars) may be shown."""
        return not (self.settings.json_output or self.settings.quiet)

    def emit(self, result: ServiceResult) -> None:
        """Print *result* with the right stream and exit status.

        * ``ok``: stdout. Warnings go to stderr in human mode so piped
          output stays clean; in JSON mode they are part of the payload.
        * Failure: stderr, then exit code 1.
        """
        settings = self.output_settings
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            if not settings.json_output and not settings.quiet:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
