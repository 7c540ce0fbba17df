"""BaseService — shared construction for the service facades.

Services receive resolved :class:`MigrateSettings` and build their own
pipeline collaborators, so the CLI never touches infrastructure directly.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from wikimigrate.config.settings import MigrateSettings


class BaseService:
    """Base for service-layer classes.

    Usage::

        class MigrationService(BaseService):
            def migrate(self, ...) -> ServiceResult:
                source = self._source(source)
                ...
    """

    def __init__(self, settings: MigrateSettings) -> None:
        self._settings = settings

    @property
    def settings(self) -> MigrateSettings:
        return self._settings

    def _source(self, source: Path | str | None) -> Path:
        """Explicit *source*, else the configured input folder.

        Configured folders are relative to the config file, explicit ones to
        the working directory.
        """
        if source:
            return Path(source)
        return self._settings.resolve_path(self._settings.migration.input_folder)

    def _output(self, output: Path | str | None) -> Path:
        """Explicit *output*, else the configured output folder."""
        if output:
            return Path(output)
        return self._settings.resolve_path(self._settings.migration.output_folder)
