"""Unified settings: CLI flags, env vars and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs: CLI flags passed by click
  2. Env vars: ``WIKIMIGRATE_*`` prefix, ``__`` for nesting
     (``WIKIMIGRATE_MIGRATION__DRY_RUN=true``)
  3. TOML file: ``wikimigrate.toml`` discovered via walk-up
  4. Code defaults from :mod:`wikimigrate.config.models`
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from wikimigrate.config.discovery import find_config, read_toml
from wikimigrate.config.models import MigrationConfig, ReportConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Settings read from a ``wikimigrate.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            try:
                self._data = read_toml(toml_path)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# TOML path for the settings object under construction.
_tls = threading.local()


class MigrateSettings(BaseSettings):
    """Everything a command needs, frozen after construction.

    Attributes:
        base_dir: Directory that relative folders resolve against: the
            config file's parent, or the CWD when there is no config.
        config_path: The TOML file that was loaded, if any.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "WIKIMIGRATE_",
        "env_nested_delimiter": "__",
    }

    base_dir: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    migration: MigrationConfig = Field(default_factory=MigrationConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """TOML sits between env vars and defaults."""
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, getattr(_tls, "toml_path", None)),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        base_dir: Path | None = None,
        **cli_flags: Any,
    ) -> MigrateSettings:
        """Build settings for one CLI invocation.

        An explicit *config_path* that does not exist is an error; otherwise
        ``wikimigrate.toml`` is discovered from *base_dir* (default: CWD).
        """
        toml_path: Path | None
        if config_path:
            toml_path = Path(config_path)
            if not toml_path.is_file():
                raise click.ClickException(f"Config file not found: {config_path}")
        else:
            toml_path = find_config(base_dir)

        resolved = base_dir or (toml_path.parent if toml_path else Path.cwd())

        _tls.toml_path = toml_path
        try:
            return cls(base_dir=resolved, config_path=toml_path, **cli_flags)
        finally:
            _tls.toml_path = None

    def resolve_path(self, value: Path | str) -> Path:
        """Absolute *value*, anchoring relative paths at :attr:`base_dir`."""
        path = Path(value).expanduser()
        return path if path.is_absolute() else self.base_dir / path
