"""Shared pytest fixtures and test helpers for wikimigrate tests."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog
from click.testing import CliRunner

from wikimigrate.config.settings import MigrateSettings
from wikimigrate.domain.documents import Document
from wikimigrate.services.telemetry import disable_telemetry


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's environment out of settings resolution."""
    for key in list(os.environ):
        if key.startswith("WIKIMIGRATE_"):
            monkeypatch.delenv(key)


@pytest.fixture(autouse=True)
def _reset_logging() -> Iterator[None]:
    """Undo the logging and telemetry setup a CLI invocation performs."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("wikimigrate").setLevel(logging.NOTSET)
    structlog.reset_defaults()
    disable_telemetry()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def settings(tmp_path: Path) -> MigrateSettings:
    """Settings anchored at a temp directory with no config file."""
    return MigrateSettings.from_cli(base_dir=tmp_path)


@pytest.fixture
def wiki_dir(tmp_path: Path) -> Path:
    """A small TiddlyWiki export: three linked .tid files.

    Home links to Projects and to a missing page; Projects links back to
    Home; Ideas links to Projects.
    """
    root = tmp_path / "wiki"
    root.mkdir()
    write_tid(
        root / "Home.tid",
        "Home",
        "Welcome. See [[Projects]] and [[Missing Page]].",
        created="20240101000000000",
        tags="area",
    )
    write_tid(
        root / "Projects.tid",
        "Projects",
        "!! Current\nBack to [[Home]].",
        created="20240102000000000",
        tags="project",
    )
    write_tid(
        root / "Ideas.tid",
        "Ideas",
        "* one\n* see [[projects|the projects page]]",
        created="20240103000000000",
    )
    return root


@pytest.fixture
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run CLI tests from a temp directory with no config file above it."""
    monkeypatch.chdir(tmp_path)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def write_tid(
    path: Path,
    title: str,
    body: str,
    *,
    created: str | None = None,
    tags: str | None = None,
) -> Path:
    """Write a ``.tid`` file with the given header fields."""
    lines = [f"title: {title}"]
    if created:
        lines.append(f"created: {created}")
    if tags:
        lines.append(f"tags: {tags}")
    path.write_text("\n".join(lines) + "\n\n" + body + "\n", encoding="utf-8")
    return path


def doc(title: str, body: str = "", **kwargs: object) -> Document:
    """Shorthand Document constructor."""
    return Document(title=title, body=body, **kwargs)  # type: ignore[arg-type]
