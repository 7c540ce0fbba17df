"""Config file discovery and loading.

``wikimigrate.toml`` is found by walking up from the working directory,
the way git finds ``.git/``. ``WIKIMIGRATE_CONFIG`` and ``--config``
override the search.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_FILENAME = "wikimigrate.toml"
CONFIG_ENV_VAR = "WIKIMIGRATE_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the nearest ``wikimigrate.toml`` at or above *start*, or None.

    A ``WIKIMIGRATE_CONFIG`` path takes precedence; when it names a missing
    file there is no config at all.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        return p if p.is_file() else None

    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def read_toml(path: Path) -> dict[str, Any]:
    """Parse a TOML file. Raises ``tomllib.TOMLDecodeError`` when invalid."""
    return tomllib.loads(path.read_text(encoding="utf-8"))
