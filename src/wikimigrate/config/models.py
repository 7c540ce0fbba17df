"""Configuration sections with code-baked defaults.

Sparse TOML contract: every key has a default, so ``wikimigrate.toml``
only needs the overrides.
"""

from __future__ import annotations

from pydantic import BaseModel

from wikimigrate.services.resolver import LinkStyle


class MigrationConfig(BaseModel):
    """[migration] section."""

    model_config = {"frozen": True}

    input_folder: str = "wiki"
    output_folder: str = "vault"
    dry_run: bool = False
    para_folders: bool = False
    link_style: LinkStyle = LinkStyle.MARKDOWN


class ReportConfig(BaseModel):
    """[report] section."""

    model_config = {"frozen": True}

    json_report: bool = True
    report_name: str = "migration-report.json"
