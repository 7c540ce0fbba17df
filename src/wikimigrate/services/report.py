"""Migration reports — a serializable summary of one run.

Built from a :class:`MigrationResult` after the run finishes and saved
as JSON next to the migrated notes.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from pathlib import Path

from pydantic import BaseModel, Field

from wikimigrate.services.pipeline import MigrationResult

logger = logging.getLogger(__name__)

DEFAULT_REPORT_NAME = "migration-report.json"


class FileReport(BaseModel):
    """Per-file line of the report."""

    model_config = {"frozen": True}

    file_path: str
    success: bool
    output_path: str | None = None
    error_message: str | None = None


class BrokenReferenceReport(BaseModel):
    model_config = {"frozen": True}

    source_title: str
    target: str


class MigrationReport(BaseModel):
    """Summary of a migration run."""

    model_config = {"frozen": True}

    input_folder: str
    output_folder: str
    start_time: datetime
    end_time: datetime
    dry_run: bool = False
    files_discovered: int = 0
    files_parsed: int = 0
    files_written: int = 0
    error_count: int = 0
    cancelled: bool = False
    phase: str = "completed"
    file_results: list[FileReport] = Field(default_factory=list)
    broken_references: list[BrokenReferenceReport] = Field(default_factory=list)
    cycles: list[list[str]] = Field(default_factory=list)
    orphans: list[str] = Field(default_factory=list)

    @property
    def duration_seconds(self) -> float:
        return (self.end_time - self.start_time).total_seconds()

    @property
    def success_rate(self) -> float:
        """Written files as a percentage of discovered files."""
        if self.files_discovered <= 0:
            return 0.0
        return round(self.files_written / self.files_discovered * 100, 1)


def build_report(
    result: MigrationResult,
    input_folder: Path | str,
    output_folder: Path | str,
    *,
    dry_run: bool = False,
    end_time: datetime | None = None,
) -> MigrationReport:
    """Summarize *result*; the start time is derived from its duration."""
    finished = end_time or datetime.now(UTC)
    file_results = [
        FileReport(
            file_path=str(item.source_path),
            success=True,
            output_path=str(item.output_path),
        )
        for item in result.migrated
    ]
    file_results.extend(
        FileReport(file_path=f.document_path, success=False, error_message=f.error_message)
        for f in result.failures
    )
    file_results.sort(key=lambda r: r.file_path)

    return MigrationReport(
        input_folder=str(input_folder),
        output_folder=str(output_folder),
        start_time=finished - timedelta(seconds=result.duration_seconds),
        end_time=finished,
        dry_run=dry_run,
        files_discovered=result.total_processed,
        files_parsed=result.documents_parsed,
        files_written=result.succeeded,
        error_count=result.failed,
        cancelled=result.cancelled,
        phase=result.phase.value,
        file_results=file_results,
        broken_references=[
            BrokenReferenceReport(source_title=ref.source_title, target=ref.target)
            for ref in result.broken_references
        ],
        cycles=result.cycles,
        orphans=result.orphans,
    )


def save_json_report(report: MigrationReport, path: Path | None = None) -> Path:
    """Write *report* as JSON; defaults to the output folder's report file."""
    target = path or Path(report.output_folder) / DEFAULT_REPORT_NAME
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(report.model_dump_json(indent=2), encoding="utf-8")
    logger.info("Report saved to %s", target)
    return target
