"""Tests for migration reports."""

from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path

from wikimigrate.services.pipeline import (
    FileFailure,
    MigratedFile,
    MigrationPhase,
    MigrationResult,
)
from wikimigrate.services.report import MigrationReport, build_report, save_json_report
from wikimigrate.services.resolver import BrokenReference

FINISHED = datetime(2024, 5, 1, 12, 0, 30, tzinfo=UTC)


def _result() -> MigrationResult:
    return MigrationResult(
        total_processed=3,
        succeeded=2,
        failed=1,
        failures=[FileFailure(document_path="wiki/b.tid", error_message="boom")],
        duration_seconds=30.0,
        phase=MigrationPhase.COMPLETED,
        documents_parsed=2,
        broken_references=[BrokenReference("A", "Gone")],
        migrated=[
            MigratedFile(source_path=Path("wiki/c.tid"), output_path=Path("vault/c.md")),
            MigratedFile(source_path=Path("wiki/a.tid"), output_path=Path("vault/a.md")),
        ],
    )


class TestBuildReport:
    def test_summary_counts(self) -> None:
        report = build_report(_result(), "wiki", "vault", end_time=FINISHED)
        assert report.files_discovered == 3
        assert report.files_parsed == 2
        assert report.files_written == 2
        assert report.error_count == 1
        assert report.phase == "completed"
        assert report.duration_seconds == 30.0
        assert report.success_rate == 66.7

    def test_file_results_sorted_by_path(self) -> None:
        report = build_report(_result(), "wiki", "vault", end_time=FINISHED)
        assert [r.file_path for r in report.file_results] == [
            str(Path("wiki/a.tid")),
            "wiki/b.tid",
            str(Path("wiki/c.tid")),
        ]
        failed = report.file_results[1]
        assert not failed.success
        assert failed.error_message == "boom"

    def test_broken_references(self) -> None:
        report = build_report(_result(), "wiki", "vault", end_time=FINISHED)
        assert report.broken_references[0].source_title == "A"
        assert report.broken_references[0].target == "Gone"

    def test_success_rate_with_nothing_discovered(self) -> None:
        report = build_report(MigrationResult(), "wiki", "vault", end_time=FINISHED)
        assert report.success_rate == 0.0


class TestSaveJsonReport:
    def test_default_location(self, tmp_path: Path) -> None:
        report = build_report(_result(), "wiki", tmp_path / "vault", end_time=FINISHED)
        path = save_json_report(report)
        assert path == tmp_path / "vault" / "migration-report.json"
        loaded = MigrationReport.model_validate_json(path.read_text(encoding="utf-8"))
        assert loaded == report

    def test_explicit_path(self, tmp_path: Path) -> None:
        report = build_report(_result(), "wiki", "vault", end_time=FINISHED)
        path = save_json_report(report, tmp_path / "reports" / "run.json")
        data = json.loads(path.read_text(encoding="utf-8"))
        assert data["end_time"].startswith("2024-05-01T12:00:30")
        assert data["start_time"].startswith("2024-05-01T12:00:00")
