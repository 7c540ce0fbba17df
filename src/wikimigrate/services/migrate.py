"""MigrationService — the migrate and scan operations.

Wraps :class:`MigrationPipeline` and the directory scanner in the
``ServiceResult`` contract, fills unset options from settings, and
writes the JSON report.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import TYPE_CHECKING, Any

from wikimigrate.domain.markup import WikiSyntaxConverter
from wikimigrate.infrastructure.parsers import ParserFactory
from wikimigrate.infrastructure.scanner import DirectoryScanner
from wikimigrate.infrastructure.writer import MarkdownWriter
from wikimigrate.services.base import BaseService
from wikimigrate.services.pipeline import (
    MigrationPipeline,
    MigrationResult,
    ProgressCallback,
)
from wikimigrate.services.report import build_report, save_json_report
from wikimigrate.services.resolver import LinkStyle
from wikimigrate.services.result import ServiceResult
from wikimigrate.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from wikimigrate.config.settings import MigrateSettings


def default_pipeline() -> MigrationPipeline:
    """Pipeline wired with the built-in scanner, parsers, converter and writer."""
    return MigrationPipeline(
        scanner=DirectoryScanner(),
        parser_factory=ParserFactory(),
        converter=WikiSyntaxConverter(),
        writer=MarkdownWriter(),
    )


class MigrationService(BaseService):
    """Runs migrations and previews the input corpus."""

    def __init__(
        self,
        settings: MigrateSettings,
        pipeline: MigrationPipeline | None = None,
    ) -> None:
        super().__init__(settings)
        self._pipeline = pipeline or default_pipeline()

    # ------------------------------------------------------------------
    # migrate
    # ------------------------------------------------------------------

    @traced
    def migrate(
        self,
        source: Path | str | None = None,
        output: Path | str | None = None,
        *,
        dry_run: bool | None = None,
        para_folders: bool | None = None,
        link_style: LinkStyle | None = None,
        report_path: Path | str | None = None,
        progress: ProgressCallback | None = None,
        cancel_event: threading.Event | None = None,
    ) -> ServiceResult:
        """Migrate every wiki file under *source* into *output*.

        Options left as None come from the ``[migration]`` settings. The
        result is ``ok`` when at least one file migrated or there was
        nothing to migrate; otherwise the error code is ``MIGRATION_FAILED``.
        A missing source directory is ``NOT_FOUND``.
        """
        cfg = self._settings.migration
        src = self._source(source)
        out = self._output(output)
        if not src.is_dir():
            return ServiceResult.failure(
                "migrate", "NOT_FOUND", f"Source directory not found: {src}", path=str(src)
            )

        dry = cfg.dry_run if dry_run is None else dry_run
        result = self._pipeline.run(
            src,
            out,
            progress=progress,
            cancel_event=cancel_event,
            dry_run=dry,
            para_folders=cfg.para_folders if para_folders is None else para_folders,
            link_style=link_style or cfg.link_style,
        )

        data = _result_payload(result)
        data.update(source=str(src), output=str(out), dry_run=dry)
        warnings = [
            f"Broken reference in '{ref.source_title}': [[{ref.target}]]"
            for ref in result.broken_references
        ]
        if result.total_processed == 0:
            warnings.append(f"No wiki files found in {src}")
        if result.cancelled:
            warnings.append("Migration cancelled before all files were processed")

        saved = self._save_report(result, src, out, dry, report_path)
        if saved is not None:
            data["report"] = str(saved)

        if not result.success:
            return ServiceResult.failure(
                "migrate",
                "MIGRATION_FAILED",
                f"No files migrated ({result.failed} failed)",
                data=data,
                warnings=warnings,
            )
        return ServiceResult(ok=True, op="migrate", data=data, warnings=warnings)

    def _save_report(
        self,
        result: MigrationResult,
        source: Path,
        output: Path,
        dry_run: bool,
        report_path: Path | str | None,
    ) -> Path | None:
        if dry_run or result.total_processed == 0:
            return None
        if report_path is None and not self._settings.report.json_report:
            return None
        with trace_span("report"):
            report = build_report(result, source, output, dry_run=dry_run)
            target = (
                self._settings.resolve_path(report_path)
                if report_path
                else output / self._settings.report.report_name
            )
            return save_json_report(report, target)

    # ------------------------------------------------------------------
    # scan
    # ------------------------------------------------------------------

    @traced
    def scan(self, source: Path | str | None = None) -> ServiceResult:
        """List the files a migration of *source* would process, in order."""
        src = self._source(source)
        if not src.is_dir():
            return ServiceResult.failure(
                "scan", "NOT_FOUND", f"Source directory not found: {src}", path=str(src)
            )
        files = DirectoryScanner().scan(src)
        items = [
            {
                "path": str(info.relative_path),
                "type": info.file_type.value,
                "size": info.size,
                "date": info.sort_date.isoformat(),
            }
            for info in files
        ]
        return ServiceResult(
            ok=True,
            op="scan",
            data={"source": str(src), "count": len(items), "items": items},
        )


def _result_payload(result: MigrationResult) -> dict[str, Any]:
    return {
        "total": result.total_processed,
        "succeeded": result.succeeded,
        "failed": result.failed,
        "documents": result.documents_parsed,
        "phase": result.phase.value,
        "cancelled": result.cancelled,
        "duration_seconds": round(result.duration_seconds, 3),
        "failures": [f.model_dump() for f in result.failures],
        "written": [str(path) for path in result.written_paths],
        "broken_references": [
            {"source": ref.source_title, "target": ref.target}
            for ref in result.broken_references
        ],
        "cycles": result.cycles,
        "orphans": result.orphans,
    }
