"""Tests for DirectoryScanner."""

from __future__ import annotations

import os
from datetime import UTC, datetime
from pathlib import Path

from tests.conftest import write_tid
from wikimigrate.domain.documents import WikiFileType
from wikimigrate.infrastructure.scanner import DirectoryScanner


class TestScanDiscovery:
    def test_missing_or_blank_directory(self, tmp_path: Path) -> None:
        scanner = DirectoryScanner()
        assert scanner.scan(None) == []
        assert scanner.scan("  ") == []
        assert scanner.scan(tmp_path / "absent") == []

    def test_finds_supported_extensions_recursively(self, tmp_path: Path) -> None:
        (tmp_path / "sub").mkdir()
        write_tid(tmp_path / "a.tid", "A", "body")
        (tmp_path / "sub" / "b.HTML").write_text("<html></html>", encoding="utf-8")
        (tmp_path / "c.htm").write_text("<html></html>", encoding="utf-8")
        (tmp_path / "notes.txt").write_text("skip", encoding="utf-8")

        files = DirectoryScanner().scan(tmp_path)

        assert sorted(f.file_name for f in files) == ["a.tid", "b.HTML", "c.htm"]
        by_name = {f.file_name: f for f in files}
        assert by_name["a.tid"].file_type is WikiFileType.TID
        assert by_name["b.HTML"].file_type is WikiFileType.HTML
        assert by_name["b.HTML"].relative_path == Path("sub/b.HTML")

    def test_skips_vcs_and_vault_directories(self, tmp_path: Path) -> None:
        (tmp_path / ".git").mkdir()
        write_tid(tmp_path / ".git" / "hidden.tid", "Hidden", "x")
        write_tid(tmp_path / "shown.tid", "Shown", "x")
        assert [f.file_name for f in DirectoryScanner().scan(tmp_path)] == ["shown.tid"]


class TestScanOrdering:
    def test_sorted_by_document_created(self, tmp_path: Path) -> None:
        write_tid(tmp_path / "late.tid", "Late", "x", created="20240301000000000")
        write_tid(tmp_path / "early.tid", "Early", "x", created="20230101000000000")
        files = DirectoryScanner().scan(tmp_path)
        assert [f.file_name for f in files] == ["early.tid", "late.tid"]
        assert files[0].document_created == datetime(2023, 1, 1, tzinfo=UTC)

    def test_html_dates_are_sniffed(self, tmp_path: Path) -> None:
        (tmp_path / "page.html").write_text(
            '<div class="tiddler" data-created="20200505000000000">x</div>', encoding="utf-8"
        )
        [info] = DirectoryScanner().scan(tmp_path)
        assert info.document_created == datetime(2020, 5, 5, tzinfo=UTC)

    def test_mtime_fallback_then_name(self, tmp_path: Path) -> None:
        for name in ("b.tid", "a.tid", "c.tid"):
            (tmp_path / name).write_text("no header\n", encoding="utf-8")
        stamp = datetime(2022, 6, 1, tzinfo=UTC).timestamp()
        for name in ("a.tid", "b.tid"):
            os.utime(tmp_path / name, (stamp, stamp))
        os.utime(tmp_path / "c.tid", (stamp - 100, stamp - 100))

        files = DirectoryScanner().scan(tmp_path)

        assert [f.file_name for f in files] == ["c.tid", "a.tid", "b.tid"]
        assert files[0].document_created is None

    def test_relative_to_base_path(self, tmp_path: Path) -> None:
        sub = tmp_path / "wiki"
        sub.mkdir()
        write_tid(sub / "a.tid", "A", "x")
        [info] = DirectoryScanner().scan(sub, base_path=tmp_path)
        assert info.relative_path == Path("wiki/a.tid")
