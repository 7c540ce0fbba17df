"""Tests for MarkdownWriter and output path resolution."""

from __future__ import annotations

from datetime import UTC, date, datetime
from pathlib import Path

from tests.conftest import doc
from wikimigrate.infrastructure.writer import MarkdownWriter, resolve_output_path


class TestResolveOutputPath:
    def test_flat(self, tmp_path: Path) -> None:
        assert resolve_output_path(tmp_path, "home") == tmp_path / "home.md"

    def test_with_folder(self, tmp_path: Path) -> None:
        path = resolve_output_path(tmp_path, "home", "Notes/2 Areas")
        assert path == tmp_path / "Notes" / "2 Areas" / "home.md"


class TestBuildFrontmatter:
    def test_core_fields(self) -> None:
        document = doc(
            "Home",
            created=datetime(2024, 1, 1, 12, tzinfo=UTC),
            modified=datetime(2024, 2, 1, tzinfo=UTC),
            tags=["area/health", "task"],
            fields={"color": "blue", "title": "ignored"},
            author="ana",
        )
        fm = MarkdownWriter().build_frontmatter(document, ["[[projects|Projects]]"])
        assert fm["title"] == "Home"
        assert fm["created"] == date(2024, 1, 1)
        assert fm["modified"] == date(2024, 2, 1)
        assert fm["author"] == "ana"
        assert fm["tags"] == ["area/health", "area", "task"]
        assert fm["status"] == "task"
        assert fm["color"] == "blue"
        assert fm["backlinks"] == ["[[projects|Projects]]"]
        assert "para" not in fm

    def test_para_bucket(self) -> None:
        fm = MarkdownWriter().build_frontmatter(doc("P", tags=["project"]), para=True)
        assert fm["para"] == "project"
        assert "status" not in fm

    def test_render_document(self) -> None:
        text = MarkdownWriter().render_document(doc("Home"), "# Body", ["[[a|A]]"])
        assert text.startswith("---\ntitle: Home\n")
        assert "backlinks:\n- '[[a|A]]'\n" in text
        assert text.endswith("\n# Body\n")


class TestWrite:
    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        target = tmp_path / "deep" / "er" / "note.md"
        assert MarkdownWriter().write(target, "content")
        assert target.read_text(encoding="utf-8") == "content"

    def test_returns_false_on_os_error(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("x", encoding="utf-8")
        assert MarkdownWriter().write(blocker / "note.md", "content") is False
