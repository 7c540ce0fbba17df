"""Tests for LinkResolver."""

from __future__ import annotations

import pytest

from tests.conftest import doc
from wikimigrate.domain.para import para_folder_for
from wikimigrate.errors import InvalidArgumentError
from wikimigrate.services.resolver import BrokenReference, LinkResolver, LinkStyle


@pytest.fixture
def resolver() -> LinkResolver:
    r = LinkResolver()
    r.register_title("Test Page", "test-page")
    return r


class TestRegistry:
    def test_blank_title_or_slug_rejected(self) -> None:
        resolver = LinkResolver()
        with pytest.raises(InvalidArgumentError):
            resolver.register_title("  ", "slug")
        with pytest.raises(ValueError):
            resolver.register_title("Title", "")

    def test_last_registration_wins(self, resolver: LinkResolver) -> None:
        resolver.register_title("TEST PAGE", "other")
        assert resolver.slug_for("test page") == "other"
        assert resolver.registry() == {"test page": "other"}

    def test_register_documents_uses_sanitized_titles(self) -> None:
        resolver = LinkResolver()
        resolver.register_documents([doc("My Note: Draft"), doc("Home")])
        assert resolver.slug_for("my note: draft") == "my-note-draft"
        assert resolver.has_title("HOME")
        assert not resolver.has_title("Away")

    def test_clear(self, resolver: LinkResolver) -> None:
        resolver.resolve("[[Nowhere]]", "Src", track_broken=True)
        resolver.clear()
        assert resolver.registry() == {}
        assert resolver.broken_references() == []


class TestResolve:
    def test_registered_target(self, resolver: LinkResolver) -> None:
        assert resolver.resolve("Link to [[Test Page]]") == "Link to [Test Page](test-page.md)"

    def test_case_insensitive_lookup(self, resolver: LinkResolver) -> None:
        assert resolver.resolve("[[test page]]") == "[test page](test-page.md)"

    def test_display_text(self, resolver: LinkResolver) -> None:
        assert resolver.resolve("[[Test Page|click]]") == "[click](test-page.md)"

    def test_unregistered_target_is_tracked(self, resolver: LinkResolver) -> None:
        text = resolver.resolve("[[Unknown Page]]", "Home", track_broken=True)
        assert text == "[Unknown Page](unknown-page.md)"
        assert resolver.broken_references() == [BrokenReference("Home", "Unknown Page")]

    def test_untracked_without_flag_or_source(self, resolver: LinkResolver) -> None:
        resolver.resolve("[[Unknown Page]]", "Home")
        resolver.resolve("[[Unknown Page]]", track_broken=True)
        assert resolver.broken_references() == []

    def test_repeated_target_recorded_once_per_source(self, resolver: LinkResolver) -> None:
        resolver.resolve("[[Gone]] and [[gone|again]] and [[Lost]]", "A", track_broken=True)
        resolver.resolve("[[Gone]]", "B", track_broken=True)
        assert resolver.broken_references() == [
            BrokenReference("A", "Gone"),
            BrokenReference("A", "Lost"),
            BrokenReference("B", "Gone"),
        ]
        assert resolver.broken_references_for("a") == [
            BrokenReference("A", "Gone"),
            BrokenReference("A", "Lost"),
        ]

    def test_wiki_style(self, resolver: LinkResolver) -> None:
        text = resolver.resolve("[[Test Page]] [[Test Page|see]]", style=LinkStyle.WIKI)
        assert text == "[[test-page|Test Page]] [[test-page|see]]"

    def test_other_text_untouched(self, resolver: LinkResolver) -> None:
        assert resolver.resolve("no links, [[unterminated") == "no links, [[unterminated"
        assert resolver.resolve("") == ""

    def test_blank_target_left_as_is(self, resolver: LinkResolver) -> None:
        assert resolver.resolve("[[ ]]", "A", track_broken=True) == "[[ ]]"
        assert resolver.broken_references() == []


class TestFolderLinks:
    @pytest.fixture
    def filed(self) -> LinkResolver:
        resolver = LinkResolver()
        resolver.register_documents(
            [doc("Home", tags=["area"]), doc("Plan", tags=["project"])],
            folder_for=lambda d: para_folder_for(d.tags),
        )
        return resolver

    def test_links_are_relative_to_the_source_folder(self, filed: LinkResolver) -> None:
        text = filed.resolve("[[Plan]] and [[Home|home]]", from_folder="Notes/2 Areas")
        assert text == "[Plan](<../1 Projects/plan.md>) and [home](home.md)"

    def test_unregistered_target_points_at_output_root(self, filed: LinkResolver) -> None:
        text = filed.resolve("[[Nowhere]]", "Home", track_broken=True, from_folder="Notes/2 Areas")
        assert text == "[Nowhere](../../nowhere.md)"

    def test_without_source_folder_links_stay_bare(self, filed: LinkResolver) -> None:
        assert filed.resolve("[[Plan]]") == "[Plan](plan.md)"

    def test_wiki_style_ignores_folders(self, filed: LinkResolver) -> None:
        text = filed.resolve("[[Plan]]", style=LinkStyle.WIKI, from_folder="Notes/2 Areas")
        assert text == "[[plan|Plan]]"

    def test_clear_forgets_folders(self, filed: LinkResolver) -> None:
        filed.clear()
        filed.register_title("Plan", "plan")
        assert filed.resolve("[[Plan]]", from_folder="Notes") == "[Plan](../plan.md)"
