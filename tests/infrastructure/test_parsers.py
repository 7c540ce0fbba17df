"""Tests for the .tid, classic HTML and TiddlyWiki 5 parsers."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from wikimigrate.infrastructure.parsers import (
    HtmlWikiParser,
    ParserFactory,
    TiddlyWiki5Parser,
    TidParser,
    derive_title,
)

CLASSIC_HTML = """<html><body><div id="storeArea">
<div class="tiddler" id="Home" data-tags="area start" data-created="20240101000000000">
  <div class="title">Home</div>
  <div class="body">Hello [[World]]</div>
</div>
<div class="tiddler" id="NoTitleDiv" data-modified="2024-02-03">
  <div class="body">Second</div>
</div>
</div></body></html>
"""

TW5_HTML = """<html><head></head><body>
<script class="tiddlywiki-tiddler-store" type="application/json">[
  {"title": "Alpha", "text": "See [[Beta]]", "tags": "one [[two words]]",
   "created": "20240115103000000", "creator": "ana", "color": "red"},
  {"title": "Beta", "text": "", "tags": ["x", " ", "y"]},
  "not a tiddler"
]</script>
</body></html>
"""


class TestDeriveTitle:
    def test_first_line(self) -> None:
        assert derive_title("\n  Shopping list \nmilk") == "Shopping list"

    def test_long_line_is_shortened(self) -> None:
        title = derive_title("x" * 80)
        assert title == "x" * 47 + "..."
        assert len(title) == 50

    def test_empty_body_uses_timestamp(self) -> None:
        now = datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)
        assert derive_title("", now=now) == "Untitled_20240102030405"


class TestTidParser:
    def test_headers_and_body(self) -> None:
        text = (
            "title: Home\n"
            "created: 20240101120000000\n"
            "modified: 20240102120000000\n"
            "tags: area; start\n"
            "creator: ana\n"
            "color: blue\n"
            "\n"
            "Welcome to [[Projects]].\n"
        )
        [document] = TidParser().parse(text)
        assert document.title == "Home"
        assert document.body == "Welcome to [[Projects]]."
        assert document.created == datetime(2024, 1, 1, 12, tzinfo=UTC)
        assert document.modified == datetime(2024, 1, 2, 12, tzinfo=UTC)
        assert document.tags == ["area", "start"]
        assert document.author == "ana"
        assert document.fields == {"color": "blue"}

    def test_double_equals_delimits_body(self) -> None:
        [document] = TidParser().parse("title: A\n==\nbody text\n==\nignored")
        assert document.body == "body text"

    def test_header_block_without_blank_line(self) -> None:
        [document] = TidParser().parse("title: A\nPlain body line")
        assert document.title == "A"
        assert document.body == "Plain body line"

    def test_crlf(self) -> None:
        [document] = TidParser().parse("title: A\r\n\r\nline one\r\nline two\r\n")
        assert document.body == "line one\nline two"

    def test_missing_title_is_derived(self) -> None:
        [document] = TidParser().parse("tags: x\n\nFirst line\nmore")
        assert document.title == "First line"

    def test_empty(self) -> None:
        assert TidParser().parse("") == []
        assert TidParser().parse("  \n ") == []


class TestHtmlWikiParser:
    def test_tiddler_blocks(self) -> None:
        home, second = HtmlWikiParser().parse(CLASSIC_HTML)
        assert home.title == "Home"
        assert home.body == "Hello [[World]]"
        assert home.tags == ["area", "start"]
        assert home.created == datetime(2024, 1, 1, tzinfo=UTC)
        assert second.title == "NoTitleDiv"
        assert second.modified == datetime(2024, 2, 3, tzinfo=UTC)

    def test_page_without_tiddlers(self) -> None:
        assert HtmlWikiParser().parse("<html><body><p>hi</p></body></html>") == []

    def test_empty(self) -> None:
        assert HtmlWikiParser().parse("") == []


class TestTiddlyWiki5Parser:
    def test_json_store(self) -> None:
        alpha, beta = TiddlyWiki5Parser().parse(TW5_HTML)
        assert alpha.title == "Alpha"
        assert alpha.body == "See [[Beta]]"
        assert alpha.tags == ["one", "two words"]
        assert alpha.created == datetime(2024, 1, 15, 10, 30, tzinfo=UTC)
        assert alpha.author == "ana"
        assert alpha.fields == {"color": "red"}
        assert beta.tags == ["x", "y"]

    def test_tiddlers_object_keyed_by_title(self) -> None:
        html = (
            '<script id="tiddlers">{"tiddlers": {"Named": {"text": "body"}}}</script>'
        )
        [document] = TiddlyWiki5Parser().parse(html)
        assert document.title == "Named"
        assert document.body == "body"

    def test_invalid_json(self) -> None:
        html = '<script type="application/json">[{"title": </script>'
        assert TiddlyWiki5Parser().parse(html) == []

    def test_no_store(self) -> None:
        assert TiddlyWiki5Parser().parse("<html></html>") == []


class TestParserFactory:
    def test_tid_by_extension(self, tmp_path: Path) -> None:
        assert isinstance(ParserFactory().get_parser(tmp_path / "x.TID"), TidParser)

    def test_unsupported_extension(self, tmp_path: Path) -> None:
        assert ParserFactory().get_parser(tmp_path / "notes.txt") is None

    def test_html_sniffing(self, tmp_path: Path) -> None:
        classic = tmp_path / "classic.html"
        classic.write_text(CLASSIC_HTML, encoding="utf-8")
        tw5 = tmp_path / "tw5.htm"
        tw5.write_text(TW5_HTML, encoding="utf-8")
        factory = ParserFactory()
        assert isinstance(factory.get_parser(classic), HtmlWikiParser)
        assert isinstance(factory.get_parser(tw5), TiddlyWiki5Parser)

    def test_unreadable_html_falls_back_to_classic(self, tmp_path: Path) -> None:
        assert isinstance(ParserFactory().get_parser(tmp_path / "gone.html"), HtmlWikiParser)
