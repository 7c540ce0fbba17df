"""GraphService — reference-graph analysis and export without writing notes.

Parses the corpus exactly as a migration would, builds the reference
graph, and reports on it. Nothing is written to the output folder.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

from wikimigrate.domain.slugs import sanitize_title
from wikimigrate.infrastructure.graph.engine import GraphBuilder, ReferenceGraph
from wikimigrate.infrastructure.parsers import ParserFactory
from wikimigrate.infrastructure.scanner import DirectoryScanner
from wikimigrate.services.base import BaseService
from wikimigrate.services.pipeline import FileFailure, parse_corpus
from wikimigrate.services.resolver import LinkResolver
from wikimigrate.services.result import ServiceResult
from wikimigrate.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from wikimigrate.domain.documents import Document

GRAPH_FORMATS = ("dot", "json")


class GraphService(BaseService):
    """Handles graph analysis and export."""

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    def _load(
        self, src: Path
    ) -> tuple[ReferenceGraph, list[Document], list[FileFailure]]:
        with trace_span("load"):
            files = DirectoryScanner().scan(src)
            parsed, failures = parse_corpus(files, ParserFactory())
            documents = list(parsed.values())
            graph = GraphBuilder().build(documents)
            for document in documents:
                graph.add_node(document.title)
        return graph, documents, failures

    @staticmethod
    def _missing(op: str, src: Path) -> ServiceResult:
        return ServiceResult.failure(
            op, "NOT_FOUND", f"Source directory not found: {src}", path=str(src)
        )

    # ------------------------------------------------------------------
    # analyze
    # ------------------------------------------------------------------

    @traced
    def analyze(self, source: Path | str | None = None) -> ServiceResult:
        """Counts, orphans, cycles and broken references for *source*.

        Every parsed document appears as a node, including those that
        neither reference nor are referenced by anything.
        """
        src = self._source(source)
        if not src.is_dir():
            return self._missing("graph_analyze", src)

        graph, documents, failures = self._load(src)

        resolver = LinkResolver()
        resolver.register_documents(documents)
        for document in documents:
            resolver.resolve(document.body, document.title, track_broken=True)
        broken = resolver.broken_references()

        most_linked = sorted(
            ((title, len(graph.incoming(title))) for title in graph.nodes()),
            key=lambda item: (-item[1], item[0].casefold()),
        )[:10]

        return ServiceResult(
            ok=True,
            op="graph_analyze",
            data={
                "source": str(src),
                "documents": len(documents),
                "node_count": graph.node_count,
                "edge_count": graph.edge_count,
                "orphans": graph.orphans(),
                "cycles": graph.detect_cycles(),
                "broken_references": [
                    {"source": ref.source_title, "target": ref.target} for ref in broken
                ],
                "most_linked": [
                    {"title": title, "backlinks": count} for title, count in most_linked if count
                ],
                "parse_failures": [f.model_dump() for f in failures],
            },
            warnings=[f"Could not parse {f.document_path}: {f.error_message}" for f in failures],
        )

    # ------------------------------------------------------------------
    # export
    # ------------------------------------------------------------------

    @traced
    def export(self, source: Path | str | None = None, *, fmt: str = "dot") -> ServiceResult:
        """Export the reference graph.

        Formats:
        - ``dot``: Graphviz DOT language
        - ``json``: ``{"nodes": [{"id", "title"}], "links": [{"source", "target"}]}``

        Node ids are the output slugs. The text is in ``data["content"]``.
        """
        if fmt not in GRAPH_FORMATS:
            return ServiceResult.failure(
                "graph_export",
                "INVALID_FORMAT",
                f"Unknown graph format: {fmt}",
                format=fmt,
                valid=list(GRAPH_FORMATS),
            )
        src = self._source(source)
        if not src.is_dir():
            return self._missing("graph_export", src)

        graph, _documents, _failures = self._load(src)
        content = _to_dot(graph) if fmt == "dot" else _to_json(graph)
        return ServiceResult(
            ok=True,
            op="graph_export",
            data={
                "format": fmt,
                "content": content,
                "node_count": graph.node_count,
                "edge_count": graph.edge_count,
            },
        )


def _quote(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _to_dot(graph: ReferenceGraph) -> str:
    lines = ["digraph references {", "  rankdir=LR;", "  node [shape=box];"]
    for title in graph.nodes():
        lines.append(f"  {_quote(sanitize_title(title))} [label={_quote(title)}];")
    for source, target in graph.edges():
        lines.append(f"  {_quote(sanitize_title(source))} -> {_quote(sanitize_title(target))};")
    lines.append("}")
    return "\n".join(lines) + "\n"


def _to_json(graph: ReferenceGraph) -> str:
    payload: dict[str, Any] = {
        "nodes": [{"id": sanitize_title(title), "title": title} for title in graph.nodes()],
        "links": [
            {"source": sanitize_title(source), "target": sanitize_title(target)}
            for source, target in graph.edges()
        ],
    }
    return json.dumps(payload, indent=2, ensure_ascii=False)
