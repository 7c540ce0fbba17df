"""ReferenceGraph — in-memory directed reference graph over document titles.

Backed by a NetworkX DiGraph keyed by the normalized (casefolded) title;
each node carries the casing of its first insertion in a ``title``
attribute. Rebuilt per run, never persisted.

INVARIANT: None of the public operations raise. Blank titles degrade to
a no-op.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING, Any

import networkx as nx

from wikimigrate.domain.links import extract_references
from wikimigrate.domain.slugs import normalize_title

if TYPE_CHECKING:
    from wikimigrate.domain.documents import Document

type _Graph = nx.DiGraph


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


class ReferenceGraph:
    """Directed graph of ``source references target`` edges."""

    def __init__(self) -> None:
        self._graph: _Graph = nx.DiGraph()

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def _ensure_node(self, title: str) -> str:
        key = normalize_title(title)
        if key not in self._graph:
            self._graph.add_node(key, title=title)
        return key

    def add_node(self, title: str) -> None:
        """Add an isolated node. Blank titles are ignored."""
        if _is_blank(title):
            return
        self._ensure_node(title)

    def add_edge(self, source: str, target: str) -> None:
        """Add ``source -> target``. Idempotent; blank endpoints are ignored."""
        if _is_blank(source) or _is_blank(target):
            return
        src = self._ensure_node(source)
        dst = self._ensure_node(target)
        self._graph.add_edge(src, dst)

    def add_edges(self, source: str, targets: Iterable[str]) -> None:
        """Add an edge from *source* to each of *targets*."""
        for target in targets:
            self.add_edge(source, target)

    def clear(self) -> None:
        """Remove every node and edge."""
        self._graph.clear()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _display(self, key: str) -> str:
        return str(self._graph.nodes[key]["title"])

    def _lookup(self, title: str | None) -> str | None:
        if _is_blank(title):
            return None
        assert title is not None
        key = normalize_title(title)
        return key if key in self._graph else None

    def outgoing(self, title: str) -> set[str]:
        """Titles referenced by *title*."""
        key = self._lookup(title)
        if key is None:
            return set()
        return {self._display(k) for k in self._graph.successors(key)}

    def incoming(self, title: str) -> set[str]:
        """Titles that reference *title* (its backlinks)."""
        key = self._lookup(title)
        if key is None:
            return set()
        return {self._display(k) for k in self._graph.predecessors(key)}

    def has_node(self, title: str) -> bool:
        return self._lookup(title) is not None

    def has_edge(self, source: str, target: str) -> bool:
        src = self._lookup(source)
        dst = self._lookup(target)
        if src is None or dst is None:
            return False
        return bool(self._graph.has_edge(src, dst))

    def nodes(self) -> list[str]:
        """Every node title, in first-insertion order."""
        return [self._display(k) for k in self._graph.nodes]

    def edges(self) -> list[tuple[str, str]]:
        """Every edge as ``(source, target)`` display titles."""
        return [(self._display(s), self._display(t)) for s, t in self._graph.edges]

    def orphans(self) -> list[str]:
        """Nodes with zero incoming edges."""
        return [self._display(k) for k in self._graph.nodes if self._graph.in_degree(k) == 0]

    @property
    def node_count(self) -> int:
        return int(self._graph.number_of_nodes())

    @property
    def edge_count(self) -> int:
        return int(self._graph.number_of_edges())

    # ------------------------------------------------------------------
    # Cycle detection
    # ------------------------------------------------------------------

    def detect_cycles(self) -> list[list[str]]:
        """Report cycles found by one depth-first pass from each unvisited node.

        A back-edge to a node still on the DFS path closes a cycle made of
        the path suffix from that node, plus the closing title repeated at
        the end. A self-edge yields ``[A, A]``. This is a diagnostic: it
        does not enumerate every simple cycle.

        Uses an explicit stack so long reference chains cannot exhaust
        the interpreter's recursion limit.
        """
        cycles: list[list[str]] = []
        visited: set[str] = set()

        for start in list(self._graph.nodes):
            if start in visited:
                continue
            visited.add(start)
            path: list[str] = [start]
            on_path: dict[str, int] = {start: 0}
            stack: list[tuple[str, Iterator[str]]] = [
                (start, iter(list(self._graph.successors(start))))
            ]

            while stack:
                node, neighbors = stack[-1]
                for neighbor in neighbors:
                    if neighbor not in visited:
                        visited.add(neighbor)
                        on_path[neighbor] = len(path)
                        path.append(neighbor)
                        stack.append((neighbor, iter(list(self._graph.successors(neighbor)))))
                        break
                    if neighbor in on_path:
                        cycle = path[on_path[neighbor] :] + [neighbor]
                        cycles.append([self._display(k) for k in cycle])
                else:
                    stack.pop()
                    path.pop()
                    del on_path[node]

        return cycles

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Serializable ``{"nodes": [...], "edges": [[source, target], ...]}``."""
        return {
            "nodes": self.nodes(),
            "edges": [list(edge) for edge in self.edges()],
        }


class GraphBuilder:
    """Populates a :class:`ReferenceGraph` from a full document set.

    Each call to :meth:`build` replaces the previous graph; it never merges.
    """

    def __init__(self) -> None:
        self._graph = ReferenceGraph()

    @property
    def graph(self) -> ReferenceGraph:
        """The most recently built graph."""
        return self._graph

    def build(self, documents: Iterable[Document]) -> ReferenceGraph:
        self._graph.clear()
        for document in documents:
            self._graph.add_edges(document.title, extract_references(document.body))
        return self._graph
