"""MigrationPipeline — the two-phase corpus migration.

Phases run strictly in order: scan, parse every file, build the reference
graph and title registry, then resolve, convert and write one file at a
time in discovery order. Every document is parsed before any is resolved,
so a reference can reach any title in the corpus regardless of where the
target file sits in discovery order.

INVARIANT: One file's failure never aborts the batch. Per-file errors are
carried as :class:`FileOutcome` values and end up in
``MigrationResult.failures``; only a cancellation request stops the loop.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING, Generic, Protocol, TypeVar

from pydantic import BaseModel, Field

from wikimigrate.domain.documents import Document, FileInfo
from wikimigrate.domain.para import para_folder_for
from wikimigrate.domain.slugs import sanitize_title
from wikimigrate.errors import ConversionFailure, MigrationError, ParseFailure, WriteFailure
from wikimigrate.infrastructure.graph.engine import GraphBuilder
from wikimigrate.infrastructure.writer import resolve_output_path
from wikimigrate.services.resolver import BrokenReference, LinkResolver, LinkStyle
from wikimigrate.services.telemetry import trace_span

if TYPE_CHECKING:
    from wikimigrate.infrastructure.parsers import Parser

logger = logging.getLogger(__name__)

_T = TypeVar("_T")


# ---------------------------------------------------------------------------
# Collaborator contracts
# ---------------------------------------------------------------------------


class Scanner(Protocol):
    def scan(self, directory: Path | str | None) -> list[FileInfo]: ...


class ParserSource(Protocol):
    def get_parser(self, path: Path | str) -> Parser | None: ...


class Converter(Protocol):
    def convert(self, document: Document) -> str: ...


class Writer(Protocol):
    def render_document(
        self,
        document: Document,
        body: str,
        backlinks: list[str] | None = None,
        para: bool = False,
    ) -> str: ...

    def write(self, path: Path, content: str) -> bool: ...


# ---------------------------------------------------------------------------
# Run state and results
# ---------------------------------------------------------------------------


class MigrationPhase(StrEnum):
    SCANNING = "scanning"
    PARSING = "parsing"
    GRAPH_BUILDING = "graph_building"
    CONVERTING = "converting"
    WRITING = "writing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(frozen=True)
class MigrationProgress:
    """One progress notification. Informational only."""

    phase: MigrationPhase
    current: int = 0
    total: int = 0
    current_file: str | None = None
    message: str = ""

    @property
    def percent_complete(self) -> float:
        if self.total <= 0:
            return 0.0
        return round(self.current / self.total * 100, 1)


type ProgressCallback = Callable[[MigrationProgress], None]


class FileFailure(BaseModel):
    """A file that could not be migrated, and why."""

    model_config = {"frozen": True}

    document_path: str
    error_message: str


class MigratedFile(BaseModel):
    """A source file and the Markdown file it became."""

    model_config = {"frozen": True}

    source_path: Path
    output_path: Path


class MigrationResult(BaseModel):
    """Aggregate outcome of one pipeline run.

    ``total_processed`` counts discovered files. ``success`` is True when
    at least one file was migrated, or when there was nothing to migrate.
    """

    model_config = {"frozen": True}

    total_processed: int = 0
    succeeded: int = 0
    failed: int = 0
    failures: list[FileFailure] = Field(default_factory=list)
    duration_seconds: float = 0.0
    success: bool = True
    cancelled: bool = False
    phase: MigrationPhase = MigrationPhase.COMPLETED
    documents_parsed: int = 0
    broken_references: list[BrokenReference] = Field(default_factory=list)
    cycles: list[list[str]] = Field(default_factory=list)
    orphans: list[str] = Field(default_factory=list)
    migrated: list[MigratedFile] = Field(default_factory=list)

    @property
    def written_paths(self) -> list[Path]:
        """Output paths, in migration order. Not written to disk on a dry run."""
        return [item.output_path for item in self.migrated]


def file_failure(path: Path | str, error: BaseException) -> FileFailure:
    return FileFailure(document_path=str(path), error_message=str(error) or type(error).__name__)


@dataclass(frozen=True)
class FileOutcome(Generic[_T]):
    """Per-file result: a value, or the failure that replaced it."""

    value: _T | None = None
    failure: FileFailure | None = None

    @classmethod
    def ok(cls, value: _T) -> FileOutcome[_T]:
        return cls(value=value)

    @classmethod
    def err(cls, path: Path | str, error: BaseException) -> FileOutcome[_T]:
        return cls(failure=file_failure(path, error))

    @property
    def is_ok(self) -> bool:
        return self.failure is None


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def parse_file(info: FileInfo, parsers: ParserSource) -> FileOutcome[Document]:
    """Parse one discovered file, keeping its first document."""
    parser = parsers.get_parser(info.full_path)
    if parser is None:
        return FileOutcome.err(info.full_path, ParseFailure(f"No parser for {info.file_name}"))
    try:
        text = info.full_path.read_text(encoding="utf-8", errors="replace")
        documents = parser.parse(text)
    except Exception as exc:
        logger.debug("Parse error in %s", info.full_path, exc_info=True)
        return FileOutcome.err(info.full_path, exc)
    if not documents:
        return FileOutcome.err(
            info.full_path, ParseFailure(f"No documents found in {info.file_name}")
        )

    document = documents[0]
    if document.source_path is None:
        document.source_path = info.full_path
    return FileOutcome.ok(document)


def parse_corpus(
    files: Iterable[FileInfo],
    parsers: ParserSource,
    before_file: Callable[[int, FileInfo], None] | None = None,
) -> tuple[dict[Path, Document], list[FileFailure]]:
    """Parse every file. Returns documents keyed by file path, plus failures.

    *before_file* is called with the 1-based index and the file before
    each parse.
    """
    documents: dict[Path, Document] = {}
    failures: list[FileFailure] = []
    for index, info in enumerate(files, start=1):
        if before_file is not None:
            before_file(index, info)
        outcome = parse_file(info, parsers)
        if outcome.failure is not None:
            logger.warning(
                "Parse failed for %s: %s", info.full_path, outcome.failure.error_message
            )
            failures.append(outcome.failure)
        elif outcome.value is not None:
            documents[info.full_path] = outcome.value
    return documents, failures


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------


def match_documents(
    files: Iterable[FileInfo], documents: Iterable[Document]
) -> dict[Path, Document]:
    """Pair discovered files with parsed documents, each document at most once.

    Every file first claims the document parsed from it (its
    ``source_path``). Files still unpaired then take an unclaimed document
    whose sanitized title equals their sanitized stem, visiting files and
    documents in path order. Files with no match are left out of the result.
    The pairing does not depend on discovery order.
    """
    paths = sorted({info.full_path for info in files})
    ordered = sorted(documents, key=lambda doc: (str(doc.source_path or ""), doc.title))
    matches: dict[Path, Document] = {}
    claimed: set[int] = set()

    by_path = {doc.source_path: doc for doc in ordered if doc.source_path is not None}
    for path in paths:
        own = by_path.get(path)
        if own is not None:
            matches[path] = own
            claimed.add(id(own))

    by_slug: dict[str, list[Document]] = {}
    for doc in ordered:
        by_slug.setdefault(sanitize_title(doc.title), []).append(doc)
    for path in paths:
        if path in matches:
            continue
        for doc in by_slug.get(sanitize_title(path.stem), []):
            if id(doc) not in claimed:
                matches[path] = doc
                claimed.add(id(doc))
                break
    return matches


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------


class MigrationPipeline:
    """Runs a full migration from a source directory to an output directory.

    The graph builder and link resolver are owned per instance; both are
    reset at the start of every run.
    """

    def __init__(
        self,
        scanner: Scanner,
        parser_factory: ParserSource,
        converter: Converter,
        writer: Writer,
        builder: GraphBuilder | None = None,
        resolver: LinkResolver | None = None,
    ) -> None:
        self._scanner = scanner
        self._parsers = parser_factory
        self._converter = converter
        self._writer = writer
        self._builder = builder or GraphBuilder()
        self._resolver = resolver or LinkResolver()

    @property
    def builder(self) -> GraphBuilder:
        return self._builder

    @property
    def resolver(self) -> LinkResolver:
        return self._resolver

    def run(
        self,
        source: Path | str,
        output: Path | str,
        *,
        progress: ProgressCallback | None = None,
        cancel_event: threading.Event | None = None,
        dry_run: bool = False,
        para_folders: bool = False,
        link_style: LinkStyle = LinkStyle.MARKDOWN,
    ) -> MigrationResult:
        started = time.perf_counter()
        output_root = Path(output)
        notify = _Notifier(progress)
        self._resolver.clear()

        notify(MigrationPhase.SCANNING, message=f"Scanning {source}")
        with trace_span("scan"):
            files = self._scanner.scan(source)
        total = len(files)
        if not files:
            logger.info("No wiki files found in %s", source)
            notify(MigrationPhase.COMPLETED, message="No files found")
            return MigrationResult(duration_seconds=time.perf_counter() - started)

        def before_parse(index: int, info: FileInfo) -> None:
            notify(MigrationPhase.PARSING, index, total, info.file_name, "Parsing")

        with trace_span("parse", files=total):
            parsed, failures = parse_corpus(files, self._parsers, before_parse)
        documents = list(parsed.values())

        notify(MigrationPhase.GRAPH_BUILDING, message=f"Linking {len(documents)} documents")
        with trace_span("graph", documents=len(documents)):
            graph = self._builder.build(documents)
            self._resolver.register_documents(
                documents, folder_for=_para_folder if para_folders else None
            )
            for document in documents:
                document.backlinks = sorted(graph.incoming(document.title), key=str.casefold)

        matches = match_documents(files, documents)
        succeeded = 0
        cancelled = False
        migrated: list[MigratedFile] = []
        with trace_span("write", files=total, dry_run=dry_run):
            for index, info in enumerate(files, start=1):
                if cancel_event is not None and cancel_event.is_set():
                    logger.info("Migration cancelled after %d of %d files", index - 1, total)
                    cancelled = True
                    break
                if info.full_path not in parsed:
                    continue

                document = matches.get(info.full_path)
                if document is None:
                    failures.append(
                        FileFailure(
                            document_path=str(info.full_path),
                            error_message=f"No parsed document matches {info.file_name}",
                        )
                    )
                    continue

                notify(MigrationPhase.CONVERTING, index, total, info.file_name, document.title)
                try:
                    path = self._migrate_document(
                        document,
                        output_root,
                        dry_run=dry_run,
                        para_folders=para_folders,
                        link_style=link_style,
                    )
                except Exception as exc:
                    logger.warning("Migration failed for %s: %s", info.full_path, exc)
                    failures.append(file_failure(info.full_path, exc))
                    continue
                notify(MigrationPhase.WRITING, index, total, info.file_name, str(path))
                migrated.append(MigratedFile(source_path=info.full_path, output_path=path))
                succeeded += 1

        if cancelled:
            phase = MigrationPhase.CANCELLED
        elif succeeded == 0:
            phase = MigrationPhase.FAILED
        else:
            phase = MigrationPhase.COMPLETED
        notify(phase, total, total, message=f"{succeeded} migrated, {len(failures)} failed")

        return MigrationResult(
            total_processed=total,
            succeeded=succeeded,
            failed=len(failures),
            failures=failures,
            duration_seconds=time.perf_counter() - started,
            success=succeeded > 0,
            cancelled=cancelled,
            phase=phase,
            documents_parsed=len(documents),
            broken_references=self._resolver.broken_references(),
            cycles=graph.detect_cycles(),
            orphans=graph.orphans(),
            migrated=migrated,
        )

    def _migrate_document(
        self,
        document: Document,
        output_root: Path,
        *,
        dry_run: bool,
        para_folders: bool,
        link_style: LinkStyle,
    ) -> Path:
        """Resolve, convert and write one document. Returns its output path."""
        folder = _para_folder(document) if para_folders else None
        resolved = self._resolver.resolve(
            document.body,
            document.title,
            track_broken=True,
            style=link_style,
            from_folder=folder,
        )
        try:
            converted = self._converter.convert(dataclasses.replace(document, body=resolved))
        except MigrationError:
            raise
        except Exception as exc:
            raise ConversionFailure(f"Conversion failed for {document.title!r}: {exc}") from exc

        path = resolve_output_path(output_root, sanitize_title(document.title), folder)
        backlinks = [
            self._resolver.link_to(title, style=LinkStyle.WIKI) for title in document.backlinks
        ]
        content = self._writer.render_document(document, converted, backlinks, para=para_folders)

        if dry_run:
            logger.debug("Dry run: would write %s", path)
            return path
        if not self._writer.write(path, content):
            raise WriteFailure(f"Could not write {path}")
        return path


def _para_folder(document: Document) -> str:
    return para_folder_for(document.tags)

class _Notifier:
    """Forwards progress to an optional observer; observer errors are logged."""

    def __init__(self, callback: ProgressCallback | None) -> None:
        self._callback = callback

    def __call__(
        self,
        phase: MigrationPhase,
        current: int = 0,
        total: int = 0,
        current_file: str | None = None,
        message: str = "",
    ) -> None:
        if self._callback is None:
            return
        try:
            self._callback(MigrationProgress(phase, current, total, current_file, message))
        except Exception:
            logger.warning("Progress observer raised", exc_info=True)
