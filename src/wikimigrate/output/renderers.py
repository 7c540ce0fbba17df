"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a StringIO-backed Console; :func:`render_result`
returns the collected text. Renderers are dispatched by ``result.op`` and
unknown ops fall through to a generic key-value renderer.

User content (titles, paths, error messages) is always wrapped in
:class:`~rich.text.Text` so square brackets in it are never read as
console markup.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from wikimigrate.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from wikimigrate.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to text (plain when not on a terminal)."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    if verbose:
        _render_meta(console, result)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Minimal output for ``--quiet``: paths or content, one per line."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"

    if result.op == "migrate":
        return "\n".join(result.data.get("written", [])) or f"OK: {result.op}"
    if result.op == "scan":
        return "\n".join(item["path"] for item in result.data.get("items", []))
    if result.op == "graph_export":
        return str(result.data.get("content", "")).rstrip("\n")
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult, note: str = "") -> None:
    """Print the OK status line."""
    parts = [Text("OK", style="wm.ok"), Text(f"  {result.op}", style="wm.op")]
    if note:
        parts.append(Text(f"  ({note})", style="wm.warning"))
    console.print(*parts, sep="")


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    if key in ("source", "output", "report", "path"):
        style = "wm.path"
    elif isinstance(value, int):
        style = "wm.count"
    else:
        style = ""
    console.print(Text(f"  {key}: ", style="wm.key"), Text(str(value), style=style), sep="")


def _heading(console: Console, label: str) -> None:
    console.print()
    console.print(Text(f"  {label}:", style="wm.title"))


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the meta block, including the telemetry span tree."""
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for key, value in result.meta.items():
        if key == "telemetry":
            _render_span(console, value, indent=4)
        else:
            console.print(Text(f"    {key}: {value}"))


def _render_span(console: Console, span: dict[str, Any], indent: int) -> None:
    duration = span.get("duration_ms", 0.0)
    if duration > 1000:
        style = "bold red"
    elif duration > 100:
        style = "yellow"
    else:
        style = "dim"
    line = Text(" " * indent)
    line.append(f"{duration:>8.2f}ms", style=style)
    line.append(f"  {span.get('name', '?')}")
    fields = span.get("fields")
    if fields:
        line.append("  (" + ", ".join(f"{k}={v}" for k, v in fields.items()) + ")")
    console.print(line)
    for child in span.get("children", []):
        _render_span(console, child, indent + 4)


def _pair_table(rows: list[tuple[str, str]], left: str, right: str) -> Table:
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column(left, style="wm.title")
    table.add_column(right)
    for a, b in rows:
        table.add_row(Text(a), Text(b))
    return table


def _cycle_line(cycle: list[str]) -> Text:
    return Text("    " + " -> ".join(cycle))


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text("ERROR", style="wm.error"),
        Text(f"  {result.op}", style="wm.op"),
        Text(f": {msg}"),
        sep="",
    )

    failures = result.data.get("failures") if result.data else None
    if failures:
        console.print(
            _pair_table(
                [(f["document_path"], f["error_message"]) for f in failures], "File", "Error"
            )
        )

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for key, value in err.detail.items():
            console.print(Text(f"    {key}: {value}"))


# ── Operation renderers ───────────────────────────────────────────────


def _render_migrate(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result, note="dry run" if d.get("dry_run") else "")
    for key in ("source", "output"):
        if key in d:
            _field(console, key, d[key])
    _field(console, "files", d.get("total", 0))
    _field(console, "migrated", d.get("succeeded", 0))
    _field(console, "failed", d.get("failed", 0))
    if d.get("cancelled"):
        _field(console, "phase", d.get("phase", "cancelled"))
    if "report" in d:
        _field(console, "report", d["report"])

    failures = d.get("failures", [])
    if failures:
        _heading(console, "failures")
        console.print(
            _pair_table(
                [(f["document_path"], f["error_message"]) for f in failures], "File", "Error"
            )
        )

    broken = d.get("broken_references", [])
    if broken:
        _heading(console, f"broken references ({len(broken)})")
        rows = [(ref["source"], ref["target"]) for ref in broken]
        console.print(_pair_table(rows if verbose else rows[:20], "Source", "Target"))

    cycles = d.get("cycles", [])
    if cycles and verbose:
        _heading(console, f"cycles ({len(cycles)})")
        for cycle in cycles:
            console.print(_cycle_line(cycle))

    if verbose and d.get("written"):
        _heading(console, "written")
        for path in d["written"]:
            console.print(Text(f"    {path}", style="wm.path"))


def _render_scan(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "source", result.data.get("source", ""))
    _field(console, "count", result.data.get("count", 0))
    items = result.data.get("items", [])
    if not items:
        return
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Path", style="wm.path")
    table.add_column("Type")
    table.add_column("Date")
    if verbose:
        table.add_column("Size", justify="right")
    for item in items:
        row = [Text(item["path"]), Text(item["type"]), Text(item["date"][:10])]
        if verbose:
            row.append(Text(str(item["size"])))
        table.add_row(*row)
    console.print(table)


def _render_graph_analyze(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "source", d.get("source", ""))
    for key in ("documents", "node_count", "edge_count"):
        _field(console, key, d.get(key, 0))
    _field(console, "orphans", len(d.get("orphans", [])))
    _field(console, "cycles", len(d.get("cycles", [])))
    _field(console, "broken_references", len(d.get("broken_references", [])))

    most_linked = d.get("most_linked", [])
    if most_linked:
        _heading(console, "most linked")
        console.print(
            _pair_table(
                [(item["title"], str(item["backlinks"])) for item in most_linked],
                "Title",
                "Backlinks",
            )
        )

    cycles = d.get("cycles", [])
    if cycles:
        _heading(console, "cycles")
        for cycle in cycles:
            console.print(_cycle_line(cycle))

    broken = d.get("broken_references", [])
    if broken:
        _heading(console, "broken references")
        console.print(
            _pair_table([(ref["source"], ref["target"]) for ref in broken], "Source", "Target")
        )

    if verbose and d.get("orphans"):
        _heading(console, "orphans")
        for title in d["orphans"]:
            console.print(Text(f"    {title}"))


def _render_graph_export(
    result: ServiceResult, console: Console, *, verbose: bool = False
) -> None:
    # Raw content only, so the output can be piped straight into a file.
    console.out(str(result.data.get("content", "")).rstrip("\n"), highlight=False)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


_OP_RENDERERS: dict[str, Any] = {
    "migrate": _render_migrate,
    "scan": _render_scan,
    "graph_analyze": _render_graph_analyze,
    "graph_export": _render_graph_export,
}
