"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO).  The caller
extracts the rendered text via ``get_output(console)``.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.json import JSON
from rich.text import Text

from dbref.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from dbref.services.result import ServiceResult


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()

    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console, verbose=verbose)
    else:
        _render_error(result, console, verbose=verbose)

    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Render minimal output for ``--quiet`` mode.

    Documents are printed as compact JSON, inserts as one id per line.
    """
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op}: {msg}"
    if "document" in result.data:
        return json.dumps(result.data["document"], separators=(",", ":"), default=str)
    if "ids" in result.data:
        return "\n".join(result.data["ids"])
    if "items" in result.data:
        return "\n".join(json.dumps(item, default=str) for item in result.data["items"])
    return f"OK: {result.op}"


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="dbref.ok"), Text(f"  {result.op}", style="dbref.op"))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="dbref.key")
    if key == "collection":
        v = Text(str(value), style="dbref.collection")
    elif key in ("id", "ids"):
        v = Text(str(value), style="dbref.id")
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


def _json_block(console: Console, data: Any) -> None:
    console.print(JSON.from_data(data, indent=2, default=str))


def _render_meta(console: Console, result: ServiceResult) -> None:
    """Print the telemetry span tree (verbose only)."""
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        if k == "telemetry":
            _render_span(console, v, indent=4)
        else:
            console.print(f"    {k}: {v}")


def _render_span(console: Console, span: dict[str, Any], indent: int) -> None:
    line = f"{' ' * indent}{span.get('duration_ms', 0.0):>8.2f}ms  {span.get('name', '?')}"
    annotations = span.get("annotations") or {}
    if annotations:
        line += "  (" + ", ".join(f"{k}={v}" for k, v in annotations.items()) + ")"
    console.print(Text(line, style="dim"))
    for child in span.get("children", []):
        _render_span(console, child, indent + 4)


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text("ERROR", style="dbref.error"), Text(f"  {result.op}", style="dbref.op"), f": {msg}"
    )
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


def _render_document(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Render resolve/get results: the document as highlighted JSON."""
    _status_line(console, result)
    if "fetches" in result.data:
        _field(console, "fetches", result.data["fetches"])
    _json_block(console, result.data["document"])
    if verbose:
        _render_meta(console, result)


def _render_insert(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "collection", result.data["collection"])
    _field(console, "count", result.data["count"])
    for doc_id in result.data["ids"]:
        _field(console, "id", doc_id)
    if verbose:
        _render_meta(console, result)


def _render_list(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "collection", result.data["collection"])
    _field(console, "count", result.data["count"])
    _json_block(console, result.data["items"])
    if verbose:
        _render_meta(console, result)


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":"), default=str))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


_OP_RENDERERS: dict[str, Any] = {
    "resolve_document": _render_document,
    "resolve_stored": _render_document,
    "get": _render_document,
    "insert": _render_insert,
    "list_documents": _render_list,
}
