"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from fleetsync.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from fleetsync.services.result import ServiceResult


# ── Public API ────────────────────────────────────────────────────────


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
    """Render minimal output for ``--quiet`` mode."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    items = result.data.get("items")
    if items and isinstance(items, list):
        return "\n".join(str(item.get("id", "")) for item in items if isinstance(item, dict))

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="fleet.ok"), Text(f"  {result.op}", style="fleet.op"))


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    k = Text(f"  {key}: ", style="fleet.key")
    if key == "id" or key.endswith("_id") or key == "version":
        v = Text(str(value), style="fleet.id")
    elif key.endswith("_path"):
        v = Text(str(value), style="fleet.path")
    elif key == "origin":
        v = Text(str(value), style=f"fleet.origin.{value}")
    else:
        v = Text(str(value))
    console.print(k, v)


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print(Text("  meta:", style="dim"))
    for k, v in result.meta.items():
        console.print(f"    {k}: {v}")


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text("ERROR", style="fleet.error"),
        Text(f"  {result.op}", style="fleet.op"),
        Text(" — "),
        msg,
    )
    if err is not None:
        console.print(Text(f"  code: {err.code}", style="dim"))
    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Operation renderers ───────────────────────────────────────────────


def _render_publish(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    data = result.data
    for key in ("version", "updated_at", "item_count", "active_count", "settings_count"):
        if key in data:
            _field(console, key, data[key])
    if data.get("dry_run"):
        _field(console, "dry_run", "nothing written")
        if verbose:
            console.print(json.dumps(data.get("catalog", {}), indent=2, ensure_ascii=False))
    else:
        _field(console, "catalog_path", data.get("catalog_path", ""))
        _field(console, "settings_path", data.get("settings_path", ""))


def _render_catalog(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "origin", result.data.get("origin", ""))
    _field(console, "count", result.data.get("count", 0))

    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("ID", style="fleet.id", no_wrap=True)
    table.add_column("Category")
    table.add_column("Name")
    for item in result.data.get("items", []):
        table.add_row(
            str(item.get("id", "")),
            str(item.get("category", "")),
            str(item.get("name", "")),
        )
    console.print(table)
    if verbose:
        _render_meta(console, result)


def _render_settings(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    patched = set(result.data.get("patched", []))
    for key, value in result.data.get("settings", {}).items():
        marker = "*" if key in patched else " "
        console.print(Text(f" {marker}{key}: ", style="fleet.key"), Text(str(value)))


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        if isinstance(value, (dict, list)):
            _field(console, key, json.dumps(value, separators=(",", ":"), ensure_ascii=False))
        else:
            _field(console, key, value)
    if verbose:
        _render_meta(console, result)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "publish": _render_publish,
    "resolve_catalog": _render_catalog,
    "resolve_settings": _render_settings,
}
