"""Operation-specific Rich renderers for ServiceResult.

Renderers are dispatched by ``result.op`` in :func:`render_result`.
Unknown ops fall through to a generic key-value renderer.
"""

from __future__ import annotations

import json as _json
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from shiftdeploy.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from shiftdeploy.services.result import ServiceResult


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
    """Render minimal output for ``--quiet`` mode.

    Listings print one name per line; deploy prints the application URL.
    """
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    items = result.data.get("items")
    if isinstance(items, list):
        return "\n".join(str(item) for item in items)
    if result.op == "deploy":
        return str(result.data.get("app_url") or result.data.get("name", ""))
    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="sd.ok"), Text(f"  {result.op}", style="sd.op"))


def _field(console: Console, key: str, value: Any) -> None:
    k = Text(f"  {key}: ", style="sd.key")
    if key == "name" or key == "label":
        v = Text(str(value), style="sd.name")
    elif key.endswith("_url"):
        v = Text(str(value), style="sd.url")
    elif isinstance(value, (dict, list)):
        v = Text(_json.dumps(value, separators=(",", ":")))
    else:
        v = Text(str(value))
    console.print(Text.assemble(k, v))


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(Text("ERROR", style="sd.error"), Text(f"  {result.op}", style="sd.op"), " — ", msg)

    if verbose and err and err.detail:
        console.print(Text("  detail:", style="dim"))
        for k, v in err.detail.items():
            console.print(f"    {k}: {v}")


# ── Operation renderers ───────────────────────────────────────────────


def _render_validate(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    _field(console, "message", result.data.get("message", "ok"))


def _render_deploy(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "name", d.get("name", ""))
    _field(console, "domain", d.get("domain", ""))

    state = Text("created", style="sd.created") if d.get("created") else Text("reused", style="sd.reused")
    console.print(Text.assemble(Text("  state: ", style="sd.key"), state))

    for key in ("app_url", "git_url", "accessible", "scalable", "gear_profile"):
        if key in d:
            _field(console, key, d[key])
    if d.get("cartridges"):
        _field(console, "cartridges", ", ".join(d["cartridges"]))
    if d.get("environment"):
        _field(console, "environment", ", ".join(d["environment"]))
    if verbose and "uuid" in d:
        _field(console, "uuid", d["uuid"])


def _render_delete(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    d = result.data
    _status_line(console, result)
    _field(console, "name", d.get("name", ""))
    _field(console, "domain", d.get("domain", ""))
    _field(console, "deleted", "yes" if d.get("deleted") else "no (not found)")


def _render_key(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    _status_line(console, result)
    for key in ("path", "exists", "label", "type", "uploaded"):
        if key in result.data:
            _field(console, key, result.data[key])


def _render_names(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, show_lines=False, pad_edge=False, expand=False)
    table.add_column("Name", style="sd.name", no_wrap=True)
    for item in items:
        table.add_row(str(item))
    console.print(table)
    console.print(f"\n{result.data.get('count', len(items))} items")


# ── Generic fallback ──────────────────────────────────────────────────


def _render_generic(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    """Fallback renderer: status line + all data as key-value pairs."""
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


# ── Dispatch table ────────────────────────────────────────────────────

_OP_RENDERERS: dict[str, Any] = {
    "validate": _render_validate,
    "deploy": _render_deploy,
    "delete": _render_delete,
    "ssh_key_check": _render_key,
    "ssh_key_upload": _render_key,
    "ssh_key_ensure": _render_key,
    "list_cartridges": _render_names,
    "list_gear_profiles": _render_names,
    "list_domains": _render_names,
}
