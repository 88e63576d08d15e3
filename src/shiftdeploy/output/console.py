"""Rich Console factory and theme for shiftdeploy output.

Consoles render into a StringIO buffer so renderers return plain strings.
Rich drops color codes by itself when not on a terminal (CI logs, tests).
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

SHIFT_THEME = Theme(
    {
        "sd.ok": "bold green",
        "sd.error": "bold red",
        "sd.warning": "bold yellow",
        "sd.op": "bold cyan",
        "sd.key": "dim",
        "sd.name": "bold",
        "sd.url": "underline blue",
        "sd.created": "green",
        "sd.reused": "cyan",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console backed by a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=SHIFT_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
