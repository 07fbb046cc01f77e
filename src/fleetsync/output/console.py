"""Rich Console factory and theme for fleetsync output.

Consoles render into a StringIO buffer so renderers keep a
``ServiceResult -> str`` contract.  In non-TTY environments (tests,
pipes, schedulers) Rich drops color codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

FLEET_THEME = Theme(
    {
        "fleet.ok": "bold green",
        "fleet.error": "bold red",
        "fleet.warning": "bold yellow",
        "fleet.op": "bold cyan",
        "fleet.key": "dim",
        "fleet.id": "bold blue",
        "fleet.path": "dim",
        "fleet.origin.remote": "green",
        "fleet.origin.fallback": "yellow",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=FLEET_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()
