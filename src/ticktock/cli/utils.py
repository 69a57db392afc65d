"""
CLI utility helpers - consoles and output formatting.
"""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.table import Table

console = Console()
err_console = Console(stderr=True)


def print_mapping(data: dict[str, Any], *, title: str = "") -> None:
    """Render a flat mapping as a two-column Rich table."""
    table = Table(title=title or None, show_header=True, pad_edge=False)
    table.add_column("Key", style="bold")
    table.add_column("Value")
    for key, value in data.items():
        table.add_row(str(key), str(getattr(value, "value", value)))
    console.print(table)
