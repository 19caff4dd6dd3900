"""CLI UI components (Rich).

Why separate components:
- Keeps command logic apart from presentation details.
- Lets several commands reuse the same tables/panels.
"""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import AuthToken


def print_banner(console: Console) -> None:
    """Print the welcome banner.

    Only commands that write their result to a file call this; stdout carrying
    JSON or CSV stays free of decoration.
    """

    title = Text("Copyleaks", style="bold cyan")
    subtitle = Text("Scans • Exports • Credits", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_mapping_table(title: str, data: Mapping[str, Any]) -> Table:
    table = Table(title=title)
    table.add_column("Key", style="cyan", no_wrap=True)
    table.add_column("Value", style="white")
    for key, value in data.items():
        table.add_row(str(key), str(value))
    return table


def build_values_table(title: str, values: Iterable[Any]) -> Table:
    """One row per value; dict values are rendered with one column per key."""

    items = list(values)
    table = Table(title=title)
    columns: list[str] = []
    for item in items:
        if isinstance(item, Mapping):
            columns.extend(str(k) for k in item if str(k) not in columns)

    if not columns:
        table.add_column("Value", style="white")
        for item in items:
            table.add_row(str(item))
        return table

    for column in columns:
        table.add_column(column, style="white")
    for item in items:
        if isinstance(item, Mapping):
            table.add_row(*(str(item.get(column, "")) for column in columns))
        else:
            table.add_row(str(item), *([""] * (len(columns) - 1)))
    return table


def build_token_panel(token: AuthToken) -> Panel:
    body = Text()
    body.append("Expires: ", style="bold")
    body.append(token.expires.isoformat())
    if token.issued:
        body.append("\nIssued: ", style="bold")
        body.append(token.issued.isoformat())
    return Panel(body, title=Text("Auth token", style="bold green"), border_style="green")
