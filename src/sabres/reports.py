"""
sabres.reports

Fixed-column text tables for catalog and schema listings.
"""

from __future__ import annotations

import io
from dataclasses import dataclass

from rich import box
from rich.console import Console
from rich.table import Table


@dataclass(frozen=True, slots=True)
class Report:
    headers: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]

    def column(self, header: str) -> list[str]:
        idx = self.headers.index(header)
        return [row[idx] for row in self.rows]

    def to_table(self) -> Table:
        table = Table(box=box.ASCII, show_lines=False)
        for header in self.headers:
            table.add_column(header, no_wrap=True, overflow="ignore")
        for row in self.rows:
            table.add_row(*row)
        return table

    def render(self) -> str:
        buf = io.StringIO()
        # Wide, colorless console: the output is a plain-text contract.
        console = Console(file=buf, width=1000, color_system=None, force_terminal=False)
        console.print(self.to_table())
        return "\n".join(line.rstrip() for line in buf.getvalue().splitlines())

    def __str__(self) -> str:
        return self.render()
