#!/usr/bin/env python3

from rich.console import Console as RichConsole
from rich.table import Table

from hbind.symbols import Symbol


class Console:
    """Console wrapper for the command line output."""

    def __init__(self, stderr: bool = False):
        self._rich = RichConsole(stderr=stderr)

    def print(self, *args, **kwargs):
        """Print using Rich console."""
        return self._rich.print(*args, **kwargs)

    def error(self, message: str):
        return self._rich.print(f"[red]Error:[/red] {message}", highlight=False)

    def symbols(self, symbols: list[Symbol], title: str = ""):
        table = Table(title=title or None)
        table.add_column("#", justify="right")
        table.add_column("name", style="bold")
        table.add_column("args")
        table.add_column("ret", style="cyan")
        for i, symbol in enumerate(symbols, 1):
            args = ", ".join(
                f"{name}: {wire.value}" for name, wire in zip(symbol.arg_names, symbol.args)
            )
            table.add_row(str(i), symbol.name, args, symbol.ret.value)
        self._rich.print(table)

    def typedefs(self, typedefs: dict[str, str], title: str = ""):
        table = Table(title=title or None)
        table.add_column("alias", style="bold")
        table.add_column("canonical")
        for alias, canonical in sorted(typedefs.items()):
            table.add_row(alias, canonical)
        self._rich.print(table)
