"""Completion preview command."""

from pathlib import Path
from typing import Optional

import typer
from rich import box
from rich.markup import escape
from rich.table import Table

from ..completion import CompletionEngine
from ..exceptions import KvlensError
from . import app
from ._common import console, fail, load_catalog, load_document


@app.command()
def complete(
    source: str = typer.Argument(..., metavar="FILE", help="JSON document ('-' reads stdin)"),
    text: str = typer.Argument(..., metavar="INPUT", help="Expression bar contents"),
    functions: Optional[Path] = typer.Option(
        None,
        "--functions",
        help="JSON file with extra completion functions",
        exists=True,
        dir_okay=False,
    ),
    plain: bool = typer.Option(
        False,
        "--plain",
        help="One suggestion per line, without descriptions",
    ),
):
    """
    List the suggestions offered for INPUT.

    [bold cyan]Examples:[/bold cyan]

      kvlens complete data.json _.providers[0].

      kvlens complete data.json _.na --plain
    """
    try:
        document = load_document(source)
        catalog = load_catalog(str(functions) if functions else None)
    except KvlensError as e:
        fail(e)

    suggestions = CompletionEngine(catalog).suggest(text, document)

    if plain:
        for suggestion in suggestions:
            console.print(suggestion.label, markup=False, highlight=False)
        return

    if not suggestions:
        console.print("[dim]No suggestions[/dim]")
        return

    table = Table(box=box.SIMPLE_HEAD, show_edge=False)
    table.add_column("SUGGESTION", style="cyan", no_wrap=True)
    table.add_column("KIND", style="dim")
    table.add_column("USAGE")
    for suggestion in suggestions:
        table.add_row(
            escape(suggestion.label),
            suggestion.kind.value,
            escape(suggestion.description or suggestion.usage),
        )
    console.print(table)
