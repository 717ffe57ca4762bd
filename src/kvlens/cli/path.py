"""Path inspection command."""

import typer
from rich.markup import escape

from ..addressing import display_form, is_complete_path, normalized_form, split_segments
from . import app
from ._common import console


@app.command()
def path(
    raw: str = typer.Argument(..., help="Path as typed, e.g. tasks.build-windows"),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
):
    """
    Show how a path is displayed, normalized and split into segments.

    [bold cyan]Examples:[/bold cyan]

      kvlens path tasks.build-windows

      kvlens path '_["a.b"][0]' --json
    """
    segments = split_segments(raw)
    if json_output:
        console.print_json(
            data={
                "display": display_form(raw),
                "normalized": normalized_form(raw),
                "segments": segments,
                "complete": is_complete_path(raw),
            },
            highlight=False,
        )
        return

    console.print(f"[bold]display[/bold]     {escape(display_form(raw))}")
    console.print(f"[bold]normalized[/bold]  {escape(normalized_form(raw)) or '[dim](root)[/dim]'}")
    console.print(f"[bold]complete[/bold]    {'yes' if is_complete_path(raw) else 'no'}")
    if segments:
        console.print("[bold]segments[/bold]")
        for i, segment in enumerate(segments):
            console.print(f"  {i}  {escape(segment)}")
