"""Interactive explorer command."""

from pathlib import Path
from typing import Optional

import click
import typer

from ..addressing import PathEvaluator, display_form
from ..config import KEY_MODES, load_config
from ..exceptions import KvlensError
from ..logging_config import setup_logging
from ..views import load_display_schema
from . import app
from ._common import console, fail, load_catalog, load_document


@app.command()
def explore(
    source: str = typer.Argument(
        ...,
        metavar="FILE",
        help="JSON document to explore ('-' reads stdin)",
    ),
    schema: Optional[Path] = typer.Option(
        None,
        "--schema",
        "-s",
        help="Display schema or annotated JSON Schema",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    key_mode: Optional[str] = typer.Option(
        None,
        "--key-mode",
        "-k",
        help="Key bindings: vim | emacs | function",
        click_type=click.Choice(list(KEY_MODES), case_sensitive=False),
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Render without colors",
    ),
    expr: Optional[str] = typer.Option(
        None,
        "--expr",
        "-e",
        help="Print the node at this path as JSON instead of opening the explorer",
    ),
    start: str = typer.Option(
        "_",
        "--path",
        "-p",
        help="Path shown when the explorer opens",
    ),
    functions: Optional[Path] = typer.Option(
        None,
        "--functions",
        help="JSON file with extra completion functions",
        exists=True,
        dir_okay=False,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Write log records to this file",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Debug logging",
    ),
):
    """
    Explore a JSON document with path completion and custom views.

    [bold cyan]Examples:[/bold cyan]

      kvlens explore data.json

      kvlens explore data.json --schema providers.schema.json

      kvlens explore data.json -e '_.providers[0].name'

      cat data.json | kvlens explore -
    """
    try:
        settings = load_config(
            config_file=config,
            key_mode=key_mode.lower() if key_mode else None,
            no_color=True if no_color else None,
            function_catalog=str(functions) if functions else None,
            log_file=str(log_file) if log_file else None,
        )
    except KvlensError as e:
        fail(e)

    # The explorer owns the terminal, so its logs only go to the file.
    logger = setup_logging(verbose=verbose, log_file=settings.log_file, terminal=expr is not None)

    try:
        document = load_document(source)

        if expr is not None:
            node = PathEvaluator().evaluate(expr, document)
            logger.debug(f"Resolved {display_form(expr)}")
            console.print_json(data=node, highlight=settings.color)
            return

        display_schema = load_display_schema(schema) if schema else None
        catalog = load_catalog(settings.function_catalog)

        from ..tui import run_explorer

        run_explorer(
            document,
            config=settings,
            schema=display_schema,
            catalog=catalog,
            start=start,
        )

    except KvlensError as e:
        fail(e, logger)
