"""Shared CLI helpers."""

import json
import sys
from pathlib import Path
from typing import Any, Optional

import typer
from rich.console import Console
from rich.markup import escape

from ..completion import FunctionCatalog, default_catalog
from ..exceptions import DataLoadError, KvlensError

console = Console()
err_console = Console(stderr=True)

STDIN = "-"


def load_document(source: str) -> Any:
    """Decode a JSON document from a file path, or from stdin when *source* is ``-``."""
    try:
        if source == STDIN:
            text = sys.stdin.read()
        else:
            text = Path(source).read_text(encoding="utf-8")
    except OSError as e:
        raise DataLoadError(source, e.strerror or str(e))
    try:
        return json.loads(text)
    except ValueError as e:
        raise DataLoadError(source, f"invalid JSON: {e}")


def load_catalog(path: Optional[str]) -> FunctionCatalog:
    """Built-in functions, extended with the entries of *path* when given."""
    catalog = default_catalog()
    if path:
        catalog.extend(FunctionCatalog.from_file(Path(path)))
    return catalog


def fail(error: KvlensError, logger=None) -> None:
    """Report *error* and exit with status 1."""
    if logger is not None:
        logger.error(f"{error.__class__.__name__}: {error}")
    err_console.print(f"[red]Error:[/red] {escape(str(error))}")
    if error.hint:
        err_console.print(f"[dim]{escape(error.hint)}[/dim]")
    raise typer.Exit(1)
