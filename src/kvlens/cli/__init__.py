"""kvlens command line: the typer app and its subcommands."""

import typer

app = typer.Typer(
    name="kvlens",
    help="kvlens - Terminal explorer for nested JSON data",
    add_completion=False,
    rich_markup_mode="rich",
)


# Import subcommands to register them
from .explore import explore as _explore  # noqa: F401, E402
from .path import path as _path  # noqa: F401, E402
from .complete import complete as _complete  # noqa: F401, E402
from .status_demo import status_demo as _status_demo  # noqa: F401, E402
