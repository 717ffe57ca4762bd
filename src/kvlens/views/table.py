"""Plain KEY/VALUE table for nodes without a custom view."""

from typing import Any, Mapping

from rich import box
from rich.table import Table
from rich.text import Text

from ..addressing.navigator import type_label
from .format import paint, stringify
from .theme import DEFAULT_THEME, Theme


def node_table(node: Any, theme: Theme = DEFAULT_THEME) -> Table:
    table = Table(box=box.SIMPLE_HEAD, expand=True, show_edge=False, pad_edge=False)
    table.add_column("KEY", style=theme.key, no_wrap=True, ratio=1)
    table.add_column("VALUE", style=theme.value, no_wrap=True, ratio=3)

    if isinstance(node, Mapping):
        for key, value in node.items():
            table.add_row(Text(str(key)), Text(stringify(value)))
    elif isinstance(node, (list, tuple)):
        for index, value in enumerate(node):
            table.add_row(Text(f"[{index}]"), Text(stringify(value)))
    else:
        table.add_row(Text(f"({type_label(node)})"), Text(stringify(node)))
    return table


def render_node_table(node: Any, width: int, color: bool = True, theme: Theme = DEFAULT_THEME) -> str:
    return paint(node_table(node, theme), width, color)
