"""Text helpers shared by the views: stringify, truncate, wrap, paint."""

import io
import json
from typing import Any, List

from rich.cells import cell_len, set_cell_size
from rich.console import Console, RenderableType

ELLIPSIS = "..."


def stringify(value: Any) -> str:
    """Compact one-line text for a data value."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return str(value)


def truncate(text: str, width: int) -> str:
    """Cut *text* to *width* terminal cells, ending with ``...`` when cut."""
    if width <= 0:
        return ""
    if cell_len(text) <= width:
        return text
    if width <= len(ELLIPSIS):
        return set_cell_size(text, width)
    return set_cell_size(text, width - len(ELLIPSIS)) + ELLIPSIS


def wrap_at_width(text: str, width: int) -> List[str]:
    """Word-wrap *text* to *width* cells. Long words stay on their own line."""
    if width <= 0 or cell_len(text) <= width:
        return [text]
    words = text.split()
    if not words:
        return [text]
    lines = []
    current = words[0]
    for word in words[1:]:
        candidate = f"{current} {word}"
        if cell_len(candidate) > width:
            lines.append(current)
            current = word
        else:
            current = candidate
    lines.append(current)
    return lines


def paint(renderable: RenderableType, width: int, color: bool) -> str:
    """Render a rich renderable to a string, with ANSI styling when *color*."""
    buffer = io.StringIO()
    console = Console(
        file=buffer,
        width=max(width, 1),
        force_terminal=color,
        no_color=not color,
        color_system="truecolor" if color else None,
        highlight=False,
        emoji=False,
        legacy_windows=False,
    )
    console.print(renderable, end="", overflow="ellipsis", no_wrap=True, crop=True)
    return buffer.getvalue()
