"""Card list for arrays of objects."""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from rich.cells import cell_len, set_cell_size
from rich.text import Text

from .base import CustomView, ViewKind
from .commands import Command, Navigate
from .format import paint, stringify, wrap_at_width
from .keymodes import Action, KeyMode, resolve_action
from .messages import KeyPress, SearchQuery
from .schema import ListConfig
from .theme import DEFAULT_THEME, Theme


@dataclass
class ListItem:
    index: int
    title: str
    subtitle: str = ""
    badges: List[str] = field(default_factory=list)
    secondary: List[str] = field(default_factory=list)

    def matches(self, query: str) -> bool:
        needle = query.lower()
        return needle in self.title.lower() or needle in self.subtitle.lower()


def _badges(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [stringify(v) for v in value]
    return [stringify(value)]


def build_items(node: Sequence, config: ListConfig) -> List[ListItem]:
    """Card data for every object in *node*; non-objects are skipped."""
    items = []
    for index, obj in enumerate(node):
        if not isinstance(obj, Mapping):
            continue
        item = ListItem(index=index, title=stringify(obj.get(config.title_field)))
        if config.subtitle_field:
            item.subtitle = stringify(obj.get(config.subtitle_field))
        for name in config.badge_fields:
            item.badges.extend(_badges(obj.get(name)))
        for name in config.secondary_fields:
            if obj.get(name) is not None:
                item.secondary.append(stringify(obj[name]))
        items.append(item)
    return items


class ListView(CustomView):
    """Scrollable cards with title, subtitle, badges and secondary fields.

    Search narrows the cards to those whose title or subtitle contains the
    query. Enter drills into the selected object.
    """

    kind = ViewKind.LIST

    def __init__(
        self,
        node: Sequence,
        config: ListConfig,
        heading: str = "",
        key_mode: KeyMode = KeyMode.VIM,
        theme: Theme = DEFAULT_THEME,
    ):
        self.config = config
        self.heading = heading
        self.key_mode = key_mode
        self.theme = theme
        self.items = build_items(node, config)
        self.selected = 0
        self.scroll_top = 0
        self.query = ""

    def visible_items(self) -> List[ListItem]:
        if not self.query:
            return self.items
        return [item for item in self.items if item.matches(self.query)]

    @property
    def selected_item(self) -> Optional[ListItem]:
        items = self.visible_items()
        if not items:
            return None
        return items[min(self.selected, len(items) - 1)]

    @property
    def title(self) -> str:
        return self.heading or "List"

    @property
    def footer(self) -> str:
        return "↑/↓ move  enter open  / filter"

    @property
    def handles_search(self) -> bool:
        return True

    @property
    def search_title(self) -> str:
        return "Filter"

    def position(self) -> Tuple[int, int, str]:
        count = len(self.visible_items())
        selected = self.selected + 1 if count else 0
        return count, selected, f"{selected}/{count}"

    def update(self, message: Any) -> Tuple["ListView", Optional[Command]]:
        if isinstance(message, SearchQuery):
            self.query = message.text
            self.selected = 0
            self.scroll_top = 0
            return self, None
        if not isinstance(message, KeyPress):
            return self, None

        count = len(self.visible_items())
        action = resolve_action(message.key, self.key_mode)
        if action is Action.DOWN and count:
            self.selected = min(self.selected + 1, count - 1)
        elif action is Action.UP:
            self.selected = max(self.selected - 1, 0)
        elif action is Action.TOP:
            self.selected = 0
        elif action is Action.BOTTOM and count:
            self.selected = count - 1
        elif action in (Action.ENTER, Action.FORWARD):
            item = self.selected_item
            if item is not None:
                return self, Navigate(item.index)
        return self, None

    def _lines_per_item(self) -> int:
        lines = 1 + (self.config.subtitle_max_lines if self.config.subtitle_field else 0)
        if self.config.secondary_fields:
            lines += 1
        return max(lines, 2) + 1

    def _scroll(self, visible_count: int) -> None:
        if self.selected < self.scroll_top:
            self.scroll_top = self.selected
        if self.selected >= self.scroll_top + visible_count:
            self.scroll_top = self.selected - visible_count + 1
        self.scroll_top = max(self.scroll_top, 0)

    def render(self, width: int, height: int, color: bool = True) -> str:
        theme = self.theme
        if not self.items:
            return "  (empty)"
        items = self.visible_items()
        if not items:
            return "  (no matches)"

        content_width = max(width - 4, 10)
        text = Text()
        header_lines = 0
        if self.heading:
            text.append(f"  {self.heading}\n", theme.title)
            text.append(f"  {len(items)} items\n\n", theme.muted)
            header_lines = 3

        per_item = self._lines_per_item()
        visible_count = max((max(height - header_lines, per_item)) // per_item, 1)
        self._scroll(visible_count)
        end = min(self.scroll_top + visible_count, len(items))

        for i in range(self.scroll_top, end):
            item = items[i]
            if i == self.selected:
                text.append("│ ", theme.selected)
            else:
                text.append("  ")
            text.append(item.title or f"[{item.index}]", theme.title)
            for badge in item.badges:
                text.append(" ")
                text.append(f" {badge} ", theme.badge)
            text.append("\n")

            if item.subtitle:
                sub_width = max(content_width - 2, 5)
                lines = wrap_at_width(item.subtitle, sub_width)
                if len(lines) > self.config.subtitle_max_lines:
                    lines = lines[: self.config.subtitle_max_lines]
                    last = lines[-1]
                    lines[-1] = set_cell_size(last, min(cell_len(last), sub_width - 3)) + "..."
                for sub in lines:
                    text.append(f"  {sub}\n", theme.subtitle)

            if item.secondary:
                text.append(f"    {' · '.join(item.secondary)}\n", theme.subtitle)

            if i < end - 1:
                text.append("\n")

        text.rstrip()
        return paint(text, width, color)
