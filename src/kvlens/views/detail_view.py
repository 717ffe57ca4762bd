"""Sectioned view of a single object."""

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Tuple

from rich.cells import cell_len
from rich.text import Text

from .base import CustomView, ViewKind
from .commands import Command
from .format import paint, stringify, truncate, wrap_at_width
from .keymodes import Action, KeyMode, resolve_action
from .messages import KeyPress
from .schema import (
    LAYOUT_INLINE,
    LAYOUT_PARAGRAPH,
    LAYOUT_TAGS,
    DetailConfig,
    DetailSection,
)
from .theme import DEFAULT_THEME, Theme

OTHER_SECTION = "Other"


@dataclass
class RenderedSection:
    title: str
    lines: List[Text] = field(default_factory=list)


class DetailView(CustomView):
    """Renders an object as ordered sections.

    Configured sections come first in their declared layouts. Keys that no
    section mentions, minus hidden fields and the title field, follow in an
    "Other" table.
    """

    kind = ViewKind.DETAIL

    def __init__(
        self,
        obj: Mapping,
        config: DetailConfig,
        key_mode: KeyMode = KeyMode.VIM,
        theme: Theme = DEFAULT_THEME,
    ):
        self.obj = obj
        self.config = config
        self.key_mode = key_mode
        self.theme = theme
        self.scroll_top = 0
        self._line_count = 0

        self.hidden = set(config.hidden_fields)
        if config.title_field:
            self.hidden.add(config.title_field)

    @property
    def title(self) -> str:
        if self.config.title_field:
            text = stringify(self.obj.get(self.config.title_field))
            if text:
                return text
        return "Detail"

    @property
    def footer(self) -> str:
        return "↑/↓ scroll  ← back"

    def other_fields(self) -> List[str]:
        covered = {name for section in self.config.sections for name in section.fields}
        return [
            str(key)
            for key in sorted(self.obj.keys(), key=str)
            if key not in covered and key not in self.hidden
        ]

    def position(self) -> Tuple[int, int, str]:
        return 1, 1, "detail"

    def update(self, message: Any) -> Tuple["DetailView", Optional[Command]]:
        if not isinstance(message, KeyPress):
            return self, None
        action = resolve_action(message.key, self.key_mode)
        if action is Action.DOWN:
            self.scroll_top = min(self.scroll_top + 1, max(self._line_count - 1, 0))
        elif action is Action.UP:
            self.scroll_top = max(self.scroll_top - 1, 0)
        elif action is Action.TOP:
            self.scroll_top = 0
        elif action is Action.BOTTOM:
            self.scroll_top = max(self._line_count - 1, 0)
        return self, None

    def _values(self, fields: List[str]) -> List[Tuple[str, Any]]:
        return [
            (name, self.obj[name])
            for name in fields
            if name not in self.hidden and self.obj.get(name) is not None
        ]

    def _inline(self, fields: List[str], width: int) -> List[Text]:
        parts = [stringify(v) for _, v in self._values(fields)]
        parts = [p for p in parts if p]
        if not parts:
            return []
        return [Text(truncate(" · ".join(parts), width), self.theme.value)]

    def _paragraph(self, fields: List[str], width: int) -> List[Text]:
        lines = []
        for _, value in self._values(fields):
            text = stringify(value)
            if text:
                lines.extend(Text(line, self.theme.value) for line in wrap_at_width(text, width))
        return lines

    def _tags(self, fields: List[str], width: int) -> List[Text]:
        tags = []
        for _, value in self._values(fields):
            if isinstance(value, (list, tuple)):
                tags.extend(stringify(v) for v in value)
            else:
                tags.append(stringify(value))
        lines: List[Text] = []
        current = Text()
        for tag in tags:
            pill = f" {tag} "
            if current.cell_len and current.cell_len + 1 + cell_len(pill) > width:
                lines.append(current)
                current = Text()
            if current.cell_len:
                current.append(" ")
            current.append(pill, self.theme.badge)
        if current.cell_len:
            lines.append(current)
        return lines

    def _table(self, fields: List[str], width: int) -> List[Text]:
        values = self._values(fields)
        if not values:
            return []
        key_width = min(max(cell_len(name) for name, _ in values), max(width // 3, 1))
        lines = []
        for name, value in values:
            line = Text()
            line.append(truncate(name, key_width).ljust(key_width), self.theme.key)
            line.append("  ")
            line.append(truncate(stringify(value), max(width - key_width - 2, 1)), self.theme.value)
            lines.append(line)
        return lines

    def _render_section(self, section: DetailSection, width: int) -> RenderedSection:
        layout = section.effective_layout
        if layout == LAYOUT_INLINE:
            lines = self._inline(section.fields, width)
        elif layout == LAYOUT_PARAGRAPH:
            lines = self._paragraph(section.fields, width)
        elif layout == LAYOUT_TAGS:
            lines = self._tags(section.fields, width)
        else:
            lines = self._table(section.fields, width)
        return RenderedSection(section.title, lines)

    def sections(self, width: int) -> List[RenderedSection]:
        content_width = max(width - 4, 10)
        out = []
        for section in self.config.sections:
            rendered = self._render_section(section, content_width)
            if rendered.lines:
                out.append(rendered)
        other = self.other_fields()
        if other:
            rendered = self._render_section(DetailSection(fields=other, title=OTHER_SECTION), content_width)
            if rendered.lines:
                out.append(rendered)
        return out

    def render(self, width: int, height: int, color: bool = True) -> str:
        lines: List[Text] = []
        for i, section in enumerate(self.sections(width)):
            if i:
                lines.append(Text())
            if section.title:
                lines.append(Text(f"  {section.title}", self.theme.section))
            lines.extend(Text("  ") + line for line in section.lines)

        self._line_count = len(lines)
        self.scroll_top = min(self.scroll_top, max(len(lines) - 1, 0))
        window = lines[self.scroll_top:self.scroll_top + max(height, 1)]
        return paint(Text("\n").join(window), width, color)
