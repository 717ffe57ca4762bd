"""kvlens explorer - interactive browser for nested data.

Layout:
┌─────────────────────────────────────────────────────────────────────┐
│ Providers                                                  3/12     │
│ _.providers[2].name                                                 │
│ name · items · active                                               │
├─────────────────────────────────────────────────────────────────────┤
│                                                                     │
│  (data panel: custom view or KEY/VALUE table)                       │
│                                                                     │
├─────────────────────────────────────────────────────────────────────┤
│ ✓ Copied to clipboard                                               │
│ ↑/↓ move  enter open  / filter                                      │
└─────────────────────────────────────────────────────────────────────┘

The app is the only place that touches the terminal and the clock. Views and
the completion engine are synchronous; the app feeds them messages and runs
the commands they return.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from typing import Any, Optional

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, ScrollableContainer, Vertical
from textual.reactive import reactive
from textual.timer import Timer
from textual.widgets import Input, Rule, Static

from ..addressing import (
    Evaluator,
    PathEvaluator,
    append_key,
    display_form,
    is_complete_path,
    strip_last_segment,
)
from ..completion import CompletionEngine, FunctionCatalog, TabCompleter
from ..config import ExplorerConfig
from ..exceptions import KvlensError
from ..views import (
    ActionResult,
    CompletionChannel,
    CopyToClipboard,
    DisplaySchema,
    KeyPress,
    Navigate,
    OpenUrl,
    PollCompletion,
    Quit,
    Schedule,
    SearchQuery,
    StatusDone,
    ViewKind,
    ViewState,
    active_view,
    flatten,
    get_theme,
    parse_key_mode,
    resolve_view_state,
    with_view,
)
from ..views.schema import ACTION_COPY_VALUE, ACTION_OPEN_URL
from ..views.table import render_node_table
from .platform import copy_to_clipboard, open_url

logger = logging.getLogger(__name__)

# Keys forwarded to a list/detail view while the expression bar has focus.
VIEW_NAVIGATION_KEYS = ("up", "down")


@dataclass
class NavState:
    """One step of the navigation history."""

    path: str
    mode: ViewKind


def key_name(event: events.Key) -> str:
    """Key identifier as views expect it (``q``, ``G``, ``ctrl+c``, ``esc``)."""
    if event.key == "escape":
        return "esc"
    if event.is_printable and event.character and len(event.character) == 1:
        return event.character
    return event.key


class HelpOverlay(Container):
    """Full-screen help overlay."""

    DEFAULT_CSS = """
    HelpOverlay {
        align: center middle;
        width: 100%;
        height: 100%;
    }

    #help-content {
        width: 64;
        height: auto;
        background: $panel;
        border: round $primary;
        padding: 1 2;
    }
    """

    def compose(self) -> ComposeResult:
        with Vertical(id="help-content"):
            yield Static("[bold cyan]KEYBOARD SHORTCUTS[/bold cyan]\n")
            yield Static("[bold]Expression bar[/bold]")
            yield Static("  Tab / Shift+Tab   Cycle completions")
            yield Static("  →                 Accept (cursor to end)")
            yield Static("  Enter             Go to path / evaluate")
            yield Static("  /text             Filter a list view")
            yield Static("")
            yield Static("[bold]Navigation[/bold]")
            yield Static("  ↑/↓ Home/End      Move in list and detail views")
            yield Static("  Esc               Back to parent")
            yield Static("  Ctrl+C            Quit")
            yield Static("")
            yield Rule()
            yield Static("[dim]Press F1 or Esc to close[/dim]")


class ExplorerApp(App):
    """Expression bar, completion line and data panel over a data tree."""

    TITLE = "kvlens"

    CSS = """
    Screen {
        background: $surface;
    }

    #header-bar {
        dock: top;
        height: auto;
        padding: 0 1;
        background: $primary-background;
    }

    #title-bar {
        width: 100%;
    }

    #expression {
        border: none;
        height: 1;
        padding: 0;
    }

    #suggestions {
        color: $text-muted;
        height: 1;
    }

    #content-area {
        width: 100%;
        height: 1fr;
        padding: 0 1;
    }

    #status-bar {
        dock: bottom;
        height: 2;
        padding: 0 1;
    }

    #help-overlay {
        layer: overlay;
    }

    .hidden {
        display: none;
    }
    """

    BINDINGS = [
        Binding("tab", "complete_next", "Complete", show=False, priority=True),
        Binding("shift+tab", "complete_previous", "Complete", show=False, priority=True),
        Binding("right", "accept_or_right", "Accept", show=False, priority=True),
        Binding("home", "home_or_top", "Top", show=False, priority=True),
        Binding("end", "end_or_bottom", "Bottom", show=False, priority=True),
        Binding("ctrl+c", "quit_app", "Quit", show=False, priority=True),
        Binding("escape", "back", "Back", priority=True),
        Binding("f1", "toggle_help", "Help"),
    ]

    show_help = reactive(False)

    def __init__(
        self,
        root: Any,
        config: Optional[ExplorerConfig] = None,
        schema: Optional[DisplaySchema] = None,
        catalog: Optional[FunctionCatalog] = None,
        channel: Optional[CompletionChannel] = None,
        evaluator: Optional[Evaluator] = None,
        start: str = "_",
    ) -> None:
        super().__init__()
        self.data_root = root
        self.explorer_config = config or ExplorerConfig()
        self.schema = schema
        self.channel = channel
        self.evaluator = evaluator or PathEvaluator()
        self.key_mode = parse_key_mode(self.explorer_config.key_mode)
        self.theme_styles = get_theme(self.explorer_config.theme)
        self.engine = CompletionEngine(catalog)
        self.completer = TabCompleter(self.engine)

        self.start_path = start
        self.current_path = "_"
        self.current_node: Any = root
        self.view_state = ViewState()
        self.nav_stack: list[NavState] = []
        self.status_text = ""
        self.status_is_error = False

        self._quitting = False
        self._poll_timer: Optional[Timer] = None

    # ── layout ──────────────────────────────────────────────────────────────

    def compose(self) -> ComposeResult:
        with Container(id="header-bar"):
            yield Static("", id="title-bar")
            yield Input(value=self.start_path, id="expression", placeholder="_.path or expression")
            yield Static("", id="suggestions")
        with ScrollableContainer(id="content-area"):
            yield Static("", id="content")
        with Vertical(id="status-bar"):
            yield Static("", id="status-line")
            yield Static("", id="footer-line")
        yield HelpOverlay(id="help-overlay", classes="hidden")

    def on_mount(self) -> None:
        self.navigate_to(self.start_path, push=False)

    @property
    def expression(self) -> Input:
        return self.query_one("#expression", Input)

    @property
    def current_view(self):
        return active_view(self.view_state)

    # ── navigation ──────────────────────────────────────────────────────────

    def navigate_to(self, text: str, push: bool = True) -> bool:
        """Resolve *text* and show the result. Returns False if it did not resolve."""
        text = text.strip() or "_"
        try:
            node = self.evaluator.evaluate(text, self.data_root)
        except KvlensError as e:
            logger.debug("Navigation to %r failed: %s", text, e)
            self.set_status(str(e), error=True)
            return False

        previous = self.view_state.mode
        if push:
            self.nav_stack.append(NavState(self.current_path, previous))
        self._stop_polling()

        self.current_path = display_form(text)
        self.current_node = node
        self.view_state = resolve_view_state(
            node,
            self.schema,
            previous,
            key_mode=self.key_mode,
            theme=self.theme_styles,
            channel=self.channel,
            flash_seconds=self.explorer_config.flash_seconds,
            done_delay=self.explorer_config.done_delay,
            spinner=self.explorer_config.spinner,
        )
        logger.debug("Showing %s as %s", self.current_path, self.view_state.mode.value)

        self.completer.reset()
        expression = self.expression
        expression.value = self.current_path
        expression.cursor_position = len(self.current_path)
        status_mode = self.view_state.mode is ViewKind.STATUS
        expression.display = not status_mode
        if status_mode:
            self.set_focus(None)
        else:
            expression.focus()

        self.status_text = ""
        self.status_is_error = False
        view = self.current_view
        if view is not None:
            self.execute(view.init())
        self.refresh_panels()
        return True

    def go_back(self) -> None:
        if self.nav_stack:
            state = self.nav_stack.pop()
            self.view_state = ViewState(mode=state.mode)
            self.navigate_to(state.path, push=False)
            return
        parent = strip_last_segment(self.current_path)
        if parent and parent != self.current_path:
            self.navigate_to(parent, push=False)

    # ── messages and commands ───────────────────────────────────────────────

    def dispatch(self, message: Any) -> None:
        """Feed *message* to the active view and run the command it returns."""
        if self._quitting:
            return
        view = self.current_view
        if view is None:
            return
        view, command = view.update(message)
        self.view_state = with_view(self.view_state, view)
        self.refresh_panels()
        self.execute(command)

    def execute(self, command) -> None:
        for cmd in flatten(command):
            if self._quitting:
                return
            if isinstance(cmd, Quit):
                self._quitting = True
                self._stop_polling()
                self.exit()
            elif isinstance(cmd, Schedule):
                self.set_timer(cmd.delay, partial(self.dispatch, cmd.message))
            elif isinstance(cmd, PollCompletion):
                self._start_polling(cmd.channel)
            elif isinstance(cmd, CopyToClipboard):
                error = copy_to_clipboard(cmd.text)
                self.dispatch(ActionResult(cmd.label, ACTION_COPY_VALUE, error))
            elif isinstance(cmd, OpenUrl):
                error = open_url(cmd.url)
                self.dispatch(ActionResult(cmd.label, ACTION_OPEN_URL, error))
            elif isinstance(cmd, Navigate):
                self.navigate_to(append_key(self.current_path, cmd.key))

    def _start_polling(self, channel: CompletionChannel) -> None:
        self._stop_polling()
        self._poll_timer = self.set_interval(self.explorer_config.poll_interval, partial(self._poll, channel))

    def _stop_polling(self) -> None:
        if self._poll_timer is not None:
            self._poll_timer.stop()
            self._poll_timer = None

    def _poll(self, channel: CompletionChannel) -> None:
        result = channel.poll()
        if result is None:
            return
        self._stop_polling()
        self.dispatch(StatusDone(message=result.message, error=result.error_text))

    # ── painting ────────────────────────────────────────────────────────────

    def set_status(self, text: str, error: bool = False) -> None:
        self.status_text = text
        self.status_is_error = error
        self.refresh_panels()

    def refresh_panels(self) -> None:
        view = self.current_view
        color = self.explorer_config.color
        area = self.query_one("#content-area")
        width = max(area.size.width - 2, 20)
        height = max(area.size.height, 5)

        if view is not None:
            title = view.title or self.current_path
            count, selected, label = view.position()
            frame = view.render(width, height, color)
            footer = view.footer
            flash, flash_error = view.flash_message()
        else:
            title = self.current_path
            label = ""
            frame = render_node_table(self.current_node, width, color, self.theme_styles)
            footer = "Tab complete  Enter go  Esc back  F1 help  Ctrl+C quit"
            flash, flash_error = "", False

        header = Text(title, style="bold")
        if label:
            header.append(f"  {label}", style="dim")
        self.query_one("#title-bar", Static).update(header)
        self.query_one("#content", Static).update(Text.from_ansi(frame) if color else Text(frame))
        self.query_one("#footer-line", Static).update(Text(footer, style="dim"))

        message = flash or self.status_text
        is_error = flash_error if flash else self.status_is_error
        style = self.theme_styles.error if is_error else self.theme_styles.status
        self.query_one("#status-line", Static).update(Text(message, style=style))

        self._refresh_suggestions()

    def _refresh_suggestions(self) -> None:
        widget = self.query_one("#suggestions", Static)
        if self.view_state.mode is ViewKind.STATUS:
            widget.update("")
            return
        suggestions = self.engine.suggest(self.expression.value, self.data_root)
        shown = suggestions[: self.explorer_config.max_suggestions]
        line = Text()
        selected = self.completer.selected
        for i, suggestion in enumerate(shown):
            if i:
                line.append(" · ", style="dim")
            style = self.theme_styles.selected if suggestion == selected else ""
            line.append(suggestion.label, style=style)
        if selected is not None and selected.is_function and selected.usage:
            line.append(f"   {selected.usage}", style="dim")
        widget.update(line)

    # ── input events ────────────────────────────────────────────────────────

    def on_input_changed(self, event: Input.Changed) -> None:
        self.completer.observe(event.value)
        view = self.current_view
        if view is not None and view.handles_search and event.value.startswith("/"):
            self.dispatch(SearchQuery(event.value[1:]))
            return
        self._refresh_suggestions()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        value = event.value.strip()
        view = self.current_view
        if view is not None and view.kind is ViewKind.LIST and (value == self.current_path or value.startswith("/")):
            self.dispatch(KeyPress("enter"))
            return
        if not is_complete_path(value):
            self.set_status(f"Incomplete expression: {value}", error=True)
            return
        self.navigate_to(value)

    def on_key(self, event: events.Key) -> None:
        key = key_name(event)
        view = self.current_view
        if view is None:
            return
        if view.kind is ViewKind.STATUS:
            event.stop()
            self.dispatch(KeyPress(key))
            return
        if key in VIEW_NAVIGATION_KEYS:
            event.stop()
            self.dispatch(KeyPress(key))

    # ── actions ─────────────────────────────────────────────────────────────

    def action_complete_next(self) -> None:
        self._complete(forward=True)

    def action_complete_previous(self) -> None:
        self._complete(forward=False)

    def _complete(self, forward: bool) -> None:
        if self.view_state.mode is ViewKind.STATUS:
            self.dispatch(KeyPress("tab" if forward else "shift+tab"))
            return
        expression = self.expression
        if forward:
            value = self.completer.tab(expression.value, self.data_root)
        else:
            value = self.completer.shift_tab(expression.value, self.data_root)
        expression.value = value
        expression.cursor_position = len(value)
        self._refresh_suggestions()

    def action_accept_or_right(self) -> None:
        if self.view_state.mode is ViewKind.STATUS:
            self.dispatch(KeyPress("right"))
            return
        expression = self.expression
        if expression.cursor_position >= len(expression.value):
            _, cursor = self.completer.accept_cursor_move(expression.value)
            expression.cursor_position = cursor
            self._refresh_suggestions()
        else:
            expression.action_cursor_right()

    def action_home_or_top(self) -> None:
        if self.current_view is not None:
            self.dispatch(KeyPress("home"))
        else:
            self.expression.action_home()

    def action_end_or_bottom(self) -> None:
        if self.current_view is not None:
            self.dispatch(KeyPress("end"))
        else:
            self.expression.action_end()

    def action_quit_app(self) -> None:
        if self.view_state.mode is ViewKind.STATUS:
            self.dispatch(KeyPress("ctrl+c"))
            return
        self._quitting = True
        self.exit()

    def action_back(self) -> None:
        if self.show_help:
            self.show_help = False
            return
        if self.view_state.mode is ViewKind.STATUS:
            self.dispatch(KeyPress("esc"))
            return
        view = self.current_view
        if view is not None and view.handles_search and self.expression.value.startswith("/"):
            self.dispatch(SearchQuery(""))
            self.expression.value = self.current_path
            return
        self.go_back()

    def action_toggle_help(self) -> None:
        self.show_help = not self.show_help

    def watch_show_help(self, show: bool) -> None:
        overlay = self.query_one("#help-overlay")
        if show:
            overlay.remove_class("hidden")
        else:
            overlay.add_class("hidden")


def run_explorer(
    root: Any,
    config: Optional[ExplorerConfig] = None,
    schema: Optional[DisplaySchema] = None,
    catalog: Optional[FunctionCatalog] = None,
    channel: Optional[CompletionChannel] = None,
    start: str = "_",
    console=None,
) -> None:
    """Launch the explorer on an interactive terminal."""
    import sys

    from rich.console import Console

    console = console or Console(stderr=True)

    if not sys.stdin.isatty():
        console.print("[red]The explorer requires an interactive terminal. Use --expr for one-shot output.[/]")
        raise SystemExit(1)

    app = ExplorerApp(root, config=config, schema=schema, catalog=catalog, channel=channel, start=start)
    try:
        app.run()
    except KeyboardInterrupt:
        console.print("\n[dim]Exited.[/]")
