"""Custom views: list, detail and status renderers for the data panel."""

from .base import CustomView, ViewKind
from .channel import CompletionChannel, StatusResult
from .commands import (
    Batch,
    Command,
    CopyToClipboard,
    Navigate,
    OpenUrl,
    PollCompletion,
    Quit,
    Schedule,
    batch,
    flatten,
)
from .detail_view import DetailView
from .keymodes import Action, KeyMode, parse_key_mode, resolve_action
from .list_view import ListView
from .messages import (
    ActionResult,
    DoneTimer,
    FlashClear,
    KeyPress,
    SearchQuery,
    SpinnerTick,
    StatusDone,
    StatusTimeout,
)
from .resolver import ViewState, active_view, resolve_view_state, with_view
from .schema import DisplaySchema, load_display_schema, parse_display_schema
from .status import StatusPhase, StatusView
from .theme import THEMES, Theme, get_theme

__all__ = [
    "Action",
    "ActionResult",
    "Batch",
    "Command",
    "CompletionChannel",
    "CopyToClipboard",
    "CustomView",
    "DetailView",
    "DisplaySchema",
    "DoneTimer",
    "FlashClear",
    "KeyMode",
    "KeyPress",
    "ListView",
    "Navigate",
    "OpenUrl",
    "PollCompletion",
    "Quit",
    "Schedule",
    "SearchQuery",
    "SpinnerTick",
    "StatusDone",
    "StatusPhase",
    "StatusResult",
    "StatusTimeout",
    "StatusView",
    "THEMES",
    "Theme",
    "ViewKind",
    "ViewState",
    "active_view",
    "batch",
    "flatten",
    "get_theme",
    "load_display_schema",
    "parse_display_schema",
    "parse_key_mode",
    "resolve_action",
    "resolve_view_state",
    "with_view",
]
