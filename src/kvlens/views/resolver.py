"""Which custom view, if any, renders the current node."""

from dataclasses import dataclass, replace
from typing import Any, Dict, Mapping, Optional

from ..addressing.navigator import is_object_array
from .base import CustomView, ViewKind
from .channel import CompletionChannel
from .detail_view import DetailView
from .keymodes import KeyMode
from .list_view import ListView
from .schema import DisplaySchema
from .status import DEFAULT_DONE_DELAY, DEFAULT_FLASH_SECONDS, StatusView
from .theme import DEFAULT_THEME, Theme


@dataclass
class ViewState:
    """Tagged variant: ``mode`` names the slot that holds the active view."""

    mode: ViewKind = ViewKind.NONE
    list_view: Optional[ListView] = None
    detail_view: Optional[DetailView] = None
    status_view: Optional[StatusView] = None


_SLOTS: Dict[ViewKind, str] = {
    ViewKind.LIST: "list_view",
    ViewKind.DETAIL: "detail_view",
    ViewKind.STATUS: "status_view",
}


def active_view(state: Optional[ViewState]) -> Optional[CustomView]:
    """The view for ``state.mode``; None when the mode has no view attached."""
    if state is None:
        return None
    slot = _SLOTS.get(state.mode)
    if slot is None:
        return None
    return getattr(state, slot)


def with_view(state: ViewState, view: CustomView) -> ViewState:
    """Copy of *state* with *view* stored in its slot and made active."""
    slot = _SLOTS.get(view.kind)
    if slot is None:
        return state
    return replace(state, mode=view.kind, **{slot: view})


def resolve_view_state(
    node: Any,
    schema: Optional[DisplaySchema],
    previous_mode: ViewKind = ViewKind.NONE,
    key_mode: KeyMode = KeyMode.VIM,
    theme: Theme = DEFAULT_THEME,
    channel: Optional[CompletionChannel] = None,
    flash_seconds: float = DEFAULT_FLASH_SECONDS,
    done_delay: float = DEFAULT_DONE_DELAY,
    spinner: str = "dots",
) -> ViewState:
    """Pick the view for *node*.

    A status section with a title field always wins. Objects reached from a
    list or detail view get the detail view; homogeneous arrays of objects get
    the list view. Everything else uses the plain table (``ViewKind.NONE``).
    """
    if schema is None:
        return ViewState()

    if schema.status is not None and schema.status.title_field:
        view = StatusView(
            schema.status,
            node,
            key_mode=key_mode,
            theme=theme,
            channel=channel,
            flash_seconds=flash_seconds,
            done_delay=done_delay,
            spinner=spinner,
        )
        return ViewState(mode=ViewKind.STATUS, status_view=view)

    if (
        previous_mode in (ViewKind.LIST, ViewKind.DETAIL)
        and isinstance(node, Mapping)
        and schema.detail is not None
    ):
        view = DetailView(node, schema.detail, key_mode=key_mode, theme=theme)
        return ViewState(mode=ViewKind.DETAIL, detail_view=view)

    if schema.list is not None and schema.list.title_field and is_object_array(node):
        view = ListView(node, schema.list, heading=schema.heading, key_mode=key_mode, theme=theme)
        return ViewState(mode=ViewKind.LIST, list_view=view)

    return ViewState()
