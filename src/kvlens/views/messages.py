"""Messages delivered to views by the host event loop.

Views never block. Timers, completion polling and side effects run in the
host, which reports back by feeding one of these messages to ``update``.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class KeyPress:
    """A key, named the way the host reports it (``q``, ``ctrl+c``, ``esc``)."""

    key: str


@dataclass(frozen=True)
class SearchQuery:
    """Text typed into the search bar while the view handles search."""

    text: str


@dataclass(frozen=True)
class SpinnerTick:
    pass


@dataclass(frozen=True)
class StatusDone:
    """The external operation finished. ``error`` is set on failure."""

    message: str = ""
    error: Optional[str] = None


@dataclass(frozen=True)
class StatusTimeout:
    pass


@dataclass(frozen=True)
class DoneTimer:
    pass


@dataclass(frozen=True)
class FlashClear:
    """Clear the flash message stamped with ``generation``."""

    generation: int


@dataclass(frozen=True)
class ActionResult:
    """Outcome of a side effect (clipboard copy, URL open) run by the host."""

    label: str
    action_type: str
    error: Optional[str] = None
