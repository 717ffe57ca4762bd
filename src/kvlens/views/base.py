"""The contract every custom view implements."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Optional, Tuple

from .commands import Command


class ViewKind(str, Enum):
    NONE = "none"
    LIST = "list"
    DETAIL = "detail"
    STATUS = "status"


class CustomView(ABC):
    """A renderer for the data panel that can also react to messages.

    Views are driven by the host: it calls :meth:`init` once, feeds messages to
    :meth:`update` and executes the returned command, and asks for a frame with
    :meth:`render`. Views never block and never touch the terminal.
    """

    kind: ViewKind = ViewKind.NONE

    @property
    @abstractmethod
    def title(self) -> str:
        """Panel title."""

    @property
    def footer(self) -> str:
        """Key hints shown under the panel."""
        return ""

    @property
    def handles_search(self) -> bool:
        return False

    @property
    def search_title(self) -> str:
        return ""

    def init(self) -> Optional[Command]:
        """Command to run when the view is first shown."""
        return None

    def flash_message(self) -> Tuple[str, bool]:
        """Transient message and whether it is an error."""
        return "", False

    @abstractmethod
    def render(self, width: int, height: int, color: bool = True) -> str:
        """Frame text for a panel of *width* x *height* cells."""

    @abstractmethod
    def position(self) -> Tuple[int, int, str]:
        """``(count, selected, label)`` for the position indicator."""

    def update(self, message: Any) -> Tuple["CustomView", Optional[Command]]:
        return self, None
