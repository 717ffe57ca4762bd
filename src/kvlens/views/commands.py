"""Commands returned by views for the host to execute."""

from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

from .channel import CompletionChannel


@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class Schedule:
    """Deliver ``message`` back to the view after ``delay`` seconds."""

    delay: float
    message: Any


@dataclass(frozen=True)
class PollCompletion:
    """Poll ``channel`` until it yields a result, then deliver ``StatusDone``."""

    channel: CompletionChannel


@dataclass(frozen=True)
class CopyToClipboard:
    text: str
    label: str = ""


@dataclass(frozen=True)
class OpenUrl:
    url: str
    label: str = ""


@dataclass(frozen=True)
class Navigate:
    """Move the explorer to a child of the current node."""

    key: Union[str, int]


@dataclass(frozen=True)
class Batch:
    commands: Tuple["Command", ...]


Command = Union[Quit, Schedule, PollCompletion, CopyToClipboard, OpenUrl, Navigate, Batch]


def batch(*commands: Optional[Command]) -> Optional[Command]:
    """Combine commands, dropping ``None``. Returns None when nothing is left."""
    flat = []
    for command in commands:
        if command is None:
            continue
        if isinstance(command, Batch):
            flat.extend(command.commands)
        else:
            flat.append(command)
    if not flat:
        return None
    if len(flat) == 1:
        return flat[0]
    return Batch(tuple(flat))


def flatten(command: Optional[Command]) -> Tuple[Command, ...]:
    """All leaf commands inside *command*, in order."""
    if command is None:
        return ()
    if isinstance(command, Batch):
        out: Tuple[Command, ...] = ()
        for inner in command.commands:
            out += flatten(inner)
        return out
    return (command,)
