"""Key binding schemes and the logical actions they map to."""

from enum import Enum
from typing import Dict

from ..exceptions import InvalidConfigError


class KeyMode(str, Enum):
    VIM = "vim"
    EMACS = "emacs"
    FUNCTION = "function"


class Action(str, Enum):
    NONE = "none"
    UP = "up"
    DOWN = "down"
    BACK = "back"
    FORWARD = "forward"
    ENTER = "enter"
    QUIT = "quit"
    HELP = "help"
    TOP = "top"
    BOTTOM = "bottom"
    SEARCH = "search"


# Keys that mean the same thing in every mode.
UNIVERSAL_KEYS: Dict[str, Action] = {
    "up": Action.UP,
    "down": Action.DOWN,
    "left": Action.BACK,
    "right": Action.FORWARD,
    "enter": Action.ENTER,
    "home": Action.TOP,
    "end": Action.BOTTOM,
    "ctrl+c": Action.QUIT,
    "f1": Action.HELP,
}

MODE_KEYS: Dict[KeyMode, Dict[str, Action]] = {
    KeyMode.VIM: {
        "j": Action.DOWN,
        "k": Action.UP,
        "h": Action.BACK,
        "l": Action.FORWARD,
        "/": Action.SEARCH,
        "g": Action.TOP,
        "G": Action.BOTTOM,
        "?": Action.HELP,
        "q": Action.QUIT,
    },
    KeyMode.EMACS: {
        "ctrl+n": Action.DOWN,
        "ctrl+p": Action.UP,
        "ctrl+b": Action.BACK,
        "ctrl+f": Action.FORWARD,
        "ctrl+s": Action.SEARCH,
        "alt+<": Action.TOP,
        "alt+>": Action.BOTTOM,
        "ctrl+q": Action.QUIT,
    },
    KeyMode.FUNCTION: {
        "f3": Action.SEARCH,
        "f10": Action.QUIT,
    },
}

QUIT_KEYS: Dict[KeyMode, str] = {
    KeyMode.VIM: "q",
    KeyMode.EMACS: "ctrl+q",
    KeyMode.FUNCTION: "f10",
}


def parse_key_mode(value) -> KeyMode:
    """Parse a key mode name, accepting :class:`KeyMode` values unchanged."""
    if isinstance(value, KeyMode):
        return value
    try:
        return KeyMode(str(value).strip().lower())
    except ValueError:
        raise InvalidConfigError("key_mode", value, "expected vim, emacs or function")


def resolve_action(key: str, mode: KeyMode) -> Action:
    """Logical action bound to *key* in *mode* (``Action.NONE`` if unbound)."""
    action = MODE_KEYS[mode].get(key)
    if action is not None:
        return action
    return UNIVERSAL_KEYS.get(key, Action.NONE)


def quit_key(mode: KeyMode) -> str:
    return QUIT_KEYS[mode]


def format_key(key: str, mode: KeyMode) -> str:
    """Label for *key* as shown in footers (``C-q``, ``F10``, ``q``)."""
    if not key:
        return ""
    if mode is KeyMode.EMACS:
        return key.replace("ctrl+", "C-").replace("alt+", "M-")
    if mode is KeyMode.FUNCTION:
        return key.upper()
    return key


def quit_key_label(mode: KeyMode) -> str:
    return format_key(quit_key(mode), mode)
