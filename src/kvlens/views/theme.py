"""Color themes for rendered frames.

A :class:`Theme` holds rich style strings. Views receive the theme they
render with instead of reading a global palette.
"""

from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class Theme:
    name: str
    key: str = "bold cyan"
    value: str = "white"
    title: str = "bold"
    subtitle: str = "bright_black"
    badge: str = "black on cyan"
    section: str = "bold underline"
    selected: str = "bold magenta"
    status: str = "cyan"
    success: str = "bold green"
    error: str = "bold red"
    label: str = "bold yellow"
    footer_key: str = "bold black on white"
    muted: str = "dim"


THEMES: Dict[str, Theme] = {
    "default": Theme(name="default"),
    "light": Theme(
        name="light",
        key="bold blue",
        value="black",
        subtitle="grey42",
        badge="white on blue",
        selected="bold blue",
        status="blue",
        success="bold dark_green",
        error="bold red3",
        label="bold dark_orange",
        footer_key="bold white on blue",
    ),
    "mono": Theme(
        name="mono",
        key="bold",
        value="",
        subtitle="dim",
        badge="reverse",
        selected="bold",
        status="",
        success="bold",
        error="bold",
        label="bold",
        footer_key="reverse",
    ),
}

DEFAULT_THEME = THEMES["default"]


def get_theme(name: str) -> Theme:
    """Theme called *name*; unknown names fall back to the default theme."""
    return THEMES.get(name, DEFAULT_THEME)
