"""Duration strings such as ``"2s"``, ``"500ms"`` or ``"1m30s"``."""

import re

_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


def parse_duration(text: str) -> float:
    """Parse a duration string into seconds.

    Accepts a sequence of decimal numbers, each with a unit suffix
    (``ns``, ``us``, ``ms``, ``s``, ``m``, ``h``), and a bare ``0``.

    >>> parse_duration("1m30s")
    90.0

    Raises:
        ValueError: If the text is not a valid duration.
    """
    value = text.strip()
    if not value:
        raise ValueError("empty duration")

    sign = 1.0
    if value[0] in "+-":
        sign = -1.0 if value[0] == "-" else 1.0
        value = value[1:]

    if value == "0":
        return 0.0
    if not value:
        raise ValueError(f"invalid duration '{text}'")

    total = 0.0
    pos = 0
    while pos < len(value):
        match = _PART.match(value, pos)
        if match is None:
            raise ValueError(f"invalid duration '{text}'")
        total += float(match.group(1)) * _UNITS[match.group(2)]
        pos = match.end()

    return sign * total
