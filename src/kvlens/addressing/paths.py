"""Path micro-language: parsing, display and normalization.

A path starts at the root marker ``_`` and continues with ``.identifier``,
``["quoted key"]`` or ``[N]`` segments::

    _.regions.asia
    _.tasks["build-windows"]
    _.items[0].name

Text inside quotes is opaque: dots and brackets there are not separators, and
backslash escapes are honoured. Every function in this module is total. Bad
input produces a best-effort result rather than an exception.
"""

import re
from typing import List, Union

ROOT = "_"

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_INDEX = re.compile(r"\d+")
_TRAILING_INDEX = re.compile(r"\[\s*(\d+)\s*\]\s*$")
_QUOTES = "\"'"


def is_valid_identifier(text: str) -> bool:
    """Return True if *text* can be written as a dot segment."""
    return _IDENTIFIER.fullmatch(text) is not None


def is_index(text: str) -> bool:
    return _INDEX.fullmatch(text) is not None


def quote_key(key: str) -> str:
    """Render *key* as a quoted bracket segment: ``["key"]``."""
    escaped = key.replace("\\", "\\\\").replace('"', '\\"')
    return f'["{escaped}"]'


def render_segment(segment: str) -> str:
    """Render one raw segment in its canonical written form."""
    if is_index(segment):
        return f"[{segment}]"
    if is_valid_identifier(segment):
        return f".{segment}"
    return quote_key(segment)


def _read_quoted(text: str, start: int) -> tuple:
    """Read a quoted string whose opening quote is at *start*.

    Returns ``(value, end)`` where *end* is the index just past the closing
    quote, or ``(value, -1)`` if the quote is never closed.
    """
    quote = text[start]
    chars = []
    i = start + 1
    while i < len(text):
        ch = text[i]
        if ch == "\\" and i + 1 < len(text):
            chars.append(text[i + 1])
            i += 2
            continue
        if ch == quote:
            return "".join(chars), i + 1
        chars.append(ch)
        i += 1
    return "".join(chars), -1


def _skip_quoted(text: str, start: int) -> int:
    """Index just past the quoted string starting at *start* (len if open)."""
    _, end = _read_quoted(text, start)
    return len(text) if end < 0 else end


def _strip_root(text: str) -> str:
    if text == ROOT:
        return ""
    if text.startswith(ROOT + "."):
        return text[2:]
    if text.startswith(ROOT + "["):
        return text[1:]
    if text.startswith("."):
        return text[1:]
    return text


def split_segments(path: str) -> List[str]:
    """Split a path into raw segments.

    Keys come back unquoted and indices as decimal strings. The root marker is
    dropped, so the root (or empty text) yields an empty list.

    >>> split_segments('_.tasks["build-windows"].steps[2]')
    ['tasks', 'build-windows', 'steps', '2']
    """
    text = _strip_root(path.strip())
    segments: List[str] = []
    current: List[str] = []

    def flush() -> None:
        if current:
            segments.append("".join(current))
            current.clear()

    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == ".":
            flush()
            i += 1
        elif ch == "[":
            flush()
            j = i + 1
            while j < n and text[j].isspace():
                j += 1
            if j < n and text[j] in _QUOTES:
                value, end = _read_quoted(text, j)
                segments.append(value)
                if end < 0:
                    break
                close = text.find("]", end)
                i = n if close < 0 else close + 1
            else:
                close = text.find("]", j)
                if close < 0:
                    inner = text[j:].strip()
                    if inner:
                        segments.append(inner)
                    break
                segments.append(text[j:close].strip())
                i = close + 1
        elif ch in _QUOTES:
            end = _skip_quoted(text, i)
            current.append(text[i:end])
            i = end
        else:
            current.append(ch)
            i += 1
    flush()
    return segments


def join_segments(segments: List[str]) -> str:
    """Join raw segments into a rooted path (``_`` for no segments)."""
    return ROOT + "".join(render_segment(s) for s in segments)


def is_call_expression(text: str) -> bool:
    """Return True if *text* contains a call (parentheses outside quotes)."""
    opened = closed = False
    i = 0
    while i < len(text):
        ch = text[i]
        if ch in _QUOTES:
            i = _skip_quoted(text, i)
            continue
        if ch == "(":
            opened = True
        elif ch == ")":
            closed = True
        i += 1
    return opened and closed


def is_literal(text: str) -> bool:
    """Return True for quoted strings, list literals and map literals."""
    return bool(text) and text[0] in '"[{'


def display_form(raw: str) -> str:
    """Canonical user-facing form of a path.

    >>> display_form("regions.asia")
    '_.regions.asia'
    >>> display_form("tasks.build-windows")
    '_.tasks["build-windows"]'
    """
    text = raw.strip()
    if not text or text == ROOT:
        return ROOT
    if is_literal(text) or is_call_expression(text):
        return text
    return join_segments(split_segments(text))


def normalized_form(raw: str) -> str:
    """Internal navigation form of a path.

    Every segment is rewritten to its canonical form and the root becomes the
    empty string. Call expressions pass through untouched.

    >>> normalized_form("items.0")
    '_.items[0]'
    >>> normalized_form("_")
    ''
    """
    text = raw.strip()
    if not text or text == ROOT:
        return ""
    if is_call_expression(text):
        return text
    segments = split_segments(text)
    if not segments:
        return ""
    return join_segments(segments)


def build_child_path(base_path: str, key: Union[str, int]) -> str:
    """Append *key* to *base_path* as a new segment.

    Integers and ``[N]`` keys become index segments, ``["..."]`` keys are kept
    quoted, and anything that is not an identifier is quoted.

    >>> build_child_path("_.tasks", "build-windows")
    '_.tasks["build-windows"]'
    >>> build_child_path("", 3)
    '_[3]'
    """
    if isinstance(key, int):
        segment = f"[{key}]"
    else:
        name = str(key)
        if name.startswith("[") and name.endswith("]") and len(name) >= 2:
            inner = name[1:-1].strip()
            if inner and inner[0] in _QUOTES:
                value, _ = _read_quoted(inner, 0)
                segment = quote_key(value)
            elif is_index(inner):
                segment = f"[{inner}]"
            else:
                segment = quote_key(inner)
        elif is_valid_identifier(name):
            segment = f".{name}"
        else:
            segment = quote_key(name)

    return _join_child(base_path, segment)


def append_key(base_path: str, key: Union[str, int]) -> str:
    """Append the data key *key* to *base_path*.

    Unlike :func:`build_child_path` the key is taken literally, so a key
    named ``[a]`` stays ``["[a]"]`` instead of being read as bracket syntax.
    """
    segment = f"[{key}]" if isinstance(key, int) else render_segment(str(key))
    return _join_child(base_path, segment)


def _join_child(base_path: str, segment: str) -> str:
    base = base_path.strip()
    if base.endswith("."):
        base = base[:-1]
    if not base:
        base = ROOT
    return base + segment


def last_unquoted_dot_index(text: str) -> int:
    """Index of the last ``.`` outside quotes, brackets and call arguments.

    Returns -1 when there is no such separator.
    """
    last = -1
    depth = 0
    i = 0
    while i < len(text):
        ch = text[i]
        if ch in _QUOTES:
            i = _skip_quoted(text, i)
            continue
        if ch in "[(":
            depth += 1
        elif ch in "])":
            depth = max(0, depth - 1)
        elif ch == "." and depth == 0:
            last = i
        i += 1
    return last


def _last_unquoted_open_bracket(text: str) -> int:
    last = -1
    i = 0
    while i < len(text):
        ch = text[i]
        if ch in _QUOTES:
            i = _skip_quoted(text, i)
            continue
        if ch == "[":
            last = i
        i += 1
    return last


def _has_open_quote(text: str) -> bool:
    i = 0
    while i < len(text):
        if text[i] in _QUOTES:
            _, end = _read_quoted(text, i)
            if end < 0:
                return True
            i = end
            continue
        i += 1
    return False


def _open_depths(text: str) -> tuple:
    brackets = parens = 0
    i = 0
    while i < len(text):
        ch = text[i]
        if ch in _QUOTES:
            i = _skip_quoted(text, i)
            continue
        if ch == "[":
            brackets += 1
        elif ch == "]":
            brackets -= 1
        elif ch == "(":
            parens += 1
        elif ch == ")":
            parens -= 1
        i += 1
    return brackets, parens


def strip_last_segment(text: str) -> str:
    """Drop the final segment, returning the parent path.

    A trailing separator (``.`` or ``[``) counts as an empty pending segment.
    Text without any separator has no parent and yields ``""``.

    >>> strip_last_segment("_.regions.asia")
    '_.regions'
    >>> strip_last_segment('_.tasks["a.b"]')
    '_.tasks'
    """
    value = text.rstrip()
    if value.endswith(".") or value.endswith("["):
        return value[:-1]

    dot = last_unquoted_dot_index(value)
    if value.endswith("]"):
        bracket = _last_unquoted_open_bracket(value)
        if bracket > dot:
            return value[:bracket]
    if dot >= 0:
        return value[:dot]
    return ""


def is_complete_path(text: str) -> bool:
    """Return True if *text* can be submitted as-is.

    Complete: the bare root, a closed bracket, a closed call, or a final
    identifier or index segment. Incomplete: empty text, a trailing ``.``,
    an open ``[``, an unterminated quote, or a partial token that cannot be
    an identifier.
    """
    value = text.strip()
    if not value:
        return False
    if value == ROOT:
        return True
    if value.endswith(".") or value.endswith("["):
        return False
    if _has_open_quote(value):
        return False
    brackets, parens = _open_depths(value)
    if brackets != 0 or parens != 0:
        return False
    if value.endswith("]") or value.endswith(")"):
        return True
    if value[-1] in _QUOTES:
        # Closed string literal.
        return True

    last = value[last_unquoted_dot_index(value) + 1:]
    return is_valid_identifier(last) or is_index(last)


def _rooted_expression(text: str) -> str:
    if text == ROOT or text.startswith((ROOT + ".", ROOT + "[")):
        return text
    if is_literal(text) or is_call_expression(text):
        return text
    return f"{ROOT}.{text}"


def base_for_global(text: str) -> str:
    """Expression a global-style function call should wrap.

    The partial token after the last separator is dropped; a trailing
    separator is dropped on its own. The result is always rooted.

    >>> base_for_global("_.pd1001.platform.")
    '_.pd1001.platform'
    >>> base_for_global("_.pd1001.platform.h")
    '_.pd1001.platform'
    >>> base_for_global("items")
    '_.items'
    """
    value = text.strip()
    if value.endswith("["):
        value = value[:-1]
    if value.endswith("."):
        value = value[:-1]
    else:
        dot = last_unquoted_dot_index(value)
        if dot >= 0:
            value = value[:dot]
    if not value:
        return ROOT
    return _rooted_expression(value)


def wrap_global_call(name: str, base: str) -> str:
    """Wrap *base* in a call to the function *name*.

    >>> wrap_global_call("has()", "_.pd1001.platform")
    'has(_.pd1001.platform)'
    """
    fn = name.strip()
    if fn.endswith("()"):
        fn = fn[:-2]
    elif fn.endswith("("):
        fn = fn[:-1]
    return f"{fn}({base})"


def partial_token(text: str) -> str:
    """The token being typed after the last separator ("" after a separator)."""
    value = text.rstrip()
    if not value or value == ROOT:
        return ""
    if value.endswith(".") or value.endswith("["):
        return ""
    token = value[last_unquoted_dot_index(value) + 1:]
    if "[" in token or "]" in token:
        return ""
    if token.endswith("()"):
        token = token[:-2]
    elif token.endswith("("):
        token = token[:-1]
    return token


def trailing_index(text: str):
    """Split ``parent[N]`` into ``(parent, N)``; None when there is no index."""
    match = _TRAILING_INDEX.search(text)
    if match is None:
        return None
    return text[:match.start()], int(match.group(1))
