"""Function catalog for expression completion.

Entries use the one-line form ``name() - usage | example``::

    filter() - list.filter(x, expr) -> list | _.items.filter(x, x.active)
    has() - has(field) -> bool

The usage text decides the insertion style. ``receiver.fn(...)`` is a method
and is appended to the current path; ``fn(...)`` is global and wraps it.
"""

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Union

from ..exceptions import DataLoadError

logger = logging.getLogger(__name__)

# Offered for every map/list node regardless of the declared receiver type.
COLLECTION_HELPERS = frozenset({"map", "filter", "all", "exists", "size", "has"})

UNIVERSAL_TYPES = frozenset({"any", "dyn"})

KNOWN_TYPES = frozenset(
    {
        "map",
        "list",
        "string",
        "bytes",
        "bool",
        "int",
        "uint",
        "double",
        "null",
        "timestamp",
        "duration",
        "any",
        "dyn",
    }
)


class UsageStyle(str, Enum):
    """How a function is inserted into the expression bar."""

    GLOBAL = "global"
    METHOD = "method"


def classify_usage(usage: str, name: str = "") -> UsageStyle:
    """Classify a usage hint as method style or global style.

    A dot before the first ``(`` means ``receiver.fn(...)``, unless the dotted
    prefix is part of the function name itself (``regex.extract(...)``). Any
    other hint is global.
    """
    text = usage.strip()
    qualified = name.strip()
    if qualified.endswith("()"):
        qualified = qualified[:-2]
    if "." in qualified and text.startswith(qualified + "("):
        # Namespaced global such as regex.extract(...)
        return UsageStyle.GLOBAL
    paren = text.find("(")
    if paren >= 0:
        dot = text.find(".")
        if 0 <= dot < paren:
            return UsageStyle.METHOD
        return UsageStyle.GLOBAL
    return UsageStyle.GLOBAL


def _normalize_name(name: str) -> str:
    value = name.strip()
    if value.endswith("()"):
        value = value[:-2]
    return value.lower()


@dataclass(frozen=True)
class FunctionEntry:
    """A function offered by the completion engine.

    Attributes:
        name: Function name as inserted, without parentheses (``filter``,
            ``regex.extract``)
        usage: Signature hint (``list.filter(x, expr) -> list``)
        description: Free-form help, usually an example
    """

    name: str
    usage: str = ""
    description: str = ""

    @classmethod
    def parse(cls, text: str) -> "FunctionEntry":
        """Parse ``name() - usage | example``."""
        head, sep, rest = text.partition(" - ")
        name = head.strip()
        if name.endswith("()"):
            name = name[:-2]
        usage, _, description = rest.partition(" | ") if sep else ("", "", "")
        return cls(name=name, usage=usage.strip(), description=description.strip())

    @property
    def key(self) -> str:
        """Normalized name used for deduplication."""
        return _normalize_name(self.name)

    @property
    def label(self) -> str:
        return f"{self.name}()"

    @property
    def style(self) -> UsageStyle:
        return classify_usage(self.usage, self.name)

    @property
    def receiver(self) -> Optional[str]:
        """Receiver type of a method-style usage (``list`` in ``list.filter(...)``)."""
        text = self.usage.strip()
        paren = text.find("(")
        dot = text.find(".")
        if paren < 0 or dot < 0 or dot > paren:
            return None
        return text[:dot].strip().lower()

    @property
    def first_param(self) -> Optional[str]:
        """First parameter type of a global-style usage (``list`` in ``size(list)``)."""
        text = self.usage.strip()
        paren = text.find("(")
        if paren < 0:
            return None
        close = text.find(")", paren)
        params = text[paren + 1:close] if close >= 0 else text[paren + 1:]
        first = params.split(",")[0].strip().lower()
        return first or None

    def applies_to(self, node_type: str) -> bool:
        """Whether this function makes sense on a node of *node_type*."""
        if node_type in UNIVERSAL_TYPES:
            return True
        base = self.key.rsplit(".", 1)[-1]
        if base in COLLECTION_HELPERS and node_type in ("map", "list"):
            return True

        if self.style is UsageStyle.METHOD:
            declared = self.receiver
        else:
            declared = self.first_param
        if declared is None or declared not in KNOWN_TYPES:
            # Namespaces (``base64.decode``) and named params (``has(field)``)
            # carry no type information.
            return True
        if declared in UNIVERSAL_TYPES:
            return True
        return declared == node_type

    def __str__(self) -> str:
        text = self.label
        if self.usage:
            text += f" - {self.usage}"
        if self.description:
            text += f" | {self.description}"
        return text


EntryLike = Union[FunctionEntry, str]


class FunctionCatalog:
    """Ordered collection of :class:`FunctionEntry`, unique by normalized name.

    When the same name appears twice the later entry wins only if the earlier
    one carried no usage hint.
    """

    def __init__(self, entries: Iterable[EntryLike] = ()):
        self._entries: Dict[str, FunctionEntry] = {}
        for entry in entries:
            self.add(entry)

    def add(self, entry: EntryLike) -> FunctionEntry:
        if isinstance(entry, str):
            entry = FunctionEntry.parse(entry)
        existing = self._entries.get(entry.key)
        if existing is None or (not existing.usage and entry.usage):
            self._entries[entry.key] = entry
            return entry
        return existing

    def get(self, name: str) -> Optional[FunctionEntry]:
        return self._entries.get(_normalize_name(name))

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and _normalize_name(name) in self._entries

    def __iter__(self) -> Iterator[FunctionEntry]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def for_type(self, node_type: str) -> List[FunctionEntry]:
        """Entries compatible with a node of *node_type*, in catalog order."""
        return [entry for entry in self._entries.values() if entry.applies_to(node_type)]

    def extend(self, entries: Iterable[EntryLike]) -> "FunctionCatalog":
        for entry in entries:
            self.add(entry)
        return self

    @classmethod
    def from_file(cls, path: Path) -> "FunctionCatalog":
        """Load a catalog from a JSON file.

        The file holds a list whose items are either one-line entry strings or
        objects with ``name``, ``usage`` and ``description`` keys.

        Raises:
            DataLoadError: If the file cannot be read or has the wrong shape
        """
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise DataLoadError(path, str(e))
        if not isinstance(data, list):
            raise DataLoadError(path, "expected a JSON list of functions")

        catalog = cls()
        for item in data:
            if isinstance(item, str):
                catalog.add(item)
            elif isinstance(item, dict) and item.get("name"):
                name = str(item["name"])
                if name.endswith("()"):
                    name = name[:-2]
                catalog.add(
                    FunctionEntry(
                        name=name,
                        usage=str(item.get("usage", "")),
                        description=str(item.get("description", "")),
                    )
                )
            else:
                logger.warning("Skipping malformed function entry in %s: %r", path, item)
        return catalog


DEFAULT_FUNCTIONS = (
    "all() - list.all(x, predicate) -> bool | _.items.all(x, x.active)",
    "exists() - list.exists(x, predicate) -> bool | _.items.exists(x, x.id == 1)",
    "exists_one() - list.exists_one(x, predicate) -> bool",
    "filter() - list.filter(x, predicate) -> list | _.items.filter(x, x.active)",
    "map() - list.map(x, expr) -> list | _.items.map(x, x.name)",
    "has() - has(field) -> bool | has(_.metadata)",
    "size() - size(any) -> int | size(_.items)",
    "type() - type(any) -> type",
    "int() - int(any) -> int",
    "double() - double(any) -> double",
    "string() - string(any) -> string",
    "contains() - string.contains(string) -> bool | _.name.contains(\"prod\")",
    "startsWith() - string.startsWith(string) -> bool",
    "endsWith() - string.endsWith(string) -> bool",
    "matches() - string.matches(string) -> bool",
    "lowerAscii() - string.lowerAscii() -> string",
    "upperAscii() - string.upperAscii() -> string",
    "trim() - string.trim() -> string",
    "split() - string.split(string) -> list",
    "replace() - string.replace(string, string) -> string",
    "join() - list.join(string) -> string",
    "flatten() - list.flatten() -> list",
    "sort() - list.sort() -> list",
    "distinct() - list.distinct() -> list",
    "keys() - map.keys() -> list",
    "values() - map.values() -> list",
    "regex.extract() - regex.extract(string, string) -> string",
)


def default_catalog() -> FunctionCatalog:
    """Catalog of the built-in functions offered when no catalog file is set."""
    return FunctionCatalog(DEFAULT_FUNCTIONS)
