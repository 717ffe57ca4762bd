"""Context-aware suggestions and Tab/Shift+Tab cycling for the expression bar."""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Tuple

from ..addressing.navigator import child_keys, navigate, try_navigate, type_label
from ..addressing.paths import (
    ROOT,
    append_key,
    base_for_global,
    normalized_form,
    partial_token,
    strip_last_segment,
    trailing_index,
    wrap_global_call,
)
from ..exceptions import KvlensError
from .catalog import FunctionCatalog, FunctionEntry, UsageStyle, default_catalog

logger = logging.getLogger(__name__)


class SuggestionKind(str, Enum):
    CHILD_KEY = "key"
    CHILD_INDEX = "index"
    GLOBAL_FUNCTION = "global"
    METHOD_FUNCTION = "method"


@dataclass(frozen=True)
class Suggestion:
    """One completion candidate.

    Attributes:
        label: Key text, index digits, or ``name()`` for functions
        kind: What accepting the suggestion inserts
        usage: Signature hint for functions
        description: Example or help text for functions
    """

    label: str
    kind: SuggestionKind
    usage: str = ""
    description: str = ""

    @property
    def is_function(self) -> bool:
        return self.kind in (SuggestionKind.GLOBAL_FUNCTION, SuggestionKind.METHOD_FUNCTION)

    @property
    def name(self) -> str:
        """Label without the trailing ``()``."""
        return self.label[:-2] if self.label.endswith("()") else self.label

    @classmethod
    def from_function(cls, entry: FunctionEntry) -> "Suggestion":
        kind = (
            SuggestionKind.METHOD_FUNCTION
            if entry.style is UsageStyle.METHOD
            else SuggestionKind.GLOBAL_FUNCTION
        )
        return cls(entry.label, kind, entry.usage, entry.description)

    def __str__(self) -> str:
        if self.is_function and self.usage:
            return f"{self.label} - {self.usage}"
        return self.label


@dataclass
class CompletionState:
    """Candidates being cycled and the cursor into them (-1 = inactive)."""

    candidates: List[Suggestion] = field(default_factory=list)
    cursor: int = -1

    @property
    def active(self) -> bool:
        return bool(self.candidates) and self.cursor >= 0

    @property
    def selected(self) -> Optional[Suggestion]:
        if not self.active:
            return None
        return self.candidates[self.cursor]

    def advance(self) -> Optional[Suggestion]:
        if not self.candidates:
            return None
        self.cursor = (self.cursor + 1) % len(self.candidates)
        return self.candidates[self.cursor]

    def retreat(self) -> Optional[Suggestion]:
        if not self.candidates:
            return None
        if self.cursor < 0:
            self.cursor = len(self.candidates) - 1
        else:
            self.cursor = (self.cursor - 1) % len(self.candidates)
        return self.candidates[self.cursor]

    def reset(self) -> None:
        self.candidates = []
        self.cursor = -1


def _anchor_text(text: str) -> str:
    # A bare root offers the root's children, same as "_."
    value = text.strip()
    if value == ROOT:
        return ROOT + "."
    return value


def _dedupe(suggestions: List[Suggestion]) -> List[Suggestion]:
    seen = set()
    out = []
    for suggestion in suggestions:
        if suggestion.label in seen:
            continue
        seen.add(suggestion.label)
        out.append(suggestion)
    return out


class CompletionEngine:
    """Produces suggestions for the text in the expression bar.

    The node being completed is the parent of the partial token: ``_.items.fi``
    completes children of ``_.items``. Map nodes offer their keys, list nodes
    their indices, and every node offers the catalog functions compatible with
    its type. Nothing here raises; unresolvable input yields fewer suggestions.
    """

    def __init__(self, catalog: Optional[FunctionCatalog] = None):
        self.catalog = catalog if catalog is not None else default_catalog()

    def focus(self, text: str, root: Any) -> Tuple[bool, Any]:
        """Resolve the node whose children are being completed.

        Returns:
            ``(resolved, node)``; *node* is None when the parent path does not
            resolve (for example after a call expression).
        """
        parent = strip_last_segment(_anchor_text(text))
        try:
            return True, navigate(root, normalized_form(parent))
        except KvlensError as e:
            logger.debug("No completion focus for %r: %s", text, e)
            return False, None

    def _children(self, node: Any) -> List[Suggestion]:
        out = []
        for key in child_keys(node):
            if isinstance(key, int):
                out.append(Suggestion(str(key), SuggestionKind.CHILD_INDEX))
            else:
                out.append(Suggestion(key, SuggestionKind.CHILD_KEY))
        return out

    def _functions(self, node_type: str) -> List[Suggestion]:
        return [Suggestion.from_function(entry) for entry in self.catalog.for_type(node_type)]

    def _matching(self, text: str, root: Any) -> Tuple[List[Suggestion], List[Suggestion]]:
        anchor = _anchor_text(text)
        token = partial_token(anchor).lower()
        resolved, node = self.focus(anchor, root)

        children = self._children(node) if resolved else []
        functions = self._functions(type_label(node) if resolved else "any")

        children = [s for s in children if s.label.lower().startswith(token)]
        functions = [s for s in functions if s.name.lower().startswith(token)]
        return children, functions

    def suggest(self, text: str, root: Any) -> List[Suggestion]:
        """Suggestions to display for *text*.

        Right after a separator (``_.items.``) functions are listed ahead of
        keys; otherwise keys come first.
        """
        try:
            children, functions = self._matching(text, root)
        except Exception:
            logger.exception("Completion failed for %r", text)
            return []
        if _anchor_text(text).endswith("."):
            return _dedupe(functions + children)
        return _dedupe(children + functions)

    def cycle_candidates(self, text: str, root: Any) -> List[Suggestion]:
        """Candidates for Tab cycling: keys first, then functions."""
        try:
            children, functions = self._matching(text, root)
        except Exception:
            logger.exception("Completion failed for %r", text)
            return []
        return _dedupe(children + functions)


def apply_suggestion(anchor: str, suggestion: Suggestion) -> str:
    """Text produced by accepting *suggestion* while typing *anchor*.

    >>> apply_suggestion("_.re", Suggestion("regions", SuggestionKind.CHILD_KEY))
    '_.regions'
    >>> apply_suggestion("_.pd1001.platform.", Suggestion("has()", SuggestionKind.GLOBAL_FUNCTION))
    'has(_.pd1001.platform)'
    """
    text = _anchor_text(anchor)
    if suggestion.kind is SuggestionKind.GLOBAL_FUNCTION:
        return wrap_global_call(suggestion.label, base_for_global(text))
    base = strip_last_segment(text) or ROOT
    if suggestion.kind is SuggestionKind.METHOD_FUNCTION:
        return f"{base}.{suggestion.name}()"
    if suggestion.kind is SuggestionKind.CHILD_INDEX:
        return append_key(base, int(suggestion.label))
    return append_key(base, suggestion.label)


class TabCompleter:
    """Stateful Tab / Shift+Tab cycling over completion candidates.

    The first Tab computes candidates for the current text (the anchor) and
    commits the first one. Further presses, while the text still equals the
    last committed value, move through the same candidates and re-commit
    against the anchor. Any other text starts a new cycle. Shift+Tab on the
    first candidate gives back the anchor, so Tab then Shift+Tab is a no-op.

    In an index context (``name[`` or ``name[n]``) Tab steps through the
    indices of the sibling array instead.
    """

    def __init__(self, engine: Optional[CompletionEngine] = None):
        self.engine = engine if engine is not None else CompletionEngine()
        self.state = CompletionState()
        self.anchor: Optional[str] = None
        self.last_value: Optional[str] = None

    @property
    def selected(self) -> Optional[Suggestion]:
        return self.state.selected

    @property
    def active(self) -> bool:
        return self.state.active

    def reset(self) -> None:
        self.state.reset()
        self.anchor = None
        self.last_value = None

    def observe(self, text: str) -> None:
        """Drop the cycle when the text changed by anything other than cycling."""
        if self.last_value is not None and text != self.last_value:
            self.reset()

    def tab(self, text: str, root: Any) -> str:
        return self._step(text, root, forward=True)

    def shift_tab(self, text: str, root: Any) -> str:
        return self._step(text, root, forward=False)

    def accept_cursor_move(self, text: str) -> Tuple[str, int]:
        """Accept the current text by moving the cursor to its end.

        The text itself is never modified.
        """
        self.reset()
        return text, len(text)

    def _cycling(self, text: str) -> bool:
        return self.state.active and self.anchor is not None and text == self.last_value

    def _step(self, text: str, root: Any, forward: bool) -> str:
        if self._cycling(text):
            if not forward and self.state.cursor == 0:
                # Backing out of the first candidate restores the typed text.
                anchor = self.anchor
                self.reset()
                return anchor
            suggestion = self.state.advance() if forward else self.state.retreat()
            return self._commit(suggestion, text)

        indexed = self._index_step(text, root, forward)
        if indexed is not None:
            self.state.reset()
            self.anchor = None
            self.last_value = indexed
            return indexed

        self.anchor = text
        self.state = CompletionState(self.engine.cycle_candidates(text, root))
        suggestion = self.state.advance() if forward else self.state.retreat()
        return self._commit(suggestion, text)

    def _commit(self, suggestion: Optional[Suggestion], text: str) -> str:
        if suggestion is None or self.anchor is None:
            self.last_value = None
            return text
        value = apply_suggestion(self.anchor, suggestion)
        self.last_value = value
        return value

    def _index_step(self, text: str, root: Any, forward: bool) -> Optional[str]:
        value = text.rstrip()
        if value.endswith("[") and value.count('"') % 2 == 0:
            parent = value[:-1]
            if not forward:
                node = try_navigate(root, normalized_form(parent))
                if isinstance(node, list) and node:
                    return f"{parent}[{len(node) - 1}]"
            return f"{parent}[0]"

        split = trailing_index(value)
        if split is None:
            return None
        parent, index = split
        node = try_navigate(root, normalized_form(parent))
        if not isinstance(node, list) or not node:
            return None
        step = 1 if forward else -1
        return f"{parent}[{(index + step) % len(node)}]"
