"""Expression evaluation boundary.

Complete expressions typed in the expression bar are handed to an
:class:`Evaluator`. kvlens ships :class:`PathEvaluator`, which resolves plain
paths only; richer expression languages plug in by implementing the protocol.
"""

from typing import Any, Protocol, runtime_checkable

from ..exceptions import UnsupportedExpressionError
from .navigator import navigate
from .paths import is_call_expression, is_literal, normalized_form


@runtime_checkable
class Evaluator(Protocol):
    """Evaluates a complete expression against the root document."""

    def evaluate(self, expression: str, root: Any) -> Any:
        ...


class PathEvaluator:
    """Evaluator that only understands navigation paths."""

    def evaluate(self, expression: str, root: Any) -> Any:
        text = expression.strip()
        if is_call_expression(text) or (is_literal(text) and not text.startswith("[")):
            raise UnsupportedExpressionError(text)
        return navigate(root, normalized_form(text))
