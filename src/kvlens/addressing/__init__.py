"""Path addressing: the path micro-language and navigation over data trees."""

from .evaluator import Evaluator, PathEvaluator
from .navigator import (
    child_keys,
    is_object_array,
    navigate,
    structural_kind,
    try_navigate,
    type_label,
)
from .paths import (
    ROOT,
    append_key,
    base_for_global,
    build_child_path,
    display_form,
    is_call_expression,
    is_complete_path,
    is_valid_identifier,
    last_unquoted_dot_index,
    normalized_form,
    split_segments,
    strip_last_segment,
    wrap_global_call,
)

__all__ = [
    "ROOT",
    "append_key",
    "Evaluator",
    "PathEvaluator",
    "base_for_global",
    "build_child_path",
    "child_keys",
    "display_form",
    "is_call_expression",
    "is_complete_path",
    "is_object_array",
    "is_valid_identifier",
    "last_unquoted_dot_index",
    "navigate",
    "normalized_form",
    "split_segments",
    "strip_last_segment",
    "structural_kind",
    "try_navigate",
    "type_label",
    "wrap_global_call",
]
