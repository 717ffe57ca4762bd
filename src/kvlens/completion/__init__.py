"""Expression completion: suggestions, function catalog and Tab cycling."""

from .catalog import (
    COLLECTION_HELPERS,
    DEFAULT_FUNCTIONS,
    FunctionCatalog,
    FunctionEntry,
    UsageStyle,
    classify_usage,
    default_catalog,
)
from .engine import (
    CompletionEngine,
    CompletionState,
    Suggestion,
    SuggestionKind,
    TabCompleter,
    apply_suggestion,
)

__all__ = [
    "COLLECTION_HELPERS",
    "DEFAULT_FUNCTIONS",
    "CompletionEngine",
    "CompletionState",
    "FunctionCatalog",
    "FunctionEntry",
    "Suggestion",
    "SuggestionKind",
    "TabCompleter",
    "UsageStyle",
    "apply_suggestion",
    "classify_usage",
    "default_catalog",
]
