"""kvlens - explore nested structured data from the terminal."""

__version__ = "0.1.0"

from .addressing import (
    build_child_path,
    display_form,
    is_complete_path,
    navigate,
    normalized_form,
    split_segments,
)
from .completion import CompletionEngine, FunctionCatalog, TabCompleter
from .config import ExplorerConfig, load_config
from .exceptions import KvlensError

__all__ = [
    "__version__",
    "build_child_path",
    "display_form",
    "is_complete_path",
    "navigate",
    "normalized_form",
    "split_segments",
    "CompletionEngine",
    "FunctionCatalog",
    "TabCompleter",
    "ExplorerConfig",
    "load_config",
    "KvlensError",
]
