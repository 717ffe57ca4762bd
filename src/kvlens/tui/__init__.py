"""Interactive terminal explorer built on textual."""

from .app import ExplorerApp, run_explorer

__all__ = ["ExplorerApp", "run_explorer"]
