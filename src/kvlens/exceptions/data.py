"""Data exceptions: input documents, display schemas, path resolution."""

from pathlib import Path
from typing import Optional, Union

from .base import KvlensError


class DataLoadError(KvlensError):
    """Raised when an input document cannot be read or decoded."""

    def __init__(self, source: Union[Path, str], reason: str):
        super().__init__(
            f"Cannot load document: {source}",
            details={"source": str(source), "reason": reason},
        )
        self.source = source
        self.reason = reason


class SchemaError(KvlensError):
    """Raised when a display schema is malformed or fails validation."""

    def __init__(self, reason: str, field: Optional[str] = None):
        details = {"reason": reason}
        if field:
            details["field"] = field
        super().__init__("Invalid display schema", details=details)
        self.reason = reason
        self.field = field


class PathResolutionError(KvlensError):
    """Raised when a path does not address a node in the data tree."""

    hint = "Run `kvlens complete FILE PATH` to list the keys available there."

    def __init__(self, path: str, segment: str, reason: str):
        super().__init__(
            f"Cannot resolve path: {path}",
            details={"segment": segment, "reason": reason},
        )
        self.path = path
        self.segment = segment
        self.reason = reason


class UnsupportedExpressionError(KvlensError):
    """Raised when an evaluator is asked for something it cannot compute."""

    hint = "Resolve a plain path such as _.items[0].name instead."

    def __init__(self, expression: str):
        super().__init__(
            f"Unsupported expression: {expression}",
            details={"reason": "only plain paths can be resolved without an expression evaluator"},
        )
        self.expression = expression
