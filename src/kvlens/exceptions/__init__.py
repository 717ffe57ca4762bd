"""Exception hierarchy for kvlens."""

from .base import KvlensError
from .config import ConfigFileError, ConfigurationError, InvalidConfigError
from .data import (
    DataLoadError,
    PathResolutionError,
    SchemaError,
    UnsupportedExpressionError,
)

__all__ = [
    "KvlensError",
    "ConfigurationError",
    "ConfigFileError",
    "InvalidConfigError",
    "DataLoadError",
    "SchemaError",
    "PathResolutionError",
    "UnsupportedExpressionError",
]
