"""Resolve paths against a data tree and describe the nodes found there."""

import logging
from typing import Any, Mapping, Sequence

from ..exceptions import PathResolutionError
from .paths import is_index, split_segments

logger = logging.getLogger(__name__)

# Type labels used by the completion engine and function catalog.
TYPE_MAP = "map"
TYPE_LIST = "list"
TYPE_STRING = "string"
TYPE_INT = "int"
TYPE_DOUBLE = "double"
TYPE_BOOL = "bool"
TYPE_NULL = "null"
TYPE_ANY = "any"


def type_label(node: Any) -> str:
    """Type label of a data node (``map``, ``list``, ``string``, ...)."""
    if node is None:
        return TYPE_NULL
    # bool before int: bool is an int subclass
    if isinstance(node, bool):
        return TYPE_BOOL
    if isinstance(node, int):
        return TYPE_INT
    if isinstance(node, float):
        return TYPE_DOUBLE
    if isinstance(node, str):
        return TYPE_STRING
    if isinstance(node, Mapping):
        return TYPE_MAP
    if isinstance(node, (list, tuple)):
        return TYPE_LIST
    return TYPE_ANY


def structural_kind(node: Any) -> str:
    """``map``, ``array`` or ``scalar``."""
    label = type_label(node)
    if label == TYPE_MAP:
        return "map"
    if label == TYPE_LIST:
        return "array"
    return "scalar"


def child_keys(node: Any) -> list:
    """Keys of a map node or indices of a list node; empty for scalars."""
    if isinstance(node, Mapping):
        return [str(key) for key in node.keys()]
    if isinstance(node, (list, tuple)):
        return list(range(len(node)))
    return []


def _step(node: Any, segment: str, path: str) -> Any:
    if isinstance(node, Mapping):
        if segment in node:
            return node[segment]
        raise PathResolutionError(path, segment, "key not found")
    if isinstance(node, Sequence) and not isinstance(node, str):
        if not is_index(segment):
            raise PathResolutionError(path, segment, "list index must be an integer")
        index = int(segment)
        if index >= len(node):
            raise PathResolutionError(path, segment, f"index out of range (length {len(node)})")
        return node[index]
    raise PathResolutionError(path, segment, f"cannot descend into {type_label(node)}")


def navigate(root: Any, path: str) -> Any:
    """Return the node addressed by *path* below *root*.

    Raises:
        PathResolutionError: If a key or index along the way does not exist.
    """
    node = root
    for segment in split_segments(path):
        node = _step(node, segment, path)
    return node


def try_navigate(root: Any, path: str, default: Any = None) -> Any:
    """Like :func:`navigate`, returning *default* when the path does not resolve."""
    try:
        return navigate(root, path)
    except PathResolutionError as e:
        logger.debug("Path did not resolve: %s", e)
        return default


def is_object_array(node: Any) -> bool:
    """True for a non-empty list whose items are all maps."""
    if not isinstance(node, (list, tuple)) or not node:
        return False
    return all(isinstance(item, Mapping) for item in node)
