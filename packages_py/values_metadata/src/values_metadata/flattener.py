"""
Value tree flattener.

Parses a values file and produces one Parameter per addressable leaf, carrying
the actual value and its coarse type. Arrays whose elements are all strings
are documented as a single parameter holding the whole list.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from .domain import NIL_PLACEHOLDER, TYPE_ARRAY, Parameter, type_of
from .yaml_loader import parse_yaml, read_text

logger = logging.getLogger(__name__)


# (leaf, (innermost list holding the leaf, path of that list) or None)
_Leaf = Tuple[Any, Optional[Tuple[list, str]]]


def _key_text(key: Any) -> str:
    # Mapping keys are addressed the way a JavaScript YAML parser prints them
    if isinstance(key, bool):
        return "true" if key else "false"
    if key is None:
        return "null"
    return str(key)


def _walk(
    tree: Any,
    prefix: str,
    parent: Optional[Tuple[list, str]],
    result: Dict[str, _Leaf],
) -> Dict[str, _Leaf]:
    if isinstance(tree, dict) and tree:
        for key, value in tree.items():
            text = _key_text(key)
            _walk(value, f"{prefix}.{text}" if prefix else text, parent, result)
    elif isinstance(tree, list) and tree:
        for idx, item in enumerate(tree):
            _walk(item, f"{prefix}[{idx}]", (tree, prefix), result)
    elif prefix:
        result[prefix] = (tree, parent)

    return result


def flatten(tree: Any) -> Dict[str, Any]:
    """Flatten a parsed YAML tree into {path: leaf}.

    Mapping keys are joined with '.', list indices are rendered as '[i]'.
    Empty mappings and empty lists are kept as leaves.
    """
    return {path: leaf for path, (leaf, _) in _walk(tree, "", None, {}).items()}


def _is_plain_array(value: Any) -> bool:
    return isinstance(value, list) and all(isinstance(item, str) for item in value)


def values_from_tree(tree: Any) -> List[Parameter]:
    """Build Parameter records from an already parsed values tree."""
    result: List[Parameter] = []
    seen = set()

    for path, (leaf, parent) in _walk(tree, "", None, {}).items():
        name = path
        value = leaf

        if parent is not None and _is_plain_array(parent[0]):
            value, name = parent

        kind = TYPE_ARRAY if isinstance(value, list) else type_of(value)
        if value is None:
            value = NIL_PLACEHOLDER

        # Several indices of a plain array collapse onto the same name
        if name in seen:
            continue
        seen.add(name)
        result.append(Parameter(name=name, value=value, type=kind))

    return result


def create_values_object(content: str, source: str = "<string>") -> List[Parameter]:
    """Parse values YAML text into computed Parameter records."""
    tree = parse_yaml(content, source=source)
    if tree is None:
        return []

    params = values_from_tree(tree)
    logger.debug(f"Flattened {len(params)} values from {source}")
    return params


def create_values_object_from_file(path: Union[str, Path]) -> List[Parameter]:
    return create_values_object(read_text(path), source=str(path))
