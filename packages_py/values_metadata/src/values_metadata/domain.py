"""Data models for values_metadata."""

from dataclasses import asdict, dataclass
from typing import Any, Dict

# Placeholder written for YAML nulls so rendered docs show a Go template value
NIL_PLACEHOLDER = "nil"

TYPE_STRING = "string"
TYPE_NUMBER = "number"
TYPE_BOOLEAN = "boolean"
TYPE_ARRAY = "array"
TYPE_OBJECT = "object"


@dataclass
class Parameter:
    """A single documented (or documentable) values entry."""
    name: str
    value: Any = None
    type: str = ""
    description: str = ""
    modifier: str = ""
    section: str = ""
    skip: bool = False
    extra: bool = False
    validate: bool = True

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON/YAML serialization."""
        return asdict(self)


def type_of(value: Any) -> str:
    """Coarse kind of a parsed YAML value."""
    if isinstance(value, bool):
        return TYPE_BOOLEAN
    if isinstance(value, (int, float)):
        return TYPE_NUMBER
    if isinstance(value, str):
        return TYPE_STRING
    if isinstance(value, list):
        return TYPE_ARRAY
    # dicts and nulls
    return TYPE_OBJECT
