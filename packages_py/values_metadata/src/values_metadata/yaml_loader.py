"""YAML loading for values files, chart manifests and repository indexes."""

import logging
from pathlib import Path
from typing import Any, Union

import yaml

from .errors import ParseError

logger = logging.getLogger(__name__)

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class ValuesLoader(yaml.SafeLoader):
    """SafeLoader that keeps timestamps as plain strings.

    Values files are rendered by Helm, which never turns `2024-01-01` into a
    date, so the documented value must stay the literal text.
    """


ValuesLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def parse_yaml(content: str, source: str = "<string>") -> Any:
    """Parse a YAML document, raising ParseError on malformed input."""
    try:
        return yaml.load(content, Loader=ValuesLoader)
    except yaml.YAMLError as e:
        msg = f"YAML parsing error in {source}: {e}"
        logger.error(msg)
        raise ParseError(msg) from e


def read_text(path: Union[str, Path]) -> str:
    """Read a file as UTF-8. File access errors propagate to the caller."""
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def read_yaml_file(path: Union[str, Path]) -> Any:
    return parse_yaml(read_text(path), source=str(path))
