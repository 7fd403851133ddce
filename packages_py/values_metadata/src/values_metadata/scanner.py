"""
Comment tag scanner.

Reads a values file as text and turns tag comment lines into Parameter records:

    ## @section Scaling
    ## @param replicaCount [default: 1] Number of replicas
    ## @skip internal.cache
    ## @extra ingress.annotations Extra annotations, not present in values

Every line is tested against all four tag patterns in the order
param, section, skip, extra. A line matching more than one pattern (possible
when tag keywords share a prefix) yields one record per match.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from .config import MetadataConfig
from .domain import Parameter
from .patterns import TagPatterns, compile_tag_patterns
from .yaml_loader import read_text

logger = logging.getLogger(__name__)

_LINE_SPLIT = re.compile(r"\r?\n")


@dataclass
class ScanState:
    """State carried from one line to the next."""
    current_section: str = ""
    parameters: List[Parameter] = field(default_factory=list)


def _modifier(raw: Optional[str]) -> str:
    if not raw:
        return ""
    return raw.split("[", 1)[1].split("]", 1)[0]


def _scan_line(line: str, patterns: TagPatterns, state: ScanState) -> ScanState:
    param_match = patterns.param.match(line)
    if param_match:
        state.parameters.append(Parameter(
            name=param_match.group(1),
            modifier=_modifier(param_match.group(2)),
            description=param_match.group(3),
            section=state.current_section,
        ))

    section_match = patterns.section.match(line)
    if section_match:
        state.current_section = section_match.group(1)

    skip_match = patterns.skip.match(line)
    if skip_match:
        state.parameters.append(Parameter(
            name=skip_match.group(1),
            skip=True,
            section=state.current_section,
        ))

    extra_match = patterns.extra.match(line)
    if extra_match:
        # No backing value exists in the YAML
        state.parameters.append(Parameter(
            name=extra_match.group(1),
            value="",
            description=extra_match.group(3),
            extra=True,
            section=state.current_section,
        ))

    return state


def parse_metadata_comments(
    content: str,
    config: Optional[MetadataConfig] = None,
) -> List[Parameter]:
    """Parse tag comment lines into Parameter records, in file order.

    Args:
        content: Text of the values file
        config: Tag configuration; defaults are used when omitted

    Returns:
        Declared parameters. Records seen before the first section tag have
        an empty section.
    """
    patterns = compile_tag_patterns(config if config is not None else MetadataConfig())

    state = ScanState()
    for line in _LINE_SPLIT.split(content):
        state = _scan_line(line, patterns, state)

    logger.debug(f"Parsed {len(state.parameters)} metadata entries from comments")
    return state.parameters


def parse_metadata_file(
    path: Union[str, Path],
    config: Optional[MetadataConfig] = None,
) -> List[Parameter]:
    return parse_metadata_comments(read_text(path), config)
