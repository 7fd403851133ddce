"""
Values Metadata - documentation metadata extraction for YAML values files.

This package provides tools to:
1. Scan tag comments (## @param, ## @section, ...) into declared parameters
2. Flatten the actual YAML values into computed parameters
3. Document chart dependencies using their repository index
"""

__version__ = "0.1.0"

from .combine import KeyCheckResult, check_keys, combine_metadata_and_values
from .config import EnrichmentOptions, MetadataConfig, load_config
from .dependencies import (
    ChartDependency,
    DependencyResult,
    DependencyStatus,
    EnrichmentReport,
    append_dependencies,
    append_dependencies_sync,
    load_dependencies,
)
from .domain import NIL_PLACEHOLDER, Parameter
from .errors import (
    ConfigurationError,
    DependencyEnrichmentError,
    DependencyFetchError,
    ParseError,
    ValuesMetadataError,
)
from .flattener import create_values_object, create_values_object_from_file
from .path_parser import get_array_prefix
from .scanner import parse_metadata_comments, parse_metadata_file

__all__ = [
    "Parameter",
    "NIL_PLACEHOLDER",
    "MetadataConfig",
    "EnrichmentOptions",
    "load_config",
    "parse_metadata_comments",
    "parse_metadata_file",
    "create_values_object",
    "create_values_object_from_file",
    "get_array_prefix",
    "ChartDependency",
    "DependencyResult",
    "DependencyStatus",
    "EnrichmentReport",
    "load_dependencies",
    "append_dependencies",
    "append_dependencies_sync",
    "KeyCheckResult",
    "check_keys",
    "combine_metadata_and_values",
    "ValuesMetadataError",
    "ConfigurationError",
    "ParseError",
    "DependencyFetchError",
    "DependencyEnrichmentError",
]
