"""
Configuration models for the comment tag mini-language and enrichment.
"""
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigurationError
from .yaml_loader import read_yaml_file

logger = logging.getLogger(__name__)

# Constants
DEFAULT_COMMENT_FORMAT = "##"
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_INDEX_PATH = "index.yaml"

ENV_COMMENT_FORMAT = "VALUES_METADATA_COMMENT_FORMAT"
ENV_TAG_PARAM = "VALUES_METADATA_TAG_PARAM"
ENV_TAG_SECTION = "VALUES_METADATA_TAG_SECTION"
ENV_TAG_SKIP = "VALUES_METADATA_TAG_SKIP"
ENV_TAG_EXTRA = "VALUES_METADATA_TAG_EXTRA"

# (section, key, env var) triples applied on top of file config
_ENV_OVERRIDES = [
    ("comments", "format", ENV_COMMENT_FORMAT),
    ("tags", "param", ENV_TAG_PARAM),
    ("tags", "section", ENV_TAG_SECTION),
    ("tags", "skip", ENV_TAG_SKIP),
    ("tags", "extra", ENV_TAG_EXTRA),
]


class CommentsConfig(BaseModel):
    """How tag lines are recognised as comments."""
    format: str = Field(
        default=DEFAULT_COMMENT_FORMAT,
        min_length=1,
        description="Regex fragment matching the comment prefix of a tag line",
    )


class TagsConfig(BaseModel):
    """Keywords introducing each kind of tag line."""
    param: str = Field(default="@param", min_length=1, description="Documents a parameter")
    section: str = Field(default="@section", min_length=1, description="Starts a new section")
    skip: str = Field(default="@skip", min_length=1, description="Excludes a parameter")
    extra: str = Field(default="@extra", min_length=1, description="Documents a parameter with no value")


class MetadataConfig(BaseModel):
    """Configuration of the comment tag mini-language.

    Unknown keys in a config file (renderer settings and the like) are ignored.
    """
    comments: CommentsConfig = Field(default_factory=CommentsConfig)
    tags: TagsConfig = Field(default_factory=TagsConfig)


@dataclass
class EnrichmentOptions:
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    strict: bool = True
    index_path: str = DEFAULT_INDEX_PATH


def resolve(
    env_keys: Union[str, List[str]],
    config: Optional[Dict[str, Any]],
    config_key: Optional[str],
    default: Any
) -> Any:
    """
    Resolve configuration value from multiple sources in priority order:
    1. Environment variables
    2. Configuration dictionary
    3. Default value
    """
    if isinstance(env_keys, str):
        env_keys = [env_keys]

    for key in env_keys:
        if key:
            val = os.getenv(key)
            if val is not None:
                return val

    if config and config_key and config_key in config:
        return config[config_key]

    return default


def _deep_merge(target: Dict, source: Dict) -> Dict:
    """Recursive deep merge that replaces non-mapping values."""
    for key, value in source.items():
        if (
            key in target
            and isinstance(target[key], dict)
            and isinstance(value, dict)
        ):
            _deep_merge(target[key], value)
        else:
            target[key] = value
    return target


def load_config(
    path: Optional[Union[str, Path]] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> MetadataConfig:
    """Build a MetadataConfig from defaults, an optional file, overrides and env.

    The file may be YAML or JSON. Environment variables win over the file;
    explicit overrides are merged after the file and before the environment.
    """
    data = MetadataConfig().model_dump()

    if path is not None:
        file_data = read_yaml_file(path) or {}
        if not isinstance(file_data, dict):
            raise ConfigurationError(f"Config file {path} must contain a mapping")
        _deep_merge(data, file_data)
        logger.debug(f"Loaded metadata config from {path}")

    if overrides:
        _deep_merge(data, overrides)

    for section, key, env_key in _ENV_OVERRIDES:
        block = data.get(section)
        if not isinstance(block, dict):
            block = {}
            data[section] = block
        value = resolve(env_key, block, key, None)
        if value is None:
            # Let the model default apply
            block.pop(key, None)
        else:
            block[key] = value

    try:
        return MetadataConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid metadata config: {e}") from e
