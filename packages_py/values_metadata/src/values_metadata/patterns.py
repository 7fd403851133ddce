import re
from dataclasses import dataclass
from typing import Optional, Pattern

from .config import MetadataConfig
from .errors import ConfigurationError

# {prefix} and {tag} are filled from MetadataConfig; prefix is a regex fragment
TEMPLATES = {
    # ## @param path.to.value [modifier] Description
    "PARAM": r"^\s*{prefix}\s*{tag}\s*([^\s]+)\s*(\[.*?\])?\s*(.*)$",

    # ## @section Section title
    "SECTION": r"^\s*{prefix}\s*{tag}\s*(.*)$",

    # ## @skip path.to.value
    "SKIP": r"^\s*{prefix}\s*{tag}\s*(.*)$",

    # ## @extra path.to.value Description
    "EXTRA": r"^\s*{prefix}\s*{tag}\s*([^\s]+)\s*(\[.*?\])?\s*(.*)$",
}


@dataclass(frozen=True)
class TagPatterns:
    """Compiled line matchers, one per tag kind."""
    param: Pattern[str]
    section: Pattern[str]
    skip: Pattern[str]
    extra: Pattern[str]


def _compile(kind: str, prefix: str, tag: str) -> Pattern[str]:
    source = TEMPLATES[kind].format(prefix=prefix, tag=tag)
    try:
        return re.compile(source)
    except re.error as e:
        raise ConfigurationError(
            f"Cannot build {kind.lower()} pattern from comment format {prefix!r} and tag {tag!r}: {e}"
        ) from e


def compile_tag_patterns(config: Optional[MetadataConfig]) -> TagPatterns:
    """Compile the four tag matchers for a configuration."""
    if config is None:
        raise ConfigurationError("A metadata configuration is required to compile tag patterns")

    prefix = config.comments.format
    tags = config.tags
    return TagPatterns(
        param=_compile("PARAM", prefix, tags.param),
        section=_compile("SECTION", prefix, tags.section),
        skip=_compile("SKIP", prefix, tags.skip),
        extra=_compile("EXTRA", prefix, tags.extra),
    )
