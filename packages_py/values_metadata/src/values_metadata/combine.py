"""Merge declared metadata with computed values and check they line up."""

from dataclasses import dataclass, field, replace
from typing import Dict, List

from .domain import Parameter


@dataclass
class KeyCheckResult:
    """Names present on one side only."""
    missing_metadata: List[str] = field(default_factory=list)
    missing_values: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.missing_metadata and not self.missing_values

    def errors(self) -> List[str]:
        messages = [f"Missing description for {name}" for name in self.missing_metadata]
        messages += [f"Missing value for {name}" for name in self.missing_values]
        return messages


def combine_metadata_and_values(
    metadata: List[Parameter],
    values: List[Parameter],
) -> List[Parameter]:
    """Copy value and type from computed records onto declared ones.

    Declared order is kept. Extra records keep their empty value. The input
    records are not modified.
    """
    by_name: Dict[str, Parameter] = {}
    for param in values:
        by_name.setdefault(param.name, param)

    combined = []
    for param in metadata:
        computed = by_name.get(param.name)
        if computed is not None and not param.extra:
            combined.append(replace(param, value=computed.value, type=computed.type))
        else:
            combined.append(replace(param))
    return combined


def _is_under(name: str, prefix: str) -> bool:
    return name == prefix or name.startswith(prefix + ".") or name.startswith(prefix + "[")


def check_keys(metadata: List[Parameter], values: List[Parameter]) -> KeyCheckResult:
    """Compare declared and computed names.

    A skip record covers its own name and every path below it. Extra records
    and records with validate=False are never reported as missing a value.
    """
    declared = {p.name for p in metadata if not p.skip}
    skipped = [p.name for p in metadata if p.skip]
    computed = {p.name for p in values}

    result = KeyCheckResult()
    for param in values:
        if param.name in declared:
            continue
        if any(_is_under(param.name, prefix) for prefix in skipped):
            continue
        result.missing_metadata.append(param.name)

    for param in metadata:
        if param.skip or param.extra or not param.validate:
            continue
        if param.name not in computed:
            result.missing_values.append(param.name)

    return result
