"""Custom exceptions."""

from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .dependencies import EnrichmentReport


class ValuesMetadataError(Exception):
    """Base class for all values_metadata errors."""
    pass


class ConfigurationError(ValuesMetadataError):
    """Raised when the tag configuration is missing or cannot be compiled."""
    pass


class ParseError(ValuesMetadataError):
    """Raised when a YAML document is malformed."""
    pass


class DependencyFetchError(ValuesMetadataError):
    """Raised when the index of a single dependency cannot be resolved."""

    def __init__(self, dependency: str, message: str, reason: str = "error"):
        super().__init__(f"{dependency}: {message}")
        self.dependency = dependency
        self.reason = reason


class DependencyEnrichmentError(ValuesMetadataError):
    """Raised in strict mode when at least one dependency lookup failed.

    No insertion has been applied to the parameter list when this is raised.
    """

    def __init__(self, message: str, report: Optional["EnrichmentReport"] = None):
        super().__init__(message)
        self.report = report
