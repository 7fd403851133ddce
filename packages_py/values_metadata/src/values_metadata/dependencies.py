"""
Dependency enricher.

For every dependency declared in a chart manifest, fetch the repository
index, read the home page of the chart and insert a documentation-only
Parameter in front of the first parameter belonging to that dependency.

All lookups run concurrently. Each lookup reports a DependencyResult instead
of raising; the enrichment coroutine alone mutates the parameter list, once
every lookup has finished.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import httpx

from .config import EnrichmentOptions
from .domain import Parameter
from .errors import DependencyEnrichmentError, DependencyFetchError, ParseError
from .yaml_loader import parse_yaml, read_yaml_file

logger = logging.getLogger(__name__)

# Constants
LOG_PREFIX = "[DependencyEnricher]"
DESCRIPTION_TEMPLATE = "For additional variables configurations please refer [here]({home})"


class DependencyStatus(str, Enum):
    """Outcome of a single dependency lookup."""
    RESOLVED = "resolved"
    NOT_FOUND = "not_found"
    HTTP_ERROR = "http_error"
    TIMEOUT = "timeout"
    CONNECTION_ERROR = "connection_error"
    CONFIG_ERROR = "config_error"
    PARSE_ERROR = "parse_error"
    ERROR = "error"


@dataclass
class ChartDependency:
    """A `dependencies` entry of a chart manifest."""
    name: str
    repository: str = ""
    version: Optional[str] = None

    def index_url(self, index_path: str = "index.yaml") -> str:
        return f"{self.repository.rstrip('/')}/{index_path.lstrip('/')}"


@dataclass
class DependencyResult:
    dependency: str
    status: DependencyStatus
    index_url: Optional[str] = None
    home: Optional[str] = None
    inserted: bool = False
    error: Optional[Dict[str, Any]] = None

    @property
    def ok(self) -> bool:
        return self.status == DependencyStatus.RESOLVED

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = {
            "dependency": self.dependency,
            "status": self.status.value if isinstance(self.status, DependencyStatus) else self.status,
            "inserted": self.inserted,
        }
        if self.index_url is not None:
            result["index_url"] = self.index_url
        if self.home is not None:
            result["home"] = self.home
        if self.error is not None:
            result["error"] = self.error
        return result


@dataclass
class EnrichmentReport:
    """Per-dependency results of one enrichment run, in manifest order."""
    results: List[DependencyResult] = field(default_factory=list)

    @property
    def failed(self) -> List[DependencyResult]:
        return [r for r in self.results if not r.ok]

    @property
    def inserted(self) -> List[DependencyResult]:
        return [r for r in self.results if r.inserted]

    @property
    def ok(self) -> bool:
        return not self.failed

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "results": [r.to_dict() for r in self.results],
        }


def load_dependencies(chart_path: Union[str, Path]) -> List[ChartDependency]:
    """Read the `dependencies` of a chart manifest."""
    chart = read_yaml_file(chart_path) or {}
    if not isinstance(chart, dict):
        raise ParseError(f"Chart manifest {chart_path} must contain a mapping")

    dependencies = []
    for entry in chart.get("dependencies") or []:
        if not isinstance(entry, dict) or not entry.get("name"):
            raise ParseError(f"Invalid dependency entry in {chart_path}: {entry!r}")
        dependencies.append(
            ChartDependency(
                name=str(entry["name"]),
                repository=str(entry.get("repository") or ""),
                version=str(entry["version"]) if entry.get("version") is not None else None,
            )
        )
    return dependencies


async def fetch_dependency_home(
    client: httpx.AsyncClient,
    dependency: ChartDependency,
    options: Optional[EnrichmentOptions] = None,
) -> str:
    """Return the `home` URL of the first published entry of a dependency.

    Raises:
        DependencyFetchError: repository unusable, non-2xx response or
            index without `entries[name][0].home`
        httpx.HTTPError: transport failures and timeouts
    """
    options = options or EnrichmentOptions()

    if not dependency.repository.startswith(("http://", "https://")):
        raise DependencyFetchError(
            dependency.name,
            f"repository {dependency.repository!r} is not an http(s) chart repository",
            reason=DependencyStatus.CONFIG_ERROR.value,
        )

    url = dependency.index_url(options.index_path)
    try:
        httpx.URL(url)
    except httpx.InvalidURL as e:
        raise DependencyFetchError(
            dependency.name,
            f"invalid index URL {url!r}: {e}",
            reason=DependencyStatus.CONFIG_ERROR.value,
        ) from e

    logger.debug(f"{LOG_PREFIX} Request: GET {url}")
    response = await client.get(url, timeout=options.timeout_seconds)
    logger.debug(f"{LOG_PREFIX} Response: {response.status_code} {url}")

    if not response.is_success:
        raise DependencyFetchError(
            dependency.name,
            f"GET {url} returned {response.status_code}",
            reason=DependencyStatus.HTTP_ERROR.value,
        )

    try:
        index = parse_yaml(response.text, source=url)
    except ParseError as e:
        raise DependencyFetchError(dependency.name, str(e), reason=DependencyStatus.PARSE_ERROR.value) from e

    try:
        home = index["entries"][dependency.name][0]["home"]
    except (KeyError, IndexError, TypeError) as e:
        raise DependencyFetchError(
            dependency.name,
            f"index at {url} has no home page for chart {dependency.name!r}",
            reason=DependencyStatus.NOT_FOUND.value,
        ) from e

    if not home:
        raise DependencyFetchError(
            dependency.name,
            f"index at {url} has an empty home page for chart {dependency.name!r}",
            reason=DependencyStatus.NOT_FOUND.value,
        )
    return str(home)


async def _resolve_dependency(
    client: httpx.AsyncClient,
    dependency: ChartDependency,
    options: EnrichmentOptions,
) -> DependencyResult:
    url = dependency.index_url(options.index_path) if dependency.repository else None

    try:
        home = await fetch_dependency_home(client, dependency, options)
        return DependencyResult(
            dependency=dependency.name,
            status=DependencyStatus.RESOLVED,
            index_url=url,
            home=home,
        )

    except DependencyFetchError as e:
        return _failed(dependency, url, DependencyStatus(e.reason), e)
    except httpx.TimeoutException as e:
        return _failed(dependency, url, DependencyStatus.TIMEOUT, e)
    except httpx.ConnectError as e:
        return _failed(dependency, url, DependencyStatus.CONNECTION_ERROR, e)
    except httpx.InvalidURL as e:
        return _failed(dependency, url, DependencyStatus.CONFIG_ERROR, e)
    except httpx.HTTPError as e:
        return _failed(dependency, url, DependencyStatus.ERROR, e)


def _failed(
    dependency: ChartDependency,
    url: Optional[str],
    status: DependencyStatus,
    error: Exception,
) -> DependencyResult:
    logger.debug(f"{LOG_PREFIX} {dependency.name}: {status.value} ({error})")
    return DependencyResult(
        dependency=dependency.name,
        status=status,
        index_url=url,
        error={"type": type(error).__name__, "message": str(error)},
    )


def build_dependency_parameter(dependency: ChartDependency, home: str) -> Parameter:
    return Parameter(
        name=dependency.name,
        value="",
        description=DESCRIPTION_TEMPLATE.format(home=home),
        validate=False,
    )


def _first_segment(name: str) -> str:
    head, sep, _ = name.partition(".")
    return head if sep else ""


def insert_dependency_parameter(parameters: List[Parameter], param: Parameter) -> bool:
    """Insert `param` before the first parameter under `param.name`.

    The list is scanned in its current state. The inserted record inherits
    the section of the parameter it precedes. Returns False, leaving the list
    untouched, when no parameter has `param.name` as its first path segment.
    """
    for index, existing in enumerate(parameters):
        if _first_segment(existing.name) == param.name:
            param.section = existing.section
            parameters.insert(index, param)
            return True
    return False


async def enrich_parameters(
    dependencies: List[ChartDependency],
    parameters: List[Parameter],
    *,
    client: Optional[httpx.AsyncClient] = None,
    options: Optional[EnrichmentOptions] = None,
) -> EnrichmentReport:
    """Resolve every dependency concurrently, then splice in the results.

    With `options.strict` any failed lookup raises DependencyEnrichmentError
    before a single insertion is made. Otherwise the resolved dependencies are
    inserted and the failures are left in the report.
    """
    options = options or EnrichmentOptions()
    if not dependencies:
        return EnrichmentReport()

    logger.info(f"{LOG_PREFIX} Receiving home pages for {len(dependencies)} dependencies...")

    own_client = client is None
    if own_client:
        client = httpx.AsyncClient(timeout=options.timeout_seconds, follow_redirects=True)

    try:
        results = await asyncio.gather(
            *(_resolve_dependency(client, dependency, options) for dependency in dependencies)
        )
    finally:
        if own_client:
            await client.aclose()

    report = EnrichmentReport(results=list(results))

    if options.strict and not report.ok:
        names = ", ".join(r.dependency for r in report.failed)
        raise DependencyEnrichmentError(f"Failed to resolve dependencies: {names}", report=report)

    for dependency, result in zip(dependencies, report.results):
        if not result.ok:
            logger.warning(f"{LOG_PREFIX} Skipping {dependency.name}: {result.error['message']}")
            continue
        param = build_dependency_parameter(dependency, result.home)
        result.inserted = insert_dependency_parameter(parameters, param)
        if result.inserted:
            logger.debug(f"{LOG_PREFIX} Inserted {dependency.name} in section {param.section!r}")
        else:
            logger.warning(f"{LOG_PREFIX} No parameters found under {dependency.name}, not documented")

    logger.info(
        f"{LOG_PREFIX} Received home pages: {len(report.inserted)} inserted, {len(report.failed)} failed"
    )
    return report


async def append_dependencies(
    chart_path: Union[str, Path],
    parameters: List[Parameter],
    *,
    client: Optional[httpx.AsyncClient] = None,
    options: Optional[EnrichmentOptions] = None,
) -> EnrichmentReport:
    """Enrich `parameters` in place with the dependencies of a chart manifest."""
    dependencies = load_dependencies(chart_path)
    return await enrich_parameters(dependencies, parameters, client=client, options=options)


def append_dependencies_sync(
    chart_path: Union[str, Path],
    parameters: List[Parameter],
    options: Optional[EnrichmentOptions] = None,
) -> EnrichmentReport:
    return asyncio.run(append_dependencies(chart_path, parameters, options=options))
