#!/usr/bin/env python3
"""
Command-line interface for values-metadata.

Usage:
    values-metadata values.yaml
    values-metadata values.yaml --chart Chart.yaml -f yaml -o params.yaml
    values-metadata values.yaml --check
"""

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import click
import yaml
from rich.console import Console
from rich.table import Table

from . import __version__
from .combine import check_keys, combine_metadata_and_values
from .config import DEFAULT_TIMEOUT_SECONDS, EnrichmentOptions, load_config
from .dependencies import append_dependencies
from .domain import Parameter
from .errors import DependencyEnrichmentError, ValuesMetadataError
from .flattener import create_values_object_from_file
from .scanner import parse_metadata_file

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def print_error(msg: str):
    """Print error message."""
    Console(stderr=True).print(f"[red]Error:[/red] {msg}")


def print_success(msg: str):
    """Print success message."""
    Console(stderr=True).print(f"[green]{msg}[/green]")


def render_table(parameters: List[Parameter]) -> Table:
    table = Table(title="Parameters")
    table.add_column("Section", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Description")
    table.add_column("Value", style="magenta")

    for param in parameters:
        if param.skip:
            continue
        value = "" if param.value is None else json.dumps(param.value, default=str)
        table.add_row(param.section, param.name, param.description, value)
    return table


def dump_parameters(parameters: List[Parameter], output_format: str) -> str:
    records = [p.to_dict() for p in parameters]
    if output_format == "yaml":
        return yaml.safe_dump(records, sort_keys=False, allow_unicode=True)
    return json.dumps(records, indent=2, default=str) + "\n"


@click.command()
@click.version_option(version=__version__, prog_name="values-metadata")
@click.argument("values", type=click.Path(exists=True, dir_okay=False))
@click.option("-c", "--config", "config_path", type=click.Path(exists=True, dir_okay=False),
              help="Tag configuration file (YAML or JSON)")
@click.option("--chart", "chart_path", type=click.Path(exists=True, dir_okay=False),
              help="Chart manifest whose dependencies are documented")
@click.option("-f", "--format", "output_format", type=click.Choice(["json", "yaml", "table"]),
              default="json", show_default=True, help="Output format")
@click.option("-o", "--output", type=click.Path(dir_okay=False), help="Output file path")
@click.option("--check", is_flag=True, help="Fail when values and metadata do not match")
@click.option("--no-strict", is_flag=True, help="Keep resolved dependencies when others fail")
@click.option("--timeout", type=float, default=DEFAULT_TIMEOUT_SECONDS, show_default=True,
              help="Timeout in seconds for each repository index request")
@click.option("--log-level", envvar="VALUES_METADATA_LOG_LEVEL", default="WARNING", show_default=True,
              type=click.Choice(LOG_LEVELS, case_sensitive=False))
def cli(
    values: str,
    config_path: Optional[str],
    chart_path: Optional[str],
    output_format: str,
    output: Optional[str],
    check: bool,
    no_strict: bool,
    timeout: float,
    log_level: str,
):
    """Extract documentation metadata from a values file.

    Reads the tag comments (## @param, ## @section, ## @skip, ## @extra) and
    the actual values of VALUES, merges them and prints the parameters.
    """
    logging.basicConfig(level=log_level.upper(), format="%(levelname)s %(name)s: %(message)s")

    try:
        config = load_config(config_path)
        metadata = parse_metadata_file(values, config)
        computed = create_values_object_from_file(values)
        parameters = combine_metadata_and_values(metadata, computed)

        if check:
            result = check_keys(metadata, computed)
            if not result.ok:
                for message in result.errors():
                    print_error(message)
                sys.exit(1)

        if chart_path:
            options = EnrichmentOptions(timeout_seconds=timeout, strict=not no_strict)
            report = asyncio.run(append_dependencies(chart_path, parameters, options=options))
            for failure in report.failed:
                print_error(f"Dependency {failure.dependency}: {failure.error['message']}")

    except DependencyEnrichmentError as e:
        for failure in e.report.failed if e.report else []:
            print_error(f"Dependency {failure.dependency}: {failure.error['message']}")
        print_error(str(e))
        sys.exit(1)
    except ValuesMetadataError as e:
        print_error(str(e))
        sys.exit(1)

    if output_format == "table":
        Console().print(render_table(parameters))
        return

    text = dump_parameters(parameters, output_format)
    if output:
        Path(output).write_text(text, encoding="utf-8")
        print_success(f"Wrote {len(parameters)} parameters to {output}")
    else:
        click.echo(text, nl=False)


def main():
    """Main entry point."""
    return cli()


if __name__ == "__main__":
    main()
