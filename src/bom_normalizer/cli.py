"""
Command-line interface for the BOM normalizer.
"""

import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Optional

import click
import yaml

from . import __version__
from .config import AppConfig, ConfigManager
from .error_handling import BomNormalizerError, ConfigurationError, ErrorHandler
from .logging import LoggerConfig, close_logging, setup_logging
from .orchestrator import BomGenerationRun
from .scanners import ContributionLoader


@click.group()
@click.version_option(version=__version__)
@click.option(
    '--config', '-c',
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Path to configuration file'
)
@click.option(
    '--verbose', '-v',
    count=True,
    help='Increase verbosity (-v logs run parameters, -vv enables debug output)'
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[Path], verbose: int) -> None:
    """
    BOM Normalizer - Build CycloneDX BOMs from resolved module dependencies.

    Reads module contribution documents, deduplicates their artifacts into
    components, merges usage scopes and promotes the project to the root of
    the dependency graph.
    """
    ctx.ensure_object(dict)
    ctx.obj['config_file'] = config
    ctx.obj['verbose'] = verbose
    ctx.call_on_close(close_logging)


@cli.command()
@click.argument(
    'contribution_files',
    nargs=-1,
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option(
    '--aggregate/--no-aggregate',
    default=False,
    help='Aggregate every module into one BOM instead of only the first'
)
@click.option(
    '--schema-version',
    type=click.Choice(['1.0', '1.1', '1.2', '1.3', '1.4']),
    help='CycloneDX schema version of the generated BOM'
)
@click.option(
    '--output-format', '-f',
    help='Output format: xml, json or all'
)
@click.option(
    '--output-dir', '-o',
    type=click.Path(file_okay=False, path_type=Path),
    help='Directory the BOM files are written to'
)
@click.option(
    '--output-name',
    help='BOM file name without extension'
)
@click.option(
    '--project-type',
    help='Component type of the project (library, application, ...)'
)
@click.option(
    '--include-test-scope/--no-include-test-scope',
    default=None,
    help='Include test scoped artifacts'
)
@click.option(
    '--serial-number/--no-serial-number',
    default=None,
    help='Include a BOM serial number (schema 1.1 and later)'
)
@click.pass_context
def generate(
    ctx: click.Context,
    contribution_files: List[Path],
    aggregate: bool,
    schema_version: Optional[str],
    output_format: Optional[str],
    output_dir: Optional[Path],
    output_name: Optional[str],
    project_type: Optional[str],
    include_test_scope: Optional[bool],
    serial_number: Optional[bool]
) -> None:
    """
    Generate a BOM from module contribution documents.

    Examples:

        # BOM for a single module
        bom-normalizer generate contribution.yaml

        # Aggregate BOM for several modules, JSON only
        bom-normalizer generate --aggregate app.yaml core.yaml -f json -o ./target
    """
    error_handler = ErrorHandler()
    verbose = ctx.obj.get('verbose', 0)

    try:
        overrides = create_cli_overrides(
            schema_version, output_format, output_dir, output_name,
            project_type, include_test_scope, serial_number, verbose
        )
        config = load_app_config(ctx.obj.get('config_file'), overrides)
        configure_logging(config, verbose)

        contributions = ContributionLoader().load_files(contribution_files)

        run = BomGenerationRun(config)
        bom = run.execute(contributions, aggregate=aggregate)

        if bom is None:
            click.echo("BOM generation skipped")
            return

        display_results(bom.get_statistics(), run.get_run_statistics())

    except BomNormalizerError as e:
        error_handler.handle_error(e, {"command": "generate"})
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option(
    '--format', '-f',
    type=click.Choice(['table', 'json', 'yaml'], case_sensitive=False),
    default='table',
    help='Output format for configuration display'
)
@click.pass_context
def config(ctx: click.Context, format: str) -> None:
    """
    Display current configuration settings.

    Shows the effective configuration including defaults, file settings,
    and environment variable overrides.
    """
    try:
        app_config = load_app_config(ctx.obj.get('config_file'))
    except ConfigurationError as e:
        click.echo(f"Error displaying configuration: {e}", err=True)
        sys.exit(1)

    config_dict = asdict(app_config)
    if format.lower() == 'json':
        click.echo(json.dumps(config_dict, indent=2, default=str))
    elif format.lower() == 'yaml':
        click.echo(yaml.dump(config_dict, default_flow_style=False))
    else:
        display_config_table(app_config)


def load_app_config(config_file: Optional[Path], overrides: Optional[Dict[str, Any]] = None) -> AppConfig:
    """
    Load configuration, reporting invalid values as configuration errors.

    Args:
        config_file: Optional YAML configuration file
        overrides: Nested overrides from command-line options

    Returns:
        Application configuration
    """
    try:
        return ConfigManager(config_file).load_config(overrides)
    except (ValueError, TypeError) as e:
        raise ConfigurationError(f"Invalid configuration: {e}", cause=e) from e


def configure_logging(config: AppConfig, verbose: int) -> None:
    """Set up logging from configuration, raised to DEBUG by -vv."""
    level = "DEBUG" if verbose >= 2 else config.logging.level
    setup_logging(LoggerConfig(
        level=level,
        file_path=config.logging.file,
        format_string=config.logging.format,
        max_file_size=config.logging.max_file_size,
        backup_count=config.logging.backup_count,
        enable_structured=config.logging.structured
    ))


def create_cli_overrides(
    schema_version: Optional[str],
    output_format: Optional[str],
    output_dir: Optional[Path],
    output_name: Optional[str],
    project_type: Optional[str],
    include_test_scope: Optional[bool],
    serial_number: Optional[bool],
    verbose: int
) -> Dict[str, Any]:
    """Create configuration overrides from the options that were given."""
    bom_overrides: Dict[str, Any] = {}

    if schema_version:
        bom_overrides['schema_version'] = schema_version
    if output_format:
        bom_overrides['output_format'] = output_format
    if output_dir:
        bom_overrides['output_directory'] = str(output_dir)
    if output_name:
        bom_overrides['output_name'] = output_name
    if project_type:
        bom_overrides['project_type'] = project_type
    if include_test_scope is not None:
        bom_overrides['include_test_scope'] = include_test_scope
    if serial_number is not None:
        bom_overrides['include_bom_serial_number'] = serial_number
    if verbose > 0:
        bom_overrides['verbose'] = True

    return {'bom': bom_overrides} if bom_overrides else {}


def display_results(bom_statistics: Dict[str, Any], run_statistics: Dict[str, Any]) -> None:
    """Display generation results."""
    click.echo("=" * 60)
    click.echo("BOM GENERATION RESULTS")
    click.echo("=" * 60)

    click.echo(f"Analysis: {run_statistics.get('analysis')}")
    click.echo(f"Schema version: {bom_statistics['schema_version']}")
    click.echo(f"Components: {bom_statistics['component_count']}")
    click.echo(f"Dependencies: {bom_statistics['dependency_count']}")

    scope_breakdown = bom_statistics.get('scope_breakdown', {})
    if scope_breakdown:
        click.echo("Scopes:")
        for scope, count in sorted(scope_breakdown.items()):
            click.echo(f"  - {scope}: {count}")

    written_files = run_statistics.get('written_files', {})
    if written_files:
        click.echo("Output files generated:")
        for file_path in written_files.values():
            click.echo(f"  - {file_path}")

    click.echo("=" * 60)


def display_config_table(config: AppConfig) -> None:
    """Display configuration in table format."""
    click.echo("\nCurrent Configuration:")
    click.echo("-" * 50)

    sections = [
        ("BOM", config.bom),
        ("Logging", config.logging)
    ]

    for section_name, section_config in sections:
        click.echo(f"\n[{section_name}]")
        for key, value in asdict(section_config).items():
            click.echo(f"  {key}: {value}")


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == '__main__':
    main()
