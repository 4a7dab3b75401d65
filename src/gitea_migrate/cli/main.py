"""Main CLI entry point for the GitLab to Gitea migration tool."""

import sys
import asyncio
from typing import Optional
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .. import __version__
from ..config.config import Config
from ..utils.logging import setup_logging
from ..migration.engine import MigrationEngine
from ..migration.orchestrator import MigrationSummary

console = Console()

DEFAULT_CONFIG_PATHS = ['config.yaml', 'config.yml', '.gitea-migrate.yaml']


@click.group()
@click.version_option(version=__version__, prog_name='gitea-migrate')
@click.option(
    '--config',
    '-c',
    type=click.Path(exists=True),
    help='Path to configuration file',
)
@click.option(
    '--verbose',
    '-v',
    is_flag=True,
    help='Enable verbose logging',
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[str], verbose: bool) -> None:
    """Gitea Migration Tool - Mirror users, organizations, repositories and issues from GitLab to Gitea."""
    ctx.ensure_object(dict)

    if config:
        ctx.obj['config_path'] = config
    ctx.obj['verbose'] = verbose

    # Basic logging until the configuration has been loaded
    setup_logging('DEBUG' if verbose else 'INFO')


@cli.command()
@click.option(
    '--output',
    '-o',
    default='config.yaml',
    help='Output configuration file path',
)
@click.pass_context
def init(ctx: click.Context, output: str) -> None:
    """Initialize a new configuration file."""
    console.print(
        Panel.fit(
            '[bold green]Gitea Migration Tool[/bold green]\n'
            'Initializing configuration...',
            border_style='green',
        )
    )

    try:
        Config.create_template(output)

        console.print(f'[green]✓[/green] Configuration template created at: {output}')
        console.print(
            f'[yellow]Please edit {output} with your GitLab and Gitea details[/yellow]'
        )

    except OSError as e:
        console.print(f'[red]✗[/red] Failed to create configuration: {e}')
        sys.exit(1)


@cli.command()
@click.option(
    '--dry-run',
    is_flag=True,
    help='Perform a dry run without making changes',
)
@click.pass_context
def migrate(ctx: click.Context, dry_run: bool) -> None:
    """Start the migration process."""
    console.print(
        Panel.fit(
            '[bold blue]Gitea Migration Tool[/bold blue]\n'
            'Starting migration process...',
            border_style='blue',
        )
    )

    if dry_run:
        console.print(
            '[yellow]Running in dry-run mode - no changes will be made[/yellow]'
        )

    try:
        config = _load_config(ctx)
        _setup_logging_with_config(ctx, config)

        if dry_run:
            config.migration.dry_run = True

        asyncio.run(_run_migration(config, config.migration.dry_run))

    except Exception as e:
        console.print(f'[red]✗[/red] Migration failed: {e}')
        if ctx.obj.get('verbose'):
            console.print_exception()
        sys.exit(1)


@cli.command()
@click.pass_context
def validate(ctx: click.Context) -> None:
    """Validate configuration and connectivity to both instances."""
    console.print(
        Panel.fit(
            '[bold cyan]Gitea Migration Tool[/bold cyan]\nValidating setup...',
            border_style='cyan',
        )
    )

    try:
        config = _load_config(ctx)

        engine = MigrationEngine(config)
        try:
            asyncio.run(engine._test_connectivity())
        finally:
            engine.close()

        console.print('[green]✓[/green] Connectivity validation passed')
        console.print('[green]✓[/green] Configuration validation completed')

    except Exception as e:
        console.print(f'[red]✗[/red] Validation failed: {e}')
        if ctx.obj.get('verbose'):
            console.print_exception()
        sys.exit(1)


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show the effective migration configuration."""
    console.print(
        Panel.fit(
            '[bold magenta]Gitea Migration Tool[/bold magenta]\nMigration Status',
            border_style='magenta',
        )
    )

    try:
        config = _load_config(ctx)
        _setup_logging_with_config(ctx, config)

        table = Table(title='Migration Configuration')
        table.add_column('Setting', style='cyan')
        table.add_column('Value', style='green')

        table.add_row('Source URL', config.source.url)
        table.add_row('Destination URL', config.destination.url)
        table.add_row('Gitea Admin User', config.destination.admin_user)
        table.add_row('Migrate Users', '✓' if config.migration.users else '✗')
        table.add_row(
            'Migrate Organizations', '✓' if config.migration.organizations else '✗'
        )
        table.add_row(
            'Migrate Repositories', '✓' if config.migration.repositories else '✗'
        )
        table.add_row(
            'Migrate Milestones/Labels/Issues',
            '✓' if config.migration.repository_metadata else '✗',
        )
        table.add_row('Mirror Interval', config.migration.mirror_interval)
        table.add_row('Source Page Size', str(config.source.page_size))
        table.add_row('Destination Page Size', str(config.destination.page_size))

        console.print(table)

    except Exception as e:
        console.print(f'[red]✗[/red] Failed to load status: {e}')
        if ctx.obj.get('verbose'):
            console.print_exception()
        sys.exit(1)


def _load_config(ctx: click.Context) -> Config:
    """Load configuration from file or environment."""
    config_path = ctx.obj.get('config_path')

    if config_path:
        if not Path(config_path).exists():
            raise FileNotFoundError(f'Configuration file not found: {config_path}')
        return Config.from_file(config_path)

    for path in DEFAULT_CONFIG_PATHS:
        if Path(path).exists():
            return Config.from_file(path)

    # Fall back to environment variables
    try:
        return Config.from_env()
    except ValueError:
        raise FileNotFoundError(
            'No configuration found. Use --config to specify a file or run "gitea-migrate init" to create one.'
        )


def _setup_logging_with_config(ctx: click.Context, config: Config) -> None:
    """Setup logging with configuration from config file."""
    verbose = ctx.obj.get('verbose', False)

    # The verbose flag overrides the configured level
    log_level = 'DEBUG' if verbose else config.logging.level
    setup_logging(
        level=log_level, log_file=config.logging.file, log_format=config.logging.format
    )


async def _run_migration(config: Config, dry_run: bool = False) -> None:
    """Run the migration process and print its summary."""
    engine = MigrationEngine(config)
    operation = 'Dry run' if dry_run else 'Migration'

    with console.status(f'[blue]{operation} in progress...'):
        if dry_run:
            summary = await engine.dry_run()
        else:
            summary = await engine.migrate()

    console.print(f'[green]✓[/green] {operation} completed successfully')
    _display_migration_summary(summary)


def _display_migration_summary(summary: MigrationSummary) -> None:
    """Display migration summary results."""
    table = Table(title='Migration Summary')
    table.add_column('Entity Type', style='cyan')
    table.add_column('Total', style='blue')
    table.add_column('Created', style='green')
    table.add_column('Updated', style='green')
    table.add_column('Skipped', style='yellow')
    table.add_column('Planned', style='magenta')

    for entity_type, counts in summary.results_by_type.items():
        table.add_row(
            entity_type.title(),
            str(counts.get('total', 0)),
            str(counts.get('created', 0)),
            str(counts.get('updated', 0)),
            str(counts.get('skipped', 0)),
            str(counts.get('planned', 0)),
        )

    console.print(table)

    if summary.completed_at:
        duration = summary.completed_at - summary.started_at
        console.print(f'\n[blue]Migration Duration:[/blue] {duration}')

    warnings = [
        f'{result.entity_id}: {warning}'
        for result in summary.all_results
        for warning in result.warnings
    ]
    if warnings:
        console.print(f'\n[yellow]Warnings ({len(warnings)}):[/yellow]')
        for warning in warnings[:5]:
            console.print(f'  • {warning}')
        if len(warnings) > 5:
            console.print(f'  ... and {len(warnings) - 5} more warnings')


def main() -> None:
    """Main entry point for the CLI application."""
    try:
        cli()
    except KeyboardInterrupt:
        console.print('\n[red]Migration interrupted by user[/red]')
        sys.exit(1)


if __name__ == '__main__':
    main()
