#!/usr/bin/env python3
"""
gitch CLI - analyses the history of a git project.

Usage:
    gitch authors [OPTIONS]

Examples:
    gitch authors                          # Authors of the repo in the current directory
    gitch authors --order span             # Rank by activity span
    gitch au -p /path/to/repo --format table
    gitch config                           # Show effective configuration
"""

import asyncio
import json
import logging
import os
import sys
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape

from config.settings import settings, export_config, VALID_OUTPUT_FORMATS
from shared.exceptions import GitchError
from services.author_stats.main import AuthorStatsService
from services.author_stats.report import render_json, render_lines, render_table

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.monitoring.log_level),
    format=settings.monitoring.log_format,
)
logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)


class AliasedGroup(click.Group):
    """Command group that resolves short aliases without listing them."""

    aliases = {"au": "authors"}

    def get_command(self, ctx, cmd_name):
        return super().get_command(ctx, self.aliases.get(cmd_name, cmd_name))

    def resolve_command(self, ctx, args):
        _, cmd, args = super().resolve_command(ctx, args)
        return (cmd.name if cmd else None), cmd, args


@click.group(cls=AliasedGroup)
@click.version_option(version=settings.version, prog_name=settings.app_name)
def cli():
    """g(b)itch analyses history of a git project.

    Please run at the project's root directory.
    """
    pass


@cli.command()
@click.option('--repo-path', '-p', default=None,
              help='Path to the repository root (default: current directory)')
@click.option('--order', '-o', default=settings.report.order, show_default=True,
              help='Order authors by "count" or "span"; other values order by count')
@click.option('--format', 'output_format', '-f', type=click.Choice(VALID_OUTPUT_FORMATS),
              default=settings.report.output_format, show_default=True, help='Output format')
@click.option('--verbose', '-v', is_flag=True, help='Verbose logging')
def authors(repo_path: Optional[str], order: str, output_format: str, verbose: bool):
    """Analyses contributors' work (alias: au)."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    repo_path = repo_path or os.getcwd()
    service = AuthorStatsService()

    async def run():
        result = await service.collect(repo_path)
        return result, service.rank(result, order)

    try:
        result, ranked = asyncio.run(run())
    except GitchError as e:
        err_console.print(f"[red]❌ Error: {escape(str(e))}[/red]")
        sys.exit(1)

    if output_format == "json":
        click.echo(render_json(result, ranked))
    elif output_format == "table":
        console.print(render_table(ranked, title=f"Authors ({result.total_commits} commits)"))
    else:
        for line in render_lines(ranked):
            click.echo(line)


@cli.command(name="config")
def show_config():
    """Show the effective configuration."""
    click.echo(json.dumps(export_config(), indent=2))


if __name__ == "__main__":
    cli()
