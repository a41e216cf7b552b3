"""Build unit inspection CLI command."""

import os
import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from gosrcs.config import load_config
from gosrcs.errors import GosrcsError
from gosrcs.resolution import BuildUnit, find_manifest_dir

console = Console()
err_console = Console(stderr=True)


@click.command()
@click.argument(
    "directory",
    required=False,
    default=".",
    type=click.Path(exists=True, file_okay=False),
)
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to configuration file",
)
def units(directory: str, config_path: str | None) -> None:
    """Show the module governing DIRECTORY and its local overrides."""
    try:
        config = load_config(config_path)
        unit = BuildUnit.load(find_manifest_dir(directory, config.manifest_name), config)
    except GosrcsError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)

    console.print(f"[bold]Module:[/bold] {escape(unit.path)}")
    console.print(f"[bold]Root:[/bold] {escape(unit.root_dir)}")

    if not unit.overrides:
        console.print("No local overrides")
        return

    table = Table(title="Local overrides")
    table.add_column("Module", style="cyan")
    table.add_column("Directory")
    for old_path in sorted(unit.overrides):
        override = unit.overrides[old_path]
        table.add_row(escape(old_path), escape(os.path.relpath(override.directory, unit.root_dir)))
    console.print(table)
