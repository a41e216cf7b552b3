"""Embed pattern CLI command."""

import json
import sys

import click
from rich.console import Console
from rich.markup import escape

from gosrcs.config import load_config
from gosrcs.errors import GosrcsError
from gosrcs.resolution import resolve_embed

err_console = Console(stderr=True)


@click.command()
@click.argument("package_dir", type=click.Path(exists=True, file_okay=False))
@click.argument("patterns", nargs=-1, required=True)
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to configuration file",
)
@click.option(
    "-f",
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format",
)
def embed(package_dir: str, patterns: tuple[str, ...], config_path: str | None, output_format: str) -> None:
    """Show the files selected by embed PATTERNS in PACKAGE_DIR.

    Example:
        gosrcs embed ./web 'static/*' 'all:templates'

    """
    try:
        config = load_config(config_path)
        files = resolve_embed(
            package_dir,
            list(patterns),
            manifest_name=config.manifest_name,
            include_hidden_prefix=config.include_hidden_prefix,
        )
    except GosrcsError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)

    if output_format == "json":
        click.echo(json.dumps(files, indent=2))
    else:
        for file in files:
            click.echo(file)
