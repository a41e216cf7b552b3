"""CLI interface for gosrcs."""

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from gosrcs.cli.commands.embed import embed
from gosrcs.cli.commands.units import units
from gosrcs.config import load_config
from gosrcs.errors import GosrcsError
from gosrcs.graph import GoListFileProvider
from gosrcs.resolution import collect_sources
from gosrcs.version import GOSRCS_VERSION

err_console = Console(stderr=True)


@click.group()
@click.version_option(version=GOSRCS_VERSION, prog_name="gosrcs")
@click.option("-v", "--verbose", is_flag=True, help="Log resolution steps to stderr")
def cli(verbose: bool) -> None:
    """gosrcs - List the files needed to build a Go package."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )


cli.add_command(embed)
cli.add_command(units)


def _split_tags(tags: tuple[str, ...]) -> list[str]:
    """Accept both repeated --tags options and comma separated values."""
    return [tag for value in tags for tag in value.split(",") if tag]


@cli.command("list")
@click.argument(
    "directory",
    required=False,
    default=".",
    type=click.Path(exists=True, file_okay=False),
)
@click.option("-t", "--tags", multiple=True, help="Build tags (repeatable or comma separated)")
@click.option(
    "--base-dir",
    type=click.Path(file_okay=False),
    help="Directory output paths are relative to (default: module root)",
)
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to configuration file",
)
@click.option(
    "--graph-file",
    type=click.Path(exists=True, dir_okay=False),
    help="Read saved `go list -json -deps` output instead of running go",
)
@click.option(
    "-f",
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format",
)
@click.option("-o", "--output", type=click.Path(), help="Output file (default: stdout)")
def list_cmd(
    directory: str,
    tags: tuple[str, ...],
    base_dir: str | None,
    config_path: str | None,
    graph_file: str | None,
    output_format: str,
    output: str | None,
) -> None:
    """List the files required to build the package in DIRECTORY.

    Paths are printed relative to the module root, one per line, sorted.

    Example:
        gosrcs list ./cmd/server --tags netgo
        gosrcs list . -f json -o files.json

    """
    try:
        config = load_config(config_path)
        if tags:
            config.build_tags = _split_tags(tags)
        if base_dir:
            config.base_dir = base_dir

        provider = GoListFileProvider(graph_file) if graph_file else None
        sources = collect_sources(directory, provider=provider, config=config)
    except GosrcsError as e:
        err_console.print(f"[red]Error:[/red] {escape(str(e))}")
        sys.exit(1)

    if output_format == "json":
        text = json.dumps(
            [{"path": s.path, "import_path": s.import_path} for s in sources],
            indent=2,
        )
    else:
        text = "\n".join(s.path for s in sources)

    if output:
        Path(output).write_text(text + "\n", encoding="utf-8")
        err_console.print(f"[green]Wrote {len(sources)} paths to {escape(output)}[/green]")
    else:
        click.echo(text)


if __name__ == "__main__":
    cli()
