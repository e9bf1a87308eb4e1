"""CLI interface for g4resolve."""

from __future__ import annotations

import logging

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.syntax import Syntax

from g4resolve.cli.commands.resolve import graph, imports, resolve
from g4resolve.config import ResolverConfig
from g4resolve.errors import ConfigError
from g4resolve.version import G4RESOLVE_VERSION

console = Console()


def _configure_logging(verbosity: int) -> None:
    """Send g4resolve log records to a rich handler on stderr."""
    if verbosity <= 0:
        return

    logger = logging.getLogger("g4resolve")
    logger.setLevel(logging.DEBUG if verbosity > 1 else logging.INFO)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(console=Console(stderr=True), show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)


@click.group()
@click.version_option(version=G4RESOLVE_VERSION, prog_name="g4resolve")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="YAML configuration file",
)
@click.option("--verbose", "-v", count=True, help="Log progress (-vv for debug output)")
@click.pass_context
def cli(ctx: click.Context, config_path: str | None, verbose: int) -> None:
    """g4resolve - Resolve imports of ANTLR grammars."""
    _configure_logging(verbose)
    try:
        ctx.obj = ResolverConfig.load(config_path)
    except ConfigError as e:
        click.echo(f"Error: {e}", err=True)
        raise click.Abort from None


@cli.command("config")
@click.pass_obj
def show_config(config: ResolverConfig) -> None:
    """Show the effective configuration."""
    yaml_str = yaml.safe_dump({"g4resolve": config.to_dict()}, default_flow_style=False, sort_keys=False)
    console.print(Syntax(yaml_str, "yaml", theme="monokai"))


# Add commands to CLI
cli.add_command(imports)
cli.add_command(resolve)
cli.add_command(graph)
