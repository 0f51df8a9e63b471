# SPDX-License-Identifier: MIT
"""CLI entry point for the hugo-mods command."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from ..client import Client
from ..config import ProjectConfig, find_project_root
from ..module import ModsError


class Context:
    """CLI context object passed to commands."""

    def __init__(self) -> None:
        self.config: Optional[ProjectConfig] = None
        self.verbose: bool = False
        self.project_dir: Optional[Path] = None

    def load_config(self) -> ProjectConfig:
        """Load configuration, caching the result."""
        if self.config is None:
            project_dir = self.project_dir or find_project_root()
            self.config = ProjectConfig.from_dir(project_dir)
        return self.config

    def make_client(self, ignore_vendor: bool = False) -> Client:
        """Create a module client for the current project."""
        config = self.load_config()
        return Client(
            config.project_dir,
            themes_dir=config.themes_dir,
            imports=config.imports,
            ignore_vendor=ignore_vendor,
        )


pass_context = click.make_pass_decorator(Context, ensure=True)


def echo_error(message: str) -> None:
    """Print an error message to stderr."""
    click.secho(f"Error: {message}", fg="red", err=True)


def echo_success(message: str) -> None:
    """Print a success message."""
    click.secho(message, fg="green")


def echo_info(message: str) -> None:
    """Print an info message."""
    click.echo(message)


def echo_warning(message: str) -> None:
    """Print a warning message."""
    click.secho(f"Warning: {message}", fg="yellow", err=True)


def fail(error: Exception) -> None:
    """Report an error and exit with status 1."""
    echo_error(str(error))
    raise SystemExit(1)


@click.group()
@click.version_option(package_name="hugo-mods")
@click.option(
    "-v",
    "--verbose",
    is_flag=True,
    help="Enable verbose output.",
)
@click.option(
    "-C",
    "--directory",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Change to directory before running command.",
)
@pass_context
def cli(ctx: Context, verbose: bool, directory: Optional[Path]) -> None:
    """Hugo Modules management tool.

    Collect, vendor and tidy the theme components of a Hugo project.

    \b
    Examples:
        hugo-mods list
        hugo-mods get github.com/gohugoio/hugo-mod-bootstrap-scss
        hugo-mods vendor
        hugo-mods tidy
    """
    ctx.verbose = verbose
    ctx.project_dir = directory
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")


# Import and register commands
from .commands import init, get, graph, list_modules, vendor, tidy

cli.add_command(init.init)
cli.add_command(get.get)
cli.add_command(graph.graph)
cli.add_command(list_modules.list_modules)
cli.add_command(vendor.vendor)
cli.add_command(tidy.tidy)


def main() -> None:
    """Main entry point for the CLI."""
    try:
        cli()
    except ModsError as e:
        echo_error(str(e))
        sys.exit(1)
    except FileNotFoundError as e:
        echo_error(str(e))
        sys.exit(1)
    except Exception as e:
        echo_error(f"Unexpected error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
