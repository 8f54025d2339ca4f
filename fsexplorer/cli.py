"""
Command-Line Interface

Usage:
    # Start in the current directory
    fsexplorer

    # Start somewhere else, with debug logging
    fsexplorer --start-dir /var/log --log-level DEBUG
"""

from __future__ import annotations

import logging
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from . import __version__
from .config import ExplorerOptions
from .errors import ErrnoException
from .explorer import Explorer
from .shell import MenuShell
from .walker import DirectoryWalker

__all__ = ["main", "app"]

app = typer.Typer(
    name="fsexplorer",
    help="Interactive file explorer for POSIX directory trees",
    add_completion=False,
)
console = Console()


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"fsexplorer {__version__}")
        raise typer.Exit()


def _configure_logging(level: int) -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )
    logging.getLogger("fsexplorer").setLevel(level)


@app.command()
def run(
    start_dir: Optional[str] = typer.Option(
        None,
        "--start-dir", "-d",
        help="Directory to start in (env: FSEXPLORER_START_DIR)",
    ),
    max_depth: Optional[int] = typer.Option(
        None,
        "--max-depth",
        min=0,
        help="Depth limit for recursive search (env: FSEXPLORER_MAX_DEPTH)",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level", "-l",
        help="Logging level (env: FSEXPLORER_LOG_LEVEL)",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """Browse and manipulate files from a numbered menu."""
    try:
        options = ExplorerOptions.from_env(
            start_dir=start_dir, max_depth=max_depth, log_level=log_level
        )
    except ValueError as e:
        console.print(f"[red]Configuration error:[/] {escape(str(e))}")
        raise typer.Exit(code=2)

    _configure_logging(options.log_level_number)

    try:
        explorer = Explorer(options.start_dir, walker=DirectoryWalker(options.max_depth))
    except ErrnoException as e:
        console.print(f"[red]Cannot start in {escape(options.start_dir)}:[/] {escape(str(e))}")
        raise typer.Exit(code=1)

    MenuShell(explorer, console=console).run()


def main() -> None:
    """Entry point for the CLI."""
    app()
