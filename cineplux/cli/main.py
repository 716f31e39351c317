"""
CLI Main Application - Typer app entry point.

This module provides the main CLI application entry point, logging
setup and command registration.
"""

import sys
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.traceback import install as install_rich_traceback

from cineplux import __version__
from cineplux.core import ConfigManager, create_default_config_files
from cineplux.core.exceptions import CinePluxError, ConfigurationError
from cineplux.ui import get_console, handle_error
from cineplux.cli.context import get_config_manager, set_config_manager, set_debug


# Create main Typer application
app = typer.Typer(
    name="cineplux",
    help="🎬 Browse, search and resolve streams from Spanish-language streaming sites",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _version_callback(value: bool) -> None:
    if value:
        get_console().print(f"[bold blue]CinePlux[/bold blue] version [green]{__version__}[/green]")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version information and exit",
        callback=_version_callback,
        is_eager=True,
    ),
    config_dir: Optional[Path] = typer.Option(
        None,
        "--config-dir",
        help="Configuration directory path",
        exists=False,
        file_okay=False,
        dir_okay=True,
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug mode with detailed logging",
        is_flag=True,
    ),
) -> None:
    """
    🎬 CinePlux - Streaming-site catalog scraper.

    Reads home pages, search results, detail pages and playable links from
    configurable providers.
    """
    try:
        _initialize_application(config_dir=config_dir, debug=debug)
    except CinePluxError as e:
        handle_error(e, "During application initialization", show_traceback=debug)
        raise typer.Exit(1)


def _initialize_application(config_dir: Optional[Path] = None, debug: bool = False) -> None:
    """
    Initialize logging and configuration.

    Args:
        config_dir: Configuration directory override
        debug: Enable debug mode
    """
    install_rich_traceback(show_locals=debug)
    set_debug(debug)

    if config_dir is None:
        config_dir = Path("config")

    if not config_dir.exists():
        create_default_config_files(config_dir)

    try:
        config_manager = ConfigManager(config_dir)
    except OSError as e:
        raise ConfigurationError(f"Failed to load configuration: {e}", str(config_dir))
    set_config_manager(config_manager)

    _setup_logging(debug, config_manager.settings.logging.level)


def _setup_logging(debug: bool = False, level_name: str = "INFO") -> None:
    """
    Set up application logging.

    Args:
        debug: Enable debug logging regardless of the configured level
        level_name: Level from settings.json
    """
    level = logging.DEBUG if debug else getattr(logging, level_name, logging.INFO)

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[
            logging.StreamHandler(sys.stderr),
        ],
    )

    # Reduce noise from third-party libraries
    if not debug:
        logging.getLogger("aiohttp").setLevel(logging.WARNING)
        logging.getLogger("asyncio").setLevel(logging.WARNING)


def _register_commands() -> None:
    """Register commands with the main app."""
    from cineplux.cli.commands import catalog, providers

    app.command(name="home")(catalog.home)
    app.command(name="search")(catalog.search)
    app.command(name="show")(catalog.show)
    app.command(name="links")(catalog.links)
    app.add_typer(providers.app, name="providers", help="🔌 Manage streaming-site providers")


_register_commands()


def cli_main() -> None:
    """
    Main CLI entry point for the cineplux command.
    """
    try:
        app()
    except KeyboardInterrupt:
        get_console().print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)
    except Exception as e:
        handle_error(e, "Unexpected error in CLI")
        sys.exit(1)


__all__ = [
    "app",
    "cli_main",
    "get_config_manager",
]
