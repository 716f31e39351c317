"""
CLI Layer - Typer application and commands.
"""

from cineplux.cli.main import app, cli_main

__all__ = ["app", "cli_main"]
