"""
Console Management - Centralized Rich console configuration.

This module provides console setup and a small colour palette shared by
every CLI output component.
"""

from dataclasses import dataclass
from typing import Optional

from rich.console import Console


@dataclass(frozen=True)
class Palette:
    """Colour names used across the CLI."""

    primary: str = "bold blue"
    accent: str = "cyan"
    success: str = "green"
    warning: str = "yellow"
    error: str = "red"
    info: str = "blue"
    muted: str = "dim"


# Global console instance
_console: Optional[Console] = None
_palette = Palette()


def setup_console(
    force_terminal: Optional[bool] = None,
    width: Optional[int] = None,
    stderr: bool = False,
) -> Console:
    """
    Set up and configure the global Rich console.

    Args:
        force_terminal: Force terminal mode detection
        width: Console width override
        stderr: Write to stderr instead of stdout

    Returns:
        Configured Rich Console instance
    """
    global _console

    console_kwargs = {
        "stderr": stderr,
        "force_terminal": force_terminal,
        "color_system": "auto",
    }
    if width is not None:
        console_kwargs["width"] = width

    _console = Console(**console_kwargs)
    return _console


def get_console() -> Console:
    """
    Get the global Rich console instance.

    Creates a default console if none exists.
    """
    global _console

    if _console is None:
        _console = setup_console()

    return _console


def get_palette() -> Palette:
    return _palette


__all__ = ["Palette", "setup_console", "get_console", "get_palette"]
