"""
CLI Commands - Command implementations for the CinePlux CLI.
"""

from cineplux.cli.commands import catalog, providers

__all__ = ["catalog", "providers"]
