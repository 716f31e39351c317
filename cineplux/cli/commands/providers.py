"""
Providers Command - List, enable, disable and check providers.
"""

from typing import Optional

import typer

from cineplux.cli.commands.catalog import run_with_manager
from cineplux.cli.context import get_config_manager
from cineplux.core.exceptions import ConfigurationError
from cineplux.core.provider_manager import ProviderManager
from cineplux.ui import display_info, display_warning, get_components, get_console, get_palette, handle_error

# Create providers command group
app = typer.Typer(
    name="providers",
    help="🔌 Manage streaming-site providers",
    invoke_without_command=True,
)


@app.callback()
def providers(ctx: typer.Context) -> None:
    """🔌 List providers when no subcommand is given."""
    if ctx.invoked_subcommand is None:
        list_providers(enabled_only=False)


@app.command(name="list")
def list_providers(
    enabled_only: bool = typer.Option(False, "--enabled", "-e", help="Show only enabled providers"),
) -> None:
    """
    📋 List configured providers.

    Examples:

        cineplux providers list

        cineplux providers list --enabled
    """
    manager = ProviderManager(get_config_manager())
    status = manager.get_status()
    if enabled_only:
        status["providers"] = {
            key: info for key, info in status["providers"].items() if info["enabled"]
        }
    get_console().print(get_components().providers_table(status))


@app.command(name="enable")
def enable_provider(provider: str = typer.Argument(..., help="Provider key to enable")) -> None:
    """✅ Enable a provider."""
    try:
        get_config_manager().enable_provider(provider)
    except ConfigurationError as e:
        handle_error(e, "Failed to enable provider")
        raise typer.Exit(1)
    display_info(f"Provider '{provider}' enabled")


@app.command(name="disable")
def disable_provider(provider: str = typer.Argument(..., help="Provider key to disable")) -> None:
    """⛔ Disable a provider."""
    try:
        get_config_manager().disable_provider(provider)
    except ConfigurationError as e:
        handle_error(e, "Failed to disable provider")
        raise typer.Exit(1)
    display_info(f"Provider '{provider}' disabled")


@app.command(name="check")
def check_providers(
    provider: Optional[str] = typer.Argument(
        None, help="Provider key to check (checks all enabled if not specified)"
    ),
) -> None:
    """
    🧪 Check that providers can reach their sites.

    Examples:

        cineplux providers check

        cineplux providers check cuevana
    """
    keys = [provider] if provider else None
    results = run_with_manager(lambda manager: manager.check_connections(keys))

    if not results:
        display_warning("No providers to check")
        return

    palette = get_palette()
    for key, ok in results.items():
        style = palette.success if ok else palette.error
        label = "ok" if ok else "unreachable"
        get_console().print(f"{key}: [{style}]{label}[/{style}]")

    if not all(results.values()):
        raise typer.Exit(1)


__all__ = ["app"]
