"""
Catalog Commands - Home page, search, detail and link lookups.

Each command builds a ProviderManager for the duration of one call and
renders the result with Rich tables.
"""

import asyncio
from typing import Awaitable, Callable, List, Optional, TypeVar

import typer

from cineplux.cli.context import get_config_manager, is_debug
from cineplux.core.exceptions import CinePluxError
from cineplux.core.models import StreamLink, SubtitleTrack
from cineplux.core.provider_manager import ProviderManager
from cineplux.ui import display_info, display_warning, get_components, get_console, handle_error


T = TypeVar("T")


def run_with_manager(operation: Callable[[ProviderManager], Awaitable[T]]) -> T:
    """Run an async operation with a provider manager, cleaning up afterwards."""

    async def runner() -> T:
        manager = ProviderManager(get_config_manager())
        try:
            return await operation(manager)
        finally:
            await manager.cleanup()

    return asyncio.run(runner())


def _fail(error: Exception, context: str) -> None:
    handle_error(error, context, show_traceback=is_debug())
    raise typer.Exit(1)


def home(
    provider: str = typer.Argument(..., help="Provider key, e.g. cuevana"),
    page: int = typer.Option(1, "--page", "-p", min=1, help="Page number for paginated sections"),
) -> None:
    """
    🏠 Show the home page sections of a provider.

    Examples:

        cineplux home cuevana

        cineplux home cinecalidad --page 2
    """

    async def operation(manager: ProviderManager):
        instance = await manager.get_provider(provider)
        return await instance.get_main_page(page)

    try:
        home_page = run_with_manager(operation)
    except CinePluxError as e:
        _fail(e, f"Loading home page of {provider}")
        return

    console = get_console()
    components = get_components()
    for section in home_page.sections:
        console.print(components.catalog_table(section.entries, title=section.name))


def search(
    query: str = typer.Argument(..., help="Title to search for"),
    provider: Optional[List[str]] = typer.Option(
        None, "--provider", "-p", help="Search only these providers (repeatable)"
    ),
    limit: Optional[int] = typer.Option(None, "--limit", "-l", min=1, help="Rows shown per provider"),
) -> None:
    """
    🔍 Search every enabled provider concurrently.

    Examples:

        cineplux search "la casa de papel"

        cineplux search naruto --provider animeflv
    """

    async def operation(manager: ProviderManager):
        return await manager.search_all(query, providers=provider or None)

    try:
        results = run_with_manager(operation)
    except CinePluxError as e:
        _fail(e, "Searching providers")
        return

    if not results:
        display_warning("No providers available for this search")
        return

    console = get_console()
    components = get_components()
    total = 0
    for key, entries in results.items():
        if not entries:
            continue
        total += len(entries)
        shown = entries[:limit] if limit else entries
        console.print(components.catalog_table(shown, title=f"{key} ({len(entries)})"))

    if total == 0:
        display_info(f"No results found for '{query}'")


def show(
    provider: str = typer.Argument(..., help="Provider key"),
    url: str = typer.Argument(..., help="Detail page URL"),
) -> None:
    """
    🎬 Show the detail record and episode list of a title.
    """

    async def operation(manager: ProviderManager):
        instance = await manager.get_provider(provider)
        return await instance.load(url)

    try:
        record = run_with_manager(operation)
    except CinePluxError as e:
        _fail(e, f"Loading {url}")
        return

    if record is None:
        display_warning(f"No title could be read from {url}")
        raise typer.Exit(1)

    console = get_console()
    components = get_components()
    console.print(components.detail_panel(record))
    if record.episodes:
        console.print(components.episodes_table(record.episodes))
    if record.recommendations:
        console.print(components.catalog_table(record.recommendations, title="Recommendations"))


def links(
    provider: str = typer.Argument(..., help="Provider key"),
    url: str = typer.Argument(..., help="Movie or episode page URL"),
) -> None:
    """
    🎞️  Resolve playable links for a movie or episode page.
    """
    streams: List[StreamLink] = []
    subtitles: List[SubtitleTrack] = []

    async def operation(manager: ProviderManager) -> bool:
        instance = await manager.get_provider(provider)
        return await instance.load_links(url, False, subtitles.append, streams.append)

    try:
        handed_off = run_with_manager(operation)
    except CinePluxError as e:
        _fail(e, f"Resolving links for {url}")
        return

    if not handed_off:
        display_warning(f"No candidate links found on {url}")
        raise typer.Exit(1)

    if not streams and not subtitles:
        display_info("Candidates were found but no extractor produced a stream")
        return

    get_console().print(get_components().links_table(streams, subtitles))


__all__ = ["run_with_manager", "home", "search", "show", "links"]
