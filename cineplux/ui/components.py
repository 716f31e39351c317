"""
UI Components - Rich tables and panels for catalog data.
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence

from rich.panel import Panel
from rich.table import Table

from cineplux.core.models import CatalogEntry, DetailRecord, EpisodeRef, StreamLink, SubtitleTrack
from cineplux.ui.console import get_palette


class UIComponents:
    """Collection of standardized UI components with consistent styling."""

    def __init__(self):
        self.palette = get_palette()

    def catalog_table(self, entries: Sequence[CatalogEntry], title: str, show_index: bool = True) -> Table:
        """Table of catalog entries: title, kind and detail URL."""
        table = Table(title=title, title_style=self.palette.primary, show_lines=False)
        if show_index:
            table.add_column("#", style=self.palette.muted, justify="right")
        table.add_column("Title", style="bold")
        table.add_column("Kind", style=self.palette.accent)
        table.add_column("URL", style=self.palette.info, overflow="fold")

        for index, entry in enumerate(entries, 1):
            row = [entry.title, entry.kind.value, entry.detail_url]
            if show_index:
                row.insert(0, str(index))
            table.add_row(*row)
        return table

    def detail_panel(self, record: DetailRecord) -> Panel:
        """Panel summarizing a detail record."""
        lines = [f"[{self.palette.primary}]{record.title}[/{self.palette.primary}]"]
        meta = [record.kind.value]
        if record.year:
            meta.append(str(record.year))
        if record.tags:
            meta.append(", ".join(record.tags))
        lines.append(f"[{self.palette.muted}]{' · '.join(meta)}[/{self.palette.muted}]")

        if record.synopsis:
            lines.append(f"\n{record.synopsis}")
        if record.poster_url:
            lines.append(f"\n[dim]Poster:[/dim] {record.poster_url}")
        if record.backdrop_url:
            lines.append(f"[dim]Backdrop:[/dim] {record.backdrop_url}")

        return Panel("\n".join(lines), title="🎬 Detail", border_style=self.palette.accent, padding=(1, 2))

    def episodes_table(self, episodes: Iterable[EpisodeRef]) -> Table:
        table = Table(title="Episodes", title_style=self.palette.primary)
        table.add_column("S", justify="right")
        table.add_column("E", justify="right")
        table.add_column("Title")
        table.add_column("URL", style=self.palette.info, overflow="fold")

        for episode in episodes:
            table.add_row(
                "" if episode.season is None else str(episode.season),
                "?" if episode.episode is None else str(episode.episode),
                episode.title or "",
                episode.episode_url,
            )
        return table

    def links_table(self, links: Sequence[StreamLink], subtitles: Sequence[SubtitleTrack]) -> Table:
        table = Table(title="Streams", title_style=self.palette.primary)
        table.add_column("Source", style=self.palette.accent)
        table.add_column("Quality", justify="right")
        table.add_column("Type")
        table.add_column("URL", style=self.palette.info, overflow="fold")

        for link in links:
            table.add_row(
                link.source,
                f"{link.quality}p" if link.quality else "-",
                "HLS" if link.is_adaptive else "file",
                link.url,
            )
        for subtitle in subtitles:
            table.add_row("subtitle", "-", subtitle.language, subtitle.url)
        return table

    def providers_table(self, status: Dict[str, Any]) -> Table:
        """Table of configured providers from ``ProviderManager.get_status``."""
        table = Table(title="Providers", title_style=self.palette.primary)
        table.add_column("Key", style="bold")
        table.add_column("Name")
        table.add_column("Engine", style=self.palette.muted)
        table.add_column("Priority", justify="right")
        table.add_column("Enabled", justify="center")
        table.add_column("Base URL", style=self.palette.info)

        providers: Dict[str, Dict[str, Any]] = status.get("providers", {})
        for key, info in sorted(providers.items(), key=lambda item: item[1]["priority"]):
            enabled = (
                f"[{self.palette.success}]yes[/{self.palette.success}]"
                if info["enabled"]
                else f"[{self.palette.error}]no[/{self.palette.error}]"
            )
            table.add_row(key, info["name"], info["engine"], str(info["priority"]), enabled, info["base_url"])
        return table


_components: Optional[UIComponents] = None


def get_components() -> UIComponents:
    global _components
    if _components is None:
        _components = UIComponents()
    return _components


__all__ = ["UIComponents", "get_components"]
