"""
AnimeFLV Provider - Anime provider for animeflv.

Home sections and links use the generic pipeline; search goes through
the site's JSON API and episodes come from an inline script.
"""

import logging
from typing import List, Optional

from bs4 import BeautifulSoup

from cineplux.core.exceptions import NothingLoadedError, ProviderError
from cineplux.core.http import AJAX_HEADERS
from cineplux.core.models import CatalogEntry, ContentKind, DetailRecord
from cineplux.plugins.animeflv.parser import AnimeflvParser
from cineplux.plugins.common.selectors import select_first, read_value
from cineplux.plugins.site.provider import SiteProvider


logger = logging.getLogger(__name__)


class AnimeflvProvider(SiteProvider):
    """Provider for animeflv with JSON search and script-based episodes."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.parser = AnimeflvParser(self.base_url)

    def adapt_entry(self, entry: CatalogEntry) -> Optional[CatalogEntry]:
        # Latest-episode cards link to /ver/<slug>-<n>; list the series instead
        if "/ver/" not in entry.detail_url:
            return entry
        return entry.model_copy(update={"detail_url": self.parser.series_url(entry.detail_url)})

    async def search(self, query: str) -> List[CatalogEntry]:
        if not query or not query.strip():
            raise ProviderError("Search query cannot be empty", provider_name=self.name)

        response = await self.post(
            f"{self.base_url}/api/animes/search",
            data={"value": query.strip()},
            headers={**AJAX_HEADERS, "Referer": self.base_url},
        )

        try:
            results = self.parser.parse_search_results(response.json())
        except ValueError as e:
            raise NothingLoadedError(
                f"{self.name}: unreadable search response: {e}",
                provider_name=self.name,
            )

        self.logger.info(f"{self.name}: {len(results)} results for '{query}'")
        return results

    def refine_detail(self, record: DetailRecord, document: BeautifulSoup) -> DetailRecord:
        episodes = record.episodes or tuple(self.parser.parse_episodes(document, record.url))

        type_element = select_first(document, "span.Type")
        type_text = read_value(type_element, "text") if type_element is not None else None
        kind = self.parser.kind_from_type(type_text)
        if kind == ContentKind.MOVIE and len(episodes) > 1:
            kind = ContentKind.ANIME

        return record.model_copy(update={"episodes": episodes, "kind": kind})


__all__ = ["AnimeflvProvider"]
