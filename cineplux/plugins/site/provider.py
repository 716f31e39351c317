"""
Site Provider - Generic configuration-driven provider.

Implements the four entry points on top of the shared extraction
pipeline. Everything site-specific comes from the ``ProviderConfig``
record: section URLs, container selectors, field chains, markers and link
configuration.
"""

import asyncio
import logging
from collections import OrderedDict
from typing import Callable, Dict, List, Optional, Tuple
from urllib.parse import quote_plus

from bs4 import BeautifulSoup

from cineplux.core.config_schemas import SectionConfig
from cineplux.core.exceptions import NetworkError, NothingLoadedError, ProviderError
from cineplux.core.models import (
    CatalogEntry,
    DetailRecord,
    HomePage,
    HomeSection,
    ListingOutcome,
    MainPageRequest,
    StreamLink,
    SubtitleTrack,
)
from cineplux.core.results import Found, StageResult, TransientError
from cineplux.plugins.base import BaseProvider
from cineplux.plugins.common.detail import extract_detail, listing_policy_for
from cineplux.plugins.common.listing import (
    ListingPolicy,
    SectionSpec,
    extract_listing,
    extract_sections,
)


logger = logging.getLogger(__name__)

HOME_SECTION_NAME = "Inicio"


class SiteProvider(BaseProvider):
    """
    Provider driven entirely by its configuration record.

    Subclasses override ``adapt_entry`` or the entry points themselves for
    quirks that cannot be expressed as data.
    """

    @property
    def policy(self) -> ListingPolicy:
        return listing_policy_for(self.config)

    def adapt_entry(self, entry: CatalogEntry) -> Optional[CatalogEntry]:
        """Hook to rewrite or drop an extracted entry. Identity by default."""
        return entry

    def _adapt_all(self, entries) -> Tuple[CatalogEntry, ...]:
        adapted = []
        seen = set()
        for entry in entries:
            entry = self.adapt_entry(entry)
            if entry is not None and entry.detail_url not in seen:
                seen.add(entry.detail_url)
                adapted.append(entry)
        return tuple(adapted)

    # Home page

    def _sections_for(self, request: Optional[MainPageRequest]) -> List[SectionConfig]:
        sections = list(self.config.sections) or [SectionConfig(name=HOME_SECTION_NAME)]
        if request is None:
            return sections

        matching = [section for section in sections if section.name == request.name]
        if matching:
            return matching
        return [SectionConfig(name=request.name, url=request.data)]

    def section_url(self, section: SectionConfig, page: int = 1) -> str:
        """Render a section URL template; no template means the home page."""
        if not section.url:
            return self.base_url
        return section.url.format(base_url=self.base_url, page=page)

    async def _fetch_document(self, url: str) -> StageResult[BeautifulSoup]:
        try:
            response = await self.fetch(url)
            return Found(response.document)
        except NetworkError as e:
            return TransientError(f"failed to fetch {url}", e)

    def _section_spec(self, section: SectionConfig) -> SectionSpec:
        return SectionSpec(
            name=section.name,
            containers=tuple(section.containers or self.config.listing_containers),
            kind=section.kind,
            limit=section.limit,
        )

    async def get_main_page(self, page: int = 1, request: Optional[MainPageRequest] = None) -> HomePage:
        sections = self._sections_for(request)

        # Sections sharing a URL share one fetch
        by_url: "OrderedDict[str, List[SectionConfig]]" = OrderedDict()
        for section in sections:
            try:
                url = self.section_url(section, page)
            except (KeyError, IndexError, ValueError) as e:
                self.logger.warning(f"Bad section URL template for '{section.name}': {e}")
                continue
            by_url.setdefault(url, []).append(section)

        urls = list(by_url)
        results = await asyncio.gather(*(self._fetch_document(url) for url in urls))

        found: Dict[str, HomeSection] = {}
        failures: List[TransientError] = []
        for url, result in zip(urls, results):
            if isinstance(result, TransientError):
                self.logger.warning(f"{self.name}: {result.reason}: {result.error}")
                failures.append(result)
                continue

            listing = extract_sections(
                result.value,
                [self._section_spec(section) for section in by_url[url]],
                self.base_url,
                self.policy,
                logger=self.logger,
            )
            for home_section in listing.sections:
                entries = self._adapt_all(home_section.entries)
                if entries:
                    found[home_section.name] = HomeSection(name=home_section.name, entries=entries)

        ordered = tuple(found[section.name] for section in sections if section.name in found)
        if ordered:
            return HomePage(sections=ordered)

        if request is None and self.config.home_fallback_containers:
            fallback = await self._home_fallback()
            if fallback is not None:
                return HomePage(sections=(fallback,))

        if failures and len(failures) == len(urls):
            error = failures[0].error
            if isinstance(error, NetworkError):
                raise error
        raise NothingLoadedError(
            f"{self.name}: nothing could be loaded from the home page",
            provider_name=self.name,
        )

    async def _home_fallback(self) -> Optional[HomeSection]:
        result = await self._fetch_document(self.base_url)
        if not isinstance(result, Found):
            return None

        listing = extract_listing(
            result.value,
            self.config.home_fallback_containers,
            self.base_url,
            self.policy,
            limit=30,
            logger=self.logger,
        )
        entries = self._adapt_all(listing.entries)
        if not entries:
            return None
        self.logger.info(f"{self.name}: using home page fallback section ({len(entries)} entries)")
        return HomeSection(name=HOME_SECTION_NAME, entries=entries)

    # Search

    def search_urls(self, query: str) -> List[str]:
        encoded = quote_plus(query.strip())
        return [template.format(base_url=self.base_url, query=encoded) for template in self.config.search_urls]

    async def search(self, query: str) -> List[CatalogEntry]:
        if not query or not query.strip():
            raise ProviderError("Search query cannot be empty", provider_name=self.name)

        saw_empty = False
        last_error: Optional[NetworkError] = None
        fetched_any = False

        for url in self.search_urls(query):
            try:
                response = await self.fetch(url)
            except NetworkError as e:
                self.logger.warning(f"{self.name}: search request failed for {url}: {e}")
                last_error = e
                continue

            fetched_any = True
            listing = extract_listing(
                response.document,
                self.config.listing_containers,
                self.base_url,
                self.policy,
                logger=self.logger,
            )
            if listing.ok:
                entries = list(self._adapt_all(listing.entries))
                self.logger.info(
                    f"{self.name}: {len(entries)} results for '{query}'",
                    extra={"provider": self.name, "query": query, "count": len(entries)},
                )
                return entries
            if listing.outcome == ListingOutcome.EMPTY:
                saw_empty = True

        if saw_empty:
            return []
        if not fetched_any and last_error is not None:
            raise last_error
        raise NothingLoadedError(
            f"{self.name}: search results for '{query}' could not be read",
            provider_name=self.name,
        )

    # Detail and links

    async def load(self, url: str) -> Optional[DetailRecord]:
        response = await self.fetch(url)
        record = extract_detail(response.document, self.config, url, logger=self.logger)
        if record is not None:
            record = self.refine_detail(record, response.document)
        return record

    def refine_detail(self, record: DetailRecord, document: BeautifulSoup) -> DetailRecord:
        """Hook for providers that recover extra detail data. Identity by default."""
        return record

    async def load_links(
        self,
        data: str,
        is_casting: bool,
        on_subtitle: Callable[[SubtitleTrack], None],
        on_link: Callable[[StreamLink], None],
    ) -> bool:
        response = await self.fetch(data)
        return await self.link_resolver().resolve_links(
            response.document, data, self.registry, on_subtitle, on_link
        )


__all__ = ["SiteProvider", "HOME_SECTION_NAME"]
