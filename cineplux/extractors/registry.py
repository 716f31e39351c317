"""
Extractor Registry - Routes candidate URLs to the extractor for their host.
"""

import logging
from typing import Callable, Iterable, List, Optional

from cineplux.core.exceptions import ExtractionError
from cineplux.core.http import HttpClient
from cineplux.core.models import StreamLink, SubtitleTrack
from cineplux.extractors.base import BaseExtractor
from cineplux.extractors.direct import DirectMediaExtractor
from cineplux.extractors.streamtape import StreamtapeExtractor
from cineplux.plugins.common.urls import host_of


logger = logging.getLogger(__name__)


class ExtractorRegistry:
    """
    Ordered collection of extractors.

    The first registered extractor whose ``can_handle`` accepts a URL is
    used; extractors registered later take precedence over the defaults.
    """

    def __init__(self, extractors: Optional[Iterable[BaseExtractor]] = None):
        self._extractors: List[BaseExtractor] = list(extractors or [])

    def register(self, extractor: BaseExtractor) -> None:
        """Register an extractor ahead of the existing ones."""
        self._extractors.insert(0, extractor)
        logger.debug(f"Registered extractor {extractor.name}")

    @property
    def extractors(self) -> List[BaseExtractor]:
        return list(self._extractors)

    def find(self, url: str) -> Optional[BaseExtractor]:
        for extractor in self._extractors:
            if extractor.can_handle(url):
                return extractor
        return None

    async def resolve(
        self,
        url: str,
        referer: Optional[str],
        on_subtitle: Callable[[SubtitleTrack], None],
        on_link: Callable[[StreamLink], None],
    ) -> int:
        """
        Resolve one candidate URL and emit its streams and subtitles.

        Returns:
            Number of streams emitted

        Raises:
            ExtractionError: When no extractor handles the URL host
        """
        extractor = self.find(url)
        if extractor is None:
            raise ExtractionError(f"No extractor for host {host_of(url)}", url=url)

        result = await extractor.extract(url, referer)
        for subtitle in result.subtitles:
            on_subtitle(subtitle)
        for stream in result.streams:
            on_link(stream)

        if not result.streams:
            logger.debug(f"Extractor {extractor.name} produced no streams for {url}")
        return len(result.streams)


def default_registry(http: HttpClient) -> ExtractorRegistry:
    """Registry with the built-in extractors."""
    return ExtractorRegistry([StreamtapeExtractor(http), DirectMediaExtractor(http)])


__all__ = ["ExtractorRegistry", "default_registry"]
