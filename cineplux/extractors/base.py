"""
Base Extractor - Abstract interface for hoster extractors.

An extractor turns one candidate URL (an embed page or a direct media
file) into playable stream descriptors and optional subtitle tracks.
"""

import logging
from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field

from cineplux.core.http import HttpClient
from cineplux.core.models import StreamLink, SubtitleTrack
from cineplux.plugins.common.urls import host_of


logger = logging.getLogger(__name__)


class ExtractionResult(BaseModel):
    """Streams and subtitles produced for one candidate URL."""

    streams: List[StreamLink] = Field(default_factory=list)
    subtitles: List[SubtitleTrack] = Field(default_factory=list)


class BaseExtractor(ABC):
    """
    Abstract base class for extractors.

    Subclasses declare the host names they handle in ``domains`` (matched
    against the URL host and its parent domains) or override ``can_handle``.
    """

    name: str = "base"
    domains: Tuple[str, ...] = ()

    def __init__(self, http: HttpClient):
        self.http = http
        self.logger = logging.getLogger(f"cineplux.extractors.{self.name}")

    def can_handle(self, url: str) -> bool:
        host = host_of(url) or ""
        return any(host == domain or host.endswith(f".{domain}") for domain in self.domains)

    @abstractmethod
    async def extract(self, url: str, referer: Optional[str] = None) -> ExtractionResult:
        """
        Extract playable streams from a candidate URL.

        Args:
            url: Candidate URL
            referer: Page the candidate was found on

        Returns:
            ExtractionResult (possibly empty)

        Raises:
            NetworkError: When the hoster page cannot be fetched
            ExtractionError: When the page no longer has the expected shape
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}')"


__all__ = ["ExtractionResult", "BaseExtractor"]
