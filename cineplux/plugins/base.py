"""
Base Provider Interface - Abstract base class for streaming-site providers.

This module defines the interface every provider implements: the four
entry points the host calls (home page, search, detail, links) plus the
shared HTTP plumbing built from the provider's configuration record.
"""

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, Dict, List, Optional

from pydantic import BaseModel, Field

from cineplux.core.config_schemas import HttpSettings, ProviderConfig
from cineplux.core.exceptions import NetworkError
from cineplux.core.http import HttpClient, HttpResponse
from cineplux.core.models import (
    CatalogEntry,
    ContentKind,
    DetailRecord,
    HomePage,
    MainPageRequest,
    StreamLink,
    SubtitleTrack,
)
from cineplux.plugins.common.links import LinkResolver

if TYPE_CHECKING:
    from cineplux.extractors.registry import ExtractorRegistry


logger = logging.getLogger(__name__)


class ProviderMetadata(BaseModel):
    """Metadata information for a provider."""

    name: str = Field(..., description="Provider display name")
    version: str = Field(default="1.0.0", description="Provider version")
    lang: str = Field(default="es", description="Content language")
    description: str = Field(default="", description="Provider description")
    website: Optional[str] = Field(None, description="Site origin")
    supported_kinds: List[ContentKind] = Field(default_factory=list)
    has_main_page: bool = Field(default=True)


class BaseProvider(ABC):
    """
    Abstract base class for providers.

    A provider is built from a ``ProviderConfig``. It may share an
    ``HttpClient`` with other providers; when none is given it creates and
    owns one, and closes it in ``cleanup``.
    """

    def __init__(
        self,
        config: ProviderConfig,
        http: Optional[HttpClient] = None,
        registry: Optional["ExtractorRegistry"] = None,
        settings: Optional[HttpSettings] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the provider with configuration.

        Args:
            config: Provider configuration record
            http: Shared HTTP client (created on demand when None)
            registry: Extractor registry for link hand-off
            settings: HTTP settings used when the client is created here
            logger: Logger override, mainly for tests
        """
        self.config = config
        self.settings = settings or HttpSettings()
        self._owns_http = http is None
        self.http = http or HttpClient(self.settings)
        self._registry = registry

        self.logger = logger or logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    def metadata(self) -> ProviderMetadata:
        """Get provider metadata information."""
        return ProviderMetadata(
            name=self.config.name,
            lang=self.config.lang,
            description=self.config.description or "",
            website=self.config.base_url,
            supported_kinds=list(self.config.supported_kinds),
            has_main_page=True,
        )

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def base_url(self) -> str:
        """Get the base URL of the site."""
        return self.config.base_url

    @property
    def registry(self) -> "ExtractorRegistry":
        """Extractor registry (the built-in one unless injected)."""
        if self._registry is None:
            from cineplux.extractors.registry import default_registry

            self._registry = default_registry(self.http)
        return self._registry

    @property
    def request_timeout(self) -> float:
        return float(self.config.timeout or self.settings.timeout)

    def link_resolver(self) -> LinkResolver:
        """Link pipeline bound to this provider's link configuration."""
        return LinkResolver(
            self.http,
            self.config.links,
            self.base_url,
            headers=self.config.headers,
            max_concurrency=self.settings.max_concurrency,
            timeout=self.request_timeout,
            logger=self.logger,
        )

    async def fetch(self, url: str, headers: Optional[Dict[str, str]] = None) -> HttpResponse:
        """
        GET a page with the provider headers and timeout.

        Raises:
            NetworkError: If the page cannot be fetched
        """
        merged = {**self.config.headers, **(headers or {})}
        return await self.http.get(url, headers=merged or None, timeout=self.request_timeout)

    async def post(
        self, url: str, data: Optional[Dict[str, str]] = None, headers: Optional[Dict[str, str]] = None
    ) -> HttpResponse:
        """POST form data with the provider headers and timeout."""
        merged = {**self.config.headers, **(headers or {})}
        return await self.http.post(url, headers=merged or None, data=data, timeout=self.request_timeout)

    @abstractmethod
    async def get_main_page(self, page: int = 1, request: Optional[MainPageRequest] = None) -> HomePage:
        """
        Get the home page sections.

        Args:
            page: 1-based page number for paginated sections
            request: Restrict the result to one section

        Returns:
            HomePage with the sections that produced entries

        Raises:
            NothingLoadedError: If every section yielded zero entries
        """
        pass

    @abstractmethod
    async def search(self, query: str) -> List[CatalogEntry]:
        """
        Search the site catalog.

        Args:
            query: Search query string

        Returns:
            Matching entries (empty when the site reports no results)

        Raises:
            NothingLoadedError: If the results page could not be read
        """
        pass

    @abstractmethod
    async def load(self, url: str) -> Optional[DetailRecord]:
        """
        Load the detail record of a title.

        Args:
            url: Absolute detail page URL

        Returns:
            DetailRecord, or None when the page has no recognizable title
        """
        pass

    @abstractmethod
    async def load_links(
        self,
        data: str,
        is_casting: bool,
        on_subtitle: Callable[[SubtitleTrack], None],
        on_link: Callable[[StreamLink], None],
    ) -> bool:
        """
        Discover playable links for a movie or episode page.

        Args:
            data: Player page URL
            is_casting: Host is casting to another device
            on_subtitle: Callback receiving subtitle tracks
            on_link: Callback receiving playable streams

        Returns:
            True if at least one candidate link was handed off
        """
        pass

    async def validate_connection(self) -> bool:
        """
        Validate that the provider can reach its site.

        Returns:
            True if the home page answers, False otherwise
        """
        try:
            response = await self.fetch(self.base_url)
            return response.ok
        except NetworkError as e:
            self.logger.error(f"Connection validation failed: {e}")
            return False

    async def cleanup(self) -> None:
        """Clean up resources used by the provider."""
        if self._owns_http:
            await self.http.close()

    def __str__(self) -> str:
        return f"{self.metadata.name} v{self.metadata.version}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}')"


# Export base provider class and metadata
__all__ = ["BaseProvider", "ProviderMetadata"]
