"""
Configuration Schemas - Pydantic models for configuration validation.

This module defines the data structures and validation rules for
application settings and provider configurations. A provider is a data
value: its base URL, selector chains, path markers and endpoint templates
are all described here, so adding a site does not require new code.
"""

import logging
import re
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from cineplux.core.models import ContentKind, SelectorChain


logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


class HttpSettings(BaseModel):
    """Outbound HTTP configuration shared by every provider."""

    timeout: int = Field(
        default=60,
        ge=5,
        le=300,
        description="Per-request timeout in seconds"
    )
    max_retries: int = Field(
        default=2,
        ge=0,
        le=10,
        description="Retry attempts for transport failures"
    )
    retry_delay: float = Field(
        default=1.0,
        ge=0.0,
        le=30.0,
        description="Base delay between retries in seconds"
    )
    rate_limit: float = Field(
        default=0.0,
        ge=0.0,
        le=10.0,
        description="Minimum seconds between requests (0 disables)"
    )
    max_concurrency: int = Field(
        default=8,
        ge=1,
        le=64,
        description="Maximum concurrent follow-up fetches per pipeline"
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        description="User-Agent header sent with every request"
    )


class SearchSettings(BaseModel):
    """Search-related configuration settings."""

    min_query_length: int = Field(
        default=2,
        ge=1,
        le=10,
        description="Minimum search query length"
    )
    max_results_per_provider: int = Field(
        default=100,
        ge=1,
        le=500,
        description="Maximum results kept per provider"
    )


class LoggingSettings(BaseModel):
    """Logging configuration settings."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level"
    )


class AppSettings(BaseModel):
    """Main application settings container."""

    http: HttpSettings = Field(default_factory=HttpSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


class ListingFields(BaseModel):
    """Selector chains for the fields of one listing item."""

    title: SelectorChain = Field(
        default_factory=lambda: SelectorChain.of(
            "h2.Title", "h3.Title", "h2", "h3", ".title", "@title"
        )
    )
    link: SelectorChain = Field(
        default_factory=lambda: SelectorChain.of("a@href", "@href")
    )
    poster: SelectorChain = Field(
        default_factory=lambda: SelectorChain.of(
            "img@data-src", "img@data-lazy-src", "img@src"
        )
    )


class KindMarkers(BaseModel):
    """URL path fragments used to classify content kind."""

    movie: List[str] = Field(default_factory=lambda: ["pelicula", "movie"])
    series: List[str] = Field(default_factory=lambda: ["serie", "series"])
    anime: List[str] = Field(default_factory=lambda: ["anime"])

    @field_validator("movie", "series", "anime")
    @classmethod
    def lower_markers(cls, v: List[str]) -> List[str]:
        return [marker.lower() for marker in v if marker]


class SectionConfig(BaseModel):
    """One home-page section."""

    name: str = Field(..., min_length=1)
    url: Optional[str] = Field(
        default=None,
        description="URL template with {base_url} and {page}; None means the home page"
    )
    containers: List[str] = Field(
        default_factory=list,
        description="Container selectors in priority order (provider default when empty)"
    )
    kind: Optional[ContentKind] = Field(
        default=None,
        description="Kind used when the URL carries no path marker"
    )
    limit: Optional[int] = Field(default=None, ge=1)


class DetailConfig(BaseModel):
    """Selector chains for a detail page."""

    title: SelectorChain = Field(
        default_factory=lambda: SelectorChain.of("h1.Title", "h1", ".movie-title", ".title")
    )
    synopsis: SelectorChain = Field(
        default_factory=lambda: SelectorChain.of(
            ".Description p", ".description", ".synopsis", ".overview", ".plot"
        )
    )
    poster: SelectorChain = Field(
        default_factory=lambda: SelectorChain.of(
            ".poster img@data-src", ".poster img@src", "img.poster@src",
            ".movie-poster img@src",
        )
    )
    backdrop: SelectorChain = Field(
        default_factory=lambda: SelectorChain.of("head meta[property='og:image']@content")
    )
    poster_from_backdrop: Optional[List[str]] = Field(
        default=None,
        description="[old, new] replacement deriving the poster from the backdrop URL"
    )
    year: SelectorChain = Field(
        default_factory=lambda: SelectorChain.of(".year", ".Date", ".date", ".release-date")
    )
    year_from_page_text: bool = Field(
        default=False,
        description="Search the whole page text when the year chain fails"
    )
    tags: List[str] = Field(
        default_factory=lambda: [".genres a", ".genre", ".tags a"],
        description="Selectors whose matches become tags"
    )
    episode_containers: List[str] = Field(
        default_factory=lambda: [".episodios li", ".episodes .episode", ".episode-list li"]
    )
    episode_link: SelectorChain = Field(default_factory=lambda: SelectorChain.of("a@href", "@href"))
    episode_title: SelectorChain = Field(
        default_factory=lambda: SelectorChain.of(".episodiotitle a", ".episode-title", ".title")
    )
    episode_number: SelectorChain = Field(
        default_factory=lambda: SelectorChain.of(".numerando", ".episode-number", ".number", ".Year")
    )
    episode_thumbnail: SelectorChain = Field(
        default_factory=lambda: SelectorChain.of("img@data-src", "img@src")
    )
    recommendation_containers: List[str] = Field(default_factory=list)

    @field_validator("poster_from_backdrop")
    @classmethod
    def validate_replacement(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is not None and len(v) != 2:
            raise ValueError("poster_from_backdrop must be [old, new]")
        return v


class ServerOptionConfig(BaseModel):
    """Elements whose data attribute triggers a follow-up player request."""

    selector: str = Field(..., description="CSS selector of the option elements")
    attribute: str = Field(..., description="Data attribute carrying the server id")
    method: Literal["GET", "POST"] = "GET"
    url_template: Optional[str] = Field(
        default=None,
        description="Endpoint template with {base_url}, {value} and {page_url}"
    )
    form: Dict[str, str] = Field(default_factory=dict, description="POST form templates")
    encoding: Literal["none", "base64"] = "none"
    headers: Dict[str, str] = Field(default_factory=dict)


class EmbedExchangeConfig(BaseModel):
    """
    Fixed request template that trades a third-party embed URL for the real one.

    ``json`` mode POSTs the key and reads ``response_key`` from the JSON body;
    ``redirect`` mode GETs without following redirects and reads ``Location``.
    """

    name: str
    match: List[str] = Field(..., min_length=1, description="Substrings the candidate URL must contain")
    split_marker: str = Field(..., description="Everything before this marker becomes {prefix}")
    key_param: str = Field(default="h", description="Query parameter holding the key")
    mode: Literal["json", "redirect"] = "json"
    api_template: str = Field(..., description="Endpoint template with {prefix} and {key}")
    form: Dict[str, str] = Field(default_factory=dict)
    response_key: str = "url"
    require_substring: Optional[str] = Field(
        default=None,
        description="Only accept exchanged URLs containing this text"
    )


class LinkConfig(BaseModel):
    """How player pages are mined for candidate links."""

    iframe_selectors: List[str] = Field(default_factory=lambda: ["iframe"])
    iframe_attributes: List[str] = Field(default_factory=lambda: ["data-src", "src"])
    mine_scripts: bool = True
    server_options: List[ServerOptionConfig] = Field(default_factory=list)
    exchanges: List[EmbedExchangeConfig] = Field(
        default_factory=lambda: [
            EmbedExchangeConfig(
                name="fembed",
                match=["fembed", "?h="],
                split_marker="/fembed",
                mode="json",
                api_template="{prefix}/fembed/api.php",
                form={"h": "{key}"},
            )
        ]
    )
    url_rewrites: Dict[str, str] = Field(
        default_factory=lambda: {
            "https://embedsb.com/e/": "https://watchsb.com/e/",
            "https://ok.ru": "http://ok.ru",
        }
    )
    denylisted_domains: List[str] = Field(default_factory=list)


class ProviderConfig(BaseModel):
    """Configuration record for one streaming site."""

    name: str = Field(..., min_length=1, description="Display name")
    base_url: str = Field(..., description="Site origin, e.g. https://example.test")
    lang: str = Field(default="es")
    enabled: bool = Field(default=True)
    priority: int = Field(default=10, ge=1, le=100)
    description: Optional[str] = None
    engine: str = Field(
        default="generic",
        description="'generic', a registered engine name, or 'module:Class'"
    )
    supported_kinds: List[ContentKind] = Field(
        default_factory=lambda: [ContentKind.MOVIE, ContentKind.SERIES]
    )
    default_kind: ContentKind = ContentKind.MOVIE
    require_poster: bool = Field(
        default=False,
        description="Drop listing items without a poster instead of keeping them"
    )
    kind_markers: KindMarkers = Field(default_factory=KindMarkers)
    sections: List[SectionConfig] = Field(default_factory=list)
    home_fallback_containers: List[str] = Field(default_factory=list)
    search_urls: List[str] = Field(
        default_factory=lambda: ["{base_url}/?s={query}"],
        description="Search URL templates tried in order"
    )
    listing_containers: List[str] = Field(
        default_factory=lambda: [".MovieList .TPostMv", "article.TPost", ".content .item", "article.item"]
    )
    fields: ListingFields = Field(default_factory=ListingFields)
    empty_markers: List[str] = Field(
        default_factory=lambda: [".no-results", ".not-found", ".search-empty"]
    )
    empty_phrases: List[str] = Field(
        default_factory=lambda: [
            "no se encontraron", "sin resultados", "no hay resultados", "nothing found",
        ]
    )
    detail: DetailConfig = Field(default_factory=DetailConfig)
    links: LinkConfig = Field(default_factory=LinkConfig)
    headers: Dict[str, str] = Field(default_factory=dict)
    timeout: Optional[int] = Field(default=None, ge=5, le=300)

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not re.match(r"^https?://[^/\s]+", v):
            raise ValueError(f"base_url must be an absolute http(s) origin: {v}")
        return v.rstrip("/")

    @model_validator(mode="after")
    def validate_default_kind(self) -> "ProviderConfig":
        if self.supported_kinds and self.default_kind not in self.supported_kinds:
            logger.warning(
                f"Provider {self.name}: default kind {self.default_kind} "
                f"is not among supported kinds"
            )
        return self


class ProvidersConfig(BaseModel):
    """Providers configuration container."""

    providers: Dict[str, ProviderConfig] = Field(default_factory=dict)
    max_concurrent_providers: int = Field(default=5, ge=1, le=20)

    def get_enabled_providers(self) -> Dict[str, ProviderConfig]:
        """Get all enabled providers sorted by priority."""
        enabled = {
            key: config for key, config in self.providers.items()
            if config.enabled
        }
        return dict(sorted(enabled.items(), key=lambda item: item[1].priority))

    def add_provider(self, key: str, config: ProviderConfig) -> None:
        self.providers[key] = config

    def remove_provider(self, key: str) -> bool:
        """Remove a provider configuration. Returns True if removed."""
        return self.providers.pop(key, None) is not None

    def get_provider(self, key: str) -> Optional[ProviderConfig]:
        return self.providers.get(key)


# Export all configuration models
__all__ = [
    "DEFAULT_USER_AGENT",
    "HttpSettings",
    "SearchSettings",
    "LoggingSettings",
    "AppSettings",
    "ListingFields",
    "KindMarkers",
    "SectionConfig",
    "DetailConfig",
    "ServerOptionConfig",
    "EmbedExchangeConfig",
    "LinkConfig",
    "ProviderConfig",
    "ProvidersConfig",
]
