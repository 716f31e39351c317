"""
Core Data Models - Pydantic models for type safety and validation.

This module defines the data structures produced by the extraction
pipeline: catalog entries, episode references, detail records, candidate
links and the stream descriptors handed back by extractors. All models use
Pydantic for validation and are frozen once constructed.
"""

from enum import Enum
from typing import Dict, List, Optional, Tuple, Union
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


TEXT_ATTRIBUTE = "text"


def _require_absolute(v: str) -> str:
    """Ensure a URL is absolute http(s)."""
    parsed = urlparse(v)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError(f"URL must be absolute http(s): {v}")
    return v


class ContentKind(str, Enum):
    """Best-effort classification of a catalog title."""

    MOVIE = "movie"
    SERIES = "series"
    ANIME = "anime"

    def __str__(self) -> str:
        return self.value


class MediaKind(str, Enum):
    """Hint about the container of a direct media URL."""

    UNKNOWN = "unknown"
    HLS = "hls"
    PROGRESSIVE = "progressive"


class ListingOutcome(str, Enum):
    """How a listing extraction ended."""

    OK = "ok"
    EMPTY = "empty"
    LAYOUT_MISMATCH = "layout_mismatch"


class SelectorPair(BaseModel):
    """One (selector, attribute) candidate of a selector chain."""

    model_config = ConfigDict(frozen=True)

    selector: str = Field(..., description="CSS selector, empty for the node itself")
    attribute: str = Field(default=TEXT_ATTRIBUTE, description="Attribute name or 'text'")

    def __str__(self) -> str:
        if self.attribute == TEXT_ATTRIBUTE:
            return self.selector
        return f"{self.selector}@{self.attribute}"


PairSpec = Union[SelectorPair, str, Tuple[str, str], List[str], Dict[str, str]]


def _coerce_pair(spec: PairSpec) -> SelectorPair:
    if isinstance(spec, SelectorPair):
        return spec
    if isinstance(spec, dict):
        return SelectorPair(**spec)
    if isinstance(spec, (tuple, list)):
        if len(spec) != 2:
            raise ValueError(f"Selector pair needs exactly two items: {spec!r}")
        return SelectorPair(selector=spec[0], attribute=spec[1])
    if isinstance(spec, str):
        # "img@data-src" reads an attribute, a bare selector reads text
        selector, sep, attribute = spec.rpartition("@")
        if sep and attribute and "]" not in attribute:
            return SelectorPair(selector=selector, attribute=attribute)
        return SelectorPair(selector=spec)
    raise ValueError(f"Unsupported selector pair: {spec!r}")


class SelectorChain(BaseModel):
    """
    Ordered fallback list of selector pairs.

    Accepts shorthand on construction: ``"h1.Title"`` reads the text of the
    first match, ``"img@data-src"`` reads an attribute and ``["a", "href"]``
    is the explicit form.
    """

    model_config = ConfigDict(frozen=True)

    pairs: Tuple[SelectorPair, ...] = Field(default=())

    @model_validator(mode="before")
    @classmethod
    def accept_bare_list(cls, data):
        """Allow ``["h1", "img@src"]`` wherever a chain is expected."""
        if isinstance(data, (str, list, tuple)):
            return {"pairs": data}
        return data

    @field_validator("pairs", mode="before")
    @classmethod
    def coerce_pairs(cls, v):
        if isinstance(v, (str, SelectorPair, dict)):
            v = [v]
        return tuple(_coerce_pair(item) for item in v)

    @classmethod
    def of(cls, *specs: PairSpec) -> "SelectorChain":
        """Build a chain from shorthand pair specs."""
        return cls(pairs=specs)

    def __str__(self) -> str:
        return " | ".join(str(pair) for pair in self.pairs)


class CatalogEntry(BaseModel):
    """One row of a browsable listing (search results or home sections)."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(..., min_length=1, description="Display title")
    detail_url: str = Field(..., description="Absolute URL of the detail page")
    poster_url: Optional[str] = Field(None, description="Absolute poster URL")
    kind: ContentKind = Field(ContentKind.MOVIE, description="Best-effort content kind")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Collapse whitespace in titles."""
        return " ".join(v.split())

    @field_validator("detail_url")
    @classmethod
    def validate_detail_url(cls, v: str) -> str:
        return _require_absolute(v)

    @field_validator("poster_url")
    @classmethod
    def validate_poster_url(cls, v: Optional[str]) -> Optional[str]:
        return _require_absolute(v) if v else None

    def __str__(self) -> str:
        return f"{self.title} ({self.kind})"


class EpisodeRef(BaseModel):
    """
    Reference to one playable episode of a serial title.

    ``episode`` stays None when no number could be parsed; it is never
    defaulted, so two unnumbered episodes are never mistaken for one another.
    """

    model_config = ConfigDict(frozen=True)

    episode_url: str = Field(..., description="Absolute URL of the episode page")
    season: Optional[int] = Field(1, ge=0, description="Season number")
    episode: Optional[int] = Field(None, ge=0, description="Episode number")
    title: Optional[str] = Field(None, description="Episode title")
    thumbnail_url: Optional[str] = Field(None, description="Episode thumbnail URL")

    @field_validator("episode_url")
    @classmethod
    def validate_episode_url(cls, v: str) -> str:
        return _require_absolute(v)

    def __str__(self) -> str:
        number = "?" if self.episode is None else self.episode
        return f"S{self.season}E{number}"


class DetailRecord(BaseModel):
    """Full metadata and episode list for one title."""

    model_config = ConfigDict(frozen=True)

    title: str = Field(..., min_length=1, description="Title")
    url: str = Field(..., description="Detail page URL")
    kind: ContentKind = Field(ContentKind.MOVIE, description="Decided content kind")
    synopsis: Optional[str] = Field(None, description="Plot summary")
    poster_url: Optional[str] = Field(None, description="Poster image URL")
    backdrop_url: Optional[str] = Field(None, description="Backdrop image URL")
    year: Optional[int] = Field(None, ge=1900, le=2100, description="Release year")
    tags: Tuple[str, ...] = Field(default=(), description="Genre tags in page order")
    episodes: Tuple[EpisodeRef, ...] = Field(default=(), description="Episodes, empty for movies")
    recommendations: Tuple[CatalogEntry, ...] = Field(default=(), description="Related titles")

    @property
    def is_serial(self) -> bool:
        return bool(self.episodes)

    def __str__(self) -> str:
        return f"{self.title} ({self.kind}, {len(self.episodes)} episodes)"


class CandidateLink(BaseModel):
    """A discovered URL that might resolve to a playable stream."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., description="Absolute candidate URL")
    source_hint: Optional[str] = Field(None, description="Detected host name")
    is_direct_media: bool = Field(False, description="URL points at a media file")
    media_kind_hint: MediaKind = Field(MediaKind.UNKNOWN, description="Media container hint")

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        return _require_absolute(v)


class ListingResult(BaseModel):
    """Entries extracted from one listing document plus how it ended."""

    model_config = ConfigDict(frozen=True)

    entries: Tuple[CatalogEntry, ...] = Field(default=())
    outcome: ListingOutcome = Field(ListingOutcome.LAYOUT_MISMATCH)
    matched_selector: Optional[str] = Field(None, description="Container selector that matched")

    @property
    def ok(self) -> bool:
        return self.outcome == ListingOutcome.OK


class MainPageRequest(BaseModel):
    """One home-page section request made by the host."""

    model_config = ConfigDict(frozen=True)

    name: str
    data: str = Field(..., description="Section URL or URL template")


class HomeSection(BaseModel):
    """A named list of catalog entries on the home page."""

    model_config = ConfigDict(frozen=True)

    name: str
    entries: Tuple[CatalogEntry, ...] = Field(default=())


class HomePage(BaseModel):
    """Home page response: the sections that produced entries."""

    model_config = ConfigDict(frozen=True)

    sections: Tuple[HomeSection, ...] = Field(default=())

    @property
    def is_empty(self) -> bool:
        return not any(section.entries for section in self.sections)


class StreamLink(BaseModel):
    """Playable stream descriptor emitted by an extractor."""

    model_config = ConfigDict(frozen=True)

    url: str
    source: str = Field(..., description="Extractor or host name")
    label: str = Field("", description="Human-readable label")
    quality: Optional[int] = Field(None, description="Vertical resolution if known")
    referer: Optional[str] = None
    is_adaptive: bool = Field(False, description="HLS/DASH manifest")
    headers: Dict[str, str] = Field(default_factory=dict)


class SubtitleTrack(BaseModel):
    """Subtitle track descriptor emitted by an extractor."""

    model_config = ConfigDict(frozen=True)

    url: str
    language: str = "es"


# Export all models and types
__all__ = [
    "TEXT_ATTRIBUTE",
    "ContentKind",
    "MediaKind",
    "ListingOutcome",
    "SelectorPair",
    "SelectorChain",
    "CatalogEntry",
    "EpisodeRef",
    "DetailRecord",
    "CandidateLink",
    "ListingResult",
    "MainPageRequest",
    "HomeSection",
    "HomePage",
    "StreamLink",
    "SubtitleTrack",
]
