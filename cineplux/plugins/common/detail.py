"""
Detail Extractor - Title metadata, episodes and recommendations.

Only the title is mandatory; every other field degrades to None or an
empty tuple when its selector chain misses.
"""

import logging
import re
from typing import List, Optional, Sequence

from pydantic import ValidationError

from cineplux.core.config_schemas import DetailConfig, KindMarkers, ProviderConfig
from cineplux.core.models import CatalogEntry, ContentKind, DetailRecord, EpisodeRef
from cineplux.plugins.common.episodes import parse_episode_numbering
from cineplux.plugins.common.listing import ListingPolicy, extract_listing
from cineplux.plugins.common.selectors import Node, resolve, resolve_all, select_safe
from cineplux.plugins.common.urls import has_marker, normalize_url, path_of


logger = logging.getLogger(__name__)

YEAR_PATTERN = re.compile(r"(?<!\d)((?:19|20)\d{2})(?!\d)")


def parse_year(text: Optional[str]) -> Optional[int]:
    """First plausible four-digit year in a text."""
    if not text:
        return None
    match = YEAR_PATTERN.search(text)
    return int(match.group(1)) if match else None


def listing_policy_for(config: ProviderConfig) -> ListingPolicy:
    """Listing policy derived from a provider record."""
    return ListingPolicy(
        fields=config.fields,
        markers=config.kind_markers,
        default_kind=config.default_kind,
        require_poster=config.require_poster,
        empty_markers=tuple(config.empty_markers),
        empty_phrases=tuple(config.empty_phrases),
    )


def decide_kind(
    url: str,
    tags: Sequence[str],
    episodes: Sequence[EpisodeRef],
    markers: KindMarkers,
    default: ContentKind = ContentKind.MOVIE,
) -> ContentKind:
    """
    Decide the content kind of a detail page.

    An anime marker in the URL path or tags wins; otherwise any recovered
    episode makes it a series; a movie marker or an empty episode list
    makes it a movie. An anime default survives for anime-only providers.
    """
    path = path_of(url)
    if has_marker(path, markers.anime) or any(has_marker(tag, markers.anime) for tag in tags):
        return ContentKind.ANIME
    if episodes:
        return ContentKind.SERIES
    if has_marker(path, markers.movie):
        return ContentKind.MOVIE
    return default if default == ContentKind.ANIME else ContentKind.MOVIE


def extract_episodes(
    document: Node,
    config: DetailConfig,
    base_url: str,
    logger: logging.Logger = logger,
) -> List[EpisodeRef]:
    """
    Extract the episode list of a serial title.

    The first episode container selector that yields episodes wins.
    Episodes are deduplicated by URL and keep page order.
    """
    for selector in config.episode_containers:
        episodes: List[EpisodeRef] = []
        seen = set()

        for element in select_safe(document, selector, logger):
            episode_url = normalize_url(resolve(element, config.episode_link, logger=logger), base_url)
            if episode_url is None or episode_url in seen:
                continue

            number_text = resolve(element, config.episode_number, logger=logger)
            numbering = parse_episode_numbering(number_text or episode_url)
            if numbering.episode is None and number_text:
                numbering = parse_episode_numbering(episode_url)

            thumbnail = normalize_url(resolve(element, config.episode_thumbnail, logger=logger), base_url)

            try:
                episodes.append(
                    EpisodeRef(
                        episode_url=episode_url,
                        season=numbering.season,
                        episode=numbering.episode,
                        title=resolve(element, config.episode_title, logger=logger),
                        thumbnail_url=thumbnail,
                    )
                )
                seen.add(episode_url)
            except ValidationError as e:
                logger.debug(f"Dropping episode {episode_url}: {e.error_count()} validation errors")

        if episodes:
            return episodes

    return []


def extract_detail(
    document: Node,
    config: ProviderConfig,
    page_url: str,
    logger: logging.Logger = logger,
) -> Optional[DetailRecord]:
    """
    Extract a detail record from a title page.

    Args:
        document: Parsed detail page
        config: Provider record holding the detail chains and markers
        page_url: URL the document was fetched from
        logger: Logger for diagnostics

    Returns:
        DetailRecord, or None when the title cannot be resolved
    """
    detail = config.detail

    title = resolve(document, detail.title, logger=logger)
    if not title:
        logger.warning(f"No title found on {page_url}", extra={"url": page_url})
        return None

    base_url = config.base_url
    backdrop_url = normalize_url(resolve(document, detail.backdrop, logger=logger), base_url)
    poster_url = normalize_url(resolve(document, detail.poster, logger=logger), base_url)
    if poster_url is None and backdrop_url and detail.poster_from_backdrop:
        old, new = detail.poster_from_backdrop
        poster_url = backdrop_url.replace(old, new)

    year = parse_year(resolve(document, detail.year, logger=logger))
    if year is None and detail.year_from_page_text:
        year = parse_year(document.get_text(" ", strip=True))

    tags = resolve_all(document, detail.tags, logger=logger)
    episodes = extract_episodes(document, detail, base_url, logger)

    recommendations: List[CatalogEntry] = []
    if detail.recommendation_containers:
        listing = extract_listing(
            document,
            detail.recommendation_containers,
            base_url,
            listing_policy_for(config),
            logger=logger,
        )
        recommendations = [entry for entry in listing.entries if entry.detail_url != page_url]

    kind = decide_kind(page_url, tags, episodes, config.kind_markers, config.default_kind)

    try:
        return DetailRecord(
            title=title,
            url=page_url,
            kind=kind,
            synopsis=resolve(document, detail.synopsis, logger=logger),
            poster_url=poster_url,
            backdrop_url=backdrop_url,
            year=year,
            tags=tuple(tags),
            episodes=tuple(episodes),
            recommendations=tuple(recommendations),
        )
    except ValidationError as e:
        logger.warning(f"Invalid detail record for {page_url}: {e}")
        return None


__all__ = [
    "YEAR_PATTERN",
    "parse_year",
    "listing_policy_for",
    "decide_kind",
    "extract_episodes",
    "extract_detail",
]
