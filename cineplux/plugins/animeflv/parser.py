"""
AnimeFLV Parser - Script and JSON parsing for animeflv pages.

Episode lists on animeflv are not in the markup; they live in an inline
``var episodes = [[number, id], ...];`` script.
"""

import logging
import re
from typing import Any, List, Optional

from bs4 import BeautifulSoup
from pydantic import ValidationError

from cineplux.core.models import CatalogEntry, ContentKind, EpisodeRef
from cineplux.plugins.common.selectors import select_first


logger = logging.getLogger(__name__)

EPISODES_MARKER = "var episodes = ["
EPISODE_PAIR_PATTERN = re.compile(r"\[\s*(\d+(?:\.\d+)?)\s*,\s*(\d+)\s*\]")
ANIME_ID_PATTERN = re.compile(r"var\s+anime_info\s*=\s*\[\s*[\"']?(\d+)")
EPISODE_SUFFIX_PATTERN = re.compile(r"-\d+/?$")

MOVIE_TYPE_MARKERS = ("película", "pelicula", "movie")

SCREENSHOT_TEMPLATE = "https://cdn.animeflv.net/screenshots/{anime_id}/{number}/th_3.jpg"


class AnimeflvParser:
    """Parsing helpers for animeflv documents and API payloads."""

    def __init__(self, base_url: str):
        self.base_url = base_url

    def kind_from_type(self, type_text: Optional[str]) -> ContentKind:
        """``Película`` means a movie; TV, OVA and specials are anime."""
        if type_text and any(marker in type_text.lower() for marker in MOVIE_TYPE_MARKERS):
            return ContentKind.MOVIE
        return ContentKind.ANIME

    def parse_search_results(self, payload: Any) -> List[CatalogEntry]:
        """
        Parse the ``/api/animes/search`` JSON payload.

        Args:
            payload: Decoded JSON body, a list of {id, title, type, slug}

        Returns:
            Catalog entries; malformed items are skipped
        """
        if not isinstance(payload, list):
            raise ValueError(f"Unexpected search payload type: {type(payload).__name__}")

        results = []
        for item in payload:
            if not isinstance(item, dict):
                continue
            slug = item.get("slug")
            title = item.get("title")
            if not slug or not title:
                continue

            anime_id = item.get("id")
            poster = f"{self.base_url}/uploads/animes/covers/{anime_id}.jpg" if anime_id else None
            try:
                results.append(
                    CatalogEntry(
                        title=title,
                        detail_url=f"{self.base_url}/anime/{slug}",
                        poster_url=poster,
                        kind=self.kind_from_type(item.get("type")),
                    )
                )
            except ValidationError as e:
                logger.debug(f"Skipping search item {slug}: {e.error_count()} validation errors")

        return results

    def anime_id(self, document: BeautifulSoup) -> Optional[str]:
        rating = select_first(document, "div.Strs.RateIt")
        if rating is not None and rating.get("data-id"):
            return rating.get("data-id")

        for script in document.find_all("script"):
            match = ANIME_ID_PATTERN.search(script.string or "")
            if match:
                return match.group(1)
        return None

    def parse_episodes(self, document: BeautifulSoup, url: str) -> List[EpisodeRef]:
        """
        Recover episodes from the inline ``var episodes`` script.

        Episode URLs map ``/anime/<slug>`` to ``/ver/<slug>-<number>``;
        the list is returned in ascending episode order.
        """
        script_text = None
        for script in document.find_all("script"):
            text = script.string or script.get_text()
            if text and EPISODES_MARKER in text:
                script_text = text
                break

        if script_text is None:
            return []

        data = script_text.split(EPISODES_MARKER, 1)[1].split("];", 1)[0]
        anime_id = self.anime_id(document)
        watch_base = url.rstrip("/").replace("/anime/", "/ver/")

        episodes = {}
        for match in EPISODE_PAIR_PATTERN.finditer(f"[{data}]"):
            raw_number = match.group(1)
            if raw_number in episodes:
                continue
            # Specials such as "12.5" keep their own entry without an integer number
            number = int(raw_number) if raw_number.isdigit() else None
            thumbnail = (
                SCREENSHOT_TEMPLATE.format(anime_id=anime_id, number=raw_number) if anime_id else None
            )
            episodes[raw_number] = EpisodeRef(
                episode_url=f"{watch_base}-{raw_number}",
                season=1,
                episode=number,
                title=f"Episodio {raw_number}",
                thumbnail_url=thumbnail,
            )

        return [episodes[raw] for raw in sorted(episodes, key=float)]

    def series_url(self, episode_url: str) -> str:
        """Map a ``/ver/<slug>-<n>`` episode URL back to ``/anime/<slug>``."""
        return EPISODE_SUFFIX_PATTERN.sub("", episode_url).replace("/ver/", "/anime/")


__all__ = ["AnimeflvParser"]
