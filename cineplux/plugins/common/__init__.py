"""
Common extraction pipeline shared by every provider.

Selector chains, listing and detail extraction, episode numbering, URL
helpers and the link resolution pipeline.
"""

from .selectors import DEFAULT_PLACEHOLDERS, resolve, resolve_all, select_first, select_safe
from .urls import classify_kind, host_of, media_kind_of, normalize_url
from .episodes import EpisodeNumbering, parse_episode_numbering
from .listing import ListingPolicy, SectionSpec, SectionedListing, extract_listing, extract_sections
from .detail import decide_kind, extract_detail, extract_episodes, parse_year
from .links import LinkResolver, mine_script

__all__ = [
    "DEFAULT_PLACEHOLDERS",
    "resolve",
    "resolve_all",
    "select_first",
    "select_safe",
    "classify_kind",
    "host_of",
    "media_kind_of",
    "normalize_url",
    "EpisodeNumbering",
    "parse_episode_numbering",
    "ListingPolicy",
    "SectionSpec",
    "SectionedListing",
    "extract_listing",
    "extract_sections",
    "decide_kind",
    "extract_detail",
    "extract_episodes",
    "parse_year",
    "LinkResolver",
    "mine_script",
]
