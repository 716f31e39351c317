"""
URL helpers - normalization against a site base and content-kind hints.
"""

import re
from typing import Optional
from urllib.parse import urljoin, urlparse

from cineplux.core.config_schemas import KindMarkers
from cineplux.core.models import ContentKind, MediaKind


PSEUDO_SCHEMES = ("about:", "javascript:", "data:", "mailto:", "blob:")

HLS_EXTENSIONS = (".m3u8",)
PROGRESSIVE_EXTENSIONS = (".mp4", ".mkv", ".webm")

QUALITY_PATTERN = re.compile(r"(?<!\d)(2160|1440|1080|720|480|360|240)p?(?!\d)", re.IGNORECASE)


def origin(url: str) -> str:
    """Scheme and host of a URL, e.g. ``https://example.test``."""
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}"


def host_of(url: str) -> Optional[str]:
    """Lower-case host without a leading ``www.``."""
    netloc = urlparse(url).netloc.lower()
    if not netloc:
        return None
    netloc = netloc.split("@")[-1].split(":")[0]
    return netloc[4:] if netloc.startswith("www.") else netloc


def normalize_url(url: Optional[str], base_url: str) -> Optional[str]:
    """
    Turn a scraped URL into an absolute http(s) URL.

    ``//host/path`` gains ``https:``, ``/path`` is joined to the origin of
    ``base_url``, absolute URLs are kept and bare relative paths are joined
    against ``base_url``. Pseudo-protocol values give None.
    """
    if not url:
        return None

    url = url.strip()
    if not url or url.lower().startswith(PSEUDO_SCHEMES):
        return None

    if url.startswith("//"):
        return f"https:{url}"
    if url.lower().startswith(("http://", "https://")):
        return url
    if url.startswith("/"):
        return f"{origin(base_url)}{url}"

    return urljoin(base_url.rstrip("/") + "/", url)


def path_of(url: str) -> str:
    return urlparse(url).path.lower()


def has_marker(text: str, markers) -> bool:
    lowered = text.lower()
    return any(marker in lowered for marker in markers)


def classify_kind(url: str, markers: KindMarkers, default: ContentKind = ContentKind.MOVIE) -> ContentKind:
    """
    Classify a detail URL by its path markers.

    Path segments are checked left to right, so ``/pelicula/la-serie`` is a
    movie. Within one segment anime beats series, which beats movie.
    """
    for segment in path_of(url).split("/"):
        if not segment:
            continue
        if has_marker(segment, markers.anime):
            return ContentKind.ANIME
        if has_marker(segment, markers.series):
            return ContentKind.SERIES
        if has_marker(segment, markers.movie):
            return ContentKind.MOVIE
    return default


def media_kind_of(url: str) -> MediaKind:
    """Guess the media container of a URL from its path extension."""
    path = path_of(url)
    if path.endswith(HLS_EXTENSIONS):
        return MediaKind.HLS
    if path.endswith(PROGRESSIVE_EXTENSIONS):
        return MediaKind.PROGRESSIVE
    return MediaKind.UNKNOWN


def guess_quality(text: str) -> Optional[int]:
    """Vertical resolution mentioned in a URL or label, if any."""
    match = QUALITY_PATTERN.search(text)
    return int(match.group(1)) if match else None


__all__ = [
    "origin",
    "host_of",
    "normalize_url",
    "path_of",
    "has_marker",
    "classify_kind",
    "media_kind_of",
    "guess_quality",
]
