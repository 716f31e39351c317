"""
Direct media pass-through for .mp4 / .m3u8 / .mkv candidates.
"""

from typing import Optional

from cineplux.core.models import MediaKind, StreamLink
from cineplux.extractors.base import BaseExtractor, ExtractionResult
from cineplux.plugins.common.urls import guess_quality, host_of, media_kind_of


class DirectMediaExtractor(BaseExtractor):
    """Emits direct media URLs unchanged, with the page as referer."""

    name = "direct"

    def can_handle(self, url: str) -> bool:
        return media_kind_of(url) != MediaKind.UNKNOWN

    async def extract(self, url: str, referer: Optional[str] = None) -> ExtractionResult:
        media_kind = media_kind_of(url)
        quality = guess_quality(url)
        label = host_of(url) or self.name
        if quality:
            label = f"{label} {quality}p"

        stream = StreamLink(
            url=url,
            source=self.name,
            label=label,
            quality=quality,
            referer=referer,
            is_adaptive=media_kind == MediaKind.HLS,
            headers={"Referer": referer} if referer else {},
        )
        return ExtractionResult(streams=[stream])


__all__ = ["DirectMediaExtractor"]
