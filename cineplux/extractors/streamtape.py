"""
Streamtape extractor - builds the ``get_video`` URL from the embed page.

The embed page carries ``id``, ``expires``, ``ip`` and ``token`` query
parameters in its markup; a script later patches the token, so the
patched value wins when present.
"""

import re
from typing import Optional
from urllib.parse import urlparse

from cineplux.core.exceptions import ExtractionError
from cineplux.core.models import StreamLink
from cineplux.extractors.base import BaseExtractor, ExtractionResult


PARAMS_PATTERN = re.compile(r"(id=[^\"'&]*&expires=\d+&ip=[^\"'&]*&token=[^\"'&]*?)([\"'<])")
TOKEN_PATTERN = re.compile(r"document\.getElementById[^<]*&token=([A-Za-z0-9\-_]+)")


class StreamtapeExtractor(BaseExtractor):
    """Extractor for streamtape.com and its mirror domains."""

    name = "streamtape"
    domains = (
        "streamtape.com",
        "streamtape.net",
        "streamtape.to",
        "strtape.cloud",
        "strtpe.link",
        "shavetape.cash",
        "streamta.pe",
        "tapecontent.net",
    )

    async def extract(self, url: str, referer: Optional[str] = None) -> ExtractionResult:
        headers = {"Referer": referer} if referer else None
        response = await self.http.get(url, headers=headers)
        html = response.text

        if ">Video not found" in html:
            raise ExtractionError("Streamtape video not found", url=url)

        match = PARAMS_PATTERN.search(html)
        if not match:
            raise ExtractionError("Streamtape page has no video parameters", url=url)

        params = match.group(1)
        token_match = TOKEN_PATTERN.search(html)
        if token_match:
            params = re.sub(r"token=[^&]*", f"token={token_match.group(1)}", params)

        host = urlparse(response.url).hostname or "streamtape.com"
        self.logger.debug(f"Resolved streamtape parameters for {url}")

        stream = StreamLink(
            url=f"https://{host}/get_video?{params}&stream=1",
            source=self.name,
            label="Streamtape",
            referer=f"https://{host}/",
            headers={"Referer": f"https://{host}/"},
        )
        return ExtractionResult(streams=[stream])


__all__ = ["StreamtapeExtractor"]
