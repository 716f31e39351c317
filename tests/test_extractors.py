"""
Tests for extractors and the extractor registry.
"""

from typing import List, Optional

import pytest

from cineplux.core.exceptions import ExtractionError
from cineplux.core.models import StreamLink, SubtitleTrack
from cineplux.extractors import (
    BaseExtractor,
    DirectMediaExtractor,
    ExtractionResult,
    ExtractorRegistry,
    StreamtapeExtractor,
    default_registry,
)


STREAMTAPE_HTML = """
<html><body>
<div id="ideoolink" style="display:none;">/streamtape.com/get_video?id=abc&expires=1700000000&ip=XYZ&token=old</div>
<script>
document.getElementById('robotlink').innerHTML = '//streamtape.com/get_video?id=abc&expires=1700000000&ip=XYZ&token=fresh_Token-1';
</script>
</body></html>
"""


class SubtitledExtractor(BaseExtractor):
    name = "subtitled"
    domains = ("subs.test",)

    async def extract(self, url: str, referer: Optional[str] = None) -> ExtractionResult:
        return ExtractionResult(
            streams=[StreamLink(url=f"{url}/index.m3u8", source=self.name, is_adaptive=True)],
            subtitles=[SubtitleTrack(url=f"{url}/es.vtt")],
        )


class TestDirectMediaExtractor:
    """Test direct media pass-through."""

    @pytest.mark.asyncio
    async def test_hls_stream(self, fake_http):
        extractor = DirectMediaExtractor(fake_http)
        url = "https://cdn.test/1080/master.m3u8"

        result = await extractor.extract(url, referer="https://site.test/pelicula/uno")

        stream = result.streams[0]
        assert stream.url == url
        assert stream.is_adaptive
        assert stream.quality == 1080
        assert stream.headers == {"Referer": "https://site.test/pelicula/uno"}
        assert fake_http.calls == []

    def test_can_handle(self, fake_http):
        extractor = DirectMediaExtractor(fake_http)
        assert extractor.can_handle("https://cdn.test/v.mp4")
        assert not extractor.can_handle("https://streamtape.com/e/abc")


class TestStreamtapeExtractor:
    """Test the streamtape get_video URL builder."""

    def test_domains(self, fake_http):
        extractor = StreamtapeExtractor(fake_http)
        assert extractor.can_handle("https://www.streamtape.com/e/abc")
        assert extractor.can_handle("https://streamta.pe/e/abc")
        assert not extractor.can_handle("https://notstreamtape.com/e/abc")

    @pytest.mark.asyncio
    async def test_patched_token_wins(self, fake_http):
        fake_http.add("https://streamtape.com/e/abc", STREAMTAPE_HTML)
        extractor = StreamtapeExtractor(fake_http)

        result = await extractor.extract("https://streamtape.com/e/abc")

        assert result.streams[0].url == (
            "https://streamtape.com/get_video?id=abc&expires=1700000000&ip=XYZ&token=fresh_Token-1&stream=1"
        )

    @pytest.mark.asyncio
    async def test_video_not_found(self, fake_http):
        fake_http.add("https://streamtape.com/e/gone", "<h1>Oops</h1><p>>Video not found</p>")
        extractor = StreamtapeExtractor(fake_http)

        with pytest.raises(ExtractionError):
            await extractor.extract("https://streamtape.com/e/gone")

    @pytest.mark.asyncio
    async def test_missing_parameters(self, fake_http):
        fake_http.add("https://streamtape.com/e/odd", "<html><body>nuevo diseño</body></html>")
        extractor = StreamtapeExtractor(fake_http)

        with pytest.raises(ExtractionError):
            await extractor.extract("https://streamtape.com/e/odd")


class TestExtractorRegistry:
    """Test extractor routing."""

    def test_default_registry_order(self, fake_http):
        registry = default_registry(fake_http)

        assert [extractor.name for extractor in registry.extractors] == ["streamtape", "direct"]
        assert registry.find("https://streamtape.com/e/abc").name == "streamtape"
        assert registry.find("https://cdn.test/v.mp4").name == "direct"
        assert registry.find("https://unknown.test/e/1") is None

    def test_registered_extractor_takes_precedence(self, fake_http):
        registry = default_registry(fake_http)
        registry.register(SubtitledExtractor(fake_http))
        assert registry.extractors[0].name == "subtitled"

    @pytest.mark.asyncio
    async def test_resolve_emits_streams_and_subtitles(self, fake_http):
        registry = ExtractorRegistry([SubtitledExtractor(fake_http)])
        streams: List[StreamLink] = []
        subtitles: List[SubtitleTrack] = []

        count = await registry.resolve("https://subs.test/v/1", None, subtitles.append, streams.append)

        assert count == 1
        assert streams[0].url == "https://subs.test/v/1/index.m3u8"
        assert subtitles[0].language == "es"

    @pytest.mark.asyncio
    async def test_resolve_unknown_host(self, fake_http):
        registry = ExtractorRegistry([SubtitledExtractor(fake_http)])

        with pytest.raises(ExtractionError):
            await registry.resolve("https://unknown.test/e/1", None, lambda s: None, lambda l: None)
