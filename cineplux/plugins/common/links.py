"""
Link Resolution Pipeline - Candidate stream URLs from player pages.

Candidates are discovered in stages:

1. iframes on the page (``data-src`` / ``src``),
2. URLs mined from inline scripts,
3. server-option buttons whose data attribute triggers a follow-up
   request; the response is scanned with stages 1 and 2, one level deep,
4. embed key exchanges that trade a third-party embed URL for the real one.

Follow-up fetches run concurrently under a semaphore and candidates are
yielded as they become available. Each absolute URL is yielded at most
once per call.
"""

import asyncio
import base64
import logging
import re
from dataclasses import dataclass, field
from typing import (
    TYPE_CHECKING,
    AsyncIterator,
    Callable,
    Dict,
    Iterator,
    List,
    Optional,
    Sequence,
    Set,
    Tuple,
)
from urllib.parse import parse_qs, urlparse

from pydantic import ValidationError

from cineplux.core.config_schemas import EmbedExchangeConfig, LinkConfig, ServerOptionConfig
from cineplux.core.exceptions import NetworkError
from cineplux.core.http import AJAX_HEADERS, HttpClient
from cineplux.core.models import CandidateLink, MediaKind, StreamLink, SubtitleTrack
from cineplux.core.results import Found, NotFound, StageResult, TransientError
from cineplux.plugins.common.selectors import Node, select_safe
from cineplux.plugins.common.urls import host_of, media_kind_of, normalize_url

if TYPE_CHECKING:
    from cineplux.extractors.registry import ExtractorRegistry


logger = logging.getLogger(__name__)

SubtitleCallback = Callable[[SubtitleTrack], None]
LinkCallback = Callable[[StreamLink], None]

KNOWN_HOSTERS = (
    "fembed", "embedsb", "watchsb", "streamtape", "doodstream", "dood", "uqload",
    "mixdrop", "upstream", "voe", "streamwish", "filemoon", "okru", "ok",
)

SCRIPT_PATTERNS: Tuple[re.Pattern, ...] = (
    re.compile(r"""["'](https?://[^"'\s]+?\.(?:mp4|m3u8|mkv)(?:\?[^"'\s]*)?)["']""", re.IGNORECASE),
    re.compile(r"""\bfile\s*:\s*["'](https?://[^"']+)["']""", re.IGNORECASE),
    re.compile(r"""\bsrc\s*:\s*["'](https?://[^"']+)["']""", re.IGNORECASE),
    re.compile(r"""\burl\s*:\s*["'](https?://[^"']+)["']""", re.IGNORECASE),
    re.compile(r"""["']embed_url["']\s*:\s*["'](https?://[^"']+)["']""", re.IGNORECASE),
    re.compile(r"""window\.location\.href\s*=\s*["'](https?://[^"']+)["']""", re.IGNORECASE),
    re.compile(
        r"(https?://(?:www\.)?(?:" + "|".join(KNOWN_HOSTERS) + r")\.[a-z]{2,6}/[^\s\"'<>\\]+)",
        re.IGNORECASE,
    ),
)

DENYLISTED_DOMAINS = (
    "facebook.com", "fb.com", "twitter.com", "x.com", "instagram.com", "tiktok.com",
    "google-analytics.com", "googletagmanager.com", "google.com", "gstatic.com",
    "googleapis.com", "doubleclick.net", "googlesyndication.com", "disqus.com",
    "cloudflare.com", "jquery.com", "jsdelivr.net", "wp.com", "gravatar.com",
    "schema.org", "w3.org",
)

ASSET_EXTENSIONS = (
    ".js", ".css", ".png", ".jpg", ".jpeg", ".gif", ".svg", ".webp", ".ico",
    ".woff", ".woff2", ".ttf", ".json", ".xml",
)


def is_denylisted(url: str, extra_domains: Sequence[str] = ()) -> bool:
    """True for social, analytics and static-asset URLs."""
    host = host_of(url)
    if not host:
        return True
    for domain in (*DENYLISTED_DOMAINS, *extra_domains):
        if host == domain or host.endswith(f".{domain}"):
            return True
    return urlparse(url).path.lower().endswith(ASSET_EXTENSIONS)


def mine_script(text: str, extra_domains: Sequence[str] = ()) -> List[str]:
    """
    Mine candidate URLs out of inline script text.

    Escaped slashes are unescaped first; only http(s) URLs outside the
    denylist are kept, in first-seen order.
    """
    text = text.replace("\\/", "/")
    found: List[str] = []
    for pattern in SCRIPT_PATTERNS:
        for match in pattern.finditer(text):
            url = match.group(1).strip()
            if url not in found and not is_denylisted(url, extra_domains):
                found.append(url)
    return found


def make_candidate(url: str) -> Optional[CandidateLink]:
    """Wrap an absolute URL into a candidate with host and media hints."""
    media_kind = media_kind_of(url)
    try:
        return CandidateLink(
            url=url,
            source_hint=host_of(url),
            is_direct_media=media_kind != MediaKind.UNKNOWN,
            media_kind_hint=media_kind,
        )
    except ValidationError:
        return None


@dataclass(frozen=True)
class PlayerRequest:
    """A follow-up request triggered by one server-option element."""

    method: str
    url: str
    form: Tuple[Tuple[str, str], ...] = ()
    headers: Tuple[Tuple[str, str], ...] = ()


@dataclass
class _Discovery:
    """Raw output of scanning the primary document."""

    urls: List[str] = field(default_factory=list)
    requests: List[PlayerRequest] = field(default_factory=list)


class LinkResolver:
    """
    Discovers candidate links on a player page and hands them to extractors.

    One resolver is bound to a provider's link configuration; it holds no
    per-page state, so it can be reused across calls.
    """

    def __init__(
        self,
        http: HttpClient,
        config: LinkConfig,
        base_url: str,
        headers: Optional[Dict[str, str]] = None,
        max_concurrency: int = 8,
        timeout: Optional[float] = None,
        logger: logging.Logger = logger,
    ):
        """
        Initialize the resolver.

        Args:
            http: HTTP client used for follow-up requests and exchanges
            config: Provider link configuration
            base_url: Site base URL for normalization and templates
            headers: Provider headers sent with follow-up requests
            max_concurrency: Maximum concurrent follow-up fetches
            timeout: Per-request timeout override in seconds
            logger: Logger for diagnostics
        """
        self.http = http
        self.config = config
        self.base_url = base_url
        self.headers = dict(headers or {})
        self.max_concurrency = max_concurrency
        self.timeout = timeout
        self.logger = logger

    # Stage 1 and 2: static scan

    def scan_document(self, document: Node, base_url: str) -> List[str]:
        """Iframe sources followed by script-mined URLs, in page order."""
        urls: List[str] = []
        for url in self._iter_iframes(document, base_url):
            if url not in urls:
                urls.append(url)

        if self.config.mine_scripts:
            for script in select_safe(document, "script", self.logger):
                body = script.string or script.get_text()
                if not body:
                    continue
                for url in mine_script(body, self.config.denylisted_domains):
                    if url not in urls:
                        urls.append(url)
        return urls

    def _iter_iframes(self, document: Node, base_url: str) -> Iterator[str]:
        for selector in self.config.iframe_selectors:
            for iframe in select_safe(document, selector, self.logger):
                for attribute in self.config.iframe_attributes:
                    url = normalize_url(iframe.get(attribute), base_url)
                    if url:
                        yield url
                        break

    # Stage 3: server options

    def _player_requests(self, document: Node, page_url: str) -> _Discovery:
        discovery = _Discovery()
        seen = set()

        for option in self.config.server_options:
            for element in select_safe(document, option.selector, self.logger):
                value = (element.get(option.attribute) or "").strip()
                if not value:
                    continue

                if value.lower().startswith(("http://", "https://", "//")):
                    url = normalize_url(value, self.base_url)
                    if url and url not in discovery.urls:
                        discovery.urls.append(url)
                    continue

                request = self._build_request(option, value, page_url)
                if request is not None and request not in seen:
                    seen.add(request)
                    discovery.requests.append(request)

        return discovery

    def _build_request(
        self, option: ServerOptionConfig, value: str, page_url: str
    ) -> Optional[PlayerRequest]:
        if option.encoding == "base64":
            value = base64.b64encode(value.encode("utf-8")).decode("ascii")

        params = {"base_url": self.base_url, "value": value, "page_url": page_url}
        try:
            url = (option.url_template or "{page_url}").format(**params)
            form = tuple((key, template.format(**params)) for key, template in option.form.items())
        except (KeyError, IndexError, ValueError) as e:
            self.logger.warning(f"Bad server option template for {option.selector!r}: {e}")
            return None

        headers = {"Referer": page_url, **option.headers}
        if option.method == "POST":
            headers = {**AJAX_HEADERS, **headers}

        return PlayerRequest(
            method=option.method,
            url=url,
            form=form,
            headers=tuple(headers.items()),
        )

    async def _follow(self, request: PlayerRequest) -> StageResult[List[str]]:
        """Fetch a player endpoint and scan its response one level deep."""
        headers = {**self.headers, **dict(request.headers)}
        try:
            if request.method == "POST":
                response = await self.http.post(
                    request.url, headers=headers, data=dict(request.form), timeout=self.timeout
                )
            else:
                response = await self.http.get(request.url, headers=headers, timeout=self.timeout)
        except NetworkError as e:
            return TransientError(f"player request to {request.url} failed", e)

        urls = [url for url in self.scan_document(response.document, response.url) if url != request.url]
        for url in mine_script(response.text, self.config.denylisted_domains):
            if url not in urls:
                urls.append(url)

        if not urls:
            return NotFound(f"no links in player response from {request.url}")
        return Found(urls)

    # Stage 4: rewrites and embed exchanges

    def rewrite(self, url: str) -> str:
        for old, new in self.config.url_rewrites.items():
            url = url.replace(old, new)
        return url

    def _exchange_for(self, url: str) -> Optional[EmbedExchangeConfig]:
        for exchange in self.config.exchanges:
            if all(token in url for token in exchange.match):
                return exchange
        return None

    async def exchange(self, url: str, page_url: str) -> StageResult[str]:
        """
        Trade a third-party embed URL for the real one when a template matches.

        URLs no exchange template matches are returned unchanged.
        """
        spec = self._exchange_for(url)
        if spec is None:
            return Found(url)

        key = parse_qs(urlparse(url).query).get(spec.key_param, [""])[0]
        if not key or spec.split_marker not in url:
            return NotFound(f"{spec.name}: no key in {url}")

        params = {"prefix": url.split(spec.split_marker, 1)[0], "key": key}
        api_url = spec.api_template.format(**params)
        headers = {**self.headers, "Referer": page_url}

        try:
            if spec.mode == "json":
                response = await self.http.post(
                    api_url,
                    headers={**headers, **AJAX_HEADERS},
                    data={name: template.format(**params) for name, template in spec.form.items()},
                    timeout=self.timeout,
                )
                payload = response.json()
                target = payload.get(spec.response_key) if isinstance(payload, dict) else None
            else:
                response = await self.http.get(
                    api_url, headers=headers, timeout=self.timeout, allow_redirects=False
                )
                target = response.header("location")
        except NetworkError as e:
            return TransientError(f"{spec.name} exchange failed for {url}", e)
        except ValueError as e:
            return NotFound(f"{spec.name}: malformed exchange response ({e})")

        if not isinstance(target, str) or not target.startswith("http"):
            return NotFound(f"{spec.name}: exchange returned no URL")
        if spec.require_substring and spec.require_substring not in target:
            return NotFound(f"{spec.name}: exchanged URL rejected")
        return Found(target)

    # Candidate stream

    def _log_failure(self, result: StageResult, page_url: str) -> None:
        if isinstance(result, TransientError):
            self.logger.warning(
                f"Link stage failed: {result.reason}: {result.error}",
                extra={"page_url": page_url},
            )
        elif isinstance(result, NotFound):
            self.logger.debug(f"Link stage found nothing: {result.reason}")

    async def iter_candidates(self, document: Node, page_url: str) -> AsyncIterator[CandidateLink]:
        """
        Yield candidate links for a player page as they are discovered.

        The sequence is finite, unordered and not restartable. A failed
        follow-up fetch is logged and skipped; it never ends the sequence.
        """
        semaphore = asyncio.Semaphore(self.max_concurrency)
        raw_seen: Set[str] = set()
        yielded: Set[str] = set()

        async def follow(request: PlayerRequest) -> StageResult[List[str]]:
            async with semaphore:
                return await self._follow(request)

        async def exchange(url: str) -> StageResult[str]:
            async with semaphore:
                return await self.exchange(url, page_url)

        async def finalize(urls: Sequence[str]) -> List[CandidateLink]:
            fresh = []
            for url in urls:
                url = self.rewrite(url)
                if url not in raw_seen:
                    raw_seen.add(url)
                    fresh.append(url)

            results = await asyncio.gather(*(exchange(url) for url in fresh))

            candidates = []
            for result in results:
                if not isinstance(result, Found):
                    self._log_failure(result, page_url)
                    continue
                target = self.rewrite(result.value)
                if target in yielded:
                    continue
                candidate = make_candidate(target)
                if candidate is not None:
                    yielded.add(target)
                    candidates.append(candidate)
            return candidates

        discovery = self._player_requests(document, page_url)
        static_urls = self.scan_document(document, self.base_url) + discovery.urls

        tasks = [asyncio.ensure_future(follow(request)) for request in discovery.requests]
        try:
            for candidate in await finalize(static_urls):
                yield candidate

            for future in asyncio.as_completed(tasks):
                result = await future
                if not isinstance(result, Found):
                    self._log_failure(result, page_url)
                    continue
                for candidate in await finalize(result.value):
                    yield candidate
        finally:
            for task in tasks:
                task.cancel()

    async def _hand_off(
        self,
        registry: "ExtractorRegistry",
        candidate: CandidateLink,
        page_url: str,
        on_subtitle: SubtitleCallback,
        on_link: LinkCallback,
        semaphore: asyncio.Semaphore,
    ) -> bool:
        async with semaphore:
            try:
                await registry.resolve(candidate.url, page_url, on_subtitle, on_link)
                return True
            except Exception as e:
                self.logger.warning(
                    f"Extractor failed for {candidate.url}: {e}",
                    extra={"candidate": candidate.url, "page_url": page_url},
                )
                return False

    async def resolve_links(
        self,
        document: Node,
        page_url: str,
        registry: "ExtractorRegistry",
        on_subtitle: SubtitleCallback,
        on_link: LinkCallback,
    ) -> bool:
        """
        Hand every candidate of a page to the extractor registry.

        Args:
            document: Parsed player page
            page_url: URL of the player page, sent as referer
            registry: Extractor registry that emits streams and subtitles
            on_subtitle: Callback receiving subtitle tracks
            on_link: Callback receiving playable streams

        Returns:
            True if at least one candidate was handed off
        """
        semaphore = asyncio.Semaphore(self.max_concurrency)
        tasks = []

        async for candidate in self.iter_candidates(document, page_url):
            self.logger.debug(f"Handing off candidate {candidate.url}")
            tasks.append(
                asyncio.ensure_future(
                    self._hand_off(registry, candidate, page_url, on_subtitle, on_link, semaphore)
                )
            )

        if tasks:
            results = await asyncio.gather(*tasks)
            self.logger.info(
                f"Handed off {len(tasks)} candidates from {page_url}, {sum(results)} resolved",
                extra={"page_url": page_url, "candidates": len(tasks)},
            )
        else:
            self.logger.info(f"No candidate links found on {page_url}")

        return bool(tasks)


__all__ = [
    "KNOWN_HOSTERS",
    "SCRIPT_PATTERNS",
    "DENYLISTED_DOMAINS",
    "SubtitleCallback",
    "LinkCallback",
    "is_denylisted",
    "mine_script",
    "make_candidate",
    "PlayerRequest",
    "LinkResolver",
]
