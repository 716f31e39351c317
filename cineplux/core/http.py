"""
HTTP Client - Shared aiohttp session with retries, timeouts and rate limiting.

Every outbound fetch made by providers, the link pipeline and extractors
goes through ``HttpClient``. Responses are read eagerly and the HTML
document is parsed lazily with BeautifulSoup on first access.
"""

import asyncio
import json
import logging
import time
from typing import Any, Dict, Mapping, Optional
from urllib.parse import urlparse

import aiohttp
from bs4 import BeautifulSoup

from cineplux.core.config_schemas import HttpSettings
from cineplux.core.exceptions import NetworkError


logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded; charset=UTF-8"

AJAX_HEADERS = {
    "X-Requested-With": "XMLHttpRequest",
    "Content-Type": FORM_CONTENT_TYPE,
}


class HttpResponse:
    """Fully read response: status, final URL, body text and headers."""

    def __init__(
        self,
        status: int,
        url: str,
        text: str,
        headers: Optional[Mapping[str, str]] = None,
    ):
        self.status = status
        self.url = url
        self.text = text
        # Header names are case-insensitive; keep them lower-cased
        self.headers: Dict[str, str] = {
            key.lower(): value for key, value in (headers or {}).items()
        }
        self._document: Optional[BeautifulSoup] = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def document(self) -> BeautifulSoup:
        """Parsed HTML document (parsed once, on first access)."""
        if self._document is None:
            self._document = BeautifulSoup(self.text, "html.parser")
        return self._document

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.headers.get(name.lower(), default)

    def json(self) -> Any:
        """Decode the body as JSON. Raises ValueError on malformed bodies."""
        return json.loads(self.text)

    def __repr__(self) -> str:
        return f"HttpResponse(status={self.status}, url='{self.url}')"


class HttpClient:
    """
    Thin async HTTP client over a pooled aiohttp session.

    Transport errors and timeouts are retried with linear backoff; HTTP
    error statuses (>= 400) raise ``NetworkError`` immediately.
    """

    def __init__(
        self,
        settings: Optional[HttpSettings] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize the client.

        Args:
            settings: HTTP settings (timeouts, retries, user agent)
            headers: Extra default headers sent with every request
        """
        self.settings = settings or HttpSettings()
        self.default_headers = {
            "User-Agent": self.settings.user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "es-ES,es;q=0.9,en;q=0.5",
        }
        if headers:
            self.default_headers.update(headers)

        self._session: Optional[aiohttp.ClientSession] = None
        self._last_request_time = 0.0
        self._rate_lock: Optional[asyncio.Lock] = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session with proper configuration."""
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(
                limit=20,
                limit_per_host=self.settings.max_concurrency,
                ttl_dns_cache=300,
            )
            self._session = aiohttp.ClientSession(
                connector=connector,
                timeout=aiohttp.ClientTimeout(total=self.settings.timeout),
                headers=self.default_headers,
            )
        return self._session

    async def _rate_limit(self) -> None:
        """Enforce the configured minimum delay between requests."""
        if self.settings.rate_limit <= 0:
            return

        if self._rate_lock is None:
            self._rate_lock = asyncio.Lock()

        # Serialized so concurrent callers keep the minimum gap
        async with self._rate_lock:
            elapsed = time.monotonic() - self._last_request_time
            if elapsed < self.settings.rate_limit:
                await asyncio.sleep(self.settings.rate_limit - elapsed)
            self._last_request_time = time.monotonic()

    async def request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        data: Optional[Any] = None,
        timeout: Optional[float] = None,
        allow_redirects: bool = True,
    ) -> HttpResponse:
        """
        Make an HTTP request with retries and error handling.

        Args:
            method: HTTP method
            url: Absolute URL to request
            headers: Per-request headers merged over the defaults
            data: Form data or body for POST requests
            timeout: Per-request timeout override in seconds
            allow_redirects: Whether redirects are followed

        Returns:
            Fully read HttpResponse

        Raises:
            NetworkError: On HTTP error status or after all retries failed
        """
        if not urlparse(url).netloc:
            raise NetworkError(f"Refusing to fetch relative URL: {url}", url=url)

        await self._rate_limit()

        request_timeout = aiohttp.ClientTimeout(total=timeout or self.settings.timeout)
        last_exception: Optional[BaseException] = None

        for attempt in range(self.settings.max_retries + 1):
            try:
                logger.debug(f"Making {method} request to {url} (attempt {attempt + 1})")

                async with self.session.request(
                    method,
                    url,
                    headers=headers,
                    data=data,
                    timeout=request_timeout,
                    allow_redirects=allow_redirects,
                ) as response:
                    text = await response.text(errors="replace")

                    if response.status >= 400:
                        raise NetworkError(
                            f"HTTP {response.status} error for {url}",
                            url=url,
                            status_code=response.status,
                            details=text[:500],
                        )

                    return HttpResponse(
                        status=response.status,
                        url=str(response.url),
                        text=text,
                        headers=dict(response.headers),
                    )

            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                last_exception = e
                logger.warning(f"Request to {url} failed (attempt {attempt + 1}): {e!r}")

                if attempt < self.settings.max_retries:
                    await asyncio.sleep(self.settings.retry_delay * (attempt + 1))

        # All retries failed
        raise NetworkError(
            f"Request failed after {self.settings.max_retries + 1} attempts: {last_exception!r}",
            url=url,
            details=str(last_exception),
        )

    async def get(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        timeout: Optional[float] = None,
        allow_redirects: bool = True,
    ) -> HttpResponse:
        """GET a URL."""
        return await self.request(
            "GET", url, headers=headers, timeout=timeout, allow_redirects=allow_redirects
        )

    async def post(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        data: Optional[Any] = None,
        timeout: Optional[float] = None,
    ) -> HttpResponse:
        """POST form data to a URL."""
        return await self.request("POST", url, headers=headers, data=data, timeout=timeout)

    async def close(self) -> None:
        """Close the underlying session."""
        if self._session and not self._session.closed:
            await self._session.close()
            logger.debug("HTTP session closed")
        self._session = None

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()


__all__ = ["HttpClient", "HttpResponse", "AJAX_HEADERS", "FORM_CONTENT_TYPE"]
