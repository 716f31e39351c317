"""
Shared fixtures: an in-memory HTTP client and small provider records.
"""

import json
from typing import Any, Dict, List, Optional, Tuple

import pytest
from bs4 import BeautifulSoup

from cineplux.core.config_schemas import ProviderConfig
from cineplux.core.exceptions import NetworkError
from cineplux.core.http import HttpResponse


BASE_URL = "https://site.test"


class FakeHttpClient:
    """
    HttpClient stand-in serving canned responses keyed by (method, url).

    Unknown URLs raise NetworkError with a 404, like the real client does
    for error statuses.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Any] = {}
        self.calls: List[Tuple[str, str, Optional[Dict[str, Any]]]] = []
        self.closed = False

    def add(
        self,
        url: str,
        text: str = "",
        status: int = 200,
        headers: Optional[Dict[str, str]] = None,
        method: str = "GET",
    ) -> None:
        self.routes[(method, url)] = HttpResponse(status=status, url=url, text=text, headers=headers)

    def add_json(self, url: str, payload: Any, method: str = "POST") -> None:
        self.add(url, json.dumps(payload), method=method)

    def fail(self, url: str, method: str = "GET", status: Optional[int] = None) -> None:
        self.routes[(method, url)] = NetworkError(f"HTTP {status} error for {url}", url=url, status_code=status)

    def requested(self, method: str = None) -> List[str]:
        return [url for m, url, _ in self.calls if method is None or m == method]

    async def request(
        self,
        method: str,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        data: Optional[Any] = None,
        timeout: Optional[float] = None,
        allow_redirects: bool = True,
    ) -> HttpResponse:
        self.calls.append((method, url, data))
        route = self.routes.get((method, url))
        if route is None:
            raise NetworkError(f"HTTP 404 error for {url}", url=url, status_code=404)
        if isinstance(route, Exception):
            raise route
        return route

    async def get(self, url, headers=None, timeout=None, allow_redirects=True) -> HttpResponse:
        return await self.request("GET", url, headers=headers, timeout=timeout, allow_redirects=allow_redirects)

    async def post(self, url, headers=None, data=None, timeout=None) -> HttpResponse:
        return await self.request("POST", url, headers=headers, data=data, timeout=timeout)

    async def close(self) -> None:
        self.closed = True


def soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


LISTING_HTML = """
<html><body>
<ul class="MovieList">
  <li class="TPostMv">
    <a href="/pelicula/uno"><img data-src="/img/uno.jpg"><h2 class="Title">Uno</h2></a>
  </li>
  <li class="TPostMv">
    <a href="/serie/dos"><img src="https://cdn.test/dos.jpg"><h2 class="Title">Dos</h2></a>
  </li>
  <li class="TPostMv">
    <a href="/pelicula/uno"><h2 class="Title">Uno otra vez</h2></a>
  </li>
  <li class="TPostMv">
    <a href="/pelicula/tres"><img src="data:image/gif;base64,R0lGOD"><h2 class="Title">Tres</h2></a>
  </li>
</ul>
</body></html>
"""

EMPTY_SEARCH_HTML = """
<html><body><div class="content"><p>No se encontraron resultados para tu búsqueda.</p></div></body></html>
"""

SERIES_DETAIL_HTML = """
<html>
<head><meta property="og:image" content="https://image.tmdb.org/t/p/original/back.jpg"></head>
<body>
  <h1 class="Title">La Serie</h1>
  <div class="Description"><p>Una familia de ladrones.</p></div>
  <span class="Date">2019</span>
  <div class="genres"><a>Drama</a><a>Crimen</a><a>Drama</a></div>
  <ul class="episodios">
    <li>
      <img data-src="/thumbs/1.jpg">
      <div class="numerando">1 - 1</div>
      <div class="episodiotitle"><a href="/episodio/la-serie-1x1">Piloto</a></div>
    </li>
    <li>
      <div class="numerando">1 - 2</div>
      <div class="episodiotitle"><a href="/episodio/la-serie-1x2">El plan</a></div>
    </li>
    <li>
      <div class="numerando">1 - 2</div>
      <div class="episodiotitle"><a href="/episodio/la-serie-1x2">El plan (dup)</a></div>
    </li>
  </ul>
</body>
</html>
"""


@pytest.fixture
def fake_http() -> FakeHttpClient:
    return FakeHttpClient()


@pytest.fixture
def provider_config() -> ProviderConfig:
    return ProviderConfig(name="Test", base_url=BASE_URL)
