"""
Tests for the aiohttp-backed HTTP client against a local test server.
"""

import asyncio
import time
from contextlib import asynccontextmanager
from typing import Dict, List

import pytest
from aiohttp import web
from aiohttp import test_utils

from cineplux.core.config_schemas import HttpSettings
from cineplux.core.exceptions import NetworkError
from cineplux.core.http import HttpClient


SLOW_SECONDS = 0.5


def build_app(hits: Dict[str, int], stamps: List[float]) -> web.Application:
    """Small site: pages, errors, redirects, a form echo and slow endpoints."""

    def count(request: web.Request) -> int:
        hits[request.path] = hits.get(request.path, 0) + 1
        return hits[request.path]

    async def page(request):
        count(request)
        stamps.append(time.monotonic())
        body = f"<html><body><h1>Hola</h1><p>{request.headers.get('User-Agent', '')}</p>"
        body += f"<p class='extra'>{request.headers.get('X-Extra', '')}</p></body></html>"
        return web.Response(text=body, content_type="text/html", headers={"X-Served-By": "test"})

    async def missing(request):
        count(request)
        return web.Response(status=404, text="no existe")

    async def moved(request):
        count(request)
        return web.Response(status=302, headers={"Location": "/page"})

    async def form(request):
        count(request)
        data = await request.post()
        return web.json_response({"post": data.get("post"), "nume": data.get("nume")})

    async def flaky(request):
        # Stalls on the first hit only
        if count(request) == 1:
            await asyncio.sleep(SLOW_SECONDS)
        return web.Response(text="ok")

    async def stalled(request):
        count(request)
        await asyncio.sleep(SLOW_SECONDS)
        return web.Response(text="tarde")

    app = web.Application()
    app.router.add_get("/page", page)
    app.router.add_get("/missing", missing)
    app.router.add_get("/moved", moved)
    app.router.add_post("/form", form)
    app.router.add_get("/flaky", flaky)
    app.router.add_get("/stalled", stalled)
    return app


@asynccontextmanager
async def serve(settings: HttpSettings = None):
    """Yield (client, server, hits, stamps) around a running test server."""
    hits: Dict[str, int] = {}
    stamps: List[float] = []
    server = test_utils.TestServer(build_app(hits, stamps))
    await server.start_server()
    client = HttpClient(settings or HttpSettings(retry_delay=0.0), headers={"X-Extra": "sí"})
    try:
        yield client, server, hits, stamps
    finally:
        await client.close()
        await server.close()


class TestHttpClient:
    """Test requests, status handling and retries."""

    @pytest.mark.asyncio
    async def test_get_reads_body_and_headers(self):
        async with serve() as (client, server, hits, _):
            response = await client.get(str(server.make_url("/page")))

        assert response.ok
        assert response.status == 200
        assert response.header("x-served-by") == "test"
        assert response.document.h1.get_text() == "Hola"
        assert HttpSettings().user_agent in response.text
        assert response.document.select_one("p.extra").get_text() == "sí"
        assert hits["/page"] == 1

    @pytest.mark.asyncio
    async def test_error_status_raises_without_retry(self):
        async with serve() as (client, server, hits, _):
            url = str(server.make_url("/missing"))
            with pytest.raises(NetworkError) as excinfo:
                await client.get(url)

        assert excinfo.value.status_code == 404
        assert excinfo.value.url == url
        assert hits["/missing"] == 1

    @pytest.mark.asyncio
    async def test_relative_url_is_refused(self):
        async with serve() as (client, _, hits, _):
            with pytest.raises(NetworkError, match="relative URL"):
                await client.get("/page")

        assert hits == {}

    @pytest.mark.asyncio
    async def test_redirects_followed_by_default(self):
        async with serve() as (client, server, _, _):
            response = await client.get(str(server.make_url("/moved")))

        assert response.status == 200
        assert response.url.endswith("/page")

    @pytest.mark.asyncio
    async def test_redirect_returned_when_not_followed(self):
        async with serve() as (client, server, hits, _):
            response = await client.get(str(server.make_url("/moved")), allow_redirects=False)

        assert response.status == 302
        assert response.header("Location") == "/page"
        assert "/page" not in hits

    @pytest.mark.asyncio
    async def test_post_form_data(self):
        async with serve() as (client, server, _, _):
            response = await client.post(
                str(server.make_url("/form")), data={"post": "42", "nume": "1"}
            )

        assert response.json() == {"post": "42", "nume": "1"}

    @pytest.mark.asyncio
    async def test_timeout_is_retried(self):
        async with serve() as (client, server, hits, _):
            response = await client.get(str(server.make_url("/flaky")), timeout=0.1)

        assert response.text == "ok"
        assert hits["/flaky"] == 2

    @pytest.mark.asyncio
    async def test_gives_up_after_all_retries(self):
        settings = HttpSettings(max_retries=1, retry_delay=0.0)
        async with serve(settings) as (client, server, hits, _):
            with pytest.raises(NetworkError, match="after 2 attempts"):
                await client.get(str(server.make_url("/stalled")), timeout=0.1)

        assert hits["/stalled"] == 2

    @pytest.mark.asyncio
    async def test_rate_limit_spaces_concurrent_requests(self):
        settings = HttpSettings(rate_limit=0.2, retry_delay=0.0)
        async with serve(settings) as (client, server, _, stamps):
            url = str(server.make_url("/page"))
            await asyncio.gather(*(client.get(url) for _ in range(3)))

        gaps = [later - earlier for earlier, later in zip(stamps, stamps[1:])]
        assert len(gaps) == 2
        assert all(gap >= 0.15 for gap in gaps)

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self):
        client = HttpClient()
        assert not client.session.closed

        await client.close()
        await client.close()

        assert client._session is None
