"""
Tests for engine resolution and the provider manager.
"""

import pytest

from cineplux.core.config_manager import ConfigManager
from cineplux.core.exceptions import ConfigurationError, ProviderError, SearchError
from cineplux.core.provider_manager import ProviderManager, resolve_engine
from cineplux.extractors.registry import ExtractorRegistry
from cineplux.plugins.animeflv import AnimeflvProvider
from cineplux.plugins.site import SiteProvider

from tests.conftest import LISTING_HTML


@pytest.fixture
def config_manager(tmp_path):
    manager = ConfigManager(tmp_path)
    for key in list(manager.providers.providers):
        manager.disable_provider(key)
    manager.update_provider_config("local", {"name": "Local", "base_url": "https://local.test", "priority": 1})
    manager.update_provider_config("other", {"name": "Other", "base_url": "https://other.test", "priority": 2})
    return manager


@pytest.fixture
def manager(config_manager, fake_http):
    return ProviderManager(config_manager, http=fake_http, registry=ExtractorRegistry())


class TestResolveEngine:
    """Test engine name resolution."""

    def test_registered_engines(self):
        assert resolve_engine("generic") is SiteProvider
        assert resolve_engine("animeflv") is AnimeflvProvider

    def test_dotted_path(self):
        assert resolve_engine("cineplux.plugins.site:SiteProvider") is SiteProvider

    @pytest.mark.parametrize(
        "engine",
        ["bogus", "cineplux.plugins.base:BaseProvider", "cineplux.nowhere:Thing", "cineplux.core.models:CatalogEntry"],
    )
    def test_invalid_engines(self, engine):
        with pytest.raises(ConfigurationError):
            resolve_engine(engine)


class TestProviderManager:
    """Test provider loading and cross-provider search."""

    @pytest.mark.asyncio
    async def test_active_providers_by_priority(self, manager):
        active = await manager.get_active_providers()
        assert list(active) == ["local", "other"]
        assert isinstance(active["local"], SiteProvider)

    @pytest.mark.asyncio
    async def test_providers_are_cached(self, manager):
        first = await manager.load_provider("local")
        second = await manager.load_provider("local")
        assert first is second

    @pytest.mark.asyncio
    async def test_unknown_provider(self, manager):
        assert await manager.load_provider("nope") is None
        with pytest.raises(ProviderError):
            await manager.get_provider("nope")

    @pytest.mark.asyncio
    async def test_broken_engine_is_reported(self, config_manager, manager):
        config_manager.update_provider_config(
            "broken", {"name": "Broken", "base_url": "https://broken.test", "engine": "cineplux.nowhere:Thing"}
        )

        with pytest.raises(ProviderError, match="not available"):
            await manager.get_provider("broken")

        status = manager.get_status()
        assert status["providers"]["broken"]["error"] is not None
        assert status["providers"]["local"]["loaded"] is False

    @pytest.mark.asyncio
    async def test_search_all_isolates_failures(self, manager, fake_http):
        fake_http.add("https://local.test/?s=casa", LISTING_HTML)

        results = await manager.search_all("casa")

        assert [entry.title for entry in results["local"]] == ["Uno", "Dos", "Tres"]
        assert results["other"] == []
        assert manager.get_status()["providers"]["other"]["error"]

    @pytest.mark.asyncio
    async def test_search_all_restricted_and_truncated(self, config_manager, manager, fake_http):
        config_manager.update_setting("search.max_results_per_provider", 2)
        fake_http.add("https://local.test/?s=casa", LISTING_HTML)

        results = await manager.search_all("casa", providers=["local"])

        assert list(results) == ["local"]
        assert len(results["local"]) == 2

    @pytest.mark.asyncio
    async def test_short_query_rejected(self, manager, fake_http):
        with pytest.raises(SearchError):
            await manager.search_all("a")
        assert fake_http.calls == []

    @pytest.mark.asyncio
    async def test_no_active_providers(self, config_manager, manager):
        config_manager.disable_provider("local")
        config_manager.disable_provider("other")

        assert await manager.search_all("casa") == {}

    @pytest.mark.asyncio
    async def test_check_connections(self, config_manager, manager, fake_http):
        fake_http.add("https://local.test", "<html></html>")

        results = await manager.check_connections()

        assert results == {"local": True, "other": False}
        assert await manager.check_connections(["nope"]) == {"nope": False}

    @pytest.mark.asyncio
    async def test_cleanup_leaves_injected_client_open(self, manager, fake_http):
        await manager.load_provider("local")
        await manager.cleanup()

        assert fake_http.closed is False
        assert manager.get_status()["loaded"] == 0
