"""
Provider Manager - Builds providers from configuration and coordinates them.

This module resolves each provider record's engine to a provider class,
caches loaded instances, and runs cross-provider operations such as
concurrent search with per-provider error isolation.
"""

import asyncio
import importlib
import inspect
import logging
from typing import Any, Dict, List, Optional, Tuple, Type

from cineplux.core.config_manager import ConfigManager
from cineplux.core.config_schemas import ProviderConfig
from cineplux.core.exceptions import CinePluxError, ConfigurationError, ProviderError, SearchError
from cineplux.core.http import HttpClient
from cineplux.core.models import CatalogEntry
from cineplux.extractors.registry import ExtractorRegistry, default_registry
from cineplux.plugins.base import BaseProvider


logger = logging.getLogger(__name__)

ENGINES: Dict[str, str] = {
    "generic": "cineplux.plugins.site:SiteProvider",
    "animeflv": "cineplux.plugins.animeflv:AnimeflvProvider",
}


def resolve_engine(engine: str) -> Type[BaseProvider]:
    """
    Resolve an engine name or ``module:Class`` path to a provider class.

    Raises:
        ConfigurationError: If the engine cannot be imported or is not a provider
    """
    target = ENGINES.get(engine, engine)
    module_name, sep, class_name = target.partition(":")
    if not sep or not class_name:
        raise ConfigurationError(f"Unknown provider engine: {engine}")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigurationError(f"Cannot import provider engine {engine}: {e}")

    provider_class = getattr(module, class_name, None)
    if (
        not inspect.isclass(provider_class)
        or not issubclass(provider_class, BaseProvider)
        or inspect.isabstract(provider_class)
    ):
        raise ConfigurationError(f"Engine {engine} is not a concrete provider class")
    return provider_class


class ProviderManager:
    """
    Manages provider instances built from provider configuration records.

    All providers share one HTTP client and one extractor registry.
    """

    def __init__(
        self,
        config_manager: ConfigManager,
        http: Optional[HttpClient] = None,
        registry: Optional[ExtractorRegistry] = None,
    ):
        """
        Initialize provider manager.

        Args:
            config_manager: Configuration manager instance
            http: Shared HTTP client (created from settings when None)
            registry: Shared extractor registry (built-in one when None)
        """
        self.config_manager = config_manager
        self._owns_http = http is None
        self.http = http or HttpClient(config_manager.settings.http)
        self.registry = registry or default_registry(self.http)

        self._loaded_providers: Dict[str, BaseProvider] = {}
        self._provider_errors: Dict[str, Exception] = {}

    def _config_for(self, key: str) -> Optional[ProviderConfig]:
        return self.config_manager.providers.get_provider(key)

    async def load_provider(self, key: str) -> Optional[BaseProvider]:
        """
        Load a specific provider by key.

        Args:
            key: Provider identifier in providers.json

        Returns:
            Loaded provider instance or None if loading failed
        """
        if key in self._loaded_providers:
            return self._loaded_providers[key]

        config = self._config_for(key)
        if config is None:
            logger.error(f"Provider not found: {key}")
            return None

        try:
            provider_class = resolve_engine(config.engine)
            provider = provider_class(
                config,
                http=self.http,
                registry=self.registry,
                settings=self.config_manager.settings.http,
            )
        except ConfigurationError as e:
            self._provider_errors[key] = e
            logger.error(f"Failed to load provider {key}: {e}")
            return None

        self._loaded_providers[key] = provider
        logger.info(f"Successfully loaded provider: {key} ({provider_class.__name__})")
        return provider

    async def get_provider(self, key: str) -> BaseProvider:
        """
        Get a loaded provider, raising when it is unavailable.

        Raises:
            ProviderError: If the provider is unknown or failed to load
        """
        provider = await self.load_provider(key)
        if provider is None:
            error = self._provider_errors.get(key)
            reason = f": {error}" if error else ""
            raise ProviderError(f"Provider {key} is not available{reason}", provider_name=key)
        return provider

    async def get_active_providers(self) -> Dict[str, BaseProvider]:
        """
        Get all enabled providers that loaded successfully, by priority.

        Returns:
            Dictionary of provider key to provider instance
        """
        active = {}
        for key in self.config_manager.get_enabled_providers():
            provider = await self.load_provider(key)
            if provider is not None:
                active[key] = provider
        return active

    def validate_query(self, query: str) -> str:
        """
        Validate a search query against the search settings.

        Raises:
            SearchError: If the query is too short
        """
        query = (query or "").strip()
        min_length = self.config_manager.settings.search.min_query_length
        if len(query) < min_length:
            raise SearchError(
                f"Search query must be at least {min_length} characters",
                query=query,
            )
        return query

    async def search_all(
        self,
        query: str,
        max_concurrent: Optional[int] = None,
        providers: Optional[List[str]] = None,
    ) -> Dict[str, List[CatalogEntry]]:
        """
        Search across active providers concurrently.

        A provider that fails contributes an empty list; its error is kept
        for ``get_status``.

        Args:
            query: Search query string
            max_concurrent: Maximum number of concurrent provider searches
            providers: Restrict the search to these provider keys

        Returns:
            Dictionary mapping provider keys to their search results
        """
        query = self.validate_query(query)
        active = await self.get_active_providers()
        if providers is not None:
            active = {key: provider for key, provider in active.items() if key in providers}

        if not active:
            logger.warning("No active providers available for search")
            return {}

        if max_concurrent is None:
            max_concurrent = self.config_manager.providers.max_concurrent_providers
        limit = self.config_manager.settings.search.max_results_per_provider

        semaphore = asyncio.Semaphore(max_concurrent)

        async def search_provider(key: str, provider: BaseProvider) -> Tuple[str, List[CatalogEntry]]:
            async with semaphore:
                try:
                    logger.debug(f"Searching provider {key} for: {query}")
                    results = await provider.search(query)
                    logger.debug(f"Provider {key} returned {len(results)} results")
                    return key, results[:limit]
                except CinePluxError as e:
                    logger.error(f"Search failed for provider {key}: {e}")
                    self._provider_errors[key] = e
                    return key, []

        results = await asyncio.gather(*(search_provider(key, provider) for key, provider in active.items()))
        search_results = dict(results)

        total = sum(len(entries) for entries in search_results.values())
        logger.info(f"Search complete: {total} total results from {len(search_results)} providers")
        return search_results

    async def check_connections(self, providers: Optional[List[str]] = None) -> Dict[str, bool]:
        """
        Check that providers can reach their sites.

        Args:
            providers: Provider keys to check (all enabled providers if None)

        Returns:
            Dictionary mapping provider keys to reachability
        """
        if providers is None:
            providers = list(self.config_manager.get_enabled_providers())

        async def check(key: str) -> Tuple[str, bool]:
            provider = await self.load_provider(key)
            if provider is None:
                return key, False
            ok = await provider.validate_connection()
            logger.info(f"Provider {key} connection {'ok' if ok else 'failed'}")
            return key, ok

        return dict(await asyncio.gather(*(check(key) for key in providers)))

    def get_status(self) -> Dict[str, Any]:
        """
        Get status information for all configured providers.

        Returns:
            Dictionary containing provider status information
        """
        configured = self.config_manager.providers.providers
        status: Dict[str, Any] = {
            "configured": len(configured),
            "loaded": len(self._loaded_providers),
            "errors": len(self._provider_errors),
            "providers": {},
        }

        for key, config in configured.items():
            info: Dict[str, Any] = {
                "name": config.name,
                "engine": config.engine,
                "base_url": config.base_url,
                "enabled": config.enabled,
                "priority": config.priority,
                "loaded": key in self._loaded_providers,
                "error": None,
            }
            if key in self._provider_errors:
                info["error"] = str(self._provider_errors[key])
            status["providers"][key] = info

        return status

    async def cleanup(self) -> None:
        """Clean up loaded providers and the shared HTTP client."""
        logger.debug("Cleaning up provider manager")

        await asyncio.gather(
            *(provider.cleanup() for provider in self._loaded_providers.values()),
            return_exceptions=True,
        )
        self._loaded_providers.clear()
        self._provider_errors.clear()

        if self._owns_http:
            await self.http.close()


__all__ = ["ENGINES", "resolve_engine", "ProviderManager"]
