"""
Core Layer - Data models, configuration, HTTP and provider management.

This module contains the data models, configuration handling, HTTP client
and provider management that power CinePlux.
"""

from cineplux.core.config_manager import ConfigManager
from cineplux.core.config_schemas import AppSettings, ProviderConfig, ProvidersConfig
from cineplux.core.config_defaults import (
    create_default_config_files,
    get_default_providers,
    get_default_settings,
)
from cineplux.core.exceptions import (
    CinePluxError,
    ConfigurationError,
    ExtractionError,
    NetworkError,
    NothingLoadedError,
    ProviderError,
    SearchError,
)
from cineplux.core.http import HttpClient, HttpResponse
from cineplux.core.models import (
    CandidateLink,
    CatalogEntry,
    ContentKind,
    DetailRecord,
    EpisodeRef,
    HomePage,
    HomeSection,
    MediaKind,
    SelectorChain,
    SelectorPair,
    StreamLink,
    SubtitleTrack,
)
from cineplux.core.results import Found, NotFound, TransientError

__all__ = [
    # Data Models
    "CandidateLink",
    "CatalogEntry",
    "ContentKind",
    "DetailRecord",
    "EpisodeRef",
    "HomePage",
    "HomeSection",
    "MediaKind",
    "SelectorChain",
    "SelectorPair",
    "StreamLink",
    "SubtitleTrack",
    # Stage Results
    "Found",
    "NotFound",
    "TransientError",
    # Configuration Management
    "ConfigManager",
    "AppSettings",
    "ProviderConfig",
    "ProvidersConfig",
    "create_default_config_files",
    "get_default_providers",
    "get_default_settings",
    # HTTP
    "HttpClient",
    "HttpResponse",
    # Exceptions
    "CinePluxError",
    "ConfigurationError",
    "ExtractionError",
    "NetworkError",
    "NothingLoadedError",
    "ProviderError",
    "SearchError",
]
