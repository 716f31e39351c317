"""
Provider Layer - Streaming-site provider implementations.

This module contains the provider interface, the generic configuration
driven provider and the providers that need site-specific code.
"""

from cineplux.plugins.base import BaseProvider, ProviderMetadata

__all__ = [
    "BaseProvider",
    "ProviderMetadata",
]
