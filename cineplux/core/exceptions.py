"""
Core Exceptions - Custom exception classes for CinePlux.

This module defines custom exception classes used throughout the
CinePlux library for consistent error handling and user feedback.
"""

from typing import Optional, Any


class CinePluxError(Exception):
    """Base exception class for all CinePlux-specific errors."""

    def __init__(self, message: str, details: Optional[Any] = None):
        """
        Initialize CinePlux error.

        Args:
            message: Human-readable error message
            details: Additional error details for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details

    def __str__(self) -> str:
        return self.message


class ConfigurationError(CinePluxError):
    """Raised when configuration-related errors occur."""

    def __init__(self, message: str, config_path: Optional[str] = None, details: Optional[Any] = None):
        """
        Initialize configuration error.

        Args:
            message: Error description
            config_path: Path to the problematic configuration file
            details: Additional error context
        """
        super().__init__(message, details)
        self.config_path = config_path


class ProviderError(CinePluxError):
    """Raised when a provider cannot complete an entry point."""

    def __init__(self, message: str, provider_name: Optional[str] = None, details: Optional[Any] = None):
        """
        Initialize provider error.

        Args:
            message: Error description
            provider_name: Name of the provider that failed
            details: Additional error context
        """
        super().__init__(message, details)
        self.provider_name = provider_name


class NothingLoadedError(ProviderError):
    """
    Raised when every attempted section or selector yielded zero entries.

    Distinct from an empty result list: an empty list means the site had
    no matching content, this error means the layout could not be read.
    """


class NetworkError(CinePluxError):
    """Raised when network-related errors occur."""

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None, details: Optional[Any] = None):
        """
        Initialize network error.

        Args:
            message: Error description
            url: URL that caused the error
            status_code: HTTP status code if applicable
            details: Additional error context
        """
        super().__init__(message, details)
        self.url = url
        self.status_code = status_code


class ExtractionError(CinePluxError):
    """Raised when a candidate link cannot be turned into playable streams."""

    def __init__(self, message: str, url: Optional[str] = None, details: Optional[Any] = None):
        super().__init__(message, details)
        self.url = url


class SearchError(CinePluxError):
    """Raised when search-related errors occur."""

    def __init__(self, message: str, query: Optional[str] = None, source: Optional[str] = None, details: Optional[Any] = None):
        """
        Initialize search error.

        Args:
            message: Error description
            query: Search query that caused the error
            source: Provider that failed
            details: Additional error context
        """
        super().__init__(message, details)
        self.query = query
        self.source = source


# Export all exception classes
__all__ = [
    "CinePluxError",
    "ConfigurationError",
    "ProviderError",
    "NothingLoadedError",
    "NetworkError",
    "ExtractionError",
    "SearchError",
]
