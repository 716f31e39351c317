"""
CinePlux - Catalog scraper for Spanish-language streaming sites.

Reads home pages, search results, detail pages and playable links through
configurable selector-driven providers, with a CLI built on Typer and Rich.
"""

__version__ = "0.1.0"
__author__ = "CinePlux Team"

# Package metadata
__title__ = "cineplux"
__description__ = "Catalog scraper for Spanish-language streaming sites"
__license__ = "MIT"

# Version info tuple for programmatic access
VERSION_INFO = tuple(map(int, __version__.split(".")))

__all__ = [
    "__version__",
    "__author__",
    "VERSION_INFO",
]
