"""
AnimeFLV Provider - Anime source for animeflv.

JSON search API, script-embedded episode lists and the generic link
pipeline.
"""

from .parser import AnimeflvParser
from .provider import AnimeflvProvider

__all__ = ["AnimeflvProvider", "AnimeflvParser"]
