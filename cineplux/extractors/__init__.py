"""
Extractors - turn candidate links into playable streams.
"""

from cineplux.extractors.base import BaseExtractor, ExtractionResult
from cineplux.extractors.direct import DirectMediaExtractor
from cineplux.extractors.registry import ExtractorRegistry, default_registry
from cineplux.extractors.streamtape import StreamtapeExtractor

__all__ = [
    "BaseExtractor",
    "ExtractionResult",
    "DirectMediaExtractor",
    "StreamtapeExtractor",
    "ExtractorRegistry",
    "default_registry",
]
