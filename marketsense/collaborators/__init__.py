"""
Collaborator contracts and reference implementations.

The signal engine never imports this package; the application layer
wires these services around it.
"""

from .base import PostSource, FeatureExtractor, DataStorage, VisualizationService
from .text_processor import KeywordFeatureExtractor
from .synthetic import SyntheticPostGenerator, SyntheticPostSource
from .memory_storage import InMemoryStorage

__all__ = [
    'PostSource',
    'FeatureExtractor',
    'DataStorage',
    'VisualizationService',
    'KeywordFeatureExtractor',
    'SyntheticPostGenerator',
    'SyntheticPostSource',
    'InMemoryStorage'
]
