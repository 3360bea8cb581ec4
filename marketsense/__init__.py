"""
Marketsense: directional market-sentiment signals from social-media posts.
"""

from .core.config import EngineConfig, ScoringWeights, ClassificationThresholds
from .models import Post, MarketSignal, SignalType
from .signals import SignalEngine, HistoryStore, SymbolRouter, FactorScorer, SignalClassifier

__version__ = "0.1.0"

__all__ = [
    'EngineConfig',
    'ScoringWeights',
    'ClassificationThresholds',
    'Post',
    'MarketSignal',
    'SignalType',
    'SignalEngine',
    'HistoryStore',
    'SymbolRouter',
    'FactorScorer',
    'SignalClassifier',
]
