"""
Sentiment signal engine.

This package routes posts to tracked symbols, scores each symbol's
post group and keeps the per-symbol composite score history.
"""

from .history import HistoryStore
from .router import SymbolRouter
from .factors import FactorScorer, FactorScores
from .classifier import SignalClassifier
from .engine import SignalEngine, BatchPhase

__all__ = [
    'HistoryStore',
    'SymbolRouter',
    'FactorScorer',
    'FactorScores',
    'SignalClassifier',
    'SignalEngine',
    'BatchPhase'
]
