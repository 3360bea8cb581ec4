"""
Market signal data classes.

MarketSignal is the engine's only output and is consumed by the
persistence and visualization collaborators.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, Any

class SignalType(Enum):
    BULLISH = "Bullish"
    BEARISH = "Bearish"
    NEUTRAL = "Neutral"

@dataclass(frozen=True)
class MarketSignal:
    timestamp: datetime
    symbol: str
    sentiment_score: float
    volume_score: float
    momentum_score: float  # clipped to [-3, 3]
    composite_score: float
    confidence: float  # 0.0 to 1.0
    signal_type: SignalType

    def to_dict(self) -> Dict[str, Any]:
        return {
            'timestamp': self.timestamp.isoformat(),
            'symbol': self.symbol,
            'sentiment_score': self.sentiment_score,
            'volume_score': self.volume_score,
            'momentum_score': self.momentum_score,
            'composite_score': self.composite_score,
            'confidence': self.confidence,
            'signal_type': self.signal_type.value,
        }
