from datetime import datetime
from typing import Callable, Optional

from ..core.config import ClassificationThresholds, ScoringWeights
from ..models.signal import MarketSignal, SignalType

class SignalClassifier:
    """Combines factors into a composite score and labels it"""

    def __init__(self, weights: Optional[ScoringWeights] = None,
                 thresholds: Optional[ClassificationThresholds] = None):
        self.weights = weights or ScoringWeights()
        self.thresholds = thresholds or ClassificationThresholds()

    def composite(self, sentiment: float, volume: float, momentum: float) -> float:
        return (sentiment * self.weights.sentiment_weight +
                volume * self.weights.volume_weight +
                momentum * self.weights.momentum_weight)

    def classify(self, composite_score: float) -> SignalType:
        if composite_score > self.thresholds.bullish_threshold:
            return SignalType.BULLISH
        if composite_score < self.thresholds.bearish_threshold:
            return SignalType.BEARISH
        return SignalType.NEUTRAL

    def build_signal(self, symbol: str, timestamp: datetime,
                     sentiment: float, volume: float, momentum: float,
                     confidence_fn: Callable[[float], float]) -> MarketSignal:
        """
        Create the market signal for one symbol.

        Confidence depends on the composite score, so it is computed here
        through ``confidence_fn`` once the composite is known.

        Args:
            symbol: Tracked symbol
            timestamp: Evaluation instant (UTC)
            sentiment: Sentiment factor
            volume: Volume factor
            momentum: Momentum factor
            confidence_fn: Maps the composite score to a confidence in [0, 1]

        Returns:
            Immutable MarketSignal
        """
        composite_score = self.composite(sentiment, volume, momentum)
        confidence = confidence_fn(composite_score)

        return MarketSignal(
            timestamp=timestamp,
            symbol=symbol,
            sentiment_score=sentiment,
            volume_score=volume,
            momentum_score=momentum,
            composite_score=composite_score,
            confidence=confidence,
            signal_type=self.classify(composite_score)
        )
