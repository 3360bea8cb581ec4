"""
Factor calculations for the sentiment signal engine.

This module computes the four independent factors of a symbol's signal
from its matched posts and a read-only snapshot of its score history:
sentiment, relative volume, momentum and confidence.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional, Sequence
import numpy as np
import pandas as pd
import structlog

from ..core.config import EngineConfig
from ..models.post import Post, ensure_utc

logger = structlog.get_logger()

BULLISH_FEATURE = "bullish_keywords"
BEARISH_FEATURE = "bearish_keywords"
ENGAGEMENT_FEATURE = "engagement_score"

FRAME_COLUMNS = ["id", "author", "timestamp", "bullish", "bearish", "engagement"]

@dataclass(frozen=True)
class FactorScores:
    """Factors that feed the composite score"""
    sentiment: float
    volume: float
    momentum: float

class FactorScorer:
    """Computes signal factors for one symbol's post group"""

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or EngineConfig()

    @staticmethod
    def to_frame(posts: Sequence[Post]) -> pd.DataFrame:
        """
        Tabulate the post fields the factors are computed from.

        Missing features default to 0. Timestamps are normalized to UTC.

        Args:
            posts: Matched posts for one symbol

        Returns:
            DataFrame with one row per post
        """
        if not posts:
            return pd.DataFrame(columns=FRAME_COLUMNS)

        return pd.DataFrame({
            'id': [post.id for post in posts],
            'author': [post.author for post in posts],
            'timestamp': pd.to_datetime([post.utc_timestamp for post in posts], utc=True),
            'bullish': [post.get_feature(BULLISH_FEATURE) for post in posts],
            'bearish': [post.get_feature(BEARISH_FEATURE) for post in posts],
            'engagement': [post.get_feature(ENGAGEMENT_FEATURE) for post in posts],
        })

    def sentiment(self, posts: Sequence[Post], frame: Optional[pd.DataFrame] = None) -> float:
        """Mean engagement-weighted keyword balance: (bull - bear) * (1 + k * engagement)"""
        frame = self.to_frame(posts) if frame is None else frame
        if frame.empty:
            return 0.0

        factor = self.config.engagement_sentiment_factor
        scores = (frame['bullish'] - frame['bearish']) * (1 + frame['engagement'] * factor)
        return float(scores.mean())

    def volume(self, posts: Sequence[Post], now: datetime,
               frame: Optional[pd.DataFrame] = None) -> float:
        """
        Posting rate in the recent window relative to the older posts' hourly rate.

        Returns 1.0 when there are no older posts to compare against.
        """
        frame = self.to_frame(posts) if frame is None else frame
        if frame.empty:
            return 1.0

        evaluated_at = pd.Timestamp(ensure_utc(now))
        cutoff = evaluated_at - timedelta(minutes=self.config.recent_window_minutes)
        timestamps = frame['timestamp']

        recent_count = int((timestamps > cutoff).sum())
        older = timestamps[timestamps <= cutoff]
        if older.empty:
            return 1.0

        elapsed_hours = (evaluated_at - older.min()).total_seconds() / 3600.0
        average_rate = len(older) / max(1.0, elapsed_hours)
        return recent_count / max(1.0, average_rate)

    def momentum(self, current_sentiment: float, history: Sequence[float]) -> float:
        """
        Z-score of the current sentiment against recent composite history.

        Args:
            current_sentiment: Sentiment factor of the batch being scored
            history: Snapshot of the symbol's prior composite scores, oldest first

        Returns:
            Z-score clipped to [-momentum_clip, momentum_clip]; 0 with too little history
            (NaN and infinite history entries are ignored)
        """
        values = np.asarray(list(history), dtype=float)
        values = values[np.isfinite(values)]
        if values.size < self.config.momentum_min_history:
            return 0.0

        lookback = min(self.config.momentum_lookback, values.size)
        recent = values[-lookback:]
        if recent.size < 2:
            return 0.0

        spread = max(self.config.std_floor, float(np.std(recent, ddof=self.config.stddev_ddof)))
        z_score = (current_sentiment - float(recent.mean())) / spread

        clip = self.config.momentum_clip
        return float(np.clip(z_score, -clip, clip))

    def confidence(self, posts: Sequence[Post], composite_score: float,
                   frame: Optional[pd.DataFrame] = None) -> float:
        """
        Mean of four adequacy factors, each clamped to [0, 1]:
        sample size, engagement, signal magnitude and author diversity.
        """
        frame = self.to_frame(posts) if frame is None else frame
        count = len(frame)

        if count:
            mean_engagement = float(frame['engagement'].mean())
            diversity = frame['author'].nunique() / count
        else:
            mean_engagement = 0.0
            diversity = 0.0

        factors = [
            count / self.config.sample_size_target,
            mean_engagement / self.config.engagement_target,
            abs(composite_score) / self.config.magnitude_target,
            diversity,
        ]
        clamped = [min(1.0, max(0.0, value)) for value in factors]
        return float(sum(clamped) / len(clamped))

    def score(self, posts: Sequence[Post], history: Sequence[float], now: datetime,
              frame: Optional[pd.DataFrame] = None) -> FactorScores:
        """Sentiment, volume and momentum for a post group and its history snapshot"""
        frame = self.to_frame(posts) if frame is None else frame
        sentiment = self.sentiment(posts, frame)
        volume = self.volume(posts, now, frame)
        momentum = self.momentum(sentiment, history)

        logger.debug("Factors computed",
                     post_count=len(frame),
                     history_length=len(history),
                     sentiment=sentiment,
                     volume=volume,
                     momentum=momentum)
        return FactorScores(sentiment=sentiment, volume=volume, momentum=momentum)
