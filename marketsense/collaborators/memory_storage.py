from typing import List, Sequence
import asyncio
import pandas as pd
import structlog

from ..models.post import Post
from ..models.signal import MarketSignal
from .base import DataStorage

logger = structlog.get_logger()

POST_COLUMNS = ["id", "author", "timestamp", "text", "likes", "reposts", "replies", "tags"]
SIGNAL_COLUMNS = ["timestamp", "symbol", "sentiment_score", "volume_score", "momentum_score",
                  "composite_score", "confidence", "signal_type"]

class InMemoryStorage(DataStorage):
    """Keeps posts and signals in memory and exposes them as DataFrames"""

    def __init__(self):
        self.posts: List[Post] = []
        self.signals: List[MarketSignal] = []
        self._lock = asyncio.Lock()

    async def save_posts(self, posts: Sequence[Post]) -> None:
        async with self._lock:
            self.posts.extend(posts)
        logger.info("Posts stored", count=len(posts), total=len(self.posts))

    async def save_signals(self, signals: Sequence[MarketSignal]) -> None:
        async with self._lock:
            self.signals.extend(signals)
        logger.info("Signals stored", count=len(signals), total=len(self.signals))

    def posts_frame(self) -> pd.DataFrame:
        """Stored posts, one row each; feature maps expand into ``feature_*`` columns"""
        if not self.posts:
            return pd.DataFrame(columns=POST_COLUMNS)

        rows = []
        for post in self.posts:
            row = {
                'id': post.id,
                'author': post.author,
                'timestamp': post.timestamp,
                'text': post.text,
                'likes': post.likes,
                'reposts': post.reposts,
                'replies': post.replies,
                'tags': ",".join(post.tags),
            }
            row.update({f"feature_{name}": value for name, value in post.features.items()})
            rows.append(row)
        return pd.DataFrame(rows)

    def signals_frame(self) -> pd.DataFrame:
        if not self.signals:
            return pd.DataFrame(columns=SIGNAL_COLUMNS)

        frame = pd.DataFrame([signal.to_dict() for signal in self.signals])
        frame['timestamp'] = pd.to_datetime(frame['timestamp'], utc=True)
        return frame[SIGNAL_COLUMNS]
