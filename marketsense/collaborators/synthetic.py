"""
Synthetic post generation.

Used by callers to backfill an undersupplied collection run and by the
command-line demo, which has no live post source.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence
import asyncio
import uuid
import numpy as np
import structlog

from ..models.post import Post
from .base import PostSource

logger = structlog.get_logger()

POST_TEMPLATES = (
    "#NIFTY50 looking bullish today! Target {0}",
    "Bearish on #SENSEX, support at {0}",
    "#BANKNIFTY intraday setup: Buy above {0}",
    "Market update: #NIFTY50 at {0}, momentum positive",
    "#Intraday tip: Sell #SENSEX below {0}",
)

SYNTHETIC_TAGS = ("NIFTY50", "SENSEX", "BANKNIFTY")

class SyntheticPostGenerator:
    """Template-based post generator with a seedable RNG"""

    def __init__(self, seed: Optional[int] = None,
                 templates: Sequence[str] = POST_TEMPLATES,
                 tags: Sequence[str] = SYNTHETIC_TAGS,
                 max_age_minutes: int = 1440):
        self.rng = np.random.default_rng(seed)
        self.templates = tuple(templates)
        self.tags = tuple(tags)
        self.max_age_minutes = max_age_minutes

    def generate(self, count: int, now: Optional[datetime] = None) -> List[Post]:
        """
        Generate synthetic posts.

        Args:
            count: Number of posts
            now: Reference instant; timestamps fall within the previous ``max_age_minutes``

        Returns:
            List of raw (unfeaturized) posts
        """
        now = now or datetime.now(timezone.utc)
        posts = []

        for _ in range(max(0, count)):
            template = self.templates[self.rng.integers(len(self.templates))]
            price = int(self.rng.integers(15000, 20000))
            tags = tuple(tag for tag in self.tags if self.rng.random() > 0.5)

            posts.append(Post(
                id=str(uuid.uuid4()),
                author=f"trader_{int(self.rng.integers(1000))}",
                timestamp=now - timedelta(minutes=int(self.rng.integers(self.max_age_minutes))),
                text=template.format(price),
                likes=int(self.rng.integers(0, 100)),
                reposts=int(self.rng.integers(0, 50)),
                replies=int(self.rng.integers(0, 20)),
                tags=tags,
                language="en",
            ))

        return posts

class SyntheticPostSource(PostSource):
    """Post source that serves generated posts only"""

    def __init__(self, generator: Optional[SyntheticPostGenerator] = None):
        self.generator = generator or SyntheticPostGenerator()

    async def fetch_posts(self, tags: Sequence[str], target_count: int,
                          timeout: float) -> List[Post]:
        posts = self.generator.generate(target_count)
        # Yield control like a real source would
        await asyncio.sleep(0)
        logger.debug("Synthetic posts served", count=len(posts), tags=list(tags))
        return posts
