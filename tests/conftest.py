"""
Pytest configuration and shared fixtures
"""

import pytest
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

from marketsense.core.config import EngineConfig
from marketsense.models.post import Post
from marketsense.signals.engine import SignalEngine


EVALUATION_TIME = datetime(2025, 3, 10, 10, 0, tzinfo=timezone.utc)


def make_post(
    text: str = "NIFTY looking strong",
    author: str = "trader",
    minutes_ago: float = 0,
    bullish: Optional[float] = None,
    bearish: Optional[float] = None,
    engagement: Optional[float] = None,
    tags=(),
    now: datetime = EVALUATION_TIME,
    post_id: Optional[str] = None,
    **kwargs
) -> Post:
    """Build a post with the given keyword features (omitted features stay absent)"""
    features: Dict[str, float] = {}
    if bullish is not None:
        features['bullish_keywords'] = bullish
    if bearish is not None:
        features['bearish_keywords'] = bearish
    if engagement is not None:
        features['engagement_score'] = engagement

    return Post(
        id=post_id if post_id is not None else str(uuid.uuid4()),
        author=author,
        timestamp=now - timedelta(minutes=minutes_ago),
        text=text,
        tags=tuple(tags),
        features=features,
        **kwargs
    )


def make_group(
    count: int,
    text: str = "NIFTY looking very bullish today! Buy buy buy!",
    bullish: float = 3,
    bearish: float = 0,
    engagement: float = 2.5,
    distinct_authors: bool = True
) -> List[Post]:
    """Posts from the last few minutes with identical features"""
    return [
        make_post(
            text=text,
            author=f"user{i}" if distinct_authors else "user",
            minutes_ago=i,
            bullish=bullish,
            bearish=bearish,
            engagement=engagement
        )
        for i in range(count)
    ]


@pytest.fixture
def now():
    return EVALUATION_TIME


@pytest.fixture
def post_factory():
    return make_post


@pytest.fixture
def group_factory():
    return make_group


@pytest.fixture
def engine_config():
    return EngineConfig()


@pytest.fixture
def engine(engine_config):
    return SignalEngine(engine_config)


@pytest.fixture
def bullish_posts():
    """Scenario: 20 strongly bullish NIFTY posts"""
    return make_group(20, bullish=3, bearish=0, engagement=2.5)


@pytest.fixture
def bearish_posts():
    """Scenario: 20 strongly bearish NIFTY posts"""
    return make_group(20, text="NIFTY looking very bearish today! Sell sell sell!",
                      bullish=0, bearish=3, engagement=2.5)


@pytest.fixture
def mixed_posts():
    """Scenario: 10 SENSEX posts alternating single bullish / bearish keywords"""
    posts = []
    for i in range(10):
        sentiment = "bullish" if i % 2 == 0 else "bearish"
        posts.append(make_post(
            text=f"SENSEX looking {sentiment}",
            author="testuser",
            bullish=1 if sentiment == "bullish" else 0,
            bearish=1 if sentiment == "bearish" else 0,
            engagement=1.0
        ))
    return posts
