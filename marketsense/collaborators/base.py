from abc import ABC, abstractmethod
from typing import List, Sequence

from ..models.post import Post
from ..models.signal import MarketSignal

class PostSource(ABC):
    """Abstract base class for post acquisition services"""

    @abstractmethod
    async def fetch_posts(self, tags: Sequence[str], target_count: int,
                          timeout: float) -> List[Post]:
        """Collect up to ``target_count`` posts for the tags before ``timeout`` seconds.

        May return fewer posts than requested.
        """
        pass

class FeatureExtractor(ABC):
    """Abstract base class for text cleaning and featurization"""

    @abstractmethod
    def process_posts(self, posts: Sequence[Post]) -> List[Post]:
        """Return posts with cleaned text and populated feature maps"""
        pass

class DataStorage(ABC):
    """Abstract base class for durable storage of posts and signals"""

    @abstractmethod
    async def save_posts(self, posts: Sequence[Post]) -> None:
        pass

    @abstractmethod
    async def save_signals(self, signals: Sequence[MarketSignal]) -> None:
        pass

class VisualizationService(ABC):
    """Abstract base class for signal rendering"""

    @abstractmethod
    def render_signals(self, signals: Sequence[MarketSignal]) -> None:
        pass
