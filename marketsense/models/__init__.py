from .post import Post
from .signal import MarketSignal, SignalType

__all__ = ['Post', 'MarketSignal', 'SignalType']
