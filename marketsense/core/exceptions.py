from typing import Dict, List, Optional


class MarketsenseError(Exception):
    """Base exception for the Marketsense signal system"""
    pass

class ConfigurationError(MarketsenseError):
    """Configuration related errors"""
    pass

class DataError(MarketsenseError):
    """Data processing errors"""
    pass

class MalformedPostError(DataError):
    """A post handed to the engine violates the input contract"""

    def __init__(self, post_id: Optional[str], reason: str):
        self.post_id = post_id
        self.reason = reason
        super().__init__(f"Malformed post {post_id!r}: {reason}")

class SignalGenerationError(MarketsenseError):
    """Signal engine errors"""
    pass

class BatchProcessingError(SignalGenerationError):
    """One or more symbols failed while processing a batch.

    Signals for the symbols that succeeded were committed to history and
    are available on ``signals``.
    """

    def __init__(self, failures: Dict[str, Exception], signals: Optional[List] = None):
        self.failures = failures
        self.signals = signals or []
        details = "; ".join(f"{symbol}: {error}" for symbol, error in failures.items())
        super().__init__(f"Signal generation failed for {len(failures)} symbol(s): {details}")

class CollaboratorError(MarketsenseError):
    """Post source, storage or rendering collaborator errors"""
    pass
