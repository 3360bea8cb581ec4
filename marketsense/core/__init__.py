"""
Core configuration and error types shared across Marketsense.
"""

from .exceptions import (
    MarketsenseError,
    ConfigurationError,
    DataError,
    MalformedPostError,
    SignalGenerationError,
    BatchProcessingError,
    CollaboratorError,
)

__all__ = [
    'MarketsenseError',
    'ConfigurationError',
    'DataError',
    'MalformedPostError',
    'SignalGenerationError',
    'BatchProcessingError',
    'CollaboratorError',
]
