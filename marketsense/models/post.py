"""
Post data class consumed by the signal engine.

Posts are produced by the post source and enriched by the feature
extractor; the engine only reads them.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from numbers import Real
import math
from types import MappingProxyType
from typing import Iterable, Mapping, Tuple, Union

from ..core.exceptions import MalformedPostError

def _as_tuple(values: Union[str, Iterable[str], None]) -> Tuple[str, ...]:
    if isinstance(values, str):
        return (values,)
    return tuple(values or ())

def ensure_utc(value: datetime) -> datetime:
    """Aware UTC datetime; naive values are taken to already be UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)

@dataclass(frozen=True)
class Post:
    id: str
    author: str
    timestamp: datetime
    text: str
    likes: int = 0
    reposts: int = 0
    replies: int = 0
    tags: Tuple[str, ...] = ()
    mentions: Tuple[str, ...] = ()
    language: str = ""
    features: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self):
        # Freeze collections so a post cannot change after it is handed over
        object.__setattr__(self, 'tags', _as_tuple(self.tags))
        object.__setattr__(self, 'mentions', _as_tuple(self.mentions))
        object.__setattr__(self, 'features', MappingProxyType(dict(self.features or {})))

    def get_feature(self, name: str, default: float = 0.0) -> float:
        """Feature value by name, ``default`` when the extractor did not set it"""
        return float(self.features.get(name, default))

    @property
    def utc_timestamp(self) -> datetime:
        """Timestamp as an aware UTC datetime (naive values are taken as UTC)"""
        return ensure_utc(self.timestamp)

    def validate(self) -> None:
        """
        Check the fields the engine relies on.

        Raises:
            MalformedPostError: If the identifier or timestamp is missing, or
                a feature value is not a finite number
        """
        if not isinstance(self.id, str) or not self.id.strip():
            raise MalformedPostError(self.id, "missing identifier")
        if not isinstance(self.timestamp, datetime):
            raise MalformedPostError(self.id, "missing or invalid timestamp")
        for name, value in self.features.items():
            if isinstance(value, bool) or not isinstance(value, Real):
                raise MalformedPostError(self.id, f"feature '{name}' is not numeric: {value!r}")
            if not math.isfinite(value):
                raise MalformedPostError(self.id, f"feature '{name}' is not finite: {value!r}")
