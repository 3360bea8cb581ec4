"""
Bounded per-symbol history of composite scores.

Each tracked symbol keeps its most recent ``window_size`` composite scores
(oldest first). The store is owned by one engine instance and provides a
lock per symbol so a read-compute-append sequence can be made atomic
without serializing unrelated symbols.
"""

from collections import deque
from contextlib import contextmanager
from typing import Deque, Dict, Iterable, Iterator, List, Mapping, Optional
import math
import threading
import structlog

logger = structlog.get_logger()

class HistoryStore:
    """FIFO-bounded composite score history keyed by symbol"""

    def __init__(self, window_size: int = 100,
                 initial: Optional[Mapping[str, Iterable[float]]] = None):
        if window_size < 1:
            raise ValueError(f"window_size must be at least 1, got {window_size}")

        self.window_size = window_size
        self._scores: Dict[str, Deque[float]] = {}
        self._locks: Dict[str, threading.RLock] = {}
        self._registry_lock = threading.Lock()

        for symbol, scores in (initial or {}).items():
            for score in scores:
                self.append(symbol, score)

    def _symbol_lock(self, symbol: str) -> threading.RLock:
        with self._registry_lock:
            lock = self._locks.get(symbol)
            if lock is None:
                lock = self._locks[symbol] = threading.RLock()
            return lock

    @contextmanager
    def _existing_lock(self, symbol: str) -> Iterator[bool]:
        # Locks are created before scores and never removed, so no lock means no history
        with self._registry_lock:
            lock = self._locks.get(symbol)
        if lock is None:
            yield False
            return
        with lock:
            yield True

    @contextmanager
    def lock(self, symbol: str) -> Iterator[None]:
        """Hold the symbol's lock for a read-compute-append sequence"""
        with self._symbol_lock(symbol):
            yield

    def snapshot(self, symbol: str) -> List[float]:
        """Copy of the symbol's scores, oldest first. Empty for unknown symbols."""
        with self._existing_lock(symbol) as known:
            if not known:
                return []
            return list(self._scores.get(symbol, ()))

    def append(self, symbol: str, score: float) -> None:
        """
        Append a score, evicting the oldest one when the window is full.

        Raises:
            ValueError: If the score is NaN or infinite
        """
        score = float(score)
        if not math.isfinite(score):
            raise ValueError(f"Refusing non-finite score for {symbol}: {score}")

        with self._symbol_lock(symbol):
            scores = self._scores.get(symbol)
            if scores is None:
                with self._registry_lock:
                    scores = self._scores[symbol] = deque(maxlen=self.window_size)

            if len(scores) == self.window_size:
                logger.debug("History window full, evicting oldest score",
                             symbol=symbol, evicted=scores[0], window_size=self.window_size)
            scores.append(score)

    def size(self, symbol: str) -> int:
        with self._existing_lock(symbol) as known:
            if not known:
                return 0
            return len(self._scores.get(symbol, ()))

    def symbols(self) -> List[str]:
        with self._registry_lock:
            return list(self._scores.keys())

    def clear(self, symbol: Optional[str] = None) -> None:
        """Drop one symbol's history, or all of it"""
        if symbol is not None:
            with self._existing_lock(symbol) as known:
                if known:
                    with self._registry_lock:
                        self._scores.pop(symbol, None)
            return

        for name in self.symbols():
            self.clear(name)

    def __len__(self) -> int:
        return len(self.symbols())

    def __contains__(self, symbol: str) -> bool:
        with self._registry_lock:
            return symbol in self._scores
