"""
Signal engine orchestrating routing, scoring and history updates.

One call processes one batch of posts: posts are routed to symbols, every
symbol group with enough evidence is scored against a snapshot of that
symbol's history, and the resulting composite score is appended to the
history only after the symbol's signal is complete.
"""

from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple
import time
import structlog

from ..core.config import EngineConfig
from ..core.exceptions import BatchProcessingError
from ..logging.logger_config import SignalLogger
from ..models.post import Post, ensure_utc
from ..models.signal import MarketSignal
from .classifier import SignalClassifier
from .factors import FactorScorer
from .history import HistoryStore
from .router import SymbolRouter

logger = structlog.get_logger()

class BatchPhase(Enum):
    IDLE = "idle"
    ROUTING = "routing"
    SCORING = "per_symbol_scoring"
    HISTORY_UPDATE = "history_update"

class SignalEngine:
    """Turns batches of posts into per-symbol market signals"""

    def __init__(self, config: Optional[EngineConfig] = None,
                 history: Optional[HistoryStore] = None,
                 router: Optional[SymbolRouter] = None,
                 scorer: Optional[FactorScorer] = None,
                 classifier: Optional[SignalClassifier] = None):
        self.config = config or EngineConfig()
        self.history = history if history is not None else HistoryStore(self.config.window_size)
        self.router = router or SymbolRouter(self.config.symbols)
        self.scorer = scorer or FactorScorer(self.config)
        self.classifier = classifier or SignalClassifier(self.config.weights, self.config.thresholds)
        self.signal_logger = SignalLogger(__name__)

        logger.info("Signal engine initialized",
                    symbols=self.router.symbols,
                    window_size=self.history.window_size,
                    min_posts=self.config.min_posts,
                    max_workers=self.config.max_workers)

    def generate_signals(self, posts: Sequence[Post],
                         now: Optional[datetime] = None) -> List[MarketSignal]:
        """
        Process one batch of posts.

        Args:
            posts: Feature-enriched posts
            now: Evaluation instant; defaults to the current UTC time

        Returns:
            Signals for every symbol with at least ``min_posts`` matches,
            in symbol registry order

        Raises:
            BatchProcessingError: If any symbol group held malformed posts.
                Signals for the other symbols are committed and attached.
        """
        started = time.perf_counter()
        evaluated_at = ensure_utc(now) if now is not None else datetime.now(timezone.utc)

        logger.debug("Batch phase", phase=BatchPhase.ROUTING.value, post_count=len(posts))
        groups = self.router.route(posts)

        logger.debug("Batch phase", phase=BatchPhase.SCORING.value, symbols=list(groups.keys()))
        results = self._process_groups(groups, evaluated_at)

        signals: List[MarketSignal] = []
        failures: Dict[str, Exception] = {}
        for symbol, signal, error in results:
            if error is not None:
                failures[symbol] = error
            elif signal is not None:
                signals.append(signal)

        duration_ms = (time.perf_counter() - started) * 1000
        self.signal_logger.batch_processed(len(posts), len(groups), len(signals), duration_ms)
        logger.debug("Batch phase", phase=BatchPhase.IDLE.value)

        if failures:
            raise BatchProcessingError(failures, signals)
        return signals

    def _process_groups(self, groups: Dict[str, List[Post]],
                        now: datetime) -> List[Tuple[str, Optional[MarketSignal], Optional[Exception]]]:
        items = list(groups.items())
        if self.config.max_workers > 1 and len(items) > 1:
            with ThreadPoolExecutor(max_workers=min(self.config.max_workers, len(items))) as executor:
                return list(executor.map(lambda item: self._safe_process(item[0], item[1], now), items))
        return [self._safe_process(symbol, group, now) for symbol, group in items]

    def _safe_process(self, symbol: str, posts: List[Post],
                      now: datetime) -> Tuple[str, Optional[MarketSignal], Optional[Exception]]:
        try:
            return symbol, self.process_symbol(symbol, posts, now), None
        except Exception as e:
            self.signal_logger.symbol_failed(symbol, e)
            return symbol, None, e

    def process_symbol(self, symbol: str, posts: Sequence[Post],
                       now: Optional[datetime] = None) -> Optional[MarketSignal]:
        """
        Score one symbol's post group and commit its composite to history.

        The history snapshot is taken, the signal computed and the score
        appended under the symbol's lock, so the new score never feeds its
        own momentum.

        Args:
            symbol: Tracked symbol
            posts: Posts routed to the symbol
            now: Evaluation instant; defaults to the current UTC time

        Returns:
            MarketSignal, or None when the group is below ``min_posts``

        Raises:
            MalformedPostError: If a post in the group violates the input contract
        """
        if len(posts) < self.config.min_posts:
            self.signal_logger.symbol_skipped(symbol, len(posts), self.config.min_posts)
            return None

        for post in posts:
            post.validate()

        evaluated_at = ensure_utc(now) if now is not None else datetime.now(timezone.utc)

        with self.history.lock(symbol):
            history = self.history.snapshot(symbol)
            frame = self.scorer.to_frame(posts)
            factors = self.scorer.score(posts, history, evaluated_at, frame)

            signal = self.classifier.build_signal(
                symbol=symbol,
                timestamp=evaluated_at,
                sentiment=factors.sentiment,
                volume=factors.volume,
                momentum=factors.momentum,
                confidence_fn=lambda composite: self.scorer.confidence(posts, composite, frame)
            )

            logger.debug("Batch phase", phase=BatchPhase.HISTORY_UPDATE.value, symbol=symbol)
            self.history.append(symbol, signal.composite_score)

        self.signal_logger.signal_generated(signal)
        return signal
