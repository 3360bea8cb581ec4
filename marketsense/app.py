"""
Market intelligence pipeline.

Wires the collaborators around the signal engine: collect posts,
featurize, persist, generate signals, persist, render and report.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence
from datetime import datetime
import asyncio
import time
import structlog

from .core.config import AppConfig
from .core.exceptions import BatchProcessingError, CollaboratorError
from .collaborators.base import DataStorage, FeatureExtractor, PostSource, VisualizationService
from .collaborators.synthetic import SyntheticPostGenerator
from .models.post import Post
from .models.signal import MarketSignal
from .signals.engine import SignalEngine

logger = structlog.get_logger()

@dataclass
class RunSummary:
    posts: List[Post]
    signals: List[MarketSignal]
    report: str
    elapsed_seconds: float
    failed_symbols: Dict[str, str] = field(default_factory=dict)

class MarketIntelligenceApp:
    """End-to-end run of the sentiment signal pipeline"""

    def __init__(self, source: PostSource, extractor: FeatureExtractor,
                 storage: DataStorage, engine: SignalEngine,
                 visualization: Optional[VisualizationService] = None,
                 config: Optional[AppConfig] = None,
                 synthetic: Optional[SyntheticPostGenerator] = None):
        self.source = source
        self.extractor = extractor
        self.storage = storage
        self.engine = engine
        self.visualization = visualization
        self.config = config or AppConfig()
        self.synthetic = synthetic or SyntheticPostGenerator(self.config.synthetic_seed)

    async def run(self) -> RunSummary:
        logger.info("Starting market intelligence run",
                    tags=self.config.tags,
                    target_count=self.config.target_count)
        started = time.perf_counter()

        try:
            posts = await self.collect_posts()

            posts = self.extractor.process_posts(posts)
            logger.info("Text processing completed", post_count=len(posts))

            await self._store(self.storage.save_posts, posts, "posts")

            failed: Dict[str, str] = {}
            try:
                signals = self.engine.generate_signals(posts)
            except BatchProcessingError as e:
                logger.error("Signal generation partially failed",
                             failed_symbols=list(e.failures.keys()))
                signals = e.signals
                failed = {symbol: str(error) for symbol, error in e.failures.items()}

            await self._store(self.storage.save_signals, signals, "signals")
            logger.info("Market signals generated", signal_count=len(signals))

            self.render(signals)

            report = self.generate_summary_report(posts, signals)
            elapsed = time.perf_counter() - started
            logger.info("Market intelligence run completed", elapsed_seconds=round(elapsed, 3))

            return RunSummary(posts=posts, signals=signals, report=report,
                              elapsed_seconds=elapsed, failed_symbols=failed)
        except Exception as e:
            logger.error("Error in market intelligence pipeline", error=str(e), exc_info=True)
            raise

    async def collect_posts(self) -> List[Post]:
        """
        Fetch posts from the source, backfilling with synthetic posts when
        fewer than half of the target arrive.

        Raises:
            CollaboratorError: If the post source fails
        """
        target = self.config.target_count
        try:
            posts = await asyncio.wait_for(
                self.source.fetch_posts(self.config.tags, target,
                                        self.config.collection_timeout_seconds),
                timeout=self.config.collection_timeout_seconds
            )
        except asyncio.TimeoutError:
            logger.warning("Post collection timed out",
                           timeout_seconds=self.config.collection_timeout_seconds)
            posts = []
        except Exception as e:
            logger.error("Post source failed", error=str(e), exc_info=True)
            raise CollaboratorError(f"Post source failed: {e}") from e

        posts = list(posts)
        logger.info("Posts collected", count=len(posts), target_count=target)

        if self.config.synthetic_backfill and len(posts) < target / 2:
            missing = target - len(posts)
            logger.warning("Insufficient real data, generating synthetic posts", count=missing)
            posts.extend(self.synthetic.generate(missing))

        return posts

    async def _store(self, save, items: Sequence, kind: str) -> None:
        try:
            await save(items)
        except Exception as e:
            logger.error("Storage failed", kind=kind, error=str(e), exc_info=True)
            raise CollaboratorError(f"Failed to store {kind}: {e}") from e

    def render(self, signals: Sequence[MarketSignal]) -> None:
        """Hand signals to the visualization service; failures are logged, not raised"""
        if self.visualization is None:
            return
        try:
            self.visualization.render_signals(signals)
            logger.info("Visualizations rendered", signal_count=len(signals))
        except Exception as e:
            logger.warning("Visualization failed", error=str(e), exc_info=True)

    @staticmethod
    def generate_summary_report(posts: Sequence[Post], signals: Sequence[MarketSignal]) -> str:
        lines = ["=== Market Intelligence Summary ===",
                 f"Total Posts Analyzed: {len(posts)}"]

        if posts:
            timestamps = [post.utc_timestamp for post in posts if isinstance(post.timestamp, datetime)]
            if timestamps:
                lines.append(f"Time Range: {min(timestamps).isoformat()} to {max(timestamps).isoformat()}")
            lines.append(f"Unique Authors: {len({post.author for post in posts})}")

        lines.append("")
        lines.append(f"Total Signals Generated: {len(signals)}")

        latest: Dict[str, MarketSignal] = {}
        for signal in signals:
            current = latest.get(signal.symbol)
            if current is None or signal.timestamp >= current.timestamp:
                latest[signal.symbol] = signal

        for symbol, signal in latest.items():
            lines.append("")
            lines.append(f"{symbol}:")
            lines.append(f"  Latest Signal: {signal.signal_type.value}")
            lines.append(f"  Composite Score: {signal.composite_score:.2f}")
            lines.append(f"  Confidence: {signal.confidence:.2%}")

        return "\n".join(lines)
