"""
Marketsense command-line runner.

Runs the full pipeline against the synthetic post source and prints the
summary report.
"""

import argparse
import asyncio
import sys
import structlog

from .app import MarketIntelligenceApp
from .collaborators import InMemoryStorage, KeywordFeatureExtractor, SyntheticPostGenerator, SyntheticPostSource
from .core.config import load_app_config, load_config, load_engine_config, settings
from .core.exceptions import MarketsenseError
from .logging.logger_config import setup_logging
from .signals.engine import SignalEngine

logger = structlog.get_logger()

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate market sentiment signals from synthetic posts")
    parser.add_argument("--config", help="Path to YAML configuration (default: config/<environment>.yaml)")
    parser.add_argument("--count", type=int, help="Number of posts to generate")
    parser.add_argument("--seed", type=int, help="Random seed for synthetic posts")
    parser.add_argument("--log-level", default=settings.log_level, help="Logging level")
    parser.add_argument("--log-to-file", action="store_true", help="Also write logs to the log directory")
    return parser

async def run(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    engine_config = load_engine_config(config)
    app_config = load_app_config(config)

    overrides = {}
    if args.count is not None:
        overrides['target_count'] = args.count
    if args.seed is not None:
        overrides['synthetic_seed'] = args.seed
    if overrides:
        app_config = app_config.model_copy(update=overrides)

    generator = SyntheticPostGenerator(seed=app_config.synthetic_seed)
    app = MarketIntelligenceApp(
        source=SyntheticPostSource(generator),
        extractor=KeywordFeatureExtractor(),
        storage=InMemoryStorage(),
        engine=SignalEngine(engine_config),
        config=app_config,
        synthetic=generator
    )

    summary = await app.run()
    print(summary.report)
    return 1 if summary.failed_symbols else 0

def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        setup_logging(args.log_level, log_to_file=args.log_to_file, log_dir=settings.log_dir)
        return asyncio.run(run(args))
    except MarketsenseError as e:
        logger.error("Run failed", error=str(e))
        print(f"Application error: {e}", file=sys.stderr)
        return 2

if __name__ == "__main__":
    sys.exit(main())
