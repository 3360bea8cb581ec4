import structlog
import logging
import sys
from pathlib import Path
from datetime import datetime

from ..core.exceptions import ConfigurationError

def setup_logging(log_level: str = "INFO", log_to_file: bool = False, log_dir: str = "logs"):
    """Setup structured logging for the signal pipeline"""

    level = getattr(logging, str(log_level).upper(), None)
    if not isinstance(level, int):
        raise ConfigurationError(f"Unknown log level: {log_level}")

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    # Console renderer for interactive sessions, JSON otherwise
    if sys.stdout.isatty():
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter('%(message)s'))
    root_logger.addHandler(console_handler)

    if log_to_file:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        today = datetime.now().strftime('%Y%m%d')
        file_handler = logging.FileHandler(
            directory / f"marketsense_{today}.log",
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'
        ))
        root_logger.addHandler(file_handler)

    logging.getLogger("asyncio").setLevel(logging.WARNING)

    structlog.get_logger(__name__).info("Logging system initialized", level=log_level.upper(),
                                        log_to_file=log_to_file)

class SignalLogger:
    """Specialized logger for signal engine events"""

    def __init__(self, name: str):
        self.logger = structlog.get_logger(name)

    def signal_generated(self, signal):
        """Log a finalized market signal"""
        self.logger.info("Signal generated",
                         symbol=signal.symbol,
                         label=signal.signal_type.value,
                         composite=round(signal.composite_score, 4),
                         sentiment=round(signal.sentiment_score, 4),
                         volume=round(signal.volume_score, 4),
                         momentum=round(signal.momentum_score, 4),
                         confidence=round(signal.confidence, 4))

    def symbol_skipped(self, symbol: str, post_count: int, min_posts: int):
        """Log a symbol held back by the minimum-evidence gate"""
        self.logger.debug("Symbol skipped",
                          symbol=symbol,
                          reason="insufficient_posts",
                          post_count=post_count,
                          min_posts=min_posts)

    def symbol_failed(self, symbol: str, error: Exception):
        self.logger.error("Symbol scoring failed",
                          symbol=symbol,
                          error=str(error),
                          error_type=type(error).__name__)

    def batch_processed(self, post_count: int, routed_symbols: int,
                        signal_count: int, duration_ms: float):
        self.logger.info("Batch processed",
                         post_count=post_count,
                         routed_symbols=routed_symbols,
                         signal_count=signal_count,
                         duration_ms=round(duration_ms, 2))
