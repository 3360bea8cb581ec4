from .logger_config import setup_logging, SignalLogger

__all__ = ['setup_logging', 'SignalLogger']
