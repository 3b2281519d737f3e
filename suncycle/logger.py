"""
Centralized logging for SunCycle.

DEBUG/INFO go to stdout, WARNING and above to stderr.
The level comes from LOG_LEVEL. Component loggers are children of "suncycle"
(e.g. "suncycle.controller") so they share the handlers below.
"""

import logging
import sys
from suncycle.config import LOG_LEVEL

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class LevelFilter(logging.Filter):
    """Pass only records whose level lies in [level_min, level_max]."""

    def __init__(self, level_min: int, level_max: int):
        super().__init__()
        self.level_min = level_min
        self.level_max = level_max

    def filter(self, record: logging.LogRecord) -> bool:
        return self.level_min <= record.levelno <= self.level_max


def _stream_handler(stream, level_min: int, level_max: int) -> logging.Handler:
    handler = logging.StreamHandler(stream)
    handler.setLevel(level_min)
    handler.addFilter(LevelFilter(level_min, level_max))
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(level: str = LOG_LEVEL) -> logging.Logger:
    """
    Configure the "suncycle" logger tree.

    Safe to call more than once: existing handlers are replaced.

    Args:
        level: Level name for the root "suncycle" logger

    Returns:
        The configured "suncycle" logger
    """
    root = logging.getLogger("suncycle")
    root.setLevel(level)
    root.propagate = False
    root.handlers.clear()

    root.addHandler(_stream_handler(sys.stdout, logging.DEBUG, logging.INFO))
    root.addHandler(_stream_handler(sys.stderr, logging.WARNING, logging.CRITICAL))

    return root


def get_logger(component: str) -> logging.Logger:
    """Return the child logger for one component, e.g. get_logger("ramps")."""
    return logger.getChild(component)


# Global logger instance
logger = setup_logging()
