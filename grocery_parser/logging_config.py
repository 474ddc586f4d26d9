"""Logging setup for the command-line tool.

The library modules only create loggers; handlers are installed here, once,
by the CLI.
"""

import logging
import sys

from .config import get_log_level

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(log_level: str | None = None) -> None:
    """
    Configure logging to stderr.

    Args:
        log_level: Minimum level name; read from the environment if None
    """
    level_str = (log_level or get_log_level()).upper()
    level = getattr(logging, level_str, logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    handler.setLevel(level)
    root_logger.addHandler(handler)

    logging.getLogger("grocery_parser").setLevel(level)
