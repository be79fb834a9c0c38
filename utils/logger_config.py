"""
Logging setup shared by both bots.
"""

import logging
import sys

from .config import LOG_LEVEL

LOGGER_NAME = "discord_bot"


def setup_logger(name: str = LOGGER_NAME, level: str = None) -> logging.Logger:
    """
    Configure and return the bot logger.

    Safe to call more than once: handlers are only attached the first time.
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO))

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))
        logger.addHandler(handler)
        logger.propagate = False

    return logger
