"""
logging_utils.py - Shared logger setup for the trainer modules.
"""
import logging
import os


def get_logger(name: str) -> logging.Logger:
    """
    Return a named logger with a single console handler attached.

    Args:
        name: Logger name (e.g. "SquatAnalyzer")

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    if not logger.hasHandlers():
        handler = logging.StreamHandler()
        formatter = logging.Formatter('%(asctime)s %(levelname)s %(message)s')
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logger.setLevel(getattr(logging, level, logging.INFO))
    return logger
