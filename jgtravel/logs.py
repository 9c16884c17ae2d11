import logging
import os


def get_logger(name: str) -> logging.Logger:
    """Return a module logger writing ``[LEVEL] name: message`` lines to stderr.

    The level comes from ``JGTRAVEL_LOG_LEVEL`` so operators can turn on debug
    output without touching code.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
        logger.addHandler(handler)
    level = os.getenv("JGTRAVEL_LOG_LEVEL", "INFO").upper()
    logger.setLevel(getattr(logging, level, logging.INFO))
    logger.propagate = False
    return logger
