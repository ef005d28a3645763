"""Logging setup: one stream handler on the ``app`` logger tree."""
import logging
import sys

from app.core.config import Settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

NOISY_LOGGERS = ("httpx", "httpcore", "sqlalchemy.engine", "botocore", "urllib3")


def setup_logging(settings: Settings) -> logging.Logger:
    """Configure the ``app`` logger from settings; safe to call more than once."""
    logger = logging.getLogger("app")
    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper(), logging.INFO)
    logger.setLevel(level)

    # Clear existing handlers (create_app runs once per test)
    logger.handlers.clear()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.debug("Logging initialized (level=%s)", logging.getLevelName(level))
    return logger
