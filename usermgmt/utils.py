"""
Shared helpers: logging and id generation.
"""
import logging
from datetime import datetime, timezone

from ulid import ULID

from usermgmt.core import config


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOGGER_NAME = "usermgmt"


def _setup_root_logger() -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)

    # Avoid duplicate handlers on re-import
    if logger.handlers:
        return logger

    logger.setLevel(config.LOG_LEVEL)
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(stream_handler)
    return logger


_root = _setup_root_logger()


def get_logger(name: str) -> logging.Logger:
    """
    Return a logger under the package logger.

    Usage:
        log = get_logger(__name__)
    """
    if name == LOGGER_NAME or name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return _root.getChild(name)


def generate_ulid() -> str:
    """Generate a new ULID string."""
    return str(ULID())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Convert to UTC; naive values are taken to be UTC already."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
