# moodlog/logging_setup.py
import logging

from moodlog.config import LOG_LEVEL

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str | None = None) -> logging.Logger:
    """Configure the root logger (no-op for handlers on Streamlit reruns)."""
    logging.basicConfig(format=_FORMAT)
    logger = logging.getLogger()
    logger.setLevel((level or LOG_LEVEL).upper())
    return logger
