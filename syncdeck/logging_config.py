import logging
import os
import sys
from logging.handlers import RotatingFileHandler

from . import config


def setup_logging() -> logging.Logger:
    """Set up logging."""
    logger = logging.getLogger("syncdeck")
    logger.setLevel(logging.DEBUG if config.DEBUG else logging.INFO)

    if not config.LOG_ENABLED:
        logger.handlers.clear()
        logger.addHandler(logging.NullHandler())
        logger.propagate = False
        return logger

    if logger.handlers:
        return logger

    os.makedirs(config.DATA_DIR, exist_ok=True)
    fmt = logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")

    file_handler = RotatingFileHandler(config.LOG_FILE, maxBytes=2_000_000, backupCount=3, encoding="utf-8")
    file_handler.setFormatter(fmt)
    file_handler.setLevel(logging.DEBUG if config.DEBUG else logging.INFO)
    logger.addHandler(file_handler)

    if config.CONSOLE_LOG:
        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(fmt)
        console.setLevel(logging.DEBUG if config.DEBUG else logging.INFO)
        logger.addHandler(console)

    return logger


log = setup_logging()


def reload_logging() -> logging.Logger:
    """Reload logger level and handlers from current configuration."""
    logger = logging.getLogger("syncdeck")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    return setup_logging()
