import logging
from logging.handlers import RotatingFileHandler

from .config import settings

__all__ = ["get_logger"]


def get_logger(name: str = "sheetdesk") -> logging.Logger:
    """Return a configured logger. Safe to call multiple times (won't duplicate handlers).

    Level comes from settings.LOG_LEVEL; settings.LOG_FILE, when set, adds a
    rotating file handler next to the console one.
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logger.setLevel(level)

    fmt = logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")

    sh = logging.StreamHandler()
    sh.setFormatter(fmt)
    logger.addHandler(sh)

    if settings.LOG_FILE:
        try:
            fh = RotatingFileHandler(
                settings.LOG_FILE, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
            )
            fh.setFormatter(fmt)
            logger.addHandler(fh)
        except OSError:
            # Keep console logging when the file cannot be opened.
            logger.exception("Failed to create file log handler for %s", settings.LOG_FILE)

    return logger
