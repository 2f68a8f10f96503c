"""Loguru sink configuration."""
import sys

from loguru import logger

from app.core.config import Settings

LOG_FORMAT = "<dim>{time:YYYY-MM-DD HH:mm:ss}</dim> | <level>{level: <8}</level> | <cyan>{name}</cyan> - {message}"


def setup_logging(settings: Settings) -> None:
    """Replace the default loguru sink with the configured ones."""
    logger.remove()
    level = "DEBUG" if settings.debug else settings.log_level
    logger.add(sys.stderr, level=level, format=LOG_FORMAT)
    if settings.log_file:
        logger.add(
            settings.log_file,
            level=level,
            rotation="10 MB",
            retention=5,
            encoding="utf-8",
        )
