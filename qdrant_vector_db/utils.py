from loguru import logger
import sys

from .config import settings


def setup_logger(level: str | None = None, log_file: str | None = None):
    """Route this package's loguru records to stderr (and optionally a file).

    ``level`` defaults to ``QDRANT_LOG_LEVEL``.
    """
    logger.remove()
    logger.enable("qdrant_vector_db")
    logger.add(
        sys.stderr,
        format="<green>{time}</green> | <level>{level}</level> | <cyan>{message}</cyan>",
        level=level or settings.log_level,
    )
    if log_file:
        logger.add(
            log_file,
            rotation="10 MB",
            level="DEBUG",
        )
