"""Loguru sink configuration."""
import sys

from loguru import logger


def setup_logging(level: str = "WARNING", log_file: str | None = None) -> None:
    """Replace the default loguru handler with the tutor's sinks."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    if log_file:
        logger.add(
            log_file,
            level="DEBUG",
            rotation="1 MB",
            retention=3,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
        )
