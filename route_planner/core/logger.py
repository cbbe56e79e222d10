# route_planner/core/logger.py
from loguru import logger
import sys

from route_planner.core.config import settings


def setup_logging() -> None:
    """
    Route all planner logs through one loguru sink on stdout.

    The level comes from LOG_LEVEL; variable values in tracebacks are only
    shown outside production.
    """
    logger.remove()

    logger.add(
        sys.stdout,
        level=settings.LOG_LEVEL.upper(),
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        enqueue=True,
        backtrace=True,
        diagnose=settings.ENVIRONMENT != "production",
    )


setup_logging()

__all__ = ["logger", "setup_logging"]
