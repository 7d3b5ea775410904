"""
Logging configuration for the sandwich slots application.

Log timestamps are written in the deployment timezone (APP_TIMEZONE), the
same wall clock the deadlines and slot times are expressed in, so a line
like "Auto-confirmed 3 orders" can be read against the slot board directly.

Usage:
    from sandwich_slots.logging_config import setup_logging
    setup_logging()  # Call once at application startup

Environment variables:
    LOG_LEVEL: Set to DEBUG, INFO, WARNING, ERROR, or CRITICAL (default: INFO)
    APP_TIMEZONE: Timezone of the log timestamps (see config.py)
"""
import logging
import os
import sys
from datetime import datetime
from zoneinfo import ZoneInfo

from . import config

VALID_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class LocalTimeFormatter(logging.Formatter):
    """Formatter rendering ``asctime`` in a fixed timezone."""

    def __init__(self, fmt=None, datefmt=None, tz_name: str = "UTC"):
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.tz = ZoneInfo(tz_name)

    def formatTime(self, record, datefmt=None):
        moment = datetime.fromtimestamp(record.created, self.tz)
        return moment.strftime(datefmt or DATE_FORMAT)


def resolve_level(level: str = None) -> str:
    """Normalize a level name, falling back to LOG_LEVEL and then INFO."""
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    level = level.upper()
    if level not in VALID_LEVELS:
        return "INFO"
    return level


def setup_logging(level: str = None) -> None:
    """
    Configure logging for the application.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               If not provided, reads from LOG_LEVEL env var, defaults to INFO.
    """
    level = resolve_level(level)
    numeric_level = getattr(logging, level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        LocalTimeFormatter(LOG_FORMAT, DATE_FORMAT, tz_name=config.APP_TIMEZONE)
    )
    logging.basicConfig(level=numeric_level, handlers=[handler])

    logging.getLogger("sandwich_slots").setLevel(numeric_level)

    # Reduce noise from third-party libraries in non-debug mode
    if level != "DEBUG":
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
        logging.getLogger("httpx").setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.debug("Logging configured at %s level (%s)", level, config.APP_TIMEZONE)
