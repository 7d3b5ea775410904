"""
Wall clock for the scheduling core.

Working days store naive local dates and times, so "now" is expressed the same
way: the current time in APP_TIMEZONE with tzinfo stripped. Services accept a
``now`` argument or a ``Clock`` callable so tests can pin the time.
"""

from datetime import datetime
from typing import Callable
from zoneinfo import ZoneInfo

from . import config

Clock = Callable[[], datetime]


def local_now() -> datetime:
    """Current local wall time in the deployment timezone (naive)."""
    return datetime.now(ZoneInfo(config.APP_TIMEZONE)).replace(tzinfo=None)


def fixed_clock(moment: datetime) -> Clock:
    """Return a clock that always reports ``moment``."""
    def _now() -> datetime:
        return moment
    return _now


def get_clock() -> Clock:
    """FastAPI dependency returning the clock used by request handlers."""
    return local_now
