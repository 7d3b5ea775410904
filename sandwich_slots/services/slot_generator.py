"""
Time Slot Generation
====================

Cuts a working day's opening hours into fixed-duration bookable slots.

Rules:
------
- One slot per full ``duration`` interval starting at the opening time.
- The last slot ends at or before the closing time; a trailing interval
  shorter than one duration is dropped, never truncated.
- Times are not rounded. Callers supply opening hours aligned to the slot
  duration (the schedule configurator validates this).
- Generation is a no-op for a working day that already has slots, so calling
  it twice never duplicates anything. The unique (working_day, start, end)
  constraint backs this up at the database level.

The generator flushes but never commits: it always runs inside the caller's
transaction, right after the working day row is created.
"""

import logging
from datetime import date, datetime, time, timedelta
from typing import List, Tuple

from sqlalchemy.orm import Session

from .. import config
from ..errors import ValidationFailed
from ..models import TimeSlot, WorkingDay


logger = logging.getLogger(__name__)


def compute_slot_intervals(
    start: time,
    end: time,
    duration_minutes: int,
) -> List[Tuple[time, time]]:
    """Return the (start, end) pairs of every full slot between ``start`` and ``end``."""
    if duration_minutes <= 0:
        raise ValidationFailed("Slot duration must be a positive number of minutes.")
    if start >= end:
        raise ValidationFailed(
            "Opening time must be before closing time.",
            details={"start_time": start.isoformat(), "end_time": end.isoformat()},
        )

    # Anchor on an arbitrary date so timedelta arithmetic works on times
    anchor = date(2000, 1, 1)
    current = datetime.combine(anchor, start)
    close = datetime.combine(anchor, end)
    step = timedelta(minutes=duration_minutes)

    intervals = []
    while current + step <= close:
        intervals.append((current.time(), (current + step).time()))
        current += step
    return intervals


def generate_time_slots(
    db: Session,
    working_day: WorkingDay,
    duration_minutes: int = None,
) -> List[TimeSlot]:
    """
    Create the time slots of ``working_day``.

    Returns the created slots, or an empty list when the day already had slots.
    """
    if duration_minutes is None:
        duration_minutes = config.SLOT_DURATION_MINUTES

    already_generated = (
        db.query(TimeSlot.id)
        .filter(TimeSlot.working_day_id == working_day.id)
        .first()
    )
    if already_generated is not None:
        logger.debug("Working day %s already has slots, skipping generation", working_day.day)
        return []

    intervals = compute_slot_intervals(working_day.start_time, working_day.end_time, duration_minutes)

    slots = [
        TimeSlot(working_day_id=working_day.id, start_time=slot_start, end_time=slot_end)
        for slot_start, slot_end in intervals
    ]
    db.add_all(slots)
    db.flush()

    logger.info(
        "Generated %d slots of %d minutes for %s (%s-%s)",
        len(slots),
        duration_minutes,
        working_day.day,
        working_day.start_time.strftime("%H:%M"),
        working_day.end_time.strftime("%H:%M"),
    )
    return slots
