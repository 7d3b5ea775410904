"""
Schedule Configuration Service for Sandwich Slots
=================================================

Applies the operator's weekly template to the coming week and reads back the
configuration of any week.

Applying a Template:
-------------------
Every weekday of the template maps to the next date strictly after ``today``
with that weekday (a template applied on a Monday configures the Monday one
week later). For that date:

    enabled,  no working day  -> create it and generate its slots   (created)
    enabled,  working day     -> leave it untouched                  (skipped_existing)
    disabled, working day     -> delete it with its slots and orders (deleted)
    disabled, no working day  -> nothing                             (unchanged)

Guarantees:
-----------
- Dates on or before ``today`` are never touched, so past and running service
  days are never rewritten.
- An existing future day is never modified in place. Changing the hours of a
  day that already exists means disabling it and enabling it again.
- The whole template is applied in one transaction. A failure on any day
  rolls back every other day.
- The template is fully validated before anything is written.

Deleting a Day:
---------------
Disabling a configured day deletes its orders too, whatever their status.
The report carries the number of deleted orders per day and a WARNING is
logged, so the operator sees what the change cost.
"""

import logging
from contextlib import ExitStack
from datetime import date, datetime, time, timedelta
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from .. import config
from ..errors import ValidationFailed
from ..models import Order, OrderStatus, WorkingDay
from ..schemas.schedule import (
    DayConfigurationOut,
    DayOperationOut,
    DayTemplate,
    GlobalConstraintsOut,
    ScheduleReport,
    WeekConfiguration,
    Weekday,
    WeeklyTemplate,
)
from .locks import working_day_locks
from .slot_generator import generate_time_slots


logger = logging.getLogger(__name__)

ACTION_CREATED = "created"
ACTION_SKIPPED_EXISTING = "skipped_existing"
ACTION_DELETED = "deleted"
ACTION_UNCHANGED = "unchanged"

MAX_LOCATION_LENGTH = 255


def next_date_for_weekday(today: date, weekday: int) -> date:
    """Next date strictly after ``today`` falling on ``weekday`` (Monday == 0)."""
    days_ahead = (weekday - today.weekday() + 7) % 7
    if days_ahead == 0:
        days_ahead = 7
    return today + timedelta(days=days_ahead)


def _is_aligned(value: time, duration_minutes: int) -> bool:
    if value.second or value.microsecond:
        return False
    return (value.hour * 60 + value.minute) % duration_minutes == 0


def validate_template(template: WeeklyTemplate, duration_minutes: int) -> None:
    """Raise ValidationFailed for the first rule the template breaks."""
    if template.capacity < 1:
        raise ValidationFailed(
            "Capacity must be at least 1 order per slot.",
            details={"capacity": template.capacity},
        )
    if template.deadline_minutes < 0:
        raise ValidationFailed(
            "Deadline minutes cannot be negative.",
            details={"deadline_minutes": template.deadline_minutes},
        )
    location = template.location.strip()
    if not location or len(location) > MAX_LOCATION_LENGTH:
        raise ValidationFailed(f"Location must be between 1 and {MAX_LOCATION_LENGTH} characters.")

    for weekday, day in template.days.items():
        if not day.enabled:
            continue
        if day.start_time is None or day.end_time is None:
            raise ValidationFailed(
                f"{weekday.value.capitalize()} is enabled but has no opening hours.",
                details={"weekday": weekday.value},
            )
        if day.end_time <= day.start_time:
            raise ValidationFailed(
                f"{weekday.value.capitalize()}: closing time must be after opening time.",
                details={"weekday": weekday.value},
            )
        for label, value in (("start_time", day.start_time), ("end_time", day.end_time)):
            if not _is_aligned(value, duration_minutes):
                raise ValidationFailed(
                    f"{weekday.value.capitalize()}: {label} {value.strftime('%H:%M')} is not "
                    f"aligned to {duration_minutes}-minute slots.",
                    details={"weekday": weekday.value, "field": label},
                )


def _count_orders(db: Session, working_day_id: int) -> int:
    return (
        db.query(func.count(Order.id))
        .filter(Order.working_day_id == working_day_id)
        .scalar()
    )


def _create_working_day(
    db: Session,
    target: date,
    template: WeeklyTemplate,
    day: DayTemplate,
    duration_minutes: int,
) -> DayOperationOut:
    working_day = WorkingDay(
        day=target,
        location=template.location.strip(),
        capacity=template.capacity,
        deadline_minutes=template.deadline_minutes,
        start_time=day.start_time,
        end_time=day.end_time,
        is_active=True,
    )
    db.add(working_day)
    db.flush()
    slots = generate_time_slots(db, working_day, duration_minutes)
    return DayOperationOut(
        weekday=Weekday.from_date(target),
        date=target,
        action=ACTION_CREATED,
        working_day_id=working_day.id,
        slots_created=len(slots),
    )


def apply_weekly_template(
    db: Session,
    template: WeeklyTemplate,
    today: date,
    duration_minutes: int = None,
) -> ScheduleReport:
    """
    Apply ``template`` to the seven days following ``today``.

    Returns:
        A ScheduleReport with one entry per weekday, in calendar order

    Raises:
        ValidationFailed: the template breaks a rule (nothing was written)
    """
    if duration_minutes is None:
        duration_minutes = config.SLOT_DURATION_MINUTES
    validate_template(template, duration_minutes)

    targets = sorted(
        (next_date_for_weekday(today, weekday.index), weekday) for weekday in Weekday
    )
    existing: Dict[date, WorkingDay] = {
        wd.day: wd
        for wd in db.query(WorkingDay).filter(WorkingDay.day.in_([t for t, _ in targets])).all()
    }

    def day_template(weekday: Weekday) -> DayTemplate:
        return template.days.get(weekday) or DayTemplate(enabled=False)

    # Days to delete are locked before the first write, in id order
    doomed_ids = sorted(
        existing[target].id
        for target, weekday in targets
        if target in existing and not day_template(weekday).enabled
    )

    operations: List[DayOperationOut] = []
    with ExitStack() as stack:
        for working_day_id in doomed_ids:
            stack.enter_context(working_day_locks.hold(working_day_id))

        try:
            for target, weekday in targets:
                day = day_template(weekday)
                working_day = existing.get(target)

                if day.enabled and working_day is None:
                    operations.append(
                        _create_working_day(db, target, template, day, duration_minutes)
                    )
                elif day.enabled:
                    operations.append(DayOperationOut(
                        weekday=weekday,
                        date=target,
                        action=ACTION_SKIPPED_EXISTING,
                        working_day_id=working_day.id,
                    ))
                elif working_day is not None:
                    locked = (
                        db.query(WorkingDay)
                        .filter(WorkingDay.id == working_day.id)
                        .with_for_update()
                        .one()
                    )
                    orders_deleted = _count_orders(db, locked.id)
                    db.delete(locked)
                    db.flush()
                    operations.append(DayOperationOut(
                        weekday=weekday,
                        date=target,
                        action=ACTION_DELETED,
                        working_day_id=locked.id,
                        orders_deleted=orders_deleted,
                    ))
                else:
                    operations.append(DayOperationOut(
                        weekday=weekday, date=target, action=ACTION_UNCHANGED,
                    ))
            db.commit()
        except Exception:
            db.rollback()
            raise

    report = ScheduleReport(
        applied_on=today,
        days=operations,
        slots_created=sum(op.slots_created for op in operations),
        orders_deleted=sum(op.orders_deleted for op in operations),
    )

    for op in operations:
        if op.action == ACTION_DELETED:
            if op.orders_deleted:
                logger.warning(
                    "Disabled %s (%s): working day deleted together with %d orders",
                    op.weekday.value, op.date, op.orders_deleted,
                )
            else:
                logger.info("Disabled %s (%s): working day deleted", op.weekday.value, op.date)
    logger.info(
        "Applied weekly template on %s: %s",
        today,
        ", ".join(f"{op.date} {op.action}" for op in operations),
    )
    return report


# =============================================================================
# Week Configuration (read-only)
# =============================================================================

def _parse_hhmm(value: str) -> time:
    return datetime.strptime(value, "%H:%M").time()


def _default_constraints() -> GlobalConstraintsOut:
    return GlobalConstraintsOut(
        capacity=config.DEFAULT_CAPACITY,
        deadline_minutes=config.DEFAULT_DEADLINE_MINUTES,
        location=config.DEFAULT_LOCATION,
        slot_duration_minutes=config.SLOT_DURATION_MINUTES,
    )


def get_week_configuration(
    db: Session,
    week_start: date,
    today: date,
) -> WeekConfiguration:
    """
    Describe the Monday-to-Sunday week containing ``week_start``.

    Constraints come from the most recently created working day of the week,
    or the configured defaults when the week has none.
    """
    monday = week_start - timedelta(days=week_start.weekday())
    sunday = monday + timedelta(days=6)

    working_days = (
        db.query(WorkingDay)
        .filter(WorkingDay.day >= monday, WorkingDay.day <= sunday)
        .all()
    )
    by_date = {wd.day: wd for wd in working_days}

    counts = dict(
        db.query(Order.working_day_id, func.count(Order.id))
        .filter(
            Order.working_day_id.in_([wd.id for wd in working_days]),
            Order.status.in_([OrderStatus.PENDING.value, OrderStatus.CONFIRMED.value]),
        )
        .group_by(Order.working_day_id)
        .all()
    ) if working_days else {}

    latest: Optional[WorkingDay] = max(
        working_days, key=lambda wd: (wd.created_at, wd.id), default=None
    )
    if latest is None:
        constraints = _default_constraints()
    else:
        constraints = GlobalConstraintsOut(
            capacity=latest.capacity,
            deadline_minutes=latest.deadline_minutes,
            location=latest.location,
            slot_duration_minutes=config.SLOT_DURATION_MINUTES,
        )

    default_start = _parse_hhmm(config.DEFAULT_DAY_START_TIME)
    default_end = _parse_hhmm(config.DEFAULT_DAY_END_TIME)

    days = []
    for offset in range(7):
        current = monday + timedelta(days=offset)
        working_day = by_date.get(current)
        days.append(DayConfigurationOut(
            date=current,
            weekday=Weekday.from_date(current),
            is_configured=working_day is not None,
            is_active=bool(working_day is not None and working_day.is_active),
            start_time=working_day.start_time if working_day else default_start,
            end_time=working_day.end_time if working_day else default_end,
            is_editable=current > today,
            orders_count=counts.get(working_day.id, 0) if working_day else 0,
        ))

    return WeekConfiguration(
        week_start=monday,
        week_end=sunday,
        constraints=constraints,
        days=days,
    )
