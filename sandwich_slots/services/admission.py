"""
Order Admission Service for Sandwich Slots
==========================================

Admits new orders into a time slot without ever exceeding the slot's capacity
and assigns each order its daily number.

Admission Flow:
---------------
1. Load the slot (NotFound if missing).
2. Validate the ingredient selection against the catalog (ValidationFailed).
3. Serialize on the slot's working day:
   - lock the working day row (SELECT ... FOR UPDATE on PostgreSQL),
   - hold an in-process lock for the same day, which gives engines without
     row locks (SQLite) the same single-writer behaviour.
4. Count the slot's non-rejected orders; reject with SlotFull when
   ``count >= working_day.capacity``.
5. daily_number = one past the highest number issued for the day, or 1 for
   the first order. The working day row records the last issued number.
6. Insert the order (pending) and its ingredient snapshots, then commit.

Steps 4-6 happen in one transaction, so an order without a number (or a
number without an order) is never observable.

Concurrency:
------------
Two simultaneous requests for the last free place are serialized by the
working-day lock: the second one counts after the first commits and gets
SlotFull. Requests for different working days never wait on each other.
The daily number is scoped per day, which is why the day (not the slot) is
the unit of serialization.

Safety Net:
-----------
The unique (working_day_id, daily_number) constraint rejects any duplicate
that slips past the lock (e.g. several app processes on an engine without row
locks). An IntegrityError rolls back and the admission is retried up to
ADMISSION_MAX_RETRIES times, recounting capacity each time.
"""

import logging
from typing import Sequence

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .. import config
from ..errors import NotFound, SlotFull
from ..models import Order, OrderIngredient, OrderStatus, TimeSlot, WorkingDay
from .catalog import IngredientSnapshot, validate_ingredient_selection
from .locks import working_day_locks


logger = logging.getLogger(__name__)


def count_active_orders(db: Session, time_slot_id: int) -> int:
    """Number of orders occupying the slot (everything except rejected)."""
    return (
        db.query(func.count(Order.id))
        .filter(
            Order.time_slot_id == time_slot_id,
            Order.status != OrderStatus.REJECTED.value,
        )
        .scalar()
    )


def next_daily_number(db: Session, working_day_id: int) -> int:
    """
    Next number for the day: one past the highest number ever issued.

    The working day remembers its last issued number, so deleting the newest
    pending order never hands its number out again.
    """
    current_max = (
        db.query(func.max(Order.daily_number))
        .filter(Order.working_day_id == working_day_id)
        .scalar()
    )
    last_issued = (
        db.query(WorkingDay.last_daily_number)
        .filter(WorkingDay.id == working_day_id)
        .scalar()
    )
    return max(current_max or 0, last_issued or 0) + 1


def build_snapshots(order: Order, snapshots: Sequence[IngredientSnapshot]) -> None:
    """Attach ingredient snapshot rows to ``order``, preserving selection order."""
    order.ingredients = [
        OrderIngredient(position=position, name=snap.name, category=snap.category)
        for position, snap in enumerate(snapshots)
    ]


def _admit_locked(
    db: Session,
    time_slot_id: int,
    working_day_id: int,
    user_id: int,
    snapshots: Sequence[IngredientSnapshot],
) -> Order:
    working_day = (
        db.query(WorkingDay)
        .filter(WorkingDay.id == working_day_id)
        .with_for_update()
        .populate_existing()
        .one_or_none()
    )
    if working_day is None:
        # The day was removed from the schedule after the slot was looked up
        raise NotFound(
            "The selected time slot does not exist.",
            details={"time_slot_id": time_slot_id},
        )

    occupied = count_active_orders(db, time_slot_id)
    if occupied >= working_day.capacity:
        logger.info(
            "Slot %d (%s) is full: %d/%d",
            time_slot_id, working_day.day,
            occupied, working_day.capacity,
        )
        raise SlotFull(details={"time_slot_id": time_slot_id, "capacity": working_day.capacity})

    order = Order(
        user_id=user_id,
        time_slot_id=time_slot_id,
        working_day_id=working_day.id,
        daily_number=next_daily_number(db, working_day.id),
        status=OrderStatus.PENDING.value,
    )
    build_snapshots(order, snapshots)
    db.add(order)
    working_day.last_daily_number = max(working_day.last_daily_number or 0, order.daily_number)
    db.commit()
    return order


def create_order(
    db: Session,
    user_id: int,
    time_slot_id: int,
    ingredient_ids: Sequence[int],
) -> Order:
    """
    Admit a new pending order for ``user_id`` into ``time_slot_id``.

    Returns:
        The committed Order with its daily_number and ingredient snapshots

    Raises:
        NotFound: the slot does not exist
        ValidationFailed: the ingredient selection breaks a sandwich rule
        SlotFull: the slot already holds ``capacity`` non-rejected orders
    """
    slot = db.get(TimeSlot, time_slot_id)
    if slot is None:
        raise NotFound("The selected time slot does not exist.", details={"time_slot_id": time_slot_id})

    snapshots = validate_ingredient_selection(db, ingredient_ids)

    attempts = max(1, config.ADMISSION_MAX_RETRIES + 1)
    working_day_id = slot.working_day_id
    for attempt in range(1, attempts + 1):
        with working_day_locks.hold(working_day_id):
            try:
                order = _admit_locked(db, time_slot_id, working_day_id, user_id, snapshots)
            except IntegrityError:
                db.rollback()
                if attempt == attempts:
                    logger.error(
                        "Daily number conflict on working day %d persisted after %d attempts",
                        working_day_id, attempts,
                    )
                    raise
                logger.warning(
                    "Daily number conflict on working day %d, retrying (attempt %d/%d)",
                    working_day_id, attempt, attempts,
                )
                continue
            except Exception:
                db.rollback()
                raise

        logger.info(
            "Admitted order %d (#%d) for user %d into slot %d",
            order.id, order.daily_number, user_id, time_slot_id,
        )
        return order
