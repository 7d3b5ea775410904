"""
Read-side views: slot availability and a customer's own orders for the
order pages, and the work-service board for the operator. Nothing here writes.
"""

import logging
from collections import defaultdict
from datetime import date, datetime
from typing import Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload, selectinload

from ..models import Order, OrderStatus, WorkingDay
from ..schemas.orders import OrderIngredientOut
from ..schemas.slots import (
    DayAvailabilityOut,
    SlotAvailabilityOut,
    SlotStatusCountsOut,
    WorkServiceOrderOut,
    WorkServiceOut,
)


logger = logging.getLogger(__name__)

BOARD_STATUSES = (
    OrderStatus.PENDING.value,
    OrderStatus.CONFIRMED.value,
    OrderStatus.READY.value,
    OrderStatus.PICKED_UP.value,
)


def _working_day_for(db: Session, day: date) -> Optional[WorkingDay]:
    return db.query(WorkingDay).filter(WorkingDay.day == day).one_or_none()


def get_slot_availability(db: Session, day: date) -> DayAvailabilityOut:
    """Places left in every slot of ``day``. A day without service has no slots."""
    working_day = _working_day_for(db, day)
    if working_day is None:
        return DayAvailabilityOut(date=day)

    occupied: Dict[int, int] = dict(
        db.query(Order.time_slot_id, func.count(Order.id))
        .filter(
            Order.working_day_id == working_day.id,
            Order.status != OrderStatus.REJECTED.value,
        )
        .group_by(Order.time_slot_id)
        .all()
    )

    slots = []
    for slot in working_day.time_slots:
        count = occupied.get(slot.id, 0)
        slots_left = max(0, working_day.capacity - count)
        slots.append(SlotAvailabilityOut(
            id=slot.id,
            start_time=slot.start_time,
            end_time=slot.end_time,
            capacity=working_day.capacity,
            orders_count=count,
            slots_left=slots_left,
            available=bool(working_day.is_active) and slots_left > 0,
        ))

    return DayAvailabilityOut(
        date=day,
        working_day_id=working_day.id,
        location=working_day.location,
        is_active=bool(working_day.is_active),
        slots=slots,
    )


def get_work_service_overview(db: Session, day: date, now: datetime) -> WorkServiceOut:
    """
    Operator board for ``day``.

    Counts orders per slot and status (rejected orders are left out), marks
    the slot containing ``now`` when ``day`` is today, and lists the day's
    orders by daily number.
    """
    working_day = _working_day_for(db, day)
    if working_day is None:
        return WorkServiceOut(date=day)

    orders = (
        db.query(Order)
        .options(
            joinedload(Order.user),
            joinedload(Order.time_slot),
            selectinload(Order.ingredients),
        )
        .filter(
            Order.working_day_id == working_day.id,
            Order.status != OrderStatus.REJECTED.value,
        )
        .order_by(Order.daily_number)
        .all()
    )

    counts: Dict[int, Dict[str, int]] = defaultdict(lambda: dict.fromkeys(BOARD_STATUSES, 0))
    for order in orders:
        counts[order.time_slot_id][order.status] += 1

    current_slot_id = None
    if day == now.date():
        current = now.time()
        for slot in working_day.time_slots:
            if slot.start_time <= current < slot.end_time:
                current_slot_id = slot.id
                break

    slots = [
        SlotStatusCountsOut(
            id=slot.id,
            start_time=slot.start_time,
            end_time=slot.end_time,
            **counts[slot.id],
        )
        for slot in working_day.time_slots
    ]

    board = [
        WorkServiceOrderOut(
            id=order.id,
            daily_number=order.daily_number,
            status=order.status,
            user_id=order.user_id,
            user_name=order.user.name,
            time_slot_id=order.time_slot_id,
            slot_start=order.time_slot.start_time,
            ingredients=[OrderIngredientOut.model_validate(i) for i in order.ingredients],
        )
        for order in orders
    ]

    logger.debug("Work service for %s: %d orders over %d slots", day, len(board), len(slots))
    return WorkServiceOut(
        date=day,
        working_day_id=working_day.id,
        location=working_day.location,
        current_time_slot_id=current_slot_id,
        slots=slots,
        orders=board,
    )


# =============================================================================
# Customer order lists
# =============================================================================

RECENT_ORDERS_LIMIT = 20


def _user_orders_query(db: Session, user_id: int):
    return (
        db.query(Order)
        .join(WorkingDay, Order.working_day_id == WorkingDay.id)
        .options(
            joinedload(Order.time_slot),
            joinedload(Order.working_day),
            selectinload(Order.ingredients),
        )
        .filter(Order.user_id == user_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
    )


def list_active_orders(db: Session, user_id: int, day: date) -> List[Order]:
    """
    The user's orders on ``day`` that have not been picked up, newest first.

    Rejected orders stay in the list so the customer sees the rejection.
    """
    return (
        _user_orders_query(db, user_id)
        .filter(
            WorkingDay.day == day,
            Order.status != OrderStatus.PICKED_UP.value,
        )
        .all()
    )


def list_recent_orders(
    db: Session,
    user_id: int,
    today: date,
    limit: int = RECENT_ORDERS_LIMIT,
) -> List[Order]:
    """
    The user's order history, newest first: picked-up orders and orders of
    past days. Rejected orders are left out.
    """
    return (
        _user_orders_query(db, user_id)
        .filter(
            or_(
                Order.status == OrderStatus.PICKED_UP.value,
                WorkingDay.day < today,
            ),
            Order.status != OrderStatus.REJECTED.value,
        )
        .limit(limit)
        .all()
    )
