"""
Order Lifecycle Service for Sandwich Slots
==========================================

Governs how an admitted order changes after creation.

Order States:
-------------
- pending: initial state, the only one a customer may edit or cancel
- confirmed: locked, the kitchen will prepare it
- ready: prepared, waiting at the counter
- picked_up: collected by the customer
- rejected: cancelled by the operator (terminal)

Transition Rules:
-----------------
- Moving *to* pending is always forbidden (pending is initial only).
- Moving *out of* rejected is always forbidden (rejected is terminal).
- Every other pair is allowed, including skips (pending -> picked_up) and
  rollbacks (picked_up -> confirmed).

Customer Mutations:
-------------------
update_order and delete_order check, in order:
1. the order exists (NotFound)
2. the caller owns it (UnauthorizedOrderAccess)
3. it is pending and its deadline has not passed (OrderNotModifiable)

Ownership and business-state eligibility are separate failure kinds. Every
check runs with the order row locked inside the transaction that commits the
change, so a decision is never based on a stale read.
"""

import logging
from datetime import datetime
from typing import Optional, Sequence

from sqlalchemy.orm import Session

from ..clock import local_now
from ..errors import InvalidStateTransition, NotFound, OrderNotModifiable, UnauthorizedOrderAccess, ValidationFailed
from ..models import Order, OrderStatus
from .admission import build_snapshots
from .catalog import validate_ingredient_selection
from .deadline import is_order_modifiable, order_deadline
from .locks import order_locks


logger = logging.getLogger(__name__)


def can_transition(from_status: str, to_status: str) -> bool:
    """Return True when the operator may move an order from ``from_status`` to ``to_status``."""
    if to_status == OrderStatus.PENDING.value:
        return False
    if from_status == OrderStatus.REJECTED.value:
        return False
    return True


def parse_status(value: str) -> OrderStatus:
    try:
        return OrderStatus(value)
    except ValueError:
        raise ValidationFailed(
            f"Unknown order status '{value}'.",
            details={"allowed": [s.value for s in OrderStatus]},
        ) from None


def _lock_order(db: Session, order_id: int) -> Order:
    order = (
        db.query(Order)
        .filter(Order.id == order_id)
        .with_for_update()
        .populate_existing()
        .one_or_none()
    )
    if order is None:
        raise NotFound("Order not found.", details={"order_id": order_id})
    return order


def _check_customer_may_modify(order: Order, user_id: int, now: datetime) -> None:
    if order.user_id != user_id:
        raise UnauthorizedOrderAccess()
    if not is_order_modifiable(order, now):
        if order.status != OrderStatus.PENDING.value:
            reason = f"Order is already {order.status}."
        else:
            deadline = order_deadline(order.time_slot, order.working_day)
            reason = f"The modification deadline ({deadline.strftime('%H:%M')}) has passed."
        raise OrderNotModifiable(
            f"This order can no longer be modified or cancelled. {reason}",
            details={"order_id": order.id, "status": order.status},
        )


def change_order_status(db: Session, order_id: int, new_status: str) -> Order:
    """
    Move an order to ``new_status`` (operator action).

    Raises:
        ValidationFailed: unknown status value
        NotFound: the order does not exist
        InvalidStateTransition: the state machine forbids the move
    """
    target = parse_status(new_status)
    with order_locks.hold(order_id):
        try:
            order = _lock_order(db, order_id)
            previous = order.status
            if not can_transition(previous, target.value):
                raise InvalidStateTransition(previous, target.value)
            order.status = target.value
            db.commit()
        except Exception:
            db.rollback()
            raise

    logger.info("Order %d status changed: %s -> %s", order_id, previous, target.value)
    return order


def update_order(
    db: Session,
    order_id: int,
    user_id: int,
    ingredient_ids: Sequence[int],
    now: Optional[datetime] = None,
) -> Order:
    """
    Replace the ingredients of a pending order owned by ``user_id``.

    The slot and daily number never change and capacity is not rechecked.
    """
    if now is None:
        now = local_now()
    with order_locks.hold(order_id):
        try:
            order = _lock_order(db, order_id)
            _check_customer_may_modify(order, user_id, now)
            snapshots = validate_ingredient_selection(db, ingredient_ids)

            # Old snapshot rows must be gone before the replacements reuse their names
            order.ingredients = []
            db.flush()
            build_snapshots(order, snapshots)
            db.commit()
        except Exception:
            db.rollback()
            raise

    logger.info("Order %d ingredients replaced by user %d (%d items)", order_id, user_id, len(snapshots))
    return order


def delete_order(
    db: Session,
    order_id: int,
    user_id: int,
    now: Optional[datetime] = None,
) -> None:
    """Delete a pending order owned by ``user_id``. Its ingredient snapshots go with it."""
    if now is None:
        now = local_now()
    with order_locks.hold(order_id):
        try:
            order = _lock_order(db, order_id)
            _check_customer_may_modify(order, user_id, now)
            daily_number = order.daily_number
            db.delete(order)
            db.commit()
        except Exception:
            db.rollback()
            raise

    logger.info("Order %d (#%d) deleted by user %d", order_id, daily_number, user_id)
