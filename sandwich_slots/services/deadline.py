"""
Order Deadlines and Automatic Confirmation
==========================================

Every order has a modification deadline:

    deadline = working_day.day + slot.start_time - working_day.deadline_minutes

Example: slot 12:00, deadline_minutes 30 -> deadline 11:30. Until 11:29 the
customer may still change or cancel the order; from 11:30 the kitchen needs
certainty, so the order is locked and promoted to ``confirmed``.

Modifiability:
--------------
An order is user-modifiable iff ``status == pending`` and ``now < deadline``.
The read-time answer (is_order_modifiable) is advisory for display. The
lifecycle service re-checks it at its own commit point, so a mutation that
arrives after the deadline is rejected even if the sweep has not run yet.

The Sweep:
----------
DeadlineConfirmer.run_sweep() promotes every pending order of today whose
deadline has passed to ``confirmed``:

- It only reads ``pending`` orders and only writes ``confirmed``, so running
  it again (at any frequency) changes nothing.
- Each order is handled in its own short transaction that re-reads the order
  under a row lock; a concurrent user delete or operator change is seen, not
  overwritten.
- A failure on one order is logged and rolled back; the sweep moves on.

The confirmer receives its session factory and clock explicitly, which lets
tests run it against an in-memory database at a fixed time. In the web
process it runs as an asyncio background task (start/stop) from the app
lifespan; confirm_pending_orders.py runs it once from cron.
"""

import asyncio
import logging
from contextlib import AbstractContextManager
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from ..clock import Clock, fixed_clock, local_now
from ..models import Order, OrderStatus, TimeSlot, WorkingDay
from .locks import order_locks


logger = logging.getLogger(__name__)

SessionFactory = Callable[[], AbstractContextManager]


def order_deadline(slot: TimeSlot, working_day: WorkingDay) -> datetime:
    """Moment after which an order in ``slot`` can no longer be changed by its owner."""
    slot_start = datetime.combine(working_day.day, slot.start_time)
    return slot_start - timedelta(minutes=working_day.deadline_minutes or 0)


def is_order_modifiable(order: Order, now: datetime) -> bool:
    if order.status != OrderStatus.PENDING.value:
        return False
    return now < order_deadline(order.time_slot, order.working_day)


class DeadlineConfirmer:
    """Recurring, idempotent promotion of overdue pending orders to confirmed."""

    def __init__(
        self,
        session_factory: SessionFactory,
        clock: Clock = local_now,
        interval_seconds: int = 60,
    ):
        self._session_factory = session_factory
        self._clock = clock
        self._interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def _pending_order_ids_for(self, db: Session, now: datetime) -> List[int]:
        rows = (
            db.query(Order.id)
            .join(WorkingDay, Order.working_day_id == WorkingDay.id)
            .filter(
                Order.status == OrderStatus.PENDING.value,
                WorkingDay.day == now.date(),
            )
            .order_by(Order.id)
            .all()
        )
        return [row.id for row in rows]

    def _confirm_if_due(self, db: Session, order_id: int, now: datetime) -> bool:
        order = (
            db.query(Order)
            .filter(Order.id == order_id)
            .with_for_update()
            .populate_existing()
            .one_or_none()
        )
        # Deleted or moved on since the candidate list was read
        if order is None or order.status != OrderStatus.PENDING.value:
            db.rollback()
            return False

        deadline = order_deadline(order.time_slot, order.working_day)
        if now < deadline:
            logger.debug("Order %d stays pending until %s", order.id, deadline)
            db.rollback()
            return False

        order.status = OrderStatus.CONFIRMED.value
        db.commit()
        logger.debug("Order %d confirmed (deadline %s)", order_id, deadline)
        return True

    def run_sweep(self) -> int:
        """Confirm every overdue pending order of today. Returns how many were confirmed."""
        now = self._clock()
        confirmed = 0
        failed = 0

        with self._session_factory() as db:
            candidates = self._pending_order_ids_for(db, now)
            db.rollback()

            for order_id in candidates:
                try:
                    with order_locks.hold(order_id):
                        due = self._confirm_if_due(db, order_id, now)
                    if due:
                        confirmed += 1
                except Exception:
                    db.rollback()
                    failed += 1
                    logger.exception("Failed to auto-confirm order %d, continuing sweep", order_id)

        if confirmed or failed:
            logger.info(
                "Auto-confirmed %d orders for %s (%d candidates, %d failures)",
                confirmed, now.date(), len(candidates), failed,
            )
        else:
            logger.debug("Deadline sweep for %s: %d candidates, nothing due", now.date(), len(candidates))
        return confirmed

    async def start(self) -> None:
        """Start the background sweep loop on the running event loop."""
        if self.is_running:
            return
        self._task = asyncio.create_task(self._loop())
        logger.info("Started deadline sweep task (every %d seconds)", self._interval_seconds)

    async def stop(self) -> None:
        """Stop the background sweep loop."""
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
            logger.info("Stopped deadline sweep task")

    async def _loop(self) -> None:
        while True:
            try:
                # Database work is blocking; keep it off the event loop
                await asyncio.to_thread(self.run_sweep)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.error("Error in deadline sweep: %s", e)
            await asyncio.sleep(self._interval_seconds)


def run_deadline_sweep(db_session_factory: SessionFactory, now: Optional[datetime] = None) -> int:
    """Run one sweep, optionally at a pinned time."""
    clock = fixed_clock(now) if now is not None else local_now
    return DeadlineConfirmer(db_session_factory, clock=clock).run_sweep()
