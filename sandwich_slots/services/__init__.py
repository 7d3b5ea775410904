"""
Services Package for Sandwich Slots
===================================

This package contains the order admission and lifecycle engine. Services
receive their database session (and, where time matters, the current time)
from the caller and raise DomainError subclasses on business failures; they
know nothing about HTTP.

Available Services:
-------------------
- **slot_generator**: Cuts a working day's hours into fixed-duration slots
- **admission**: Capacity-limited order creation and daily numbering
- **lifecycle**: Status state machine, customer update and delete
- **deadline**: Order deadlines and the automatic confirmation sweep
- **schedule**: Weekly template application and week configuration
- **overview**: Slot availability, customer order lists and the operator
  work-service board
- **catalog**: Ingredient lookup and sandwich validation
- **locks**: In-process per-key locks shared by the writers above

Design Philosophy:
------------------
1. **Single Writer per Concern**: Only admission assigns daily numbers and
   fills slots, only lifecycle and deadline write status, only schedule
   creates or removes working days.

2. **Dependency Injection**: Sessions, clocks and session factories are
   passed in, so tests run every service against an in-memory database at a
   pinned time.

3. **Commit or Roll Back**: Every mutating operation ends in exactly one
   commit, or rolls back and re-raises.

Usage:
------
    from sandwich_slots.services import create_order, change_order_status

    order = create_order(db, user_id=3, time_slot_id=12, ingredient_ids=[1, 4])
    change_order_status(db, order.id, "confirmed")
"""

from .admission import create_order
from .lifecycle import change_order_status, delete_order, update_order
from .deadline import DeadlineConfirmer, run_deadline_sweep
from .schedule import apply_weekly_template, get_week_configuration
from .overview import (
    get_slot_availability,
    get_work_service_overview,
    list_active_orders,
    list_recent_orders,
)

__all__ = [
    "create_order",
    "update_order",
    "delete_order",
    "change_order_status",
    "DeadlineConfirmer",
    "run_deadline_sweep",
    "apply_weekly_template",
    "get_week_configuration",
    "get_slot_availability",
    "get_work_service_overview",
    "list_active_orders",
    "list_recent_orders",
]
