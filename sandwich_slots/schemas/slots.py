"""
Slot Schemas for Sandwich Slots
===============================

Read models for the customer's slot picker and the operator's work-service
board.

Endpoint Coverage:
------------------
- GET /slots?date=YYYY-MM-DD: Availability of every slot of a day
- GET /admin/work-service?date=YYYY-MM-DD: Per-slot status counts and the
  day's orders in daily-number order
"""

from datetime import date, time
from typing import List, Optional

from pydantic import BaseModel

from .orders import OrderIngredientOut


class SlotAvailabilityOut(BaseModel):
    """
    Availability of one time slot.

    Attributes:
        id: Time slot id (the value to send as time_slot_id)
        start_time / end_time: Slot interval
        capacity: Orders accepted per slot on this day
        orders_count: Non-rejected orders already in the slot
        slots_left: max(0, capacity - orders_count)
        available: True when the day is active and places are left
    """
    id: int
    start_time: time
    end_time: time
    capacity: int
    orders_count: int
    slots_left: int
    available: bool


class DayAvailabilityOut(BaseModel):
    """Response model for GET /slots. ``working_day_id`` is None on days without service."""
    date: date
    working_day_id: Optional[int] = None
    location: Optional[str] = None
    is_active: bool = False
    slots: List[SlotAvailabilityOut] = []


class SlotStatusCountsOut(BaseModel):
    id: int
    start_time: time
    end_time: time
    pending: int = 0
    confirmed: int = 0
    ready: int = 0
    picked_up: int = 0


class WorkServiceOrderOut(BaseModel):
    """One order on the operator board."""
    id: int
    daily_number: int
    status: str
    user_id: int
    user_name: str
    time_slot_id: int
    slot_start: time
    ingredients: List[OrderIngredientOut]


class WorkServiceOut(BaseModel):
    """
    Response model for GET /admin/work-service.

    Attributes:
        date: Day shown
        working_day_id: None when the day has no service
        current_time_slot_id: Slot containing the current time, only when the
            day shown is today
        slots: Per-slot status counts (rejected orders are not counted)
        orders: Non-rejected orders sorted by daily_number
    """
    date: date
    working_day_id: Optional[int] = None
    location: Optional[str] = None
    current_time_slot_id: Optional[int] = None
    slots: List[SlotStatusCountsOut] = []
    orders: List[WorkServiceOrderOut] = []
