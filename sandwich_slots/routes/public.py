"""
Public Routes for Sandwich Slots
================================

Endpoints that don't require authentication: the slot picker data shown
before a customer places an order.

Endpoints:
----------
- GET /slots?date=YYYY-MM-DD: Every slot of the day with the places left

Usage:
------
    GET /slots?date=2026-03-02
    {
        "date": "2026-03-02",
        "working_day_id": 4,
        "location": "Piazza Centrale - Engineering Hub",
        "is_active": true,
        "slots": [
            {"id": 31, "start_time": "12:00:00", "end_time": "12:15:00",
             "capacity": 10, "orders_count": 10, "slots_left": 0, "available": false},
            ...
        ]
    }

A date without service answers 200 with an empty ``slots`` list.
"""

import logging
from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas.slots import DayAvailabilityOut
from ..services import get_slot_availability


logger = logging.getLogger(__name__)

# Router definition
public_slots_router = APIRouter(prefix="/slots", tags=["Slots"])


@public_slots_router.get("", response_model=DayAvailabilityOut)
def list_slots(
    day: date = Query(..., alias="date", description="Service date (YYYY-MM-DD)"),
    db: Session = Depends(get_db),
) -> DayAvailabilityOut:
    """Return slot availability for one day."""
    return get_slot_availability(db, day)
