"""
Schedule Schemas for Sandwich Slots
===================================

This module defines Pydantic models for the operator's weekly service
planning: the template that is applied to the coming week, the report of
what applying it did, and the read-only week configuration view.

Endpoint Coverage:
------------------
- PUT /admin/schedule/weekly: Apply a WeeklyTemplate, returns a ScheduleReport
- GET /admin/schedule/week: Read a WeekConfiguration

Template Shape:
---------------
A template carries the global constraints shared by every day it creates
(capacity per slot, deadline, location) and one entry per weekday:

    {
        "capacity": 10,
        "deadline_minutes": 30,
        "location": "Piazza Centrale - Engineering Hub",
        "days": {
            "monday": {"enabled": true, "start_time": "12:00", "end_time": "14:00"},
            "tuesday": {"enabled": false}
        }
    }

Weekdays missing from ``days`` are treated as disabled.

Validation Split:
-----------------
These models only parse shapes and types. Business rules (capacity >= 1,
opening hours aligned to the slot duration, ...) are checked by the schedule
service, which reports them as VALIDATION_FAILED like every other domain
error.
"""

from datetime import date, datetime, time
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class Weekday(str, Enum):
    """Weekday names accepted as template keys, in ``date.weekday()`` order."""
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @property
    def index(self) -> int:
        return list(Weekday).index(self)

    @classmethod
    def from_date(cls, value: date) -> "Weekday":
        return list(cls)[value.weekday()]


class DayTemplate(BaseModel):
    """Opening hours of one weekday. Times are required only when enabled."""
    enabled: bool = False
    start_time: Optional[time] = None
    end_time: Optional[time] = None


class WeeklyTemplate(BaseModel):
    """Request body for PUT /admin/schedule/weekly."""
    capacity: int
    deadline_minutes: int
    location: str
    days: Dict[Weekday, DayTemplate] = Field(default_factory=dict)


class DayOperationOut(BaseModel):
    """
    What applying the template did to one date.

    Attributes:
        weekday: Template key the operation came from
        date: Target date (always after the day the template was applied)
        action: created, skipped_existing, deleted or unchanged
        working_day_id: Id of the created or existing working day, if any
        slots_created: Slots generated for a newly created day
        orders_deleted: Orders removed together with a disabled day
    """
    weekday: Weekday
    date: date
    action: str
    working_day_id: Optional[int] = None
    slots_created: int = 0
    orders_deleted: int = 0


class ScheduleReport(BaseModel):
    """Response model for PUT /admin/schedule/weekly."""
    applied_on: date
    days: List[DayOperationOut]
    slots_created: int
    orders_deleted: int


class GlobalConstraintsOut(BaseModel):
    capacity: int
    deadline_minutes: int
    location: str
    slot_duration_minutes: int


class DayConfigurationOut(BaseModel):
    """
    One day of the week configuration view.

    ``is_configured`` is False when no working day exists for the date; the
    hours then show the configured defaults.
    """
    date: date
    weekday: Weekday
    is_configured: bool
    is_active: bool
    start_time: time
    end_time: time
    is_editable: bool
    orders_count: int


class WeekConfiguration(BaseModel):
    """Response model for GET /admin/schedule/week."""
    week_start: date
    week_end: date
    constraints: GlobalConstraintsOut
    days: List[DayConfigurationOut]


class DeadlineSweepOut(BaseModel):
    """Response model for POST /admin/schedule/deadline-sweep."""
    ran_at: datetime
    confirmed: int
