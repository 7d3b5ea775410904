"""
Admin Schedule Routes for Sandwich Slots
========================================

Operator endpoints for planning service days and for running the deadline
sweep by hand.

Endpoints:
----------
- PUT /admin/schedule/weekly: Apply a weekly template to the coming week
- GET /admin/schedule/week?week_start=YYYY-MM-DD: Read a week's configuration
- POST /admin/schedule/deadline-sweep: Confirm overdue pending orders now

Authentication:
---------------
All endpoints require admin authentication via HTTP Basic Auth.

Applying a Template:
--------------------
The template only ever affects dates after today. Existing days are kept as
they are; disabling a configured day deletes it together with its orders,
which the report lists under ``orders_deleted``:

    PUT /admin/schedule/weekly
    {
        "capacity": 10,
        "deadline_minutes": 30,
        "location": "Piazza Centrale - Engineering Hub",
        "days": {
            "monday": {"enabled": true, "start_time": "12:00", "end_time": "14:00"},
            "friday": {"enabled": false}
        }
    }

    -> {"applied_on": "2026-03-04", "slots_created": 8, "orders_deleted": 0,
        "days": [{"weekday": "thursday", "date": "2026-03-05", "action": "unchanged", ...}, ...]}
"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..auth import verify_admin_credentials
from ..clock import Clock, get_clock
from ..db import get_db, session_scope
from ..schemas.schedule import DeadlineSweepOut, ScheduleReport, WeekConfiguration, WeeklyTemplate
from ..services import apply_weekly_template, get_week_configuration, run_deadline_sweep


logger = logging.getLogger(__name__)

# Router definition
admin_schedule_router = APIRouter(prefix="/admin/schedule", tags=["Admin - Schedule"])


# =============================================================================
# Service Planning Endpoints
# =============================================================================

@admin_schedule_router.put("/weekly", response_model=ScheduleReport)
def apply_weekly_schedule(
    template: WeeklyTemplate,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    admin: str = Depends(verify_admin_credentials),
) -> ScheduleReport:
    """Apply the weekly template. Requires admin authentication."""
    report = apply_weekly_template(db, template, clock().date())
    logger.info(
        "Admin %s applied weekly template: %d slots created, %d orders deleted",
        admin, report.slots_created, report.orders_deleted,
    )
    return report


@admin_schedule_router.get("/week", response_model=WeekConfiguration)
def read_week_configuration(
    week_start: Optional[date] = Query(None, description="Any date of the week, defaults to today"),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    _admin: str = Depends(verify_admin_credentials),
) -> WeekConfiguration:
    today = clock().date()
    return get_week_configuration(db, week_start or today, today)


# =============================================================================
# Deadline Sweep Endpoint
# =============================================================================

@admin_schedule_router.post("/deadline-sweep", response_model=DeadlineSweepOut)
def trigger_deadline_sweep(
    clock: Clock = Depends(get_clock),
    _admin: str = Depends(verify_admin_credentials),
) -> DeadlineSweepOut:
    """Run one deadline sweep immediately, as the background task would."""
    now = clock()
    confirmed = run_deadline_sweep(session_scope, now=now)
    return DeadlineSweepOut(ran_at=now, confirmed=confirmed)
