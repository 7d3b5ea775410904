"""
Admin Work Service Routes for Sandwich Slots
============================================

The operator's board for a service day.

Endpoints:
----------
- GET /admin/work-service?date=YYYY-MM-DD: Status counts per slot, the slot
  running right now (today only) and the day's orders by daily number.
  ``date`` defaults to today.

Authentication:
---------------
All endpoints require admin authentication via HTTP Basic Auth.
"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..auth import verify_admin_credentials
from ..clock import Clock, get_clock
from ..db import get_db
from ..schemas.slots import WorkServiceOut
from ..services import get_work_service_overview


logger = logging.getLogger(__name__)

# Router definition
admin_work_service_router = APIRouter(prefix="/admin/work-service", tags=["Admin - Work Service"])


@admin_work_service_router.get("", response_model=WorkServiceOut)
def get_work_service(
    day: Optional[date] = Query(None, alias="date", description="Service date, defaults to today"),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    _admin: str = Depends(verify_admin_credentials),
) -> WorkServiceOut:
    now = clock()
    return get_work_service_overview(db, day or now.date(), now)
