"""
Admin Orders Routes for Sandwich Slots
======================================

Operator endpoint for moving orders through the production pipeline.

Endpoints:
----------
- PATCH /admin/orders/{id}/status: Change an order's status

Authentication:
---------------
All endpoints require admin authentication via HTTP Basic Auth.

Order States:
-------------
- pending: Admitted, still editable by the customer
- confirmed: Locked, the kitchen will prepare it
- ready: Prepared, waiting at the counter
- picked_up: Collected
- rejected: Cancelled by the operator (terminal)

Transitions:
------------
Any move is allowed except moving *to* pending or *out of* rejected. Skips
(pending -> picked_up) and rollbacks (picked_up -> confirmed) are accepted so
the operator can fix mistakes at the counter. A forbidden move answers 422
INVALID_STATE_TRANSITION with ``details.from`` and ``details.to``.

Usage:
------
    PATCH /admin/orders/57/status
    {"status": "ready"}
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import verify_admin_credentials
from ..clock import Clock, get_clock
from ..db import get_db
from ..schemas.orders import OrderOut, OrderStatusUpdate
from ..services import change_order_status
from .orders import order_to_out


logger = logging.getLogger(__name__)

# Router definition
admin_orders_router = APIRouter(prefix="/admin/orders", tags=["Admin - Orders"])


# =============================================================================
# Order Endpoints
# =============================================================================

@admin_orders_router.patch("/{order_id}/status", response_model=OrderOut)
def update_order_status(
    order_id: int,
    body: OrderStatusUpdate,
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
    admin: str = Depends(verify_admin_credentials),
) -> OrderOut:
    """Move an order to a new status. Requires admin authentication."""
    order = change_order_status(db, order_id, body.status)
    logger.info("Admin %s set order %d to %s", admin, order_id, order.status)
    return order_to_out(order, clock())
