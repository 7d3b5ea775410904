"""
Order Routes for Sandwich Slots
===============================

Customer endpoints for placing, viewing, changing and cancelling orders.

Endpoints:
----------
- POST /orders: Book a place in a time slot (rate limited)
- GET /orders?date=YYYY-MM-DD: The caller's orders of that day not yet picked
  up, newest first (date defaults to today)
- GET /orders/recent: The caller's history (picked up or past days, rejected
  orders left out), newest first, at most 20 by default
- GET /orders/{id}: View one of the caller's orders
- PUT /orders/{id}: Replace the ingredients of a pending order
- DELETE /orders/{id}: Cancel a pending order

Authentication:
---------------
Every endpoint requires the X-User-ID header (see auth.get_current_user).
A customer only ever sees and changes their own orders.

Modification Window:
--------------------
An order can be updated or deleted while it is pending and its slot's
deadline has not passed. Outside that window the endpoints answer 409
ORDER_NOT_MODIFIABLE. The order view reports ``is_modifiable`` and the
``deadline`` so clients can hide the buttons in time.

Rate Limiting:
--------------
Order creation is limited per user (falling back to client IP) using
RATE_LIMIT_ORDERS, default "20 per minute".

Usage:
------
    POST /orders
    X-User-ID: 3
    {"time_slot_id": 12, "ingredient_ids": [1, 4, 9]}

    -> 201 {"id": 57, "daily_number": 8, "status": "pending", ...}
"""

import logging
from datetime import date, datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from slowapi import Limiter
from slowapi.util import get_remote_address
from sqlalchemy.orm import Session

from ..auth import get_current_user
from ..clock import Clock, get_clock
from ..config import RATE_LIMIT_ENABLED, get_rate_limit_orders
from ..db import get_db
from ..errors import NotFound, UnauthorizedOrderAccess
from ..models import Order, User
from ..schemas.orders import OrderCreate, OrderIngredientOut, OrderListOut, OrderOut, OrderUpdate
from ..services import create_order, delete_order, list_active_orders, list_recent_orders, update_order
from ..services.deadline import is_order_modifiable, order_deadline
from ..services.overview import RECENT_ORDERS_LIMIT


logger = logging.getLogger(__name__)

# Router definition
orders_router = APIRouter(prefix="/orders", tags=["Orders"])


# =============================================================================
# Rate Limiting Setup
# =============================================================================

def get_user_id_or_ip(request: Request) -> str:
    """Rate limit key: the X-User-ID header, or the client IP without one."""
    user_id = request.headers.get("X-User-ID")
    if user_id:
        return f"user:{user_id}"
    return get_remote_address(request)


# In-memory storage; use Redis storage_uri with several workers
limiter = Limiter(key_func=get_user_id_or_ip, enabled=RATE_LIMIT_ENABLED)


# =============================================================================
# Helper Functions
# =============================================================================

def order_to_out(order: Order, now: datetime) -> OrderOut:
    """Build the order view, including the modification window at ``now``."""
    slot = order.time_slot
    working_day = order.working_day
    return OrderOut(
        id=order.id,
        user_id=order.user_id,
        time_slot_id=order.time_slot_id,
        working_day_id=order.working_day_id,
        day=working_day.day,
        slot_start=slot.start_time,
        slot_end=slot.end_time,
        daily_number=order.daily_number,
        status=order.status,
        ingredients=[OrderIngredientOut.model_validate(i) for i in order.ingredients],
        deadline=order_deadline(slot, working_day),
        is_modifiable=is_order_modifiable(order, now),
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


# =============================================================================
# Order Endpoints
# =============================================================================

@orders_router.post("", response_model=OrderOut, status_code=status.HTTP_201_CREATED)
@limiter.limit(get_rate_limit_orders)
def create_order_endpoint(
    request: Request,
    body: OrderCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> OrderOut:
    """
    Book a place in a time slot.

    Answers 409 SLOT_FULL when the slot has no place left and 422
    VALIDATION_FAILED when the sandwich breaks a rule (exactly one bread, no
    duplicates, every ingredient available).
    """
    order = create_order(db, user.id, body.time_slot_id, body.ingredient_ids)
    return order_to_out(order, clock())


@orders_router.get("", response_model=OrderListOut)
def list_orders(
    day: Optional[date] = Query(None, alias="date", description="Service date, defaults to today"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> OrderListOut:
    """List the caller's active orders for one day."""
    now = clock()
    orders = list_active_orders(db, user.id, day or now.date())
    return OrderListOut(orders=[order_to_out(order, now) for order in orders])


@orders_router.get("/recent", response_model=OrderListOut)
def list_order_history(
    limit: int = Query(RECENT_ORDERS_LIMIT, ge=1, le=100),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> OrderListOut:
    now = clock()
    orders = list_recent_orders(db, user.id, now.date(), limit=limit)
    return OrderListOut(orders=[order_to_out(order, now) for order in orders])


@orders_router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> OrderOut:
    order = db.get(Order, order_id)
    if order is None:
        raise NotFound("Order not found.", details={"order_id": order_id})
    if order.user_id != user.id:
        raise UnauthorizedOrderAccess()
    return order_to_out(order, clock())


@orders_router.put("/{order_id}", response_model=OrderOut)
def update_order_endpoint(
    order_id: int,
    body: OrderUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> OrderOut:
    """Replace the ingredients of a pending order. The slot never changes."""
    now = clock()
    order = update_order(db, order_id, user.id, body.ingredient_ids, now=now)
    return order_to_out(order, now)


@orders_router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_order_endpoint(
    order_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    clock: Clock = Depends(get_clock),
) -> Response:
    """Cancel a pending order before its deadline."""
    delete_order(db, order_id, user.id, now=clock())
    return Response(status_code=status.HTTP_204_NO_CONTENT)
