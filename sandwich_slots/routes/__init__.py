"""
Routes Package for Sandwich Slots
=================================

This package contains all API route definitions organized by area. Each module
defines a FastAPI APIRouter with related endpoints grouped together. Routes
only translate HTTP to service calls; every business rule lives in
``sandwich_slots.services``.

Architecture Overview:
----------------------
**Customer-Facing Routes:**
- public.py: Slot availability (no auth required)
- orders.py: Create, view, update and delete own orders (X-User-ID)

**Admin Routes (require HTTP Basic authentication):**
- admin_orders.py: Order status changes
- admin_work_service.py: Operator board for a service day
- admin_schedule.py: Weekly template, week configuration, deadline sweep

Router Registration:
--------------------
All routers are registered in app_factory.create_app under two prefixes:
1. /api/v1/* - Versioned API (recommended)
2. /* - Root paths

Error Handling:
---------------
Routes let DomainError subclasses propagate; the exception handler installed
by app_factory turns them into ``{"code", "message", "details"}`` responses:
- 403: UNAUTHORIZED_ORDER_ACCESS
- 404: NOT_FOUND
- 409: SLOT_FULL, ORDER_NOT_MODIFIABLE
- 422: VALIDATION_FAILED, INVALID_STATE_TRANSITION
- 429: Too many requests (rate limited)
"""

from .public import public_slots_router
from .orders import orders_router, limiter
from .admin_orders import admin_orders_router
from .admin_work_service import admin_work_service_router
from .admin_schedule import admin_schedule_router

__all__ = [
    "public_slots_router",
    "orders_router",
    "limiter",
    "admin_orders_router",
    "admin_work_service_router",
    "admin_schedule_router",
]
