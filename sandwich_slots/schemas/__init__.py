"""
Schemas Package for Sandwich Slots
==================================

This package contains all Pydantic models (schemas) used for API request
validation and response serialization. Keeping them apart from the routes
lets services and routes share them without circular imports.

Schema Organization:
--------------------
- **orders.py**: Order creation, update, status change and order views
- **slots.py**: Slot availability and the operator work-service board
- **schedule.py**: Weekly template, schedule report and week configuration

Naming Conventions:
-------------------
- *Out: Response models (e.g., OrderOut) - what API returns
- *Create: Request models for POST (e.g., OrderCreate)
- *Update: Request models for PUT/PATCH (e.g., OrderUpdate)

Pydantic Configuration:
-----------------------
Models read straight from ORM rows use
`model_config = ConfigDict(from_attributes=True)`:

    OrderIngredientOut.model_validate(order.ingredients[0])

Usage:
------
    from sandwich_slots.schemas import OrderCreate, OrderOut
"""

# Order schemas
from .orders import (
    OrderCreate,
    OrderUpdate,
    OrderStatusUpdate,
    OrderIngredientOut,
    OrderOut,
    OrderListOut,
)

# Slot schemas
from .slots import (
    SlotAvailabilityOut,
    DayAvailabilityOut,
    SlotStatusCountsOut,
    WorkServiceOrderOut,
    WorkServiceOut,
)

# Schedule schemas
from .schedule import (
    Weekday,
    DayTemplate,
    WeeklyTemplate,
    DayOperationOut,
    ScheduleReport,
    GlobalConstraintsOut,
    DayConfigurationOut,
    WeekConfiguration,
    DeadlineSweepOut,
)

__all__ = [
    # Orders
    "OrderCreate",
    "OrderUpdate",
    "OrderStatusUpdate",
    "OrderIngredientOut",
    "OrderOut",
    "OrderListOut",
    # Slots
    "SlotAvailabilityOut",
    "DayAvailabilityOut",
    "SlotStatusCountsOut",
    "WorkServiceOrderOut",
    "WorkServiceOut",
    # Schedule
    "Weekday",
    "DayTemplate",
    "WeeklyTemplate",
    "DayOperationOut",
    "ScheduleReport",
    "GlobalConstraintsOut",
    "DayConfigurationOut",
    "WeekConfiguration",
    "DeadlineSweepOut",
]
