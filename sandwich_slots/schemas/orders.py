"""
Order Schemas for Sandwich Slots
================================

This module defines Pydantic models for customer orders and the operator's
status changes.

Endpoint Coverage:
------------------
- POST /orders: Create an order in a time slot (OrderCreate -> OrderOut)
- GET /orders/{id}: Owner view of an order (OrderOut)
- PUT /orders/{id}: Replace the ingredients of a pending order (OrderUpdate)
- PATCH /admin/orders/{id}/status: Operator status change (OrderStatusUpdate)

Order Lifecycle:
----------------
1. **pending**: Admitted, still editable by its owner until the deadline
2. **confirmed**: Locked for the kitchen (by the operator or the deadline sweep)
3. **ready**: Prepared, waiting at the counter
4. **picked_up**: Collected
5. **rejected**: Cancelled by the operator, frees its place in the slot

Ingredient Snapshots:
---------------------
An order's ingredients are copies (name + category) taken when the order was
created or last updated. They are returned as stored, in selection order,
regardless of later catalog changes.

Usage:
------
    body = OrderCreate(time_slot_id=12, ingredient_ids=[1, 4, 9])
"""

from datetime import date, datetime, time
from typing import List

from pydantic import BaseModel, ConfigDict


class OrderCreate(BaseModel):
    """
    Request body for creating an order.

    Attributes:
        time_slot_id: Slot to book a place in
        ingredient_ids: Catalog ingredient ids, exactly one of them a bread
    """
    time_slot_id: int
    ingredient_ids: List[int]


class OrderUpdate(BaseModel):
    """Request body for replacing the ingredients of a pending order."""
    ingredient_ids: List[int]


class OrderStatusUpdate(BaseModel):
    """Request body for PATCH /admin/orders/{id}/status."""
    status: str


class OrderIngredientOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    position: int
    name: str
    category: str


class OrderOut(BaseModel):
    """
    Response model for a single order.

    Attributes:
        id: Database primary key
        user_id: Owner of the order
        time_slot_id: Booked slot
        working_day_id: Working day of the slot
        day: Calendar date of the slot
        slot_start / slot_end: Booked interval
        daily_number: Display number, unique within the working day
        status: pending, confirmed, ready, picked_up or rejected
        ingredients: Snapshots in selection order
        deadline: Moment after which the owner can no longer change the order
        is_modifiable: Whether the owner may still update or delete it
        created_at / updated_at: Timestamps
    """
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    time_slot_id: int
    working_day_id: int
    day: date
    slot_start: time
    slot_end: time
    daily_number: int
    status: str
    ingredients: List[OrderIngredientOut]
    deadline: datetime
    is_modifiable: bool
    created_at: datetime
    updated_at: datetime


class OrderListOut(BaseModel):
    """Response model for GET /orders and GET /orders/recent."""
    orders: List[OrderOut]
