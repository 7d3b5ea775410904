from enum import Enum

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Time,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


class OrderStatus(str, Enum):
    PENDING = "pending"        # initial, user may still modify
    CONFIRMED = "confirmed"
    READY = "ready"
    PICKED_UP = "picked_up"
    REJECTED = "rejected"      # terminal


ORDER_STATUSES = tuple(s.value for s in OrderStatus)
INGREDIENT_CATEGORIES = ("bread", "meat", "cheese", "vegetable", "sauce", "other")


# --- Identity (owned by the auth collaborator, read-only here) ---

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False)
    is_admin = Column(Boolean, nullable=False, default=False)
    enabled = Column(Boolean, nullable=False, default=True)

    orders = relationship("Order", back_populates="user")


# --- Ingredient catalog (owned by the catalog collaborator, read-only here) ---

class Ingredient(Base):
    __tablename__ = "ingredients"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False)
    code = Column(String, nullable=True)          # short label shown on the prep board, e.g. "CIA"
    category = Column(String, nullable=False, index=True)   # see INGREDIENT_CATEGORIES
    is_available = Column(Boolean, nullable=False, default=True)  # False = out of stock


# --- Scheduling ---

class WorkingDay(Base):
    """A calendar day on which the truck serves. Never edited in place."""
    __tablename__ = "working_days"

    id = Column(Integer, primary_key=True, index=True)
    day = Column(Date, unique=True, nullable=False)
    location = Column(String, nullable=False)
    capacity = Column(Integer, nullable=False)          # max non-rejected orders per slot
    deadline_minutes = Column(Integer, nullable=False)  # lock orders this long before slot start
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    # highest daily_number ever issued for the day, kept across order deletions
    last_daily_number = Column(Integer, nullable=False, default=0, server_default="0")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    time_slots = relationship(
        "TimeSlot",
        back_populates="working_day",
        cascade="all, delete-orphan",
        order_by="TimeSlot.start_time",
    )
    # Deletion reaches orders through time_slots
    orders = relationship("Order", viewonly=True)

    __table_args__ = (
        CheckConstraint("capacity >= 1", name="ck_working_days_capacity_positive"),
        CheckConstraint("deadline_minutes >= 0", name="ck_working_days_deadline_non_negative"),
        CheckConstraint("start_time < end_time", name="ck_working_days_hours_ordered"),
    )


class TimeSlot(Base):
    """A fixed-duration bookable interval. Created only by the slot generator."""
    __tablename__ = "time_slots"

    id = Column(Integer, primary_key=True, index=True)
    working_day_id = Column(
        Integer, ForeignKey("working_days.id", ondelete="CASCADE"), nullable=False, index=True
    )
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    working_day = relationship("WorkingDay", back_populates="time_slots")
    orders = relationship("Order", back_populates="time_slot", cascade="all, delete-orphan")

    __table_args__ = (
        UniqueConstraint("working_day_id", "start_time", "end_time", name="uix_time_slot_interval"),
    )


# --- Orders ---

class Order(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    time_slot_id = Column(
        Integer, ForeignKey("time_slots.id", ondelete="CASCADE"), nullable=False, index=True
    )
    # Denormalized from the slot so the daily number can be scoped and locked per day
    working_day_id = Column(
        Integer, ForeignKey("working_days.id", ondelete="CASCADE"), nullable=False, index=True
    )
    daily_number = Column(Integer, nullable=False)
    status = Column(String, nullable=False, default="pending", index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    user = relationship("User", back_populates="orders")
    time_slot = relationship("TimeSlot", back_populates="orders")
    working_day = relationship("WorkingDay", viewonly=True)
    ingredients = relationship(
        "OrderIngredient",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderIngredient.position",
    )

    __table_args__ = (
        UniqueConstraint("working_day_id", "daily_number", name="uix_order_daily_number"),
        CheckConstraint("daily_number >= 1", name="ck_orders_daily_number_positive"),
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'ready', 'picked_up', 'rejected')",
            name="ck_orders_status",
        ),
        # Capacity counts filter by slot and status
        Index("ix_orders_time_slot_status", "time_slot_id", "status"),
    )


class OrderIngredient(Base):
    """Snapshot of an ingredient at order time. Independent of the live catalog."""
    __tablename__ = "order_ingredients"

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False)
    name = Column(String, nullable=False)
    category = Column(String, nullable=False)

    order = relationship("Order", back_populates="ingredients")

    __table_args__ = (
        UniqueConstraint("order_id", "name", name="uix_order_ingredient_name"),
    )
