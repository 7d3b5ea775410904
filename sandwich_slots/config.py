"""
Configuration Module for Sandwich Slots
=======================================

This module centralizes all configuration settings, environment variables, and
constants used throughout the Sandwich Slots application. Every value is read
once at import time from the environment (a ``.env`` file is loaded by the
application entry points) and exposed as a typed module-level constant.

Configuration Categories:
-------------------------
- **Database**: Connection URL for the shared WorkingDay/TimeSlot/Order store.

- **Time & Slots**: Deployment timezone and the global slot duration. The slot
  duration is a single constant per deployment; every working day is cut into
  slots of exactly this length.

- **Service Planning Defaults**: Values offered when a week has no persisted
  working days yet (capacity, deadline, location, opening hours).

- **Admission**: Retry budget for the daily number safety net.

- **Deadline Sweep**: Whether the background confirmation loop runs inside the
  web process and how often.

- **Rate Limiting / CORS / Admin**: HTTP surface settings.

Environment Variables:
----------------------
- DATABASE_URL: SQLAlchemy URL (default: "sqlite:///./sandwich_slots.db")
- APP_TIMEZONE: IANA timezone of the food truck (default: "Europe/Rome")
- SLOT_DURATION_MINUTES: Length of every time slot (default: 15)
- DEFAULT_CAPACITY: Orders per slot offered by default (default: 10)
- DEFAULT_DEADLINE_MINUTES: Minutes before slot start when orders lock (default: 30)
- DEFAULT_LOCATION: Service location label
- DEFAULT_DAY_START_TIME / DEFAULT_DAY_END_TIME: "HH:MM" (default: 12:00 / 14:00)
- ADMISSION_MAX_RETRIES: Retries after a daily number conflict (default: 3)
- DEADLINE_SWEEP_ENABLED: Run the sweep in the web process (default: "true")
- DEADLINE_SWEEP_INTERVAL_SECONDS: Sweep period (default: 60)
- RATE_LIMIT_ORDERS: Order creation rate limit (default: "20 per minute")
- RATE_LIMIT_ENABLED: Enable/disable rate limiting (default: "true")
- CORS_ORIGINS: Comma-separated allowed origins (default: "*")
- ADMIN_USERNAME / ADMIN_PASSWORD: Operator credentials (HTTP Basic)

Usage:
------
    from sandwich_slots import config

    duration = config.SLOT_DURATION_MINUTES
"""

import os
from typing import List


# =============================================================================
# Database Configuration
# =============================================================================

DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./sandwich_slots.db")


# =============================================================================
# Time & Slot Configuration
# =============================================================================
# All wall-clock comparisons (deadlines, "today", the current slot) happen in
# this timezone. Dates and times are persisted as naive local values.

APP_TIMEZONE: str = os.getenv("APP_TIMEZONE", "Europe/Rome")

# Fixed for the lifetime of a deployment. Changing it does not touch slots
# that were already generated.
SLOT_DURATION_MINUTES: int = int(os.getenv("SLOT_DURATION_MINUTES", "15"))


# =============================================================================
# Service Planning Defaults
# =============================================================================
# Used by the week configuration view when no working day exists yet.

DEFAULT_CAPACITY: int = int(os.getenv("DEFAULT_CAPACITY", "10"))
DEFAULT_DEADLINE_MINUTES: int = int(os.getenv("DEFAULT_DEADLINE_MINUTES", "30"))
DEFAULT_LOCATION: str = os.getenv("DEFAULT_LOCATION", "Piazza Centrale - Engineering Hub")
DEFAULT_DAY_START_TIME: str = os.getenv("DEFAULT_DAY_START_TIME", "12:00")
DEFAULT_DAY_END_TIME: str = os.getenv("DEFAULT_DAY_END_TIME", "14:00")


# =============================================================================
# Admission Configuration
# =============================================================================
# The unique (working_day_id, daily_number) constraint is the last line of
# defense. A conflict rolls back and the admission is attempted again.

ADMISSION_MAX_RETRIES: int = int(os.getenv("ADMISSION_MAX_RETRIES", "3"))


# =============================================================================
# Deadline Sweep Configuration
# =============================================================================

DEADLINE_SWEEP_ENABLED: bool = os.getenv("DEADLINE_SWEEP_ENABLED", "true").lower() == "true"
DEADLINE_SWEEP_INTERVAL_SECONDS: int = int(os.getenv("DEADLINE_SWEEP_INTERVAL_SECONDS", "60"))


# =============================================================================
# Rate Limiting Configuration
# =============================================================================
# Uses slowapi with in-memory storage (use Redis for multi-worker prod).

RATE_LIMIT_ORDERS: str = os.getenv("RATE_LIMIT_ORDERS", "20 per minute")
RATE_LIMIT_ENABLED: bool = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"


def get_rate_limit_orders() -> str:
    """
    Return the current order creation rate limit.

    This function allows dynamic override in tests without modifying
    the module-level constant.
    """
    return RATE_LIMIT_ORDERS


# =============================================================================
# CORS Configuration
# =============================================================================

_cors_origins_env = os.getenv("CORS_ORIGINS", "")
CORS_ORIGINS: List[str] = [
    origin.strip()
    for origin in _cors_origins_env.split(",")
    if origin.strip()
] or ["*"]


# =============================================================================
# Admin Authentication Configuration
# =============================================================================
# Credentials for HTTP Basic Auth on operator endpoints.
# ADMIN_PASSWORD must be set in production for admin access to work.

ADMIN_USERNAME: str = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_PASSWORD: str = os.getenv("ADMIN_PASSWORD", "")
