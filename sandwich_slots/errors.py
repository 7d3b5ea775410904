"""
Domain Errors for Sandwich Slots
================================

Expected, caller-recoverable failures of the scheduling core. Each error
carries a stable machine-readable ``kind`` and a human-readable ``message``;
nothing here knows about HTTP. Transport layers (the FastAPI exception handler
in app_factory.py, the CLI scripts) map kinds to their own surface.

Unexpected infrastructure failures (database unavailable, etc.) are NOT domain
errors: they propagate as ordinary exceptions and abort the enclosing
transaction.

Usage:
------
    try:
        order = create_order(db, user_id, slot_id, ingredient_ids)
    except DomainError as e:
        print(e.kind.value, e.message)
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    SLOT_FULL = "SLOT_FULL"
    INVALID_STATE_TRANSITION = "INVALID_STATE_TRANSITION"
    ORDER_NOT_MODIFIABLE = "ORDER_NOT_MODIFIABLE"
    UNAUTHORIZED_ORDER_ACCESS = "UNAUTHORIZED_ORDER_ACCESS"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    NOT_FOUND = "NOT_FOUND"


class DomainError(Exception):
    """Base class for expected business-rule failures."""

    kind: ErrorKind = ErrorKind.VALIDATION_FAILED
    default_message: str = "The request could not be processed."

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.kind.value,
            "message": self.message,
            "details": self.details,
        }


class SlotFull(DomainError):
    """The time slot already holds as many non-rejected orders as its capacity."""

    kind = ErrorKind.SLOT_FULL
    default_message = "The selected time slot is full. Please choose another time."


class InvalidStateTransition(DomainError):
    """The requested status change is not allowed by the order state machine."""

    kind = ErrorKind.INVALID_STATE_TRANSITION

    def __init__(self, from_status: str, to_status: str):
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Status transition from '{from_status}' to '{to_status}' is not allowed. "
            "Orders can never go back to 'pending' and 'rejected' is final.",
            details={"from": from_status, "to": to_status},
        )


class OrderNotModifiable(DomainError):
    """The order is no longer pending or its modification deadline has passed."""

    kind = ErrorKind.ORDER_NOT_MODIFIABLE
    default_message = "This order can no longer be modified or cancelled."


class UnauthorizedOrderAccess(DomainError):
    kind = ErrorKind.UNAUTHORIZED_ORDER_ACCESS
    default_message = "You are not allowed to access this order."


class ValidationFailed(DomainError):
    kind = ErrorKind.VALIDATION_FAILED
    default_message = "The request is invalid."


class NotFound(DomainError):
    kind = ErrorKind.NOT_FOUND
    default_message = "The requested resource does not exist."
