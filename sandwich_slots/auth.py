"""
Authentication Module for Sandwich Slots
========================================

This module resolves who is calling. Identity itself is owned by an outside
collaborator (the company directory that fills the ``users`` table); the
scheduling core only needs two answers: which user is placing or changing an
order, and whether the caller is the operator.

Authentication Methods:
-----------------------
1. **Customer identity (X-User-ID)**: The fronting gateway authenticates the
   customer and forwards their user id in the ``X-User-ID`` header. The id
   must belong to an existing, enabled user.

2. **HTTP Basic Auth (Operator)**: Used for all /admin/* endpoints.
   Credentials are configured via environment variables (ADMIN_USERNAME,
   ADMIN_PASSWORD). Uses constant-time comparison to prevent timing attacks.

Security Features:
------------------
- **Timing Attack Prevention**: Uses `secrets.compare_digest()` for credential
  comparison, which takes constant time regardless of how many characters match.

- **Graceful Degradation**: If ADMIN_PASSWORD is not configured, admin endpoints
  return 503 Service Unavailable rather than allowing unauthenticated access.

- **Disabled Accounts**: A disabled user is rejected exactly like an unknown
  one, so the response does not reveal which accounts exist.

Configuration:
--------------
Environment variables (see config.py):
- ADMIN_USERNAME: Username for admin access (default: "admin")
- ADMIN_PASSWORD: Password for admin access (required, no default)

Usage:
------
    from sandwich_slots.auth import get_current_user, verify_admin_credentials

    @router.post("/orders")
    def create(body: OrderCreate, user: User = Depends(get_current_user), ...):
        ...

    @router.patch("/admin/orders/{order_id}/status")
    def change(order_id: int, admin: str = Depends(verify_admin_credentials), ...):
        ...
"""

import secrets
from typing import Optional

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from sqlalchemy.orm import Session

from . import config
from .db import get_db
from .models import User


# =============================================================================
# HTTP Basic Auth Setup
# =============================================================================
# The realm is shared across all admin routes so browsers cache credentials.

security = HTTPBasic(realm="Sandwich Slots Admin")


# =============================================================================
# Customer Identity Dependency
# =============================================================================

def get_current_user(
    x_user_id: Optional[int] = Header(None, alias="X-User-ID"),
    db: Session = Depends(get_db),
) -> User:
    """
    Resolve the X-User-ID header to an enabled User.

    Raises:
        HTTPException (401): header missing, unknown user or disabled user
    """
    if x_user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing X-User-ID header",
        )

    user = db.get(User, x_user_id)
    if user is None or not user.enabled:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unknown or disabled user",
        )
    return user


# =============================================================================
# Admin Authentication Dependency
# =============================================================================

def verify_admin_credentials(
    credentials: HTTPBasicCredentials = Depends(security),
) -> str:
    """
    Verify the operator's HTTP Basic credentials.

    Returns:
        str: The authenticated username

    Raises:
        HTTPException (503): ADMIN_PASSWORD is not set, so nobody is let in
        HTTPException (401): wrong username or password (the message does
                            not say which); includes WWW-Authenticate so
                            browsers prompt for credentials
    """
    # Fail closed: if password not configured, deny all access
    if not config.ADMIN_PASSWORD:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Admin authentication not configured. Set ADMIN_PASSWORD environment variable.",
        )

    # Constant-time comparison
    username_correct = secrets.compare_digest(
        credentials.username.encode("utf-8"),
        config.ADMIN_USERNAME.encode("utf-8"),
    )
    password_correct = secrets.compare_digest(
        credentials.password.encode("utf-8"),
        config.ADMIN_PASSWORD.encode("utf-8"),
    )

    if not (username_correct and password_correct):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid admin credentials",
            headers={"WWW-Authenticate": "Basic"},
        )

    return credentials.username
