"""
Application factory for the Sandwich Slots API.

create_app() builds a fully wired FastAPI application: routers under /api/v1
and at the root, CORS, rate limiting, the domain error handlers and the
lifespan that creates tables and runs the deadline sweep in the background.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from . import config, db
from .errors import DomainError, ErrorKind
from .routes import (
    admin_orders_router,
    admin_schedule_router,
    admin_work_service_router,
    limiter,
    orders_router,
    public_slots_router,
)
from .services.deadline import DeadlineConfirmer

logger = logging.getLogger(__name__)


# HTTP status for each domain error kind
ERROR_STATUS_CODES = {
    ErrorKind.SLOT_FULL: 409,
    ErrorKind.ORDER_NOT_MODIFIABLE: 409,
    ErrorKind.INVALID_STATE_TRANSITION: 422,
    ErrorKind.VALIDATION_FAILED: 422,
    ErrorKind.UNAUTHORIZED_ORDER_ACCESS: 403,
    ErrorKind.NOT_FOUND: 404,
}


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = ERROR_STATUS_CODES.get(exc.kind, 400)
    logger.info(
        "%s %s -> %d %s: %s",
        request.method, request.url.path, status_code, exc.kind.value, exc.message,
    )
    return JSONResponse(status_code=status_code, content=exc.to_dict())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
            "details": {},
        },
    )


def create_app(sweep_enabled: Optional[bool] = None) -> FastAPI:
    """
    Create a FastAPI application.

    Args:
        sweep_enabled: Run the deadline sweep as a background task. Defaults
                       to DEADLINE_SWEEP_ENABLED.

    Returns:
        Configured FastAPI application
    """
    if sweep_enabled is None:
        sweep_enabled = config.DEADLINE_SWEEP_ENABLED

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db.init_db()
        confirmer = None
        if sweep_enabled:
            confirmer = DeadlineConfirmer(
                db.session_scope,
                interval_seconds=config.DEADLINE_SWEEP_INTERVAL_SECONDS,
            )
            await confirmer.start()
        app.state.deadline_confirmer = confirmer
        try:
            yield
        finally:
            if confirmer is not None:
                await confirmer.stop()

    app = FastAPI(
        title="Sandwich Slots API",
        description="Time slot booking and order lifecycle for a sandwich counter",
        version="1.0.0",
        lifespan=lifespan,
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Configure rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # Domain errors carry their own code; anything else is a 500
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    routers = [
        public_slots_router,
        orders_router,
        admin_orders_router,
        admin_work_service_router,
        admin_schedule_router,
    ]

    # Include routers with API version prefix
    api_v1 = APIRouter(prefix="/api/v1")
    for router in routers:
        api_v1.include_router(router)
    app.include_router(api_v1)

    # Also mount at root
    for router in routers:
        app.include_router(router)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        confirmer = getattr(app.state, "deadline_confirmer", None)
        return {
            "status": "healthy",
            "deadline_sweep": bool(confirmer and confirmer.is_running),
        }

    logger.info("Application created (deadline sweep %s)", "enabled" if sweep_enabled else "disabled")

    return app
