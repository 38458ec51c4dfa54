"""FastAPI application factory"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from shortlet_settlement.api.dependencies import get_request_id
from shortlet_settlement.api.middleware import RequestIDMiddleware, MetricsMiddleware
from shortlet_settlement.api.v1 import disputes, payments, quotes, reports
from shortlet_settlement.domain.exceptions import (
    ConflictError,
    DomainException,
    InvalidArgumentError,
    NotFoundError,
    PreconditionFailedError,
)
from shortlet_settlement.infrastructure.observability.logging import setup_logging
from shortlet_settlement.config import settings

# Setup structured logging
setup_logging(settings.log_level)

# Starlette resolves handlers along the exception MRO, so subclasses such as
# CurrencyMismatchError map through InvalidArgumentError
ERROR_RESPONSES = [
    (NotFoundError, 404, "NOT_FOUND"),
    (ConflictError, 409, "CONFLICT"),
    (PreconditionFailedError, 400, "PRECONDITION_FAILED"),
    (InvalidArgumentError, 400, "INVALID_ARGUMENT"),
]


def _error_handler(status_code: int, code: str):
    async def handler(request: Request, exc: DomainException) -> JSONResponse:
        logging.warning(
            f"{code}: {exc}",
            extra={"request_id": get_request_id(request), "path": request.url.path},
        )
        return JSONResponse(status_code=status_code, content={"detail": str(exc), "code": code})

    return handler


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Short-let Settlement Service",
        description="Escrow commission, dispute and payout engine for short-let bookings",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    for exc_class, status_code, code in ERROR_RESPONSES:
        app.add_exception_handler(exc_class, _error_handler(status_code, code))

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(quotes.router, prefix="/v1", tags=["quotes"])
    app.include_router(disputes.router, prefix="/v1", tags=["disputes"])
    app.include_router(payments.router, prefix="/v1", tags=["payments"])
    app.include_router(reports.router, prefix="/v1", tags=["reports"])

    return app


app = create_app()
