"""FastAPI application factory for the analytics compute service."""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from booking_analytics.api.models import HealthResponse
from booking_analytics.api.routes import router
from booking_analytics.core.exceptions import ValidationError

logger = logging.getLogger(__name__)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    logger.warning(f"Rejected {request.url.path}: {exc.message}")
    return JSONResponse(status_code=422, content={"detail": exc.message, **exc.details})


def create_app() -> FastAPI:
    app = FastAPI(
        title="Booking Analytics API",
        description="Commission and booking analytics over a posted snapshot",
        version="0.1.0",
    )

    app.add_exception_handler(ValidationError, validation_error_handler)
    app.include_router(router)

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    return app
