"""
Main FastAPI application entry point.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from f1history.api.v1.endpoints import router as api_v1_router
from f1history.core.config import settings
from f1history.core.exceptions import (
    ApiNotReachableError,
    CacheError,
    F1HistoryError,
    JsonDeserializationError,
    ResourceNotFoundError,
    RoundNotFoundError,
)
from f1history.core.logging_config import setup_logging
from f1history.services.history_service import HistoryService

logger = structlog.get_logger()


def create_app(history_service: Optional[HistoryService] = None) -> FastAPI:
    """Create and configure the FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan manager for startup and shutdown events."""
        # Startup
        setup_logging()
        app.state.history_service = (
            history_service if history_service is not None else HistoryService()
        )
        logger.info("Starting F1 history API", version=app.version)
        yield
        # Shutdown
        await app.state.history_service.close()
        logger.info("Shutting down F1 history API")

    app = FastAPI(
        title="F1 History API",
        description="Historical Formula 1 seasons, weekends and standings",
        version="0.1.0",
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # Request logging middleware
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        request_id = request.headers.get("X-Request-ID", "unknown")
        logger.info(
            "Incoming request",
            request_id=request_id,
            method=request.method,
            url=str(request.url),
            client_ip=request.client.host if request.client else None,
        )

        response = await call_next(request)

        logger.info(
            "Request completed",
            request_id=request_id,
            status_code=response.status_code,
        )

        return response

    # Global exception handlers
    @app.exception_handler(ApiNotReachableError)
    async def api_not_reachable_handler(request: Request, exc: ApiNotReachableError):
        logger.error(
            "Ergast API not reachable",
            request_id=request.headers.get("X-Request-ID", "unknown"),
            error_message=exc.message,
            status_code=exc.status_code,
        )
        return JSONResponse(
            status_code=503,
            content={
                "detail": "Historical F1 data service temporarily unavailable",
                "code": "UPSTREAM_UNREACHABLE",
            },
        )

    @app.exception_handler(JsonDeserializationError)
    async def json_deserialization_handler(
        request: Request, exc: JsonDeserializationError
    ):
        logger.error(
            "Ergast payload could not be decoded",
            request_id=request.headers.get("X-Request-ID", "unknown"),
            error_message=exc.message,
        )
        return JSONResponse(
            status_code=502,
            content={
                "detail": "Historical F1 data service returned an unexpected payload",
                "code": "UPSTREAM_BAD_PAYLOAD",
            },
        )

    @app.exception_handler(ResourceNotFoundError)
    @app.exception_handler(RoundNotFoundError)
    async def not_found_handler(request: Request, exc: F1HistoryError):
        logger.info(
            "Requested data not known to Ergast",
            request_id=request.headers.get("X-Request-ID", "unknown"),
            error_message=exc.message,
        )
        return JSONResponse(
            status_code=404,
            content={"detail": exc.message, "code": "NOT_FOUND"},
        )

    @app.exception_handler(CacheError)
    async def cache_error_handler(request: Request, exc: CacheError):
        logger.error(
            "Response cache failure",
            request_id=request.headers.get("X-Request-ID", "unknown"),
            operation=exc.operation,
            error_message=exc.message,
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Response cache failure", "code": "CACHE_ERROR"},
        )

    # Include API routers
    app.include_router(api_v1_router, prefix="/api/v1")

    return app


# Create the application instance
app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "f1history.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
