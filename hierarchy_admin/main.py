"""Main application entry point for the Business Hierarchy Administration API."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from hierarchy_admin.config.settings import get_settings
from hierarchy_admin.database.database import DatabaseConfig, dispose_engine, get_engine
from hierarchy_admin.routes.api import api_error_handler, api_router
from hierarchy_admin.utils.errors import APIError


# =============================================================================
# Logging Configuration
# =============================================================================

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# =============================================================================
# Application Lifespan
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager for startup/shutdown events."""
    # Startup
    logger.info("Starting Business Hierarchy Administration API...")

    config = DatabaseConfig.from_env()
    logger.info("Connecting to database at %s", config.location)
    get_engine(config)

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down Business Hierarchy Administration API...")
    dispose_engine()
    logger.info("Application shutdown complete")


# =============================================================================
# Application Factory
# =============================================================================

def _field_errors_response(errors: list) -> JSONResponse:
    """Convert Pydantic errors to the structured field-error response."""
    field_errors = []
    for error in errors:
        # Drop the "body"/"query" prefix so field names match the validator's
        loc = [str(x) for x in error["loc"] if x not in ("body", "query", "path")]
        field_errors.append({
            "field": ".".join(loc),
            "message": error["msg"],
            "code": error["type"],
        })

    return JSONResponse(
        status_code=400,
        content=jsonable_encoder({
            "error": {
                "message": "Request validation failed",
                "code": "validation_error",
                "field_errors": field_errors,
            }
        }),
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description=(
            "API for administering the Economic Group → Brand → Unit → "
            "Collaborator hierarchy with validation, referential integrity "
            "and permission checks."
        ),
        version=settings.app_version,
        debug=settings.debug,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Register routes
    app.include_router(api_router)

    # Register exception handlers
    app.add_exception_handler(APIError, api_error_handler)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Convert request shape errors to structured response."""
        return _field_errors_response(exc.errors())

    @app.exception_handler(PydanticValidationError)
    async def pydantic_validation_handler(
        request: Request,
        exc: PydanticValidationError,
    ) -> JSONResponse:
        """Convert Pydantic validation errors to structured response."""
        return _field_errors_response(exc.errors())

    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unexpected error occurred")
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "message": "An unexpected error occurred",
                    "code": "internal_error",
                }
            },
        )

    # Health check endpoint
    @app.get("/health", tags=["Health"])
    async def health_check() -> dict:
        """Check application health."""
        return {"status": "healthy", "version": settings.app_version}

    return app


# =============================================================================
# Application Instance
# =============================================================================

app = create_app()


# =============================================================================
# Development Server
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "hierarchy_admin.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )
