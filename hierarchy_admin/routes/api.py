"""API route registration and error handling for hierarchy endpoints."""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from hierarchy_admin.api.brands import brands_router
from hierarchy_admin.api.collaborators import collaborators_router
from hierarchy_admin.api.economic_groups import economic_groups_router
from hierarchy_admin.api.units import units_router
from hierarchy_admin.utils.errors import APIError

logger = logging.getLogger(__name__)


# =============================================================================
# Router Setup
# =============================================================================

api_router = APIRouter(prefix="/api")

# Leaves last, following the hierarchy
api_router.include_router(economic_groups_router)
api_router.include_router(brands_router)
api_router.include_router(units_router)
api_router.include_router(collaborators_router)


# =============================================================================
# Exception Handlers (to be registered with FastAPI app)
# =============================================================================

async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle API errors and return structured responses."""
    response = exc.to_response()
    if response.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(
        status_code=response.status_code,
        content=response.to_dict(),
    )
