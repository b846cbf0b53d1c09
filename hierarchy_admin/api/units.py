"""API endpoints for units."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, status

from hierarchy_admin.api.dependencies import (
    get_hierarchy_service,
    present,
    require_permission,
)
from hierarchy_admin.config.settings import MAX_PAGE
from hierarchy_admin.schemas.organization import (
    CollectionResponse,
    SuccessResponse,
    UnitRequest,
    UnitResponse,
)
from hierarchy_admin.services.hierarchy_service import HierarchyService
from hierarchy_admin.utils.auth import Actor, EntityType, Operation


ENTITY = EntityType.UNIT

units_router = APIRouter(prefix="/units", tags=["Units"])


@units_router.get(
    "",
    response_model=CollectionResponse,
    summary="List Units",
    description="Get paginated units filtered by brand or economic group.",
)
async def list_units(
    service: Annotated[HierarchyService, Depends(get_hierarchy_service)],
    actor: Annotated[Actor, Depends(require_permission(ENTITY, Operation.VIEW))],
    page: Annotated[int, Query(ge=1, le=MAX_PAGE, description="Page number")] = 1,
    page_size: Annotated[Optional[int], Query(ge=1, le=100, description="Items per page")] = None,
    search: Annotated[Optional[str], Query(description="Trade or legal name contains")] = None,
    brand_id: Annotated[Optional[int], Query(description="Brand filter")] = None,
    economic_group_id: Annotated[Optional[int], Query(description="Economic group filter")] = None,
    sort_by: Annotated[Optional[str], Query(description="Sort field")] = None,
    sort_order: Annotated[str, Query(pattern="^(asc|desc)$", description="Sort order")] = "asc",
) -> CollectionResponse:
    """Get paginated units."""
    result = service.list_entities(
        ENTITY,
        actor,
        page=page,
        page_size=page_size,
        search=search,
        economic_group_id=economic_group_id,
        brand_id=brand_id,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return CollectionResponse(
        data=[present(UnitResponse, item) for item in result["data"]],
        pagination=result["pagination"],
    )


@units_router.post(
    "",
    response_model=SuccessResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Unit",
)
async def create_unit(
    data: UnitRequest,
    service: Annotated[HierarchyService, Depends(get_hierarchy_service)],
    actor: Annotated[Actor, Depends(require_permission(ENTITY, Operation.CREATE))],
) -> SuccessResponse:
    """
    Create a unit.

    - Tax id is stored digit-only and must have exactly 14 digits
    - Tax id is unique across all units
    - Brand must exist
    """
    unit = service.create_entity(ENTITY, data.model_dump(exclude_unset=True), actor)
    return SuccessResponse(data=present(UnitResponse, unit), message="Unit created successfully")


@units_router.get(
    "/{unit_id}",
    response_model=SuccessResponse,
    summary="Get Unit",
)
async def get_unit(
    unit_id: int,
    service: Annotated[HierarchyService, Depends(get_hierarchy_service)],
    actor: Annotated[Actor, Depends(require_permission(ENTITY, Operation.VIEW))],
) -> SuccessResponse:
    """Get a unit with the number of collaborators assigned to it."""
    unit = service.get_entity(ENTITY, unit_id, actor)
    return SuccessResponse(data=present(UnitResponse, unit))


@units_router.put(
    "/{unit_id}",
    response_model=SuccessResponse,
    summary="Update Unit",
)
async def update_unit(
    unit_id: int,
    data: UnitRequest,
    service: Annotated[HierarchyService, Depends(get_hierarchy_service)],
    actor: Annotated[Actor, Depends(require_permission(ENTITY, Operation.EDIT))],
) -> SuccessResponse:
    """Update a unit."""
    unit = service.update_entity(ENTITY, unit_id, data.model_dump(exclude_unset=True), actor)
    return SuccessResponse(data=present(UnitResponse, unit), message="Unit updated successfully")


@units_router.delete(
    "/{unit_id}",
    response_model=SuccessResponse,
    summary="Delete Unit",
)
async def delete_unit(
    unit_id: int,
    service: Annotated[HierarchyService, Depends(get_hierarchy_service)],
    actor: Annotated[Actor, Depends(require_permission(ENTITY, Operation.DELETE))],
) -> SuccessResponse:
    """Delete a unit without collaborators."""
    unit = service.delete_entity(ENTITY, unit_id, actor)
    return SuccessResponse(data=present(UnitResponse, unit), message="Unit deleted successfully")
