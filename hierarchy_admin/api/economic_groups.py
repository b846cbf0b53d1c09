"""API endpoints for economic groups."""

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
    EconomicGroupRequest,
    EconomicGroupResponse,
    SuccessResponse,
)
from hierarchy_admin.services.hierarchy_service import HierarchyService
from hierarchy_admin.utils.auth import Actor, EntityType, Operation


ENTITY = EntityType.ECONOMIC_GROUP

economic_groups_router = APIRouter(prefix="/economic-groups", tags=["Economic Groups"])


@economic_groups_router.get(
    "",
    response_model=CollectionResponse,
    summary="List Economic Groups",
    description="Get paginated economic groups ordered by name.",
)
async def list_economic_groups(
    service: Annotated[HierarchyService, Depends(get_hierarchy_service)],
    actor: Annotated[Actor, Depends(require_permission(ENTITY, Operation.VIEW))],
    page: Annotated[int, Query(ge=1, le=MAX_PAGE, description="Page number")] = 1,
    page_size: Annotated[Optional[int], Query(ge=1, le=100, description="Items per page")] = None,
    search: Annotated[Optional[str], Query(description="Name contains")] = None,
    sort_by: Annotated[Optional[str], Query(description="Sort field")] = None,
    sort_order: Annotated[str, Query(pattern="^(asc|desc)$", description="Sort order")] = "asc",
) -> CollectionResponse:
    """Get paginated economic groups."""
    result = service.list_entities(
        ENTITY,
        actor,
        page=page,
        page_size=page_size,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return CollectionResponse(
        data=[present(EconomicGroupResponse, item) for item in result["data"]],
        pagination=result["pagination"],
    )


@economic_groups_router.post(
    "",
    response_model=SuccessResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Economic Group",
)
async def create_economic_group(
    data: EconomicGroupRequest,
    service: Annotated[HierarchyService, Depends(get_hierarchy_service)],
    actor: Annotated[Actor, Depends(require_permission(ENTITY, Operation.CREATE))],
) -> SuccessResponse:
    """
    Create an economic group.

    - Name is required, at most 255 characters, and unique across groups
    """
    group = service.create_entity(ENTITY, data.model_dump(exclude_unset=True), actor)
    return SuccessResponse(
        data=present(EconomicGroupResponse, group),
        message="Economic group created successfully",
    )


@economic_groups_router.get(
    "/{group_id}",
    response_model=SuccessResponse,
    summary="Get Economic Group",
)
async def get_economic_group(
    group_id: int,
    service: Annotated[HierarchyService, Depends(get_hierarchy_service)],
    actor: Annotated[Actor, Depends(require_permission(ENTITY, Operation.VIEW))],
) -> SuccessResponse:
    """Get an economic group with the number of brands it owns."""
    group = service.get_entity(ENTITY, group_id, actor)
    return SuccessResponse(data=present(EconomicGroupResponse, group))


@economic_groups_router.put(
    "/{group_id}",
    response_model=SuccessResponse,
    summary="Update Economic Group",
)
async def update_economic_group(
    group_id: int,
    data: EconomicGroupRequest,
    service: Annotated[HierarchyService, Depends(get_hierarchy_service)],
    actor: Annotated[Actor, Depends(require_permission(ENTITY, Operation.EDIT))],
) -> SuccessResponse:
    """Update an economic group."""
    group = service.update_entity(ENTITY, group_id, data.model_dump(exclude_unset=True), actor)
    return SuccessResponse(
        data=present(EconomicGroupResponse, group),
        message="Economic group updated successfully",
    )


@economic_groups_router.delete(
    "/{group_id}",
    response_model=SuccessResponse,
    summary="Delete Economic Group",
)
async def delete_economic_group(
    group_id: int,
    service: Annotated[HierarchyService, Depends(get_hierarchy_service)],
    actor: Annotated[Actor, Depends(require_permission(ENTITY, Operation.DELETE))],
) -> SuccessResponse:
    """
    Delete an economic group.

    - Returns 409 while any brand still belongs to the group
    """
    group = service.delete_entity(ENTITY, group_id, actor)
    return SuccessResponse(
        data=present(EconomicGroupResponse, group),
        message="Economic group deleted successfully",
    )
