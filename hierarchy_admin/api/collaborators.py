"""API endpoints for collaborators."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, status

from hierarchy_admin.api.dependencies import (
    get_hierarchy_service,
    present,
    require_permission,
)
from hierarchy_admin.config.settings import MAX_PAGE
from hierarchy_admin.schemas.organization import (
    CollaboratorRequest,
    CollaboratorResponse,
    CollectionResponse,
    SuccessResponse,
)
from hierarchy_admin.services.hierarchy_service import HierarchyService
from hierarchy_admin.utils.auth import Actor, EntityType, Operation


ENTITY = EntityType.COLLABORATOR

collaborators_router = APIRouter(prefix="/collaborators", tags=["Collaborators"])


@collaborators_router.get(
    "",
    response_model=CollectionResponse,
    summary="List Collaborators",
    description=(
        "Get paginated collaborators. Filters reach up the hierarchy: by unit, "
        "by the unit's brand, or by the brand's economic group."
    ),
)
async def list_collaborators(
    service: Annotated[HierarchyService, Depends(get_hierarchy_service)],
    actor: Annotated[Actor, Depends(require_permission(ENTITY, Operation.VIEW))],
    page: Annotated[int, Query(ge=1, le=MAX_PAGE, description="Page number")] = 1,
    page_size: Annotated[Optional[int], Query(ge=1, le=100, description="Items per page")] = None,
    search: Annotated[Optional[str], Query(description="Name or email contains")] = None,
    unit_id: Annotated[Optional[int], Query(description="Unit filter")] = None,
    brand_id: Annotated[Optional[int], Query(description="Brand filter")] = None,
    economic_group_id: Annotated[Optional[int], Query(description="Economic group filter")] = None,
    sort_by: Annotated[Optional[str], Query(description="Sort field")] = None,
    sort_order: Annotated[str, Query(pattern="^(asc|desc)$", description="Sort order")] = "asc",
) -> CollectionResponse:
    """Get paginated collaborators."""
    result = service.list_entities(
        ENTITY,
        actor,
        page=page,
        page_size=page_size,
        search=search,
        economic_group_id=economic_group_id,
        brand_id=brand_id,
        unit_id=unit_id,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return CollectionResponse(
        data=[present(CollaboratorResponse, item) for item in result["data"]],
        pagination=result["pagination"],
    )


@collaborators_router.post(
    "",
    response_model=SuccessResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Collaborator",
)
async def create_collaborator(
    data: CollaboratorRequest,
    service: Annotated[HierarchyService, Depends(get_hierarchy_service)],
    actor: Annotated[Actor, Depends(require_permission(ENTITY, Operation.CREATE))],
) -> SuccessResponse:
    """
    Create a collaborator.

    - Email must be valid and unique
    - Personal tax id is stored digit-only, must have 11 digits and be unique
    - Unit must exist
    """
    collaborator = service.create_entity(ENTITY, data.model_dump(exclude_unset=True), actor)
    return SuccessResponse(
        data=present(CollaboratorResponse, collaborator),
        message="Collaborator created successfully",
    )


@collaborators_router.get(
    "/{collaborator_id}",
    response_model=SuccessResponse,
    summary="Get Collaborator",
)
async def get_collaborator(
    collaborator_id: int,
    service: Annotated[HierarchyService, Depends(get_hierarchy_service)],
    actor: Annotated[Actor, Depends(require_permission(ENTITY, Operation.VIEW))],
) -> SuccessResponse:
    """Get a collaborator."""
    collaborator = service.get_entity(ENTITY, collaborator_id, actor)
    return SuccessResponse(data=present(CollaboratorResponse, collaborator))


@collaborators_router.put(
    "/{collaborator_id}",
    response_model=SuccessResponse,
    summary="Update Collaborator",
)
async def update_collaborator(
    collaborator_id: int,
    data: CollaboratorRequest,
    service: Annotated[HierarchyService, Depends(get_hierarchy_service)],
    actor: Annotated[Actor, Depends(require_permission(ENTITY, Operation.EDIT))],
) -> SuccessResponse:
    """Update a collaborator."""
    collaborator = service.update_entity(
        ENTITY, collaborator_id, data.model_dump(exclude_unset=True), actor
    )
    return SuccessResponse(
        data=present(CollaboratorResponse, collaborator),
        message="Collaborator updated successfully",
    )


@collaborators_router.delete(
    "/{collaborator_id}",
    response_model=SuccessResponse,
    summary="Delete Collaborator",
)
async def delete_collaborator(
    collaborator_id: int,
    service: Annotated[HierarchyService, Depends(get_hierarchy_service)],
    actor: Annotated[Actor, Depends(require_permission(ENTITY, Operation.DELETE))],
) -> SuccessResponse:
    """Delete a collaborator."""
    collaborator = service.delete_entity(ENTITY, collaborator_id, actor)
    return SuccessResponse(
        data=present(CollaboratorResponse, collaborator),
        message="Collaborator deleted successfully",
    )
