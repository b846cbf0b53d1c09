"""API endpoints for brands."""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, status

from hierarchy_admin.api.dependencies import (
    get_hierarchy_service,
    present,
    require_permission,
)
from hierarchy_admin.config.settings import MAX_PAGE
from hierarchy_admin.schemas.organization import (
    BrandRequest,
    BrandResponse,
    CollectionResponse,
    SuccessResponse,
)
from hierarchy_admin.services.hierarchy_service import HierarchyService
from hierarchy_admin.utils.auth import Actor, EntityType, Operation


ENTITY = EntityType.BRAND

brands_router = APIRouter(prefix="/brands", tags=["Brands"])


@brands_router.get(
    "",
    response_model=CollectionResponse,
    summary="List Brands",
    description="Get paginated brands, optionally restricted to one economic group.",
)
async def list_brands(
    service: Annotated[HierarchyService, Depends(get_hierarchy_service)],
    actor: Annotated[Actor, Depends(require_permission(ENTITY, Operation.VIEW))],
    page: Annotated[int, Query(ge=1, le=MAX_PAGE, description="Page number")] = 1,
    page_size: Annotated[Optional[int], Query(ge=1, le=100, description="Items per page")] = None,
    search: Annotated[Optional[str], Query(description="Name contains")] = None,
    economic_group_id: Annotated[Optional[int], Query(description="Economic group filter")] = None,
    sort_by: Annotated[Optional[str], Query(description="Sort field")] = None,
    sort_order: Annotated[str, Query(pattern="^(asc|desc)$", description="Sort order")] = "asc",
) -> CollectionResponse:
    """Get paginated brands."""
    result = service.list_entities(
        ENTITY,
        actor,
        page=page,
        page_size=page_size,
        search=search,
        economic_group_id=economic_group_id,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    return CollectionResponse(
        data=[present(BrandResponse, item) for item in result["data"]],
        pagination=result["pagination"],
    )


@brands_router.post(
    "",
    response_model=SuccessResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Brand",
)
async def create_brand(
    data: BrandRequest,
    service: Annotated[HierarchyService, Depends(get_hierarchy_service)],
    actor: Annotated[Actor, Depends(require_permission(ENTITY, Operation.CREATE))],
) -> SuccessResponse:
    """
    Create a brand.

    - Economic group must exist
    - Name must be unique within the economic group; other groups may reuse it
    """
    brand = service.create_entity(ENTITY, data.model_dump(exclude_unset=True), actor)
    return SuccessResponse(data=present(BrandResponse, brand), message="Brand created successfully")


@brands_router.get(
    "/{brand_id}",
    response_model=SuccessResponse,
    summary="Get Brand",
)
async def get_brand(
    brand_id: int,
    service: Annotated[HierarchyService, Depends(get_hierarchy_service)],
    actor: Annotated[Actor, Depends(require_permission(ENTITY, Operation.VIEW))],
) -> SuccessResponse:
    """Get a brand with the number of units it owns."""
    brand = service.get_entity(ENTITY, brand_id, actor)
    return SuccessResponse(data=present(BrandResponse, brand))


@brands_router.put(
    "/{brand_id}",
    response_model=SuccessResponse,
    summary="Update Brand",
)
async def update_brand(
    brand_id: int,
    data: BrandRequest,
    service: Annotated[HierarchyService, Depends(get_hierarchy_service)],
    actor: Annotated[Actor, Depends(require_permission(ENTITY, Operation.EDIT))],
) -> SuccessResponse:
    """Update a brand, including moving it to another economic group."""
    brand = service.update_entity(ENTITY, brand_id, data.model_dump(exclude_unset=True), actor)
    return SuccessResponse(data=present(BrandResponse, brand), message="Brand updated successfully")


@brands_router.delete(
    "/{brand_id}",
    response_model=SuccessResponse,
    summary="Delete Brand",
)
async def delete_brand(
    brand_id: int,
    service: Annotated[HierarchyService, Depends(get_hierarchy_service)],
    actor: Annotated[Actor, Depends(require_permission(ENTITY, Operation.DELETE))],
) -> SuccessResponse:
    """Delete a brand that owns no units."""
    brand = service.delete_entity(ENTITY, brand_id, actor)
    return SuccessResponse(data=present(BrandResponse, brand), message="Brand deleted successfully")
