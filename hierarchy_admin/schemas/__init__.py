"""Pydantic schemas for API request/response validation."""

from hierarchy_admin.schemas.organization import (
    BrandRequest,
    BrandResponse,
    CollaboratorRequest,
    CollaboratorResponse,
    CollectionResponse,
    EconomicGroupRequest,
    EconomicGroupResponse,
    PaginationInfo,
    SuccessResponse,
    UnitRequest,
    UnitResponse,
)

__all__ = [
    "BrandRequest",
    "BrandResponse",
    "CollaboratorRequest",
    "CollaboratorResponse",
    "CollectionResponse",
    "EconomicGroupRequest",
    "EconomicGroupResponse",
    "PaginationInfo",
    "SuccessResponse",
    "UnitRequest",
    "UnitResponse",
]
