"""Pydantic models for hierarchy API requests and responses.

Request models only shape the JSON body. Every field is optional at this
layer so that presence, length, format, parent and uniqueness rules are
all reported by the hierarchy validator with the same field-keyed errors.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Request Models
# =============================================================================

class EconomicGroupRequest(BaseModel):
    """Request body for creating or updating an economic group."""

    name: Optional[str] = Field(None, description="Economic group name, unique")


class BrandRequest(BaseModel):
    """Request body for creating or updating a brand."""

    name: Optional[str] = Field(None, description="Brand name, unique within its economic group")
    economic_group_id: Optional[int] = Field(None, description="Owning economic group ID")


class UnitRequest(BaseModel):
    """Request body for creating or updating a unit."""

    trade_name: Optional[str] = Field(None, description="Trade name")
    legal_name: Optional[str] = Field(None, description="Registered legal name")
    tax_id: Optional[str] = Field(
        None,
        description="14-digit organization tax id; punctuation is stripped",
        examples=["12.345.678/0001-90"],
    )
    brand_id: Optional[int] = Field(None, description="Owning brand ID")


class CollaboratorRequest(BaseModel):
    """Request body for creating or updating a collaborator."""

    name: Optional[str] = Field(None, description="Full name")
    email: Optional[str] = Field(None, description="Email address, unique")
    personal_tax_id: Optional[str] = Field(
        None,
        description="11-digit personal tax id; punctuation is stripped",
        examples=["123.456.789-01"],
    )
    unit_id: Optional[int] = Field(None, description="Unit the collaborator belongs to")


# =============================================================================
# Response Models
# =============================================================================

class EconomicGroupResponse(BaseModel):
    """Economic group data for API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    created_at: datetime
    updated_at: datetime
    dependents_count: Optional[int] = None


class BrandResponse(BaseModel):
    """Brand data for API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    economic_group_id: int
    created_at: datetime
    updated_at: datetime
    dependents_count: Optional[int] = None


class UnitResponse(BaseModel):
    """Unit data for API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    trade_name: str
    legal_name: str
    tax_id: str
    brand_id: int
    created_at: datetime
    updated_at: datetime
    dependents_count: Optional[int] = None


class CollaboratorResponse(BaseModel):
    """Collaborator data for API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    personal_tax_id: str
    unit_id: int
    created_at: datetime
    updated_at: datetime
    dependents_count: Optional[int] = None


# =============================================================================
# Envelopes
# =============================================================================

class SuccessResponse(BaseModel):
    """Generic success response wrapper."""

    data: Dict[str, Any]
    message: Optional[str] = None


class PaginationInfo(BaseModel):
    """Pagination metadata of a collection response."""

    page: int
    page_size: int
    total_items: int
    total_pages: int


class CollectionResponse(BaseModel):
    """Response for collection listings."""

    data: List[Dict[str, Any]]
    pagination: PaginationInfo
