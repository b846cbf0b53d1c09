"""Shared FastAPI dependencies for hierarchy endpoints."""

import logging
from typing import Annotated, Any, Callable, Dict, List, Optional, Type
from uuid import UUID

from fastapi import Depends, Header
from pydantic import BaseModel
from sqlalchemy.orm import Session

from hierarchy_admin.database.database import get_db
from hierarchy_admin.services.hierarchy_service import HierarchyService
from hierarchy_admin.utils.auth import (
    Actor,
    EntityType,
    Operation,
    UserRole,
    ensure_can_perform,
    get_mock_actor,
)
from hierarchy_admin.utils.errors import UnauthorizedError

logger = logging.getLogger(__name__)


def get_hierarchy_service(
    session: Annotated[Session, Depends(get_db)],
) -> HierarchyService:
    """Get hierarchy service instance."""
    return HierarchyService(session)


def _split_header(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def get_optional_actor(
    x_user_id: Annotated[Optional[str], Header(alias="X-User-ID")] = None,
    x_user_role: Annotated[Optional[str], Header(alias="X-User-Role")] = None,
    x_user_permissions: Annotated[Optional[str], Header(alias="X-User-Permissions")] = None,
) -> Optional[Actor]:
    """
    Get the current actor from request headers, or None when anonymous.

    In production, this would verify JWT tokens or session cookies.
    For development, headers simulate users: X-User-Role takes a
    comma-separated list of roles and X-User-Permissions a list of
    explicit permission names. Permissions are resolved here, once per
    request.
    """
    if not (x_user_id or x_user_role or x_user_permissions):
        return None

    user_id = None
    if x_user_id:
        try:
            user_id = UUID(x_user_id)
        except ValueError:
            logger.debug("Ignoring malformed X-User-ID header %r", x_user_id)

    roles = []
    for role_name in _split_header(x_user_role):
        try:
            roles.append(UserRole(role_name))
        except ValueError:
            logger.debug("Ignoring unknown role %r", role_name)

    return get_mock_actor(
        user_id=user_id,
        roles=roles,
        permissions=_split_header(x_user_permissions),
    )


def get_current_actor(
    actor: Annotated[Optional[Actor], Depends(get_optional_actor)],
) -> Actor:
    """
    Get the authenticated actor.

    Anonymous requests are sent to authentication (401) before any
    permission check happens.
    """
    if actor is None:
        raise UnauthorizedError("Authentication required")
    return actor


def require_permission(entity_type: EntityType, operation: Operation) -> Callable[..., Actor]:
    """
    Dependency factory gating an endpoint on '{operation}_{entity_type}'.

    Usage:
        @router.post("", dependencies=[Depends(require_permission(EntityType.BRAND, Operation.CREATE))])
    """

    def dependency(
        actor: Annotated[Actor, Depends(get_current_actor)],
    ) -> Actor:
        ensure_can_perform(actor, entity_type, operation)
        return actor

    return dependency


def present(response_model: Type[BaseModel], data: Dict[str, Any]) -> Dict[str, Any]:
    """Shape a record dictionary through its response model."""
    return response_model.model_validate(data).model_dump(mode="json")
