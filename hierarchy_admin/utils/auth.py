"""Authentication and authorization utilities."""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from hierarchy_admin.utils.errors import ForbiddenError, UnauthorizedError


class EntityType(str, Enum):
    """Entity types of the business hierarchy, leaves last."""

    ECONOMIC_GROUP = "economic_group"
    BRAND = "brand"
    UNIT = "unit"
    COLLABORATOR = "collaborator"

    @property
    def label(self) -> str:
        """Human-readable name used in error messages."""
        return self.value.replace("_", " ").capitalize()


class Operation(str, Enum):
    """Operations gated by the authorization check."""

    VIEW = "view"
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"


class UserRole(str, Enum):
    """User role definitions for access control."""

    ADMIN = "admin"
    MANAGER = "manager"
    USER = "user"


def permission_name(entity_type: EntityType, operation: Operation) -> str:
    """Build the permission name for an operation, e.g. 'create_brand'."""
    return f"{Operation(operation).value}_{EntityType(entity_type).value}"


ALL_PERMISSIONS: FrozenSet[str] = frozenset(
    permission_name(entity_type, operation)
    for entity_type in EntityType
    for operation in Operation
)

# Permissions granted by each role
ROLE_PERMISSIONS: Dict[UserRole, FrozenSet[str]] = {
    UserRole.ADMIN: ALL_PERMISSIONS,
    UserRole.MANAGER: frozenset({
        "view_economic_group",
        "view_brand", "create_brand", "edit_brand",
        "view_unit", "create_unit", "edit_unit",
        "view_collaborator", "create_collaborator", "edit_collaborator", "delete_collaborator",
    }),
    UserRole.USER: frozenset({
        "view_economic_group",
        "view_brand",
        "view_unit",
        "view_collaborator",
    }),
}


def resolve_permissions(
    roles: Iterable[UserRole],
    extra_permissions: Iterable[str] = (),
) -> FrozenSet[str]:
    """Resolve the permission set of a request once, from roles plus explicit grants."""
    resolved = set(extra_permissions)
    for role in roles:
        resolved.update(ROLE_PERMISSIONS.get(role, frozenset()))
    return frozenset(resolved)


@dataclass
class Actor:
    """
    The authenticated user performing a request.

    Permissions are resolved once per request and carried on the actor;
    nothing is looked up from global state afterwards.
    """

    id: uuid.UUID
    roles: List[UserRole] = field(default_factory=list)
    permissions: FrozenSet[str] = field(default_factory=frozenset)

    def has_permission(self, name: str) -> bool:
        """Check if the actor holds a named permission."""
        return name in self.permissions


def can_perform(
    actor: Optional[Actor],
    entity_type: EntityType,
    operation: Operation,
    record: Optional[Any] = None,
) -> bool:
    """
    Decide whether an actor may perform an operation on an entity type.

    The decision is a plain capability lookup of '{operation}_{entity_type}';
    the target record is accepted for interface symmetry but does not
    influence the outcome (there is no row-level ownership).
    """
    if actor is None:
        return False
    return actor.has_permission(permission_name(entity_type, operation))


def ensure_can_perform(
    actor: Optional[Actor],
    entity_type: EntityType,
    operation: Operation,
    record: Optional[Any] = None,
) -> None:
    """
    Raise unless the actor may perform the operation.

    UnauthorizedError when there is no actor at all, ForbiddenError when
    the actor lacks the permission.
    """
    if actor is None:
        raise UnauthorizedError("Authentication required")

    if not can_perform(actor, entity_type, operation, record):
        required = permission_name(entity_type, operation)
        raise ForbiddenError(
            message="Insufficient permissions",
            details={"required_permission": required},
        )


def get_mock_actor(
    user_id: Optional[uuid.UUID] = None,
    roles: Optional[List[UserRole]] = None,
    permissions: Iterable[str] = (),
) -> Actor:
    """
    Create an actor for development/testing.

    In production, this should be replaced with actual authentication.
    """
    roles = list(roles) if roles is not None else []
    return Actor(
        id=user_id or uuid.uuid4(),
        roles=roles,
        permissions=resolve_permissions(roles, permissions),
    )
