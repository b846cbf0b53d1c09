"""Tests for the authorization gate."""

import uuid

import pytest

from hierarchy_admin.utils.auth import (
    ALL_PERMISSIONS,
    Actor,
    EntityType,
    Operation,
    UserRole,
    can_perform,
    ensure_can_perform,
    get_mock_actor,
    permission_name,
    resolve_permissions,
)
from hierarchy_admin.utils.errors import ForbiddenError, UnauthorizedError


ALL_COMBINATIONS = [
    (entity_type, operation)
    for entity_type in EntityType
    for operation in Operation
]


class TestPermissionNames:
    """Tests for permission naming."""

    def test_permission_name_format(self):
        """Test that names follow '{operation}_{entity_type}'."""
        assert permission_name(EntityType.BRAND, Operation.CREATE) == "create_brand"
        assert permission_name(EntityType.ECONOMIC_GROUP, Operation.DELETE) == "delete_economic_group"

    def test_all_permissions_cover_every_combination(self):
        """Test that there are 16 permissions, one per entity and operation."""
        assert len(ALL_PERMISSIONS) == 16


class TestCanPerform:
    """Tests for can_perform."""

    @pytest.mark.parametrize("entity_type,operation", ALL_COMBINATIONS)
    def test_actor_without_permission_is_denied(self, entity_type, operation):
        """Test denial for every entity/operation combination when the permission is missing."""
        others = ALL_PERMISSIONS - {permission_name(entity_type, operation)}
        actor = Actor(id=uuid.uuid4(), permissions=frozenset(others))

        assert can_perform(actor, entity_type, operation) is False
        with pytest.raises(ForbiddenError) as exc_info:
            ensure_can_perform(actor, entity_type, operation)
        assert exc_info.value.details["required_permission"] == permission_name(entity_type, operation)

    @pytest.mark.parametrize("entity_type,operation", ALL_COMBINATIONS)
    def test_actor_with_only_that_permission_is_allowed(self, entity_type, operation):
        """Test that the single matching permission is sufficient."""
        actor = Actor(
            id=uuid.uuid4(),
            permissions=frozenset({permission_name(entity_type, operation)}),
        )

        assert can_perform(actor, entity_type, operation) is True
        ensure_can_perform(actor, entity_type, operation)

    def test_record_does_not_influence_decision(self):
        """Test that there is no row-level ownership."""
        actor = Actor(id=uuid.uuid4(), permissions=frozenset({"edit_unit"}))

        assert can_perform(actor, EntityType.UNIT, Operation.EDIT, record=object())
        assert not can_perform(actor, EntityType.BRAND, Operation.EDIT, record=object())

    def test_missing_actor_is_unauthorized(self):
        """Test that no actor means authentication is required, not forbidden."""
        assert can_perform(None, EntityType.UNIT, Operation.VIEW) is False
        with pytest.raises(UnauthorizedError):
            ensure_can_perform(None, EntityType.UNIT, Operation.VIEW)


class TestRoles:
    """Tests for role to permission resolution."""

    def test_admin_holds_everything(self):
        """Test admin role resolves to all permissions."""
        actor = get_mock_actor(roles=[UserRole.ADMIN])
        assert actor.permissions == ALL_PERMISSIONS

    def test_manager_cannot_delete_upper_levels(self):
        """Test manager may delete collaborators only."""
        actor = get_mock_actor(roles=[UserRole.MANAGER])

        assert can_perform(actor, EntityType.COLLABORATOR, Operation.DELETE)
        assert not can_perform(actor, EntityType.UNIT, Operation.DELETE)
        assert not can_perform(actor, EntityType.ECONOMIC_GROUP, Operation.CREATE)
        assert can_perform(actor, EntityType.ECONOMIC_GROUP, Operation.VIEW)

    def test_user_role_is_view_only(self):
        """Test user role only views."""
        actor = get_mock_actor(roles=[UserRole.USER])

        for entity_type in EntityType:
            assert can_perform(actor, entity_type, Operation.VIEW)
            assert not can_perform(actor, entity_type, Operation.CREATE)

    def test_explicit_permissions_are_merged_with_roles(self):
        """Test extra grants add to the role set."""
        permissions = resolve_permissions([UserRole.USER], ["delete_brand"])

        assert "delete_brand" in permissions
        assert "view_unit" in permissions

    def test_actor_without_roles_has_no_permissions(self):
        """Test empty actor."""
        actor = get_mock_actor(roles=[])
        assert actor.permissions == frozenset()
