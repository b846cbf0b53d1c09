"""Hierarchy service for business logic and database operations."""

import logging
from typing import Any, Dict, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from hierarchy_admin.config.settings import get_settings
from hierarchy_admin.data.hierarchy_repository import (
    HierarchyRepository,
    ListFilters,
    PaginationParams,
    SortParams,
)
from hierarchy_admin.models.base import Base
from hierarchy_admin.services.hierarchy_validation_service import (
    HierarchyValidator,
    get_entity_rules,
)
from hierarchy_admin.utils.auth import Actor, EntityType, Operation, ensure_can_perform
from hierarchy_admin.utils.errors import (
    APIError,
    DatabaseError,
    IntegrityConflictError,
    create_dependents_conflict_error,
    create_field_error,
    create_not_found_error,
    create_validation_error,
)

logger = logging.getLogger(__name__)


class HierarchyService:
    """
    Service layer for CRUD operations on the four hierarchy entity types.

    Every operation goes through the same path: authorization gate, then
    validation and normalization, then a single flush against the store.
    Store constraint violations are translated into the same error shapes
    the validator produces.
    """

    def __init__(self, session: Session):
        """Initialize service with database session."""
        self.session = session
        self.validator = HierarchyValidator(session)
        self.settings = get_settings()

    def repository(self, entity_type: EntityType) -> HierarchyRepository:
        return HierarchyRepository(self.session, entity_type)

    # =========================================================================
    # Create Operations
    # =========================================================================

    def create_entity(
        self,
        entity_type: EntityType,
        payload: Dict[str, Any],
        actor: Optional[Actor],
    ) -> Dict[str, Any]:
        """
        Create a record from a raw payload.

        Raises ValidationError with field-level details when any rule fails;
        nothing is written in that case.
        """
        entity_type = EntityType(entity_type)
        ensure_can_perform(actor, entity_type, Operation.CREATE)

        normalized = self.validator.validate(entity_type, payload).raise_for_errors()

        repository = self.repository(entity_type)
        record = repository.model(**normalized)

        try:
            repository.add(record)
        except IntegrityError as e:
            self.session.rollback()
            raise self._translate_write_error(entity_type, e, payload)

        logger.info("Created %s %s", entity_type.value, record.id)
        return self._build_response(entity_type, record)

    # =========================================================================
    # Read Operations
    # =========================================================================

    def get_entity(
        self,
        entity_type: EntityType,
        record_id: int,
        actor: Optional[Actor],
    ) -> Dict[str, Any]:
        """
        Get a record by id, with the number of records depending on it.

        Raises NotFoundError if the record doesn't exist.
        """
        entity_type = EntityType(entity_type)
        ensure_can_perform(actor, entity_type, Operation.VIEW)

        repository = self.repository(entity_type)
        record = self._get_or_404(repository, record_id)

        response = self._build_response(entity_type, record)
        response["dependents_count"] = repository.count_dependents(record.id)
        return response

    def list_entities(
        self,
        entity_type: EntityType,
        actor: Optional[Actor],
        page: int = 1,
        page_size: Optional[int] = None,
        search: Optional[str] = None,
        economic_group_id: Optional[int] = None,
        brand_id: Optional[int] = None,
        unit_id: Optional[int] = None,
        sort_by: Optional[str] = None,
        sort_order: str = "asc",
    ) -> Dict[str, Any]:
        """
        Get a paginated collection with search, parent filters and sorting.

        Parent filters reach up the hierarchy, e.g. collaborators can be
        filtered by the economic group of their unit's brand.
        """
        entity_type = EntityType(entity_type)
        ensure_can_perform(actor, entity_type, Operation.VIEW)

        settings = self.settings.pagination
        if page_size is None:
            page_size = settings.page_size_for(entity_type.value)
        page_size = settings.clamp(page_size)
        page = min(max(1, page), settings.max_page)

        records, total_count = self.repository(entity_type).list(
            pagination=PaginationParams(page=page, page_size=page_size),
            sort=SortParams(field=sort_by, order=sort_order),
            filters=ListFilters(
                search=search,
                economic_group_id=economic_group_id,
                brand_id=brand_id,
                unit_id=unit_id,
            ),
        )

        return {
            "data": [self._build_response(entity_type, record) for record in records],
            "pagination": {
                "page": page,
                "page_size": page_size,
                "total_items": total_count,
                "total_pages": (total_count + page_size - 1) // page_size,
            },
        }

    # =========================================================================
    # Update Operations
    # =========================================================================

    def update_entity(
        self,
        entity_type: EntityType,
        record_id: int,
        payload: Dict[str, Any],
        actor: Optional[Actor],
    ) -> Dict[str, Any]:
        """
        Update a record.

        Reruns every rule on the full payload; uniqueness checks ignore the
        record itself.
        """
        entity_type = EntityType(entity_type)
        ensure_can_perform(actor, entity_type, Operation.EDIT)

        repository = self.repository(entity_type)
        record = self._get_or_404(repository, record_id)

        normalized = self.validator.validate(
            entity_type, payload, exclude_id=record.id
        ).raise_for_errors()

        for field_name, value in normalized.items():
            setattr(record, field_name, value)

        try:
            self.session.flush()
        except IntegrityError as e:
            self.session.rollback()
            raise self._translate_write_error(entity_type, e, payload)

        self.session.refresh(record)
        logger.info("Updated %s %s", entity_type.value, record.id)
        return self._build_response(entity_type, record)

    # =========================================================================
    # Delete Operations
    # =========================================================================

    def delete_entity(
        self,
        entity_type: EntityType,
        record_id: int,
        actor: Optional[Actor],
    ) -> Dict[str, Any]:
        """
        Delete a record that has no dependents.

        The dependents count is an advisory pre-check; the RESTRICT foreign
        keys of the schema are the backstop and their violation is reported
        the same way. Deletes never cascade.
        """
        entity_type = EntityType(entity_type)
        ensure_can_perform(actor, entity_type, Operation.DELETE)

        repository = self.repository(entity_type)
        record = self._get_or_404(repository, record_id)

        dependents = repository.dependents
        dependent_count = repository.count_dependents(record.id)
        if dependents is not None and dependent_count > 0:
            logger.warning(
                "Refused to delete %s %s: %d %s record(s) depend on it",
                entity_type.value,
                record.id,
                dependent_count,
                dependents.entity_type.value,
            )
            raise create_dependents_conflict_error(
                entity_type.label,
                record.id,
                dependents.entity_type.value,
                dependent_count,
            )

        deleted = self._build_response(entity_type, record)

        try:
            repository.delete(record)
        except IntegrityError as e:
            self.session.rollback()
            logger.warning(
                "Store refused to delete %s %s: %s", entity_type.value, record_id, e.orig
            )
            raise IntegrityConflictError(
                message=f"Cannot delete {entity_type.label} {record_id}: other records still reference it",
                details={"resource_type": entity_type.label, "identifier": str(record_id)},
            )

        logger.info("Deleted %s %s", entity_type.value, record_id)
        return deleted

    # =========================================================================
    # Helpers
    # =========================================================================

    def _get_or_404(self, repository: HierarchyRepository, record_id: int) -> Base:
        record = repository.get(record_id)
        if record is None:
            raise create_not_found_error(repository.entity_type.label, record_id)
        return record

    def _translate_write_error(
        self,
        entity_type: EntityType,
        error: IntegrityError,
        payload: Dict[str, Any],
    ) -> APIError:
        """
        Map a store constraint violation on insert/update to an API error.

        Unique violations become the validator's field error for the same
        field; a foreign key violation means the parent vanished after it
        was checked.
        """
        rules = get_entity_rules(entity_type)
        table = rules.model.__tablename__
        error_text = str(error.orig)

        for rule in rules.unique:
            if rule.matches_violation(table, error_text):
                logger.warning(
                    "Unique constraint %s violated on %s write", rule.constraint, entity_type.value
                )
                return create_validation_error(
                    [create_field_error(rule.field, rule.message, "unique")],
                    submitted=payload,
                )

        if rules.parent is not None and "foreign key" in error_text.lower():
            logger.warning("Parent reference violated on %s write", entity_type.value)
            return create_validation_error(
                [create_field_error(
                    rules.parent.field,
                    f"The selected {rules.parent.label} does not exist",
                    "not_found",
                )],
                submitted=payload,
            )

        logger.error("Unmapped integrity error on %s write: %s", entity_type.value, error_text)
        return DatabaseError(f"Failed to save {entity_type.label.lower()}")

    def _build_response(self, entity_type: EntityType, record: Base) -> Dict[str, Any]:
        """Build the response payload for a record."""
        return record.to_dict()
