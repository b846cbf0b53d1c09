"""Repository for hierarchy data access operations."""

from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple, Type

from sqlalchemy import Select, false, func, or_, select
from sqlalchemy.orm import Session

from hierarchy_admin.models.base import Base
from hierarchy_admin.models.organization import ID_MAX, Brand, Collaborator, EconomicGroup, Unit
from hierarchy_admin.utils.auth import EntityType


def id_in_range(value: int) -> bool:
    """Check whether an id fits the INTEGER id columns."""
    return 1 <= value <= ID_MAX


@dataclass
class PaginationParams:
    """Pagination parameters."""

    page: int = 1
    page_size: int = 10

    @property
    def offset(self) -> int:
        """Calculate offset from page and page_size."""
        return (self.page - 1) * self.page_size


@dataclass
class SortParams:
    """Sort parameters."""

    field: Optional[str] = None
    order: str = "asc"  # 'asc' or 'desc'


@dataclass
class ListFilters:
    """Filters for collection listings. Parent filters may reach up the hierarchy."""

    search: Optional[str] = None
    economic_group_id: Optional[int] = None
    brand_id: Optional[int] = None
    unit_id: Optional[int] = None


@dataclass(frozen=True)
class Dependents:
    """Child table referencing an entity type."""

    entity_type: EntityType
    model: Type[Base]
    foreign_key: str


MODELS: Dict[EntityType, Type[Base]] = {
    EntityType.ECONOMIC_GROUP: EconomicGroup,
    EntityType.BRAND: Brand,
    EntityType.UNIT: Unit,
    EntityType.COLLABORATOR: Collaborator,
}

DEPENDENTS: Dict[EntityType, Optional[Dependents]] = {
    EntityType.ECONOMIC_GROUP: Dependents(EntityType.BRAND, Brand, "economic_group_id"),
    EntityType.BRAND: Dependents(EntityType.UNIT, Unit, "brand_id"),
    EntityType.UNIT: Dependents(EntityType.COLLABORATOR, Collaborator, "unit_id"),
    EntityType.COLLABORATOR: None,
}

# Columns matched by the free-text search
SEARCH_FIELDS: Dict[EntityType, Tuple[str, ...]] = {
    EntityType.ECONOMIC_GROUP: ("name",),
    EntityType.BRAND: ("name",),
    EntityType.UNIT: ("trade_name", "legal_name"),
    EntityType.COLLABORATOR: ("name", "email"),
}

# Sortable columns; the first one is the default order
SORT_FIELDS: Dict[EntityType, Tuple[str, ...]] = {
    EntityType.ECONOMIC_GROUP: ("name", "id", "created_at"),
    EntityType.BRAND: ("name", "id", "created_at"),
    EntityType.UNIT: ("trade_name", "legal_name", "tax_id", "id", "created_at"),
    EntityType.COLLABORATOR: ("name", "email", "id", "created_at"),
}


class HierarchyRepository:
    """
    Repository for one entity type of the hierarchy.

    Parent links are plain id columns; lookups across levels are done with
    explicit joins rather than ORM back-references.
    """

    def __init__(self, session: Session, entity_type: EntityType):
        """Initialize repository with database session."""
        self.session = session
        self.entity_type = EntityType(entity_type)
        self.model = MODELS[self.entity_type]

    # =========================================================================
    # Lookups
    # =========================================================================

    def get(self, record_id: int) -> Optional[Base]:
        """Get a record by id. Ids outside the column range never match."""
        if not id_in_range(record_id):
            return None
        return self.session.get(self.model, record_id)

    # =========================================================================
    # Dependents
    # =========================================================================

    @property
    def dependents(self) -> Optional[Dependents]:
        return DEPENDENTS[self.entity_type]

    def count_dependents(self, record_id: int) -> int:
        """Count child records referencing the record."""
        dependents = self.dependents
        if dependents is None:
            return 0

        stmt = (
            select(func.count())
            .select_from(dependents.model)
            .where(getattr(dependents.model, dependents.foreign_key) == record_id)
        )
        return self.session.execute(stmt).scalar() or 0

    # =========================================================================
    # Collection Listing
    # =========================================================================

    def list(
        self,
        pagination: PaginationParams,
        sort: SortParams,
        filters: ListFilters,
    ) -> Tuple[Sequence[Base], int]:
        """
        Get a paginated collection.

        Returns:
            Tuple of (records, total_count)
        """
        stmt = self._apply_filters(select(self.model), filters)

        count_stmt = select(func.count()).select_from(stmt.subquery())
        total_count = self.session.execute(count_stmt).scalar() or 0

        stmt = self._apply_sorting(stmt, sort)
        stmt = stmt.offset(pagination.offset).limit(pagination.page_size)

        records = self.session.execute(stmt).scalars().all()
        return records, total_count

    def _apply_filters(self, stmt: Select, filters: ListFilters) -> Select:
        """Apply search and parent filters to a query."""
        model = self.model

        term = filters.search.strip() if filters.search else ""
        if term:
            stmt = stmt.where(or_(*[
                getattr(model, name).icontains(term, autoescape=True)
                for name in SEARCH_FIELDS[self.entity_type]
            ]))

        parent_ids = (filters.economic_group_id, filters.brand_id, filters.unit_id)
        if any(value is not None and not id_in_range(value) for value in parent_ids):
            return stmt.where(false())

        if self.entity_type == EntityType.BRAND:
            if filters.economic_group_id is not None:
                stmt = stmt.where(Brand.economic_group_id == filters.economic_group_id)

        elif self.entity_type == EntityType.UNIT:
            if filters.brand_id is not None:
                stmt = stmt.where(Unit.brand_id == filters.brand_id)
            if filters.economic_group_id is not None:
                stmt = (
                    stmt.join(Brand, Brand.id == Unit.brand_id)
                    .where(Brand.economic_group_id == filters.economic_group_id)
                )

        elif self.entity_type == EntityType.COLLABORATOR:
            if filters.unit_id is not None:
                stmt = stmt.where(Collaborator.unit_id == filters.unit_id)
            if filters.brand_id is not None or filters.economic_group_id is not None:
                stmt = stmt.join(Unit, Unit.id == Collaborator.unit_id)
                if filters.brand_id is not None:
                    stmt = stmt.where(Unit.brand_id == filters.brand_id)
                if filters.economic_group_id is not None:
                    stmt = (
                        stmt.join(Brand, Brand.id == Unit.brand_id)
                        .where(Brand.economic_group_id == filters.economic_group_id)
                    )

        return stmt

    def _apply_sorting(self, stmt: Select, sort: SortParams) -> Select:
        """Apply whitelisted sorting, falling back to the default column."""
        allowed = SORT_FIELDS[self.entity_type]
        field_name = sort.field if sort.field in allowed else allowed[0]
        column = getattr(self.model, field_name)

        if sort.order == "desc":
            return stmt.order_by(column.desc(), self.model.id.desc())
        return stmt.order_by(column.asc(), self.model.id.asc())

    # =========================================================================
    # Mutations
    # =========================================================================

    def add(self, record: Base) -> Base:
        """Stage a new record and flush it to obtain its id."""
        self.session.add(record)
        self.session.flush()
        return record

    def delete(self, record: Base) -> None:
        """Delete a record and flush so constraint violations surface immediately."""
        self.session.delete(record)
        self.session.flush()
