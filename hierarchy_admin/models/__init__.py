"""Models package for the business hierarchy."""

from hierarchy_admin.models.base import Base
from hierarchy_admin.models.organization import Brand, Collaborator, EconomicGroup, Unit

__all__ = [
    "Base",
    "Brand",
    "Collaborator",
    "EconomicGroup",
    "Unit",
]
