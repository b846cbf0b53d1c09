"""SQLAlchemy models for the Economic Group → Brand → Unit → Collaborator hierarchy."""

from typing import Any, Dict

from sqlalchemy import ForeignKey, Index, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from hierarchy_admin.models.base import Base, TimestampMixin


# Maximum length for every free-text column in the hierarchy
NAME_MAX_LENGTH = 255

# Digit counts of the normalized tax identifiers
UNIT_TAX_ID_LENGTH = 14
PERSONAL_TAX_ID_LENGTH = 11

# Largest value of the INTEGER primary and foreign key columns
ID_MAX = 2**31 - 1


class EconomicGroup(TimestampMixin, Base):
    """Top-level organizational entity owning zero or more brands."""

    __tablename__ = "economic_group"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)

    __table_args__ = (
        UniqueConstraint("name", name="uq_economic_group_name"),
    )

    def __repr__(self) -> str:
        return f"<EconomicGroup(id={self.id}, name={self.name!r})>"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


class Brand(TimestampMixin, Base):
    """
    Commercial identity owned by one economic group.

    The name is only unique inside its economic group; two groups may
    each own a brand with the same name.
    """

    __tablename__ = "brand"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    economic_group_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("economic_group.id", ondelete="RESTRICT"),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("economic_group_id", "name", name="uq_brand_group_name"),
        Index("idx_brand_economic_group", "economic_group_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<Brand(id={self.id}, name={self.name!r}, "
            f"economic_group_id={self.economic_group_id})>"
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "economic_group_id": self.economic_group_id,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


class Unit(TimestampMixin, Base):
    """Physical or legal operating location owned by one brand."""

    __tablename__ = "unit"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    trade_name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    legal_name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)

    # Stored digit-only, see utils.normalization
    tax_id: Mapped[str] = mapped_column(String(UNIT_TAX_ID_LENGTH), nullable=False)

    brand_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("brand.id", ondelete="RESTRICT"),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("tax_id", name="uq_unit_tax_id"),
        Index("idx_unit_brand", "brand_id"),
    )

    def __repr__(self) -> str:
        return f"<Unit(id={self.id}, trade_name={self.trade_name!r}, tax_id={self.tax_id})>"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "trade_name": self.trade_name,
            "legal_name": self.legal_name,
            "tax_id": self.tax_id,
            "brand_id": self.brand_id,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }


class Collaborator(TimestampMixin, Base):
    """Person associated with one unit."""

    __tablename__ = "collaborator"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    email: Mapped[str] = mapped_column(String(NAME_MAX_LENGTH), nullable=False)
    personal_tax_id: Mapped[str] = mapped_column(String(PERSONAL_TAX_ID_LENGTH), nullable=False)
    unit_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("unit.id", ondelete="RESTRICT"),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("email", name="uq_collaborator_email"),
        UniqueConstraint("personal_tax_id", name="uq_collaborator_personal_tax_id"),
        Index("idx_collaborator_unit", "unit_id"),
        Index("idx_collaborator_name", "name"),
    )

    def __repr__(self) -> str:
        return f"<Collaborator(id={self.id}, name={self.name!r}, email={self.email!r})>"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "personal_tax_id": self.personal_tax_id,
            "unit_id": self.unit_id,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }
