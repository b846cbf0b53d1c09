"""Create economic_group, brand, unit and collaborator tables.

Revision ID: 001
Create Date: 2025-02-05 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    """Create the four hierarchy tables with unique and RESTRICT foreign key constraints."""

    op.create_table(
        "economic_group",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("name", name="uq_economic_group_name"),
    )

    op.create_table(
        "brand",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column(
            "economic_group_id",
            sa.Integer,
            sa.ForeignKey(
                "economic_group.id",
                ondelete="RESTRICT",
                name="fk_brand_economic_group_id_economic_group",
            ),
            nullable=False,
        ),
        *_timestamps(),
        # Brand names only need to be unique inside their economic group
        sa.UniqueConstraint("economic_group_id", "name", name="uq_brand_group_name"),
    )
    op.create_index("idx_brand_economic_group", "brand", ["economic_group_id"])

    op.create_table(
        "unit",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("trade_name", sa.String(255), nullable=False),
        sa.Column("legal_name", sa.String(255), nullable=False),
        sa.Column("tax_id", sa.String(14), nullable=False),
        sa.Column(
            "brand_id",
            sa.Integer,
            sa.ForeignKey("brand.id", ondelete="RESTRICT", name="fk_unit_brand_id_brand"),
            nullable=False,
        ),
        *_timestamps(),
        sa.UniqueConstraint("tax_id", name="uq_unit_tax_id"),
    )
    op.create_index("idx_unit_brand", "unit", ["brand_id"])

    op.create_table(
        "collaborator",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("personal_tax_id", sa.String(11), nullable=False),
        sa.Column(
            "unit_id",
            sa.Integer,
            sa.ForeignKey("unit.id", ondelete="RESTRICT", name="fk_collaborator_unit_id_unit"),
            nullable=False,
        ),
        *_timestamps(),
        sa.UniqueConstraint("email", name="uq_collaborator_email"),
        sa.UniqueConstraint("personal_tax_id", name="uq_collaborator_personal_tax_id"),
    )
    op.create_index("idx_collaborator_unit", "collaborator", ["unit_id"])
    op.create_index("idx_collaborator_name", "collaborator", ["name"])


def downgrade() -> None:
    """Drop the hierarchy tables, leaves first."""

    op.drop_index("idx_collaborator_name", table_name="collaborator")
    op.drop_index("idx_collaborator_unit", table_name="collaborator")
    op.drop_table("collaborator")

    op.drop_index("idx_unit_brand", table_name="unit")
    op.drop_table("unit")

    op.drop_index("idx_brand_economic_group", table_name="brand")
    op.drop_table("brand")

    op.drop_table("economic_group")
