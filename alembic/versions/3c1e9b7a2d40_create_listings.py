"""Create listings

Revision ID: 3c1e9b7a2d40
Revises:
Create Date: 2026-10-19 10:12:31.402117

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "3c1e9b7a2d40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "listings",
        sa.Column("id", sa.BigInteger(), autoincrement=True, nullable=False),
        sa.Column("market", sa.String(length=20), nullable=False),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("user_id", sa.BigInteger(), nullable=True),
        sa.Column("location", sa.String(length=200), nullable=True),
        sa.Column("latitude", sa.Numeric(9, 6), nullable=True),
        sa.Column("longitude", sa.Numeric(9, 6), nullable=True),
        sa.Column("published", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("wizard_status", sa.String(length=30), nullable=True),
        sa.Column("membership", sa.String(length=30), nullable=True),
        sa.Column(
            "interest_options",
            postgresql.ARRAY(sa.String(length=50)),
            nullable=False,
            server_default="{}",
        ),
        sa.Column("percent_fee", sa.Numeric(5, 2), nullable=True),
        sa.Column("aum", sa.Numeric(16, 2), nullable=True),
        sa.Column("gdc", sa.Numeric(14, 2), nullable=True),
        sa.Column("clearing_firm", sa.String(length=100), nullable=True),
        sa.Column("broker_dealer", sa.String(length=100), nullable=True),
        sa.Column("advisor_id", sa.Integer(), nullable=True),
        sa.Column("revenue", sa.Numeric(14, 2), nullable=True),
        sa.Column("services", postgresql.ARRAY(sa.String(length=50)), nullable=False, server_default="{}"),
        sa.Column("credentials", postgresql.ARRAY(sa.String(length=50)), nullable=False, server_default="{}"),
        sa.Column("cpa_id", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_listings_user_id", "listings", ["user_id"])
    op.create_index("ix_listings_market_published_at", "listings", ["market", "published_at"])
    op.create_index("ix_listings_lat_lon", "listings", ["latitude", "longitude"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_listings_lat_lon", table_name="listings")
    op.drop_index("ix_listings_market_published_at", table_name="listings")
    op.drop_index("ix_listings_user_id", table_name="listings")
    op.drop_table("listings")
