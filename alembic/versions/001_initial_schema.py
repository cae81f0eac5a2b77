"""initial schema

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-10-19 00:00:00.000000
"""
from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    listing_status = sa.Enum(
        "UNAPPROVED",
        "DISAPPROVED",
        "ACTIVE",
        "ENDED",
        "REMOVED",
        name="listing_status",
    )
    listing_status.create(op.get_bind(), checkfirst=True)

    listing_condition = sa.Enum("NEW", "LIKE_NEW", "USED", name="listing_condition")
    listing_condition.create(op.get_bind(), checkfirst=True)

    # Reference data
    op.create_table(
        "categories",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(128), nullable=False, unique=True),
    )
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("display_name", sa.String(256), nullable=False),
    )

    # Catalog
    op.create_table(
        "listings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(256), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("condition", listing_condition, nullable=False),
        sa.Column(
            "category_id",
            sa.Integer(),
            sa.ForeignKey("categories.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column(
            "seller_id",
            sa.Integer(),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("status", listing_status, nullable=False),
        sa.Column("status_changed_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.CheckConstraint("price >= 0", name="ck_listings_price_non_negative"),
    )
    op.create_index("ix_listings_category_id", "listings", ["category_id"])
    op.create_index("ix_listings_seller_id", "listings", ["seller_id"])
    op.create_index("ix_listings_status", "listings", ["status"])
    op.create_index("ix_listings_status_category", "listings", ["status", "category_id"])

    # Status history table for the moderation audit trail
    op.create_table(
        "listing_status_history",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "listing_id",
            sa.Integer(),
            sa.ForeignKey("listings.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("from_status", listing_status, nullable=True),
        sa.Column("to_status", listing_status, nullable=False),
        sa.Column(
            "transitioned_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column("triggered_by", sa.String(256), nullable=False),
    )
    op.create_index(
        "ix_listing_status_history_listing_id", "listing_status_history", ["listing_id"]
    )


def downgrade() -> None:
    op.drop_table("listing_status_history")
    op.drop_table("listings")
    op.drop_table("users")
    op.drop_table("categories")
    sa.Enum(name="listing_condition").drop(op.get_bind(), checkfirst=True)
    sa.Enum(name="listing_status").drop(op.get_bind(), checkfirst=True)
