"""Initial schema — venues, visits, crossing_counts, crossed_path_relationships.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-18

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import UUID

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "venues",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False, unique=True),
        sa.Column("latitude", sa.Float, nullable=False),
        sa.Column("longitude", sa.Float, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    op.create_table(
        "visits",
        sa.Column("id", sa.BigInteger, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(64), nullable=False),
        sa.Column("venue_id", sa.String(64), sa.ForeignKey("venues.id"), nullable=False),
        sa.Column("venue_name", sa.String(255), nullable=False),
        sa.Column("latitude", sa.Float, nullable=False),
        sa.Column("longitude", sa.Float, nullable=False),
        sa.Column("visited_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("recorded_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_visits_venue_id_user_id", "visits", ["venue_id", "user_id"])
    op.create_index("ix_visits_user_id", "visits", ["user_id"])

    op.create_table(
        "crossing_counts",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_low_id", sa.String(64), nullable=False),
        sa.Column("user_high_id", sa.String(64), nullable=False),
        sa.Column("venue_id", sa.String(64), nullable=False),
        sa.Column("venue_name", sa.String(255), nullable=False),
        sa.Column("latitude", sa.Float, nullable=False),
        sa.Column("longitude", sa.Float, nullable=False),
        sa.Column("crossing_count", sa.Integer, nullable=False, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("user_low_id", "user_high_id", "venue_id", name="uq_crossing_counts_pair_venue"),
        sa.CheckConstraint("user_low_id < user_high_id", name="ck_crossing_counts_canonical"),
        sa.CheckConstraint("crossing_count >= 1", name="ck_crossing_counts_positive"),
    )
    op.create_index("ix_crossing_counts_venue_id", "crossing_counts", ["venue_id"])

    op.create_table(
        "crossed_path_relationships",
        sa.Column("id", UUID(as_uuid=True), primary_key=True),
        sa.Column("user_low_id", sa.String(64), nullable=False),
        sa.Column("user_high_id", sa.String(64), nullable=False),
        sa.Column("venue_name", sa.String(255), nullable=False),
        sa.Column("latitude", sa.Float, nullable=False),
        sa.Column("longitude", sa.Float, nullable=False),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("user_low_id", "user_high_id", name="uq_crossed_path_relationships_pair"),
        sa.CheckConstraint("user_low_id < user_high_id", name="ck_crossed_path_relationships_canonical"),
    )
    op.create_index(
        "ix_crossed_path_relationships_user_high_id",
        "crossed_path_relationships", ["user_high_id"],
    )


def downgrade() -> None:
    op.drop_index("ix_crossed_path_relationships_user_high_id", "crossed_path_relationships")
    op.drop_table("crossed_path_relationships")
    op.drop_index("ix_crossing_counts_venue_id", "crossing_counts")
    op.drop_table("crossing_counts")
    op.drop_index("ix_visits_user_id", "visits")
    op.drop_index("ix_visits_venue_id_user_id", "visits")
    op.drop_table("visits")
    op.drop_table("venues")
