"""Initial schema: cats and toilet_events.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "cats",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("owner_id", sa.String(255), nullable=False),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("birth_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("breed", sa.String(50), nullable=True),
        sa.Column("weight", sa.Float, nullable=True),
        sa.Column("image_url", sa.String(2000), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("idx_cats_owner_id", "cats", ["owner_id"])

    op.create_table(
        "toilet_events",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column(
            "cat_id", sa.String(36),
            sa.ForeignKey("cats.id", ondelete="CASCADE"), nullable=False,
        ),
        sa.Column("type", sa.String(10), nullable=False),
        sa.Column("timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.Column("note", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("type IN ('urine', 'feces')", name="ck_toilet_events_type"),
    )
    op.create_index("idx_toilet_events_cat_id", "toilet_events", ["cat_id"])
    op.create_index("idx_toilet_events_timestamp", "toilet_events", ["timestamp"])
    op.create_index(
        "idx_toilet_events_cat_timestamp", "toilet_events", ["cat_id", "timestamp"],
    )


def downgrade() -> None:
    op.drop_index("idx_toilet_events_cat_timestamp", table_name="toilet_events")
    op.drop_index("idx_toilet_events_timestamp", table_name="toilet_events")
    op.drop_index("idx_toilet_events_cat_id", table_name="toilet_events")
    op.drop_table("toilet_events")
    op.drop_index("idx_cats_owner_id", table_name="cats")
    op.drop_table("cats")
