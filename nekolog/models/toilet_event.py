"""ToiletEvent ORM: persists one logged litter-box use.

Invariants:
    - Always belongs to a Cat (cat_id FK, ON DELETE CASCADE)
    - type is one of: urine, feces
    - timestamp is stored in UTC; aggregation buckets derive from it

Design Decisions:
    - No owner column: ownership is resolved by joining cats
    - Composite (cat_id, timestamp) index serves per-cat chart queries
"""

from datetime import datetime

from sqlalchemy import String, Text, DateTime, ForeignKey, Index, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from nekolog.db.base import Base, utcnow


class ToiletEventModel(Base):
    """Toilet event row."""
    __tablename__ = "toilet_events"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    cat_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("cats.id", ondelete="CASCADE"), nullable=False,
    )
    type: Mapped[str] = mapped_column(String(10), nullable=False)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )

    __table_args__ = (
        CheckConstraint("type IN ('urine', 'feces')", name="ck_toilet_events_type"),
        Index("idx_toilet_events_cat_id", "cat_id"),
        Index("idx_toilet_events_timestamp", "timestamp"),
        Index("idx_toilet_events_cat_timestamp", "cat_id", "timestamp"),
    )
