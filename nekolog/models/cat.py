"""Cat ORM: persists one registered animal.

Invariants:
    - id is a server-generated UUID string, never updated
    - owner_id is the identity provider's opaque subject; every query filters on it
    - name is non-nullable, <= 50 chars (enforced upstream by CreateCatCommand)
    - updated_at is refreshed by the repository on every update

Design Decisions:
    - String ids instead of native UUID columns: ids arrive as opaque path
      segments and a non-UUID value must read as "not found", not a driver error
"""

from datetime import datetime

from sqlalchemy import String, Float, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column

from nekolog.db.base import Base, utcnow


class CatModel(Base):
    """Cat row, scoped by owner_id."""
    __tablename__ = "cats"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    owner_id: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    birth_date: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    breed: Mapped[str | None] = mapped_column(String(50), nullable=True)
    weight: Mapped[float | None] = mapped_column(Float, nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow,
    )

    __table_args__ = (
        Index("idx_cats_owner_id", "owner_id"),
    )
