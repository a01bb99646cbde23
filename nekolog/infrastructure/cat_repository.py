"""SQL Cat Repository: CatRepository over an AsyncSession.

Invariants:
    - Every statement filters on owner_id; a foreign cat is indistinguishable
      from a missing one (NotFoundError(CAT_RESOURCE, id))
    - SQLAlchemy failures are rolled back, logged with the traceback, and
      returned as DatabaseError with a generic message
    - Deleting a cat relies on the ON DELETE CASCADE foreign key for its events
"""

import logging
from typing import Any, Mapping

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from nekolog.core.domain_types import CatId, OwnerId
from nekolog.core.errors import CAT_RESOURCE, DatabaseError, DomainError, NotFoundError
from nekolog.core.period_keys import to_utc
from nekolog.core.records import Cat, NewCat
from nekolog.core.result import Err, Ok, Result
from nekolog.db.base import utcnow
from nekolog.models.cat import CatModel

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = frozenset({"name", "birth_date", "breed", "weight", "image_url"})


def to_cat(row: CatModel) -> Cat:
    return Cat(
        id=CatId(row.id),
        owner_id=OwnerId(row.owner_id),
        name=row.name,
        birth_date=to_utc(row.birth_date) if row.birth_date else None,
        breed=row.breed,
        weight=row.weight,
        image_url=row.image_url,
        created_at=to_utc(row.created_at),
        updated_at=to_utc(row.updated_at),
    )


class SqlCatRepository:
    """Cat persistence bound to one request's session."""

    def __init__(self, db: AsyncSession):
        self._db = db

    async def _failure(self, operation: str, message: str, **extra: Any) -> Err:
        await self._db.rollback()
        logger.error(
            f"CatRepository.{operation} failed",
            exc_info=True,
            extra={"operation": f"cat.{operation}", **extra},
        )
        return Err(DatabaseError(message))

    async def _find_row(self, cat_id: CatId, owner_id: OwnerId) -> CatModel | None:
        result = await self._db.execute(
            select(CatModel).where(
                CatModel.id == cat_id, CatModel.owner_id == owner_id,
            ),
        )
        return result.scalar_one_or_none()

    async def create(self, cat: NewCat) -> Result[Cat, DomainError]:
        now = utcnow()
        row = CatModel(
            id=cat.id,
            owner_id=cat.owner_id,
            name=cat.name,
            birth_date=cat.birth_date,
            breed=cat.breed,
            weight=cat.weight,
            created_at=now,
            updated_at=now,
        )
        try:
            self._db.add(row)
            await self._db.commit()
        except SQLAlchemyError:
            return await self._failure(
                "create", "Failed to create cat", owner_id=cat.owner_id,
            )
        logger.info("Cat registered", extra={"cat_id": cat.id, "owner_id": cat.owner_id})
        return Ok(to_cat(row))

    async def update(
        self, cat_id: CatId, owner_id: OwnerId, changes: Mapping[str, Any],
    ) -> Result[Cat, DomainError]:
        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update cat fields: {sorted(unknown)}")
        try:
            row = await self._find_row(cat_id, owner_id)
            if row is None:
                return Err(NotFoundError(CAT_RESOURCE, cat_id))
            for name, value in changes.items():
                setattr(row, name, value)
            row.updated_at = utcnow()
            await self._db.commit()
        except SQLAlchemyError:
            return await self._failure(
                "update", "Failed to update cat", cat_id=cat_id, owner_id=owner_id,
            )
        return Ok(to_cat(row))

    async def delete(
        self, cat_id: CatId, owner_id: OwnerId,
    ) -> Result[None, DomainError]:
        try:
            result = await self._db.execute(
                delete(CatModel).where(
                    CatModel.id == cat_id, CatModel.owner_id == owner_id,
                ),
            )
            if result.rowcount == 0:
                await self._db.rollback()
                return Err(NotFoundError(CAT_RESOURCE, cat_id))
            await self._db.commit()
        except SQLAlchemyError:
            return await self._failure(
                "delete", "Failed to delete cat", cat_id=cat_id, owner_id=owner_id,
            )
        logger.info("Cat deleted", extra={"cat_id": cat_id, "owner_id": owner_id})
        return Ok(None)

    async def find_by_id(
        self, cat_id: CatId, owner_id: OwnerId,
    ) -> Result[Cat | None, DomainError]:
        try:
            row = await self._find_row(cat_id, owner_id)
        except SQLAlchemyError:
            return await self._failure(
                "find_by_id", "Failed to find cat", cat_id=cat_id, owner_id=owner_id,
            )
        return Ok(to_cat(row) if row else None)

    async def find_all_by_owner(
        self, owner_id: OwnerId,
    ) -> Result[list[Cat], DomainError]:
        try:
            result = await self._db.execute(
                select(CatModel)
                .where(CatModel.owner_id == owner_id)
                .order_by(CatModel.created_at, CatModel.id),
            )
            rows = result.scalars().all()
        except SQLAlchemyError:
            return await self._failure(
                "find_all_by_owner", "Failed to find cats", owner_id=owner_id,
            )
        return Ok([to_cat(r) for r in rows])
