"""SQL Event Repository: EventRepository over an AsyncSession.

Invariants:
    - Ownership is transitive: every statement joins cats and filters on
      cats.owner_id, so a foreign event is reported as NotFoundError
    - History is ordered by timestamp descending (id breaks ties) and paged
      with OFFSET (page - 1) * limit
    - Aggregations run as one GROUP BY statement each; no row cap, no raw rows
    - Time ranges are inclusive on both ends
"""

import logging
from datetime import datetime
from typing import Any, Mapping

from sqlalchemy import case, delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from nekolog.core.domain_types import CatId, EventId, EventType, Granularity, OwnerId
from nekolog.core.errors import (
    EVENT_RESOURCE, DatabaseError, DomainError, NotFoundError,
)
from nekolog.core.period_keys import to_utc, total_pages
from nekolog.core.records import (
    CatCounts, EventPage, NewToiletEvent, PeriodCounts, ToiletEvent,
)
from nekolog.core.repository_protocols import EventsFilter
from nekolog.core.result import Err, Ok, Result
from nekolog.db.base import utcnow
from nekolog.infrastructure.period_sql import period_key_expression
from nekolog.models.cat import CatModel
from nekolog.models.toilet_event import ToiletEventModel

logger = logging.getLogger(__name__)

_UPDATABLE_FIELDS = frozenset({"type", "timestamp", "note"})

_URINE_COUNT = func.sum(
    case((ToiletEventModel.type == EventType.URINE.value, 1), else_=0),
)
_FECES_COUNT = func.sum(
    case((ToiletEventModel.type == EventType.FECES.value, 1), else_=0),
)


def to_event(row: ToiletEventModel) -> ToiletEvent:
    return ToiletEvent(
        id=EventId(row.id),
        cat_id=CatId(row.cat_id),
        type=EventType(row.type),
        timestamp=to_utc(row.timestamp),
        note=row.note,
        created_at=to_utc(row.created_at),
        updated_at=to_utc(row.updated_at),
    )


def _owned_events(owner_id: OwnerId):
    return (
        select(ToiletEventModel)
        .join(CatModel, CatModel.id == ToiletEventModel.cat_id)
        .where(CatModel.owner_id == owner_id)
    )


def _in_range(start: datetime, end: datetime) -> list:
    return [
        ToiletEventModel.timestamp >= to_utc(start),
        ToiletEventModel.timestamp <= to_utc(end),
    ]


class SqlEventRepository:
    """Toilet event persistence and aggregation bound to one session."""

    def __init__(self, db: AsyncSession):
        self._db = db

    async def _failure(self, operation: str, message: str, **extra: Any) -> Err:
        await self._db.rollback()
        logger.error(
            f"EventRepository.{operation} failed",
            exc_info=True,
            extra={"operation": f"event.{operation}", **extra},
        )
        return Err(DatabaseError(message))

    async def _find_row(
        self, event_id: EventId, owner_id: OwnerId,
    ) -> ToiletEventModel | None:
        result = await self._db.execute(
            _owned_events(owner_id).where(ToiletEventModel.id == event_id),
        )
        return result.scalar_one_or_none()

    # ─── CRUD ────────────────────────────────────────────────────

    async def create(
        self, event: NewToiletEvent,
    ) -> Result[ToiletEvent, DomainError]:
        now = utcnow()
        row = ToiletEventModel(
            id=event.id,
            cat_id=event.cat_id,
            type=EventType(event.type).value,
            timestamp=to_utc(event.timestamp),
            note=event.note,
            created_at=now,
            updated_at=now,
        )
        try:
            self._db.add(row)
            await self._db.commit()
        except SQLAlchemyError:
            return await self._failure(
                "create", "Failed to create toilet event", cat_id=event.cat_id,
            )
        logger.info(
            f"Toilet event recorded: {row.type}",
            extra={"event_id": event.id, "cat_id": event.cat_id},
        )
        return Ok(to_event(row))

    async def update(
        self, event_id: EventId, owner_id: OwnerId, changes: Mapping[str, Any],
    ) -> Result[ToiletEvent, DomainError]:
        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot update toilet event fields: {sorted(unknown)}")
        try:
            row = await self._find_row(event_id, owner_id)
            if row is None:
                return Err(NotFoundError(EVENT_RESOURCE, event_id))
            for name, value in changes.items():
                match name:
                    case "type":
                        value = EventType(value).value
                    case "timestamp":
                        value = to_utc(value)
                setattr(row, name, value)
            row.updated_at = utcnow()
            await self._db.commit()
        except SQLAlchemyError:
            return await self._failure(
                "update", "Failed to update toilet event",
                event_id=event_id, owner_id=owner_id,
            )
        return Ok(to_event(row))

    async def delete(
        self, event_id: EventId, owner_id: OwnerId,
    ) -> Result[None, DomainError]:
        owned = select(ToiletEventModel.id).join(
            CatModel, CatModel.id == ToiletEventModel.cat_id,
        ).where(
            ToiletEventModel.id == event_id, CatModel.owner_id == owner_id,
        )
        try:
            result = await self._db.execute(
                delete(ToiletEventModel).where(ToiletEventModel.id.in_(owned)),
            )
            if result.rowcount == 0:
                await self._db.rollback()
                return Err(NotFoundError(EVENT_RESOURCE, event_id))
            await self._db.commit()
        except SQLAlchemyError:
            return await self._failure(
                "delete", "Failed to delete toilet event",
                event_id=event_id, owner_id=owner_id,
            )
        logger.info("Toilet event deleted", extra={"event_id": event_id})
        return Ok(None)

    async def find_by_id(
        self, event_id: EventId, owner_id: OwnerId,
    ) -> Result[ToiletEvent | None, DomainError]:
        try:
            row = await self._find_row(event_id, owner_id)
        except SQLAlchemyError:
            return await self._failure(
                "find_by_id", "Failed to find toilet event",
                event_id=event_id, owner_id=owner_id,
            )
        return Ok(to_event(row) if row else None)

    # ─── History ─────────────────────────────────────────────────

    async def find_with_filters(
        self, owner_id: OwnerId, query: EventsFilter,
    ) -> Result[EventPage, DomainError]:
        conditions = [CatModel.owner_id == owner_id]
        if query.cat_id is not None:
            conditions.append(ToiletEventModel.cat_id == query.cat_id)
        if query.type is not None:
            conditions.append(ToiletEventModel.type == EventType(query.type).value)
        if query.from_ is not None:
            conditions.append(ToiletEventModel.timestamp >= to_utc(query.from_))
        if query.to is not None:
            conditions.append(ToiletEventModel.timestamp <= to_utc(query.to))

        count_stmt = (
            select(func.count(ToiletEventModel.id))
            .select_from(ToiletEventModel)
            .join(CatModel, CatModel.id == ToiletEventModel.cat_id)
            .where(*conditions)
        )
        page_stmt = (
            select(ToiletEventModel)
            .join(CatModel, CatModel.id == ToiletEventModel.cat_id)
            .where(*conditions)
            .order_by(ToiletEventModel.timestamp.desc(), ToiletEventModel.id.desc())
            .offset((query.page - 1) * query.limit)
            .limit(query.limit)
        )
        try:
            total = (await self._db.execute(count_stmt)).scalar_one()
            rows = (await self._db.execute(page_stmt)).scalars().all()
        except SQLAlchemyError:
            return await self._failure(
                "find_with_filters", "Failed to find toilet events", owner_id=owner_id,
            )
        return Ok(EventPage(
            events=[to_event(r) for r in rows],
            total=total,
            page=query.page,
            limit=query.limit,
            total_pages=total_pages(total, query.limit),
        ))

    # ─── Aggregation ─────────────────────────────────────────────

    async def aggregate_by_cat(
        self, owner_id: OwnerId, start: datetime, end: datetime,
    ) -> Result[list[CatCounts], DomainError]:
        """Per-cat urine/feces counts in [start, end]; cats with no events are absent."""
        stmt = (
            select(
                ToiletEventModel.cat_id,
                _URINE_COUNT.label("urine_count"),
                _FECES_COUNT.label("feces_count"),
            )
            .select_from(ToiletEventModel)
            .join(CatModel, CatModel.id == ToiletEventModel.cat_id)
            .where(CatModel.owner_id == owner_id, *_in_range(start, end))
            .group_by(ToiletEventModel.cat_id)
        )
        try:
            rows = (await self._db.execute(stmt)).all()
        except SQLAlchemyError:
            return await self._failure(
                "aggregate_by_cat", "Failed to aggregate toilet events",
                owner_id=owner_id,
            )
        return Ok([
            CatCounts(
                cat_id=CatId(r.cat_id),
                urine_count=int(r.urine_count or 0),
                feces_count=int(r.feces_count or 0),
            )
            for r in rows
        ])

    async def aggregate_by_period(
        self,
        owner_id: OwnerId,
        start: datetime,
        end: datetime,
        granularity: Granularity,
        cat_id: CatId | None = None,
    ) -> Result[list[PeriodCounts], DomainError]:
        """Bucketed counts in [start, end], ascending by bucket key.

        Only buckets containing at least one event are returned.
        """
        bucket = period_key_expression(granularity, ToiletEventModel.timestamp)
        conditions = [CatModel.owner_id == owner_id, *_in_range(start, end)]
        if cat_id is not None:
            conditions.append(ToiletEventModel.cat_id == cat_id)

        stmt = (
            select(
                bucket.label("bucket"),
                _URINE_COUNT.label("urine_count"),
                _FECES_COUNT.label("feces_count"),
            )
            .select_from(ToiletEventModel)
            .join(CatModel, CatModel.id == ToiletEventModel.cat_id)
            .where(*conditions)
            .group_by(bucket)
            .order_by(bucket)
        )
        try:
            rows = (await self._db.execute(stmt)).all()
        except SQLAlchemyError:
            return await self._failure(
                "aggregate_by_period", "Failed to aggregate toilet events",
                owner_id=owner_id, cat_id=cat_id,
            )
        return Ok([
            PeriodCounts(
                date=r.bucket,
                urine_count=int(r.urine_count or 0),
                feces_count=int(r.feces_count or 0),
            )
            for r in rows
        ])
