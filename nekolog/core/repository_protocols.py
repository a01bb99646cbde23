"""Boundary Protocols: contracts between workflows and storage.

Invariants:
    - Workflows NEVER import a concrete repository; they receive these via arguments
    - Every method is async and returns a Result; storage faults become
      Err(DatabaseError), never exceptions
    - find_by_id returns Ok(None) for absence; update/delete return
      Err(NotFoundError) when nothing matches id + owner
    - Event ownership is transitive: an event belongs to the owner of its cat
    - aggregate_* are computed by the storage engine's GROUP BY with no row cap

Design Decisions:
    - Protocol over ABC: structural subtyping, stub repositories in tests need
      no inheritance
"""

from datetime import datetime
from typing import Any, Mapping, Protocol

from nekolog.core.domain_types import CatId, EventId, Granularity, OwnerId
from nekolog.core.errors import DomainError
from nekolog.core.records import (
    Cat, CatCounts, EventPage, NewCat, NewToiletEvent, PeriodCounts, ToiletEvent,
)
from nekolog.core.result import Result


class EventsFilter(Protocol):
    """Structural contract for history queries (satisfied by EventsQuery)."""
    cat_id: str | None
    type: Any
    from_: datetime | None
    to: datetime | None
    page: int
    limit: int


class CatRepository(Protocol):
    """Contract for cat persistence, implemented in infrastructure/."""
    async def create(self, cat: NewCat) -> Result[Cat, DomainError]: ...
    async def update(
        self, cat_id: CatId, owner_id: OwnerId, changes: Mapping[str, Any],
    ) -> Result[Cat, DomainError]: ...
    async def delete(
        self, cat_id: CatId, owner_id: OwnerId,
    ) -> Result[None, DomainError]: ...
    async def find_by_id(
        self, cat_id: CatId, owner_id: OwnerId,
    ) -> Result[Cat | None, DomainError]: ...
    async def find_all_by_owner(
        self, owner_id: OwnerId,
    ) -> Result[list[Cat], DomainError]: ...


class EventRepository(Protocol):
    """Contract for toilet event persistence and aggregation."""
    async def create(
        self, event: NewToiletEvent,
    ) -> Result[ToiletEvent, DomainError]: ...
    async def update(
        self, event_id: EventId, owner_id: OwnerId, changes: Mapping[str, Any],
    ) -> Result[ToiletEvent, DomainError]: ...
    async def delete(
        self, event_id: EventId, owner_id: OwnerId,
    ) -> Result[None, DomainError]: ...
    async def find_by_id(
        self, event_id: EventId, owner_id: OwnerId,
    ) -> Result[ToiletEvent | None, DomainError]: ...
    async def find_with_filters(
        self, owner_id: OwnerId, query: EventsFilter,
    ) -> Result[EventPage, DomainError]: ...
    async def aggregate_by_cat(
        self, owner_id: OwnerId, start: datetime, end: datetime,
    ) -> Result[list[CatCounts], DomainError]: ...
    async def aggregate_by_period(
        self,
        owner_id: OwnerId,
        start: datetime,
        end: datetime,
        granularity: Granularity,
        cat_id: CatId | None = None,
    ) -> Result[list[PeriodCounts], DomainError]: ...
