"""Domain Records: immutable values exchanged between workflows and repositories.

Invariants:
    - All datetimes are timezone-aware UTC
    - New* records carry every optional attribute explicitly (None when omitted)
    - Summary and chart records are derived on demand and never persisted
"""

from dataclasses import dataclass, field
from datetime import datetime

from nekolog.core.domain_types import CatId, EventId, EventType, Granularity, OwnerId


# ─── Persisted entities ──────────────────────────────────────────

@dataclass(frozen=True)
class Cat:
    id: CatId
    owner_id: OwnerId
    name: str
    birth_date: datetime | None
    breed: str | None
    weight: float | None
    image_url: str | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class NewCat:
    id: CatId
    owner_id: OwnerId
    name: str
    birth_date: datetime | None
    breed: str | None
    weight: float | None


@dataclass(frozen=True)
class ToiletEvent:
    """One logged litter-box use."""
    id: EventId
    cat_id: CatId
    type: EventType
    timestamp: datetime
    note: str | None
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class NewToiletEvent:
    id: EventId
    cat_id: CatId
    type: EventType
    timestamp: datetime
    note: str | None


@dataclass(frozen=True)
class EventPage:
    """One page of history, newest first."""
    events: list[ToiletEvent]
    total: int
    page: int
    limit: int
    total_pages: int


# ─── Aggregates (storage-computed) ───────────────────────────────

@dataclass(frozen=True)
class CatCounts:
    cat_id: CatId
    urine_count: int
    feces_count: int


@dataclass(frozen=True)
class PeriodCounts:
    """Counts for one bucket; `date` is the bucket key."""
    date: str
    urine_count: int
    feces_count: int


# ─── Derived views ───────────────────────────────────────────────

@dataclass(frozen=True)
class CatSummary:
    cat_id: CatId
    cat_name: str
    urine_count: int
    feces_count: int
    total_count: int


@dataclass(frozen=True)
class DailySummary:
    date: str
    cats: list[CatSummary] = field(default_factory=list)
    total_urine_count: int = 0
    total_feces_count: int = 0
    total_count: int = 0


@dataclass(frozen=True)
class ChartPoint:
    date: str
    urine_count: int
    feces_count: int
    total_count: int


@dataclass(frozen=True)
class ChartData:
    cat_id: CatId | None
    cat_name: str | None
    period: Granularity
    data: list[ChartPoint] = field(default_factory=list)
