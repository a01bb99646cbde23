"""Statistics Workflows: daily dashboard summary and period chart series.

Invariants:
    - Counting happens in the database (aggregate_by_cat / aggregate_by_period);
      no workflow fetches raw event rows to count them
    - Daily summary zero-fills: every owned cat appears, in roster order,
      even with no events that day
    - Chart series omit empty buckets: only observed bucket keys appear,
      ascending
    - Totals are always sums of the per-entry counts

Design Decisions:
    - The two zero-fill policies differ on purpose: the summary is a roster,
      the chart is a sparse time series
    - The cat roster is read before the aggregate; a failure in either step
      is returned unchanged
"""

from datetime import date
from typing import Any

from nekolog.core.domain_types import CatId, OwnerId
from nekolog.core.errors import CAT_RESOURCE, DomainError, NotFoundError
from nekolog.core.period_keys import (
    EPOCH_START, FAR_FUTURE, day_bounds, period_to_granularity, today_utc,
)
from nekolog.core.records import (
    Cat, CatCounts, CatSummary, ChartData, ChartPoint, DailySummary, PeriodCounts,
)
from nekolog.core.repository_protocols import CatRepository, EventRepository
from nekolog.core.result import Err, Ok, ResultAsync
from nekolog.schemas.commands import StatsQuery
from nekolog.schemas.validate import validate


def build_daily_summary(
    day: date, cats: list[Cat], counts: list[CatCounts],
) -> DailySummary:
    """Join the full roster with the sparse per-cat aggregate. Pure."""
    by_cat = {c.cat_id: c for c in counts}
    summaries = []
    for cat in cats:
        agg = by_cat.get(cat.id)
        urine = agg.urine_count if agg else 0
        feces = agg.feces_count if agg else 0
        summaries.append(CatSummary(
            cat_id=cat.id,
            cat_name=cat.name,
            urine_count=urine,
            feces_count=feces,
            total_count=urine + feces,
        ))

    total_urine = sum(s.urine_count for s in summaries)
    total_feces = sum(s.feces_count for s in summaries)
    return DailySummary(
        date=day.isoformat(),
        cats=summaries,
        total_urine_count=total_urine,
        total_feces_count=total_feces,
        total_count=total_urine + total_feces,
    )


def to_chart_points(buckets: list[PeriodCounts]) -> list[ChartPoint]:
    return [
        ChartPoint(
            date=b.date,
            urine_count=b.urine_count,
            feces_count=b.feces_count,
            total_count=b.urine_count + b.feces_count,
        )
        for b in buckets
    ]


def get_daily_summary(
    owner_id: OwnerId,
    cat_repo: CatRepository,
    event_repo: EventRepository,
    target_date: date | None = None,
) -> ResultAsync[DailySummary, DomainError]:
    """Roster -> per-cat aggregate for the UTC day -> zero-filled summary.

    `target_date` defaults to today (UTC); tests pass a fixed day.
    """
    day = target_date or today_utc()
    start, end = day_bounds(day)

    def aggregate(cats: list[Cat]):
        return ResultAsync(
            event_repo.aggregate_by_cat(owner_id, start, end),
        ).map(lambda counts: build_daily_summary(day, cats, counts))

    return ResultAsync(cat_repo.find_all_by_owner(owner_id)).and_then(aggregate)


def get_chart_data(
    query: Any,
    owner_id: OwnerId,
    cat_repo: CatRepository,
    event_repo: EventRepository,
) -> ResultAsync[ChartData, DomainError]:
    """Validate -> (optional) verify cat -> aggregate by period bucket."""
    def resolve_cat(stats: StatsQuery):
        if stats.cat_id is None:
            return Ok((stats, None))
        cat_id = CatId(stats.cat_id)
        return ResultAsync(cat_repo.find_by_id(cat_id, owner_id)).and_then(
            lambda cat: (
                Ok((stats, cat)) if cat is not None
                else Err(NotFoundError(CAT_RESOURCE, cat_id))
            ),
        )

    def aggregate(resolved: tuple[StatsQuery, Cat | None]):
        stats, cat = resolved
        granularity = period_to_granularity(stats.period)
        return ResultAsync(event_repo.aggregate_by_period(
            owner_id,
            stats.from_ or EPOCH_START,
            stats.to or FAR_FUTURE,
            granularity,
            cat.id if cat else None,
        )).map(lambda buckets: ChartData(
            cat_id=cat.id if cat else None,
            cat_name=cat.name if cat else None,
            period=granularity,
            data=to_chart_points(buckets),
        ))

    return (
        ResultAsync.from_result(validate(StatsQuery, query))
        .and_then(resolve_cat)
        .and_then(aggregate)
    )
