"""Statistics Routes: daily dashboard summary and chart series."""

from fastapi import APIRouter, Depends, Request

from nekolog.api.dependencies import get_cat_repository, get_event_repository, get_owner_id
from nekolog.api.error_handlers import value_or_raise
from nekolog.core.domain_types import OwnerId
from nekolog.infrastructure.cat_repository import SqlCatRepository
from nekolog.infrastructure.event_repository import SqlEventRepository
from nekolog.schemas.responses import ChartDataOut, DailySummaryOut
from nekolog.services import stats_workflows

router = APIRouter(prefix="/api/stats", tags=["stats"])


@router.get("/summary", response_model=DailySummaryOut)
async def get_daily_summary(
    owner_id: OwnerId = Depends(get_owner_id),
    cat_repo: SqlCatRepository = Depends(get_cat_repository),
    event_repo: SqlEventRepository = Depends(get_event_repository),
):
    """Today's per-cat counts (UTC), every cat listed."""
    summary = value_or_raise(
        await stats_workflows.get_daily_summary(owner_id, cat_repo, event_repo),
    )
    return DailySummaryOut.model_validate(summary)


@router.get("/chart", response_model=ChartDataOut)
async def get_chart_data(
    request: Request,
    owner_id: OwnerId = Depends(get_owner_id),
    cat_repo: SqlCatRepository = Depends(get_cat_repository),
    event_repo: SqlEventRepository = Depends(get_event_repository),
):
    """Bucketed counts over a range; query: catId, period, from, to."""
    chart = value_or_raise(await stats_workflows.get_chart_data(
        dict(request.query_params), owner_id, cat_repo, event_repo,
    ))
    return ChartDataOut.model_validate(chart)
