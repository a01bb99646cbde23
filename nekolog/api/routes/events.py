"""Toilet Event Routes: record, correct, delete and browse litter-box events.

Invariants:
    - History filters arrive as query strings (catId, type, from, to, page,
      limit) and are validated by the workflow, not by FastAPI
    - Responses wrap events as "log"/"logs"
"""

from fastapi import APIRouter, Depends, Query, Request, status

from nekolog.api.dependencies import (
    get_cat_repository, get_event_repository, get_owner_id, read_json_body,
)
from nekolog.api.error_handlers import value_or_raise
from nekolog.core.domain_types import EventId, OwnerId
from nekolog.infrastructure.cat_repository import SqlCatRepository
from nekolog.infrastructure.event_repository import SqlEventRepository
from nekolog.schemas.responses import EventEnvelope, EventOut, EventPageOut, SuccessOut
from nekolog.services import event_workflows

router = APIRouter(prefix="/api/logs", tags=["logs"])


@router.get("", response_model=EventPageOut)
async def get_history(
    request: Request,
    owner_id: OwnerId = Depends(get_owner_id),
    event_repo: SqlEventRepository = Depends(get_event_repository),
):
    page = value_or_raise(await event_workflows.get_history(
        dict(request.query_params), owner_id, event_repo,
    ))
    return EventPageOut(
        logs=[EventOut.model_validate(e) for e in page.events],
        total=page.total,
        page=page.page,
        limit=page.limit,
        total_pages=page.total_pages,
    )


@router.post(
    "", response_model=EventEnvelope, status_code=status.HTTP_201_CREATED,
)
async def add_event(
    request: Request,
    owner_id: OwnerId = Depends(get_owner_id),
    cat_repo: SqlCatRepository = Depends(get_cat_repository),
    event_repo: SqlEventRepository = Depends(get_event_repository),
):
    """Record one event; timestamp defaults to now."""
    data = await read_json_body(request)
    event = value_or_raise(
        await event_workflows.add_event(data, owner_id, cat_repo, event_repo),
    )
    return EventEnvelope(log=EventOut.model_validate(event))


@router.get("/{event_id}", response_model=EventEnvelope)
async def get_event(
    event_id: str,
    owner_id: OwnerId = Depends(get_owner_id),
    event_repo: SqlEventRepository = Depends(get_event_repository),
):
    event = value_or_raise(
        await event_workflows.get_event(EventId(event_id), owner_id, event_repo),
    )
    return EventEnvelope(log=EventOut.model_validate(event))


@router.put("/{event_id}", response_model=EventEnvelope)
async def update_event(
    event_id: str,
    request: Request,
    owner_id: OwnerId = Depends(get_owner_id),
    event_repo: SqlEventRepository = Depends(get_event_repository),
):
    data = await read_json_body(request)
    event = value_or_raise(await event_workflows.update_event(
        EventId(event_id), data, owner_id, event_repo,
    ))
    return EventEnvelope(log=EventOut.model_validate(event))


@router.delete("/{event_id}", response_model=SuccessOut)
async def delete_event(
    event_id: str,
    confirmed: str | None = Query(None),
    owner_id: OwnerId = Depends(get_owner_id),
    event_repo: SqlEventRepository = Depends(get_event_repository),
):
    value_or_raise(await event_workflows.delete_event(
        EventId(event_id), confirmed == "true", owner_id, event_repo,
    ))
    return SuccessOut()
