"""Cat Routes: thin HTTP adapters over the cat workflows.

Invariants:
    - Handlers resolve the owner, call one workflow, and render its Ok value;
      every Err is raised as DomainFailure for the global handler
    - DELETE requires ?confirmed=true, checked by the workflow
"""

from fastapi import APIRouter, Depends, Query, Request, status

from nekolog.api.dependencies import get_cat_repository, get_owner_id, read_json_body
from nekolog.api.error_handlers import value_or_raise
from nekolog.core.domain_types import CatId, OwnerId
from nekolog.infrastructure.cat_repository import SqlCatRepository
from nekolog.schemas.responses import CatEnvelope, CatListEnvelope, CatOut, SuccessOut
from nekolog.services import cat_workflows

router = APIRouter(prefix="/api/cats", tags=["cats"])


@router.get("", response_model=CatListEnvelope)
async def list_cats(
    owner_id: OwnerId = Depends(get_owner_id),
    cat_repo: SqlCatRepository = Depends(get_cat_repository),
):
    cats = value_or_raise(await cat_workflows.list_cats(owner_id, cat_repo))
    return CatListEnvelope(cats=[CatOut.model_validate(c) for c in cats])


@router.post(
    "", response_model=CatEnvelope, status_code=status.HTTP_201_CREATED,
)
async def register_cat(
    request: Request,
    owner_id: OwnerId = Depends(get_owner_id),
    cat_repo: SqlCatRepository = Depends(get_cat_repository),
):
    data = await read_json_body(request)
    cat = value_or_raise(
        await cat_workflows.register_cat(data, owner_id, cat_repo),
    )
    return CatEnvelope(cat=CatOut.model_validate(cat))


@router.get("/{cat_id}", response_model=CatEnvelope)
async def get_cat(
    cat_id: str,
    owner_id: OwnerId = Depends(get_owner_id),
    cat_repo: SqlCatRepository = Depends(get_cat_repository),
):
    cat = value_or_raise(
        await cat_workflows.get_cat(CatId(cat_id), owner_id, cat_repo),
    )
    return CatEnvelope(cat=CatOut.model_validate(cat))


@router.put("/{cat_id}", response_model=CatEnvelope)
async def update_cat(
    cat_id: str,
    request: Request,
    owner_id: OwnerId = Depends(get_owner_id),
    cat_repo: SqlCatRepository = Depends(get_cat_repository),
):
    data = await read_json_body(request)
    cat = value_or_raise(
        await cat_workflows.update_cat(CatId(cat_id), data, owner_id, cat_repo),
    )
    return CatEnvelope(cat=CatOut.model_validate(cat))


@router.delete("/{cat_id}", response_model=SuccessOut)
async def delete_cat(
    cat_id: str,
    confirmed: str | None = Query(None),
    owner_id: OwnerId = Depends(get_owner_id),
    cat_repo: SqlCatRepository = Depends(get_cat_repository),
):
    """Delete a cat and, by cascade, all of its toilet events."""
    value_or_raise(await cat_workflows.delete_cat(
        CatId(cat_id), confirmed == "true", owner_id, cat_repo,
    ))
    return SuccessOut()
