"""Request Dependencies: owner resolution and per-request repositories.

Invariants:
    - The owner id comes only from the trusted header named by
      settings.owner_header; missing or blank → UnauthorizedError before any
      workflow runs
    - Both repositories of one request share that request's AsyncSession
"""

import logging
from typing import Any

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from nekolog.api.error_handlers import DomainFailure
from nekolog.config import Settings, get_settings
from nekolog.core.domain_types import OwnerId
from nekolog.core.errors import UnauthorizedError
from nekolog.infrastructure.cat_repository import SqlCatRepository
from nekolog.infrastructure.database import get_db
from nekolog.infrastructure.event_repository import SqlEventRepository

logger = logging.getLogger(__name__)


def get_owner_id(
    request: Request, settings: Settings = Depends(get_settings),
) -> OwnerId:
    owner = request.headers.get(settings.owner_header, "").strip()
    if not owner:
        raise DomainFailure(UnauthorizedError("Authentication required"))
    return OwnerId(owner)


def get_cat_repository(db: AsyncSession = Depends(get_db)) -> SqlCatRepository:
    return SqlCatRepository(db)


def get_event_repository(
    db: AsyncSession = Depends(get_db),
) -> SqlEventRepository:
    return SqlEventRepository(db)


async def read_json_body(request: Request) -> Any:
    """Parsed JSON body; a missing or malformed body reads as {}."""
    try:
        return await request.json()
    except ValueError:
        logger.debug(f"Unparseable JSON body on {request.url.path}")
        return {}
