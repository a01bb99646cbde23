"""Repository fixtures: SQL repositories over the in-memory test session."""

import uuid
from datetime import datetime

import pytest

from nekolog.core.domain_types import CatId, EventId, EventType
from nekolog.core.records import NewCat, NewToiletEvent
from nekolog.infrastructure.cat_repository import SqlCatRepository
from nekolog.infrastructure.event_repository import SqlEventRepository


@pytest.fixture
def cat_repo(test_db):
    return SqlCatRepository(test_db)


@pytest.fixture
def event_repo(test_db):
    return SqlEventRepository(test_db)


@pytest.fixture
def make_cat(cat_repo):
    """Persist a cat and return it."""
    async def _make(owner_id: str, name: str = "Tama", **fields):
        new_cat = NewCat(
            id=CatId(str(uuid.uuid4())),
            owner_id=owner_id,
            name=name,
            birth_date=fields.get("birth_date"),
            breed=fields.get("breed"),
            weight=fields.get("weight"),
        )
        return (await cat_repo.create(new_cat)).unwrap()
    return _make


@pytest.fixture
def make_event(event_repo):
    """Persist a toilet event for a cat and return it."""
    async def _make(cat_id: str, type: EventType, timestamp: datetime, note=None):
        new_event = NewToiletEvent(
            id=EventId(str(uuid.uuid4())),
            cat_id=cat_id,
            type=type,
            timestamp=timestamp,
            note=note,
        )
        return (await event_repo.create(new_event)).unwrap()
    return _make
