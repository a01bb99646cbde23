"""SqlCatRepository against in-memory SQLite.

Tests:
    - Cats are visible only to their owner
    - Update applies the patch and refreshes updated_at
    - Delete cascades to the cat's toilet events
    - SQLAlchemy failures become DatabaseError results
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from nekolog.core.domain_types import EventType
from nekolog.core.errors import DatabaseError, NotFoundError
from nekolog.core.records import NewCat
from nekolog.core.result import Err, Ok
from nekolog.infrastructure.cat_repository import SqlCatRepository
from nekolog.models.toilet_event import ToiletEventModel

OWNER = "owner-1"
OTHER = "owner-2"


async def test_create_and_find(cat_repo, make_cat):
    """A created cat reads back with every attribute."""
    birth = datetime(2020, 4, 1, tzinfo=timezone.utc)
    cat = await make_cat(OWNER, "Tama", birth_date=birth, weight=4.2)

    found = (await cat_repo.find_by_id(cat.id, OWNER)).unwrap()
    assert found.name == "Tama"
    assert found.birth_date == birth
    assert found.weight == 4.2
    assert found.breed is None
    assert found.created_at.tzinfo is not None


async def test_find_by_id_for_other_owner_is_none(cat_repo, make_cat):
    """Another owner's cat reads as absent."""
    cat = await make_cat(OWNER)
    assert await cat_repo.find_by_id(cat.id, OTHER) == Ok(None)


async def test_find_by_id_non_uuid_is_none(cat_repo):
    """A malformed id is simply not found."""
    assert await cat_repo.find_by_id("not-a-uuid", OWNER) == Ok(None)


async def test_find_all_by_owner_is_scoped_and_ordered(cat_repo, make_cat):
    """The roster is the owner's cats in creation order."""
    await make_cat(OWNER, "First")
    await make_cat(OTHER, "Stranger")
    await make_cat(OWNER, "Second")

    cats = (await cat_repo.find_all_by_owner(OWNER)).unwrap()
    assert [c.name for c in cats] == ["First", "Second"]


async def test_update_applies_patch(cat_repo, make_cat):
    """Supplied fields change, None clears, the rest stay."""
    cat = await make_cat(OWNER, "Tama", breed="Mixed")

    updated = (await cat_repo.update(cat.id, OWNER, {"name": "Kuro", "breed": None})).unwrap()

    assert updated.name == "Kuro"
    assert updated.breed is None
    assert updated.updated_at >= cat.updated_at
    assert (await cat_repo.find_by_id(cat.id, OWNER)).unwrap().name == "Kuro"


async def test_update_other_owner_is_not_found(cat_repo, make_cat):
    """Updating a foreign cat answers not_found."""
    cat = await make_cat(OWNER)

    result = await cat_repo.update(cat.id, OTHER, {"name": "Stolen"})

    assert result == Err(NotFoundError("cat", cat.id))
    assert (await cat_repo.find_by_id(cat.id, OWNER)).unwrap().name == "Tama"


async def test_delete_cascades_to_events(cat_repo, make_cat, make_event, test_db):
    """Deleting a cat removes its toilet events."""
    cat = await make_cat(OWNER)
    await make_event(cat.id, EventType.URINE, datetime(2024, 1, 1, tzinfo=timezone.utc))
    await make_event(cat.id, EventType.FECES, datetime(2024, 1, 2, tzinfo=timezone.utc))

    assert await cat_repo.delete(cat.id, OWNER) == Ok(None)

    assert await cat_repo.find_by_id(cat.id, OWNER) == Ok(None)
    remaining = (await test_db.execute(
        select(func.count()).select_from(ToiletEventModel),
    )).scalar_one()
    assert remaining == 0


async def test_delete_other_owner_is_not_found(cat_repo, make_cat):
    """Deleting a foreign cat answers not_found."""
    cat = await make_cat(OWNER)

    assert await cat_repo.delete(cat.id, OTHER) == Err(NotFoundError("cat", cat.id))
    assert (await cat_repo.find_by_id(cat.id, OWNER)).unwrap() is not None


async def test_sqlalchemy_failure_becomes_database_error():
    """A failing commit returns DatabaseError instead of raising."""
    session = AsyncMock()
    session.add = lambda row: None
    session.commit.side_effect = OperationalError("INSERT", {}, Exception("disk full"))
    repo = SqlCatRepository(session)

    result = await repo.create(NewCat(
        id="c1", owner_id=OWNER, name="Tama", birth_date=None, breed=None, weight=None,
    ))

    assert result == Err(DatabaseError("Failed to create cat"))
    session.rollback.assert_awaited_once()


async def test_lookup_failure_becomes_database_error():
    """A failing read returns DatabaseError instead of raising."""
    session = AsyncMock()
    session.execute.side_effect = OperationalError("SELECT", {}, Exception("gone"))
    repo = SqlCatRepository(session)

    result = await repo.find_all_by_owner(OWNER)

    assert isinstance(result.unwrap_err(), DatabaseError)
    assert "gone" not in result.unwrap_err().message
