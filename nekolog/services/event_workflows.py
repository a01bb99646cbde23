"""Toilet Event Workflows: add, update, delete, get events and browse history.

Invariants:
    - add_event requires an existing cat owned by the caller (NotFound otherwise)
    - An omitted timestamp is stamped with the current UTC instant
    - update/delete/get ownership is checked transitively inside the repository
    - delete_event without confirmation never touches the repository
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from nekolog.core.domain_types import CatId, EventId, OwnerId
from nekolog.core.errors import (
    CAT_RESOURCE, EVENT_RESOURCE, ConfirmationRequiredError, DomainError, NotFoundError,
)
from nekolog.core.records import Cat, EventPage, NewToiletEvent, ToiletEvent
from nekolog.core.repository_protocols import CatRepository, EventRepository
from nekolog.core.result import Err, Ok, ResultAsync
from nekolog.schemas.commands import (
    CreateEventCommand, EventsQuery, UpdateEventCommand,
)
from nekolog.schemas.validate import validate


def _new_event_id() -> EventId:
    return EventId(str(uuid.uuid4()))


def add_event(
    data: Any,
    owner_id: OwnerId,
    cat_repo: CatRepository,
    event_repo: EventRepository,
) -> ResultAsync[ToiletEvent, DomainError]:
    """Validate -> verify owned cat -> default timestamp -> create."""
    def verify_cat(command: CreateEventCommand):
        cat_id = CatId(command.cat_id)

        def require_cat(cat: Cat | None):
            if cat is None:
                return Err(NotFoundError(CAT_RESOURCE, cat_id))
            return Ok(command)

        return ResultAsync(cat_repo.find_by_id(cat_id, owner_id)).and_then(require_cat)

    def create(command: CreateEventCommand):
        return event_repo.create(NewToiletEvent(
            id=_new_event_id(),
            cat_id=CatId(command.cat_id),
            type=command.type,
            timestamp=command.timestamp or datetime.now(timezone.utc),
            note=command.note,
        ))

    return (
        ResultAsync.from_result(validate(CreateEventCommand, data))
        .and_then(verify_cat)
        .and_then(create)
    )


def update_event(
    event_id: EventId, data: Any, owner_id: OwnerId, event_repo: EventRepository,
) -> ResultAsync[ToiletEvent, DomainError]:
    def patch(command: UpdateEventCommand):
        changes = command.model_dump(exclude_unset=True, exclude={"cat_id"})
        return event_repo.update(event_id, owner_id, changes)

    return ResultAsync.from_result(
        validate(UpdateEventCommand, data),
    ).and_then(patch)


def delete_event(
    event_id: EventId, confirmed: bool, owner_id: OwnerId, event_repo: EventRepository,
) -> ResultAsync[None, DomainError]:
    if not confirmed:
        return ResultAsync.err(ConfirmationRequiredError())
    return ResultAsync(event_repo.delete(event_id, owner_id))


def get_event(
    event_id: EventId, owner_id: OwnerId, event_repo: EventRepository,
) -> ResultAsync[ToiletEvent, DomainError]:
    return ResultAsync(event_repo.find_by_id(event_id, owner_id)).and_then(
        lambda event: (
            Ok(event) if event is not None
            else Err(NotFoundError(EVENT_RESOURCE, event_id))
        ),
    )


def get_history(
    query: Any, owner_id: OwnerId, event_repo: EventRepository,
) -> ResultAsync[EventPage, DomainError]:
    """Validate filter/pagination -> fetch one page, newest first."""
    return ResultAsync.from_result(validate(EventsQuery, query)).and_then(
        lambda filters: event_repo.find_with_filters(owner_id, filters),
    )
