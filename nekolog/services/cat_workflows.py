"""Cat Workflows: register, update, delete, get and list cats.

Invariants:
    - Each workflow is a linear chain: validate -> check -> persist
    - Invalid input never reaches the repository
    - delete_cat without confirmation never touches the repository
    - Event cascade on delete is the storage layer's job

Design Decisions:
    - Plain functions returning ResultAsync; repositories arrive as arguments
"""

import uuid
from typing import Any

from nekolog.core.domain_types import CatId, OwnerId
from nekolog.core.errors import (
    CAT_RESOURCE, ConfirmationRequiredError, DomainError, NotFoundError,
)
from nekolog.core.records import Cat, NewCat
from nekolog.core.repository_protocols import CatRepository
from nekolog.core.result import Err, Ok, ResultAsync
from nekolog.schemas.commands import CreateCatCommand, UpdateCatCommand
from nekolog.schemas.validate import validate


def _new_cat_id() -> CatId:
    return CatId(str(uuid.uuid4()))


def register_cat(
    data: Any, owner_id: OwnerId, cat_repo: CatRepository,
) -> ResultAsync[Cat, DomainError]:
    """Validate input -> generate id -> create."""
    def create(command: CreateCatCommand):
        return cat_repo.create(NewCat(
            id=_new_cat_id(),
            owner_id=owner_id,
            name=command.name,
            birth_date=command.birth_date,
            breed=command.breed,
            weight=command.weight,
        ))

    return ResultAsync.from_result(
        validate(CreateCatCommand, data),
    ).and_then(create)


def update_cat(
    cat_id: CatId, data: Any, owner_id: OwnerId, cat_repo: CatRepository,
) -> ResultAsync[Cat, DomainError]:
    """Validate input -> patch only the supplied fields."""
    return ResultAsync.from_result(
        validate(UpdateCatCommand, data),
    ).and_then(
        lambda command: cat_repo.update(
            cat_id, owner_id, command.model_dump(exclude_unset=True),
        ),
    )


def delete_cat(
    cat_id: CatId, confirmed: bool, owner_id: OwnerId, cat_repo: CatRepository,
) -> ResultAsync[None, DomainError]:
    if not confirmed:
        return ResultAsync.err(ConfirmationRequiredError())
    return ResultAsync(cat_repo.delete(cat_id, owner_id))


def get_cat(
    cat_id: CatId, owner_id: OwnerId, cat_repo: CatRepository,
) -> ResultAsync[Cat, DomainError]:
    return ResultAsync(cat_repo.find_by_id(cat_id, owner_id)).and_then(
        lambda cat: Ok(cat) if cat is not None else Err(NotFoundError(CAT_RESOURCE, cat_id)),
    )


def list_cats(
    owner_id: OwnerId, cat_repo: CatRepository,
) -> ResultAsync[list[Cat], DomainError]:
    return ResultAsync(cat_repo.find_all_by_owner(owner_id))
