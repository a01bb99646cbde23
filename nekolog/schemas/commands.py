"""Command Schemas: pydantic models that turn untrusted input into typed commands.

Invariants:
    - Input keys are camelCase (catId, birthDate); snake_case is accepted too
    - Every constraint failure carries a readable message naming the rule
    - Datetimes must carry an offset and are normalized to UTC
    - Defaults applied here: page=1, limit=20; an absent timestamp stays None
      so the workflow can stamp "now"
    - Update commands distinguish "not supplied" from "supplied": workflows
      use model_dump(exclude_unset=True) to build sparse patches

Design Decisions:
    - PydanticCustomError for domain messages: the message reaches the client
      verbatim through from_validation_error
    - Unknown keys are ignored (pydantic default)
"""

import re

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from nekolog.core.domain_types import EventType, Period
from nekolog.core.period_keys import to_utc

_UUID_PATTERN = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$",
)

NAME_MAX_LENGTH = 50
BREED_MAX_LENGTH = 50
NOTE_MAX_LENGTH = 500
PAGE_SIZE_DEFAULT = 20
PAGE_SIZE_MAX = 100
# keeps OFFSET (page - 1) * limit inside a signed 64-bit integer
PAGE_MAX = 1_000_000


class CommandModel(BaseModel):
    """Base for all inbound commands: camelCase aliases, snake_case attributes."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _check_uuid(value: str | None, message: str) -> str | None:
    if value is not None and not _UUID_PATTERN.match(value):
        raise PydanticCustomError("invalid_id", message)
    return value


def _check_max_length(value: str | None, limit: int, message: str) -> str | None:
    if value is not None and len(value) > limit:
        raise PydanticCustomError("too_long", message)
    return value


def _normalize(value: AwareDatetime | None) -> AwareDatetime | None:
    return to_utc(value) if value is not None else None


def _reject_null(value, message: str):
    if value is None:
        raise PydanticCustomError("null_not_allowed", message)
    return value


# ─── Cats ────────────────────────────────────────────────────────

class CreateCatCommand(CommandModel):
    name: str
    birth_date: AwareDatetime | None = None
    breed: str | None = None
    weight: float | None = Field(None, strict=True, allow_inf_nan=False)

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str | None) -> str:
        if not v:
            raise PydanticCustomError("name_required", "Name is required")
        return _check_max_length(
            v, NAME_MAX_LENGTH, f"Name must be at most {NAME_MAX_LENGTH} characters",
        )

    @field_validator("breed")
    @classmethod
    def check_breed(cls, v: str | None) -> str | None:
        return _check_max_length(
            v, BREED_MAX_LENGTH, f"Breed must be at most {BREED_MAX_LENGTH} characters",
        )

    @field_validator("weight", mode="before")
    @classmethod
    def require_number(cls, v):
        # bool is an int subclass; strings are never coerced
        if v is not None and (isinstance(v, bool) or not isinstance(v, (int, float))):
            raise PydanticCustomError(
                "weight_not_number", "Weight must be a positive number",
            )
        return v

    @field_validator("weight")
    @classmethod
    def check_weight(cls, v: float | None) -> float | None:
        if v is not None and v <= 0:
            raise PydanticCustomError(
                "weight_not_positive", "Weight must be a positive number",
            )
        return v

    @field_validator("birth_date")
    @classmethod
    def normalize_birth_date(cls, v: AwareDatetime | None) -> AwareDatetime | None:
        return _normalize(v)


class UpdateCatCommand(CreateCatCommand):
    """Partial update: every field optional, name cannot be cleared."""
    name: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def check_name_not_null(cls, v):
        return _reject_null(v, "Name is required")


# ─── Toilet events ───────────────────────────────────────────────

class CreateEventCommand(CommandModel):
    cat_id: str
    type: EventType
    timestamp: AwareDatetime | None = None
    note: str | None = None

    @field_validator("cat_id")
    @classmethod
    def check_cat_id(cls, v: str | None) -> str | None:
        return _check_uuid(v, "A valid cat ID is required")

    @field_validator("timestamp")
    @classmethod
    def normalize_timestamp(cls, v: AwareDatetime | None) -> AwareDatetime | None:
        return _normalize(v)

    @field_validator("note")
    @classmethod
    def check_note(cls, v: str | None) -> str | None:
        return _check_max_length(
            v, NOTE_MAX_LENGTH, f"Note must be at most {NOTE_MAX_LENGTH} characters",
        )


class UpdateEventCommand(CreateEventCommand):
    """Partial update. A supplied catId is checked but never applied."""
    cat_id: str | None = None
    type: EventType | None = None

    @field_validator("cat_id", mode="before")
    @classmethod
    def check_cat_id_not_null(cls, v):
        return _reject_null(v, "A valid cat ID is required")

    @field_validator("type", "timestamp")
    @classmethod
    def check_not_null(cls, v):
        return _reject_null(v, "Field cannot be null")


# ─── Queries ─────────────────────────────────────────────────────

class EventsQuery(CommandModel):
    """History filter + pagination."""
    cat_id: str | None = None
    type: EventType | None = None
    from_: AwareDatetime | None = Field(None, alias="from")
    to: AwareDatetime | None = None
    page: int = Field(1, ge=1)
    limit: int = Field(PAGE_SIZE_DEFAULT, ge=1, le=PAGE_SIZE_MAX)

    @field_validator("cat_id")
    @classmethod
    def check_cat_id(cls, v: str | None) -> str | None:
        return _check_uuid(v, "A valid cat ID is required")

    @field_validator("page")
    @classmethod
    def check_page(cls, v: int) -> int:
        if v > PAGE_MAX:
            raise PydanticCustomError(
                "page_too_large", f"Page must be at most {PAGE_MAX}",
            )
        return v

    @field_validator("from_", "to")
    @classmethod
    def normalize_bounds(cls, v: AwareDatetime | None) -> AwareDatetime | None:
        return _normalize(v)


class StatsQuery(CommandModel):
    cat_id: str | None = None
    period: Period | None = None
    from_: AwareDatetime | None = Field(None, alias="from")
    to: AwareDatetime | None = None

    @field_validator("cat_id")
    @classmethod
    def check_cat_id(cls, v: str | None) -> str | None:
        return _check_uuid(v, "A valid cat ID is required")

    @field_validator("from_", "to")
    @classmethod
    def normalize_bounds(cls, v: AwareDatetime | None) -> AwareDatetime | None:
        return _normalize(v)
