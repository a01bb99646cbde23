"""Domain Errors: the closed set of failures a workflow can return.

Invariants:
    - Exactly five kinds: validation, not_found, unauthorized,
      confirmation_required, database
    - Errors are values carried inside Err, never raised by workflows
    - DatabaseError.message is a generic operation summary; driver text is logged
      by the repository and never stored here
    - from_validation_error reports only the first violation

Design Decisions:
    - One frozen dataclass per kind with a `kind` tag: callers dispatch with
      `match` and the HTTP boundary checks exhaustiveness against ErrorKind
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union

from pydantic import ValidationError as PydanticValidationError


class ErrorKind(str, Enum):
    """Tag carried by every domain error, serialized as `type`."""
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    CONFIRMATION_REQUIRED = "confirmation_required"
    DATABASE = "database"


@dataclass(frozen=True)
class ValidationError:
    """Input failed a schema constraint."""
    kind: ClassVar[ErrorKind] = ErrorKind.VALIDATION
    field: str
    message: str

    def to_dict(self) -> dict:
        return {"type": self.kind.value, "field": self.field, "message": self.message}


# Resource tags carried by NotFoundError
CAT_RESOURCE = "cat"
EVENT_RESOURCE = "toilet_log"


@dataclass(frozen=True)
class NotFoundError:
    """Resource missing, or owned by someone else."""
    kind: ClassVar[ErrorKind] = ErrorKind.NOT_FOUND
    resource: str
    id: str

    def to_dict(self) -> dict:
        return {"type": self.kind.value, "resource": self.resource, "id": self.id}


@dataclass(frozen=True)
class UnauthorizedError:
    kind: ClassVar[ErrorKind] = ErrorKind.UNAUTHORIZED
    message: str

    def to_dict(self) -> dict:
        return {"type": self.kind.value, "message": self.message}


@dataclass(frozen=True)
class ConfirmationRequiredError:
    """Destructive operation invoked without explicit confirmation."""
    kind: ClassVar[ErrorKind] = ErrorKind.CONFIRMATION_REQUIRED

    def to_dict(self) -> dict:
        return {"type": self.kind.value}


@dataclass(frozen=True)
class DatabaseError:
    kind: ClassVar[ErrorKind] = ErrorKind.DATABASE
    message: str = "Database operation failed"

    def to_dict(self) -> dict:
        return {"type": self.kind.value, "message": self.message}


DomainError = Union[
    ValidationError,
    NotFoundError,
    UnauthorizedError,
    ConfirmationRequiredError,
    DatabaseError,
]


def from_validation_error(exc: PydanticValidationError) -> ValidationError:
    """Convert a pydantic ValidationError into a domain ValidationError.

    Only the first reported issue is kept. Nested locations are dot-joined;
    an empty location (root-level failure) becomes "unknown".
    """
    issues = exc.errors()
    if not issues:
        return ValidationError("unknown", "Validation failed")
    first = issues[0]
    field_path = ".".join(str(part) for part in first.get("loc", ()))
    return ValidationError(
        field_path or "unknown", first.get("msg") or "Validation failed",
    )
