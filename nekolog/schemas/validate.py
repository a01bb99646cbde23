"""Schema validation bridged into Result values."""

from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from nekolog.core.errors import ValidationError, from_validation_error
from nekolog.core.result import Err, Ok, Result

M = TypeVar("M", bound=BaseModel)


def validate(schema: type[M], data: Any) -> Result[M, ValidationError]:
    """Parse `data` against `schema`; the first violation becomes Err."""
    try:
        return Ok(schema.model_validate(data))
    except PydanticValidationError as exc:
        return Err(from_validation_error(exc))
