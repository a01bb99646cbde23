"""Error Handlers: map domain errors and stray exceptions to HTTP responses.

Invariants:
    - Every ErrorKind maps to exactly one status (exhaustive match):
      validation 400, not_found 404, unauthorized 401,
      confirmation_required 422, database 500
    - Database failures answer with a generic internal body; the stored
      message is logged, never returned
    - RequestValidationError (path/query type errors) → 400 validation body,
      first violation only
    - Exception (catch-all) → never leaks internal details

Design Decisions:
    - Workflows return Err values; routes raise DomainFailure at the edge so
      one handler renders every failure
    - Three-layer handler: domain (DomainFailure), validation (FastAPI), catch-all (Exception)
"""

import logging
from typing import TypeVar, assert_never

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from nekolog.core.errors import (
    ConfirmationRequiredError,
    DatabaseError,
    DomainError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from nekolog.core.result import Err, Ok, Result

logger = logging.getLogger(__name__)

T = TypeVar("T")

INTERNAL_ERROR_BODY = {
    "type": "internal",
    "message": "An unexpected error occurred",
}


class DomainFailure(Exception):
    """Carries a DomainError out of a route or dependency to the handler."""

    def __init__(self, error: DomainError):
        super().__init__(error.kind.value)
        self.error = error


def value_or_raise(result: Result[T, DomainError]) -> T:
    match result:
        case Ok(value):
            return value
        case Err(error):
            raise DomainFailure(error)
    raise TypeError(f"Expected Ok or Err, got {type(result).__name__}")


def domain_error_response(error: DomainError) -> JSONResponse:
    """Render a DomainError as its transport status and JSON body."""
    match error:
        case ValidationError():
            return JSONResponse(
                status_code=status.HTTP_400_BAD_REQUEST, content=error.to_dict(),
            )
        case NotFoundError():
            return JSONResponse(
                status_code=status.HTTP_404_NOT_FOUND, content=error.to_dict(),
            )
        case UnauthorizedError():
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED, content=error.to_dict(),
            )
        case ConfirmationRequiredError():
            return JSONResponse(
                status_code=status.HTTP_422_UNPROCESSABLE_CONTENT, content=error.to_dict(),
            )
        case DatabaseError():
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content=INTERNAL_ERROR_BODY,
            )
        case _:
            assert_never(error)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_domain_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_domain_error_handler(app: FastAPI) -> None:

    @app.exception_handler(DomainFailure)
    async def domain_error_handler(request: Request, exc: DomainFailure):
        error = exc.error
        if isinstance(error, DatabaseError):
            logger.error(
                f"Database error: {error.message}",
                extra={"error_kind": error.kind.value, "path": request.url.path},
            )
        else:
            logger.info(
                f"Request failed: {error.kind.value}",
                extra={"error_kind": error.kind.value, "path": request.url.path},
            )
        return domain_error_response(error)


def _register_validation_error_handler(app: FastAPI) -> None:

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Path/query parameters FastAPI itself rejected."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return domain_error_response(_first_violation(exc))


def _register_generic_error_handler(app: FastAPI) -> None:

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all: never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=INTERNAL_ERROR_BODY,
        )


def _first_violation(exc: RequestValidationError) -> ValidationError:
    errors = exc.errors()
    if not errors:
        return ValidationError("unknown", "Validation failed")
    first = errors[0]
    # drop the "path"/"query" source prefix
    loc = [str(part) for part in first.get("loc", ())][1:]
    return ValidationError(
        ".".join(loc) or "unknown", first.get("msg") or "Validation failed",
    )
