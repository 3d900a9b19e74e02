"""
Portal error hierarchy.

Every failure the service reports is a ``PortalError`` subclass carrying an
``ErrorKind`` and the HTTP status it maps to. Route handlers never build
``HTTPException`` themselves; ``register_exception_handlers`` renders these
errors as ``{"detail": ..., "kind": ...}``.
"""
from __future__ import annotations

import enum
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError


logger = logging.getLogger(__name__)


class ErrorKind(str, enum.Enum):
    VALIDATION = "validation_error"
    DUPLICATE_USERNAME = "duplicate_username"
    CONFLICT = "conflict"
    INVALID_CREDENTIALS = "invalid_credentials"
    NOT_AUTHENTICATED = "not_authenticated"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    INTERNAL = "internal_fault"


class PortalError(Exception):
    """Base class for all errors surfaced to API callers."""

    kind: ErrorKind = ErrorKind.INTERNAL
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailed(PortalError):
    kind = ErrorKind.VALIDATION
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class DuplicateUsername(PortalError):
    kind = ErrorKind.DUPLICATE_USERNAME
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Username already exists"


class Conflict(PortalError):
    kind = ErrorKind.CONFLICT
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Request conflicts with existing data"


class InvalidCredentials(PortalError):
    kind = ErrorKind.INVALID_CREDENTIALS
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"


class NotAuthenticated(PortalError):
    kind = ErrorKind.NOT_AUTHENTICATED
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class Forbidden(PortalError):
    kind = ErrorKind.FORBIDDEN
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Forbidden"


class NotFound(PortalError):
    kind = ErrorKind.NOT_FOUND
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class JobNotFound(NotFound):
    default_message = "Job not found"


class InternalFault(PortalError):
    pass


def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return ValidationFailed.default_message
    first = errors[0]
    message = str(first.get("msg") or ValidationFailed.default_message)
    # pydantic prefixes messages raised from our own validators.
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    if loc:
        return f"{'.'.join(loc)}: {message}"
    return message


def _error_response(error: PortalError) -> JSONResponse:
    return JSONResponse(
        status_code=error.status_code,
        content={"detail": error.message, "kind": error.kind.value},
    )


def register_exception_handlers(application: FastAPI) -> None:
    @application.exception_handler(PortalError)
    async def _handle_portal_error(request: Request, exc: PortalError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("request.failed path=%s kind=%s", request.url.path, exc.kind.value)
        return _error_response(exc)

    @application.exception_handler(RequestValidationError)
    async def _handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        return _error_response(ValidationFailed(_first_validation_message(exc)))

    @application.exception_handler(SQLAlchemyError)
    async def _handle_database_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
        logger.exception("request.db_fault path=%s", request.url.path)
        return _error_response(InternalFault())
