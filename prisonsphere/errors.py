"""Domain exceptions and their HTTP translation."""

import logging

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .base import app

logger = logging.getLogger(__name__)


class PrisonSphereError(Exception):
    """Base class for rule violations reported back to the client."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class DomainError(PrisonSphereError):
    """A precondition of a domain operation does not hold."""


class NotFound(PrisonSphereError):
    """A referenced record does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class Conflict(PrisonSphereError):
    """A write collided with a uniqueness rule."""

    status_code = status.HTTP_409_CONFLICT


def format_location(loc) -> str:
    """Render a validation error location without the request part prefix."""
    parts = [str(part) for part in loc if part not in ("body", "query", "path")]
    return ".".join(parts)


@app.exception_handler(PrisonSphereError)
async def handle_domain_error(_request: Request, exc: PrisonSphereError):
    """Translate domain exceptions to a JSON envelope."""
    logger.debug("Rejected request: %s", exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.message},
    )


@app.exception_handler(StarletteHTTPException)
async def handle_http_error(_request: Request, exc: StarletteHTTPException):
    """Render HTTP errors with a message key."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def handle_validation_error(_request: Request, exc: RequestValidationError):
    """Report malformed input as a 400 naming the first offending field."""
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = format_location(first.get("loc", ()))
    reason = first.get("msg", "invalid value")
    message = f"Invalid {field}: {reason}" if field else reason
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": message, "errors": jsonable_encoder(errors)},
    )


@app.exception_handler(IntegrityError)
async def handle_integrity_error(_request: Request, exc: IntegrityError):
    """Report storage uniqueness violations as conflicts."""
    logger.warning("Integrity error: %s", exc.orig)
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content={"success": False, "message": "Conflicting record already exists."},
    )


@app.exception_handler(Exception)
async def handle_unexpected_error(_request: Request, exc: Exception):
    """Log unexpected failures and report a generic server error."""
    logger.exception("Unhandled error: %s", exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Server error", "error": str(exc)},
    )
