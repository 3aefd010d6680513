"""Translation of domain and adapter errors into HTTP responses."""

import logfire
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from discuss.adapter.error import AdapterError
from discuss.domain.error import (
    ConflictError,
    ContentDeletedError,
    DomainError,
    EditWindowExpiredError,
    ForbiddenError,
    InvalidOperationError,
    MalformedIdentifierError,
    NotFoundError,
    ValidationError,
)

# Most specific first. ContentDeletedError is both a NotFoundError and an
# InvalidOperationError and is reported as the latter; a malformed id is a
# bad request rather than a content validation failure.
ERROR_STATUS: list[tuple[type[Exception], int]] = [
    (ContentDeletedError, status.HTTP_400_BAD_REQUEST),
    (MalformedIdentifierError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ForbiddenError, status.HTTP_403_FORBIDDEN),
    (EditWindowExpiredError, status.HTTP_403_FORBIDDEN),
    (InvalidOperationError, status.HTTP_400_BAD_REQUEST),
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (ConflictError, status.HTTP_409_CONFLICT),
]


def status_for(error: Exception) -> int:
    """HTTP status for a domain error."""
    for error_type, code in ERROR_STATUS:
        if isinstance(error, error_type):
            return code
    return status.HTTP_400_BAD_REQUEST


async def domain_error_handler(request: Request, exc: Exception) -> JSONResponse:
    code = status_for(exc)
    if code >= status.HTTP_409_CONFLICT:
        logfire.warn("Request rejected", path=request.url.path, status=code, error=str(exc))
    return JSONResponse(status_code=code, content={"detail": str(exc)})


async def adapter_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logfire.error("Collaborator failure", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={"detail": "A platform service is unavailable"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the error translation on an app."""
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(AdapterError, adapter_error_handler)
