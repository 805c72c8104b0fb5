"""
todo_api.api.errors

Mapping of domain errors onto HTTP responses.

Responsibilities:
- Translate the `todo_api.errors` taxonomy into status codes.
- Keep internal failure details in logs, never in responses.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from todo_api.errors import (
    Conflict,
    Forbidden,
    InternalFailure,
    NotFound,
    TodoApiError,
    Unauthorized,
    ValidationFailure,
)
from todo_api.observability.logging import get_logger

log = get_logger(__name__)

# Most specific first; the first isinstance match wins.
_STATUS_BY_ERROR: tuple[tuple[type[TodoApiError], int], ...] = (
    (ValidationFailure, HTTP_400_BAD_REQUEST),
    (Unauthorized, HTTP_401_UNAUTHORIZED),
    (Forbidden, HTTP_403_FORBIDDEN),
    (NotFound, HTTP_404_NOT_FOUND),
    (Conflict, HTTP_409_CONFLICT),
    (InternalFailure, HTTP_500_INTERNAL_SERVER_ERROR),
)


def status_for(error: TodoApiError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            return status_code
    return HTTP_500_INTERNAL_SERVER_ERROR


async def handle_domain_error(_: Request, exc: TodoApiError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= HTTP_500_INTERNAL_SERVER_ERROR:
        log.error("internal_failure", error_type=type(exc).__name__, exc_info=exc)
        return JSONResponse(status_code=status_code, content={"detail": "internal error"})

    headers = {"WWW-Authenticate": "Bearer"} if status_code == HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=status_code, content={"detail": exc.message}, headers=headers)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TodoApiError, handle_domain_error)  # type: ignore[arg-type]
