"""Error mapping for the HTTP layer.

The SDK reports problems with plain exceptions: ``KeyError`` for an unknown
test name, ``ValueError`` for a missing session or a bad request.  Routes
let those propagate; the handlers installed by :func:`install_error_handlers`
turn them into JSON responses.  Clients only ever see a fixed detail string
per status, while the original message goes to the server log.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

# ValueError message fragment -> status code (first match wins, default 400)
_VALUE_ERROR_STATUS: list[tuple[str, int]] = [
    ("not found", 404),
    ("no active session", 404),
]

_CLIENT_DETAIL: dict[int, str] = {
    400: "Invalid request",
    404: "Resource not found",
    500: "Internal server error",
}


def _status_for_value_error(message: str) -> int:
    lowered = message.lower()
    for fragment, status in _VALUE_ERROR_STATUS:
        if fragment in lowered:
            return status
    return 400


def _respond(status: int) -> JSONResponse:
    return JSONResponse(status_code=status, content={"detail": _CLIENT_DETAIL[status]})


async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    status = _status_for_value_error(str(exc))
    logger.warning("%s %s -> %d: %s", request.method, request.url.path, status, exc)
    return _respond(status)


async def key_error_handler(request: Request, exc: KeyError) -> JSONResponse:
    """Unknown test names surface as KeyError from ``TestStore.get_test``."""
    logger.warning("%s %s -> 404: unknown key %s", request.method, request.url.path, exc)
    return _respond(404)


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("%s %s -> 500", request.method, request.url.path)
    return _respond(500)


def install_error_handlers(app: FastAPI) -> None:
    """Register the three handlers on *app*."""
    app.add_exception_handler(ValueError, value_error_handler)
    app.add_exception_handler(KeyError, key_error_handler)
    app.add_exception_handler(Exception, generic_error_handler)
