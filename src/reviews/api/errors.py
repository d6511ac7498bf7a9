"""HTTP mapping for the exceptions raised by the reviews context."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError
from protean.integrations.fastapi import register_exception_handlers

from reviews.errors import Conflict, Forbidden, RateLimitExceeded, Unauthorized

_STATUS_CODES = {
    Unauthorized: 401,
    Forbidden: 403,
    Conflict: 409,
    RateLimitExceeded: 429,
}


async def _reviews_error_handler(request: Request, exc) -> JSONResponse:
    return JSONResponse(status_code=_STATUS_CODES[type(exc)], content={"error": exc.messages})


async def _not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"error": {"detail": ["Not found"]}})


def register_error_handlers(app: FastAPI) -> None:
    """Protean's handlers plus the context-specific ones."""
    register_exception_handlers(app)
    app.add_exception_handler(ObjectNotFoundError, _not_found_handler)
    for exc_class in _STATUS_CODES:
        app.add_exception_handler(exc_class, _reviews_error_handler)
