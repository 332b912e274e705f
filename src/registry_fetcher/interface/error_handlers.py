"""Global exception handlers: translate domain errors to HTTP responses.

Every failure uses the ``{"status": "error", "message": "..."}`` envelope;
validation failures add the per-field ``errors`` list.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from registry_fetcher.domain.exceptions import (
    AuthenticationFailedError,
    ForbiddenError,
    NetworkError,
    NotFoundError,
    RateLimitedError,
    RegistryFetcherError,
    RemoteError,
    ServiceUnavailableError,
    UnknownMethodError,
    ValidationFailedError,
)

logger = logging.getLogger(__name__)

EXCEPTION_STATUS: dict[type[RegistryFetcherError], int] = {
    ValidationFailedError: 422,
    UnknownMethodError: 404,
    NotFoundError: 404,
    AuthenticationFailedError: 401,
    ForbiddenError: 403,
    RateLimitedError: 429,
    ServiceUnavailableError: 503,
    NetworkError: 502,
    RemoteError: 502,
}


def status_for(exc: RegistryFetcherError) -> int:
    """HTTP status for a domain error, resolved along its class hierarchy."""
    for cls in type(exc).__mro__:
        if cls in EXCEPTION_STATUS:
            return EXCEPTION_STATUS[cls]
    return 500


def _error_json(status_code: int, message: str, **extra: Any) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"status": "error", "message": message, **extra},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach exception handlers to the FastAPI application."""

    @app.exception_handler(RegistryFetcherError)
    async def domain_handler(request: Request, exc: RegistryFetcherError) -> JSONResponse:
        status_code = status_for(exc)
        logger.warning("%s on %s: %s", type(exc).__name__, request.url.path, exc)
        if isinstance(exc, ValidationFailedError):
            return _error_json(status_code, str(exc), errors=exc.messages)
        return _error_json(status_code, str(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        messages = [
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg', 'validation error')}"
            for err in exc.errors()
        ]
        return _error_json(422, "Validation failed: " + "; ".join(messages), errors=messages)

    @app.exception_handler(Exception)
    async def generic_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled exception")
        return _error_json(500, "An unexpected error occurred. Please try again later.")
