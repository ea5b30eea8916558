"""API middleware -- CORS, request logging, and error handling.

Middleware is a stack (last added, first executed).  In main.py the
logging middleware is added after the error middleware, so it is
outermost and sees the final status code even when a
``SyncBrainError`` was turned into a JSON error body.
"""

from __future__ import annotations

import time

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from syncbrain.api.schemas import ErrorResponse
from syncbrain.utils.errors import (
    EmbeddingError,
    ExtractionError,
    LLMError,
    NotFoundError,
    StoreError,
    SyncBrainError,
    ValidationError,
)
from syncbrain.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

GENERIC_DETAIL = "Operation failed"

# Checked in order; the first matching class wins.
_STATUS_BY_ERROR: list[tuple[type[SyncBrainError], int]] = [
    (ValidationError, 400),
    (NotFoundError, 404),
    (ExtractionError, 502),
    (EmbeddingError, 502),
    (LLMError, 502),
    (StoreError, 503),
]

# Client errors carry caller-facing messages; everything else is generic.
_CLIENT_ERRORS = (ValidationError, NotFoundError)


def status_for(exc: SyncBrainError) -> int:
    for error_type, status in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status
    return 500


# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------


def configure_cors(app: FastAPI, *, allowed_origins: list[str] | None = None) -> None:
    """Add CORS middleware; defaults to ``["*"]`` for development."""
    origins = allowed_origins or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


# ---------------------------------------------------------------------------
# Request Logging
# ---------------------------------------------------------------------------


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every HTTP request with method, path, status code, and duration."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start = time.perf_counter()
        response: Response | None = None

        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            status_code = response.status_code if response else 500
            _logger.info(
                "http_request",
                method=request.method,
                path=str(request.url.path),
                status=status_code,
                duration_ms=duration_ms,
            )


# ---------------------------------------------------------------------------
# Error Handling
# ---------------------------------------------------------------------------


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Turn ``SyncBrainError`` subclasses into status-mapped JSON errors.

    The failure kind becomes the status code and the ``error`` field.
    Provider names and raw provider messages are logged server-side only;
    the client sees ``"Operation failed"`` for every server-side failure.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        try:
            return await call_next(request)
        except SyncBrainError as exc:
            status = status_for(exc)
            log = _logger.warning if status < 500 else _logger.error
            log(
                "application_error",
                error_type=type(exc).__name__,
                message=exc.message,
                provider=exc.provider_name,
                path=str(request.url.path),
                status=status,
            )
            detail = exc.message if isinstance(exc, _CLIENT_ERRORS) else GENERIC_DETAIL
            body = ErrorResponse(error=type(exc).__name__, detail=detail)
            return JSONResponse(status_code=status, content=body.model_dump())
