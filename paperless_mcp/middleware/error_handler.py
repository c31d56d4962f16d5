"""Tool error hierarchy and FastAPI exception handlers.

All tool-level errors extend ToolError and carry one code from the fixed
taxonomy in ``ErrorCode``. Tool functions raise them; the tool wrapper turns
them into a failure envelope, and the FastAPI exception handlers do the same
for the HTTP surface (``/health``): { ok, error: {code, message, details}, meta }.
"""

from __future__ import annotations

import logging
import traceback

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from paperless_mcp.integration.result import ApiError
from paperless_mcp.models.responses import ErrorCode, Meta, ToolErrorResponse

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Error hierarchy
# ---------------------------------------------------------------------------


class ToolError(Exception):
    """Base error for all tool-level failures."""

    code: ErrorCode = ErrorCode.UNKNOWN
    status_code: int = 500
    message: str = "Unexpected error"

    def __init__(self, message: str | None = None, details: object = None) -> None:
        self.message = message or self.__class__.message
        self.details = details
        super().__init__(self.message)

    def to_response(self, meta: Meta | None = None) -> ToolErrorResponse:
        return ToolErrorResponse.failure(self.code, self.message, self.details, meta)


class NotFoundError(ToolError):
    """Entity or file does not exist."""

    code = ErrorCode.NOT_FOUND
    status_code = 404
    message = "Not found"


class ValidationError(ToolError):
    """Malformed caller input, rejected before any backend call."""

    code = ErrorCode.VALIDATION
    status_code = 422
    message = "Validation error"


class UpstreamError(ToolError):
    """Backend rejected the request or could not be reached."""

    code = ErrorCode.UPSTREAM_ERROR
    status_code = 502
    message = "Paperless request failed"


class AuthFailedError(ToolError):
    """Backend rejected the API token."""

    code = ErrorCode.AUTH_FAILED
    status_code = 401
    message = "Authentication with Paperless failed"


class RateLimitError(ToolError):
    """Backend kept answering 429 after retries."""

    code = ErrorCode.RATE_LIMIT
    status_code = 429
    message = "Paperless rate limit exceeded"


class ConfirmationRequiredError(ToolError):
    """Destructive operation called without ``confirm=true``."""

    code = ErrorCode.CONFIRMATION_REQUIRED
    status_code = 409
    message = "Operation requires confirm=true"


def error_from_api(error: ApiError, message: str | None = None) -> ToolError:
    """Map a backend ``ApiError`` to the nearest taxonomy error.

    404 -> NOT_FOUND, 401/403 -> AUTH_FAILED, 429 -> RATE_LIMIT, anything
    else (including network failures, status 0) -> UPSTREAM_ERROR.
    """
    details = {"status_code": error.status_code, "response_body": error.response_body}
    text = message or str(error)

    if error.status_code == 404:
        return NotFoundError(text, details)
    if error.status_code in (401, 403):
        return AuthFailedError(text, details)
    if error.status_code == 429:
        return RateLimitError(text, details)
    return UpstreamError(text, details)


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------


def _envelope(status_code: int, response: ToolErrorResponse) -> JSONResponse:
    """Build a JSON envelope error response."""
    return JSONResponse(
        status_code=status_code,
        content=response.model_dump(mode="json") | {"meta": response.meta.to_dict()},
    )


async def _tool_error_handler(_request: Request, exc: ToolError) -> JSONResponse:
    """Handle ToolError subclasses."""
    return _envelope(exc.status_code, exc.to_response())


async def _unhandled_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions: log traceback, return generic 500."""
    logger.error(
        "Unhandled exception: %s\n%s",
        exc,
        traceback.format_exc(),
    )
    return _envelope(500, ToolErrorResponse.failure(ErrorCode.UNKNOWN, "Internal server error"))


# ---------------------------------------------------------------------------
# Registration helper
# ---------------------------------------------------------------------------


def register_error_handlers(app: FastAPI) -> None:
    """Wire up all exception handlers on the FastAPI application."""
    app.add_exception_handler(ToolError, _tool_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_error_handler)  # type: ignore[arg-type]
