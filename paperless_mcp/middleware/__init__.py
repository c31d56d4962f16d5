"""Middleware package: error hierarchy and request ID."""

from paperless_mcp.middleware.error_handler import (
    AuthFailedError,
    ConfirmationRequiredError,
    NotFoundError,
    RateLimitError,
    ToolError,
    UpstreamError,
    ValidationError,
    error_from_api,
    register_error_handlers,
)
from paperless_mcp.middleware.request_id import RequestIdMiddleware

__all__ = [
    "AuthFailedError",
    "ConfirmationRequiredError",
    "NotFoundError",
    "RateLimitError",
    "RequestIdMiddleware",
    "ToolError",
    "UpstreamError",
    "ValidationError",
    "error_from_api",
    "register_error_handlers",
]
