"""Convert raw ``httpx`` responses into ``ApiResult`` values.

None of these functions raise: every outcome, including an unreadable or
unparseable body, becomes a ``Failure``.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

import httpx
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from paperless_mcp.integration.result import ApiError, ApiResult, Failure, Success

logger = logging.getLogger(__name__)

T = TypeVar("T")

EMPTY_BODY_MESSAGE = "Empty response body"


def _read_text(response: httpx.Response) -> str | None:
    try:
        return response.text
    except (httpx.HTTPError, UnicodeDecodeError, RuntimeError) as exc:
        logger.debug("Could not read response body: %s", exc)
        return None


def _error_for(response: httpx.Response) -> Failure:
    return Failure(
        ApiError(
            status_code=response.status_code,
            message=response.reason_phrase or f"HTTP {response.status_code}",
            response_body=_read_text(response),
        )
    )


def normalize(response: httpx.Response, model: Any) -> ApiResult[T]:
    """Validate a 2xx JSON body into ``model``.

    ``model`` is anything a pydantic ``TypeAdapter`` accepts: a model class,
    ``dict``, ``PaginatedResult[Tag]`` and so on.
    """
    if not response.is_success:
        return _error_for(response)

    text = _read_text(response)
    if not text or not text.strip():
        return Failure(ApiError(response.status_code, EMPTY_BODY_MESSAGE, text))

    try:
        value = TypeAdapter(model).validate_json(text)
    except PydanticValidationError as exc:
        logger.warning(
            "Unparseable Paperless response: %s",
            exc.errors(include_url=False)[:3],
            extra={"status_code": response.status_code, "response_body": text},
        )
        return Failure(
            ApiError(response.status_code, "Unparseable response body", text)
        )
    return Success(value)


def normalize_empty(response: httpx.Response) -> ApiResult[None]:
    """Any 2xx, including 204 No Content, is a success without a value."""
    if response.is_success:
        return Success(None)
    return _error_for(response)


def normalize_task_id(response: httpx.Response) -> ApiResult[str]:
    """The upload endpoint answers with a bare JSON string: the task id."""
    if not response.is_success:
        return _error_for(response)

    text = (_read_text(response) or "").strip().strip('"').strip()
    if not text:
        return Failure(ApiError(response.status_code, EMPTY_BODY_MESSAGE, None))
    return Success(text)
