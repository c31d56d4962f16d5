"""Confirm / dry-run gate for destructive operations.

Nothing is remembered between calls; the outcome depends only on the flags
passed with the current call.

Single item (delete, reprocess):
    confirm is not True -> fetch the entity
        missing          -> NOT_FOUND
        other failure    -> mapped upstream error
        found            -> CONFIRMATION_REQUIRED with a preview in details
    confirm is True     -> caller executes

Bulk (N ids, ids already validated non-empty by the caller):
    dry_run or confirm is not True -> success preview, executed=False,
                                      no mutation endpoint is called
    otherwise                      -> one mutation call, executed=True
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, TypeVar

from paperless_mcp.integration.result import ApiResult, Failure
from paperless_mcp.middleware.error_handler import (
    ConfirmationRequiredError,
    error_from_api,
)
from paperless_mcp.models.common import BulkOperationResult

logger = logging.getLogger(__name__)

T = TypeVar("T")

DELETE_CONFIRMATION_MESSAGE = (
    "Deletion requires confirm=true. This is a dry run showing what would be deleted."
)
DRY_RUN_WARNING = "This is a dry run. Set dry_run=false and confirm=true to execute."
CONFIRM_WARNING = "Set confirm=true to execute the operation."


async def require_confirmation(
    confirm: bool,
    fetch: Callable[[], Awaitable[ApiResult[T]]],
    preview: Callable[[T], dict[str, Any]],
    *,
    message: str = DELETE_CONFIRMATION_MESSAGE,
    not_found_message: str = "Not found",
) -> None:
    """Return normally only when ``confirm`` is True.

    Raises
    ------
    NotFoundError
        The entity to preview does not exist.
    ToolError
        Fetching the entity failed for another reason.
    ConfirmationRequiredError
        The entity exists and ``confirm`` is not True; ``details`` is the
        preview built by ``preview``.
    """
    if confirm is True:
        return

    result = await fetch()
    if isinstance(result, Failure):
        text = not_found_message if result.error.status_code == 404 else None
        raise error_from_api(result.error, text)

    raise ConfirmationRequiredError(message, preview(result.value))


def bulk_preview(ids: list[int], dry_run: bool, confirm: bool) -> BulkOperationResult | None:
    """Preview result when a flag blocks execution, else ``None``."""
    if dry_run:
        warning = DRY_RUN_WARNING
    elif confirm is not True:
        warning = CONFIRM_WARNING
    else:
        return None
    return BulkOperationResult(affected_ids=ids, warnings=[warning], executed=False)


async def run_bulk_operation(
    ids: list[int],
    *,
    dry_run: bool,
    confirm: bool,
    execute: Callable[[list[int]], Awaitable[ApiResult[None]]],
    failure_message: str = "Bulk operation failed",
) -> BulkOperationResult:
    """Preview or execute a bulk mutation over ``ids``.

    ``execute`` is awaited at most once, with the full id list. Ids are not
    checked against the backend first.
    """
    preview = bulk_preview(ids, dry_run, confirm)
    if preview is not None:
        return preview

    result = await execute(ids)
    if isinstance(result, Failure):
        raise error_from_api(result.error, f"{failure_message}: {result.error}")

    logger.info("Bulk operation executed on %d ids", len(ids))
    return BulkOperationResult(affected_ids=ids, executed=True)
