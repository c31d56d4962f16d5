"""Unit tests for the confirmation and dry-run gate."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from paperless_mcp.integration.result import ApiError, Failure, Success
from paperless_mcp.middleware.error_handler import (
    ConfirmationRequiredError,
    NotFoundError,
    UpstreamError,
)
from paperless_mcp.services.confirmation import (
    CONFIRM_WARNING,
    DRY_RUN_WARNING,
    bulk_preview,
    require_confirmation,
    run_bulk_operation,
)


def _preview(entity: dict) -> dict:
    return {"id": entity["id"], "name": entity["name"]}


class TestRequireConfirmation:
    """Single-item gate."""

    @pytest.mark.asyncio
    async def test_confirmed_skips_fetch(self) -> None:
        fetch = AsyncMock()
        await require_confirmation(True, fetch, _preview)
        fetch.assert_not_called()

    @pytest.mark.asyncio
    async def test_unconfirmed_raises_with_preview(self) -> None:
        fetch = AsyncMock(return_value=Success({"id": 1, "name": "Archive"}))

        with pytest.raises(ConfirmationRequiredError) as exc_info:
            await require_confirmation(False, fetch, _preview)

        assert exc_info.value.details == {"id": 1, "name": "Archive"}
        assert "confirm=true" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_missing_entity_is_not_found(self) -> None:
        fetch = AsyncMock(return_value=Failure(ApiError(404, "Not Found")))

        with pytest.raises(NotFoundError) as exc_info:
            await require_confirmation(
                False, fetch, _preview, not_found_message="Tag with ID 9 not found"
            )

        assert exc_info.value.message == "Tag with ID 9 not found"

    @pytest.mark.asyncio
    async def test_backend_error_propagates_mapped(self) -> None:
        fetch = AsyncMock(return_value=Failure(ApiError(500, "Internal Server Error")))

        with pytest.raises(UpstreamError):
            await require_confirmation(False, fetch, _preview)

    @pytest.mark.asyncio
    async def test_only_literal_true_confirms(self) -> None:
        fetch = AsyncMock(return_value=Success({"id": 1, "name": "A"}))
        with pytest.raises(ConfirmationRequiredError):
            await require_confirmation("true", fetch, _preview)  # type: ignore[arg-type]


class TestBulkPreview:
    def test_dry_run_wins_over_confirm(self) -> None:
        preview = bulk_preview([1, 2], dry_run=True, confirm=True)
        assert preview is not None
        assert preview.executed is False
        assert preview.warnings == [DRY_RUN_WARNING]

    def test_unconfirmed_without_dry_run(self) -> None:
        preview = bulk_preview([1], dry_run=False, confirm=False)
        assert preview is not None
        assert preview.warnings == [CONFIRM_WARNING]

    def test_execution_allowed(self) -> None:
        assert bulk_preview([1], dry_run=False, confirm=True) is None


class TestRunBulkOperation:
    @pytest.mark.asyncio
    async def test_preview_never_executes(self) -> None:
        execute = AsyncMock()
        result = await run_bulk_operation([1, 2, 3], dry_run=True, confirm=False, execute=execute)

        execute.assert_not_called()
        assert result.affected_ids == [1, 2, 3]
        assert result.executed is False

    @pytest.mark.asyncio
    async def test_executes_once_with_full_list(self) -> None:
        execute = AsyncMock(return_value=Success(None))
        result = await run_bulk_operation([4, 5, 6], dry_run=False, confirm=True, execute=execute)

        execute.assert_awaited_once_with([4, 5, 6])
        assert result.executed is True
        assert result.warnings == []

    @pytest.mark.asyncio
    async def test_backend_failure_raises(self) -> None:
        execute = AsyncMock(return_value=Failure(ApiError(400, "Bad Request", "bad tag")))

        with pytest.raises(UpstreamError) as exc_info:
            await run_bulk_operation(
                [1], dry_run=False, confirm=True, execute=execute, failure_message="Bulk edit failed"
            )

        assert exc_info.value.message == "Bulk edit failed: HTTP 400: Bad Request"
        assert exc_info.value.details["response_body"] == "bad tag"
