"""Client for the Paperless-ngx REST API.

Every method returns an ``ApiResult``. Network exceptions raised by the
transport are converted to ``Failure(ApiError(0, ...))`` here, so callers
never see a raw ``httpx`` exception.

Entity endpoints all follow the same shape, so one set of generic methods
serves tags, correspondents, document types, storage paths, custom fields
and documents:
- GET/POST   /api/{entity}/
- GET/PATCH/DELETE /api/{entity}/{id}/
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, TypeVar

import httpx

from paperless_mcp.config.settings import PaperlessSettings
from paperless_mcp.integration.normalizer import normalize, normalize_empty
from paperless_mcp.integration.result import ApiError, ApiResult, Failure, Success
from paperless_mcp.integration.transport import HttpTransport
from paperless_mcp.integration.upload import UploadPipeline
from paperless_mcp.models.common import PaginatedResult
from paperless_mcp.models.documents import (
    Document,
    DocumentDownload,
    DocumentUploadMetadata,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

STATUS_PATH = "/api/status/"
BULK_EDIT_PATH = "/api/documents/bulk_edit/"
BULK_EDIT_OBJECTS_PATH = "/api/bulk_edit_objects/"


def _entity_path(entity: str, entity_id: int | None = None) -> str:
    if entity_id is None:
        return f"/api/{entity}/"
    return f"/api/{entity}/{entity_id}/"


def _format_date(value: date | None) -> str | None:
    return value.strftime("%Y-%m-%d") if value is not None else None


class PaperlessClient:
    """Async client bound to one Paperless instance.

    Parameters
    ----------
    settings:
        Frozen server settings; read once here, never looked up again.
    transport:
        Optional ``httpx`` transport passed through to the shared client,
        used by tests to simulate the backend.
    """

    def __init__(
        self,
        settings: PaperlessSettings,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._settings = settings
        self._http = HttpTransport(settings, transport=transport)
        self._uploads = UploadPipeline(
            self._http,
            max_retries=settings.upload_max_retries,
            timeout_seconds=settings.upload_timeout_seconds,
        )

    @property
    def base_url(self) -> str:
        return self._settings.base_url

    @property
    def max_page_size(self) -> int:
        return self._settings.max_page_size

    def clamp_page_size(self, page_size: int | None) -> int:
        """Bound a requested page size to ``1..max_page_size``."""
        if page_size is None or page_size <= 0:
            return self.max_page_size
        return min(page_size, self.max_page_size)

    async def aclose(self) -> None:
        await self._http.aclose()

    # -- low level ----------------------------------------------------------

    async def _send(self, method: str, path: str, **kwargs: Any) -> httpx.Response | Failure:
        try:
            return await self._http.send(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.error(
                "Paperless unreachable: %s %s: %s",
                method,
                path,
                exc,
                extra={"method": method, "path": path, "error_reason": repr(exc)},
            )
            return Failure(ApiError(0, f"Request failed: {str(exc) or type(exc).__name__}"))

    async def _fetch(self, method: str, path: str, model: Any, **kwargs: Any) -> ApiResult[Any]:
        response = await self._send(method, path, **kwargs)
        if isinstance(response, Failure):
            return response
        return normalize(response, model)

    async def _execute(self, method: str, path: str, **kwargs: Any) -> ApiResult[None]:
        response = await self._send(method, path, **kwargs)
        if isinstance(response, Failure):
            return response
        return normalize_empty(response)

    # -- status -------------------------------------------------------------

    async def get_status(self) -> ApiResult[dict]:
        """``GET /api/status/``: version, storage, database and task health."""
        return await self._fetch("GET", STATUS_PATH, dict)

    async def ping(self) -> ApiResult[str | None]:
        """Reachability check; the success value is the reported version."""
        result = await self.get_status()
        if isinstance(result, Failure):
            return result
        return Success(result.value.get("pngx_version"))

    # -- generic entities ---------------------------------------------------

    async def list_entities(
        self,
        entity: str,
        model: type[T],
        *,
        page: int = 1,
        page_size: int | None = None,
        ordering: str | None = None,
        filters: dict[str, Any] | None = None,
    ) -> ApiResult[PaginatedResult[T]]:
        params: dict[str, Any] = {
            "page": max(page, 1),
            "page_size": self.clamp_page_size(page_size),
        }
        if ordering:
            params["ordering"] = ordering
        for key, value in (filters or {}).items():
            if value is not None:
                params[key] = value
        return await self._fetch(
            "GET", _entity_path(entity), PaginatedResult[model], params=params
        )

    async def get_entity(self, entity: str, entity_id: int, model: type[T]) -> ApiResult[T]:
        return await self._fetch("GET", _entity_path(entity, entity_id), model)

    async def create_entity(
        self, entity: str, payload: dict[str, Any], model: type[T]
    ) -> ApiResult[T]:
        return await self._fetch("POST", _entity_path(entity), model, json=payload)

    async def update_entity(
        self, entity: str, entity_id: int, payload: dict[str, Any], model: type[T]
    ) -> ApiResult[T]:
        return await self._fetch(
            "PATCH", _entity_path(entity, entity_id), model, json=payload
        )

    async def delete_entity(self, entity: str, entity_id: int) -> ApiResult[None]:
        return await self._execute("DELETE", _entity_path(entity, entity_id))

    async def bulk_edit_objects(
        self,
        object_ids: list[int],
        object_type: str,
        operation: str = "delete",
        parameters: dict[str, Any] | None = None,
    ) -> ApiResult[None]:
        """``POST /api/bulk_edit_objects/`` for tags, correspondents, etc."""
        payload: dict[str, Any] = {
            "objects": object_ids,
            "object_type": object_type,
            "operation": operation,
        }
        if parameters is not None:
            payload["parameters"] = parameters
        return await self._execute("POST", BULK_EDIT_OBJECTS_PATH, json=payload)

    # -- documents ----------------------------------------------------------

    async def search_documents(
        self,
        *,
        query: str | None = None,
        tags: list[int] | None = None,
        tags_exclude: list[int] | None = None,
        correspondent: int | None = None,
        document_type: int | None = None,
        storage_path: int | None = None,
        created_after: date | None = None,
        created_before: date | None = None,
        added_after: date | None = None,
        added_before: date | None = None,
        archive_serial_number: int | None = None,
        page: int = 1,
        page_size: int | None = None,
        ordering: str | None = None,
    ) -> ApiResult[PaginatedResult[Document]]:
        """Full-text search plus field filters on ``/api/documents/``."""
        filters = {
            "query": query or None,
            "tags__id__in": ",".join(str(t) for t in tags) if tags else None,
            "tags__id__none": ",".join(str(t) for t in tags_exclude) if tags_exclude else None,
            "correspondent__id": correspondent,
            "document_type__id": document_type,
            "storage_path__id": storage_path,
            "created__date__gt": _format_date(created_after),
            "created__date__lt": _format_date(created_before),
            "added__date__gt": _format_date(added_after),
            "added__date__lt": _format_date(added_before),
            "archive_serial_number": archive_serial_number,
        }
        return await self.list_entities(
            "documents",
            Document,
            page=page,
            page_size=page_size,
            ordering=ordering,
            filters=filters,
        )

    async def get_document(self, document_id: int) -> ApiResult[Document]:
        return await self.get_entity("documents", document_id, Document)

    async def update_document(
        self, document_id: int, payload: dict[str, Any]
    ) -> ApiResult[Document]:
        return await self.update_entity("documents", document_id, payload, Document)

    async def delete_document(self, document_id: int) -> ApiResult[None]:
        return await self.delete_entity("documents", document_id)

    async def bulk_edit_documents(
        self,
        document_ids: list[int],
        method: str,
        parameters: dict[str, Any] | None = None,
    ) -> ApiResult[None]:
        """``POST /api/documents/bulk_edit/`` with the full id list."""
        payload = {
            "documents": document_ids,
            "method": method,
            "parameters": parameters or {},
        }
        logger.info(
            "Bulk edit %s on %d documents",
            method,
            len(document_ids),
            extra={"method": "POST", "path": BULK_EDIT_PATH},
        )
        return await self._execute("POST", BULK_EDIT_PATH, json=payload)

    def download_info(
        self, document_id: int, title: str, original_file_name: str | None
    ) -> DocumentDownload:
        prefix = f"{self.base_url}/api/documents/{document_id}"
        return DocumentDownload(
            id=document_id,
            title=title,
            original_file_name=original_file_name,
            download_url=f"{prefix}/download/",
            preview_url=f"{prefix}/preview/",
            thumbnail_url=f"{prefix}/thumb/",
        )

    async def upload_document(
        self,
        content: bytes,
        filename: str,
        metadata: DocumentUploadMetadata | None = None,
    ) -> ApiResult[str]:
        return await self._uploads.upload_from_bytes(content, filename, metadata)

    async def upload_document_from_path(
        self, path: str, metadata: DocumentUploadMetadata | None = None
    ) -> ApiResult[str]:
        return await self._uploads.upload_from_path(path, metadata)
