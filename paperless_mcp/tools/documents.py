"""Document tools: paperless.documents.*

Search, retrieval, download links, uploads, metadata updates, deletion,
bulk edits and reprocessing. Deletion and reprocessing go through the
single-item confirmation gate; ``bulk_update`` goes through the bulk gate.
"""

import base64
import binascii
import logging
from typing import Annotated, Any

from pydantic import Field

from paperless_mcp.middleware.error_handler import ValidationError
from paperless_mcp.models.documents import (
    BulkEditMethod,
    Document,
    DocumentSummary,
    DocumentUpdateRequest,
    DocumentUploadMetadata,
)
from paperless_mcp.services.confirmation import require_confirmation, run_bulk_operation
from paperless_mcp.tools.base import (
    DESTRUCTIVE,
    IDEMPOTENT_WRITE,
    READ_ONLY,
    WRITE,
    Confirm,
    DryRun,
    Ordering,
    Page,
    PageSize,
    ToolSet,
    ToolSpec,
    build_request,
    tool_envelope,
)
from paperless_mcp.validators.params import (
    parse_date,
    parse_int_list,
    require_int_list,
    resolve_upload_path,
)

logger = logging.getLogger(__name__)

REPROCESS_CONFIRMATION_MESSAGE = (
    "Reprocessing requires confirm=true. This will re-run OCR on the document."
)
QUEUED_MESSAGE = "Document uploaded and queued for processing"

DocumentId = Annotated[int, Field(description="Document ID")]
OptionalId = Annotated[int | None, Field(description="ID (optional)")]
ClearableId = Annotated[int | None, Field(description="ID (optional, use -1 to clear)")]
TagIds = Annotated[str | None, Field(description="Tag IDs (comma-separated, optional)")]
DateParam = Annotated[str | None, Field(description="Date (YYYY-MM-DD, optional)")]
Title = Annotated[str | None, Field(description="Document title (optional)")]
Asn = Annotated[int | None, Field(description="Archive serial number (optional)")]

_CLEARABLE = ("correspondent", "document_type", "storage_path")


def _delete_preview(document: Document) -> dict[str, Any]:
    return {
        "id": document.id,
        "title": document.title,
        "original_file_name": document.original_file_name,
        "created": document.created,
    }


def _reprocess_preview(document: Document) -> dict[str, Any]:
    return {"id": document.id, "title": document.title}


class DocumentTools(ToolSet):
    namespace = "documents"

    def specs(self) -> list[ToolSpec]:
        return [
            ToolSpec(
                "search",
                "search",
                "Search for documents with full-text search and filters. Supports pagination.",
                READ_ONLY,
            ),
            ToolSpec("get", "get_document", "Get a document by its ID.", READ_ONLY),
            ToolSpec(
                "download",
                "download",
                "Get download URLs for a document's original file, preview, and thumbnail.",
                READ_ONLY,
            ),
            ToolSpec("preview", "preview", "Get the preview URL for a document.", READ_ONLY),
            ToolSpec("thumbnail", "thumbnail", "Get the thumbnail URL for a document.", READ_ONLY),
            ToolSpec(
                "upload",
                "upload",
                "Upload a new document from base64 content. "
                "For large files, use paperless.documents.upload_from_path instead.",
                WRITE,
            ),
            ToolSpec(
                "upload_from_path",
                "upload_from_path",
                "Upload a document from an absolute local file path. "
                "Streams the file and retries on IO and network errors.",
                WRITE,
            ),
            ToolSpec(
                "update",
                "update",
                "Update document metadata (title, correspondent, type, tags, etc.).",
                IDEMPOTENT_WRITE,
            ),
            ToolSpec(
                "delete",
                "delete",
                "Delete a document. Requires explicit confirmation.",
                DESTRUCTIVE,
            ),
            ToolSpec(
                "bulk_update",
                "bulk_update",
                "Perform bulk operations on multiple documents. Supports dry run mode.",
                DESTRUCTIVE,
            ),
            ToolSpec(
                "reprocess",
                "reprocess",
                "Reprocess a document's OCR and content extraction. Requires explicit confirmation.",
                DESTRUCTIVE,
            ),
        ]

    async def _document(self, document_id: int) -> Document:
        return self.unwrap(
            await self.client.get_document(document_id),
            not_found=f"Document with ID {document_id} not found",
        )

    # -- read ---------------------------------------------------------------

    @tool_envelope
    async def search(
        self,
        query: Annotated[str | None, Field(description="Full-text search query")] = None,
        tags: Annotated[str | None, Field(description="Filter by tag IDs (comma-separated)")] = None,
        tags_exclude: Annotated[str | None, Field(description="Exclude tag IDs (comma-separated)")] = None,
        correspondent: Annotated[int | None, Field(description="Filter by correspondent ID")] = None,
        document_type: Annotated[int | None, Field(description="Filter by document type ID")] = None,
        storage_path: Annotated[int | None, Field(description="Filter by storage path ID")] = None,
        created_after: Annotated[str | None, Field(description="Created after (YYYY-MM-DD)")] = None,
        created_before: Annotated[str | None, Field(description="Created before (YYYY-MM-DD)")] = None,
        added_after: Annotated[str | None, Field(description="Added after (YYYY-MM-DD)")] = None,
        added_before: Annotated[str | None, Field(description="Added before (YYYY-MM-DD)")] = None,
        archive_serial_number: Annotated[int | None, Field(description="Filter by archive serial number")] = None,
        page: Page = 1,
        page_size: PageSize = 25,
        ordering: Ordering = None,
        include_content: Annotated[
            bool,
            Field(description="Include document content (default: false). Use paperless.documents.get for full content."),
        ] = False,
        content_max_length: Annotated[
            int,
            Field(description="Max content length per document when include_content=true (default: 500, 0 = unlimited)"),
        ] = 500,
    ) -> str:
        size = self.client.clamp_page_size(page_size)
        result = await self.client.search_documents(
            query=query,
            tags=parse_int_list(tags),
            tags_exclude=parse_int_list(tags_exclude),
            correspondent=correspondent,
            document_type=document_type,
            storage_path=storage_path,
            created_after=parse_date(created_after, "created_after"),
            created_before=parse_date(created_before, "created_before"),
            added_after=parse_date(added_after, "added_after"),
            added_before=parse_date(added_before, "added_before"),
            archive_serial_number=archive_serial_number,
            page=page,
            page_size=size,
            ordering=ordering,
        )
        found = self.unwrap(result, "Document search failed")
        max_length = content_max_length if content_max_length > 0 else None
        summaries = [
            DocumentSummary.from_document(document, include_content, max_length)
            for document in found.results
        ]
        return self.ok_page(found, page, size, summaries)

    @tool_envelope
    async def get_document(self, id: DocumentId) -> str:
        return self.ok(await self._document(id))

    @tool_envelope
    async def download(self, id: DocumentId) -> str:
        document = await self._document(id)
        return self.ok(self.client.download_info(id, document.title, document.original_file_name))

    @tool_envelope
    async def preview(self, id: DocumentId) -> str:
        document = await self._document(id)
        info = self.client.download_info(id, document.title, document.original_file_name)
        return self.ok({"id": id, "title": document.title, "preview_url": info.preview_url})

    @tool_envelope
    async def thumbnail(self, id: DocumentId) -> str:
        document = await self._document(id)
        info = self.client.download_info(id, document.title, document.original_file_name)
        return self.ok({"id": id, "title": document.title, "thumbnail_url": info.thumbnail_url})

    # -- upload -------------------------------------------------------------

    @tool_envelope
    async def upload(
        self,
        file_content: Annotated[str, Field(description="Base64-encoded file content")],
        file_name: Annotated[str, Field(description="Original filename with extension")],
        title: Title = None,
        correspondent: OptionalId = None,
        document_type: OptionalId = None,
        storage_path: OptionalId = None,
        tags: TagIds = None,
        archive_serial_number: Asn = None,
        created: DateParam = None,
    ) -> str:
        if not file_name or not file_name.strip():
            raise ValidationError("file_name is required", {"field": "file_name"})
        try:
            content = base64.b64decode("".join(file_content.split()), validate=True)
        except (binascii.Error, ValueError):
            raise ValidationError("Invalid base64 file content", {"field": "file_content"}) from None

        metadata = build_request(
            DocumentUploadMetadata,
            title=title,
            correspondent=correspondent,
            document_type=document_type,
            storage_path=storage_path,
            tags=parse_int_list(tags),
            archive_serial_number=archive_serial_number,
            created=parse_date(created, "created"),
        )
        task_id = self.unwrap(await self.client.upload_document(content, file_name.strip(), metadata))
        return self.ok({"task_id": task_id, "status": "queued", "message": QUEUED_MESSAGE})

    @tool_envelope
    async def upload_from_path(
        self,
        file_path: Annotated[str, Field(description="Absolute path to the file to upload ('~' is expanded)")],
        title: Annotated[str | None, Field(description="Document title (optional, defaults to filename)")] = None,
        correspondent: OptionalId = None,
        document_type: OptionalId = None,
        storage_path: OptionalId = None,
        tags: TagIds = None,
        archive_serial_number: Asn = None,
        created: DateParam = None,
    ) -> str:
        resolved = resolve_upload_path(file_path)
        file_size = resolved.stat().st_size

        metadata = build_request(
            DocumentUploadMetadata,
            title=title or resolved.stem,
            correspondent=correspondent,
            document_type=document_type,
            storage_path=storage_path,
            tags=parse_int_list(tags),
            archive_serial_number=archive_serial_number,
            created=parse_date(created, "created"),
        )
        task_id = self.unwrap(await self.client.upload_document_from_path(str(resolved), metadata))
        return self.ok(
            {
                "task_id": task_id,
                "status": "queued",
                "message": QUEUED_MESSAGE,
                "file_name": resolved.name,
                "file_size": file_size,
            }
        )

    # -- mutate -------------------------------------------------------------

    @tool_envelope
    async def update(
        self,
        id: DocumentId,
        title: Annotated[str | None, Field(description="New title (optional)")] = None,
        correspondent: ClearableId = None,
        document_type: ClearableId = None,
        storage_path: ClearableId = None,
        tags: Annotated[str | None, Field(description="Tag IDs to set (comma-separated, optional)")] = None,
        archive_serial_number: Asn = None,
        created: DateParam = None,
    ) -> str:
        fields: dict[str, Any] = {}
        if title is not None:
            fields["title"] = title
        for name, value in zip(_CLEARABLE, (correspondent, document_type, storage_path)):
            if value == -1:
                fields[name] = None
            elif value is not None:
                fields[name] = value
        tag_ids = parse_int_list(tags)
        if tag_ids is not None:
            fields["tags"] = tag_ids
        if archive_serial_number is not None:
            fields["archive_serial_number"] = archive_serial_number
        created_date = parse_date(created, "created")
        if created_date is not None:
            fields["created"] = created_date
        if not fields:
            raise ValidationError("No fields to update", {"id": id})

        payload = DocumentUpdateRequest(**fields).to_payload()
        result = await self.client.update_document(id, payload)
        return self.ok(
            self.unwrap(
                result,
                f"Failed to update document {id}",
                not_found=f"Document with ID {id} not found",
            )
        )

    @tool_envelope
    async def delete(self, id: DocumentId, confirm: Confirm = False) -> str:
        await require_confirmation(
            confirm,
            lambda: self.client.get_document(id),
            _delete_preview,
            not_found_message=f"Document with ID {id} not found",
        )
        self.unwrap(await self.client.delete_document(id), f"Failed to delete document with ID {id}")
        logger.info("Deleted document %d", id, extra={"tool": self.tool_name("delete")})
        return self.ok({"deleted": True, "id": id})

    @tool_envelope
    async def bulk_update(
        self,
        document_ids: Annotated[str, Field(description="Document IDs (comma-separated)")],
        operation: Annotated[
            str,
            Field(
                description="Operation: add_tag, remove_tag, set_correspondent, "
                "set_document_type, set_storage_path, delete, reprocess"
            ),
        ],
        value: Annotated[int | None, Field(description="Parameter value (e.g. tag ID, correspondent ID)")] = None,
        dry_run: DryRun = True,
        confirm: Confirm = False,
    ) -> str:
        ids = require_int_list(document_ids, "document_ids")
        try:
            method = BulkEditMethod(operation)
        except ValueError:
            valid = ", ".join(m.value for m in BulkEditMethod)
            raise ValidationError(
                f"Invalid operation. Valid operations: {valid}", {"field": "operation"}
            ) from None
        if method in (BulkEditMethod.ADD_TAG, BulkEditMethod.REMOVE_TAG) and value is None:
            raise ValidationError(f"{method.value} requires a tag ID in value", {"field": "value"})

        outcome = await run_bulk_operation(
            ids,
            dry_run=dry_run,
            confirm=confirm,
            execute=lambda chosen: self.client.bulk_edit_documents(
                chosen, method.value, method.parameters(value)
            ),
        )
        return self.ok(outcome)

    @tool_envelope
    async def reprocess(self, id: DocumentId, confirm: Confirm = False) -> str:
        await require_confirmation(
            confirm,
            lambda: self.client.get_document(id),
            _reprocess_preview,
            message=REPROCESS_CONFIRMATION_MESSAGE,
            not_found_message=f"Document with ID {id} not found",
        )
        result = await self.client.bulk_edit_documents([id], BulkEditMethod.REPROCESS.value)
        self.unwrap(result, f"Failed to reprocess document with ID {id}")
        return self.ok(
            {"id": id, "status": "queued", "message": "Document queued for reprocessing"}
        )
