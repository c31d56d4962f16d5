"""Document schemas exchanged with the Paperless-ngx API.

Response models accept unknown fields so newer backend attributes pass
through to the caller untouched. Request models are serialised with
``exclude_unset`` so only the fields a caller actually provided are sent;
an explicit ``None`` is sent as ``null`` to clear a relation.
"""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class DocumentCustomField(BaseModel):
    """Custom field value attached to a document."""

    field: int
    value: Any = None


class DocumentNote(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    note: str = ""
    created: str | None = None
    user: Any = None


class SearchHit(BaseModel):
    score: float | None = None
    highlights: str | None = None
    rank: int | None = None


class Document(BaseModel):
    """A document as returned by ``/api/documents/``."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: int
    correspondent: int | None = None
    document_type: int | None = None
    storage_path: int | None = None
    title: str = ""
    content: str = ""
    tags: list[int] = Field(default_factory=list)
    created: str | None = None
    created_date: str | None = None
    modified: str | None = None
    added: str | None = None
    archive_serial_number: int | None = None
    original_file_name: str | None = None
    archived_file_name: str | None = None
    owner: int | None = None
    custom_fields: list[DocumentCustomField] = Field(default_factory=list)
    notes: list[DocumentNote] | None = None
    search_hit: SearchHit | None = Field(default=None, alias="__search_hit__")


class DocumentSummary(BaseModel):
    """Lightweight search result without notes and with bounded content."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    correspondent: int | None = None
    document_type: int | None = None
    storage_path: int | None = None
    title: str = ""
    content: str | None = None
    tags: list[int] = Field(default_factory=list)
    created: str | None = None
    modified: str | None = None
    added: str | None = None
    archive_serial_number: int | None = None
    original_file_name: str | None = None
    search_hit: SearchHit | None = Field(default=None, alias="__search_hit__")

    @classmethod
    def from_document(
        cls,
        document: Document,
        include_content: bool = False,
        content_max_length: int | None = None,
    ) -> DocumentSummary:
        """Build a summary, truncating content to ``content_max_length``."""
        content = None
        if include_content and document.content:
            content = document.content
            if content_max_length and len(content) > content_max_length:
                content = content[:content_max_length] + "..."

        return cls(
            id=document.id,
            correspondent=document.correspondent,
            document_type=document.document_type,
            storage_path=document.storage_path,
            title=document.title,
            content=content,
            tags=document.tags,
            created=document.created,
            modified=document.modified,
            added=document.added,
            archive_serial_number=document.archive_serial_number,
            original_file_name=document.original_file_name,
            search_hit=document.search_hit,
        )


class DocumentUpdateRequest(BaseModel):
    """PATCH body for ``/api/documents/{id}/``."""

    title: str | None = None
    correspondent: int | None = None
    document_type: int | None = None
    storage_path: int | None = None
    tags: list[int] | None = None
    archive_serial_number: int | None = None
    custom_fields: list[DocumentCustomField] | None = None
    created: date | None = None

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", exclude_unset=True)


class DocumentUploadMetadata(BaseModel):
    """Optional metadata sent alongside an uploaded file."""

    title: str | None = None
    created: date | None = None
    correspondent: int | None = None
    document_type: int | None = None
    storage_path: int | None = None
    tags: list[int] | None = None
    archive_serial_number: int | None = None

    def form_fields(self) -> dict[str, str | list[str]]:
        """Multipart string parts; absent values are not sent at all."""
        fields: dict[str, str | list[str]] = {}
        if self.title:
            fields["title"] = self.title
        if self.correspondent is not None:
            fields["correspondent"] = str(self.correspondent)
        if self.document_type is not None:
            fields["document_type"] = str(self.document_type)
        if self.storage_path is not None:
            fields["storage_path"] = str(self.storage_path)
        if self.tags:
            fields["tags"] = [str(tag) for tag in self.tags]
        if self.archive_serial_number is not None:
            fields["archive_serial_number"] = str(self.archive_serial_number)
        if self.created is not None:
            fields["created"] = self.created.strftime("%Y-%m-%d")
        return fields


class DocumentDownload(BaseModel):
    id: int
    title: str = ""
    original_file_name: str | None = None
    download_url: str
    preview_url: str | None = None
    thumbnail_url: str | None = None


class BulkEditMethod(str, Enum):
    """Operations accepted by ``/api/documents/bulk_edit/`` through the tools."""

    ADD_TAG = "add_tag"
    REMOVE_TAG = "remove_tag"
    SET_CORRESPONDENT = "set_correspondent"
    SET_DOCUMENT_TYPE = "set_document_type"
    SET_STORAGE_PATH = "set_storage_path"
    DELETE = "delete"
    REPROCESS = "reprocess"

    def parameters(self, value: int | None) -> dict:
        """Backend ``parameters`` object for this method."""
        if self in (BulkEditMethod.ADD_TAG, BulkEditMethod.REMOVE_TAG):
            return {"tag": value}
        if self is BulkEditMethod.SET_CORRESPONDENT:
            return {"correspondent": value}
        if self is BulkEditMethod.SET_DOCUMENT_TYPE:
            return {"document_type": value}
        if self is BulkEditMethod.SET_STORAGE_PATH:
            return {"storage_path": value}
        return {}
