"""Public models for the Paperless MCP server."""

from paperless_mcp.models.common import BulkOperationResult, PaginatedResult
from paperless_mcp.models.documents import (
    BulkEditMethod,
    Document,
    DocumentCustomField,
    DocumentDownload,
    DocumentSummary,
    DocumentUpdateRequest,
    DocumentUploadMetadata,
)
from paperless_mcp.models.metadata import (
    Correspondent,
    CustomField,
    CustomFieldDataType,
    DocumentType,
    MatchingAlgorithm,
    StoragePath,
    Tag,
)
from paperless_mcp.models.responses import (
    ErrorCode,
    ErrorInfo,
    Meta,
    ToolErrorResponse,
    ToolResponse,
)

__all__ = [
    "BulkEditMethod",
    "BulkOperationResult",
    "Correspondent",
    "CustomField",
    "CustomFieldDataType",
    "Document",
    "DocumentCustomField",
    "DocumentDownload",
    "DocumentSummary",
    "DocumentType",
    "DocumentUpdateRequest",
    "DocumentUploadMetadata",
    "ErrorCode",
    "ErrorInfo",
    "MatchingAlgorithm",
    "Meta",
    "PaginatedResult",
    "StoragePath",
    "Tag",
    "ToolErrorResponse",
    "ToolResponse",
]
