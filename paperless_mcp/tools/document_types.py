"""Document type tools: paperless.document_types.*"""

from typing import Annotated

from pydantic import Field

from paperless_mcp.models.metadata import (
    DocumentType,
    MatchableCreateRequest,
    MatchableUpdateRequest,
)
from paperless_mcp.tools.base import (
    EntityId,
    IsInsensitive,
    MatchingAlgorithmParam,
    MatchPattern,
    MetadataToolSet,
    build_request,
    tool_envelope,
)


class DocumentTypeTools(MetadataToolSet):
    namespace = "document_types"
    object_type = "document_types"
    label = "Document type"
    model = DocumentType

    @tool_envelope
    async def create(
        self,
        name: Annotated[str, Field(description="Document type name")],
        match: MatchPattern = None,
        matching_algorithm: MatchingAlgorithmParam = None,
        is_insensitive: IsInsensitive = None,
    ) -> str:
        request = build_request(
            MatchableCreateRequest,
            name=name,
            match=match,
            matching_algorithm=matching_algorithm,
            is_insensitive=is_insensitive,
        )
        return await self._create(request.to_payload())

    @tool_envelope
    async def update(
        self,
        id: EntityId,
        name: Annotated[str | None, Field(description="New name")] = None,
        match: MatchPattern = None,
        matching_algorithm: MatchingAlgorithmParam = None,
        is_insensitive: IsInsensitive = None,
    ) -> str:
        request = build_request(
            MatchableUpdateRequest,
            name=name,
            match=match,
            matching_algorithm=matching_algorithm,
            is_insensitive=is_insensitive,
        )
        return await self._update(id, request.to_payload())
