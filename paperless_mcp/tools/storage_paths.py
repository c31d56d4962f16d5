"""Storage path tools: paperless.storage_paths.*"""

from typing import Annotated

from pydantic import Field

from paperless_mcp.models.metadata import (
    StoragePath,
    StoragePathCreateRequest,
    StoragePathUpdateRequest,
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

PathTemplate = Annotated[
    str, Field(description="Path template (e.g. '{created_year}/{correspondent}/{title}')")
]


class StoragePathTools(MetadataToolSet):
    namespace = "storage_paths"
    object_type = "storage_paths"
    label = "Storage path"
    model = StoragePath
    preview_fields = ("name", "path", "document_count")

    @tool_envelope
    async def create(
        self,
        name: Annotated[str, Field(description="Storage path name")],
        path: PathTemplate,
        match: MatchPattern = None,
        matching_algorithm: MatchingAlgorithmParam = None,
        is_insensitive: IsInsensitive = None,
    ) -> str:
        request = build_request(
            StoragePathCreateRequest,
            name=name,
            path=path,
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
        path: Annotated[str | None, Field(description="New path template")] = None,
        match: MatchPattern = None,
        matching_algorithm: MatchingAlgorithmParam = None,
        is_insensitive: IsInsensitive = None,
    ) -> str:
        request = build_request(
            StoragePathUpdateRequest,
            name=name,
            path=path,
            match=match,
            matching_algorithm=matching_algorithm,
            is_insensitive=is_insensitive,
        )
        return await self._update(id, request.to_payload())
