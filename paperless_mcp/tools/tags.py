"""Tag tools: paperless.tags.*"""

from typing import Annotated

from pydantic import Field

from paperless_mcp.models.metadata import Tag, TagCreateRequest, TagUpdateRequest
from paperless_mcp.tools.base import (
    EntityId,
    IsInsensitive,
    MatchingAlgorithmParam,
    MatchPattern,
    MetadataToolSet,
    build_request,
    tool_envelope,
)

Color = Annotated[str | None, Field(description="Hex color (e.g. '#ff0000')")]
IsInboxTag = Annotated[bool | None, Field(description="Mark as inbox tag")]
Parent = Annotated[int | None, Field(description="Parent tag ID for nested tags")]


class TagTools(MetadataToolSet):
    namespace = "tags"
    object_type = "tags"
    label = "Tag"
    model = Tag

    @tool_envelope
    async def create(
        self,
        name: Annotated[str, Field(description="Tag name")],
        color: Color = None,
        match: MatchPattern = None,
        matching_algorithm: MatchingAlgorithmParam = None,
        is_insensitive: IsInsensitive = None,
        is_inbox_tag: IsInboxTag = None,
        parent: Parent = None,
    ) -> str:
        request = build_request(
            TagCreateRequest,
            name=name,
            color=color,
            match=match,
            matching_algorithm=matching_algorithm,
            is_insensitive=is_insensitive,
            is_inbox_tag=is_inbox_tag,
            parent=parent,
        )
        return await self._create(request.to_payload())

    @tool_envelope
    async def update(
        self,
        id: EntityId,
        name: Annotated[str | None, Field(description="New name")] = None,
        color: Color = None,
        match: MatchPattern = None,
        matching_algorithm: MatchingAlgorithmParam = None,
        is_insensitive: IsInsensitive = None,
        is_inbox_tag: IsInboxTag = None,
        parent: Parent = None,
    ) -> str:
        request = build_request(
            TagUpdateRequest,
            name=name,
            color=color,
            match=match,
            matching_algorithm=matching_algorithm,
            is_insensitive=is_insensitive,
            is_inbox_tag=is_inbox_tag,
            parent=parent,
        )
        return await self._update(id, request.to_payload())
