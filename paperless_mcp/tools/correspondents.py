"""Correspondent tools: paperless.correspondents.*"""

from typing import Annotated

from pydantic import Field

from paperless_mcp.models.metadata import (
    Correspondent,
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


class CorrespondentTools(MetadataToolSet):
    namespace = "correspondents"
    object_type = "correspondents"
    label = "Correspondent"
    model = Correspondent

    @tool_envelope
    async def create(
        self,
        name: Annotated[str, Field(description="Correspondent name")],
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
