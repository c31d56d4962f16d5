"""Metadata entity schemas: tags, correspondents, document types,
storage paths and custom fields.

The four "matchable" entities share the backend's auto-matching fields
(``match``, ``matching_algorithm``, ``is_insensitive``). This server only
stores and forwards them; matching itself happens in Paperless.
"""

from __future__ import annotations

from enum import Enum, IntEnum

from pydantic import BaseModel, ConfigDict, Field


class MatchingAlgorithm(IntEnum):
    NONE = 0
    ANY = 1
    ALL = 2
    LITERAL = 3
    REGEX = 4
    FUZZY = 5
    AUTO = 6


class CustomFieldDataType(str, Enum):
    STRING = "string"
    URL = "url"
    DATE = "date"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    MONETARY = "monetary"
    DOCUMENT_LINK = "documentlink"
    SELECT = "select"


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class MatchableEntity(BaseModel):
    """Fields common to every entity Paperless can auto-assign."""

    model_config = ConfigDict(extra="allow")

    id: int
    slug: str | None = None
    name: str
    match: str | None = None
    matching_algorithm: int | None = None
    is_insensitive: bool | None = None
    document_count: int | None = None
    owner: int | None = None


class Tag(MatchableEntity):
    color: str | None = None
    text_color: str | None = None
    is_inbox_tag: bool | None = None
    parent: int | None = None


class Correspondent(MatchableEntity):
    last_correspondence: str | None = None


class DocumentType(MatchableEntity):
    pass


class StoragePath(MatchableEntity):
    path: str | None = None


class CustomFieldExtraData(BaseModel):
    model_config = ConfigDict(extra="allow")

    select_options: list[object] | None = None
    default_currency: str | None = None


class CustomField(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int
    name: str
    data_type: str
    extra_data: CustomFieldExtraData | None = None
    document_count: int | None = None


# ---------------------------------------------------------------------------
# Request models (serialised with exclude_unset)
# ---------------------------------------------------------------------------


class MatchableCreateRequest(BaseModel):
    name: str = Field(min_length=1)
    match: str | None = None
    matching_algorithm: MatchingAlgorithm | None = None
    is_insensitive: bool | None = None

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", exclude_unset=True)


class MatchableUpdateRequest(BaseModel):
    name: str | None = None
    match: str | None = None
    matching_algorithm: MatchingAlgorithm | None = None
    is_insensitive: bool | None = None

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", exclude_unset=True)


class TagCreateRequest(MatchableCreateRequest):
    color: str | None = None
    is_inbox_tag: bool | None = None
    parent: int | None = None


class TagUpdateRequest(MatchableUpdateRequest):
    color: str | None = None
    is_inbox_tag: bool | None = None
    parent: int | None = None


class StoragePathCreateRequest(MatchableCreateRequest):
    path: str = Field(min_length=1)


class StoragePathUpdateRequest(MatchableUpdateRequest):
    path: str | None = None


class CustomFieldCreateRequest(BaseModel):
    name: str = Field(min_length=1)
    data_type: CustomFieldDataType
    extra_data: CustomFieldExtraData | None = None

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", exclude_unset=True, exclude_none=True)


class CustomFieldUpdateRequest(BaseModel):
    name: str | None = None
    extra_data: CustomFieldExtraData | None = None

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", exclude_unset=True, exclude_none=True)
