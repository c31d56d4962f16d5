"""Tool response envelope models.

Every tool returns one of two JSON envelopes:
{ ok: true, result: T, meta: {...}, warnings: [...] }
{ ok: false, error: { code, message, details }, meta: {...} }

``meta.request_id`` is a fresh UUID4 on every ``Meta`` construction and is
never supplied by the caller. Pagination fields are omitted from the JSON
unless set, so only list tools carry them.
"""

from __future__ import annotations

import json
import uuid
from enum import Enum
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

T = TypeVar("T")


class ErrorCode(str, Enum):
    """Fixed error taxonomy surfaced to callers."""

    NOT_FOUND = "NOT_FOUND"
    VALIDATION = "VALIDATION"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    CONFIRMATION_REQUIRED = "CONFIRMATION_REQUIRED"
    AUTH_FAILED = "AUTH_FAILED"
    RATE_LIMIT = "RATE_LIMIT"
    UNKNOWN = "UNKNOWN"


class Meta(BaseModel):
    """Per-response metadata."""

    model_config = ConfigDict(frozen=True)

    request_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    page: int | None = None
    page_size: int | None = None
    total: int | None = None
    next: str | None = None
    paperless_base_url: str = ""

    @model_validator(mode="before")
    @classmethod
    def _fresh_request_id(cls, data: Any) -> Any:
        if isinstance(data, dict):
            data = {key: value for key, value in data.items() if key != "request_id"}
        return data

    def to_dict(self) -> dict:
        data = self.model_dump(mode="json")
        for key in ("page", "page_size", "total", "next"):
            if data[key] is None:
                del data[key]
        return data


class ErrorInfo(BaseModel):
    """Error object carried by a failure envelope."""

    code: ErrorCode
    message: str
    details: Any = None


class ToolResponse(BaseModel, Generic[T]):
    """Success envelope."""

    ok: Literal[True] = True
    result: T | None = None
    meta: Meta = Field(default_factory=Meta)
    warnings: list[str] = Field(default_factory=list)

    @classmethod
    def success(
        cls,
        result: T,
        meta: Meta | None = None,
        warnings: list[str] | None = None,
    ) -> ToolResponse[T]:
        return cls(result=result, meta=meta or Meta(), warnings=warnings or [])

    def to_json(self) -> str:
        data = self.model_dump(mode="json")
        data["meta"] = self.meta.to_dict()
        return json.dumps(data)


class ToolErrorResponse(BaseModel):
    """Failure envelope. Has no ``result`` branch."""

    ok: Literal[False] = False
    error: ErrorInfo
    meta: Meta = Field(default_factory=Meta)

    @classmethod
    def failure(
        cls,
        code: ErrorCode,
        message: str,
        details: Any = None,
        meta: Meta | None = None,
    ) -> ToolErrorResponse:
        return cls(
            error=ErrorInfo(code=code, message=message, details=details),
            meta=meta or Meta(),
        )

    def to_json(self) -> str:
        data = self.model_dump(mode="json")
        data["meta"] = self.meta.to_dict()
        return json.dumps(data)
