"""Pagination and bulk-operation models shared across entity types."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PaginatedResult(BaseModel, Generic[T]):
    """Cursor-style page returned by every Paperless list endpoint."""

    count: int = 0
    next: str | None = None
    previous: str | None = None
    results: list[T] = Field(default_factory=list)

    @property
    def has_more(self) -> bool:
        return self.next is not None


class BulkOperationResult(BaseModel):
    """Outcome of a bulk operation.

    ``executed=False`` marks a preview: nothing was sent to the backend's
    mutation endpoint. ``current_values`` and ``proposed_changes`` are part
    of the wire shape but previews do not populate them.
    """

    affected_ids: list[int] = Field(default_factory=list)
    current_values: dict[int, object] | None = None
    proposed_changes: dict[int, object] | None = None
    warnings: list[str] = Field(default_factory=list)
    executed: bool = False
