"""Tagged result type returned by every backend call.

``ApiResult[T]`` is either ``Success(value)`` or ``Failure(error)``; callers
branch with ``isinstance`` or ``match``. Neither branch is ever raised.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class ApiError:
    """Backend failure details.

    ``status_code`` is ``0`` when no HTTP response was received at all
    (connection refused, DNS failure, timeout).
    """

    status_code: int
    message: str
    response_body: str | None = None

    @property
    def is_network_error(self) -> bool:
        return self.status_code == 0

    def __str__(self) -> str:
        if self.status_code:
            return f"HTTP {self.status_code}: {self.message}"
        return self.message

    def describe(self) -> str:
        """Short message followed by the raw response body, if any."""
        if self.response_body:
            return f"{self}\n{self.response_body}"
        return str(self)


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T


@dataclass(frozen=True)
class Failure:
    error: ApiError


ApiResult = Union[Success[T], Failure]
