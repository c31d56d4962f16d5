"""Parsing of primitive tool parameters.

Tools receive lists as comma-separated strings and dates as ``YYYY-MM-DD``
strings. Empty input always means "not provided".
"""

from __future__ import annotations

import os
from datetime import date, datetime
from pathlib import Path

from paperless_mcp.middleware.error_handler import NotFoundError, ValidationError


def parse_int_list(value: str | None) -> list[int] | None:
    """Parse ``"1, 2,3"`` into ``[1, 2, 3]``.

    Returns ``None`` for empty or whitespace-only input. Entries that are
    not integers are dropped, so ``"1,x"`` parses to ``[1]`` and ``"x"`` to
    ``[]``.
    """
    if value is None or not value.strip():
        return None

    ids: list[int] = []
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            ids.append(int(part))
        except ValueError:
            continue
    return ids


def require_int_list(value: str | None, field: str = "ids") -> list[int]:
    """Like ``parse_int_list`` but an empty result is a validation error."""
    ids = parse_int_list(value)
    if not ids:
        raise ValidationError(
            f"{field} must be a non-empty comma-separated list of integers",
            {"field": field, "value": value},
        )
    return ids


def parse_date(value: str | None, field: str = "date") -> date | None:
    """Parse ``YYYY-MM-DD`` (a full ISO timestamp is accepted too)."""
    if value is None or not value.strip():
        return None

    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        raise ValidationError(
            f"Invalid {field}: expected YYYY-MM-DD",
            {"field": field, "value": value},
        ) from None


def resolve_upload_path(path: str) -> Path:
    """Expand ``~`` and check that the path is absolute and exists.

    Raises
    ------
    ValidationError
        If the path is empty or relative.
    NotFoundError
        If no regular file exists at the path.
    """
    if not path or not path.strip():
        raise ValidationError("File path is required", {"field": "file_path"})

    resolved = Path(os.path.expanduser(path.strip()))
    if not resolved.is_absolute():
        raise ValidationError(
            "File path must be absolute", {"field": "file_path", "value": path}
        )
    if not resolved.is_file():
        raise NotFoundError(f"File not found: {resolved}", {"file_path": str(resolved)})
    return resolved
