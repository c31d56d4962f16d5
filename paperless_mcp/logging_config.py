"""Structured JSON logging configuration.

Configures Python logging to emit JSON-formatted log entries with required
fields: request_id, level, timestamp. Backend call fields (method, path,
status_code, attempt, response_body) and upload fields (file_name, file_size,
task_id) are added contextually through the ``extra`` dict.

Entries go to stderr: in stdio mode stdout carries the MCP protocol stream.

SECURITY: Never logs the API token or Authorization header values.
"""

from __future__ import annotations

import json
import logging
import re
import sys
from contextvars import ContextVar
from datetime import datetime, timezone

# Bound per HTTP request by RequestIdMiddleware
request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)

# Patterns that should be redacted from log output
_SENSITIVE_PATTERNS = re.compile(
    r"(api.token|token|secret|password|authorization)"
    r"[\s]*[=:]\s*(token\s+|bearer\s+)?\S+",
    re.IGNORECASE,
)

_CONTEXT_FIELDS = (
    "tool",
    "method",
    "path",
    "status_code",
    "attempt",
    "max_attempts",
    "backoff_seconds",
    "file_name",
    "file_size",
    "task_id",
)

_MAX_BODY_CHARS = 500


def truncate_body(body: str | None, limit: int = _MAX_BODY_CHARS) -> str | None:
    """Shorten a response body for log output."""
    if body is None or len(body) <= limit:
        return body
    return body[:limit] + "..."


class JsonFormatter(logging.Formatter):
    """Formats log records as JSON with structured fields.

    Each entry contains at minimum: request_id, level, timestamp, message.
    Additional fields can be attached via the ``extra`` dict on log calls.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": self._sanitize(record.getMessage()),
            "request_id": getattr(record, "request_id", None) or request_id_var.get(),
        }

        for name in _CONTEXT_FIELDS:
            if hasattr(record, name):
                entry[name] = getattr(record, name)

        if hasattr(record, "response_body"):
            body = getattr(record, "response_body")
            entry["response_body"] = (
                self._sanitize(truncate_body(str(body))) if body is not None else None
            )
        if hasattr(record, "error_reason"):
            entry["error_reason"] = self._sanitize(str(getattr(record, "error_reason")))

        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self._sanitize(self.formatException(record.exc_info))

        return json.dumps(entry, default=str)

    @staticmethod
    def _sanitize(text: str) -> str:
        """Remove sensitive values from log text."""
        return _SENSITIVE_PATTERNS.sub("[REDACTED]", text)


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger with JSON formatting on stderr.

    Parameters
    ----------
    level:
        Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Remove existing handlers to avoid duplicates
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JsonFormatter())
    root.addHandler(handler)

    # httpx logs every request at INFO; keep it at WARNING
    logging.getLogger("httpx").setLevel(logging.WARNING)
