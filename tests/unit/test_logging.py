"""Unit tests for structured JSON logging."""

from __future__ import annotations

import json
import logging
import sys

import pytest

from paperless_mcp.logging_config import (
    JsonFormatter,
    configure_logging,
    request_id_var,
    truncate_body,
)


def _record(message: str, **extra: object) -> logging.LogRecord:
    record = logging.LogRecord("paperless_mcp.test", logging.WARNING, __file__, 1, message, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonFormatter:
    def test_required_fields(self) -> None:
        entry = json.loads(JsonFormatter().format(_record("hello")))
        assert entry["level"] == "WARNING"
        assert entry["message"] == "hello"
        assert "timestamp" in entry
        assert "request_id" in entry

    def test_request_id_from_context(self) -> None:
        token = request_id_var.set("req-42")
        try:
            entry = json.loads(JsonFormatter().format(_record("x")))
        finally:
            request_id_var.reset(token)
        assert entry["request_id"] == "req-42"

    def test_backend_call_fields(self) -> None:
        record = _record(
            "failed",
            method="PATCH",
            path="/api/documents/7/",
            status_code=400,
            attempt=1,
            response_body="bad",
        )
        entry = json.loads(JsonFormatter().format(record))
        assert entry["method"] == "PATCH"
        assert entry["path"] == "/api/documents/7/"
        assert entry["status_code"] == 400
        assert entry["attempt"] == 1
        assert entry["response_body"] == "bad"

    def test_upload_fields(self) -> None:
        record = _record("uploaded", file_name="a.pdf", file_size=10, task_id="t-1")
        entry = json.loads(JsonFormatter().format(record))
        assert (entry["file_name"], entry["file_size"], entry["task_id"]) == ("a.pdf", 10, "t-1")

    @pytest.mark.parametrize(
        "message",
        [
            "Authorization: Token abc123secret",
            "api_token=abc123secret",
            "password: abc123secret",
        ],
    )
    def test_credentials_redacted(self, message: str) -> None:
        output = JsonFormatter().format(_record(message))
        assert "abc123secret" not in output
        assert "[REDACTED]" in output

    def test_long_body_truncated(self) -> None:
        entry = json.loads(JsonFormatter().format(_record("x", response_body="b" * 2000)))
        assert len(entry["response_body"]) == 503


class TestTruncateBody:
    def test_short_unchanged(self) -> None:
        assert truncate_body("abc") == "abc"

    def test_none(self) -> None:
        assert truncate_body(None) is None

    def test_long_cut(self) -> None:
        assert truncate_body("x" * 20, limit=5) == "xxxxx..."


class TestConfigureLogging:
    def test_single_stderr_handler(self) -> None:
        root = logging.getLogger()
        saved = root.handlers[:], root.level
        try:
            configure_logging("debug")
            configure_logging("DEBUG")
            assert len(root.handlers) == 1
            assert root.handlers[0].stream is sys.stderr
            assert isinstance(root.handlers[0].formatter, JsonFormatter)
            assert root.level == logging.DEBUG
            assert logging.getLogger("httpx").level == logging.WARNING
        finally:
            root.handlers[:] = saved[0]
            root.setLevel(saved[1])
