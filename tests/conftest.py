"""Shared test fixtures and hypothesis strategies for the paperless-mcp test suite."""

from __future__ import annotations

import json
import os
from typing import Any, Callable

import httpx
import pytest
from hypothesis import strategies as st

from paperless_mcp.config.settings import PaperlessSettings
from paperless_mcp.integration.paperless_client import PaperlessClient

BASE_URL = "http://paperless.test"
API_TOKEN = "test-token-123"

Reply = Callable[[httpx.Request], httpx.Response]


# ---------------------------------------------------------------------------
# Ensure required env vars are set for PaperlessSettings in tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _set_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Set minimal env vars so PaperlessSettings can be instantiated in tests."""
    defaults = {
        "PAPERLESS_BASE_URL": BASE_URL,
        "PAPERLESS_API_TOKEN": API_TOKEN,
    }
    for key, value in defaults.items():
        if key not in os.environ:
            monkeypatch.setenv(key, value)


# ---------------------------------------------------------------------------
# Fake Paperless backend
# ---------------------------------------------------------------------------


def reply(status: int = 200, body: Any = None, *, text: str | None = None) -> Reply:
    """Reply factory; a fresh ``httpx.Response`` is built per request."""

    def build(request: httpx.Request) -> httpx.Response:
        if text is not None:
            return httpx.Response(status, text=text, request=request)
        if body is None:
            return httpx.Response(status, request=request)
        return httpx.Response(status, json=body, request=request)

    return build


def fail(exc: BaseException) -> Reply:
    """Reply that raises ``exc`` instead of answering."""

    def build(request: httpx.Request) -> httpx.Response:
        raise exc

    return build


class FakePaperless:
    """Route table for ``httpx.MockTransport`` keyed by (method, path).

    Each route holds a queue of replies; the last reply repeats once the
    queue is down to one. Unrouted requests get a 404 like Paperless does.
    Every request is recorded in ``requests``.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], list[Reply]] = {}
        self.requests: list[httpx.Request] = []

    def on(self, method: str, path: str, *replies: Reply) -> None:
        self.routes[(method, path)] = list(replies) or [reply(200)]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"detail": "Not found."}, request=request)
        handler = queue.pop(0) if len(queue) > 1 else queue[0]
        return handler(request)

    def calls(self, method: str, path: str | None = None) -> list[httpx.Request]:
        return [
            r
            for r in self.requests
            if r.method == method and (path is None or r.url.path == path)
        ]

    @staticmethod
    def json_body(request: httpx.Request) -> Any:
        return json.loads(request.content)


# ---------------------------------------------------------------------------
# Settings and client fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def settings() -> PaperlessSettings:
    """Test settings with safe defaults."""
    return PaperlessSettings(
        base_url=BASE_URL,
        api_token=API_TOKEN,
        max_page_size=100,
        max_retries=3,
        upload_max_retries=3,
    )


@pytest.fixture
def paperless() -> FakePaperless:
    return FakePaperless()


@pytest.fixture
def client(settings: PaperlessSettings, paperless: FakePaperless) -> PaperlessClient:
    return PaperlessClient(settings, transport=httpx.MockTransport(paperless))


# ---------------------------------------------------------------------------
# Sample payloads
# ---------------------------------------------------------------------------


def tag_payload(tag_id: int = 1, name: str = "Archive", **extra: Any) -> dict:
    return {
        "id": tag_id,
        "slug": name.lower(),
        "name": name,
        "color": "#a6cee3",
        "match": "",
        "matching_algorithm": 6,
        "is_insensitive": True,
        "is_inbox_tag": False,
        "document_count": 12,
        **extra,
    }


def document_payload(doc_id: int = 7, title: str = "Invoice 2024-03", **extra: Any) -> dict:
    return {
        "id": doc_id,
        "title": title,
        "content": "ACME Corp invoice for services rendered in March.",
        "correspondent": 2,
        "document_type": 3,
        "storage_path": None,
        "tags": [1, 4],
        "created": "2024-03-01T00:00:00Z",
        "modified": "2024-03-02T10:00:00Z",
        "added": "2024-03-02T09:59:00Z",
        "archive_serial_number": 42,
        "original_file_name": "invoice.pdf",
        "custom_fields": [],
        "notes": [],
        **extra,
    }


def page_payload(results: list, count: int | None = None, next_url: str | None = None) -> dict:
    return {
        "count": len(results) if count is None else count,
        "next": next_url,
        "previous": None,
        "results": results,
    }


# ---------------------------------------------------------------------------
# Hypothesis strategies (reusable across property tests)
# ---------------------------------------------------------------------------

entity_ids = st.integers(min_value=1, max_value=1_000_000)
id_lists = st.lists(entity_ids, min_size=1, max_size=50)
http_error_statuses = st.sampled_from([400, 401, 403, 404, 409, 413, 422, 429, 500, 502, 503])
garbage_tokens = st.text(
    alphabet=st.characters(whitelist_categories=("Ll", "Lu", "P"), blacklist_characters=","),
    min_size=1,
    max_size=8,
).filter(lambda s: s.strip() != "" and not s.strip().lstrip("+-").isdigit())
