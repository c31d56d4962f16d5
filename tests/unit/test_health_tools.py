"""Unit tests for paperless.ping and paperless.capabilities."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

import httpx
import pytest
from conftest import FakePaperless, fail, reply

from paperless_mcp.integration.paperless_client import PaperlessClient
from paperless_mcp.tools.health import HealthTools

STATUS = {"pngx_version": "2.7.2", "server_os": "Linux", "database": {"status": "OK"}}


@pytest.fixture
def tools(client: PaperlessClient) -> HealthTools:
    return HealthTools(client)


class TestPing:
    @pytest.mark.asyncio
    async def test_connected(self, tools: HealthTools, paperless: FakePaperless) -> None:
        paperless.on("GET", "/api/status/", reply(200, STATUS))

        data = json.loads(await tools.ping())

        assert data["result"] == {"connected": True, "version": "2.7.2"}

    @pytest.mark.asyncio
    async def test_bad_token(self, tools: HealthTools, paperless: FakePaperless) -> None:
        paperless.on("GET", "/api/status/", reply(403, {"detail": "Invalid token."}))

        data = json.loads(await tools.ping())

        assert data["error"]["code"] == "AUTH_FAILED"

    @pytest.mark.asyncio
    async def test_unreachable(self, tools: HealthTools, paperless: FakePaperless) -> None:
        paperless.on("GET", "/api/status/", fail(httpx.ConnectError("Connection refused")))

        with patch("asyncio.sleep", new_callable=AsyncMock):
            data = json.loads(await tools.ping())

        assert data["error"]["code"] == "UPSTREAM_ERROR"
        assert data["error"]["details"]["status_code"] == 0
        assert "Connection refused" in data["error"]["message"]


class TestCapabilities:
    @pytest.mark.asyncio
    async def test_lists_endpoints_and_version(
        self, tools: HealthTools, paperless: FakePaperless
    ) -> None:
        paperless.on("GET", "/api/status/", reply(200, STATUS))

        result = json.loads(await tools.capabilities())["result"]

        assert result["connected"] is True
        assert result["version"] == "2.7.2"
        assert result["endpoints"]["bulk_operations"] == "/api/bulk_edit_objects/"
        assert result["endpoints"]["documents"]["upload"] == "/api/documents/post_document/"
        assert "reprocess" in result["bulk_edit_methods"]
        assert result["status"]["server_os"] == "Linux"

    @pytest.mark.asyncio
    async def test_still_succeeds_when_disconnected(
        self, tools: HealthTools, paperless: FakePaperless
    ) -> None:
        paperless.on("GET", "/api/status/", reply(401))

        data = json.loads(await tools.capabilities())

        assert data["ok"] is True
        assert data["result"]["connected"] is False
        assert data["result"]["version"] is None
        assert "tags" in data["result"]["endpoints"]


class TestNames:
    def test_top_level_tool_names(self, tools: HealthTools) -> None:
        assert [tools.tool_name(s.action) for s in tools.specs()] == [
            "paperless.ping",
            "paperless.capabilities",
        ]
