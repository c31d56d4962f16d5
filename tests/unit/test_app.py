"""Unit tests for server assembly: tool registration and the HTTP /health check."""

from __future__ import annotations

import json

import httpx
import pytest
from conftest import FakePaperless, reply
from fastapi.testclient import TestClient

from paperless_mcp.config.settings import PaperlessSettings
from paperless_mcp.integration.paperless_client import PaperlessClient
from paperless_mcp.main import create_app, create_mcp_server
from paperless_mcp.tools.base import ToolSet, ToolSpec, tool_envelope

EXPECTED_TOOLS = {
    "paperless.ping",
    "paperless.capabilities",
    "paperless.documents.search",
    "paperless.documents.get",
    "paperless.documents.download",
    "paperless.documents.preview",
    "paperless.documents.thumbnail",
    "paperless.documents.upload",
    "paperless.documents.upload_from_path",
    "paperless.documents.update",
    "paperless.documents.delete",
    "paperless.documents.bulk_update",
    "paperless.documents.reprocess",
    "paperless.custom_fields.assign",
}


class TestToolRegistration:
    @pytest.mark.asyncio
    async def test_all_tools_registered(
        self, settings: PaperlessSettings, client: PaperlessClient
    ) -> None:
        mcp = create_mcp_server(settings, client)

        names = {tool.name for tool in await mcp.list_tools()}

        assert EXPECTED_TOOLS <= names
        for entity in ("tags", "correspondents", "document_types", "storage_paths", "custom_fields"):
            for action in ("list", "get", "create", "update", "delete"):
                assert f"paperless.{entity}.{action}" in names
        for entity in ("tags", "correspondents", "document_types", "storage_paths"):
            assert f"paperless.{entity}.bulk_delete" in names
        assert "paperless.custom_fields.bulk_delete" not in names

    @pytest.mark.asyncio
    async def test_input_schema_from_annotations(
        self, settings: PaperlessSettings, client: PaperlessClient
    ) -> None:
        mcp = create_mcp_server(settings, client)

        tools = {tool.name: tool for tool in await mcp.list_tools()}
        schema = tools["paperless.tags.delete"].inputSchema

        assert set(schema["properties"]) == {"id", "confirm"}
        assert schema["required"] == ["id"]
        assert tools["paperless.tags.delete"].annotations.destructiveHint is True


class TestToolEnvelope:
    @pytest.mark.asyncio
    async def test_unexpected_exception_becomes_unknown(
        self, settings: PaperlessSettings, client: PaperlessClient
    ) -> None:
        class Broken(ToolSet):
            def specs(self) -> list[ToolSpec]:
                return []

            @tool_envelope
            async def explode(self) -> str:
                raise RuntimeError("kaboom")

        data = json.loads(await Broken(client).explode())

        assert data["ok"] is False
        assert data["error"]["code"] == "UNKNOWN"
        assert "kaboom" in data["error"]["message"]
        assert data["meta"]["paperless_base_url"] == settings.base_url

    def test_tool_set_without_specs_cannot_be_built(self, client: PaperlessClient) -> None:
        class Incomplete(ToolSet):
            namespace = "incomplete"

        with pytest.raises(TypeError):
            Incomplete(client)  # type: ignore[abstract]


class TestHealthEndpoint:
    def test_healthy(self, settings: PaperlessSettings, paperless: FakePaperless) -> None:
        paperless.on("GET", "/api/status/", reply(200, {"pngx_version": "2.7.2"}))
        client = PaperlessClient(settings, transport=httpx.MockTransport(paperless))

        response = TestClient(create_app(settings, client)).get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["ok"] is True
        assert body["result"]["version"] == "2.7.2"
        assert "X-Request-ID" in response.headers

    def test_auth_failure_status(self, settings: PaperlessSettings, paperless: FakePaperless) -> None:
        paperless.on("GET", "/api/status/", reply(401, {"detail": "Invalid token."}))
        client = PaperlessClient(settings, transport=httpx.MockTransport(paperless))

        response = TestClient(create_app(settings, client)).get("/health")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "AUTH_FAILED"


class TestStreamableHttp:
    def test_initialize_from_remote_host(
        self, settings: PaperlessSettings, client: PaperlessClient
    ) -> None:
        initialize = {
            "jsonrpc": "2.0",
            "id": 1,
            "method": "initialize",
            "params": {
                "protocolVersion": "2025-03-26",
                "capabilities": {},
                "clientInfo": {"name": "pytest", "version": "1.0"},
            },
        }

        app = create_app(settings, client)
        with TestClient(app, base_url="http://paperless-mcp.lan:5000") as http:
            response = http.post(
                "/mcp",
                json=initialize,
                headers={"Accept": "application/json, text/event-stream"},
            )

        assert response.status_code == 200
        assert "paperless-mcp" in response.text
