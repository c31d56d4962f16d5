"""Health and capability tools: paperless.ping, paperless.capabilities.

Both use ``GET /api/status/`` as the single source of truth for whether the
backend is reachable and which version it runs.
"""

import logging

from paperless_mcp.integration.result import Failure
from paperless_mcp.tools.base import READ_ONLY, ToolSet, ToolSpec, tool_envelope

logger = logging.getLogger(__name__)


def _crud(entity: str) -> dict[str, str]:
    return {
        "list": f"/api/{entity}/",
        "get": f"/api/{entity}/{{id}}/",
        "create": f"/api/{entity}/",
        "update": f"/api/{entity}/{{id}}/",
        "delete": f"/api/{entity}/{{id}}/",
    }


ENDPOINTS = {
    "documents": {
        "search": "/api/documents/",
        "get": "/api/documents/{id}/",
        "upload": "/api/documents/post_document/",
        "update": "/api/documents/{id}/",
        "delete": "/api/documents/{id}/",
        "download": "/api/documents/{id}/download/",
        "preview": "/api/documents/{id}/preview/",
        "thumbnail": "/api/documents/{id}/thumb/",
        "bulk_edit": "/api/documents/bulk_edit/",
    },
    "tags": _crud("tags"),
    "correspondents": _crud("correspondents"),
    "document_types": _crud("document_types"),
    "storage_paths": _crud("storage_paths"),
    "custom_fields": _crud("custom_fields"),
    "bulk_operations": "/api/bulk_edit_objects/",
}

BULK_EDIT_METHODS = [
    "set_correspondent",
    "set_document_type",
    "set_storage_path",
    "add_tag",
    "remove_tag",
    "modify_tags",
    "modify_custom_fields",
    "delete",
    "reprocess",
]


class HealthTools(ToolSet):
    def specs(self) -> list[ToolSpec]:
        return [
            ToolSpec(
                "ping",
                "ping",
                "Verify connectivity and authentication with the Paperless-ngx instance. "
                "Returns server version if available.",
                READ_ONLY,
            ),
            ToolSpec(
                "capabilities",
                "capabilities",
                "Return supported API endpoints and detected Paperless-ngx version information.",
                READ_ONLY,
            ),
        ]

    @tool_envelope
    async def ping(self) -> str:
        version = self.unwrap(await self.client.ping(), "Failed to connect to Paperless instance")
        return self.ok({"connected": True, "version": version})

    @tool_envelope
    async def capabilities(self) -> str:
        status = await self.client.get_status()
        if isinstance(status, Failure):
            logger.warning("Paperless status unavailable: %s", status.error)
            connected, version, details = False, None, None
        else:
            connected = True
            version = status.value.get("pngx_version")
            details = status.value

        return self.ok(
            {
                "connected": connected,
                "version": version,
                "endpoints": ENDPOINTS,
                "bulk_edit_methods": BULK_EDIT_METHODS,
                "status": details,
            }
        )
