"""MCP tool sets, one per Paperless entity."""

from mcp.server.fastmcp import FastMCP

from paperless_mcp.integration.paperless_client import PaperlessClient
from paperless_mcp.tools.base import ToolSet
from paperless_mcp.tools.correspondents import CorrespondentTools
from paperless_mcp.tools.custom_fields import CustomFieldTools
from paperless_mcp.tools.document_types import DocumentTypeTools
from paperless_mcp.tools.documents import DocumentTools
from paperless_mcp.tools.health import HealthTools
from paperless_mcp.tools.storage_paths import StoragePathTools
from paperless_mcp.tools.tags import TagTools

TOOL_SETS: tuple[type[ToolSet], ...] = (
    HealthTools,
    DocumentTools,
    TagTools,
    CorrespondentTools,
    DocumentTypeTools,
    StoragePathTools,
    CustomFieldTools,
)

__all__ = [
    "TOOL_SETS",
    "register_all_tools",
    "CorrespondentTools",
    "CustomFieldTools",
    "DocumentTools",
    "DocumentTypeTools",
    "HealthTools",
    "StoragePathTools",
    "TagTools",
    "ToolSet",
]


def register_all_tools(mcp: FastMCP, client: PaperlessClient) -> list[str]:
    """Register every tool set against ``client`` and return the tool names."""
    names: list[str] = []
    for tool_set in TOOL_SETS:
        names.extend(tool_set(client).register(mcp))
    return names
