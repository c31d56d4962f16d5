"""Server entry point.

Two ways to serve the same tool surface:
- ``paperless-mcp --stdio``: MCP over stdin/stdout for local clients.
- ``paperless-mcp``: FastAPI app on ``MCP_PORT`` with the MCP streamable
  HTTP endpoint at ``/mcp`` and a ``GET /health`` check.

Startup: load settings, configure logging, build one ``PaperlessClient``
and register all tools. Shutdown: close the client's HTTP pool.
"""

from __future__ import annotations

import argparse
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable

import uvicorn
from fastapi import APIRouter, FastAPI
from mcp.server.fastmcp import FastMCP

from paperless_mcp import __version__
from paperless_mcp.config.settings import PaperlessSettings
from paperless_mcp.integration.paperless_client import PaperlessClient
from paperless_mcp.integration.result import Failure
from paperless_mcp.logging_config import configure_logging
from paperless_mcp.middleware.error_handler import error_from_api, register_error_handlers
from paperless_mcp.middleware.request_id import RequestIdMiddleware
from paperless_mcp.models.responses import Meta, ToolResponse
from paperless_mcp.tools import register_all_tools

logger = logging.getLogger(__name__)

INSTRUCTIONS = (
    "Tools for a Paperless-ngx document management instance. Every tool returns a "
    "JSON envelope with ok, result or error, and meta. Destructive tools need "
    "confirm=true; bulk tools default to dry_run=true."
)


def create_mcp_server(
    settings: PaperlessSettings,
    client: PaperlessClient,
    lifespan: Callable[[FastMCP], Any] | None = None,
) -> FastMCP:
    """Build a FastMCP server with every tool registered against ``client``."""
    mcp = FastMCP(
        "paperless-mcp",
        instructions=INSTRUCTIONS,
        lifespan=lifespan,
        host=settings.host,
        port=settings.port,
    )
    names = register_all_tools(mcp, client)
    logger.info("Registered %d tools", len(names))
    return mcp


def create_health_router(client: PaperlessClient) -> APIRouter:
    """Factory that creates the health router bound to ``client``."""

    health_router = APIRouter(tags=["health"])

    @health_router.get("/health")
    async def health() -> dict:
        """Backend reachability via ``GET /api/status/``."""
        result = await client.ping()
        if isinstance(result, Failure):
            raise error_from_api(result.error, f"Paperless unreachable: {result.error}")
        response = ToolResponse.success(
            {"connected": True, "version": result.value, "server_version": __version__},
            Meta(paperless_base_url=client.base_url),
        )
        return response.model_dump(mode="json") | {"meta": response.meta.to_dict()}

    return health_router


def create_app(
    settings: PaperlessSettings | None = None,
    client: PaperlessClient | None = None,
) -> FastAPI:
    """Build the HTTP application.

    Parameters
    ----------
    settings:
        Server settings; loaded from the environment when omitted.
    client:
        Paperless client; built from ``settings`` when omitted. Tests pass
        one wired to an ``httpx.MockTransport``.
    """
    settings = settings or PaperlessSettings()  # type: ignore[call-arg]
    client = client or PaperlessClient(settings)
    mcp = create_mcp_server(settings, client)
    mcp_app = mcp.streamable_http_app()

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "Starting paperless-mcp %s on port %d for %s",
            __version__,
            settings.port,
            settings.base_url,
        )
        async with mcp.session_manager.run():
            try:
                yield
            finally:
                logger.info("Shutting down: closing Paperless client")
                await client.aclose()

    app = FastAPI(title="paperless-mcp", version=__version__, lifespan=lifespan)
    app.add_middleware(RequestIdMiddleware)
    register_error_handlers(app)
    app.include_router(create_health_router(client))
    app.mount("/", mcp_app)
    return app


def _run_stdio(settings: PaperlessSettings) -> None:
    client = PaperlessClient(settings)

    @asynccontextmanager
    async def lifespan(_server: FastMCP) -> AsyncIterator[None]:
        logger.info("Starting paperless-mcp %s on stdio for %s", __version__, settings.base_url)
        try:
            yield
        finally:
            await client.aclose()

    create_mcp_server(settings, client, lifespan=lifespan).run()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="paperless-mcp", description="MCP server for Paperless-ngx"
    )
    parser.add_argument(
        "--stdio", action="store_true", help="serve MCP over stdin/stdout instead of HTTP"
    )
    args = parser.parse_args(argv)

    settings = PaperlessSettings()  # type: ignore[call-arg]
    configure_logging(settings.log_level)

    if args.stdio:
        _run_stdio(settings)
    else:
        uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    main()
