"""
Network transport for the try-on MCP server ("rest" mode).

Serves the MCP streamable-HTTP transport from a Starlette app:
- ``POST {endpoint}``: JSON-RPC requests, answered with JSON responses
- ``GET /health``: liveness check for load balancers

Sessions are stateless: every request is handled independently, matching the
stateless handler layer. Clients may pass their own API key either in
``_meta.auth.HEYBEAUTY_API_KEY`` or as an ``Authorization: Bearer`` header.
"""

import contextlib
import logging
from collections.abc import AsyncIterator
from typing import Any

import uvicorn
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.types import Receive, Scope, Send

from heybeauty_mcp.server.config import ServerConfig
from heybeauty_mcp.server.mcp_server import TryOnMCPServer

logger = logging.getLogger(__name__)


class MCPEndpoint:
    """ASGI app forwarding requests to the session manager."""

    def __init__(self, session_manager: StreamableHTTPSessionManager) -> None:
        self.session_manager = session_manager

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self.session_manager.handle_request(scope, receive, send)


def create_app(mcp_server: TryOnMCPServer) -> Starlette:
    """Build the Starlette app serving ``mcp_server``.

    Args:
        mcp_server: Configured try-on MCP server

    Returns:
        Starlette app with the MCP endpoint and a health route
    """
    config = mcp_server.config
    session_manager = StreamableHTTPSessionManager(
        app=mcp_server.server,
        json_response=True,
        stateless=True,
    )

    async def health(request: Request) -> JSONResponse:
        return JSONResponse(
            {"status": "ok", "server": config.server_name, "version": config.server_version}
        )

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        async with session_manager.run():
            logger.info("MCP endpoint ready at %s", config.endpoint)
            yield
        logger.info("MCP endpoint stopped")

    return Starlette(
        routes=[
            Route(
                config.endpoint,
                endpoint=MCPEndpoint(session_manager),
                methods=["GET", "POST", "DELETE"],
            ),
            Route("/health", endpoint=health, methods=["GET"]),
        ],
        lifespan=lifespan,
    )


def run_http(mcp_server: TryOnMCPServer, **uvicorn_options: Any) -> None:
    """Serve ``mcp_server`` over HTTP until interrupted.

    Args:
        mcp_server: Configured try-on MCP server
        **uvicorn_options: Extra keyword arguments for ``uvicorn.run``
    """
    config: ServerConfig = mcp_server.config
    app = create_app(mcp_server)

    logger.info(
        "Starting HeyBeauty MCP server on http://%s:%s%s", config.host, config.port, config.endpoint
    )
    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        **uvicorn_options,
    )
