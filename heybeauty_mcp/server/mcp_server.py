"""Try-on MCP server implementation.

This module provides the MCP handler layer that:
1. Resolves the API key for each request (request auth, else config default)
2. Maps MCP resources to the HeyBeauty clothing catalog
3. Maps the submit/query tools to HeyBeauty try-on tasks
4. Serves the static ``tryon_cloth`` prompt

Architecture:
- MCP client -> TryOnMCPServer handlers -> HeyBeautyClient -> heybeauty.ai
- Handlers are stateless; every call is one (or, for read, two) HTTP round trips
- Any handler failure is re-raised as a HandlerError "<operation> failed: <cause>"

Example:
    config = load_config()
    server = TryOnMCPServer(config)
    asyncio.run(server.run_stdio())
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any
from urllib.parse import urlparse

from mcp.server import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server
from mcp.types import GetPromptResult, Prompt, PromptMessage, Resource, TextContent, Tool

from heybeauty_mcp.client import HeyBeautyClient
from heybeauty_mcp.errors import (
    AuthError,
    HandlerError,
    InternalError,
    NotFoundError,
    UnknownPromptError,
    UnknownToolError,
    to_tryon_error,
)
from heybeauty_mcp.models import QueryTryOnArgs, SubmitTryOnArgs, TryOnTask
from heybeauty_mcp.server.catalog import (
    PROMPT_CATALOG,
    QUERY_TOOL,
    RESOURCE_MIME_TYPE,
    SUBMIT_TOOL,
    TOOL_CATALOG,
    TRYON_PROMPT,
    TRYON_PROMPT_TEXT,
)
from heybeauty_mcp.server.config import ServerConfig

logger = logging.getLogger(__name__)

API_KEY_NAME = "HEYBEAUTY_API_KEY"

# Error message prefix per tool; unknown names fall back to "call tool"
TOOL_OPERATIONS = {SUBMIT_TOOL: "submit tool", QUERY_TOOL: "query tool"}

ClientFactory = Callable[[str], HeyBeautyClient]


def request_api_key(ctx: Any) -> str | None:
    """Extract an API key carried by the inbound request.

    Looks at ``_meta.auth.HEYBEAUTY_API_KEY`` first, then at an
    ``Authorization: Bearer`` header when the request came over HTTP.

    Args:
        ctx: MCP request context (or None outside a request)

    Returns:
        The API key, or None if the request carries none
    """
    if ctx is None:
        return None

    meta = getattr(ctx, "meta", None)
    auth = getattr(meta, "auth", None)
    if auth is None and isinstance(meta, Mapping):
        auth = meta.get("auth")
    if isinstance(auth, Mapping) and auth.get(API_KEY_NAME):
        return str(auth[API_KEY_NAME])

    headers = getattr(getattr(ctx, "request", None), "headers", None)
    if headers is not None:
        scheme, _, token = (headers.get("authorization") or "").partition(" ")
        if scheme.lower() == "bearer" and token.strip():
            return token.strip()

    return None


def cloth_id_from_uri(uri: str) -> str:
    """Return the cloth id of a ``cloth:///{cloth_id}`` URI."""
    path = urlparse(str(uri)).path
    return path[1:] if path.startswith("/") else path


class TryOnMCPServer:
    """MCP server exposing HeyBeauty virtual try-on.

    Attributes:
        config: Server configuration
        server: MCP server instance
    """

    def __init__(
        self,
        config: ServerConfig,
        client_factory: ClientFactory | None = None,
    ) -> None:
        """Initialize try-on MCP server.

        Args:
            config: Server configuration built at startup
            client_factory: Builds a client for an API key (default:
                HeyBeautyClient with the configured base URL and timeout)
        """
        self.config = config
        self._client_factory = client_factory or self._default_client
        self.server = Server(config.server_name, version=config.server_version)
        logger.info("Created MCP server: %s", config.server_name)

        self._register_handlers()

    def _default_client(self, api_key: str) -> HeyBeautyClient:
        return HeyBeautyClient(
            api_key=api_key,
            base_url=self.config.api_base_url,
            timeout=self.config.request_timeout_seconds,
        )

    def _register_handlers(self) -> None:
        """Register MCP resource, tool and prompt handlers."""

        @self.server.list_resources()
        async def list_resources() -> list[Resource]:
            return await self.list_resources()

        @self.server.read_resource()
        async def read_resource(uri: Any) -> Iterable[ReadResourceContents]:
            return await self.read_resource(str(uri))

        @self.server.list_tools()
        async def list_tools() -> list[Tool]:
            return self.list_tools()

        # Arguments are validated by the typed argument models, not the SDK,
        # so that missing and empty values fail the same way.
        @self.server.call_tool(validate_input=False)
        async def call_tool(name: str, arguments: dict[str, Any] | None) -> list[TextContent]:
            return await self.call_tool(name, arguments)

        @self.server.list_prompts()
        async def list_prompts() -> list[Prompt]:
            return self.list_prompts()

        @self.server.get_prompt()
        async def get_prompt(name: str, arguments: dict[str, str] | None) -> GetPromptResult:
            return self.get_prompt(name, arguments)

        logger.info(
            "Registered MCP handlers: %s tools, %s prompts", len(TOOL_CATALOG), len(PROMPT_CATALOG)
        )

    # ------------------------------------------------------------------
    # Credentials and error boundary
    # ------------------------------------------------------------------

    def _request_context(self) -> Any:
        try:
            return self.server.request_context
        except LookupError:
            return None

    def _client(self) -> HeyBeautyClient:
        """Build a client for the effective API key.

        Raises:
            AuthError: If neither the request nor the config has a key
        """
        api_key = request_api_key(self._request_context()) or self.config.api_key
        if not api_key:
            raise AuthError(f"{API_KEY_NAME} is not set")
        return self._client_factory(api_key)

    def _boundary_error(self, operation: str, exc: Exception) -> HandlerError:
        error = to_tryon_error(exc)
        extra = {
            "operation": operation,
            "error_code": error.code.value,
            "error_details": error.to_details().model_dump(mode="json"),
        }
        if isinstance(error, InternalError):
            logger.exception("%s failed unexpectedly", operation, extra=extra)
        else:
            logger.error("%s failed: %s", operation, error.message, extra=extra)
        return HandlerError(operation, error)

    # ------------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------------

    async def list_resources(self) -> list[Resource]:
        """List the clothing catalog as ``cloth:///`` resources."""
        try:
            clothes = await self._client().list_clothes()
        except Exception as e:
            raise self._boundary_error("list resources", e) from e

        return [
            Resource(
                uri=item.uri,
                mimeType=RESOURCE_MIME_TYPE,
                name=item.title,
                description=item.description,
            )
            for item in clothes
        ]

    async def read_resource(self, uri: str) -> list[ReadResourceContents]:
        """Return a clothing item's image URL as the resource text."""
        try:
            cloth_id = cloth_id_from_uri(uri)
            clothes = await self._client().list_clothes()
            cloth = next((item for item in clothes if item.cloth_id == cloth_id), None)
            if cloth is None:
                msg = f"Cloth {cloth_id} not found"
                raise NotFoundError(msg, resource_type="cloth", resource_id=cloth_id)
        except Exception as e:
            raise self._boundary_error("read resource", e) from e

        return [ReadResourceContents(content=cloth.cloth_img_url, mime_type=RESOURCE_MIME_TYPE)]

    # ------------------------------------------------------------------
    # Tools
    # ------------------------------------------------------------------

    def list_tools(self) -> list[Tool]:
        return [
            Tool(name=name, description=meta["description"], inputSchema=meta["parameters"])
            for name, meta in TOOL_CATALOG.items()
        ]

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> list[TextContent]:
        """Dispatch a tool call and return the task as JSON text.

        Raises:
            HandlerError: Wrapping validation, auth, remote or unknown-tool errors
        """
        logger.info("Tool call: %s", name, extra={"tool": name})
        operation = TOOL_OPERATIONS.get(name, "call tool")

        try:
            # The key is checked before the tool name or its arguments
            client = self._client()
            if name == SUBMIT_TOOL:
                task = await self._submit_tryon_task(client, arguments)
            elif name == QUERY_TOOL:
                task = await self._query_tryon_task(client, arguments)
            else:
                raise UnknownToolError(name)
        except Exception as e:
            raise self._boundary_error(operation, e) from e

        return [TextContent(type="text", text=task.model_dump_json())]

    async def _submit_tryon_task(
        self, client: HeyBeautyClient, arguments: dict[str, Any] | None
    ) -> TryOnTask:
        args = SubmitTryOnArgs.parse(arguments)
        return await client.submit_task(
            user_img_url=args.user_img_url,
            cloth_img_url=args.cloth_img_url,
            cloth_id=args.cloth_id,
            cloth_description=args.cloth_description,
        )

    async def _query_tryon_task(
        self, client: HeyBeautyClient, arguments: dict[str, Any] | None
    ) -> TryOnTask:
        args = QueryTryOnArgs.parse(arguments)
        return await client.query_task(args.task_id)

    # ------------------------------------------------------------------
    # Prompts
    # ------------------------------------------------------------------

    def list_prompts(self) -> list[Prompt]:
        return [
            Prompt(name=name, description=meta["description"])
            for name, meta in PROMPT_CATALOG.items()
        ]

    def get_prompt(self, name: str, arguments: dict[str, str] | None = None) -> GetPromptResult:
        """Return the instructional message for ``tryon_cloth``."""
        if name != TRYON_PROMPT:
            raise self._boundary_error("get prompt", UnknownPromptError(name))

        return GetPromptResult(
            description=PROMPT_CATALOG[TRYON_PROMPT]["description"],
            messages=[
                PromptMessage(
                    role="user",
                    content=TextContent(type="text", text=TRYON_PROMPT_TEXT),
                )
            ],
        )

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def run_stdio(self) -> None:
        """Run the MCP server over stdin/stdout."""
        logger.info("Starting HeyBeauty MCP server (stdio)")

        async with stdio_server() as (read, write):
            await self.server.run(read, write, self.server.create_initialization_options())


__all__ = [
    "TryOnMCPServer",
    "cloth_id_from_uri",
    "request_api_key",
]
