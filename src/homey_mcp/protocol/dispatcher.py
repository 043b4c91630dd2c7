"""MCPServer — the JSON-RPC method router.

One server exists per process.  :meth:`MCPServer.initialize` creates it under
an ``asyncio.Lock`` so concurrent callers all end up with the same instance
and the provider is connected exactly once.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, ClassVar

from homey_mcp import __version__
from homey_mcp.protocol.errors import (
    InternalError,
    MethodNotFoundError,
    ToolValidationError,
    to_jsonrpc_error,
)
from homey_mcp.protocol.models import JsonRpcRequest, JsonRpcResponse, RequestId, TextContent
from homey_mcp.tools.invoker import ToolInvoker
from homey_mcp.tools.registry import list_tool_definitions
from homey_mcp.utils.telemetry import ATTR_RPC_METHOD, get_tracer

if TYPE_CHECKING:
    from homey_mcp.provider.base import CapabilityProvider

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "homey-mcp-server"


class MCPServer:
    """Routes ``initialize``, ``tools/list`` and ``tools/call`` requests.

    Usage::

        server = await MCPServer.initialize(HomeyClient(url, token=token))
        response = await server.handle_request(
            {"jsonrpc": "2.0", "id": 1, "method": "tools/list"}
        )
        payload = response.to_wire()
    """

    _instance: ClassVar[MCPServer | None] = None
    _init_lock: ClassVar[asyncio.Lock] = asyncio.Lock()

    def __init__(self, provider: CapabilityProvider) -> None:
        self._invoker = ToolInvoker(provider)

    @property
    def invoker(self) -> ToolInvoker:
        return self._invoker

    # -- lifecycle -----------------------------------------------------------

    @classmethod
    def get_instance(cls) -> MCPServer | None:
        return cls._instance

    @classmethod
    async def initialize(cls, provider: CapabilityProvider) -> MCPServer:
        """Create, connect and publish the server; later calls return it unchanged."""
        if cls._instance is not None:
            logger.info("MCP server already initialized, returning existing instance")
            return cls._instance

        async with cls._init_lock:
            if cls._instance is not None:
                logger.info("MCP server already initialized, returning existing instance")
                return cls._instance

            logger.info("Initializing MCP server...")
            server = cls(provider)
            try:
                await provider.connect()
            except Exception:
                logger.warning(
                    "Provider connection failed, continuing with limited functionality",
                    exc_info=True,
                )
            else:
                logger.info("MCP server ready")
            cls._instance = server
            return server

    @classmethod
    async def shutdown(cls) -> None:
        """Close the provider and forget the published instance."""
        async with cls._init_lock:
            server, cls._instance = cls._instance, None
        if server is not None:
            logger.info("MCP server shutting down")
            await server.invoker.provider.close()

    @classmethod
    def reset(cls) -> None:
        """Drop the instance without closing anything (tests, forked processes)."""
        cls._instance = None
        cls._init_lock = asyncio.Lock()

    # -- request handling ----------------------------------------------------

    async def handle_request(self, body: Any) -> JsonRpcResponse:
        """Dispatch one JSON-RPC request; never raises."""
        request_id = _extract_id(body)
        try:
            request = JsonRpcRequest.model_validate(body)
            logger.info("MCP: %s (id=%r)", request.method, request.id)
            with _tracer.start_as_current_span("homey_mcp.rpc") as span:
                span.set_attribute(ATTR_RPC_METHOD, request.method)
                return await self._route(request)
        except Exception as exc:
            logger.error("Request handling error", exc_info=True)
            return JsonRpcResponse.failure(request_id, to_jsonrpc_error(exc))

    async def _route(self, request: JsonRpcRequest) -> JsonRpcResponse:
        if request.method == "initialize":
            return self._handle_initialize(request)
        if request.method == "tools/list":
            return self._handle_tools_list(request)
        if request.method == "tools/call":
            return await self._handle_tool_call(request)
        error = MethodNotFoundError(request.method)
        return JsonRpcResponse.failure(request.id, to_jsonrpc_error(error))

    def _handle_initialize(self, request: JsonRpcRequest) -> JsonRpcResponse:
        return JsonRpcResponse.success(
            request.id,
            {
                "protocolVersion": PROTOCOL_VERSION,
                "capabilities": {"tools": {}},
                "serverInfo": {"name": SERVER_NAME, "version": __version__},
            },
        )

    def _handle_tools_list(self, request: JsonRpcRequest) -> JsonRpcResponse:
        return JsonRpcResponse.success(request.id, {"tools": list_tool_definitions()})

    async def _handle_tool_call(self, request: JsonRpcRequest) -> JsonRpcResponse:
        params = request.params or {}
        name = params.get("name")
        try:
            arguments = params.get("arguments")
            if arguments is None:
                arguments = {}
            elif not isinstance(arguments, dict):
                raise ToolValidationError("Tool arguments must be an object", {"field": "arguments"})
            text = await self._invoker.invoke(name, arguments)
        except Exception as exc:
            logger.error("Tool execution failed: %s", name, exc_info=True)
            return JsonRpcResponse.failure(request.id, to_jsonrpc_error(exc, tool=str(name)))

        content = TextContent(text=text)
        return JsonRpcResponse.success(request.id, {"content": [content.model_dump()]})


def _extract_id(body: Any) -> RequestId:
    """Best-effort request id for error replies to malformed requests."""
    if not isinstance(body, dict):
        return None
    value = body.get("id")
    if isinstance(value, (int, float, str)) and not isinstance(value, bool):
        return value
    return None


async def handle_request(body: Any) -> JsonRpcResponse:
    """Transport entry point: dispatch *body* to the process-wide server."""
    server = MCPServer.get_instance()
    if server is None:
        error = InternalError("MCP server not initialized")
        return JsonRpcResponse.failure(_extract_id(body), to_jsonrpc_error(error))
    return await server.handle_request(body)
