"""Tests for MCPServer routing, error mapping and singleton lifecycle."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from homey_mcp.protocol.dispatcher import PROTOCOL_VERSION, MCPServer, handle_request
from homey_mcp.protocol.errors import INTERNAL_ERROR, METHOD_NOT_FOUND


def _request(method: str, params: Any = None, request_id: Any = 1) -> dict[str, Any]:
    body: dict[str, Any] = {"jsonrpc": "2.0", "id": request_id, "method": method}
    if params is not None:
        body["params"] = params
    return body


class TestInitializeMethod:
    async def test_capabilities(self, provider: MagicMock) -> None:
        server = MCPServer(provider)
        response = await server.handle_request(_request("initialize"))
        assert response.error is None
        assert response.result is not None
        assert response.result["protocolVersion"] == PROTOCOL_VERSION
        assert response.result["capabilities"] == {"tools": {}}
        assert response.result["serverInfo"]["name"] == "homey-mcp-server"


class TestToolsList:
    async def test_lists_seven_tools(self, provider: MagicMock) -> None:
        server = MCPServer(provider)
        response = await server.handle_request(_request("tools/list", {"cursor": "ignored"}))
        assert response.result is not None
        names = [tool["name"] for tool in response.result["tools"]]
        assert names == [
            "list_devices",
            "control_device",
            "get_device_info",
            "list_zones",
            "list_flows",
            "trigger_flow",
            "get_flow_info",
        ]

    async def test_stable_across_calls(self, provider: MagicMock) -> None:
        server = MCPServer(provider)
        first = await server.handle_request(_request("tools/list"))
        second = await server.handle_request(_request("tools/list", request_id=2))
        assert first.result == second.result


class TestToolsCall:
    async def test_success_wraps_text(self, provider: MagicMock) -> None:
        server = MCPServer(provider)
        response = await server.handle_request(
            _request("tools/call", {"name": "list_zones", "arguments": {}})
        )
        assert response.error is None
        assert response.result is not None
        content = response.result["content"]
        assert len(content) == 1
        assert content[0]["type"] == "text"
        assert content[0]["text"].startswith("Found 3 zone(s):")

    async def test_missing_arguments_defaults_to_empty(self, provider: MagicMock) -> None:
        server = MCPServer(provider)
        response = await server.handle_request(_request("tools/call", {"name": "list_flows"}))
        assert response.error is None

    async def test_unknown_tool(self, provider: MagicMock) -> None:
        server = MCPServer(provider)
        response = await server.handle_request(
            _request("tools/call", {"name": "X", "arguments": {}})
        )
        assert response.result is None
        assert response.error is not None
        assert response.error.code == INTERNAL_ERROR
        assert "Unknown tool: X" in response.error.message
        assert response.error.data["kind"] == "unknown_tool"
        provider.get_devices.assert_not_awaited()

    async def test_validation_failure_names_field(self, provider: MagicMock) -> None:
        server = MCPServer(provider)
        response = await server.handle_request(
            _request("tools/call", {"name": "get_device_info", "arguments": {"device_id": ""}})
        )
        assert response.error is not None
        assert response.error.code == INTERNAL_ERROR
        assert "Device ID" in response.error.message
        assert response.error.data == {
            "tool": "get_device_info",
            "kind": "validation",
            "detail": "Device ID must be a non-empty string",
            "field": "Device ID",
        }

    async def test_provider_failure(self, provider: MagicMock) -> None:
        provider.get_zones = AsyncMock(side_effect=OSError("unreachable"))
        server = MCPServer(provider)
        response = await server.handle_request(_request("tools/call", {"name": "list_zones"}))
        assert response.error is not None
        assert response.error.code == INTERNAL_ERROR
        assert response.error.message == "Failed to list zones: unreachable"
        assert response.error.data["kind"] == "provider"

    async def test_non_object_arguments(self, provider: MagicMock) -> None:
        server = MCPServer(provider)
        response = await server.handle_request(
            _request("tools/call", {"name": "list_zones", "arguments": [1, 2]})
        )
        assert response.error is not None
        assert "arguments must be an object" in response.error.message


class TestErrors:
    async def test_unknown_method(self, provider: MagicMock) -> None:
        server = MCPServer(provider)
        response = await server.handle_request(_request("resources/list"))
        assert response.error is not None
        assert response.error.code == METHOD_NOT_FOUND
        assert response.error.message == "Method not found: resources/list"

    @pytest.mark.parametrize(
        "body",
        [
            None,
            "not an object",
            {"jsonrpc": "2.0", "id": 9},
            {"jsonrpc": "2.0", "id": 9, "method": "tools/call", "params": [1]},
        ],
    )
    async def test_malformed_requests_become_internal_errors(
        self, provider: MagicMock, body: Any
    ) -> None:
        server = MCPServer(provider)
        response = await server.handle_request(body)
        assert response.error is not None
        assert response.error.code == INTERNAL_ERROR
        assert response.error.message == "Internal error"
        assert response.result is None

    async def test_malformed_request_keeps_id(self, provider: MagicMock) -> None:
        server = MCPServer(provider)
        response = await server.handle_request({"id": "abc", "method": 12})
        assert response.id == "abc"


class TestIdEcho:
    @pytest.mark.parametrize("request_id", ["req-1", 7, 0, 2.5, None])
    async def test_success_echoes_id(self, provider: MagicMock, request_id: Any) -> None:
        server = MCPServer(provider)
        response = await server.handle_request(_request("tools/list", request_id=request_id))
        assert response.id == request_id
        assert response.to_wire()["id"] == request_id

    @pytest.mark.parametrize("request_id", ["req-1", 7, None])
    async def test_error_echoes_id(self, provider: MagicMock, request_id: Any) -> None:
        server = MCPServer(provider)
        response = await server.handle_request(_request("nope", request_id=request_id))
        assert response.id == request_id

    async def test_absent_id_is_null(self, provider: MagicMock) -> None:
        server = MCPServer(provider)
        response = await server.handle_request({"jsonrpc": "2.0", "method": "initialize"})
        assert response.id is None
        assert response.to_wire()["id"] is None

    async def test_tool_error_echoes_id(self, provider: MagicMock) -> None:
        server = MCPServer(provider)
        response = await server.handle_request(
            _request("tools/call", {"name": "missing"}, request_id="call-3")
        )
        assert response.id == "call-3"


class TestSingleton:
    async def test_initialize_twice_returns_same_instance(self, provider: MagicMock) -> None:
        first = await MCPServer.initialize(provider)
        second = await MCPServer.initialize(provider)
        assert first is second
        assert MCPServer.get_instance() is first
        provider.connect.assert_awaited_once()

    async def test_concurrent_initialize_constructs_once(
        self, make_provider: Callable[..., MagicMock]
    ) -> None:
        provider = make_provider()

        async def slow_connect() -> None:
            await asyncio.sleep(0.01)

        provider.connect = AsyncMock(side_effect=slow_connect)
        servers = await asyncio.gather(*[MCPServer.initialize(provider) for _ in range(5)])
        assert all(server is servers[0] for server in servers)
        provider.connect.assert_awaited_once()

    async def test_connect_failure_still_publishes(self, provider: MagicMock) -> None:
        provider.connect = AsyncMock(side_effect=OSError("no route to host"))
        server = await MCPServer.initialize(provider)
        assert MCPServer.get_instance() is server

    async def test_shutdown_closes_provider(self, provider: MagicMock) -> None:
        await MCPServer.initialize(provider)
        await MCPServer.shutdown()
        assert MCPServer.get_instance() is None
        provider.close.assert_awaited_once()


class TestModuleEntryPoint:
    async def test_not_initialized(self) -> None:
        response = await handle_request(_request("tools/list", request_id=4))
        assert response.id == 4
        assert response.error is not None
        assert response.error.code == INTERNAL_ERROR
        assert response.error.message == "Internal error"
        assert response.error.data == "MCP server not initialized"

    async def test_delegates_to_instance(self, provider: MagicMock) -> None:
        await MCPServer.initialize(provider)
        response = await handle_request(_request("initialize"))
        assert response.error is None
