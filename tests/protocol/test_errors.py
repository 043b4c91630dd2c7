"""Tests for the error hierarchy and JSON-RPC error mapping."""

from __future__ import annotations

import pytest

from homey_mcp.protocol.errors import (
    INTERNAL_ERROR,
    METHOD_NOT_FOUND,
    ErrorKind,
    HomeyMCPError,
    InternalError,
    MethodNotFoundError,
    ProtocolError,
    ProviderError,
    ToolValidationError,
    UnknownToolError,
    to_jsonrpc_error,
)


class TestErrorHierarchy:
    @pytest.mark.parametrize(
        "cls",
        [ProtocolError, MethodNotFoundError, ToolValidationError, UnknownToolError,
         ProviderError, InternalError],
    )
    def test_all_are_homey_mcp_errors(self, cls: type[Exception]) -> None:
        assert issubclass(cls, HomeyMCPError)

    def test_kinds(self) -> None:
        assert MethodNotFoundError("x").kind is ErrorKind.PROTOCOL
        assert ToolValidationError("bad").kind is ErrorKind.VALIDATION
        assert UnknownToolError("x").kind is ErrorKind.UNKNOWN_TOOL
        assert ProviderError("list zones", "down").kind is ErrorKind.PROVIDER
        assert InternalError("boom").kind is ErrorKind.INTERNAL

    def test_codes(self) -> None:
        assert MethodNotFoundError("x").code == METHOD_NOT_FOUND
        for err in (ToolValidationError("bad"), UnknownToolError("x"),
                    ProviderError("list zones", "down"), InternalError("boom")):
            assert err.code == INTERNAL_ERROR


class TestMessages:
    def test_unknown_tool(self) -> None:
        err = UnknownToolError("reboot")
        assert str(err) == "Unknown tool: reboot"
        assert err.name == "reboot"

    def test_provider_error_from_exception(self) -> None:
        err = ProviderError("list devices", RuntimeError("timeout"))
        assert str(err) == "Failed to list devices: timeout"
        assert err.operation == "list devices"

    def test_provider_error_empty_exception_uses_type(self) -> None:
        err = ProviderError("list flows", TimeoutError())
        assert str(err) == "Failed to list flows: TimeoutError"


class TestToJsonRpcError:
    def test_method_not_found(self) -> None:
        error = to_jsonrpc_error(MethodNotFoundError("foo/bar"))
        assert error.code == METHOD_NOT_FOUND
        assert error.message == "Method not found: foo/bar"

    def test_tool_failure_payload(self) -> None:
        error = to_jsonrpc_error(ProviderError("list zones", "down"), tool="list_zones")
        assert error.code == INTERNAL_ERROR
        assert error.message == "Failed to list zones: down"
        assert error.data == {
            "tool": "list_zones",
            "kind": "provider",
            "detail": "Failed to list zones: down",
            "operation": "list zones",
        }

    def test_unclassified_exception(self) -> None:
        error = to_jsonrpc_error(ValueError("bad input"))
        assert error.code == INTERNAL_ERROR
        assert error.message == "Internal error"
        assert error.data == "bad input"

    def test_unclassified_exception_during_tool(self) -> None:
        error = to_jsonrpc_error(KeyError("k"), tool="list_devices")
        assert error.code == INTERNAL_ERROR
        assert error.message.startswith("Tool failed: list_devices")
        assert error.data["kind"] == "internal"

    def test_internal_error_without_tool(self) -> None:
        error = to_jsonrpc_error(InternalError("not ready"))
        assert error.message == "Internal error"
        assert error.data == "not ready"
