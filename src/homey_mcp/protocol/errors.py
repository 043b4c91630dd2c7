"""Error taxonomy for the protocol and tool layers.

Every failure the server can report belongs to one :class:`ErrorKind`.
:func:`to_jsonrpc_error` is the single place where kinds become JSON-RPC
error codes: only protocol errors get their own code, everything else is
reported as an internal error and told apart by message text.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from homey_mcp.protocol.models import JsonRpcError

PARSE_ERROR = -32700
METHOD_NOT_FOUND = -32601
INTERNAL_ERROR = -32603


class ErrorKind(str, Enum):
    """Closed set of failure categories."""

    PROTOCOL = "protocol"
    VALIDATION = "validation"
    PROVIDER = "provider"
    UNKNOWN_TOOL = "unknown_tool"
    INTERNAL = "internal"


class HomeyMCPError(Exception):
    """Base error for all server failures."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        self.message = message
        self.context = context or {}
        super().__init__(message)

    @property
    def code(self) -> int:
        return METHOD_NOT_FOUND if self.kind is ErrorKind.PROTOCOL else INTERNAL_ERROR


class ProtocolError(HomeyMCPError):
    """The request could not be routed."""

    kind = ErrorKind.PROTOCOL


class MethodNotFoundError(ProtocolError):
    """The JSON-RPC method is not one the server implements."""

    def __init__(self, method: str) -> None:
        self.method = method
        super().__init__(f"Method not found: {method}", {"method": method})


class ToolValidationError(HomeyMCPError):
    """A tool argument is missing, malformed or out of range."""

    kind = ErrorKind.VALIDATION


class UnknownToolError(HomeyMCPError):
    """The requested tool is not in the registry."""

    kind = ErrorKind.UNKNOWN_TOOL

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown tool: {name}", {"tool": name})


class ProviderError(HomeyMCPError):
    """A capability provider call failed or found nothing."""

    kind = ErrorKind.PROVIDER

    def __init__(self, operation: str, cause: BaseException | str) -> None:
        self.operation = operation
        if isinstance(cause, BaseException):
            detail = str(cause) or type(cause).__name__
        else:
            detail = cause
        super().__init__(f"Failed to {operation}: {detail}", {"operation": operation})


class InternalError(HomeyMCPError):
    """Anything unexpected."""

    kind = ErrorKind.INTERNAL


def to_jsonrpc_error(exc: BaseException, *, tool: str | None = None) -> JsonRpcError:
    """Map *exc* to a JSON-RPC error object.

    Tool failures (``tool`` given) carry the cause as the message and a
    structured ``data`` payload.  Unclassified exceptions become a generic
    ``Internal error`` with the exception text as ``data``.
    """
    if isinstance(exc, HomeyMCPError):
        if tool is None and exc.kind is ErrorKind.INTERNAL:
            return JsonRpcError(code=exc.code, message="Internal error", data=exc.message)
        if tool is None:
            return JsonRpcError(code=exc.code, message=exc.message, data=exc.context or None)
        return JsonRpcError(
            code=exc.code,
            message=exc.message,
            data={"tool": tool, "kind": exc.kind.value, "detail": exc.message, **exc.context},
        )

    detail = str(exc) or type(exc).__name__
    if tool is None:
        return JsonRpcError(code=INTERNAL_ERROR, message="Internal error", data=detail)
    return JsonRpcError(
        code=INTERNAL_ERROR,
        message=f"Tool failed: {tool}: {detail}",
        data={"tool": tool, "kind": ErrorKind.INTERNAL.value, "detail": detail},
    )
