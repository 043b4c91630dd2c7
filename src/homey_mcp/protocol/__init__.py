"""Protocol layer — JSON-RPC envelope models and error taxonomy.

The dispatcher and transport live in :mod:`homey_mcp.protocol.dispatcher`
and :mod:`homey_mcp.protocol.transport`.
"""

from homey_mcp.protocol.errors import (
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
from homey_mcp.protocol.models import (
    JsonRpcError,
    JsonRpcRequest,
    JsonRpcResponse,
    TextContent,
    ToolDefinition,
    ToolParam,
)

__all__ = [
    "ErrorKind",
    "HomeyMCPError",
    "InternalError",
    "JsonRpcError",
    "JsonRpcRequest",
    "JsonRpcResponse",
    "MethodNotFoundError",
    "ProtocolError",
    "ProviderError",
    "TextContent",
    "ToolDefinition",
    "ToolParam",
    "ToolValidationError",
    "UnknownToolError",
    "to_jsonrpc_error",
]
