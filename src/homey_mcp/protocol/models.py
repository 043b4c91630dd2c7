"""JSON-RPC 2.0 envelope and MCP payload models.

Implements the message format used by the Model Context Protocol for
tool discovery (``tools/list``) and execution (``tools/call``).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, field_validator

RequestId = int | float | str | None

# ---------------------------------------------------------------------------
# JSON-RPC 2.0 envelope
# ---------------------------------------------------------------------------


class JsonRpcRequest(BaseModel):
    """A JSON-RPC 2.0 request message.

    ``id`` may be absent or ``null``; it is echoed back unchanged.
    """

    jsonrpc: str = "2.0"
    method: str
    id: RequestId = None
    params: dict[str, Any] | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _reject_bool_id(cls, value: Any) -> Any:
        if isinstance(value, bool):
            msg = "id must be a string, number or null"
            raise ValueError(msg)
        return value


class JsonRpcError(BaseModel):
    """A JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None


class JsonRpcResponse(BaseModel):
    """A JSON-RPC 2.0 response message.

    Exactly one of ``result`` and ``error`` is set.
    """

    jsonrpc: str = "2.0"
    id: RequestId = None
    result: dict[str, Any] | None = None
    error: JsonRpcError | None = None

    @classmethod
    def success(cls, request_id: RequestId, result: dict[str, Any]) -> JsonRpcResponse:
        return cls(id=request_id, result=result)

    @classmethod
    def failure(cls, request_id: RequestId, error: JsonRpcError) -> JsonRpcResponse:
        return cls(id=request_id, error=error)

    def to_wire(self) -> dict[str, Any]:
        """Serialize for the transport, omitting the unused member."""
        payload: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            payload["error"] = self.error.model_dump(exclude_none=True)
        else:
            payload["result"] = self.result if self.result is not None else {}
        return payload


# ---------------------------------------------------------------------------
# MCP-specific payloads
# ---------------------------------------------------------------------------


class ToolParam(BaseModel):
    """One declared parameter of a tool."""

    model_config = {"frozen": True}

    name: str
    kind: str | None = None
    description: str = ""
    required: bool = False


class ToolDefinition(BaseModel):
    """A tool definition as returned by ``tools/list``."""

    model_config = {"frozen": True}

    name: str
    description: str = ""
    params: tuple[ToolParam, ...] = ()

    @property
    def required(self) -> list[str]:
        return [p.name for p in self.params if p.required]

    @property
    def input_schema(self) -> dict[str, Any]:
        """Render the declared parameters as a JSON Schema object."""
        properties: dict[str, Any] = {}
        for param in self.params:
            prop: dict[str, Any] = {}
            if param.kind is not None:
                prop["type"] = param.kind
            prop["description"] = param.description
            properties[param.name] = prop
        schema: dict[str, Any] = {"type": "object", "properties": properties}
        if self.required:
            schema["required"] = self.required
        return schema

    def to_wire(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


class TextContent(BaseModel):
    """A text content block in a ``tools/call`` result."""

    type: str = "text"
    text: str

