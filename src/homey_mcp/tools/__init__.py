"""Tool layer — registry, argument validation, invocation and formatting."""

from homey_mcp.tools.invoker import ToolInvoker
from homey_mcp.tools.registry import TOOLS, get_tool, list_tool_definitions

__all__ = [
    "TOOLS",
    "ToolInvoker",
    "get_tool",
    "list_tool_definitions",
]
