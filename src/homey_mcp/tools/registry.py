"""The static catalog of tools advertised by ``tools/list``."""

from __future__ import annotations

from homey_mcp.protocol.models import ToolDefinition, ToolParam

_DEVICE_ID = ToolParam(name="device_id", kind="string", description="Homey device ID", required=True)

TOOLS: tuple[ToolDefinition, ...] = (
    ToolDefinition(
        name="list_devices",
        description="List all Homey devices with their current state",
        params=(
            ToolParam(name="zone", kind="string", description="Filter by zone name (optional)"),
        ),
    ),
    ToolDefinition(
        name="control_device",
        description="Control a Homey device capability",
        params=(
            _DEVICE_ID,
            ToolParam(
                name="capability",
                kind="string",
                description="Capability (e.g., 'onoff', 'dim')",
                required=True,
            ),
            ToolParam(name="value", description="Value to set", required=True),
        ),
    ),
    ToolDefinition(
        name="get_device_info",
        description="Get detailed information about a specific device",
        params=(_DEVICE_ID,),
    ),
    ToolDefinition(
        name="list_zones",
        description="List all Homey zones",
    ),
    ToolDefinition(
        name="list_flows",
        description="List automation flows",
        params=(
            ToolParam(
                name="enabled_only",
                kind="boolean",
                description="Only show enabled flows (default: false)",
            ),
        ),
    ),
    ToolDefinition(
        name="trigger_flow",
        description="Trigger an automation flow",
        params=(
            ToolParam(name="flow_id", kind="string", description="Flow ID to trigger", required=True),
        ),
    ),
    ToolDefinition(
        name="get_flow_info",
        description="Get detailed information about a flow",
        params=(
            ToolParam(name="flow_id", kind="string", description="Flow ID", required=True),
        ),
    ),
)

_BY_NAME = {tool.name: tool for tool in TOOLS}


def get_tool(name: str) -> ToolDefinition | None:
    """Look up a tool by exact name."""
    return _BY_NAME.get(name)


def list_tool_definitions() -> list[dict[str, object]]:
    """Return the catalog in ``tools/list`` wire form."""
    return [tool.to_wire() for tool in TOOLS]
