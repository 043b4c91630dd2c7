"""Plain-text renderers for tool results.

Output is deterministic for a given input: list results open with a count
line followed by one numbered block per entity, missing fields show
``N/A`` or ``Unknown``, and empty collections render ``No <kind>s found.``.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from typing import Any

from homey_mcp.tools.models import DeviceInfo, FlowInfo, ZoneInfo

CAPABILITY_READ_ERROR = "Error reading value"


def _yes_no(flag: bool | None) -> str:
    return "Yes" if flag else "No"


def _render_value(value: Any) -> str:
    try:
        return json.dumps(value)
    except (TypeError, ValueError):
        return str(value)


def _render_list(kind: str, blocks: list[str]) -> str:
    if not blocks:
        return f"No {kind}s found."
    header = f"Found {len(blocks)} {kind}(s):"
    return "\n\n".join([header, *blocks]) + "\n"


def format_device_list(devices: Sequence[DeviceInfo]) -> str:
    """Render devices in the order given."""
    blocks: list[str] = []
    for index, device in enumerate(devices, start=1):
        lines = [
            f"{index}. {device.name or 'Unknown Device'}",
            f"   ID: {device.id or 'N/A'}",
            f"   Zone: {device.zone or 'N/A'}",
            f"   Class: {device.device_class or 'N/A'}",
            f"   Available: {_yes_no(device.available)}",
        ]
        if device.capabilities:
            lines.append(f"   Capabilities: {', '.join(device.capabilities)}")
        blocks.append("\n".join(lines))
    return _render_list("device", blocks)


def sort_zones(zones: Sequence[ZoneInfo]) -> list[ZoneInfo]:
    """Order zones by name, ignoring case."""
    return sorted(zones, key=lambda zone: zone.name.casefold())


def format_zone_list(zones: Sequence[ZoneInfo]) -> str:
    """Render zones sorted by name, ignoring case."""
    blocks = [
        f"{index}. {zone.name or 'Unknown Zone'}\n   ID: {zone.id or 'N/A'}"
        for index, zone in enumerate(sort_zones(zones), start=1)
    ]
    return _render_list("zone", blocks)


def format_flow_list(flows: Sequence[FlowInfo]) -> str:
    """Render flows in the order given."""
    blocks = [
        "\n".join([
            f"{index}. {flow.name or 'Unknown Flow'}",
            f"   ID: {flow.id or 'N/A'}",
            f"   Enabled: {_yes_no(flow.enabled)}",
        ])
        for index, flow in enumerate(flows, start=1)
    ]
    return _render_list("flow", blocks)


def format_device_detail(device: DeviceInfo) -> str:
    if device.available is None:
        available = "Unknown"
    else:
        available = _yes_no(device.available)

    lines = [
        f"Device Information for: {device.name or 'Unknown Device'}",
        f"ID: {device.id}",
        f"Zone: {device.zone or 'Unknown'}",
        f"Class: {device.device_class or 'unknown'}",
        f"Available: {available}",
        f"Driver: {device.driver or 'unknown'}",
        f"App: {device.app or 'unknown'}",
        "",
        "Capabilities:",
    ]
    for capability, value in device.capability_values.items():
        lines.append(f"  {capability}: {_render_value(value)}")
    return "\n".join(lines)


def format_flow_detail(flow: FlowInfo) -> str:
    lines = [
        f"Flow Information for: {flow.name or 'Unknown Flow'}",
        f"ID: {flow.id}",
        f"Enabled: {_yes_no(flow.enabled)}",
        f"Triggerable: {_yes_no(flow.triggerable)}",
        f"Folder: {flow.folder or 'None'}",
    ]

    if flow.has_trigger:
        lines += ["", "Trigger:", f"  ID: {flow.trigger_id or 'N/A'}"]
        if flow.trigger_uri:
            lines.append(f"  URI: {flow.trigger_uri}")

    if flow.conditions:
        lines += ["", f"Conditions ({len(flow.conditions)}):"]
        lines += [f"  {i}. {card or 'Unknown'}" for i, card in enumerate(flow.conditions, start=1)]

    if flow.actions:
        lines += ["", f"Actions ({len(flow.actions)}):"]
        lines += [f"  {i}. {card or 'Unknown'}" for i, card in enumerate(flow.actions, start=1)]

    return "\n".join(lines)


def format_trigger_unsupported(flow: FlowInfo) -> str:
    """Explain that a flow cannot be triggered here, with its metadata."""
    return "\n".join([
        "Flow triggering is not supported in the current environment: "
        "the Homey Web API does not expose a way to start a flow.",
        "",
        "Flow Details:",
        f"- Name: {flow.name or flow.id}",
        f"- ID: {flow.id}",
        f"- Enabled: {_yes_no(flow.enabled)}",
        f"- Triggerable: {_yes_no(flow.triggerable)}",
        "",
        "Please use the Homey app or web interface to trigger this flow manually.",
    ])


def format_control_result(device_id: str, device_name: str | None, capability: str, value: Any) -> str:
    shown = ("true" if value else "false") if isinstance(value, bool) else str(value)
    return (
        f"Successfully set {capability} to {shown} for device "
        f'"{device_name or device_id}" ({device_id})'
    )
