"""Provider layer — the smart-home data source behind the tools."""

from homey_mcp.provider.base import CapabilityProvider, CapabilityValue, Device, Flow, FlowCard, Zone
from homey_mcp.provider.homey import HomeyAPIError, HomeyClient

__all__ = [
    "CapabilityProvider",
    "CapabilityValue",
    "Device",
    "Flow",
    "FlowCard",
    "HomeyAPIError",
    "HomeyClient",
    "Zone",
]
