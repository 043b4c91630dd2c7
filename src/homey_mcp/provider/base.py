"""CapabilityProvider protocol — the data source behind every tool.

The tool layer never talks to Homey directly; it only calls the operations
declared here.  :class:`~homey_mcp.provider.homey.HomeyClient` is the
production implementation, tests substitute ``AsyncMock`` objects.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

CapabilityValue = bool | int | float | str
"""A value written to (or read from) a device capability."""


class Device(BaseModel):
    """A Homey device as returned by the devices manager."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: str | None = None
    zone: str | None = None
    zone_name: str | None = Field(default=None, alias="zoneName")
    device_class: str | None = Field(default=None, alias="class")
    available: bool | None = None
    capabilities: list[str] = Field(default_factory=list)
    capabilities_obj: dict[str, Any] = Field(default_factory=dict, alias="capabilitiesObj")
    driver_id: str | None = Field(default=None, alias="driverId")
    driver_uri: str | None = Field(default=None, alias="driverUri")

    @property
    def app_id(self) -> str | None:
        """The owning app, derived from ``driverUri`` (``homey:app:<id>``)."""
        if not self.driver_uri:
            return None
        prefix = "homey:app:"
        if self.driver_uri.startswith(prefix):
            return self.driver_uri[len(prefix):] or None
        return None


class Zone(BaseModel):
    """A Homey zone (room or area)."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: str | None = None
    parent: str | None = None


class FlowCard(BaseModel):
    """A trigger, condition or action card inside a flow."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str | None = None
    uri: str | None = None


class Flow(BaseModel):
    """A stored automation flow."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: str | None = None
    enabled: bool = False
    triggerable: bool = False
    folder: str | None = None
    trigger: FlowCard | None = None
    conditions: list[FlowCard] = Field(default_factory=list)
    actions: list[FlowCard] = Field(default_factory=list)


@runtime_checkable
class CapabilityProvider(Protocol):
    """Supplies device, zone and flow data plus device mutation.

    All operations are coroutines and may raise; single-entity lookups
    return ``None`` when the entity does not exist.  Flows cannot be
    triggered through this interface.
    """

    async def connect(self) -> None: ...
    async def close(self) -> None: ...

    async def get_devices(self) -> dict[str, Device]: ...
    async def get_device(self, device_id: str) -> Device | None: ...
    async def set_capability_value(
        self, device_id: str, capability_id: str, value: CapabilityValue
    ) -> None: ...
    async def get_capability_value(self, device_id: str, capability_id: str) -> Any: ...
    async def get_zones(self) -> dict[str, Zone]: ...
    async def get_flows(self) -> dict[str, Flow]: ...
    async def get_flow(self, flow_id: str) -> Flow | None: ...
