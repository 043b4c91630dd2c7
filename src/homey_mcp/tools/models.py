"""Read-only projections rendered by the tool layer.

Built fresh from provider data on every call and never stored.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class DeviceInfo(BaseModel):
    """A device as shown in ``list_devices`` and ``get_device_info``."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str | None = None
    zone: str | None = None
    device_class: str | None = None
    available: bool | None = None
    capabilities: list[str] = Field(default_factory=list)
    capability_values: dict[str, Any] = Field(default_factory=dict)
    driver: str | None = None
    app: str | None = None


class ZoneInfo(BaseModel):
    """A zone as shown in ``list_zones``."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str


class FlowInfo(BaseModel):
    """A flow as shown in ``list_flows``, ``trigger_flow`` and ``get_flow_info``."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str | None = None
    enabled: bool = False
    triggerable: bool = False
    folder: str | None = None
    has_trigger: bool = False
    trigger_id: str | None = None
    trigger_uri: str | None = None
    conditions: list[str | None] = Field(default_factory=list)
    actions: list[str | None] = Field(default_factory=list)
