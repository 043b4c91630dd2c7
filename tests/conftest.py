"""Shared fixtures: a sample Homey home behind a mocked CapabilityProvider."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from homey_mcp.protocol.dispatcher import MCPServer
from homey_mcp.provider.base import Device, Flow, FlowCard, Zone


def sample_zones() -> dict[str, Zone]:
    return {
        "z-kitchen": Zone(id="z-kitchen", name="Kitchen"),
        "z-attic": Zone(id="z-attic", name="attic"),
        "z-bedroom": Zone(id="z-bedroom", name="Bedroom"),
    }


def sample_devices() -> dict[str, Device]:
    return {
        "d-light": Device(
            id="d-light",
            name="Ceiling Light",
            zone="z-kitchen",
            device_class="light",
            available=True,
            capabilities=["onoff", "dim"],
            capabilities_obj={"onoff": {"value": True}, "dim": {"value": 0.5}},
            driver_id="bulb",
            driver_uri="homey:app:com.philips.hue",
        ),
        "d-thermostat": Device(
            id="d-thermostat",
            name="Thermostat",
            zone="z-bedroom",
            device_class="thermostat",
            available=False,
            capabilities=["target_temperature", "measure_temperature", "onoff"],
            capabilities_obj={
                "target_temperature": {"value": 21},
                "measure_temperature": {"value": 19.5},
                "onoff": {"value": False},
            },
        ),
        "d-kettle": Device(
            id="d-kettle",
            name="Kettle",
            zone="z-kitchen",
            device_class="socket",
            capabilities=["onoff"],
            capabilities_obj={"onoff": {"value": False}},
        ),
    }


def sample_flows() -> dict[str, Flow]:
    return {
        "f-morning": Flow(
            id="f-morning",
            name="Good Morning",
            enabled=True,
            triggerable=True,
            folder="routines",
            trigger=FlowCard(id="time_at", uri="homey:manager:cron"),
            conditions=[FlowCard(id="is_weekday")],
            actions=[FlowCard(id="turn_on"), FlowCard(id="set_dim")],
        ),
        "f-away": Flow(id="f-away", name="Away Mode", enabled=False, triggerable=False),
    }


def _make_provider(
    devices: dict[str, Device] | None = None,
    zones: dict[str, Zone] | None = None,
    flows: dict[str, Flow] | None = None,
) -> MagicMock:
    devices = sample_devices() if devices is None else devices
    zones = sample_zones() if zones is None else zones
    flows = sample_flows() if flows is None else flows

    def read_capability(device_id: str, capability_id: str) -> Any:
        return devices[device_id].capabilities_obj[capability_id]["value"]

    provider = MagicMock()
    provider.connect = AsyncMock()
    provider.close = AsyncMock()
    provider.get_devices = AsyncMock(return_value=devices)
    provider.get_device = AsyncMock(side_effect=lambda device_id: devices.get(device_id))
    provider.set_capability_value = AsyncMock(return_value=None)
    provider.get_capability_value = AsyncMock(side_effect=read_capability)
    provider.get_zones = AsyncMock(return_value=zones)
    provider.get_flows = AsyncMock(return_value=flows)
    provider.get_flow = AsyncMock(side_effect=lambda flow_id: flows.get(flow_id))
    return provider


@pytest.fixture
def make_provider() -> Callable[..., MagicMock]:
    return _make_provider


@pytest.fixture
def provider() -> MagicMock:
    return _make_provider()


@pytest.fixture(autouse=True)
def _reset_server() -> Iterator[None]:
    MCPServer.reset()
    yield
    MCPServer.reset()
