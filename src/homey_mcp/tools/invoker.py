"""ToolInvoker — runs a named tool against a CapabilityProvider.

Each tool has one handler.  Handlers validate their arguments before touching
the provider, wrap provider failures as :class:`ProviderError`, and return
the rendered text result.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from homey_mcp.protocol.errors import ErrorKind, HomeyMCPError, ProviderError, UnknownToolError
from homey_mcp.tools import formatting
from homey_mcp.tools.models import DeviceInfo, FlowInfo, ZoneInfo
from homey_mcp.tools.registry import get_tool
from homey_mcp.tools.validation import (
    coerce_capability_value,
    coerce_flag,
    sanitize_zone_name,
    validate_capability,
    validate_device_id,
    validate_flow_id,
)
from homey_mcp.utils.telemetry import ATTR_ERROR_KIND, ATTR_TOOL_NAME, get_tracer

if TYPE_CHECKING:
    from homey_mcp.provider.base import CapabilityProvider, Device, Flow, Zone

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

Handler = Callable[[dict[str, Any]], Awaitable[str]]


@contextmanager
def _provider_call(operation: str) -> Iterator[None]:
    """Re-raise anything the enclosed provider calls throw as a ProviderError."""
    try:
        yield
    except ProviderError:
        raise
    except Exception as exc:
        logger.error("Failed to %s", operation, exc_info=True)
        raise ProviderError(operation, exc) from exc


def _zone_name(device: Device, zones: dict[str, Zone]) -> str:
    if device.zone and device.zone in zones:
        return zones[device.zone].name or "Unknown"
    return device.zone_name or "Unknown"


def _capability_values(device: Device) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for capability, state in device.capabilities_obj.items():
        if isinstance(state, dict) and "value" in state:
            values[capability] = state["value"]
    return values


def _flow_info(flow: Flow) -> FlowInfo:
    return FlowInfo(
        id=flow.id,
        name=flow.name,
        enabled=flow.enabled,
        triggerable=flow.triggerable,
        folder=flow.folder,
        has_trigger=flow.trigger is not None,
        trigger_id=flow.trigger.id if flow.trigger else None,
        trigger_uri=flow.trigger.uri if flow.trigger else None,
        conditions=[card.id for card in flow.conditions],
        actions=[card.id for card in flow.actions],
    )


class ToolInvoker:
    """Maps tool names to handlers that drive a :class:`CapabilityProvider`.

    Usage::

        invoker = ToolInvoker(HomeyClient(url, token=token))
        text = await invoker.invoke("list_devices", {"zone": "Kitchen"})
    """

    def __init__(self, provider: CapabilityProvider) -> None:
        self._provider = provider
        self._handlers: dict[str, Handler] = {
            "list_devices": self.list_devices,
            "control_device": self.control_device,
            "get_device_info": self.get_device_info,
            "list_zones": self.list_zones,
            "list_flows": self.list_flows,
            "trigger_flow": self.trigger_flow,
            "get_flow_info": self.get_flow_info,
        }

    @property
    def provider(self) -> CapabilityProvider:
        return self._provider

    async def invoke(self, name: Any, arguments: dict[str, Any]) -> str:
        """Run the tool called *name*; raises on unknown tools and failures."""
        if not isinstance(name, str) or get_tool(name) is None or name not in self._handlers:
            raise UnknownToolError(str(name))

        with _tracer.start_as_current_span("homey_mcp.tool.call") as span:
            span.set_attribute(ATTR_TOOL_NAME, name)
            try:
                return await self._handlers[name](arguments)
            except Exception as exc:
                kind = exc.kind if isinstance(exc, HomeyMCPError) else ErrorKind.INTERNAL
                span.set_attribute(ATTR_ERROR_KIND, kind.value)
                raise

    # -- devices -------------------------------------------------------------

    async def list_devices(self, arguments: dict[str, Any]) -> str:
        zone = sanitize_zone_name(arguments.get("zone"))
        logger.info("Listing devices (zone filter: %s)", zone)

        with _provider_call("list devices"):
            all_devices, all_zones = await asyncio.gather(
                self._provider.get_devices(),
                self._provider.get_zones(),
            )

        devices: list[DeviceInfo] = []
        for device_id, device in all_devices.items():
            zone_name = _zone_name(device, all_zones)
            if zone is not None and zone_name.casefold() != zone.casefold():
                continue
            devices.append(
                DeviceInfo(
                    id=device_id,
                    name=device.name,
                    zone=zone_name,
                    device_class=device.device_class,
                    available=True if device.available is None else device.available,
                    capabilities=list(device.capabilities),
                    capability_values=_capability_values(device),
                    driver=device.driver_id,
                    app=device.app_id,
                )
            )

        logger.info("Found %d of %d devices", len(devices), len(all_devices))
        return formatting.format_device_list(devices)

    async def control_device(self, arguments: dict[str, Any]) -> str:
        device_id = validate_device_id(arguments.get("device_id"))
        capability = validate_capability(arguments.get("capability"))
        value = coerce_capability_value(arguments.get("value"))
        logger.info("Controlling device %s: %s = %r", device_id, capability, value)

        with _provider_call("control device"):
            await self._provider.set_capability_value(device_id, capability, value)
            device = await self._provider.get_device(device_id)

        name = device.name if device is not None else None
        return formatting.format_control_result(device_id, name, capability, value)

    async def get_device_info(self, arguments: dict[str, Any]) -> str:
        device_id = validate_device_id(arguments.get("device_id"))
        logger.info("Getting device info for %s", device_id)

        with _provider_call("get device info"):
            device = await self._provider.get_device(device_id)
            if device is None:
                raise LookupError(f"Device not found: {device_id}")

        values: dict[str, Any] = {}
        for capability in device.capabilities:
            try:
                values[capability] = await self._provider.get_capability_value(device_id, capability)
            except Exception:
                logger.warning(
                    "Failed to read capability %s of device %s", capability, device_id, exc_info=True
                )
                values[capability] = formatting.CAPABILITY_READ_ERROR

        info = DeviceInfo(
            id=device_id,
            name=device.name,
            zone=device.zone_name or device.zone,
            device_class=device.device_class,
            available=device.available,
            capabilities=list(device.capabilities),
            capability_values=values,
            driver=device.driver_id,
            app=device.app_id,
        )
        return formatting.format_device_detail(info)

    # -- zones ---------------------------------------------------------------

    async def list_zones(self, arguments: dict[str, Any]) -> str:
        logger.info("Listing zones")
        with _provider_call("list zones"):
            zones = await self._provider.get_zones()

        infos = [ZoneInfo(id=zone_id, name=zone.name or zone_id) for zone_id, zone in zones.items()]
        return formatting.format_zone_list(infos)

    # -- flows ---------------------------------------------------------------

    async def list_flows(self, arguments: dict[str, Any]) -> str:
        enabled_only = coerce_flag(arguments.get("enabled_only"), "enabled_only")
        logger.info("Listing flows (enabled only: %s)", enabled_only)

        with _provider_call("list flows"):
            flows = await self._provider.get_flows()

        infos = [
            _flow_info(flow.model_copy(update={"id": flow_id}))
            for flow_id, flow in flows.items()
            if flow.enabled or not enabled_only
        ]
        return formatting.format_flow_list(infos)

    async def trigger_flow(self, arguments: dict[str, Any]) -> str:
        flow_id = validate_flow_id(arguments.get("flow_id"))
        info = await self._fetch_flow(flow_id, "get flow information")
        logger.warning("Flow %s requested to trigger, but triggering is not supported", flow_id)
        return formatting.format_trigger_unsupported(info)

    async def get_flow_info(self, arguments: dict[str, Any]) -> str:
        flow_id = validate_flow_id(arguments.get("flow_id"))
        info = await self._fetch_flow(flow_id, "get flow info")
        return formatting.format_flow_detail(info)

    async def _fetch_flow(self, flow_id: str, operation: str) -> FlowInfo:
        logger.info("Fetching flow %s", flow_id)
        with _provider_call(operation):
            flow = await self._provider.get_flow(flow_id)
            if flow is None:
                raise LookupError(f"Flow not found: {flow_id}")
        return _flow_info(flow.model_copy(update={"id": flow_id}))
