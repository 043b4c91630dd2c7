"""HomeyClient — CapabilityProvider backed by the Homey local Web API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from homey_mcp.provider.base import CapabilityValue, Device, Flow, Zone

logger = logging.getLogger(__name__)

_DEVICES = "/api/manager/devices/device/"
_ZONES = "/api/manager/zones/zone/"
_FLOWS = "/api/manager/flow/flow/"


class HomeyAPIError(Exception):
    """A request to the Homey Web API failed."""


class HomeyClient:
    """Talks to a Homey controller over HTTP with a bearer token.

    Satisfies the :class:`~homey_mcp.provider.base.CapabilityProvider` protocol.

    Usage::

        async with HomeyClient("http://192.168.1.10", token="...") as homey:
            devices = await homey.get_devices()
            await homey.set_capability_value(device_id, "onoff", True)
    """

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> HomeyClient:
        await self.connect()
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.close()

    async def connect(self) -> None:
        """Open the HTTP session and verify the controller answers."""
        if self._client is None:
            headers = {"Accept": "application/json"}
            if self._token:
                headers["Authorization"] = f"Bearer {self._token}"
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                headers=headers,
                timeout=self._timeout,
                transport=self._transport,
            )
        devices = await self.get_devices()
        logger.info("Connected to Homey at %s, found %d devices", self._base_url, len(devices))

    async def close(self) -> None:
        """Close the HTTP session."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    # -- devices -------------------------------------------------------------

    async def get_devices(self) -> dict[str, Device]:
        data = await self._get(_DEVICES)
        return {key: Device.model_validate({"id": key, **raw}) for key, raw in data.items()}

    async def get_device(self, device_id: str) -> Device | None:
        data = await self._get(f"{_DEVICES}{device_id}", allow_missing=True)
        if data is None:
            return None
        return Device.model_validate({"id": device_id, **data})

    async def set_capability_value(
        self, device_id: str, capability_id: str, value: CapabilityValue
    ) -> None:
        await self._request(
            "PUT",
            f"{_DEVICES}{device_id}/capability/{capability_id}",
            json={"value": value},
        )

    async def get_capability_value(self, device_id: str, capability_id: str) -> Any:
        """Read a capability's last reported value from the device state."""
        device = await self.get_device(device_id)
        if device is None:
            raise HomeyAPIError(f"Device not found: {device_id}")
        state = device.capabilities_obj.get(capability_id)
        if not isinstance(state, dict) or "value" not in state:
            raise HomeyAPIError(f"Capability {capability_id} has no value on device {device_id}")
        return state["value"]

    # -- zones & flows -------------------------------------------------------

    async def get_zones(self) -> dict[str, Zone]:
        data = await self._get(_ZONES)
        return {key: Zone.model_validate({"id": key, **raw}) for key, raw in data.items()}

    async def get_flows(self) -> dict[str, Flow]:
        data = await self._get(_FLOWS)
        return {key: Flow.model_validate({"id": key, **raw}) for key, raw in data.items()}

    async def get_flow(self, flow_id: str) -> Flow | None:
        data = await self._get(f"{_FLOWS}{flow_id}", allow_missing=True)
        if data is None:
            return None
        return Flow.model_validate({"id": flow_id, **data})

    # -- HTTP helpers --------------------------------------------------------

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            msg = "HomeyClient is not connected. Call connect() first."
            raise RuntimeError(msg)
        return self._client

    async def _get(self, path: str, *, allow_missing: bool = False) -> Any:
        response = await self._request("GET", path, allow_missing=allow_missing)
        if response is None:
            return None
        try:
            data = response.json()
        except ValueError as exc:
            raise HomeyAPIError(f"Invalid JSON from {path}") from exc
        if not isinstance(data, dict):
            raise HomeyAPIError(f"Unexpected response shape from {path}")
        return data

    async def _request(
        self,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        allow_missing: bool = False,
    ) -> httpx.Response | None:
        try:
            response = await self._http().request(method, path, json=json)
        except httpx.HTTPError as exc:
            raise HomeyAPIError(f"{method} {path}: {exc}") from exc

        if allow_missing and response.status_code == 404:
            return None
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise HomeyAPIError(
                f"{method} {path} returned HTTP {response.status_code}"
            ) from exc
        return response
