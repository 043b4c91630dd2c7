"""Tests for the plain-text tool result renderers."""

from __future__ import annotations

from homey_mcp.tools.formatting import (
    format_control_result,
    format_device_detail,
    format_device_list,
    format_flow_detail,
    format_flow_list,
    format_trigger_unsupported,
    format_zone_list,
)
from homey_mcp.tools.models import DeviceInfo, FlowInfo, ZoneInfo


class TestEmptyCollections:
    def test_devices(self) -> None:
        assert format_device_list([]) == "No devices found."

    def test_zones(self) -> None:
        assert format_zone_list([]) == "No zones found."

    def test_flows(self) -> None:
        assert format_flow_list([]) == "No flows found."


class TestDeviceList:
    def test_count_line_and_numbered_blocks(self) -> None:
        text = format_device_list([
            DeviceInfo(id="a", name="Lamp", zone="Kitchen", device_class="light",
                       available=True, capabilities=["onoff", "dim"]),
            DeviceInfo(id="b"),
        ])
        lines = text.splitlines()
        assert lines[0] == "Found 2 device(s):"
        assert "1. Lamp" in lines
        assert "   Capabilities: onoff, dim" in lines
        assert "2. Unknown Device" in lines
        assert "   Zone: N/A" in lines
        assert "   Available: No" in lines

    def test_preserves_given_order(self) -> None:
        text = format_device_list([DeviceInfo(id="z", name="Zeta"), DeviceInfo(id="a", name="Alpha")])
        assert text.index("Zeta") < text.index("Alpha")


class TestZoneList:
    def test_sorted_case_insensitively(self) -> None:
        text = format_zone_list([
            ZoneInfo(id="1", name="Kitchen"),
            ZoneInfo(id="2", name="attic"),
            ZoneInfo(id="3", name="Bedroom"),
        ])
        assert text.index("1. attic") < text.index("2. Bedroom") < text.index("3. Kitchen")


class TestFlowList:
    def test_enabled_flag(self) -> None:
        text = format_flow_list([FlowInfo(id="f", name="Night", enabled=True)])
        assert "Found 1 flow(s):" in text
        assert "   Enabled: Yes" in text


class TestDetails:
    def test_device_detail_renders_values_as_json(self) -> None:
        text = format_device_detail(
            DeviceInfo(
                id="d1",
                name="Lamp",
                capability_values={"onoff": True, "dim": 0.4, "mode": "Error reading value"},
            )
        )
        assert text.splitlines()[0] == "Device Information for: Lamp"
        assert "Available: Unknown" in text
        assert "  onoff: true" in text
        assert "  dim: 0.4" in text
        assert '  mode: "Error reading value"' in text

    def test_flow_detail_sections(self) -> None:
        text = format_flow_detail(
            FlowInfo(
                id="f1",
                name="Morning",
                has_trigger=True,
                trigger_id="time_at",
                trigger_uri="homey:manager:cron",
                conditions=["weekday"],
                actions=["on", None],
            )
        )
        assert "Folder: None" in text
        assert "  URI: homey:manager:cron" in text
        assert "Conditions (1):" in text
        assert "Actions (2):" in text
        assert "  2. Unknown" in text

    def test_flow_detail_without_trigger(self) -> None:
        text = format_flow_detail(FlowInfo(id="f2"))
        assert "Trigger:" not in text
        assert "Conditions" not in text

    def test_trigger_unsupported_notice(self) -> None:
        text = format_trigger_unsupported(FlowInfo(id="f1", name="Morning", enabled=False))
        assert "not supported" in text
        assert "- Name: Morning" in text
        assert "- Enabled: No" in text

    def test_control_result_booleans_lowercase(self) -> None:
        text = format_control_result("d1", "Lamp", "onoff", True)
        assert text == 'Successfully set onoff to true for device "Lamp" (d1)'

    def test_control_result_falls_back_to_id(self) -> None:
        assert '"d1" (d1)' in format_control_result("d1", None, "dim", 0.5)
