"""Argument validation and coercion for tool calls.

Raw tool arguments arrive as untyped JSON.  Everything here either returns
a value of the expected type or raises :class:`ToolValidationError`; raw
input never reaches a provider call unchecked.
"""

from __future__ import annotations

import math
import re
from typing import Any

from homey_mcp.protocol.errors import ToolValidationError
from homey_mcp.provider.base import CapabilityValue

_INTEGER = re.compile(r"[+-]?\d+", re.ASCII)
_DECIMAL = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)

_JSON_TYPE_NAMES = {
    dict: "object",
    list: "array",
    tuple: "array",
    type(None): "null",
}


def json_type_name(value: Any) -> str:
    return _JSON_TYPE_NAMES.get(type(value), type(value).__name__)


def validate_identifier(value: Any, label: str) -> str:
    """Require *value* to be a non-empty string; *label* names the field."""
    if not isinstance(value, str) or not value:
        raise ToolValidationError(f"{label} must be a non-empty string", {"field": label})
    return value


def validate_device_id(value: Any) -> str:
    return validate_identifier(value, "Device ID")


def validate_capability(value: Any) -> str:
    return validate_identifier(value, "Capability")


def validate_flow_id(value: Any) -> str:
    return validate_identifier(value, "Flow ID")


def coerce_capability_value(value: Any) -> CapabilityValue:
    """Normalize a raw tool argument into a value a capability accepts.

    ``"true"``/``"false"`` become booleans, numeric text becomes ``int`` or
    ``float``, other non-empty text is kept as text.  ``None``, empty text,
    non-finite numbers and non-scalar types are rejected.
    """
    if value is None:
        raise ToolValidationError("Capability value cannot be null or undefined", {"field": "value"})

    # bool is a subclass of int, check it first
    if isinstance(value, bool):
        return value

    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            raise ToolValidationError("Capability value cannot be NaN or Infinity", {"field": "value"})
        return value

    if isinstance(value, str):
        if not value:
            raise ToolValidationError("Capability value cannot be an empty string", {"field": "value"})
        if value == "true":
            return True
        if value == "false":
            return False
        trimmed = value.strip()
        if _DECIMAL.fullmatch(trimmed):
            return _parse_number(trimmed)
        return value

    raise ToolValidationError(
        "Invalid capability value type: expected string, number, or boolean, "
        f"got {json_type_name(value)}",
        {"field": "value"},
    )


def _parse_number(text: str) -> int | float:
    if _INTEGER.fullmatch(text):
        try:
            return int(text)
        except ValueError:
            # past the interpreter's integer string conversion limit
            raise ToolValidationError(
                "Capability value is not a representable number", {"field": "value"}
            ) from None
    number = float(text)
    # "1e999" matches the grammar but overflows
    if not math.isfinite(number):
        raise ToolValidationError("Capability value cannot be NaN or Infinity", {"field": "value"})
    return number


def sanitize_zone_name(value: Any) -> str | None:
    """Return a trimmed zone filter, or ``None`` when no filter applies."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise ToolValidationError("Zone name must be a string", {"field": "zone"})
    return value.strip() or None


def coerce_flag(value: Any, field: str) -> bool:
    """Interpret an optional boolean argument; absent means ``False``."""
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if value == "true":
        return True
    if value == "false":
        return False
    raise ToolValidationError(
        f"{field} must be a boolean, got {json_type_name(value)}", {"field": field}
    )
