"""Server configuration — YAML file plus environment overrides."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError


class ConfigError(Exception):
    """Raised when a configuration file fails parsing or validation."""


class HomeySettings(BaseModel):
    """Where and how to reach the Homey controller."""

    url: str = "http://homey.local"
    token: str | None = None
    timeout: float = Field(default=10.0, gt=0)


class TelemetrySettings(BaseModel):
    """Optional tracing export."""

    enabled: bool = False
    console: bool = False
    otlp_endpoint: str | None = None


class ServerConfig(BaseModel):
    """Top-level configuration for ``homey-mcp serve``."""

    homey: HomeySettings = Field(default_factory=HomeySettings)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    telemetry: TelemetrySettings = Field(default_factory=TelemetrySettings)

    def with_overrides(
        self,
        *,
        url: str | None = None,
        token: str | None = None,
        log_level: str | None = None,
    ) -> ServerConfig:
        """Return a copy with any non-``None`` override applied."""
        homey_updates: dict[str, Any] = {}
        if url is not None:
            homey_updates["url"] = url
        if token is not None:
            homey_updates["token"] = token
        data = self.model_dump()
        data["homey"].update(homey_updates)
        if log_level is not None:
            data["log_level"] = log_level.upper()
        try:
            return ServerConfig.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(str(exc)) from exc


class ConfigLoader:
    """Load and validate a YAML config file into a :class:`ServerConfig`."""

    def __init__(self, path: Path) -> None:
        self._path = path

    def load(self) -> ServerConfig:
        """Read YAML, interpolate env vars, and validate.

        Environment variables in the form ``${VAR}`` or ``$VAR`` are expanded
        using :func:`os.path.expandvars` before YAML parsing, so tokens can
        stay out of the file.

        Raises:
            ConfigError: On read errors, YAML parse errors or schema validation failures.
        """
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot read {self._path}: {exc}") from exc

        expanded = os.path.expandvars(raw)

        try:
            data: Any = yaml.safe_load(expanded)
        except yaml.YAMLError as exc:
            raise ConfigError(f"YAML parse error: {exc}") from exc

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError("Config YAML must be a mapping")

        try:
            return ServerConfig.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(str(exc)) from exc
