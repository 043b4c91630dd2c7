"""Shared CLI output and setup helpers."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from homey_mcp.config import ConfigLoader, ServerConfig

console = Console()
# stdout is reserved for protocol traffic while serving
err_console = Console(stderr=True)


def resolve_config(
    config_path: str | None,
    *,
    url: str | None = None,
    token: str | None = None,
    log_level: str | None = None,
) -> ServerConfig:
    """Load the config file (if any) and apply command-line overrides."""
    config = ConfigLoader(Path(config_path)).load() if config_path else ServerConfig()
    return config.with_overrides(url=url, token=token, log_level=log_level)


def configure_logging(level: str) -> None:
    """Send the package's log records to stderr through rich."""
    package_logger = logging.getLogger("homey_mcp")
    package_logger.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
        package_logger.addHandler(RichHandler(console=err_console, show_path=False))


def print_tools_table(tools: list[dict[str, Any]]) -> None:
    """Pretty-print tool definitions in ``tools/list`` form as a table."""
    table = Table(title="Homey MCP Tools")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Required")
    table.add_column("Optional")

    for tool in tools:
        schema = tool.get("inputSchema", {})
        required = list(schema.get("required", []))
        optional = [name for name in schema.get("properties", {}) if name not in required]
        table.add_row(
            tool.get("name", "?"),
            _truncate(tool.get("description", "")),
            ", ".join(required) or "-",
            ", ".join(optional) or "-",
        )

    console.print(table)


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
