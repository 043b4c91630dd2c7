"""Homey MCP — Model Context Protocol server for the Homey smart-home platform."""

from __future__ import annotations

__version__ = "0.1.0"
