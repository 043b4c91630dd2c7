"""homey-mcp CLI entrypoint."""

from __future__ import annotations

import click

from homey_mcp import __version__


@click.group()
@click.version_option(version=__version__, prog_name="homey-mcp")
def main() -> None:
    """Homey MCP — expose Homey devices, zones and flows as MCP tools."""


# Register subcommands
from homey_mcp.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
