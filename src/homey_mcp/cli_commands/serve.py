"""``homey-mcp serve`` — run the MCP server over stdio."""

from __future__ import annotations

import asyncio
import logging
import sys

import click

from homey_mcp.cli_commands._output import configure_logging, err_console, resolve_config
from homey_mcp.config import ConfigError, ServerConfig

logger = logging.getLogger(__name__)


@click.command()
@click.option("--config", "-c", "config_path", type=click.Path(exists=True), default=None,
              help="YAML config file.")
@click.option("--url", envvar="HOMEY_URL", default=None, help="Homey base URL.")
@click.option("--token", envvar="HOMEY_TOKEN", default=None, help="Homey API bearer token.")
@click.option("--log-level", type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"],
              case_sensitive=False), default=None, help="Override the configured log level.")
def serve(
    config_path: str | None,
    url: str | None,
    token: str | None,
    log_level: str | None,
) -> None:
    """Serve MCP requests as newline-delimited JSON on stdin/stdout."""
    try:
        config = resolve_config(config_path, url=url, token=token, log_level=log_level)
    except ConfigError as exc:
        err_console.print(f"[red]Config error:[/red] {exc}")
        sys.exit(1)

    configure_logging(config.log_level)

    try:
        asyncio.run(_serve(config))
    except KeyboardInterrupt:
        logger.info("Interrupted")


async def _serve(config: ServerConfig) -> None:
    from homey_mcp.protocol.dispatcher import MCPServer
    from homey_mcp.protocol.transport import StdioServer
    from homey_mcp.provider.homey import HomeyClient

    if config.telemetry.enabled:
        from homey_mcp.utils.telemetry import configure_telemetry

        configure_telemetry(
            export_to_console=config.telemetry.console,
            otlp_endpoint=config.telemetry.otlp_endpoint,
        )

    logger.info("Homey MCP server is starting (Homey at %s)", config.homey.url)
    provider = HomeyClient(
        config.homey.url,
        token=config.homey.token,
        timeout=config.homey.timeout,
    )
    server = await MCPServer.initialize(provider)
    try:
        await StdioServer(server.handle_request).serve()
    finally:
        await MCPServer.shutdown()
