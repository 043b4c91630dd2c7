"""``homey-mcp tools`` — list the tool catalog and call tools directly."""

from __future__ import annotations

import asyncio
import json
import sys
from typing import Any

import click

from homey_mcp.cli_commands._output import console, print_tools_table, resolve_config
from homey_mcp.config import ConfigError, ServerConfig


@click.group()
def tools() -> None:
    """Inspect and invoke the Homey tools."""


@tools.command("list")
@click.option("--json", "as_json", is_flag=True, help="Output the tools/list payload as JSON.")
def list_cmd(as_json: bool) -> None:
    """Show every tool the server advertises."""
    from homey_mcp.tools.registry import list_tool_definitions

    definitions = list_tool_definitions()
    if as_json:
        console.print_json(json.dumps({"tools": definitions}))
        return
    print_tools_table(definitions)


def _parse_argument(raw: str) -> tuple[str, Any]:
    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise click.BadParameter(f"expected KEY=VALUE, got {raw!r}", param_hint="--arg")
    try:
        return key, json.loads(value)
    except ValueError:
        return key, value


@tools.command("call")
@click.argument("name")
@click.option("--arg", "-a", "raw_args", multiple=True, help="Tool argument as KEY=VALUE.")
@click.option("--config", "-c", "config_path", type=click.Path(exists=True), default=None,
              help="YAML config file.")
@click.option("--url", envvar="HOMEY_URL", default=None, help="Homey base URL.")
@click.option("--token", envvar="HOMEY_TOKEN", default=None, help="Homey API bearer token.")
def call(
    name: str,
    raw_args: tuple[str, ...],
    config_path: str | None,
    url: str | None,
    token: str | None,
) -> None:
    """Call tool NAME once against Homey and print its result.

    Values are parsed as JSON when possible (``-a value=50``), otherwise
    passed as text (``-a zone=Kitchen``).
    """
    arguments = dict(_parse_argument(raw) for raw in raw_args)

    try:
        config = resolve_config(config_path, url=url, token=token)
    except ConfigError as exc:
        console.print(f"[red]Config error:[/red] {exc}")
        sys.exit(1)

    try:
        text = asyncio.run(_call(config, name, arguments))
    except Exception as exc:
        console.print(f"[red]Tool error:[/red] {exc}")
        sys.exit(1)

    click.echo(text)


async def _call(config: ServerConfig, name: str, arguments: dict[str, Any]) -> str:
    from homey_mcp.provider.homey import HomeyClient
    from homey_mcp.tools.invoker import ToolInvoker

    async with HomeyClient(
        config.homey.url,
        token=config.homey.token,
        timeout=config.homey.timeout,
    ) as provider:
        return await ToolInvoker(provider).invoke(name, arguments)
