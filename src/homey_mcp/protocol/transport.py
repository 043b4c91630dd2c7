"""Stdio transport — serves JSON-RPC over newline-delimited JSON.

Each input line is one request.  Requests are dispatched as independent
tasks so a slow provider call does not hold up the next line; replies are
written as they complete, one JSON object per line.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from collections.abc import Awaitable, Callable
from typing import Any

from homey_mcp.protocol.errors import PARSE_ERROR
from homey_mcp.protocol.models import JsonRpcError, JsonRpcResponse

logger = logging.getLogger(__name__)

RequestHandler = Callable[[Any], Awaitable[JsonRpcResponse]]


def is_notification(message: Any) -> bool:
    """JSON-RPC notifications carry no ``id`` and expect no reply."""
    return (
        isinstance(message, dict)
        and "id" not in message
        and str(message.get("method", "")).startswith("notifications/")
    )


def _parse_line(line: bytes) -> tuple[Any, JsonRpcResponse | None]:
    try:
        return json.loads(line), None
    except ValueError as exc:
        error = JsonRpcError(code=PARSE_ERROR, message="Parse error", data=str(exc))
        return None, JsonRpcResponse.failure(None, error)


class StdioServer:
    """Reads requests from *reader* and writes replies to *writer*.

    Usage::

        server = await MCPServer.initialize(provider)
        await StdioServer(server.handle_request).serve()
    """

    def __init__(
        self,
        handler: RequestHandler,
        *,
        reader: asyncio.StreamReader | None = None,
        write: Callable[[str], None] | None = None,
    ) -> None:
        self._handler = handler
        self._reader = reader
        self._write = write or _stdout_write
        self._tasks: set[asyncio.Task[None]] = set()

    async def serve(self) -> None:
        """Process lines until EOF, then wait for in-flight requests."""
        reader = self._reader or await _stdin_reader()
        while True:
            line = await reader.readline()
            if not line:
                break
            if not line.strip():
                continue
            task = asyncio.create_task(self._process(line))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

        if self._tasks:
            await asyncio.gather(*self._tasks)
        logger.info("Input closed, stdio server stopping")

    async def _process(self, line: bytes) -> None:
        message, parse_failure = _parse_line(line)
        if parse_failure is not None:
            logger.warning("Discarding unparsable input line")
            self._send(parse_failure)
            return

        if is_notification(message):
            logger.debug("Notification received: %s", message.get("method"))
            return

        response = await self._handler(message)
        self._send(response)

    def _send(self, response: JsonRpcResponse) -> None:
        self._write(json.dumps(response.to_wire(), default=str) + "\n")


def _stdout_write(text: str) -> None:
    sys.stdout.write(text)
    sys.stdout.flush()


async def _stdin_reader() -> asyncio.StreamReader:
    loop = asyncio.get_running_loop()
    reader = asyncio.StreamReader()
    protocol = asyncio.StreamReaderProtocol(reader)
    await loop.connect_read_pipe(lambda: protocol, sys.stdin)
    return reader
