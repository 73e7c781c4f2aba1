"""ProtocolLoop — newline-delimited JSON-RPC over a pair of streams.

Reads one request per line, dispatches it, and writes at most one
response line before reading the next.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import TYPE_CHECKING, Protocol, TextIO

from gmail_mcp.protocol.errors import DecodeError
from gmail_mcp.protocol.models import decode_request

if TYPE_CHECKING:
    from gmail_mcp.protocol.dispatcher import RequestDispatcher

logger = logging.getLogger(__name__)


class LineReader(Protocol):
    """Anything with an awaitable ``readline`` returning ``b""`` at EOF."""

    async def readline(self) -> bytes: ...


class StdinReader:
    """Reads ``sys.stdin`` line by line in a worker thread.

    Works whether stdin is a pipe, a terminal, or a redirected file.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream or sys.stdin

    async def readline(self) -> bytes:
        return await asyncio.to_thread(self._stream.buffer.readline)


class ProtocolLoop:
    """Feeds lines from *reader* to the dispatcher until end of input."""

    def __init__(self, dispatcher: RequestDispatcher) -> None:
        self._dispatcher = dispatcher

    async def run(self, reader: LineReader, writer: TextIO) -> None:
        """Process lines until EOF."""
        while True:
            raw = await reader.readline()
            if not raw:
                logger.info("End of input, shutting down")
                return
            await self.handle_line(raw, writer)

    async def handle_line(self, raw: bytes, writer: TextIO) -> None:
        """Decode, dispatch, and answer a single line."""
        try:
            line = raw.decode("utf-8").strip()
        except UnicodeDecodeError as exc:
            logger.error("Failed to decode input line: %s", exc)
            return
        if not line:
            return

        try:
            request = decode_request(line)
        except DecodeError as exc:
            logger.error("Failed to parse JSON-RPC message: %s", exc)
            return

        response = await self._dispatcher.dispatch(request)
        if response is None:
            return

        writer.write(response.to_line() + "\n")
        writer.flush()
