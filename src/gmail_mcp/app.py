"""Process wiring — settings to transport to registry to dispatcher to loop."""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import TYPE_CHECKING, TextIO

from gmail_mcp import __version__
from gmail_mcp.mail.factory import build_transport, credential_warnings
from gmail_mcp.protocol.dispatcher import RequestDispatcher
from gmail_mcp.protocol.server import LineReader, ProtocolLoop, StdinReader
from gmail_mcp.tools.send_email import default_registry

if TYPE_CHECKING:
    from gmail_mcp.config import ServerSettings
    from gmail_mcp.mail.base import MailTransport

logger = logging.getLogger(__name__)

SERVER_NAME = "gmail-mcp-server"


def build_dispatcher(transport: MailTransport) -> RequestDispatcher:
    return RequestDispatcher(
        default_registry(transport),
        server_name=SERVER_NAME,
        server_version=__version__,
    )


async def run_server(
    settings: ServerSettings,
    *,
    reader: LineReader | None = None,
    writer: TextIO | None = None,
    transport: MailTransport | None = None,
) -> None:
    """Serve requests until the input stream closes."""
    logger.info("Starting Gmail MCP server (transport: %s)", settings.transport)
    for warning in credential_warnings(settings):
        logger.warning(warning)

    loop = ProtocolLoop(build_dispatcher(transport or build_transport(settings)))
    await loop.run(reader or StdinReader(), writer or sys.stdout)


def serve(settings: ServerSettings) -> None:
    """Blocking entrypoint used by the CLI."""
    asyncio.run(run_server(settings))
