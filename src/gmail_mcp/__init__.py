"""Gmail MCP server — a stdio JSON-RPC server exposing a ``send_email`` tool."""

from __future__ import annotations

__version__ = "0.1.0"
