"""Tool catalog and the tools served by this process."""

from gmail_mcp.tools.registry import Tool, ToolRegistry
from gmail_mcp.tools.send_email import (
    SEND_EMAIL_DESCRIPTOR,
    SendEmailArgs,
    build_send_email_tool,
    default_registry,
)

__all__ = [
    "SEND_EMAIL_DESCRIPTOR",
    "SendEmailArgs",
    "Tool",
    "ToolRegistry",
    "build_send_email_tool",
    "default_registry",
]
