"""The ``send_email`` tool — validates arguments and hands them to a MailTransport."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from gmail_mcp.mail.base import OutgoingMessage
from gmail_mcp.mail.errors import MailError
from gmail_mcp.protocol.errors import OperationFailedError
from gmail_mcp.protocol.models import ToolDescriptor
from gmail_mcp.tools.registry import Tool, ToolRegistry
from gmail_mcp.utils.telemetry import ATTR_TRANSPORT, get_tracer

if TYPE_CHECKING:
    from gmail_mcp.mail.base import MailTransport

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

DEFAULT_SUBJECT = "(No Subject)"

SEND_EMAIL_DESCRIPTOR = ToolDescriptor(
    name="send_email",
    description="Send an email with an optional attachment via Gmail",
    input_schema={
        "type": "object",
        "properties": {
            "to": {"type": "string", "description": "Recipient email address"},
            "subject": {"type": "string", "description": "Email subject"},
            "body": {"type": "string", "description": "Email body content"},
            "attachment_path": {
                "type": "string",
                "description": "Absolute path to an attachment file (optional)",
            },
        },
        "required": ["to"],
    },
)


class SendEmailArgs(BaseModel):
    """Arguments accepted by ``send_email``; unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore")

    to: str = Field(min_length=1)
    subject: str = DEFAULT_SUBJECT
    body: str = ""
    attachment_path: str | None = None


def build_send_email_tool(transport: MailTransport) -> Tool:
    """Bind the ``send_email`` descriptor to *transport*."""

    async def handle(args: SendEmailArgs) -> str:
        message = OutgoingMessage(
            to=args.to,
            subject=args.subject,
            body=args.body,
            attachment_path=args.attachment_path,
        )
        with _tracer.start_as_current_span("mail.deliver") as span:
            span.set_attribute(ATTR_TRANSPORT, transport.name)
            try:
                token = await transport.deliver(message)
            except MailError as exc:
                logger.error("send_email via %s failed: %s", transport.name, exc)
                raise OperationFailedError(f"Failed to send email: {exc}") from exc

        logger.info("send_email via %s delivered to %s", transport.name, args.to)
        return f"Email sent successfully. Message ID: {token}"

    return Tool(
        descriptor=SEND_EMAIL_DESCRIPTOR,
        arguments_model=SendEmailArgs,
        handler=handle,
    )


def default_registry(transport: MailTransport) -> ToolRegistry:
    """Build the registry served by this process."""
    return ToolRegistry([build_send_email_tool(transport)])
