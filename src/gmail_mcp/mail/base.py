"""MailTransport protocol — the single "deliver a message" capability.

Every strategy (SMTP submission, Gmail API upload) satisfies this protocol
so the ``send_email`` tool can deliver without knowing which one is active.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel

from gmail_mcp.mail.errors import InvalidAddressError, InvalidHeaderError


class OutgoingMessage(BaseModel):
    """A message ready to hand to a transport."""

    to: str
    subject: str
    body: str = ""
    attachment_path: str | None = None


@runtime_checkable
class MailTransport(Protocol):
    """Delivers one message and returns a success token."""

    name: str

    async def deliver(self, message: OutgoingMessage) -> str:
        """Deliver *message*.

        Returns:
            A provider message id, or a generic acknowledgment.

        Raises:
            MailError: On invalid addresses, unreadable attachments,
                authentication failures, or delivery failures.
        """
        ...


def validate_address(address: str, role: str) -> str:
    """Check address syntax without any network lookups.

    Raises:
        InvalidAddressError: If *address* is not a valid mailbox.
    """
    try:
        result = validate_email(address, check_deliverability=False)
    except EmailNotValidError as exc:
        raise InvalidAddressError(role, address, str(exc)) from exc
    return result.normalized


def check_header_value(value: str, field: str) -> str:
    """Reject values that would start a new header line.

    Raises:
        InvalidHeaderError: If *value* contains CR or LF.
    """
    if "\r" in value or "\n" in value:
        raise InvalidHeaderError(field)
    return value
