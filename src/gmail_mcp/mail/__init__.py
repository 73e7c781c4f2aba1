"""Mail transports — interchangeable strategies for delivering a message."""

from gmail_mcp.mail.base import MailTransport, OutgoingMessage
from gmail_mcp.mail.errors import (
    AttachmentReadError,
    DeliveryError,
    InvalidAddressError,
    InvalidHeaderError,
    MailAuthError,
    MailError,
    MissingCredentialsError,
)
from gmail_mcp.mail.factory import build_transport, credential_warnings
from gmail_mcp.mail.gmail_api import GmailApiTransport
from gmail_mcp.mail.smtp import SmtpTransport
from gmail_mcp.mail.tokens import FileTokenStore, MemoryTokenStore, TokenStore

__all__ = [
    "AttachmentReadError",
    "DeliveryError",
    "FileTokenStore",
    "GmailApiTransport",
    "InvalidAddressError",
    "InvalidHeaderError",
    "MailAuthError",
    "MailError",
    "MailTransport",
    "MemoryTokenStore",
    "MissingCredentialsError",
    "OutgoingMessage",
    "SmtpTransport",
    "TokenStore",
    "build_transport",
    "credential_warnings",
]
