"""SmtpTransport — direct submission to the Gmail SMTP relay.

Authenticates with a username and app password and opens a fresh
encrypted session per message.
"""

from __future__ import annotations

import logging
from email.message import EmailMessage
from email.utils import make_msgid

import aiosmtplib

from gmail_mcp.mail.attachments import Attachment, load_attachment
from gmail_mcp.mail.base import OutgoingMessage, check_header_value, validate_address
from gmail_mcp.mail.errors import DeliveryError, MailAuthError, MissingCredentialsError

logger = logging.getLogger(__name__)

GMAIL_SMTP_HOST = "smtp.gmail.com"
SMTPS_PORT = 465


class SmtpTransport:
    """Satisfies :class:`~gmail_mcp.mail.base.MailTransport` over SMTP.

    The TLS mode follows the port: 465 uses implicit TLS, any other port
    (typically 587) upgrades with STARTTLS.
    """

    name = "smtp"

    def __init__(
        self,
        username: str | None,
        password: str | None,
        *,
        host: str = GMAIL_SMTP_HOST,
        port: int = SMTPS_PORT,
        timeout: float = 30.0,
    ) -> None:
        self._username = username
        self._password = password
        self._host = host
        self._port = port
        self._timeout = timeout

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> int:
        return self._port

    async def deliver(self, message: OutgoingMessage) -> str:
        """Build and submit *message*; returns its ``Message-ID``."""
        attachment = (
            await load_attachment(message.attachment_path) if message.attachment_path else None
        )
        if not self._username or not self._password:
            msg = "SMTP credentials not configured (set GMAIL_USERNAME and GMAIL_APP_PASSWORD)"
            raise MissingCredentialsError(msg)

        sender = validate_address(self._username, "from")
        recipient = validate_address(message.to, "to")
        email = self.build_message(
            message, sender=sender, recipient=recipient, attachment=attachment
        )

        implicit_tls = self._port == SMTPS_PORT
        logger.debug("Submitting message to %s:%d for %s", self._host, self._port, recipient)
        try:
            _, reply = await aiosmtplib.send(
                email,
                hostname=self._host,
                port=self._port,
                username=self._username,
                password=self._password,
                use_tls=implicit_tls,
                start_tls=not implicit_tls,
                timeout=self._timeout,
            )
        except aiosmtplib.SMTPAuthenticationError as exc:
            raise MailAuthError(f"SMTP authentication failed: {exc.code} {exc.message}") from exc
        except (aiosmtplib.SMTPException, OSError) as exc:
            raise DeliveryError(f"SMTP delivery failed: {exc}") from exc

        logger.debug("SMTP relay replied: %s", reply)
        return str(email["Message-ID"])

    @staticmethod
    def build_message(
        message: OutgoingMessage,
        *,
        sender: str,
        recipient: str,
        attachment: Attachment | None = None,
    ) -> EmailMessage:
        """Build a plain-text message with at most one attachment."""
        email = EmailMessage()
        email["From"] = sender
        email["To"] = recipient
        email["Subject"] = check_header_value(message.subject, "subject")
        email["Message-ID"] = make_msgid(domain=sender.rsplit("@", 1)[-1])
        email.set_content(message.body)

        if attachment is not None:
            email.add_attachment(
                attachment.content,
                maintype=attachment.maintype,
                subtype=attachment.subtype,
                filename=check_header_value(attachment.filename, "attachment filename"),
            )
        return email
