"""GmailApiTransport — delivery through the Gmail REST API.

Authorizes with OAuth 2.0 (installed-app flow), caches the resulting token
in an injected :class:`~gmail_mcp.mail.tokens.TokenStore`, and uploads a
hand-built MIME document as a raw message.
"""

from __future__ import annotations

import asyncio
import base64
import contextlib
import json
import logging
import sys
from email.header import Header
from typing import TYPE_CHECKING, Any
from uuid import uuid4

import httpx
from google.auth.exceptions import GoogleAuthError, RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials

from gmail_mcp.mail.attachments import Attachment, load_attachment
from gmail_mcp.mail.base import OutgoingMessage, check_header_value, validate_address
from gmail_mcp.mail.errors import DeliveryError, MailAuthError, MissingCredentialsError

if TYPE_CHECKING:
    from collections.abc import Callable

    from gmail_mcp.mail.tokens import TokenStore

    Authorizer = Callable[[dict[str, Any], list[str], float], Credentials]

logger = logging.getLogger(__name__)

GMAIL_SEND_SCOPE = "https://www.googleapis.com/auth/gmail.send"
GMAIL_UPLOAD_URL = "https://gmail.googleapis.com/upload/gmail/v1/users/me/messages/send"
CRLF = "\r\n"
DEFAULT_AUTH_TIMEOUT = 120.0


def run_installed_app_flow(
    client_config: dict[str, Any], scopes: list[str], timeout: float = DEFAULT_AUTH_TIMEOUT
) -> Credentials:
    """Interactive browser authorization; blocks until consent or *timeout* seconds.

    The flow prints its authorization URL with ``print()``; stdout carries
    the protocol stream, so that output is sent to stderr instead.

    Raises:
        MailAuthError: If no redirect reaches the local server in time.
    """
    from google_auth_oauthlib.flow import InstalledAppFlow

    flow = InstalledAppFlow.from_client_config(client_config, scopes)
    try:
        with contextlib.redirect_stdout(sys.stderr):
            creds = flow.run_local_server(port=0, timeout_seconds=timeout)
    except AttributeError as exc:
        # the flow reads the redirect URI off an unset attribute when it times out
        raise MailAuthError(f"OAuth authorization timed out after {timeout:g}s") from exc
    return creds  # type: ignore[no-any-return]


class GmailApiTransport:
    """Satisfies :class:`~gmail_mcp.mail.base.MailTransport` via the Gmail API.

    Credentials are cached on the instance after the first successful call;
    the token store is only read when nothing is cached yet.
    """

    name = "gmail_api"

    def __init__(
        self,
        client_config: dict[str, Any] | None,
        token_store: TokenStore,
        *,
        scopes: list[str] | None = None,
        http_client: httpx.AsyncClient | None = None,
        authorize: Authorizer | None = None,
        timeout: float = 30.0,
        auth_timeout: float = DEFAULT_AUTH_TIMEOUT,
    ) -> None:
        self._client_config = client_config
        self._token_store = token_store
        self._scopes = scopes or [GMAIL_SEND_SCOPE]
        self._http_client = http_client
        self._authorize = authorize or run_installed_app_flow
        self._timeout = timeout
        self._auth_timeout = auth_timeout
        self._credentials: Credentials | None = None

    @property
    def auth_timeout(self) -> float:
        return self._auth_timeout

    async def deliver(self, message: OutgoingMessage) -> str:
        """Upload *message*; returns the Gmail message id."""
        attachment = (
            await load_attachment(message.attachment_path) if message.attachment_path else None
        )
        recipient = validate_address(message.to, "to")
        check_header_value(message.subject, "subject")
        credentials = await self.credentials()
        document = build_mime_document(message, recipient=recipient, attachment=attachment)
        return await self._upload(document, credentials.token)

    async def credentials(self) -> Credentials:
        """Return valid credentials, refreshing or re-authorizing as needed.

        Raises:
            MissingCredentialsError: If authorization is needed and no client secret is configured.
            MailAuthError: If refresh or authorization fails.
        """
        creds = self._credentials or self._load_cached()
        if creds is not None and creds.valid:
            self._credentials = creds
            return creds

        if creds is not None and creds.expired and creds.refresh_token:
            try:
                await asyncio.to_thread(creds.refresh, Request())
            except RefreshError as exc:
                logger.warning("OAuth token refresh failed, re-authorizing: %s", exc)
            else:
                self._remember(creds)
                return creds

        if self._client_config is None:
            msg = "Gmail API client secret not configured (set GOOGLE_CLIENT_SECRET or provide client_secret.json)"
            raise MissingCredentialsError(msg)

        logger.info("Starting OAuth authorization flow")
        try:
            creds = await asyncio.to_thread(
                self._authorize, self._client_config, self._scopes, self._auth_timeout
            )
        except (GoogleAuthError, OSError, ValueError) as exc:
            raise MailAuthError(f"OAuth authorization failed: {exc}") from exc
        self._remember(creds)
        return creds

    def _load_cached(self) -> Credentials | None:
        info = self._token_store.get()
        if not info:
            return None
        try:
            return Credentials.from_authorized_user_info(info, self._scopes)  # type: ignore[no-untyped-call]
        except ValueError as exc:
            logger.warning("Ignoring unusable cached token: %s", exc)
            return None

    def _remember(self, creds: Credentials) -> None:
        self._credentials = creds
        self._token_store.put(json.loads(creds.to_json()))  # type: ignore[no-untyped-call]

    async def _upload(self, document: bytes, token: str | None) -> str:
        headers = {
            "Authorization": f"Bearer {token}",
            "Content-Type": "message/rfc822",
        }
        params = {"uploadType": "media"}
        try:
            if self._http_client is not None:
                response = await self._http_client.post(
                    GMAIL_UPLOAD_URL, params=params, headers=headers, content=document
                )
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.post(
                        GMAIL_UPLOAD_URL, params=params, headers=headers, content=document
                    )
        except httpx.HTTPError as exc:
            raise DeliveryError(f"Gmail API request failed: {exc}") from exc

        if response.status_code in (401, 403):
            self._credentials = None
            raise MailAuthError(f"Gmail API rejected credentials (HTTP {response.status_code})")
        if response.is_error:
            raise DeliveryError(
                f"Gmail API returned HTTP {response.status_code}: {_error_detail(response)}"
            )

        try:
            return str(response.json()["id"])
        except (ValueError, KeyError, TypeError) as exc:
            raise DeliveryError("Gmail API response did not include a message id") from exc


def build_mime_document(
    message: OutgoingMessage,
    *,
    recipient: str,
    attachment: Attachment | None = None,
    boundary: str | None = None,
) -> bytes:
    """Assemble a ``multipart/mixed`` RFC 822 document by hand.

    Raises:
        InvalidHeaderError: If the subject or attachment filename contains a line break.
    """
    boundary = boundary or f"gmail_mcp_{uuid4().hex}"
    subject = check_header_value(message.subject, "subject")
    lines = [
        f"To: {recipient}",
        f"Subject: {_encode_header(subject)}",
        "MIME-Version: 1.0",
        f'Content-Type: multipart/mixed; boundary="{boundary}"',
        "",
        f"--{boundary}",
        'Content-Type: text/plain; charset="UTF-8"',
        "Content-Transfer-Encoding: base64",
        "",
        _wrap_base64(message.body.encode("utf-8")),
    ]

    if attachment is not None:
        filename = check_header_value(attachment.filename, "attachment filename").replace('"', "")
        lines += [
            f"--{boundary}",
            f'Content-Type: {attachment.mime_type}; name="{filename}"',
            f'Content-Disposition: attachment; filename="{filename}"',
            "Content-Transfer-Encoding: base64",
            "",
            _wrap_base64(attachment.content),
        ]

    lines += [f"--{boundary}--", ""]
    return CRLF.join(lines).encode("utf-8")


def _encode_header(value: str) -> str:
    if value.isascii():
        return value
    return Header(value, "utf-8").encode()


def _wrap_base64(data: bytes) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return CRLF.join(encoded[i : i + 76] for i in range(0, len(encoded), 76))


def _error_detail(response: httpx.Response) -> str:
    try:
        payload: Any = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and "message" in error:
            return str(error["message"])
    return response.text[:200]
