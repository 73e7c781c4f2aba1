"""Select and construct the configured MailTransport."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from gmail_mcp.mail.gmail_api import GmailApiTransport
from gmail_mcp.mail.smtp import SmtpTransport
from gmail_mcp.mail.tokens import FileTokenStore

if TYPE_CHECKING:
    from gmail_mcp.config import ServerSettings
    from gmail_mcp.mail.base import MailTransport
    from gmail_mcp.mail.tokens import TokenStore

logger = logging.getLogger(__name__)


def build_transport(
    settings: ServerSettings,
    *,
    token_store: TokenStore | None = None,
) -> MailTransport:
    """Build the strategy named by ``settings.transport``.

    Missing credentials do not fail here; the returned transport reports
    them on its first ``deliver`` call.
    """
    if settings.transport == "smtp":
        return SmtpTransport(
            settings.smtp_username,
            settings.smtp_password,
            host=settings.smtp_host,
            port=settings.smtp_port,
            timeout=settings.timeout,
        )

    return GmailApiTransport(
        load_client_config(settings),
        token_store or FileTokenStore(settings.token_cache_path),
        timeout=settings.timeout,
        auth_timeout=settings.auth_timeout,
    )


def load_client_config(settings: ServerSettings) -> dict[str, Any] | None:
    """Read the OAuth client secret from raw JSON or from a file.

    Returns ``None`` (and logs a warning) if neither source is usable.
    """
    if settings.client_secret_json:
        try:
            data: Any = json.loads(settings.client_secret_json)
        except json.JSONDecodeError:
            logger.warning("GOOGLE_CLIENT_SECRET is not valid JSON; ignoring it")
        else:
            if isinstance(data, dict):
                return data
            logger.warning("GOOGLE_CLIENT_SECRET is not a JSON object; ignoring it")

    path = Path(settings.client_secret_path)
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Cannot read client secret %s: %s", path, exc)
        return None
    return data if isinstance(data, dict) else None


def credential_warnings(settings: ServerSettings) -> list[str]:
    """Describe missing credentials for the configured transport."""
    warnings: list[str] = []
    if settings.transport == "smtp":
        if not settings.smtp_username:
            warnings.append("GMAIL_USERNAME not set. Sending email will fail.")
        if not settings.smtp_password:
            warnings.append("GMAIL_APP_PASSWORD not set. Sending email will fail.")
        return warnings

    if not settings.client_secret_json and not Path(settings.client_secret_path).is_file():
        warnings.append(
            f"{settings.client_secret_path} not found and GOOGLE_CLIENT_SECRET not set. "
            "Authentication interactions will fail."
        )
    return warnings
