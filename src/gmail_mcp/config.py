"""Server configuration — transport selection and credential sources."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ValidationError

from gmail_mcp.mail.gmail_api import DEFAULT_AUTH_TIMEOUT
from gmail_mcp.mail.smtp import GMAIL_SMTP_HOST, SMTPS_PORT
from gmail_mcp.mail.tokens import DEFAULT_TOKEN_CACHE

TransportName = Literal["smtp", "gmail_api"]

# Environment variable -> settings field
ENV_VARS: dict[str, str] = {
    "GMAIL_MCP_TRANSPORT": "transport",
    "GMAIL_USERNAME": "smtp_username",
    "GMAIL_APP_PASSWORD": "smtp_password",
    "GMAIL_SMTP_HOST": "smtp_host",
    "GMAIL_SMTP_PORT": "smtp_port",
    "GOOGLE_CLIENT_SECRET": "client_secret_json",
    "GOOGLE_CLIENT_SECRET_PATH": "client_secret_path",
    "GMAIL_TOKEN_CACHE": "token_cache_path",
    "GMAIL_AUTH_TIMEOUT": "auth_timeout",
    "GMAIL_MCP_LOG_LEVEL": "log_level",
}


class ConfigError(Exception):
    """The configuration file or environment could not be turned into settings."""


class ServerSettings(BaseModel):
    """Everything the server needs at startup.

    Credentials are optional: the server starts without them and only
    ``tools/call`` fails until they are supplied.
    """

    transport: TransportName = "smtp"
    smtp_username: str | None = None
    smtp_password: str | None = None
    smtp_host: str = GMAIL_SMTP_HOST
    smtp_port: int = SMTPS_PORT
    client_secret_json: str | None = None
    client_secret_path: str = "client_secret.json"
    token_cache_path: str = DEFAULT_TOKEN_CACHE
    timeout: float = 30.0
    auth_timeout: float = DEFAULT_AUTH_TIMEOUT
    log_level: str = "INFO"
    telemetry: bool = False
    otlp_endpoint: str | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ServerSettings:
        """Build settings from environment variables only."""
        try:
            return cls.model_validate(_env_values(environ))
        except ValidationError as exc:
            raise ConfigError(str(exc)) from exc


def load_settings(
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> ServerSettings:
    """Merge an optional YAML file over environment-derived settings.

    ``${VAR}`` references in the file are expanded before parsing.

    Raises:
        ConfigError: On unreadable files, YAML errors, or invalid values.
    """
    values = _env_values(environ)

    if path is not None:
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot read {path}: {exc}") from exc

        try:
            data: Any = yaml.safe_load(os.path.expandvars(raw))
        except yaml.YAMLError as exc:
            raise ConfigError(f"YAML parse error: {exc}") from exc

        if data is not None and not isinstance(data, dict):
            raise ConfigError("Config YAML must be a mapping")
        values.update(data or {})

    try:
        return ServerSettings.model_validate(values)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc


def _env_values(environ: Mapping[str, str] | None) -> dict[str, Any]:
    env = os.environ if environ is None else environ
    return {field: env[var] for var, field in ENV_VARS.items() if env.get(var)}
