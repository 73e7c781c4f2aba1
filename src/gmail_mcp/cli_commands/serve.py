"""``gmail-mcp serve`` — run the stdio server until stdin closes."""

from __future__ import annotations

from pathlib import Path

import click

from gmail_mcp.cli_commands._output import config_option, resolve_settings, transport_option


@click.command()
@transport_option
@config_option
@click.option("--log-level", default=None, help="Logging level (default: INFO).")
@click.option(
    "--otel/--no-otel",
    default=None,
    help="Export OpenTelemetry spans to stderr (requires gmail-mcp[otel]).",
)
def serve(
    transport: str | None,
    config_path: Path | None,
    log_level: str | None,
    otel: bool | None,
) -> None:
    """Serve JSON-RPC requests on stdin/stdout."""
    from gmail_mcp.app import serve as run
    from gmail_mcp.utils.log import configure_logging
    from gmail_mcp.utils.telemetry import configure_telemetry

    settings = resolve_settings(config_path, transport)
    if log_level is not None:
        settings = settings.model_copy(update={"log_level": log_level})
    if otel is not None:
        settings = settings.model_copy(update={"telemetry": otel})

    configure_logging(settings.log_level)
    if settings.telemetry:
        configure_telemetry(otlp_endpoint=settings.otlp_endpoint)

    run(settings)
