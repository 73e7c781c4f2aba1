"""``gmail-mcp check`` — report missing credentials for the chosen transport."""

from __future__ import annotations

from pathlib import Path

import click

from gmail_mcp.cli_commands._output import (
    config_option,
    console,
    resolve_settings,
    transport_option,
)


@click.command()
@transport_option
@config_option
def check(transport: str | None, config_path: Path | None) -> None:
    """Check that credentials are configured; exits 1 if any are missing."""
    from gmail_mcp.mail.factory import credential_warnings

    settings = resolve_settings(config_path, transport)
    warnings = credential_warnings(settings)

    console.print(f"Transport: [cyan]{settings.transport}[/cyan]")
    if not warnings:
        console.print("[green]Credentials configured.[/green]")
        return

    for warning in warnings:
        console.print(f"[yellow]Warning:[/yellow] {warning}")
    raise SystemExit(1)
