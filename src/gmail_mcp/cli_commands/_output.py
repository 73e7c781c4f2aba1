"""Shared CLI output formatters.

Human-facing output goes to stderr so it can never be mistaken for
protocol traffic; ``--json`` output goes to stdout.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.table import Table

from gmail_mcp.config import ConfigError, ServerSettings, load_settings

if TYPE_CHECKING:
    from gmail_mcp.protocol.models import ToolDescriptor

console = Console(stderr=True)

config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML settings file (values override environment variables).",
)

transport_option = click.option(
    "--transport",
    type=click.Choice(["smtp", "gmail_api"]),
    default=None,
    help="Mail transport (default: GMAIL_MCP_TRANSPORT or smtp).",
)


def resolve_settings(config_path: Path | None, transport: str | None) -> ServerSettings:
    """Load settings, applying CLI overrides; exits with status 2 on bad config."""
    try:
        settings = load_settings(config_path)
    except ConfigError as exc:
        console.print(f"[red]Configuration error:[/red] {exc}")
        raise SystemExit(2) from exc
    if transport is not None:
        settings = settings.model_copy(update={"transport": transport})
    return settings


def print_tools_table(descriptors: list[ToolDescriptor]) -> None:
    """Pretty-print the tool catalog with each tool's arguments."""
    table = Table(title="Tools")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Arguments")

    for descriptor in descriptors:
        schema = descriptor.input_schema
        required = set(schema.get("required", []))
        args = ", ".join(
            f"{name}*" if name in required else name for name in schema.get("properties", {})
        )
        table.add_row(descriptor.name, _truncate(descriptor.description), args or "-")

    console.print(table)
    console.print("[dim]* required[/dim]")


def print_tools_json(descriptors: list[ToolDescriptor]) -> None:
    click.echo(json.dumps({"tools": [d.to_wire() for d in descriptors]}, indent=2))


def _truncate(text: str, max_len: int = 80) -> str:
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."
