"""``gmail-mcp tools`` — show the tool catalog served over ``tools/list``."""

from __future__ import annotations

import click

from gmail_mcp.cli_commands._output import print_tools_json, print_tools_table


@click.command()
@click.option("--json", "as_json", is_flag=True, help="Print the catalog as JSON on stdout.")
def tools(as_json: bool) -> None:
    """List the tools this server exposes."""
    from gmail_mcp.config import ServerSettings
    from gmail_mcp.mail.factory import build_transport
    from gmail_mcp.tools.send_email import default_registry

    descriptors = default_registry(build_transport(ServerSettings())).descriptors()
    if as_json:
        print_tools_json(descriptors)
    else:
        print_tools_table(descriptors)
