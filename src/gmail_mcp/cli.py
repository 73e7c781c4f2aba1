"""gmail-mcp CLI entrypoint."""

from __future__ import annotations

import click

from gmail_mcp import __version__


@click.group()
@click.version_option(version=__version__, prog_name="gmail-mcp")
def main() -> None:
    """Gmail MCP — send email from an MCP client over stdio."""


# Register subcommands
from gmail_mcp.cli_commands import register_commands  # noqa: E402

register_commands(main)

if __name__ == "__main__":
    main()
