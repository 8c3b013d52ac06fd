"""``fastly-access metadata``, ``validate`` and ``sync``.

Exit Codes:
    0 - Success.
    1 - The token is invalid or a provider call failed.
"""

from __future__ import annotations

import click

from fastly_access.cli.context import CliSettings, exit_on_error, open_connector
from fastly_access.cli.output import dump, print_snapshot_summary, print_success
from fastly_access.connector import METADATA


@click.command("metadata")
def metadata_command() -> None:
    """Show the connector's display name and description."""
    click.echo(f"{METADATA.display_name}: {METADATA.description}")


@click.command("validate")
@click.pass_obj
def validate_command(settings: CliSettings) -> None:
    """Check that the API token can reach the Fastly account."""
    with exit_on_error(), open_connector(settings) as connector:
        connector.validate()
        print_success(f"Token is valid for customer {connector.customer_id}")


@click.command("sync")
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json", "yaml"]),
    default="text",
    help="Output format (default: text).",
)
@click.pass_obj
def sync_command(settings: CliSettings, output_format: str) -> None:
    """List every resource, entitlement and grant in the account.

    Examples:

        fastly-access sync

        fastly-access sync --format json > access.json
    """
    with exit_on_error(), open_connector(settings) as connector:
        snapshot = connector.sync()

    if output_format == "text":
        print_snapshot_summary(snapshot)
    else:
        click.echo(dump(snapshot.to_dict(), output_format))
