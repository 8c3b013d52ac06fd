"""fastly-access CLI: sync and manage Fastly access from the command line.

Entry point for the ``fastly-access`` command. Connection options live on
the group and fall back to environment variables.

Commands:
    metadata       Show the connector's display name and description.
    validate       Check that the API token works.
    sync           Walk all resource types and print what was found.
    grant          Give an engineer a permission tier on a service.
    revoke         Step an engineer's permission tier down.
    assign-role    Set a user's role.
    unassign-role  Reset a user's role to the fallback role.

Usage::

    export FASTLY_API_TOKEN=...
    fastly-access validate
    fastly-access sync --format yaml
    fastly-access grant SERVICE_ID USER_ID purge-all
    fastly-access revoke SERVICE_ID USER_ID purge-all
    fastly-access assign-role USER_ID engineer
"""

from __future__ import annotations

import logging

import click

from fastly_access import __version__
from fastly_access.cli.context import CliSettings
from fastly_access.cli.grant_cmd import (
    assign_role_command,
    grant_command,
    revoke_command,
    unassign_role_command,
)
from fastly_access.cli.sync_cmd import metadata_command, sync_command, validate_command
from fastly_access.core.pagination import DEFAULT_PAGE_SIZE
from fastly_access.provider.http_client import DEFAULT_BASE_URL, DEFAULT_TIMEOUT


@click.group()
@click.version_option(version=__version__)
@click.option("--token", envvar="FASTLY_API_TOKEN", default=None, help="Fastly API token.")
@click.option(
    "--base-url", envvar="FASTLY_API_URL", default=DEFAULT_BASE_URL, show_default=True,
    help="Fastly API root URL.",
)
@click.option(
    "--page-size", type=click.IntRange(min=1), default=DEFAULT_PAGE_SIZE, show_default=True,
    help="Items requested per page from paginated endpoints.",
)
@click.option(
    "--timeout", type=float, default=DEFAULT_TIMEOUT, show_default=True,
    help="Request timeout in seconds.",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default="warning",
    show_default=True,
)
@click.pass_context
def cli(
    ctx: click.Context,
    token: str | None,
    base_url: str,
    page_size: int,
    timeout: float,
    log_level: str,
) -> None:
    """fastly-access: Sync Fastly users, roles and service permissions.

    Lists the account's users, services and roles as an access graph and
    grants or revokes service permission tiers and roles.
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = CliSettings(
        token=token, base_url=base_url, page_size=page_size, timeout=timeout
    )


cli.add_command(metadata_command)
cli.add_command(validate_command)
cli.add_command(sync_command)
cli.add_command(grant_command)
cli.add_command(revoke_command)
cli.add_command(assign_role_command)
cli.add_command(unassign_role_command)
