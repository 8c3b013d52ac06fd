"""Shared CLI state: connection settings and connector construction."""

from __future__ import annotations

import sys
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

import click

from fastly_access.cli.output import print_error
from fastly_access.connector import FastlyConnector
from fastly_access.exceptions import FastlyAccessError


@dataclass
class CliSettings:
    """Options collected by the top-level group."""

    token: str | None
    base_url: str
    page_size: int
    timeout: float


@contextmanager
def open_connector(settings: CliSettings) -> Iterator[FastlyConnector]:
    """Build a connector from the CLI settings and close it afterwards.

    Raises:
        click.UsageError: If no token was given.
    """
    if not settings.token:
        raise click.UsageError("Missing API token: pass --token or set FASTLY_API_TOKEN.")
    connector = FastlyConnector.from_token(
        settings.token,
        base_url=settings.base_url,
        timeout=settings.timeout,
        page_size=settings.page_size,
    )
    try:
        yield connector
    finally:
        connector.close()


@contextmanager
def exit_on_error() -> Iterator[None]:
    """Report any fastly-access error in red and exit with status 1."""
    try:
        yield
    except FastlyAccessError as exc:
        print_error(str(exc))
        sys.exit(1)
