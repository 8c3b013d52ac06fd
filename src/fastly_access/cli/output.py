"""Rich output helpers for the fastly-access CLI."""

from __future__ import annotations

import json
from collections import Counter
from typing import Any

import yaml
from rich.console import Console
from rich.table import Table

from fastly_access.connector import SyncSnapshot

console = Console()
err_console = Console(stderr=True)


def print_error(message: str) -> None:
    err_console.print(f"[bold red]Error:[/bold red] {message}", highlight=False)


def print_success(message: str) -> None:
    console.print(f"[green]{message}[/green]", highlight=False)


def print_snapshot_summary(snapshot: SyncSnapshot) -> None:
    """Print per-type resource counts and per-entitlement grant counts."""
    resources = Counter(r.id.resource_type for r in snapshot.resources)
    table = Table(title="Resources")
    table.add_column("Type")
    table.add_column("Count", justify="right")
    for resource_type, count in sorted(resources.items()):
        table.add_row(resource_type, str(count))
    console.print(table)

    grants = Counter(g.entitlement.value for g in snapshot.grants)
    table = Table(title="Grants")
    table.add_column("Entitlement")
    table.add_column("Count", justify="right")
    for entitlement, count in sorted(grants.items()):
        table.add_row(entitlement, str(count))
    console.print(table)

    console.print(
        f"Total: {len(snapshot.resources)} resources | "
        f"{len(snapshot.entitlements)} entitlements | "
        f"{len(snapshot.grants)} grants",
        highlight=False,
    )


def dump(data: Any, output_format: str) -> str:
    """Serialize ``data`` as JSON or YAML."""
    if output_format == "yaml":
        return yaml.safe_dump(data, sort_keys=False)
    return json.dumps(data, indent=2)
