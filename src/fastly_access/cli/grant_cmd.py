"""``fastly-access grant|revoke|assign-role|unassign-role``.

Service commands take an entitlement slug and change the user's stored
permission tier; role commands change the user's role field.
"""

from __future__ import annotations

import click

from fastly_access.cli.context import CliSettings, exit_on_error, open_connector
from fastly_access.cli.output import print_success
from fastly_access.core.models import (
    ROLE,
    SERVICE,
    USER,
    Entitlement,
    EntitlementDefinition,
    Grant,
    ResourceId,
)
from fastly_access.core.roles import Role

_ENTITLEMENT_SLUGS = [e.value for e in Entitlement]
_ROLE_NAMES = [r.value for r in Role]


def _definition(resource: ResourceId, slug: Entitlement) -> EntitlementDefinition:
    return EntitlementDefinition(
        resource=resource, slug=slug, display_name=slug.value, description=""
    )


@click.command("grant")
@click.argument("service_id")
@click.argument("user_id")
@click.argument("entitlement", type=click.Choice(_ENTITLEMENT_SLUGS))
@click.pass_obj
def grant_command(
    settings: CliSettings, service_id: str, user_id: str, entitlement: str
) -> None:
    """Give USER_ID the ENTITLEMENT tier on SERVICE_ID."""
    service = ResourceId(SERVICE.id, service_id)
    with exit_on_error(), open_connector(settings) as connector:
        connector.syncer(SERVICE.id).grant(
            ResourceId(USER.id, user_id), _definition(service, Entitlement(entitlement))
        )
    print_success(f"Granted {entitlement} on {service_id} to {user_id}")


@click.command("revoke")
@click.argument("service_id")
@click.argument("user_id")
@click.argument("entitlement", type=click.Choice(_ENTITLEMENT_SLUGS))
@click.pass_obj
def revoke_command(
    settings: CliSettings, service_id: str, user_id: str, entitlement: str
) -> None:
    """Take ENTITLEMENT on SERVICE_ID away from USER_ID."""
    grant = Grant(
        ResourceId(SERVICE.id, service_id),
        Entitlement(entitlement),
        ResourceId(USER.id, user_id),
    )
    with exit_on_error(), open_connector(settings) as connector:
        connector.syncer(SERVICE.id).revoke(grant)
    print_success(f"Revoked {entitlement} on {service_id} from {user_id}")


@click.command("assign-role")
@click.argument("user_id")
@click.argument("role", type=click.Choice(_ROLE_NAMES, case_sensitive=False))
@click.pass_obj
def assign_role_command(settings: CliSettings, user_id: str, role: str) -> None:
    """Set USER_ID's role to ROLE."""
    role_id = ResourceId(ROLE.id, Role.parse(role).display_name)
    with exit_on_error(), open_connector(settings) as connector:
        connector.syncer(ROLE.id).grant(
            ResourceId(USER.id, user_id), _definition(role_id, Entitlement.ASSIGNED)
        )
    print_success(f"Assigned {role_id.resource} to {user_id}")


@click.command("unassign-role")
@click.argument("user_id")
@click.argument("role", type=click.Choice(_ROLE_NAMES, case_sensitive=False))
@click.pass_obj
def unassign_role_command(settings: CliSettings, user_id: str, role: str) -> None:
    """Remove ROLE from USER_ID, falling back to the default role."""
    grant = Grant(
        ResourceId(ROLE.id, Role.parse(role).display_name),
        Entitlement.ASSIGNED,
        ResourceId(USER.id, user_id),
    )
    with exit_on_error(), open_connector(settings) as connector:
        connector.syncer(ROLE.id).revoke(grant)
    print_success(f"Unassigned {grant.resource.resource} from {user_id}")
