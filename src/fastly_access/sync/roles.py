"""Role syncer: the static role catalog and role membership.

Membership is the user's single role field. Assigning a role overwrites
it; unassigning resets it to the policy's fallback role.
"""

from __future__ import annotations

import logging

from fastly_access.core.models import (
    ROLE,
    USER,
    Entitlement,
    EntitlementDefinition,
    Grant,
    Resource,
    ResourceId,
    ResourceType,
)
from fastly_access.core.pagination import END_OF_PAGES
from fastly_access.core.roles import DEFAULT_ROLE_POLICY, Role, RolePolicy
from fastly_access.exceptions import (
    GrantPreconditionError,
    ProviderError,
    UnsupportedEntitlementError,
)
from fastly_access.provider.base import ProviderClient
from fastly_access.sync.base import Page, ResourceSyncer
from fastly_access.sync.directory import PrincipalDirectory

logger = logging.getLogger(__name__)


def role_resource(role: Role) -> Resource:
    return Resource(
        id=ResourceId(ROLE.id, role.display_name),
        display_name=role.display_name,
        profile={"name": role.display_name},
    )


class RoleSyncer(ResourceSyncer):
    def __init__(
        self,
        client: ProviderClient,
        directory: PrincipalDirectory,
        *,
        policy: RolePolicy = DEFAULT_ROLE_POLICY,
    ) -> None:
        self._client = client
        self._directory = directory
        self._policy = policy

    @property
    def resource_type(self) -> ResourceType:
        return ROLE

    def list(self, parent: ResourceId | None, page_token: str) -> Page[Resource]:
        return [role_resource(role) for role in self._policy.roles], END_OF_PAGES

    def entitlements(
        self, resource: Resource, page_token: str
    ) -> Page[EntitlementDefinition]:
        assigned = EntitlementDefinition(
            resource=resource.id,
            slug=Entitlement.ASSIGNED,
            display_name=f"{resource.display_name} role {Entitlement.ASSIGNED.value}",
            description=f"Assigned to {resource.display_name} role",
            grantable_to=(USER.id,),
        )
        return [assigned], END_OF_PAGES

    def grants(self, resource: Resource, page_token: str) -> Page[Grant]:
        role = Role.parse(resource.id.resource)
        return [
            Grant(resource.id, Entitlement.ASSIGNED, principal.resource_id)
            for principal in self._directory.list()
            if principal.role is role
        ], END_OF_PAGES

    def grant(self, principal: ResourceId, entitlement: EntitlementDefinition) -> None:
        """Set ``principal``'s role to the entitlement's role.

        Raises:
            GrantPreconditionError: If the principal is not a user.
            UnsupportedEntitlementError: If the entitlement is not ``assigned``.
            ProviderError: If the update fails.
        """
        self._check(principal, entitlement.slug)
        self._set_role(principal.resource, Role.parse(entitlement.resource.resource))

    def revoke(self, grant: Grant) -> None:
        """Reset the grant's principal to the fallback role."""
        self._check(grant.principal, grant.entitlement)
        self._set_role(grant.principal.resource, self._policy.revoked_role)

    def _check(self, principal: ResourceId, entitlement: Entitlement) -> None:
        if principal.resource_type != USER.id:
            logger.warning(
                "Only users can be granted to roles: principal_id=%s principal_type=%s",
                principal.resource, principal.resource_type,
            )
            raise GrantPreconditionError(
                "only users can be granted to roles",
                principal_id=principal.resource,
                entitlement=entitlement.value,
            )
        if entitlement is not Entitlement.ASSIGNED:
            raise UnsupportedEntitlementError(
                f"roles only offer the {Entitlement.ASSIGNED.value} entitlement",
                principal_id=principal.resource,
                entitlement=entitlement.value,
            )

    def _set_role(self, user_id: str, role: Role) -> None:
        try:
            self._client.update_user_role(user_id, role.value)
        except ProviderError:
            logger.error("Failed to set role: role_id=%s user_id=%s", role.value, user_id)
            raise
