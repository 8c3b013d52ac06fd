"""Grant and revoke service permission tiers.

Fastly keeps one permission string per (service, user) pair, so granting
or revoking an entitlement is an upsert of that string:

- grant E: set the tier to the one that introduces E.
- revoke E: set the tier to the one that introduces the entitlement
  directly below E.

The existing authorization is found by a linear scan of the account-wide
authorization listing (the API has no point lookup), so each call costs
one request per authorization page up to the match. The read and the write
are not atomic; concurrent writers to the same pair race and the last
write wins.
"""

from __future__ import annotations

import logging

from fastly_access.core.lattice import DEFAULT_LATTICE, PermissionLattice, PermissionLevel
from fastly_access.core.models import (
    USER,
    Entitlement,
    EntitlementDefinition,
    Grant,
    ResourceId,
)
from fastly_access.core.pagination import DEFAULT_PAGE_SIZE, FIRST_PAGE, is_last_page
from fastly_access.core.roles import DEFAULT_ROLE_POLICY, RolePolicy
from fastly_access.exceptions import (
    GrantPreconditionError,
    ProviderError,
    UnsupportedEntitlementError,
)
from fastly_access.provider.base import ProviderClient, ServiceAuthorization
from fastly_access.sync.directory import PrincipalDirectory

logger = logging.getLogger(__name__)


class GrantMutator:
    """Applies grant and revoke requests to service authorizations.

    Each successful call performs at most one write: a create, an update,
    or nothing when the stored tier already matches.
    """

    def __init__(
        self,
        client: ProviderClient,
        directory: PrincipalDirectory,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        lattice: PermissionLattice = DEFAULT_LATTICE,
        policy: RolePolicy = DEFAULT_ROLE_POLICY,
    ) -> None:
        self._client = client
        self._directory = directory
        self.page_size = page_size
        self._lattice = lattice
        self._policy = policy

    def request_capability(
        self, principal: ResourceId, entitlement: EntitlementDefinition
    ) -> None:
        """Ensure ``principal`` holds ``entitlement`` on its service.

        Raises:
            UnsupportedEntitlementError: If the entitlement is not a tier.
            GrantPreconditionError: If the principal is not an engineer user.
            ProviderError: If a provider call fails.
        """
        level = self._lattice.level_for(entitlement.slug)
        if level is None:
            logger.warning("Unable to grant entitlement %s", entitlement.slug.value)
            raise UnsupportedEntitlementError(
                f"unable to grant {entitlement.slug.value} entitlement",
                principal_id=principal.resource,
                entitlement=entitlement.slug.value,
            )

        self._check_principal(principal, entitlement.slug)
        self._upsert(entitlement.resource.resource, principal.resource, level)

    def revoke_capability(self, grant: Grant) -> None:
        """Step ``grant``'s principal down to the tier below the granted one.

        Raises:
            UnsupportedEntitlementError: If nothing lies below the entitlement
                (the read-only tier, or any non-tier entitlement).
            GrantPreconditionError: If the principal is not an engineer user.
            ProviderError: If a provider call fails.
        """
        lower = self._lattice.revoke_target(grant.entitlement)
        level = self._lattice.level_for(lower) if lower is not None else None
        if level is None:
            logger.warning("Unable to revoke entitlement %s", grant.entitlement.value)
            raise UnsupportedEntitlementError(
                f"unable to revoke {grant.entitlement.value} entitlement",
                principal_id=grant.principal.resource,
                entitlement=grant.entitlement.value,
            )

        self._check_principal(grant.principal, grant.entitlement)
        self._upsert(grant.resource.resource, grant.principal.resource, level)

    def find_authorization(
        self, service_id: str, user_id: str
    ) -> ServiceAuthorization | None:
        """Scan the authorization listing for the (service, user) pair."""
        page = FIRST_PAGE
        while True:
            authorizations = self._client.list_service_authorizations(
                page_number=page, page_size=self.page_size
            )
            for authorization in authorizations:
                if authorization.service_id == service_id and authorization.user_id == user_id:
                    return authorization
            if is_last_page(len(authorizations), self.page_size):
                return None
            page += 1

    def _check_principal(self, principal: ResourceId, entitlement: Entitlement) -> None:
        if principal.resource_type != USER.id:
            logger.warning(
                "Only users can be granted to service: principal_id=%s principal_type=%s",
                principal.resource, principal.resource_type,
            )
            raise GrantPreconditionError(
                "only users can be granted to service",
                principal_id=principal.resource,
                entitlement=entitlement.value,
            )

        user = self._directory.get(principal.resource)
        if not self._policy.is_operator(user.role):
            operator = self._policy.operator.display_name
            logger.warning(
                "Only users with role %s can be granted to service: user_id=%s user_role=%s",
                operator, user.id, user.role.value,
            )
            raise GrantPreconditionError(
                f"only users with role {operator} can be granted to service",
                principal_id=user.id,
                entitlement=entitlement.value,
                role=user.role.value,
            )

    def _upsert(self, service_id: str, user_id: str, level: PermissionLevel) -> None:
        permission = level.provider_value
        existing = self.find_authorization(service_id, user_id)

        try:
            if existing is None:
                self._client.create_service_authorization(
                    service_id=service_id, user_id=user_id, permission=permission
                )
            elif existing.permission == permission:
                logger.debug(
                    "User %s already has %s on service %s", user_id, permission, service_id
                )
            else:
                self._client.update_service_authorization(existing.id, permission=permission)
        except ProviderError:
            logger.error(
                "Failed to set permission: permission=%s user_id=%s service_id=%s",
                permission, user_id, service_id,
            )
            raise
