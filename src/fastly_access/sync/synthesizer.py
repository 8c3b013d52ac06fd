"""Grant synthesis for services.

A service's grants come from three places:

1. Blanket role access: every service grants ``access`` to the roles that
   see all services.
2. Role membership: each non-engineer user holds its role's implicit
   entitlements on every service.
3. Service authorizations: each engineer authorization on this service
   expands, through the permission lattice, into one grant per entitlement
   of its tier.

Fastly lists authorizations for the whole account in one paginated feed,
so (3) is filtered client-side page by page. (1) and (2) are not paginated
and are emitted with the first page only, so a multi-page scan reports them
exactly once.
"""

from __future__ import annotations

import logging

from fastly_access.core.lattice import DEFAULT_LATTICE, PermissionLattice
from fastly_access.core.models import ROLE, SERVICE, Entitlement, Grant, ResourceId
from fastly_access.core.pagination import (
    DEFAULT_PAGE_SIZE,
    END_OF_PAGES,
    FIRST_PAGE,
    is_last_page,
    next_page_token,
    parse_page_token,
)
from fastly_access.core.roles import DEFAULT_ROLE_POLICY, RolePolicy
from fastly_access.provider.base import ProviderClient, ServiceAuthorization
from fastly_access.sync.directory import Principal, PrincipalDirectory

logger = logging.getLogger(__name__)

# Cursor key for the authorization feed, kept apart from the service listing.
AUTHORIZATIONS_KEY = f"{SERVICE.id}-authorizations"


class GrantSynthesizer:
    """Computes the grants held on one service, one authorization page at a time.

    Args:
        client: Provider client used for the authorization listing.
        directory: Resolves users referenced by authorizations.
        page_size: Authorizations requested per page.
        lattice: Permission tier tables.
        policy: Role tables.
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

    def grants(self, service: ResourceId, page_token: str) -> tuple[list[Grant], str]:
        """Return one page of grants on ``service`` and the next token.

        Raises:
            CursorError: If ``page_token`` is malformed or was issued by
                another listing.
            ProviderError: If a provider call fails.
            UnknownRoleError: If a user has an unrecognized role.
            UnknownPermissionError: If an authorization has an unrecognized tier.
        """
        bag, page = parse_page_token(page_token, AUTHORIZATIONS_KEY)

        grants: list[Grant] = []
        if page == FIRST_PAGE:
            grants.extend(self.role_access_grants(service))
            grants.extend(self.membership_grants(service, self._directory.list()))

        authorizations = self._client.list_service_authorizations(
            page_number=page, page_size=self.page_size
        )
        grants.extend(self.authorization_grants(service, authorizations))
        logger.debug(
            "Service %s authorization page %d: %d records, %d grants so far",
            service.resource, page, len(authorizations), len(grants),
        )

        if is_last_page(len(authorizations), self.page_size):
            return grants, END_OF_PAGES
        return grants, next_page_token(bag, page + 1)

    def role_access_grants(self, service: ResourceId) -> list[Grant]:
        return [
            Grant(service, Entitlement.ACCESS, ResourceId(ROLE.id, role.display_name))
            for role in self._policy.blanket_access_roles
        ]

    def membership_grants(
        self, service: ResourceId, principals: list[Principal]
    ) -> list[Grant]:
        grants: list[Grant] = []
        for principal in principals:
            for entitlement in self._policy.implicit_entitlements(principal.role):
                grants.append(Grant(service, entitlement, principal.resource_id))
        return grants

    def authorization_grants(
        self, service: ResourceId, authorizations: list[ServiceAuthorization]
    ) -> list[Grant]:
        grants: list[Grant] = []
        resolved: dict[str, Principal] = {}
        for authorization in authorizations:
            if authorization.service_id != service.resource:
                continue
            entitlements = self._lattice.entitlements_for_permission(authorization.permission)
            principal = resolved.get(authorization.user_id)
            if principal is None:
                principal = self._directory.get(authorization.user_id)
                resolved[authorization.user_id] = principal
            for entitlement in entitlements:
                grants.append(Grant(service, entitlement, principal.resource_id))
        return grants
