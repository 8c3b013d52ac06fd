"""Service syncer: the catalog, its entitlements, grants and tier changes."""

from __future__ import annotations

from fastly_access.core.models import (
    ROLE,
    SERVICE,
    USER,
    Entitlement,
    EntitlementDefinition,
    Grant,
    Resource,
    ResourceId,
    ResourceType,
)
from fastly_access.core.pagination import END_OF_PAGES
from fastly_access.sync.base import Page, ResourceSyncer
from fastly_access.sync.catalog import ResourceCatalog
from fastly_access.sync.mutator import GrantMutator
from fastly_access.sync.synthesizer import GrantSynthesizer

# (slug, description template, grantable to)
_SERVICE_ENTITLEMENTS: tuple[tuple[Entitlement, str, str], ...] = (
    (Entitlement.READ_STATS_AND_ANALYTICS, "Can read stats and analytics of {}", USER.id),
    (Entitlement.ACCESS_BILLING, "Access billing of {}", USER.id),
    (Entitlement.MANAGE_USERS_AND_ACCOUNTS, "Manage users and accounts of {}", USER.id),
    (Entitlement.READ_STATS_AND_CONFIGURATION, "Read stats and configuration of {}", USER.id),
    (Entitlement.PURGE_SELECTED_CONTENT, "Purge selected content of {}", USER.id),
    (Entitlement.PURGE_ALL, "Purge all content of {}", USER.id),
    (Entitlement.FULL_ACCESS, "Full access to {}", USER.id),
    (Entitlement.ACCESS, "Access {}", ROLE.id),
)


def service_entitlements(resource: Resource) -> list[EntitlementDefinition]:
    """The eight entitlements every service offers."""
    return [
        EntitlementDefinition(
            resource=resource.id,
            slug=slug,
            display_name=f"{slug.value} of {resource.display_name}",
            description=template.format(resource.display_name),
            grantable_to=(grantable_to,),
        )
        for slug, template, grantable_to in _SERVICE_ENTITLEMENTS
    ]


class ServiceSyncer(ResourceSyncer):
    def __init__(
        self,
        catalog: ResourceCatalog,
        synthesizer: GrantSynthesizer,
        mutator: GrantMutator,
    ) -> None:
        self._catalog = catalog
        self._synthesizer = synthesizer
        self._mutator = mutator

    @property
    def resource_type(self) -> ResourceType:
        return SERVICE

    def list(self, parent: ResourceId | None, page_token: str) -> Page[Resource]:
        return self._catalog.list(page_token)

    def entitlements(
        self, resource: Resource, page_token: str
    ) -> Page[EntitlementDefinition]:
        return service_entitlements(resource), END_OF_PAGES

    def grants(self, resource: Resource, page_token: str) -> Page[Grant]:
        return self._synthesizer.grants(resource.id, page_token)

    def grant(self, principal: ResourceId, entitlement: EntitlementDefinition) -> None:
        self._mutator.request_capability(principal, entitlement)

    def revoke(self, grant: Grant) -> None:
        self._mutator.revoke_capability(grant)
