"""Per-resource-type syncer interface.

Every resource type the connector exposes has a ``ResourceSyncer``. The
host drives each listing one page at a time, passing back the token it was
given until the token is ``END_OF_PAGES``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from typing import TypeVar

from fastly_access.core.models import (
    EntitlementDefinition,
    Grant,
    Resource,
    ResourceId,
    ResourceType,
)
from fastly_access.core.pagination import END_OF_PAGES
from fastly_access.exceptions import UnsupportedEntitlementError

T = TypeVar("T")

Page = tuple[list[T], str]


class ResourceSyncer(ABC):
    """List, entitle, grant and revoke for one resource type.

    Subclasses implement ``list``, ``entitlements`` and ``grants``. Types
    whose grants cannot be changed keep the default ``grant`` and
    ``revoke``, which refuse.
    """

    @property
    @abstractmethod
    def resource_type(self) -> ResourceType:
        """The resource type this syncer serves."""

    @abstractmethod
    def list(self, parent: ResourceId | None, page_token: str) -> Page[Resource]:
        """Return one page of resources and the next token."""

    @abstractmethod
    def entitlements(
        self, resource: Resource, page_token: str
    ) -> Page[EntitlementDefinition]:
        """Return one page of entitlements ``resource`` offers."""

    @abstractmethod
    def grants(self, resource: Resource, page_token: str) -> Page[Grant]:
        """Return one page of grants on ``resource``."""

    def grant(self, principal: ResourceId, entitlement: EntitlementDefinition) -> None:
        """Give ``principal`` the entitlement."""
        raise UnsupportedEntitlementError(
            f"{self.resource_type.id} resources do not support grants",
            principal_id=principal.resource,
            entitlement=entitlement.slug.value,
        )

    def revoke(self, grant: Grant) -> None:
        """Take the granted entitlement away from its principal."""
        raise UnsupportedEntitlementError(
            f"{self.resource_type.id} resources do not support revocation",
            principal_id=grant.principal.resource,
            entitlement=grant.entitlement.value,
        )


def iterate_pages(fetch: Callable[[str], Page[T]]) -> Iterator[T]:
    """Drive a paginated listing to completion, yielding every item.

    Args:
        fetch: Called with the current token; returns items and next token.
    """
    token = END_OF_PAGES
    while True:
        items, token = fetch(token)
        yield from items
        if token == END_OF_PAGES:
            return
