"""Fastly connector: bootstrap, metadata, validation and the syncer set.

``FastlyConnector.from_token`` is the usual entry point. It resolves the
token's customer account once; every syncer is then bound to that account.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from fastly_access.core.lattice import DEFAULT_LATTICE, PermissionLattice
from fastly_access.core.models import (
    RESOURCE_TYPES,
    EntitlementDefinition,
    Grant,
    Resource,
    ResourceType,
)
from fastly_access.core.pagination import DEFAULT_PAGE_SIZE
from fastly_access.core.roles import DEFAULT_ROLE_POLICY, RolePolicy
from fastly_access.exceptions import ConnectorSetupError, ProviderError
from fastly_access.provider.base import ProviderClient
from fastly_access.provider.http_client import DEFAULT_BASE_URL, DEFAULT_TIMEOUT, FastlyClient
from fastly_access.sync.base import ResourceSyncer, iterate_pages
from fastly_access.sync.catalog import ResourceCatalog
from fastly_access.sync.directory import PrincipalDirectory
from fastly_access.sync.mutator import GrantMutator
from fastly_access.sync.roles import RoleSyncer
from fastly_access.sync.services import ServiceSyncer
from fastly_access.sync.synthesizer import GrantSynthesizer
from fastly_access.sync.users import UserSyncer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConnectorMetadata:
    display_name: str
    description: str


METADATA = ConnectorMetadata(
    display_name="Fastly",
    description="Connector syncing Fastly resources to Baton",
)


@dataclass
class SyncSnapshot:
    """Everything one full pass over all syncers produced."""

    resources: list[Resource] = field(default_factory=list)
    entitlements: list[EntitlementDefinition] = field(default_factory=list)
    grants: list[Grant] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "resources": [r.to_dict() for r in self.resources],
            "entitlements": [e.to_dict() for e in self.entitlements],
            "grants": [g.to_dict() for g in self.grants],
        }


class FastlyConnector:
    """Syncers for one Fastly customer account.

    Args:
        client: Provider client bound to a credential.
        customer_id: The customer account to sync.
        page_size: Page size for paginated listings.
        lattice: Permission tier tables shared by all components.
        policy: Role tables shared by all components.
    """

    def __init__(
        self,
        client: ProviderClient,
        customer_id: str,
        *,
        page_size: int = DEFAULT_PAGE_SIZE,
        lattice: PermissionLattice = DEFAULT_LATTICE,
        policy: RolePolicy = DEFAULT_ROLE_POLICY,
    ) -> None:
        self.client = client
        self.customer_id = customer_id

        directory = PrincipalDirectory(client, customer_id)
        catalog = ResourceCatalog(client, page_size=page_size)
        synthesizer = GrantSynthesizer(
            client, directory, page_size=page_size, lattice=lattice, policy=policy
        )
        mutator = GrantMutator(
            client, directory, page_size=page_size, lattice=lattice, policy=policy
        )
        self._syncers: dict[str, ResourceSyncer] = {
            syncer.resource_type.id: syncer
            for syncer in (
                UserSyncer(directory),
                ServiceSyncer(catalog, synthesizer, mutator),
                RoleSyncer(client, directory, policy=policy),
            )
        }

    @classmethod
    def from_token(
        cls,
        token: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> FastlyConnector:
        """Build a connector for the account that owns ``token``.

        Raises:
            ConnectorSetupError: If the current user cannot be fetched.
        """
        client = FastlyClient(token, base_url=base_url, timeout=timeout)
        try:
            user = client.get_current_user()
        except ProviderError as exc:
            client.close()
            raise ConnectorSetupError(f"unable to resolve Fastly account: {exc}") from exc
        logger.info("Connected to Fastly customer %s as %s", user.customer_id, user.login)
        return cls(client, user.customer_id, page_size=page_size)

    def resource_types(self) -> tuple[ResourceType, ...]:
        return RESOURCE_TYPES

    def resource_syncers(self) -> list[ResourceSyncer]:
        return list(self._syncers.values())

    def syncer(self, resource_type_id: str) -> ResourceSyncer:
        try:
            return self._syncers[resource_type_id]
        except KeyError:
            raise KeyError(f"unknown resource type {resource_type_id!r}") from None

    def metadata(self) -> ConnectorMetadata:
        return METADATA

    def validate(self) -> None:
        """Exercise the credential against the API.

        Raises:
            ConnectorSetupError: If the credential is not usable; the provider
                failure is chained as ``__cause__``.
        """
        try:
            self.client.get_current_user()
        except ProviderError as exc:
            raise ConnectorSetupError(f"credential validation failed: {exc}") from exc

    def asset(self, asset_id: str) -> tuple[str, bytes]:
        """Asset streaming is not supported; returns an empty content type and body."""
        return "", b""

    def sync(self) -> SyncSnapshot:
        """Walk every syncer to completion, following all page tokens."""
        snapshot = SyncSnapshot()
        for syncer in self.resource_syncers():
            resources = list(iterate_pages(lambda t, s=syncer: s.list(None, t)))
            snapshot.resources.extend(resources)
            if syncer.resource_type.skip_entitlements_and_grants:
                continue
            for resource in resources:
                snapshot.entitlements.extend(
                    iterate_pages(lambda t, s=syncer, r=resource: s.entitlements(r, t))
                )
                snapshot.grants.extend(
                    iterate_pages(lambda t, s=syncer, r=resource: s.grants(r, t))
                )
        logger.info(
            "Synced %d resources, %d entitlements, %d grants",
            len(snapshot.resources), len(snapshot.entitlements), len(snapshot.grants),
        )
        return snapshot

    def close(self) -> None:
        close = getattr(self.client, "close", None)
        if close is not None:
            close()
