"""User syncer. Users are principals only: no entitlements, no grants."""

from __future__ import annotations

from fastly_access.core.models import (
    USER,
    EntitlementDefinition,
    Grant,
    Resource,
    ResourceId,
    ResourceType,
)
from fastly_access.core.pagination import END_OF_PAGES
from fastly_access.sync.base import Page, ResourceSyncer
from fastly_access.sync.directory import PrincipalDirectory


class UserSyncer(ResourceSyncer):
    def __init__(self, directory: PrincipalDirectory) -> None:
        self._directory = directory

    @property
    def resource_type(self) -> ResourceType:
        return USER

    def list(self, parent: ResourceId | None, page_token: str) -> Page[Resource]:
        return [p.to_resource() for p in self._directory.list()], END_OF_PAGES

    def entitlements(
        self, resource: Resource, page_token: str
    ) -> Page[EntitlementDefinition]:
        return [], END_OF_PAGES

    def grants(self, resource: Resource, page_token: str) -> Page[Grant]:
        return [], END_OF_PAGES
