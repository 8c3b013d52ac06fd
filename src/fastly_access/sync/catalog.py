"""Resource catalog: paginated listing of Fastly services."""

from __future__ import annotations

import logging

from fastly_access.core.models import SERVICE, Resource, ResourceId
from fastly_access.core.pagination import (
    DEFAULT_PAGE_SIZE,
    END_OF_PAGES,
    is_last_page,
    next_page_token,
    parse_page_token,
)
from fastly_access.provider.base import ProviderClient, Service

logger = logging.getLogger(__name__)


def service_resource(service: Service) -> Resource:
    return Resource(
        id=ResourceId(SERVICE.id, service.id),
        display_name=service.name,
        profile={"name": service.name, "comment": service.comment, "type": service.type},
    )


class ResourceCatalog:
    """Pages through the account's services.

    A page shorter than ``page_size`` ends the listing; the API's total
    count is not consulted.
    """

    def __init__(self, client: ProviderClient, *, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        self._client = client
        self.page_size = page_size

    def list(self, page_token: str) -> tuple[list[Resource], str]:
        bag, page = parse_page_token(page_token, SERVICE.id)
        services = self._client.list_services(page=page, per_page=self.page_size)
        logger.debug("Service page %d: %d services", page, len(services))

        resources = [service_resource(service) for service in services]
        if is_last_page(len(services), self.page_size):
            return resources, END_OF_PAGES
        return resources, next_page_token(bag, page + 1)
