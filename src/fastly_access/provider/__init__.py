"""Access to the Fastly account API.

Public API::

    from fastly_access.provider import ProviderClient, User, Service
    from fastly_access.provider.http_client import FastlyClient
"""

from __future__ import annotations

from fastly_access.provider.base import (
    ProviderClient,
    Service,
    ServiceAuthorization,
    User,
)

__all__ = [
    "ProviderClient",
    "Service",
    "ServiceAuthorization",
    "User",
]
