"""Access-graph data models: resource types, resources, entitlements, grants.

These are the normalized records produced by the syncers. They are plain
dataclasses with no provider knowledge so the CLI and tests can build them
without a client.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


# ---------------------------------------------------------------------------
# Resource types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ResourceType:
    """A kind of resource exposed to the host.

    Attributes:
        id: Stable type identifier ("user", "service", "role").
        display_name: Human-readable singular name.
        description: One-line description.
        traits: Host traits the type carries ("user", "app", "role").
        skip_entitlements_and_grants: True when the host should not ask
            for entitlements or grants of this type.
    """

    id: str
    display_name: str
    description: str
    traits: tuple[str, ...] = ()
    skip_entitlements_and_grants: bool = False


USER = ResourceType(
    id="user",
    display_name="User",
    description="A Fastly user",
    traits=("user",),
    skip_entitlements_and_grants=True,
)

SERVICE = ResourceType(
    id="service",
    display_name="Service",
    description="A Fastly service",
    traits=("app",),
)

ROLE = ResourceType(
    id="role",
    display_name="Role",
    description="A Fastly role",
    traits=("role",),
)

RESOURCE_TYPES: tuple[ResourceType, ...] = (USER, SERVICE, ROLE)


# ---------------------------------------------------------------------------
# Entitlement slugs
# ---------------------------------------------------------------------------


class Entitlement(Enum):
    """The closed set of entitlement slugs."""

    ASSIGNED = "assigned"
    READ_STATS_AND_ANALYTICS = "read-stats-and-analytics"
    ACCESS_BILLING = "access-billing"
    MANAGE_USERS_AND_ACCOUNTS = "manage-users-and-accounts"
    READ_STATS_AND_CONFIGURATION = "read-stats-and-configuration"
    PURGE_SELECTED_CONTENT = "purge-selected-content"
    PURGE_ALL = "purge-all"
    FULL_ACCESS = "full-access"
    ACCESS = "access"

    @property
    def slug(self) -> str:
        return self.value


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ResourceId:
    """Reference to a resource: its type id plus the provider id."""

    resource_type: str
    resource: str

    def __str__(self) -> str:
        return f"{self.resource_type}:{self.resource}"


@dataclass
class Resource:
    """A normalized resource record.

    Attributes:
        id: The resource reference.
        display_name: Name shown to operators.
        profile: Free-form trait profile (name, login, comment, ...).
        status: "enabled" or "disabled" for users, None otherwise.
        login: Login handle for users, None otherwise.
    """

    id: ResourceId
    display_name: str
    profile: dict[str, Any] = field(default_factory=dict)
    status: str | None = None
    login: str | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "id": self.id.resource,
            "resource_type": self.id.resource_type,
            "display_name": self.display_name,
            "profile": dict(self.profile),
        }
        if self.status is not None:
            out["status"] = self.status
        if self.login is not None:
            out["login"] = self.login
        return out


# ---------------------------------------------------------------------------
# Entitlements and grants
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EntitlementDefinition:
    """An entitlement offered by a specific resource.

    Attributes:
        resource: The resource that offers the entitlement.
        slug: Which entitlement.
        display_name: Name shown to operators.
        description: One-line description.
        grantable_to: Resource type ids that may hold it.
    """

    resource: ResourceId
    slug: Entitlement
    display_name: str
    description: str
    grantable_to: tuple[str, ...] = ()

    @property
    def id(self) -> str:
        return f"{self.resource}:{self.slug.value}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "slug": self.slug.value,
            "display_name": self.display_name,
            "description": self.description,
            "grantable_to": list(self.grantable_to),
        }


@dataclass(frozen=True)
class Grant:
    """A derived fact: ``principal`` holds ``entitlement`` on ``resource``."""

    resource: ResourceId
    entitlement: Entitlement
    principal: ResourceId

    @property
    def id(self) -> str:
        return f"{self.resource}:{self.entitlement.value}:{self.principal}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "resource": str(self.resource),
            "entitlement": self.entitlement.value,
            "principal": str(self.principal),
        }
