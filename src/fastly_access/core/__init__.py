"""Static authorization model for Fastly accounts.

Submodules
----------
- ``models``: resource types, resources, entitlements and grants.
- ``lattice``: the permission tier chain and its entitlement tables.
- ``roles``: the closed role catalog and its implicit grants.
- ``pagination``: the opaque page token codec.
"""

from fastly_access.core.lattice import DEFAULT_LATTICE, PermissionLattice, PermissionLevel
from fastly_access.core.models import (
    Entitlement,
    EntitlementDefinition,
    Grant,
    Resource,
    ResourceId,
    ResourceType,
)
from fastly_access.core.roles import DEFAULT_ROLE_POLICY, Role, RolePolicy

__all__ = [
    "DEFAULT_LATTICE",
    "DEFAULT_ROLE_POLICY",
    "Entitlement",
    "EntitlementDefinition",
    "Grant",
    "PermissionLattice",
    "PermissionLevel",
    "Resource",
    "ResourceId",
    "ResourceType",
    "Role",
    "RolePolicy",
]
