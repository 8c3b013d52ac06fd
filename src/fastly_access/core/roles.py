"""The Fastly role catalog and the entitlements each role implies.

Fastly users carry exactly one role. Three roles see every service and get
a fixed set of service entitlements from membership alone; the engineer
role gets nothing implicitly and must be authorized per service.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
from types import MappingProxyType

from fastly_access.core.models import Entitlement
from fastly_access.exceptions import UnknownRoleError


class Role(Enum):
    """The four Fastly user roles. Values are the API's lowercase names."""

    SUPERUSER = "superuser"
    USER = "user"
    BILLING = "billing"
    ENGINEER = "engineer"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @classmethod
    def parse(cls, value: str) -> Role:
        """Parse a role name case-insensitively.

        Raises:
            UnknownRoleError: If ``value`` names no known role.
        """
        try:
            return cls(value.lower())
        except ValueError:
            raise UnknownRoleError(value) from None


class RolePolicy:
    """Immutable role tables.

    Every role must appear in ``implicit_grants``, with an empty collection
    for roles that earn access only through authorizations. A new ``Role``
    member therefore fails policy construction until it is given an entry.

    Args:
        implicit_grants: Entitlements each role holds on every service.
        blanket_access: Roles that hold ``access`` on every service.
        operator: The role that may hold per-service permission tiers.
        revoked_role: The role a user falls back to when unassigned.

    Raises:
        ValueError: If a role has no entry in ``implicit_grants``.
    """

    def __init__(
        self,
        implicit_grants: Mapping[Role, Iterable[Entitlement]],
        *,
        blanket_access: Iterable[Role],
        operator: Role,
        revoked_role: Role,
    ) -> None:
        missing = [role.name for role in Role if role not in implicit_grants]
        if missing:
            raise ValueError(f"role policy has no entry for: {', '.join(missing)}")
        self._implicit = MappingProxyType(
            {role: tuple(ents) for role, ents in implicit_grants.items()}
        )
        self._blanket = tuple(blanket_access)
        self.operator = operator
        self.revoked_role = revoked_role

    @property
    def roles(self) -> tuple[Role, ...]:
        return tuple(Role)

    @property
    def blanket_access_roles(self) -> tuple[Role, ...]:
        """Roles granted ``access`` on every service."""
        return self._blanket

    def implicit_entitlements(self, role: Role) -> tuple[Entitlement, ...]:
        """Entitlements ``role`` holds on every service without an authorization."""
        return self._implicit[role]

    def is_operator(self, role: Role) -> bool:
        return role is self.operator


DEFAULT_ROLE_POLICY = RolePolicy(
    {
        Role.SUPERUSER: (
            Entitlement.READ_STATS_AND_ANALYTICS,
            Entitlement.ACCESS_BILLING,
            Entitlement.MANAGE_USERS_AND_ACCOUNTS,
        ),
        Role.USER: (Entitlement.READ_STATS_AND_ANALYTICS,),
        Role.BILLING: (
            Entitlement.READ_STATS_AND_ANALYTICS,
            Entitlement.ACCESS_BILLING,
        ),
        # Engineers are authorized per service.
        Role.ENGINEER: (),
    },
    blanket_access=(Role.SUPERUSER, Role.USER, Role.BILLING),
    operator=Role.ENGINEER,
    revoked_role=Role.USER,
)
