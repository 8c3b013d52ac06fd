"""Permission tiers and their entitlement tables.

Fastly stores a single permission string per (user, service) pair. The
access graph instead models additive capabilities, so each tier maps to
the cumulative set of entitlements below and including it.

Lattice Structure
-----------------
The tiers form a four-element chain (total order):

    READ_ONLY  <  PURGE_SELECT  <  PURGE_ALL  <  FULL

Each tier contributes exactly one entitlement:

    READ_ONLY     ->  read-stats-and-configuration
    PURGE_SELECT  ->  purge-selected-content
    PURGE_ALL     ->  purge-all
    FULL          ->  full-access

so ``entitlements_for(tier)`` is the prefix of that list up to the tier.
Granting an entitlement raises the stored tier to the one that introduces
it; revoking it steps the tier down to the entitlement directly below.
Both only make sense because the tiers are a chain.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import IntEnum
from types import MappingProxyType

from fastly_access.core.models import Entitlement
from fastly_access.exceptions import UnknownPermissionError


class PermissionLevel(IntEnum):
    """Fastly service authorization tiers, ordered by privilege.

    The integer encoding enables direct comparison:
    READ_ONLY < PURGE_SELECT < PURGE_ALL < FULL.
    """

    READ_ONLY = 1
    PURGE_SELECT = 2
    PURGE_ALL = 3
    FULL = 4

    @property
    def provider_value(self) -> str:
        """The permission string used by the Fastly API."""
        return _PROVIDER_VALUES[self]

    @classmethod
    def from_provider(cls, value: str) -> PermissionLevel:
        """Parse a Fastly permission string.

        Raises:
            UnknownPermissionError: If ``value`` is not one of the four tiers.
        """
        try:
            return _PROVIDER_LEVELS[value]
        except KeyError:
            raise UnknownPermissionError(value) from None


_PROVIDER_VALUES: Mapping[PermissionLevel, str] = MappingProxyType({
    PermissionLevel.READ_ONLY: "read_only",
    PermissionLevel.PURGE_SELECT: "purge_select",
    PermissionLevel.PURGE_ALL: "purge_all",
    PermissionLevel.FULL: "full",
})

_PROVIDER_LEVELS: Mapping[str, PermissionLevel] = MappingProxyType(
    {value: level for level, value in _PROVIDER_VALUES.items()}
)


class PermissionLattice:
    """Immutable lookup tables between tiers and entitlements.

    Built once from the entitlement each tier introduces. Every tier must
    introduce a distinct entitlement.

    Args:
        tier_entitlements: The entitlement introduced by each tier.

    Raises:
        ValueError: If a tier is missing or two tiers share an entitlement.
    """

    def __init__(self, tier_entitlements: Mapping[PermissionLevel, Entitlement]) -> None:
        missing = [level.name for level in PermissionLevel if level not in tier_entitlements]
        if missing:
            raise ValueError(f"lattice is missing tiers: {', '.join(missing)}")
        if len(set(tier_entitlements.values())) != len(tier_entitlements):
            raise ValueError("each tier must introduce a distinct entitlement")

        ordered = [tier_entitlements[level] for level in sorted(PermissionLevel)]

        self._entitlements = MappingProxyType({
            level: tuple(ordered[: index + 1])
            for index, level in enumerate(sorted(PermissionLevel))
        })
        self._levels = MappingProxyType({
            entitlement: level
            for level, entitlement in zip(sorted(PermissionLevel), ordered)
        })
        self._revoke = MappingProxyType({
            upper: lower for lower, upper in zip(ordered, ordered[1:])
        })

    @property
    def tier_entitlements(self) -> tuple[Entitlement, ...]:
        """All tier entitlements, lowest first."""
        return self._entitlements[PermissionLevel.FULL]

    def entitlements_for(self, level: PermissionLevel) -> tuple[Entitlement, ...]:
        """Return the cumulative entitlements implied by ``level``, lowest first."""
        return self._entitlements[level]

    def entitlements_for_permission(self, permission: str) -> tuple[Entitlement, ...]:
        """Expand a raw Fastly permission string.

        Raises:
            UnknownPermissionError: If ``permission`` is not a known tier.
        """
        return self.entitlements_for(PermissionLevel.from_provider(permission))

    def level_for(self, entitlement: Entitlement) -> PermissionLevel | None:
        """Return the tier that introduces ``entitlement``.

        Returns None for entitlements outside the chain (role-derived ones,
        ``assigned`` and ``access``).
        """
        return self._levels.get(entitlement)

    def revoke_target(self, entitlement: Entitlement) -> Entitlement | None:
        """Return the entitlement a principal keeps after revoking ``entitlement``.

        Returns None for the bottom tier and for non-tier entitlements.
        """
        return self._revoke.get(entitlement)


DEFAULT_LATTICE = PermissionLattice({
    PermissionLevel.READ_ONLY: Entitlement.READ_STATS_AND_CONFIGURATION,
    PermissionLevel.PURGE_SELECT: Entitlement.PURGE_SELECTED_CONTENT,
    PermissionLevel.PURGE_ALL: Entitlement.PURGE_ALL,
    PermissionLevel.FULL: Entitlement.FULL_ACCESS,
})
