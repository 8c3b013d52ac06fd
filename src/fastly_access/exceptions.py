"""fastly-access exception hierarchy.

All public exceptions inherit from FastlyAccessError, giving callers a single
base class to catch when they want to handle any connector failure without
swallowing unrelated errors.
"""

from __future__ import annotations


class FastlyAccessError(Exception):
    """Base exception for all fastly-access errors."""


class ProviderError(FastlyAccessError):
    """Raised when a call to the Fastly API fails.

    Covers network errors and non-2xx responses. The message names the
    failing operation; the underlying ``httpx`` exception is chained as
    ``__cause__``.
    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(f"fastly-access: {message}")
        self.status_code = status_code


class ConnectorSetupError(FastlyAccessError):
    """Raised when the connector cannot be bootstrapped from a credential."""


class CursorError(FastlyAccessError):
    """Raised when a pagination token cannot be decoded."""


class UnknownValueError(FastlyAccessError):
    """Raised when the provider returns a value outside a closed set."""


class UnknownRoleError(UnknownValueError):
    """Raised for a user role that is not one of the four known roles."""

    def __init__(self, role: str) -> None:
        super().__init__(f"unknown role {role!r}")
        self.role = role


class UnknownPermissionError(UnknownValueError):
    """Raised for an authorization permission that is not a lattice level."""

    def __init__(self, permission: str) -> None:
        super().__init__(f"unknown permission {permission!r}")
        self.permission = permission


class GrantPreconditionError(FastlyAccessError):
    """Raised when a grant or revoke request is not allowed.

    Distinct from ``ProviderError``: nothing was written and retrying the
    same request will fail the same way.

    Attributes:
        principal_id: The principal the request targeted.
        entitlement: Slug of the requested entitlement.
        role: The principal's current role, when it was looked up.
    """

    def __init__(
        self,
        message: str,
        *,
        principal_id: str = "",
        entitlement: str = "",
        role: str = "",
    ) -> None:
        super().__init__(f"fastly-access: {message}")
        self.principal_id = principal_id
        self.entitlement = entitlement
        self.role = role


class UnsupportedEntitlementError(GrantPreconditionError):
    """Raised when an entitlement has no permission tier to grant or revoke to."""
