"""Provider records and the abstract client the sync engine talks to.

The engine only depends on ``ProviderClient``; ``FastlyClient`` implements
it over HTTP and the tests implement it in memory.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


# ---------------------------------------------------------------------------
# Provider records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class User:
    """A Fastly user as returned by the API.

    Attributes:
        id: User id.
        name: Full name, first and last separated by a space.
        login: Login e-mail.
        role: Raw role string (``superuser``, ``user``, ``billing``,
            ``engineer``); parsed by ``Role.parse``.
        customer_id: Owning customer account.
        locked: True when the account is locked.
    """

    id: str
    name: str
    login: str = ""
    role: str = ""
    customer_id: str = ""
    locked: bool = False


@dataclass(frozen=True)
class Service:
    """A Fastly service."""

    id: str
    name: str
    comment: str = ""
    type: str = ""


@dataclass(frozen=True)
class ServiceAuthorization:
    """The stored permission tier of one user on one service.

    Attributes:
        id: Authorization id, used for updates.
        service_id: The service.
        user_id: The user.
        permission: Raw permission string (``read_only``, ``purge_select``,
            ``purge_all``, ``full``).
    """

    id: str
    service_id: str
    user_id: str
    permission: str


# ---------------------------------------------------------------------------
# Abstract client
# ---------------------------------------------------------------------------


class ProviderClient(ABC):
    """Blocking calls the sync engine makes against Fastly.

    Every method raises ``ProviderError`` on transport failure or a non-2xx
    response.
    """

    @abstractmethod
    def get_current_user(self) -> User:
        """Return the user that owns the credential."""

    @abstractmethod
    def list_customer_users(self, customer_id: str) -> list[User]:
        """Return every user of ``customer_id`` (the API does not paginate)."""

    @abstractmethod
    def get_user(self, user_id: str) -> User:
        """Return one user by id."""

    @abstractmethod
    def update_user_role(self, user_id: str, role: str) -> User:
        """Set a user's role and return the updated user."""

    @abstractmethod
    def list_services(self, *, page: int, per_page: int) -> list[Service]:
        """Return one page of services (1-indexed)."""

    @abstractmethod
    def list_service_authorizations(
        self, *, page_number: int, page_size: int
    ) -> list[ServiceAuthorization]:
        """Return one page of authorizations across all services (1-indexed).

        A page shorter than ``page_size`` is the last one.
        """

    @abstractmethod
    def create_service_authorization(
        self, *, service_id: str, user_id: str, permission: str
    ) -> ServiceAuthorization:
        """Create an authorization for a (service, user) pair."""

    @abstractmethod
    def update_service_authorization(
        self, authorization_id: str, *, permission: str
    ) -> ServiceAuthorization:
        """Replace the permission tier of an existing authorization."""
