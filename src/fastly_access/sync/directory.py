"""Principal directory: Fastly users as normalized principals.

Read-only. The customer user listing is a single unpaginated call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastly_access.core.models import USER, Resource, ResourceId
from fastly_access.core.roles import Role
from fastly_access.provider.base import ProviderClient, User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    """A Fastly user with its role parsed.

    Attributes:
        id: User id.
        name: Full display name.
        first_name: Text before the first space of ``name``.
        last_name: Text after it; empty when the name has no space.
        login: Login handle.
        disabled: True when the account is locked.
        customer_id: Owning customer account.
        role: The user's role.
    """

    id: str
    name: str
    first_name: str
    last_name: str
    login: str
    disabled: bool
    customer_id: str
    role: Role

    @classmethod
    def from_user(cls, user: User) -> Principal:
        """Build a principal from a provider user.

        Raises:
            UnknownRoleError: If the user's role is not a known role.
        """
        first_name, last_name = parse_name(user.name)
        return cls(
            id=user.id,
            name=user.name,
            first_name=first_name,
            last_name=last_name,
            login=user.login,
            disabled=user.locked,
            customer_id=user.customer_id,
            role=Role.parse(user.role),
        )

    @property
    def resource_id(self) -> ResourceId:
        return ResourceId(USER.id, self.id)

    def to_resource(self) -> Resource:
        profile = {
            "customer_id": self.customer_id,
            "login": self.login,
            "first_name": self.first_name,
        }
        if self.last_name:
            profile["last_name"] = self.last_name
        return Resource(
            id=self.resource_id,
            display_name=self.name,
            profile=profile,
            status="disabled" if self.disabled else "enabled",
            login=self.login,
        )


def parse_name(name: str) -> tuple[str, str]:
    """Split a full name at its first space into (first, last)."""
    first, _, last = name.partition(" ")
    return first, last


class PrincipalDirectory:
    """Lists and resolves the users of one customer account."""

    def __init__(self, client: ProviderClient, customer_id: str) -> None:
        self._client = client
        self.customer_id = customer_id

    def list(self) -> list[Principal]:
        users = self._client.list_customer_users(self.customer_id)
        logger.debug("Listed %d users for customer %s", len(users), self.customer_id)
        return [Principal.from_user(user) for user in users]

    def get(self, principal_id: str) -> Principal:
        return Principal.from_user(self._client.get_user(principal_id))
