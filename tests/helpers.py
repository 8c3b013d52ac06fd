"""In-memory Fastly provider used across the test suite."""

from __future__ import annotations

from fastly_access.exceptions import ProviderError
from fastly_access.provider.base import (
    ProviderClient,
    Service,
    ServiceAuthorization,
    User,
)

CUSTOMER_ID = "cust-1"


def make_user(user_id: str, name: str, role: str, *, locked: bool = False) -> User:
    return User(
        id=user_id,
        name=name,
        login=f"{user_id}@example.com",
        role=role,
        customer_id=CUSTOMER_ID,
        locked=locked,
    )


class FakeProvider(ProviderClient):
    """Stores users, services and authorizations in lists.

    Every call is recorded in ``calls``; every write in ``writes``. Method
    names listed in ``fail_on`` raise ``ProviderError``.
    """

    def __init__(
        self,
        users: list[User] | None = None,
        services: list[Service] | None = None,
        authorizations: list[ServiceAuthorization] | None = None,
        current_user: User | None = None,
    ) -> None:
        self.users: dict[str, User] = {u.id: u for u in users or []}
        self.services: list[Service] = list(services or [])
        self.authorizations: list[ServiceAuthorization] = list(authorizations or [])
        self.current_user = current_user
        self.calls: list[tuple] = []
        self.writes: list[tuple] = []
        self.fail_on: set[str] = set()

    def _record(self, name: str, *args: object) -> None:
        self.calls.append((name, *args))
        if name in self.fail_on:
            raise ProviderError(f"{name}: HTTP 500", status_code=500)

    def get_current_user(self) -> User:
        self._record("get_current_user")
        if self.current_user is None:
            raise ProviderError("error getting current user: HTTP 401", status_code=401)
        return self.current_user

    def list_customer_users(self, customer_id: str) -> list[User]:
        self._record("list_customer_users", customer_id)
        return [u for u in self.users.values() if u.customer_id == customer_id]

    def get_user(self, user_id: str) -> User:
        self._record("get_user", user_id)
        try:
            return self.users[user_id]
        except KeyError:
            raise ProviderError("failed to get user: HTTP 404", status_code=404) from None

    def update_user_role(self, user_id: str, role: str) -> User:
        self._record("update_user_role", user_id, role)
        user = self.users[user_id]
        updated = User(
            id=user.id, name=user.name, login=user.login, role=role,
            customer_id=user.customer_id, locked=user.locked,
        )
        self.users[user_id] = updated
        self.writes.append(("update_user_role", user_id, role))
        return updated

    def list_services(self, *, page: int, per_page: int) -> list[Service]:
        self._record("list_services", page, per_page)
        start = (page - 1) * per_page
        return self.services[start:start + per_page]

    def list_service_authorizations(
        self, *, page_number: int, page_size: int
    ) -> list[ServiceAuthorization]:
        self._record("list_service_authorizations", page_number, page_size)
        start = (page_number - 1) * page_size
        return self.authorizations[start:start + page_size]

    def create_service_authorization(
        self, *, service_id: str, user_id: str, permission: str
    ) -> ServiceAuthorization:
        self._record("create_service_authorization", service_id, user_id, permission)
        created = ServiceAuthorization(
            id=f"sa-{len(self.authorizations) + 1}",
            service_id=service_id,
            user_id=user_id,
            permission=permission,
        )
        self.authorizations.append(created)
        self.writes.append(("create", service_id, user_id, permission))
        return created

    def update_service_authorization(
        self, authorization_id: str, *, permission: str
    ) -> ServiceAuthorization:
        self._record("update_service_authorization", authorization_id, permission)
        for index, existing in enumerate(self.authorizations):
            if existing.id == authorization_id:
                updated = ServiceAuthorization(
                    id=existing.id,
                    service_id=existing.service_id,
                    user_id=existing.user_id,
                    permission=permission,
                )
                self.authorizations[index] = updated
                self.writes.append(("update", authorization_id, permission))
                return updated
        raise ProviderError("failed to update permission to user: HTTP 404", status_code=404)

    def permission_of(self, service_id: str, user_id: str) -> str | None:
        for authorization in self.authorizations:
            if authorization.service_id == service_id and authorization.user_id == user_id:
                return authorization.permission
        return None
