"""Shared fixtures for fastly-access tests."""

from __future__ import annotations

import pytest

from fastly_access.provider.base import Service, ServiceAuthorization
from fastly_access.sync.directory import PrincipalDirectory
from tests.helpers import CUSTOMER_ID, FakeProvider, make_user


@pytest.fixture
def provider() -> FakeProvider:
    """An account with one user per role, two services and one authorization.

    - alice: superuser
    - bob: user
    - dana: billing
    - carol: engineer with purge_select on svc-1
    - erin: engineer with no authorizations
    """
    return FakeProvider(
        users=[
            make_user("alice", "Alice Admin", "superuser"),
            make_user("bob", "Bob", "user"),
            make_user("dana", "Dana Billing", "billing"),
            make_user("carol", "Carol Engineer", "engineer"),
            make_user("erin", "Erin Engineer", "engineer", locked=True),
        ],
        services=[
            Service(id="svc-1", name="Website", comment="main site", type="vcl"),
            Service(id="svc-2", name="API", comment="", type="wasm"),
        ],
        authorizations=[
            ServiceAuthorization(
                id="sa-1", service_id="svc-1", user_id="carol", permission="purge_select"
            ),
        ],
        current_user=make_user("alice", "Alice Admin", "superuser"),
    )


@pytest.fixture
def directory(provider: FakeProvider) -> PrincipalDirectory:
    return PrincipalDirectory(provider, CUSTOMER_ID)
