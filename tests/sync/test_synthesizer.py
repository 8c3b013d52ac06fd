"""Tests for GrantSynthesizer.

Covers the three grant sources (blanket role access, role membership,
service authorizations) and how they are split across pages.
"""

from __future__ import annotations

import pytest

from fastly_access.core.models import Entitlement, Grant, ResourceId
from fastly_access.core.pagination import END_OF_PAGES
from fastly_access.exceptions import CursorError, UnknownPermissionError, UnknownRoleError
from fastly_access.provider.base import ServiceAuthorization
from fastly_access.sync.catalog import ResourceCatalog
from fastly_access.sync.directory import PrincipalDirectory
from fastly_access.sync.synthesizer import GrantSynthesizer
from tests.helpers import FakeProvider, make_user

SVC_1 = ResourceId("service", "svc-1")


def _held(grants: list[Grant], principal_id: str) -> set[Entitlement]:
    return {g.entitlement for g in grants if g.principal.resource == principal_id}


@pytest.fixture
def synthesizer(provider: FakeProvider, directory: PrincipalDirectory) -> GrantSynthesizer:
    return GrantSynthesizer(provider, directory, page_size=10)


class TestFirstPage:
    """The first page carries role, membership and authorization grants."""

    def test_blanket_role_access(self, synthesizer: GrantSynthesizer) -> None:
        """Superuser, User and Billing roles get access to every service."""
        grants, _ = synthesizer.grants(SVC_1, "")
        roles = {
            g.principal.resource for g in grants
            if g.entitlement is Entitlement.ACCESS and g.principal.resource_type == "role"
        }
        assert roles == {"Superuser", "User", "Billing"}

    def test_superuser_without_authorization(self, synthesizer: GrantSynthesizer) -> None:
        """Superusers hold their implicit entitlements with no authorization."""
        grants, _ = synthesizer.grants(SVC_1, "")
        assert _held(grants, "alice") == {
            Entitlement.READ_STATS_AND_ANALYTICS,
            Entitlement.ACCESS_BILLING,
            Entitlement.MANAGE_USERS_AND_ACCOUNTS,
        }

    def test_standard_user(self, synthesizer: GrantSynthesizer) -> None:
        """Standard users only read stats and analytics."""
        grants, _ = synthesizer.grants(SVC_1, "")
        assert _held(grants, "bob") == {Entitlement.READ_STATS_AND_ANALYTICS}

    def test_billing_user(self, synthesizer: GrantSynthesizer) -> None:
        """Billing users read stats and access billing."""
        grants, _ = synthesizer.grants(SVC_1, "")
        assert _held(grants, "dana") == {
            Entitlement.READ_STATS_AND_ANALYTICS,
            Entitlement.ACCESS_BILLING,
        }

    def test_engineer_from_authorization_only(self, synthesizer: GrantSynthesizer) -> None:
        """A purge_select authorization expands to its two tier entitlements."""
        grants, _ = synthesizer.grants(SVC_1, "")
        assert _held(grants, "carol") == {
            Entitlement.READ_STATS_AND_CONFIGURATION,
            Entitlement.PURGE_SELECTED_CONTENT,
        }

    def test_engineer_without_authorization_has_nothing(
        self, synthesizer: GrantSynthesizer
    ) -> None:
        """Engineers hold nothing on a service they are not authorized for."""
        grants, _ = synthesizer.grants(SVC_1, "")
        assert _held(grants, "erin") == set()

    def test_authorizations_for_other_services_ignored(
        self, synthesizer: GrantSynthesizer
    ) -> None:
        """The account-wide feed is filtered to the requested service."""
        grants, token = synthesizer.grants(ResourceId("service", "svc-2"), "")
        assert _held(grants, "carol") == set()
        assert token == END_OF_PAGES

    def test_grants_are_scoped_to_the_service(self, synthesizer: GrantSynthesizer) -> None:
        """Every grant names the requested service as its resource."""
        grants, _ = synthesizer.grants(SVC_1, "")
        assert {g.resource for g in grants} == {SVC_1}


class TestPaging:
    """Grants split across authorization pages."""

    def _provider(self) -> FakeProvider:
        return FakeProvider(
            users=[
                make_user("alice", "Alice", "superuser"),
                make_user("carol", "Carol", "engineer"),
                make_user("erin", "Erin", "engineer"),
            ],
            authorizations=[
                ServiceAuthorization("sa-1", "svc-2", "erin", "full"),
                ServiceAuthorization("sa-2", "svc-1", "erin", "read_only"),
                ServiceAuthorization("sa-3", "svc-1", "carol", "full"),
            ],
        )

    def test_role_grants_only_on_first_page(self) -> None:
        """Role-derived grants are reported once, with page one."""
        provider = self._provider()
        synthesizer = GrantSynthesizer(
            provider, PrincipalDirectory(provider, "cust-1"), page_size=2
        )

        first, token = synthesizer.grants(SVC_1, "")
        assert token != END_OF_PAGES
        second, token = synthesizer.grants(SVC_1, token)
        assert token == END_OF_PAGES

        assert any(g.entitlement is Entitlement.ACCESS for g in first)
        assert not any(g.entitlement is Entitlement.ACCESS for g in second)
        assert _held(second, "alice") == set()
        assert _held(first, "erin") == {Entitlement.READ_STATS_AND_CONFIGURATION}
        assert len(_held(second, "carol")) == 4

    def test_directory_listed_once_per_scan(self) -> None:
        """Users are listed once; authorization pages are walked in order."""
        provider = self._provider()
        synthesizer = GrantSynthesizer(
            provider, PrincipalDirectory(provider, "cust-1"), page_size=1
        )
        token = ""
        while True:
            _, token = synthesizer.grants(SVC_1, token)
            if token == END_OF_PAGES:
                break

        listings = [c for c in provider.calls if c[0] == "list_customer_users"]
        pages = [c[1] for c in provider.calls if c[0] == "list_service_authorizations"]
        assert len(listings) == 1
        assert pages == [1, 2, 3, 4]


class TestFailures:
    """Unrecognized values abort the page."""

    def test_unknown_permission(self, provider: FakeProvider, synthesizer: GrantSynthesizer) -> None:
        """An unknown permission string is a hard failure."""
        provider.authorizations.append(ServiceAuthorization("sa-x", "svc-1", "erin", "owner"))
        with pytest.raises(UnknownPermissionError):
            synthesizer.grants(SVC_1, "")

    def test_unknown_role(self, provider: FakeProvider, synthesizer: GrantSynthesizer) -> None:
        """An unknown user role is a hard failure."""
        provider.users["zed"] = make_user("zed", "Zed", "intern")
        with pytest.raises(UnknownRoleError):
            synthesizer.grants(SVC_1, "")


class TestCursorIsolation:
    """Service listing and authorization tokens are not interchangeable."""

    def test_service_listing_token_rejected(
        self, provider: FakeProvider, synthesizer: GrantSynthesizer
    ) -> None:
        """A catalog token must not be read as an authorization page number."""
        _, token = ResourceCatalog(provider, page_size=1).list("")
        assert token != END_OF_PAGES
        provider.calls.clear()

        with pytest.raises(CursorError):
            synthesizer.grants(SVC_1, token)
        assert provider.calls == []

    def test_authorization_token_rejected_by_catalog(self, provider: FakeProvider) -> None:
        """The reverse direction is rejected as well."""
        provider.authorizations.append(ServiceAuthorization("sa-2", "svc-2", "erin", "full"))
        synthesizer = GrantSynthesizer(
            provider, PrincipalDirectory(provider, "cust-1"), page_size=1
        )
        _, token = synthesizer.grants(SVC_1, "")
        assert token != END_OF_PAGES

        with pytest.raises(CursorError):
            ResourceCatalog(provider, page_size=1).list(token)

    def test_interleaved_listings_keep_their_own_position(
        self, provider: FakeProvider
    ) -> None:
        """Walking services and grants side by side reports role grants once."""
        provider.authorizations.append(ServiceAuthorization("sa-2", "svc-2", "erin", "full"))
        catalog = ResourceCatalog(provider, page_size=1)
        synthesizer = GrantSynthesizer(
            provider, PrincipalDirectory(provider, "cust-1"), page_size=1
        )

        services, service_token = catalog.list("")
        grants, grant_token = synthesizer.grants(SVC_1, "")
        more_services, service_token = catalog.list(service_token)
        more_grants, grant_token = synthesizer.grants(SVC_1, grant_token)

        assert [r.id.resource for r in services + more_services] == ["svc-1", "svc-2"]
        access = [g for g in grants + more_grants if g.entitlement is Entitlement.ACCESS]
        assert len(access) == 3
