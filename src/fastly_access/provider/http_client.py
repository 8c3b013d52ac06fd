"""Fastly API client over ``httpx``.

Provides ``FastlyClient``, a thin synchronous wrapper around
``httpx.Client`` with the ``Fastly-Key`` header, standardised timeouts and
error wrapping. Every failure surfaces as ``ProviderError`` naming the
operation; nothing is retried here.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from fastly_access import __version__
from fastly_access.exceptions import ProviderError
from fastly_access.provider.base import (
    ProviderClient,
    Service,
    ServiceAuthorization,
    User,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL: str = "https://api.fastly.com"

# Timeout for all API requests (seconds).
DEFAULT_TIMEOUT: float = 30.0

USER_AGENT: str = f"fastly-access/{__version__}"

_JSONAPI: str = "application/vnd.api+json"


class FastlyClient(ProviderClient):
    """Client bound to one API token.

    Args:
        token: Fastly API token.
        base_url: API root, overridable for tests and proxies.
        timeout: Request timeout in seconds.
        transport: Optional ``httpx`` transport (tests pass a
            ``httpx.MockTransport``).
    """

    def __init__(
        self,
        token: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
            headers={
                "Fastly-Key": token,
                "Accept": "application/json",
                "User-Agent": USER_AGENT,
            },
        )

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> FastlyClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # -- Users --------------------------------------------------------------

    def get_current_user(self) -> User:
        data = self._request("GET", "/current_user", operation="error getting current user")
        return _to_user(data)

    def list_customer_users(self, customer_id: str) -> list[User]:
        operation = "error listing users"
        data = self._request("GET", f"/customer/{customer_id}/users", operation=operation)
        return [_to_user(item) for item in _as_list(data, operation)]

    def get_user(self, user_id: str) -> User:
        data = self._request("GET", f"/user/{user_id}", operation="failed to get user")
        return _to_user(data)

    def update_user_role(self, user_id: str, role: str) -> User:
        data = self._request(
            "PUT",
            f"/user/{user_id}",
            operation="failed to update user role",
            data={"role": role},
        )
        return _to_user(data)

    # -- Services -----------------------------------------------------------

    def list_services(self, *, page: int, per_page: int) -> list[Service]:
        operation = "failed to list services"
        data = self._request(
            "GET",
            "/service",
            operation=operation,
            params={"page": str(page), "per_page": str(per_page)},
        )
        return [_to_service(item) for item in _as_list(data, operation)]

    # -- Service authorizations ---------------------------------------------

    def list_service_authorizations(
        self, *, page_number: int, page_size: int
    ) -> list[ServiceAuthorization]:
        operation = "failed to list service authorizations"
        data = self._request(
            "GET",
            "/service-authorizations",
            operation=operation,
            params={"page[number]": str(page_number), "page[size]": str(page_size)},
        )
        if not isinstance(data, dict):
            raise ProviderError(f"{operation}: unexpected payload")
        return [_to_authorization(item) for item in _as_list(data.get("data"), operation)]

    def create_service_authorization(
        self, *, service_id: str, user_id: str, permission: str
    ) -> ServiceAuthorization:
        body = {
            "data": {
                "type": "service_authorization",
                "attributes": {"permission": permission},
                "relationships": {
                    "service": {"data": {"type": "service", "id": service_id}},
                    "user": {"data": {"type": "user", "id": user_id}},
                },
            }
        }
        data = self._request(
            "POST",
            "/service-authorizations",
            operation="failed to grant permission to user",
            json=body,
            content_type=_JSONAPI,
        )
        return _to_authorization(_unwrap(data))

    def update_service_authorization(
        self, authorization_id: str, *, permission: str
    ) -> ServiceAuthorization:
        body = {
            "data": {
                "type": "service_authorization",
                "id": authorization_id,
                "attributes": {"permission": permission},
            }
        }
        data = self._request(
            "PATCH",
            f"/service-authorizations/{authorization_id}",
            operation="failed to update permission to user",
            json=body,
            content_type=_JSONAPI,
        )
        return _to_authorization(_unwrap(data))

    # -- Transport ----------------------------------------------------------

    def _request(
        self,
        method: str,
        path: str,
        *,
        operation: str,
        params: dict[str, str] | None = None,
        json: Any = None,
        data: dict[str, str] | None = None,
        content_type: str | None = None,
    ) -> Any:
        headers = {"Content-Type": content_type} if content_type else None
        logger.debug("%s %s", method, path)
        try:
            resp = self._client.request(
                method, path, params=params, json=json, data=data, headers=headers
            )
            resp.raise_for_status()
            return resp.json()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise ProviderError(f"{operation}: HTTP {status}", status_code=status) from exc
        except httpx.RequestError as exc:
            raise ProviderError(f"{operation}: {exc}") from exc
        except ValueError as exc:
            raise ProviderError(f"{operation}: invalid JSON response") from exc


# ---------------------------------------------------------------------------
# Payload mapping
# ---------------------------------------------------------------------------


def _as_list(value: Any, operation: str) -> list[dict[str, Any]]:
    if not isinstance(value, list) or not all(isinstance(item, dict) for item in value):
        raise ProviderError(f"{operation}: unexpected payload")
    return value


def _unwrap(data: Any) -> dict[str, Any]:
    if isinstance(data, dict) and isinstance(data.get("data"), dict):
        return data["data"]
    raise ProviderError("unexpected service authorization payload")


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _to_user(item: Any) -> User:
    if not isinstance(item, dict):
        raise ProviderError("unexpected user payload")
    return User(
        id=_text(item.get("id")),
        name=_text(item.get("name")),
        login=_text(item.get("login")),
        role=_text(item.get("role")),
        customer_id=_text(item.get("customer_id")),
        locked=bool(item.get("locked", False)),
    )


def _to_service(item: dict[str, Any]) -> Service:
    return Service(
        id=_text(item.get("id")),
        name=_text(item.get("name")),
        comment=_text(item.get("comment")),
        type=_text(item.get("type")),
    )


def _to_authorization(item: dict[str, Any]) -> ServiceAuthorization:
    """Map a JSON:API service_authorization resource."""
    attributes = item.get("attributes") or {}
    relationships = item.get("relationships") or {}

    def related_id(name: str) -> str:
        rel = relationships.get(name) or {}
        return _text((rel.get("data") or {}).get("id"))

    return ServiceAuthorization(
        id=_text(item.get("id")),
        service_id=related_id("service"),
        user_id=related_id("user"),
        permission=_text(attributes.get("permission")),
    )
