"""Opaque page token codec.

A token is URL-safe base64 of a small JSON document holding one page
counter per resource type, plus the type the token was issued for::

    {"current": "service", "pages": {"service": 3}}

Keeping a counter per listing key lets a caller interleave listings
without one cursor advancing another. A token only resumes the listing it
was issued for: parsing it under a different key is an error. Pages are
1-indexed, matching the Fastly API.
"""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass, field

from fastly_access.exceptions import CursorError

FIRST_PAGE: int = 1

# Page size requested from paginated Fastly endpoints.
DEFAULT_PAGE_SIZE: int = 100

# Returned instead of a token once the last page has been served.
END_OF_PAGES: str = ""


@dataclass
class PageBag:
    """Decoded token state.

    Attributes:
        current: Resource type the bag is positioned on.
        pages: Next page number to fetch, per resource type.
    """

    current: str
    pages: dict[str, int] = field(default_factory=dict)

    @property
    def page(self) -> int:
        return self.pages.get(self.current, FIRST_PAGE)


def parse_page_token(token: str, resource_type: str) -> tuple[PageBag, int]:
    """Decode ``token`` and position it on ``resource_type``.

    An empty token starts at ``FIRST_PAGE``. A non-empty token must have
    been issued for ``resource_type``.

    Returns:
        The bag and the page number to fetch.

    Raises:
        CursorError: If the token is not one this module produced, or was
            issued for another listing.
    """
    if not token:
        bag = PageBag(current=resource_type, pages={resource_type: FIRST_PAGE})
        return bag, FIRST_PAGE

    current, pages = _decode(token)
    if current != resource_type:
        raise CursorError(
            f"page token was issued for {current!r}, not {resource_type!r}"
        )
    pages.setdefault(resource_type, FIRST_PAGE)
    bag = PageBag(current=resource_type, pages=pages)
    return bag, bag.page


def next_page_token(bag: PageBag, page: int) -> str:
    """Record ``page`` as the next page for the bag's resource type and encode.

    Raises:
        CursorError: If ``page`` is below ``FIRST_PAGE``.
    """
    if page < FIRST_PAGE:
        raise CursorError(f"page number must be >= {FIRST_PAGE}, got {page}")
    bag.pages[bag.current] = page
    payload = json.dumps(
        {"current": bag.current, "pages": bag.pages},
        sort_keys=True,
        separators=(",", ":"),
    )
    return base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii")


def is_last_page(count: int, page_size: int) -> bool:
    """A page shorter than the requested size is the last one."""
    return count < page_size


def _decode(token: str) -> tuple[str, dict[str, int]]:
    try:
        raw = base64.urlsafe_b64decode(token.encode("ascii"))
        data = json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeError, ValueError) as exc:
        raise CursorError(f"malformed page token: {exc}") from exc

    if not isinstance(data, dict):
        raise CursorError("malformed page token: not an object")
    current = data.get("current")
    if not isinstance(current, str) or not current:
        raise CursorError("malformed page token: missing current listing")
    pages = data.get("pages")
    if not isinstance(pages, dict):
        raise CursorError("malformed page token: missing page counters")

    out: dict[str, int] = {}
    for resource_type, page in pages.items():
        if not isinstance(page, int) or isinstance(page, bool) or page < FIRST_PAGE:
            raise CursorError(
                f"malformed page token: bad page {page!r} for {resource_type!r}"
            )
        out[str(resource_type)] = page
    return current, out
