"""Tests for the page token codec."""

from __future__ import annotations

import base64

import pytest

from fastly_access.core.pagination import (
    END_OF_PAGES,
    FIRST_PAGE,
    is_last_page,
    next_page_token,
    parse_page_token,
)
from fastly_access.exceptions import CursorError


def _raw(payload: str) -> str:
    return base64.urlsafe_b64encode(payload.encode()).decode()


class TestParse:
    """Decoding tokens and positioning them on a listing."""

    def test_empty_token_starts_at_first_page(self) -> None:
        """An empty token means the listing has not started: page 1."""
        bag, page = parse_page_token("", "service")
        assert page == FIRST_PAGE == 1
        assert bag.current == "service"

    def test_round_trip(self) -> None:
        """A token encodes the next page for the listing that issued it."""
        bag, _ = parse_page_token("", "service")
        token = next_page_token(bag, 4)
        assert token != END_OF_PAGES
        _, page = parse_page_token(token, "service")
        assert page == 4

    def test_other_counters_survive_a_round_trip(self) -> None:
        """Counters for other listings ride along untouched."""
        token = _raw('{"current": "role", "pages": {"role": 2, "service": 3}}')

        bag, page = parse_page_token(token, "role")
        assert page == 2
        assert bag.pages["service"] == 3

        _, page = parse_page_token(next_page_token(bag, 5), "role")
        assert page == 5


class TestCrossListingTokens:
    """A token only resumes the listing it was issued for."""

    def test_token_from_another_listing_rejected(self) -> None:
        """Parsing a service token as a role token is an error, not page N."""
        bag, _ = parse_page_token("", "service")
        token = next_page_token(bag, 3)

        with pytest.raises(CursorError, match="issued for 'service'"):
            parse_page_token(token, "role")

    def test_missing_current_rejected(self) -> None:
        """A token that does not name its listing cannot be trusted."""
        with pytest.raises(CursorError):
            parse_page_token(_raw('{"pages": {"service": 2}}'), "service")


class TestMalformedTokens:
    """Malformed tokens are surfaced, never reset to the first page."""

    @pytest.mark.parametrize(
        "token",
        [
            "not base64 !!",
            _raw("not json"),
            _raw("[1, 2]"),
            _raw('{"current": 7, "pages": {"service": 2}}'),
            _raw('{"current": "service", "pages": "x"}'),
            _raw('{"current": "service", "pages": {"service": 0}}'),
            _raw('{"current": "service", "pages": {"service": "2"}}'),
            _raw('{"current": "service", "pages": {"service": true}}'),
            "é",
        ],
    )
    def test_rejected(self, token: str) -> None:
        """Undecodable or ill-typed tokens raise CursorError."""
        with pytest.raises(CursorError):
            parse_page_token(token, "service")

    def test_next_page_must_be_positive(self) -> None:
        """Pages are 1-indexed; page 0 cannot be encoded."""
        bag, _ = parse_page_token("", "service")
        with pytest.raises(CursorError):
            next_page_token(bag, 0)


class TestIsLastPage:
    """A listing ends on a page shorter than the page size."""

    def test_short_page_is_last(self) -> None:
        """Partial and empty pages end the listing."""
        assert is_last_page(3, 10)
        assert is_last_page(0, 10)

    def test_full_page_is_not_last(self) -> None:
        """A full page means another page must be fetched."""
        assert not is_last_page(10, 10)
