"""Shared fixtures for CLI tests.

The CLI builds its connector through ``FastlyConnector.from_token``; these
fixtures patch that to return a connector over the in-memory provider.
"""

from __future__ import annotations

from collections.abc import Iterator
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from fastly_access.connector import FastlyConnector
from tests.helpers import CUSTOMER_ID, FakeProvider


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def fake_connector(provider: FakeProvider) -> Iterator[FastlyConnector]:
    connector = FastlyConnector(provider, CUSTOMER_ID, page_size=10)
    with patch.object(FastlyConnector, "from_token", return_value=connector):
        yield connector
