"""
Shared fixtures for the test suite.
"""

import pytest

from ergast_payloads import ERGAST_BASE, FakeErgast, build_2021_season
from f1history.core.cache import ResponseCache
from f1history.external.ergast_client import ErgastClient


@pytest.fixture
def fake_ergast() -> FakeErgast:
    """Fake Ergast API loaded with the 2021 season."""
    return build_2021_season(FakeErgast())


@pytest.fixture
def ergast_client(fake_ergast: FakeErgast) -> ErgastClient:
    """Ergast client with an empty cache talking to the fake API."""
    return ErgastClient(
        cache=ResponseCache(),
        base_url=ERGAST_BASE,
        transport=fake_ergast.transport(),
    )
