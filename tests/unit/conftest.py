"""
Unit test fixtures.

All unit tests should be:
- Fast (< 100ms, a few timeout tests excepted)
- Isolated (fake provider clients, no network)
- Deterministic (same result every time)
"""

import pytest

from models import ProviderId
from weitblick.fanout import FanOut
from fakes import FakeClient, persona_echo


@pytest.fixture
def fake_clients():
    """One answering fake per provider."""
    return {p: FakeClient(p, response=persona_echo) for p in ProviderId}


@pytest.fixture
def fake_fanout(fake_clients):
    return FanOut(clients=fake_clients, timeout=1, poll_interval=0.01)
