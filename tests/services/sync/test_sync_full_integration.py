"""
Integration tests against the real Open States API.

Run: pytest tests/services/sync/test_sync_full_integration.py --integration -v

Requires OPENSTATES_API_KEY. Nothing is written to the record store.
"""
import os

import pytest

from services.sync.src.openstates_client import OpenStatesClient
from services.sync.src.parser import extract_state_abbreviation, parse_bill_data


@pytest.fixture
def live_client(request) -> OpenStatesClient:
    if not request.config.getoption("--integration", default=False):
        pytest.skip("Integration tests require --integration flag")
    if not os.getenv("OPENSTATES_API_KEY"):
        pytest.skip("OPENSTATES_API_KEY environment variable must be set")
    try:
        return OpenStatesClient(api_key=os.getenv("OPENSTATES_API_KEY"))
    except Exception as e:
        pytest.skip(f"Could not initialize OpenStatesClient: {e}")


class TestOpenStatesLive:

    def test_jurisdiction(self, live_client):
        raw = live_client.get_jurisdiction("ca")
        assert extract_state_abbreviation(raw["id"]) == "CA"

    def test_bills_parse(self, live_client):
        bills = live_client.get_bills("ca", limit=3)
        assert 0 < len(bills) <= 3
        for raw in bills:
            bill = parse_bill_data(raw, "CA")
            assert bill.openstates_id.startswith("ocd-bill/")
            assert bill.state == "CA"
