"""
Pytest configuration and shared fixtures for sync service tests
"""
from itertools import count
from types import SimpleNamespace

import pytest
from unittest.mock import Mock

from shared.utils.config import Settings


@pytest.fixture(autouse=True)
def setup_logging():
    """Disable logging during tests unless explicitly needed"""
    import logging
    logging.disable(logging.CRITICAL)
    yield
    logging.disable(logging.NOTSET)


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        supabase_url="https://example.supabase.co",
        supabase_key="test_supabase_key",
        openstates_api_key="test_api_key_12345",
        webhook_secret="webhook-secret",
        cron_secret="cron-secret",
        store_min_request_interval=0,
        source_min_request_interval=0,
    )


@pytest.fixture
def mock_supabase():
    """Chainable mock Supabase client."""
    m = Mock()
    m.table.return_value = m
    m.select.return_value = m
    m.insert.return_value = m
    m.update.return_value = m
    m.eq.return_value = m
    m.limit.return_value = m
    return m


class FakeQuery:
    """Minimal in-memory stand-in for a supabase-py query builder."""

    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.op = "select"
        self.payload = None
        self.filters = []
        self.max_rows = None

    def select(self, columns="*"):
        self.op = "select"
        return self

    def insert(self, row):
        self.op = "insert"
        self.payload = row
        return self

    def update(self, row):
        self.op = "update"
        self.payload = row
        return self

    def eq(self, column, value):
        self.filters.append((column, value))
        return self

    def limit(self, n):
        self.max_rows = n
        return self

    def execute(self):
        rows = self.db.tables.setdefault(self.table, [])
        self.db.calls.append((self.table, self.op))
        if self.op == "insert":
            row = {**self.payload, "id": f"rec{next(self.db.ids)}"}
            rows.append(row)
            return SimpleNamespace(data=[dict(row)])

        matched = [r for r in rows if all(r.get(c) == v for c, v in self.filters)]
        if self.op == "update":
            for r in matched:
                r.update(self.payload)
        if self.max_rows is not None:
            matched = matched[: self.max_rows]
        return SimpleNamespace(data=[dict(r) for r in matched])


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.calls = []
        self.ids = count(1)

    def table(self, name):
        return FakeQuery(self, name)

    def rows(self, name):
        return self.tables.get(name, [])


@pytest.fixture
def fake_supabase():
    return FakeSupabase()


def make_bill(n, state="ca", sponsors=1, subjects=("PUBLIC_SAFETY", "Education"), **overrides):
    """Raw Open States bill with ``sponsors`` person sponsorships."""
    bill = {
        "id": f"ocd-bill/{state}-{n}",
        "identifier": f"AB {n}",
        "title": f"Test Bill {n}",
        "classification": ["bill"],
        "subject": list(subjects),
        "first_action_date": "2025-01-10",
        "latest_action_date": "2025-02-19T05:00:00+00:00",
        "latest_action_description": "Referred to Committee on Health",
        "from_organization": {"classification": "lower"},
        "openstates_url": f"https://openstates.org/{state}/bills/AB{n}",
        "updated_at": f"2025-02-{n % 28 + 1:02d}T00:00:00+00:00",
        "abstracts": [{"abstract": f"Summary of bill {n}"}],
        "sponsorships": [
            {"name": f"Member {n}-{i}", "person": {"id": f"ocd-person/{n}-{i}", "name": f"Member {n}-{i}"}}
            for i in range(sponsors)
        ],
    }
    bill.update(overrides)
    return bill


@pytest.fixture
def bill_factory():
    return make_bill
