"""Unit tests for shared settings and models."""
import pytest
from pydantic import ValidationError

from shared.models.bill import Bill, BillStatus, MAX_LINKED_RECORDS
from shared.models.jurisdiction import Jurisdiction
from shared.models.subject import Subject, SubjectCategory
from shared.models.sync_result import SyncSummary
from shared.utils.config import Settings


def test_settings_defaults(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co")
    monkeypatch.setenv("SUPABASE_KEY", "key")
    monkeypatch.setenv("OPENSTATES_API_KEY", "os-key")
    monkeypatch.delenv("WEBHOOK_SECRET", raising=False)
    monkeypatch.delenv("CRON_SECRET", raising=False)

    settings = Settings(_env_file=None)

    assert settings.openstates_base_url == "https://v3.openstates.org"
    assert settings.default_bill_limit == 50
    assert settings.scheduled_bill_limit == 100
    assert settings.store_min_request_interval == 0.2
    assert settings.webhook_secret is None
    assert settings.cron_secret is None


def test_settings_require_credentials(monkeypatch):
    for name in ("SUPABASE_URL", "SUPABASE_KEY", "OPENSTATES_API_KEY"):
        monkeypatch.delenv(name, raising=False)
    with pytest.raises(ValidationError):
        Settings(_env_file=None)


def test_bill_defaults_and_enum_values():
    bill = Bill(openstates_id="ocd-bill/1", state="CA")
    assert bill.status == BillStatus.INTRODUCED.value
    assert bill.sponsor_ids == []


def test_bill_rejects_too_many_links():
    with pytest.raises(ValidationError):
        Bill(openstates_id="b", state="CA", sponsor_ids=[str(i) for i in range(MAX_LINKED_RECORDS + 1)])


def test_subject_category_default():
    assert Subject(name="Taxation").category == SubjectCategory.OTHER.value


def test_jurisdiction_reconciliation_key():
    assert Jurisdiction(name="Ohio", abbreviation="OH").reconciliation_key == "OH"
    assert Jurisdiction(name="Puerto Rico").reconciliation_key == "Puerto Rico"


def test_sync_summary_accepts_both_names():
    by_alias = SyncSummary(message="m", totalStates=2)
    by_name = SyncSummary(message="m", total_states=2)
    assert by_alias.total_states == by_name.total_states == 2
    assert set(by_name.model_dump(by_alias=True)) == {
        "success", "message", "totalStates", "totalSynced", "totalBills", "results"
    }
