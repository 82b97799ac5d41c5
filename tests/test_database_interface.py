"""Tests for Database interface returning domain models."""

import pytest
from datetime import date, datetime
from decimal import Decimal
from sqlalchemy import text

from spendlens.database.factories import create_sqlite_database
from spendlens.domain import entities
from spendlens.domain.errors import NotFoundError, StorageUnavailableError

from conftest import OTHER_USER, USER


class TestLedgerStorage:
    """Tests for ledger entry storage."""

    def test_get_entry_returns_domain_model(self, temp_db):
        """Test that get_entry returns a domain LedgerEntry entity."""
        entry_id = temp_db.create_entry(
            user_id=USER,
            date=date(2026, 1, 15),
            description="Rent",
            amount=Decimal("-1800.00"),
            category="Housing",
            recurring=entities.RecurringRule(entities.Frequency.MONTHLY, 15, date(2026, 12, 31)),
        )

        entry = temp_db.get_entry(entry_id)

        assert isinstance(entry, entities.LedgerEntry)
        assert entry.id == entry_id
        assert entry.date == date(2026, 1, 15)
        assert entry.amount == Decimal("-1800.00")
        assert isinstance(entry.created_at, datetime)
        assert entry.recurring == entities.RecurringRule(
            frequency=entities.Frequency.MONTHLY,
            anchor_day=15,
            series_end_date=date(2026, 12, 31),
        )

    def test_get_missing_entry(self, temp_db):
        assert temp_db.get_entry(12345) is None

    def test_create_entries_in_one_batch(self, temp_db):
        entries = [
            entities.NewEntry(date(2026, 1, d), f"Item {d}", Decimal("-1.00"), "Misc")
            for d in (3, 1, 2)
        ]

        ids = temp_db.create_entries(USER, entries)

        assert len(ids) == 3
        assert [temp_db.get_entry(i).date.day for i in ids] == [3, 1, 2]

    def test_list_entries_filters_by_user(self, temp_db):
        temp_db.create_entry(USER, date(2026, 1, 1), "A", Decimal("-1"), "Misc")
        temp_db.create_entry(OTHER_USER, date(2026, 1, 1), "B", Decimal("-1"), "Misc")

        entries = temp_db.list_entries(USER)

        assert [e.description for e in entries] == ["A"]
        assert all(isinstance(e, entities.LedgerEntry) for e in entries)

    def test_update_missing_entry(self, temp_db):
        with pytest.raises(NotFoundError):
            temp_db.update_entry(999, description="X")

    def test_delete_missing_entry(self, temp_db):
        with pytest.raises(NotFoundError):
            temp_db.delete_entry(999)

    def test_delete_entries_counts_only_existing(self, temp_db):
        entry_id = temp_db.create_entry(USER, date(2026, 1, 1), "A", Decimal("-1"), "Misc")

        assert temp_db.delete_entries([entry_id, 999]) == 1
        assert temp_db.delete_entries([]) == 0


class TestDeletedDates:
    """Tests for recurring deletion tombstones."""

    def test_add_and_get(self, temp_db):
        temp_db.add_deleted_date(USER, "Rent|-1800.00|Housing", date(2026, 2, 1))
        temp_db.add_deleted_date(USER, "Rent|-1800.00|Housing", date(2026, 3, 1))
        temp_db.add_deleted_date(USER, "Gym|-40.00|Health", date(2026, 2, 5))
        temp_db.add_deleted_date(OTHER_USER, "Rent|-1800.00|Housing", date(2026, 4, 1))

        assert temp_db.get_deleted_dates(USER) == {
            "Rent|-1800.00|Housing": {date(2026, 2, 1), date(2026, 3, 1)},
            "Gym|-40.00|Health": {date(2026, 2, 5)},
        }

    def test_add_is_idempotent(self, temp_db):
        temp_db.add_deleted_date(USER, "k", date(2026, 2, 1))
        temp_db.add_deleted_date(USER, "k", date(2026, 2, 1))

        assert temp_db.get_deleted_dates(USER) == {"k": {date(2026, 2, 1)}}

    def test_empty(self, temp_db):
        assert temp_db.get_deleted_dates(USER) == {}


class TestEntitlementStorage:
    """Tests for entitlement record storage."""

    def test_missing_record(self, temp_db):
        assert temp_db.get_entitlement(USER) is None

    def test_put_then_get(self, temp_db):
        record = entities.EntitlementRecord(
            user_id=USER,
            plan=entities.Plan.PRO,
            stripe_customer_id="cus_1",
            period_start=datetime(2026, 2, 1, 9, 30),
            period_end=datetime(2026, 3, 1, 9, 30),
            usage_this_period=2,
            trial_used=True,
        )

        temp_db.put_entitlement(record)
        stored = temp_db.get_entitlement(USER)

        assert isinstance(stored, entities.EntitlementRecord)
        assert stored.plan is entities.Plan.PRO
        assert stored.period_end == datetime(2026, 3, 1, 9, 30)
        assert stored.usage_this_period == 2
        assert stored.trial_used is True
        assert stored.updated_at is not None

    def test_put_replaces_every_field(self, temp_db):
        temp_db.put_entitlement(
            entities.EntitlementRecord(user_id=USER, plan=entities.Plan.BASIC, stripe_customer_id="cus_1")
        )
        temp_db.put_entitlement(entities.EntitlementRecord(user_id=USER, trial_used=True))

        stored = temp_db.get_entitlement(USER)
        assert stored.plan is None
        assert stored.stripe_customer_id is None
        assert stored.trial_used is True


class TestStorageFailures:
    """Tests for storage failures surfacing as StorageUnavailableError."""

    def test_missing_table_raises_storage_unavailable(self, temp_db):
        session = temp_db._get_session()
        session.execute(text("DROP TABLE entitlements"))
        session.commit()

        with pytest.raises(StorageUnavailableError):
            temp_db.get_entitlement(USER)

    def test_session_usable_after_failure(self, temp_db):
        session = temp_db._get_session()
        session.execute(text("DROP TABLE recurring_deletions"))
        session.commit()

        with pytest.raises(StorageUnavailableError):
            temp_db.add_deleted_date(USER, "k", date(2026, 1, 1))

        entry_id = temp_db.create_entry(USER, date(2026, 1, 1), "A", Decimal("-1"), "Misc")
        assert temp_db.get_entry(entry_id) is not None

    def test_storage_error_is_not_a_domain_error(self):
        assert not issubclass(StorageUnavailableError, ValueError)


def test_factory_reads_path_from_environment(tmp_path, monkeypatch):
    db_path = tmp_path / "env.db"
    monkeypatch.setenv("SPENDLENS_DB_PATH", str(db_path))

    db = create_sqlite_database()

    assert db.database_url == f"sqlite:///{db_path}"
    db.disconnect()
