"""Tests for database mappers."""

from datetime import datetime, date
from decimal import Decimal

from spendlens.database.models import (
    LedgerEntry as ORMLedgerEntry,
    Entitlement as ORMEntitlement,
)
from spendlens.database.mappers import (
    apply_entitlement,
    apply_recurring,
    entitlement_to_domain,
    ledger_entry_to_domain,
    recurring_to_domain,
)
from spendlens.domain.entities import (
    EntitlementRecord,
    Frequency,
    LedgerEntry,
    Plan,
    RecurringRule,
)


def _orm_entry(**kwargs):
    fields = dict(
        id=1,
        user_id="user-1",
        date=date(2026, 1, 15),
        description="Streaming",
        amount=Decimal("-15.99"),
        category="Subscriptions",
        confirmed=True,
        is_recurring=False,
        created_at=datetime(2026, 1, 1, 8, 0),
    )
    fields.update(kwargs)
    return ORMLedgerEntry(**fields)


class TestLedgerEntryMapper:
    """Tests for LedgerEntry mapper."""

    def test_one_off_entry(self):
        orm_entry = _orm_entry()

        entry = ledger_entry_to_domain(orm_entry)

        assert isinstance(entry, LedgerEntry)
        assert entry.id == 1
        assert entry.user_id == "user-1"
        assert entry.amount == Decimal("-15.99")
        assert entry.recurring is None
        assert entry.created_at == orm_entry.created_at

    def test_recurring_entry(self):
        orm_entry = _orm_entry(
            is_recurring=True,
            recurring_frequency="bi-weekly",
            recurring_anchor_day=4,
            recurring_end_date=date(2026, 6, 30),
        )

        entry = ledger_entry_to_domain(orm_entry)

        assert entry.recurring == RecurringRule(Frequency.BIWEEKLY, 4, date(2026, 6, 30))

    def test_unknown_frequency_is_one_off(self):
        orm_entry = _orm_entry(
            is_recurring=True, recurring_frequency="yearly", recurring_anchor_day=1
        )

        assert recurring_to_domain(orm_entry) is None

    def test_missing_anchor_is_one_off(self):
        orm_entry = _orm_entry(is_recurring=True, recurring_frequency="monthly")

        assert recurring_to_domain(orm_entry) is None

    def test_apply_recurring(self):
        orm_entry = _orm_entry()

        apply_recurring(orm_entry, RecurringRule(Frequency.WEEKLY, 2))

        assert orm_entry.is_recurring is True
        assert orm_entry.recurring_frequency == "weekly"
        assert orm_entry.recurring_anchor_day == 2
        assert orm_entry.recurring_end_date is None

    def test_apply_no_recurring_clears_columns(self):
        orm_entry = _orm_entry(
            is_recurring=True, recurring_frequency="monthly", recurring_anchor_day=15
        )

        apply_recurring(orm_entry, None)

        assert orm_entry.is_recurring is False
        assert orm_entry.recurring_frequency is None
        assert orm_entry.recurring_anchor_day is None


class TestEntitlementMapper:
    """Tests for Entitlement mapper."""

    def test_entitlement_to_domain(self):
        orm_record = ORMEntitlement(
            user_id="user-1",
            plan="basic",
            stripe_customer_id="cus_1",
            stripe_subscription_id="sub_1",
            period_start=datetime(2026, 2, 1),
            period_end=datetime(2026, 3, 1),
            usage_this_period=2,
            trial_used=True,
            updated_at=datetime(2026, 2, 2),
        )

        record = entitlement_to_domain(orm_record)

        assert record == EntitlementRecord(
            user_id="user-1",
            plan=Plan.BASIC,
            stripe_customer_id="cus_1",
            stripe_subscription_id="sub_1",
            period_start=datetime(2026, 2, 1),
            period_end=datetime(2026, 3, 1),
            usage_this_period=2,
            trial_used=True,
            updated_at=datetime(2026, 2, 2),
        )

    def test_unset_columns_default(self):
        """Column defaults are not applied before flush."""
        record = entitlement_to_domain(ORMEntitlement(user_id="user-1"))

        assert record.plan is None
        assert record.usage_this_period == 0
        assert record.trial_used is False

    def test_apply_entitlement(self):
        orm_record = ORMEntitlement(user_id="user-1", plan="pro", usage_this_period=5)

        apply_entitlement(orm_record, EntitlementRecord(user_id="user-1", trial_used=True))

        assert orm_record.plan is None
        assert orm_record.usage_this_period == 0
        assert orm_record.trial_used is True
