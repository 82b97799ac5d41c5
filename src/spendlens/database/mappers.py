"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the column layout of recurring
metadata never leaks into the services.
"""

from typing import Optional

from spendlens.domain import entities as domain
from spendlens.database.models import (
    LedgerEntry as ORMLedgerEntry,
    Entitlement as ORMEntitlement,
)
from spendlens.logging_setup import get_logger

logger = get_logger(__name__)


def recurring_to_domain(orm_entry: ORMLedgerEntry) -> Optional[domain.RecurringRule]:
    """Build the recurring rule for an entry, or None for one-off entries.

    Entries flagged recurring whose frequency or anchor day is missing or
    unknown are treated as one-off so a single bad row cannot break
    projection for the whole ledger.
    """
    if not orm_entry.is_recurring:
        return None
    try:
        frequency = domain.Frequency(orm_entry.recurring_frequency)
    except ValueError:
        frequency = None
    if frequency is None or orm_entry.recurring_anchor_day is None:
        logger.warning(
            "Entry %s is flagged recurring but has malformed metadata "
            "(frequency=%r, anchor_day=%r); ignoring its recurrence",
            orm_entry.id,
            orm_entry.recurring_frequency,
            orm_entry.recurring_anchor_day,
        )
        return None
    return domain.RecurringRule(
        frequency=frequency,
        anchor_day=orm_entry.recurring_anchor_day,
        series_end_date=orm_entry.recurring_end_date,
    )


def apply_recurring(orm_entry: ORMLedgerEntry, rule: Optional[domain.RecurringRule]) -> None:
    """Write a recurring rule (or its absence) onto an ORM entry."""
    orm_entry.is_recurring = rule is not None
    orm_entry.recurring_frequency = rule.frequency.value if rule else None
    orm_entry.recurring_anchor_day = rule.anchor_day if rule else None
    orm_entry.recurring_end_date = rule.series_end_date if rule else None


def ledger_entry_to_domain(orm_entry: ORMLedgerEntry) -> domain.LedgerEntry:
    """Convert SQLAlchemy LedgerEntry model to domain LedgerEntry entity."""
    return domain.LedgerEntry(
        id=orm_entry.id,
        user_id=orm_entry.user_id,
        date=orm_entry.date,
        description=orm_entry.description,
        amount=orm_entry.amount,
        category=orm_entry.category,
        confirmed=orm_entry.confirmed,
        recurring=recurring_to_domain(orm_entry),
        created_at=orm_entry.created_at,
    )


def entitlement_to_domain(orm_record: ORMEntitlement) -> domain.EntitlementRecord:
    """Convert SQLAlchemy Entitlement model to domain EntitlementRecord."""
    return domain.EntitlementRecord(
        user_id=orm_record.user_id,
        plan=domain.Plan(orm_record.plan) if orm_record.plan else None,
        stripe_customer_id=orm_record.stripe_customer_id,
        stripe_subscription_id=orm_record.stripe_subscription_id,
        period_start=orm_record.period_start,
        period_end=orm_record.period_end,
        usage_this_period=orm_record.usage_this_period or 0,
        trial_used=bool(orm_record.trial_used),
        updated_at=orm_record.updated_at,
    )


def apply_entitlement(orm_record: ORMEntitlement, record: domain.EntitlementRecord) -> None:
    """Copy every field of a domain record onto an ORM row."""
    orm_record.plan = record.plan.value if record.plan else None
    orm_record.stripe_customer_id = record.stripe_customer_id
    orm_record.stripe_subscription_id = record.stripe_subscription_id
    orm_record.period_start = record.period_start
    orm_record.period_end = record.period_end
    orm_record.usage_this_period = record.usage_this_period
    orm_record.trial_used = record.trial_used
