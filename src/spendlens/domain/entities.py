"""Domain model entities for spendlens.

These are pure data classes representing business concepts, independent of
database schema. Recurring metadata is modelled as an optional
``RecurringRule`` value rather than loose optional fields on the entry, so
every consumer either sees a complete rule or none at all.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class Frequency(str, Enum):
    """How often a recurring entry repeats."""

    MONTHLY = "monthly"
    BIWEEKLY = "bi-weekly"
    WEEKLY = "weekly"


class Plan(str, Enum):
    """Entitlement plans. ``TRIAL`` is never written by the services."""

    TRIAL = "trial"
    BASIC = "basic"
    PRO = "pro"


@dataclass(frozen=True)
class RecurringRule:
    """Recurrence metadata carried by every entry of a recurring series.

    ``anchor_day`` is day-of-month (1-31) for monthly series and day-of-week
    (0-6, Sunday=0) otherwise. It is kept for display only; the next
    occurrence is always derived from the previous occurrence's date.
    """

    frequency: Frequency
    anchor_day: int
    series_end_date: Optional[date] = None


@dataclass(frozen=True)
class LedgerEntry:
    """Ledger entry domain entity."""

    id: int
    user_id: str
    date: date
    description: str
    amount: Decimal
    category: str
    confirmed: bool
    recurring: Optional[RecurringRule]
    created_at: datetime

    @property
    def is_recurring(self) -> bool:
        return self.recurring is not None


@dataclass(frozen=True)
class NewEntry:
    """Entry data for bulk inserts, before the store assigns an id."""

    date: date
    description: str
    amount: Decimal
    category: str
    confirmed: bool = True
    recurring: Optional[RecurringRule] = None


@dataclass(frozen=True)
class EntitlementRecord:
    """Per-user plan, billing cycle and usage counters.

    Period boundaries are naive UTC datetimes. ``trial_used`` is only ever
    switched on.
    """

    user_id: str
    plan: Optional[Plan] = None
    stripe_customer_id: Optional[str] = None
    stripe_subscription_id: Optional[str] = None
    period_start: Optional[datetime] = None
    period_end: Optional[datetime] = None
    usage_this_period: int = 0
    trial_used: bool = False
    updated_at: Optional[datetime] = None

    @property
    def is_subscribed(self) -> bool:
        return self.plan in (Plan.BASIC, Plan.PRO)


@dataclass(frozen=True)
class EntitlementStatus:
    """Answer to "may this user import a statement right now?"."""

    can_import: bool
    remaining: int
    limit: int
    plan: Optional[Plan]
    usage_this_period: int = 0


@dataclass(frozen=True)
class ImportUsage:
    """Result of recording one import against a user's entitlement."""

    allowed: bool
    remaining: int


@dataclass(frozen=True)
class CategoryTotal:
    """Total confirmed spending for one category (positive amount)."""

    category: str
    total: Decimal
    count: int = field(default=0)
