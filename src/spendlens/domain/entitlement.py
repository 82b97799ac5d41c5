"""Entitlement domain service.

Decides whether a user may import another statement and keeps the usage
counters. Every user gets one lifetime free import (the trial) on top of
whatever their paid plan allows per billing cycle. Billing cycles roll over
lazily: the first read after a cycle ends resets the counter and persists
the new cycle, so no scheduled job is needed.
"""

from dataclasses import replace
from datetime import datetime, UTC
from typing import Optional, Union

from dateutil.relativedelta import relativedelta

from spendlens.database.base import Database
from spendlens.domain.entities import (
    EntitlementRecord,
    EntitlementStatus,
    ImportUsage,
    Plan,
)
from spendlens.domain.errors import ValidationError, not_a_paid_plan
from spendlens.logging_setup import get_logger

logger = get_logger(__name__)

PLAN_LIMITS: dict[Plan, int] = {
    Plan.TRIAL: 1,
    Plan.BASIC: 3,
    Plan.PRO: 10,
}

TRIAL_IMPORTS = 1


def to_utc_naive(moment: datetime) -> datetime:
    """Normalize a datetime to naive UTC, the form stored for period boundaries."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone(UTC).replace(tzinfo=None)


def _resolve_now(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(UTC).replace(tzinfo=None)
    return to_utc_naive(now)


def next_period_end(start: datetime) -> datetime:
    """Return the end of a one-month billing cycle starting at ``start``.

    The day is clamped to the last day of a shorter month (Jan 31 -> Feb 28).
    """
    return start + relativedelta(months=1)


class EntitlementService:
    """Service for checking and consuming statement-import entitlements."""

    def __init__(self, db: Database):
        """Initialize entitlement service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_record(self, user_id: str) -> EntitlementRecord:
        """Return the stored record, or a fresh zero-valued one."""
        record = self.db.get_entitlement(user_id)
        if record is None:
            return EntitlementRecord(user_id=user_id)
        return record

    def check_status(self, user_id: str, now: Optional[datetime] = None) -> EntitlementStatus:
        """Report whether the user may import and how many imports remain.

        A subscriber who has not used the trial yet gets the trial on top of
        the plan quota. If the billing cycle has ended, the reset is
        persisted before the status is computed.
        """
        now = _resolve_now(now)
        stored = self.db.get_entitlement(user_id)
        if stored is None:
            return EntitlementStatus(
                can_import=True, remaining=TRIAL_IMPORTS, limit=TRIAL_IMPORTS, plan=None
            )

        record, rolled_over = self._rollover(stored, now)
        if rolled_over:
            self.db.put_entitlement(record)
        return self._status(record)

    def record_import(self, user_id: str, now: Optional[datetime] = None) -> ImportUsage:
        """Account for one completed import.

        Usage is incremented before the limit is compared, so the import
        that reaches the limit still reports ``allowed=True`` and only the
        next one reports False. Gate imports with ``check_status`` first;
        this result is advisory. Repeated calls are not de-duplicated.
        """
        now = _resolve_now(now)
        record, rolled_over = self._rollover(self.get_record(user_id), now)

        if not record.is_subscribed:
            if record.trial_used:
                return ImportUsage(allowed=False, remaining=0)
            self.db.put_entitlement(replace(record, trial_used=True))
            logger.info("User %s used the free trial import", user_id)
            return ImportUsage(allowed=False, remaining=0)

        limit = PLAN_LIMITS[record.plan]
        if not record.trial_used:
            # The trial credit is spent before any cycle slot.
            self.db.put_entitlement(replace(record, trial_used=True))
            logger.info("User %s used the free trial import on plan %s", user_id, record.plan.value)
            return ImportUsage(allowed=True, remaining=limit)

        if record.period_start is None or record.period_end is None:
            # Plan activation may not have delivered cycle boundaries yet.
            record = replace(record, period_start=now, period_end=next_period_end(now))

        used = record.usage_this_period + 1
        self.db.put_entitlement(replace(record, usage_this_period=used))
        logger.info("User %s used %d of %d imports this period", user_id, used, limit)
        return ImportUsage(allowed=used < limit, remaining=max(0, limit - used))

    def plan_activated(
        self,
        user_id: str,
        plan: Union[Plan, str],
        period_end: datetime,
        stripe_customer_id: Optional[str] = None,
        stripe_subscription_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> EntitlementRecord:
        """Start a paid plan cycle. Does not grant a new trial.

        Args:
            user_id: Subscriber
            plan: ``basic`` or ``pro``
            period_end: End of the paid cycle reported by the billing provider
            stripe_customer_id: Billing customer reference
            stripe_subscription_id: Billing subscription reference
            now: Reference time; defaults to the current UTC time

        Returns:
            The stored record

        Raises:
            ValidationError: If ``plan`` is not a paid plan
        """
        paid_plan = self._paid_plan(plan)
        now = _resolve_now(now)
        existing = self.get_record(user_id)
        record = EntitlementRecord(
            user_id=user_id,
            plan=paid_plan,
            stripe_customer_id=stripe_customer_id or existing.stripe_customer_id,
            stripe_subscription_id=stripe_subscription_id or existing.stripe_subscription_id,
            period_start=now,
            period_end=to_utc_naive(period_end),
            usage_this_period=0,
            trial_used=existing.trial_used,
        )
        self.db.put_entitlement(record)
        logger.info(
            "User %s is on plan %s until %s",
            user_id,
            paid_plan.value,
            record.period_end.isoformat(),
        )
        return record

    def plan_renewed(
        self,
        user_id: str,
        plan: Union[Plan, str],
        period_end: datetime,
        stripe_customer_id: Optional[str] = None,
        stripe_subscription_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> EntitlementRecord:
        """Renew or change a paid plan; same effect as activation."""
        return self.plan_activated(
            user_id,
            plan,
            period_end,
            stripe_customer_id=stripe_customer_id,
            stripe_subscription_id=stripe_subscription_id,
            now=now,
        )

    def plan_canceled_or_expired(self, user_id: str) -> EntitlementRecord:
        """Drop the paid plan. The trial is forfeited as well."""
        record = EntitlementRecord(user_id=user_id, trial_used=True)
        self.db.put_entitlement(record)
        logger.info("User %s no longer has a paid plan", user_id)
        return record

    @staticmethod
    def _paid_plan(plan: Union[Plan, str]) -> Plan:
        try:
            resolved = Plan(plan)
        except ValueError:
            raise ValidationError(not_a_paid_plan(plan))
        if resolved not in (Plan.BASIC, Plan.PRO):
            raise ValidationError(not_a_paid_plan(resolved.value))
        return resolved

    @staticmethod
    def _rollover(record: EntitlementRecord, now: datetime) -> tuple[EntitlementRecord, bool]:
        if record.period_end is None or now < record.period_end:
            return record, False
        logger.info(
            "Billing period for user %s ended %s; starting a new one",
            record.user_id,
            record.period_end.isoformat(),
        )
        rolled = replace(
            record,
            usage_this_period=0,
            period_start=now,
            period_end=next_period_end(now),
        )
        return rolled, True

    @staticmethod
    def _status(record: EntitlementRecord) -> EntitlementStatus:
        if record.is_subscribed:
            limit = PLAN_LIMITS[record.plan]
            if not record.trial_used:
                used = 0
                remaining = limit + TRIAL_IMPORTS
            else:
                used = record.usage_this_period
                remaining = max(0, limit - used)
        else:
            if record.plan is Plan.TRIAL:
                limit = PLAN_LIMITS[Plan.TRIAL]
            else:
                limit = 0 if record.trial_used else TRIAL_IMPORTS
            used = 1 if record.trial_used else 0
            remaining = max(0, limit - used)

        return EntitlementStatus(
            can_import=remaining > 0,
            remaining=remaining,
            limit=limit,
            plan=record.plan,
            usage_this_period=used,
        )
