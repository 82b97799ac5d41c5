"""Routing of billing-provider events to entitlement transitions.

Events arrive here already verified and parsed; signature checks and raw
payload handling belong to the web layer.
"""

import os
from dataclasses import dataclass
from datetime import datetime
from typing import Mapping, Optional

from spendlens.domain.entitlement import EntitlementService
from spendlens.domain.entities import Plan
from spendlens.logging_setup import get_logger

logger = get_logger(__name__)

CHECKOUT_COMPLETED = "checkout.session.completed"
SUBSCRIPTION_UPDATED = "customer.subscription.updated"
SUBSCRIPTION_DELETED = "customer.subscription.deleted"

ACTIVE_STATUSES = frozenset({"active"})
LAPSED_STATUSES = frozenset({"canceled", "unpaid", "past_due"})


@dataclass(frozen=True)
class BillingEvent:
    """A verified billing notification reduced to the fields we act on."""

    type: str
    user_id: Optional[str]
    status: Optional[str] = None
    price_id: Optional[str] = None
    customer_id: Optional[str] = None
    subscription_id: Optional[str] = None
    period_end: Optional[datetime] = None


def price_plans_from_env(environ: Optional[Mapping[str, str]] = None) -> dict[str, Plan]:
    """Build the price-id to plan map from STRIPE_PRICE_BASIC / STRIPE_PRICE_PRO."""
    if environ is None:
        environ = os.environ
    price_plans = {}
    for var, plan in (("STRIPE_PRICE_BASIC", Plan.BASIC), ("STRIPE_PRICE_PRO", Plan.PRO)):
        price_id = environ.get(var)
        if price_id:
            price_plans[price_id] = plan
    return price_plans


class BillingEventHandler:
    """Apply billing events to a user's entitlement."""

    def __init__(self, entitlements: EntitlementService, price_plans: Mapping[str, Plan]):
        self.entitlements = entitlements
        self.price_plans = dict(price_plans)

    def handle(self, event: BillingEvent, now: Optional[datetime] = None) -> bool:
        """Apply ``event``.

        Returns:
            True if the event changed an entitlement, False if it was ignored
        """
        if not event.user_id:
            logger.warning("Ignoring %s event without a user id", event.type)
            return False

        if event.type == CHECKOUT_COMPLETED:
            return self._activate(event, now, renewal=False)

        if event.type == SUBSCRIPTION_UPDATED:
            if event.status in ACTIVE_STATUSES:
                return self._activate(event, now, renewal=True)
            if event.status in LAPSED_STATUSES:
                self.entitlements.plan_canceled_or_expired(event.user_id)
                return True
            logger.debug("Ignoring subscription status %r for user %s", event.status, event.user_id)
            return False

        if event.type == SUBSCRIPTION_DELETED:
            self.entitlements.plan_canceled_or_expired(event.user_id)
            return True

        logger.debug("Ignoring billing event type %s", event.type)
        return False

    def _activate(self, event: BillingEvent, now: Optional[datetime], renewal: bool) -> bool:
        plan = self.price_plans.get(event.price_id or "")
        if plan is None:
            logger.warning(
                "Unknown price id %r in %s for user %s", event.price_id, event.type, event.user_id
            )
            return False
        if event.period_end is None:
            logger.warning("No period end in %s for user %s", event.type, event.user_id)
            return False

        transition = self.entitlements.plan_renewed if renewal else self.entitlements.plan_activated
        transition(
            event.user_id,
            plan,
            event.period_end,
            stripe_customer_id=event.customer_id,
            stripe_subscription_id=event.subscription_id,
            now=now,
        )
        return True
