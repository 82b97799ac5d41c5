"""Domain layer for spendlens application.

Services are imported lazily: the database layer imports
``spendlens.domain.entities`` and the services import the database layer.
"""

_SERVICES = {
    "LedgerService": "spendlens.domain.ledger",
    "RecurringService": "spendlens.domain.recurring",
    "EntitlementService": "spendlens.domain.entitlement",
    "BillingEvent": "spendlens.domain.billing_events",
    "BillingEventHandler": "spendlens.domain.billing_events",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
