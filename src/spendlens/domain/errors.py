"""Shared domain error messages and error types."""

from datetime import date


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class StorageUnavailableError(RuntimeError):
    """The backing store could not complete a read or write.

    Raised for any failure below the domain layer. Callers decide whether
    to retry; the services never do.
    """


def entry_not_found(entry_id: int) -> str:
    """Return message for missing ledger entry."""
    return f"Entry {entry_id} not found"


def entry_not_owned(entry_id: int, user_id: str) -> str:
    """Return message for an entry that belongs to another user."""
    return f"Entry {entry_id} does not belong to user '{user_id}'"


def not_recurring(entry_id: int) -> str:
    """Return message when a series operation targets a one-off entry."""
    return f"Entry {entry_id} is not part of a recurring series"


def invalid_anchor_day(anchor_day: int, frequency: str) -> str:
    """Return message for an anchor day outside the frequency's range."""
    if frequency == "monthly":
        return f"Anchor day {anchor_day} is not a valid day of month (1-31)"
    return f"Anchor day {anchor_day} is not a valid day of week (0-6, Sunday=0)"


def series_ends_before_start(start_date: date, end_date: date) -> str:
    """Return message when a series end date precedes its start date."""
    return f"Series end date {end_date.isoformat()} is before start date {start_date.isoformat()}"


def not_a_paid_plan(plan: object) -> str:
    """Return message when a billing transition names a non-paid plan."""
    return f"Plan '{plan}' cannot be activated; expected 'basic' or 'pro'"
