"""Date rules for recurring ledger entries.

Everything here is pure: no store access and no clock reads. Callers pass
the reference date explicitly.
"""

from datetime import date, timedelta
from decimal import Decimal
from typing import Optional, Protocol

from dateutil.relativedelta import relativedelta

from spendlens.domain.entities import Frequency
from spendlens.domain.errors import ValidationError, invalid_anchor_day

# Amounts closer than this are the same amount for duplicate detection.
AMOUNT_TOLERANCE = Decimal("0.01")


class SeriesMember(Protocol):
    description: str
    amount: Decimal
    category: str


def series_key(entry: SeriesMember) -> str:
    """Return the string identity of the series an entry belongs to.

    A series is identified by ``(description, amount, category)``; there is
    no separate series id.
    """
    return f"{entry.description}|{entry.amount:.2f}|{entry.category}"


def same_series(a: SeriesMember, b: SeriesMember) -> bool:
    """Return True if both entries share description, amount and category."""
    return (
        a.description == b.description
        and a.amount == b.amount
        and a.category == b.category
    )


def amounts_match(a: Decimal, b: Decimal) -> bool:
    return abs(a - b) < AMOUNT_TOLERANCE


def end_of_month(day: date) -> date:
    """Return the last calendar day of ``day``'s month."""
    return day + relativedelta(day=31)


def next_occurrence(last: date, frequency: Frequency) -> date:
    """Compute the occurrence following ``last``.

    Monthly series keep ``last``'s day of month. If the next month is too
    short the extra days spill into the month after it, so 2026-01-31 is
    followed by 2026-03-03.

    Args:
        last: Date of the previous occurrence
        frequency: Series frequency

    Returns:
        Date of the next occurrence
    """
    if frequency is Frequency.MONTHLY:
        first_of_next = last.replace(day=1) + relativedelta(months=1)
        return first_of_next + timedelta(days=last.day - 1)
    if frequency is Frequency.BIWEEKLY:
        return last + timedelta(days=14)
    if frequency is Frequency.WEEKLY:
        return last + timedelta(days=7)
    raise ValidationError(f"Unknown frequency: {frequency!r}")


def series_boundary(today: date, series_end_date: Optional[date] = None) -> date:
    """Return the last date occurrences may be generated for."""
    if series_end_date is not None:
        return series_end_date
    return end_of_month(today)


def occurrence_dates(start: date, frequency: Frequency, boundary: date) -> list[date]:
    """List every occurrence from ``start`` (inclusive) up to ``boundary``.

    Returns an empty list when ``start`` is already past ``boundary``.
    """
    dates = []
    current = start
    while current <= boundary:
        dates.append(current)
        current = next_occurrence(current, frequency)
    return dates


def validate_anchor_day(frequency: Frequency, anchor_day: int) -> None:
    """Raise ValidationError if ``anchor_day`` is out of range for ``frequency``."""
    if frequency is Frequency.MONTHLY:
        valid = 1 <= anchor_day <= 31
    else:
        valid = 0 <= anchor_day <= 6
    if not valid:
        raise ValidationError(invalid_anchor_day(anchor_day, frequency.value))


def default_anchor_day(start: date, frequency: Frequency) -> int:
    """Derive the anchor day a series started on ``start`` would carry."""
    if frequency is Frequency.MONTHLY:
        return start.day
    # date.weekday() is Monday=0; anchors count from Sunday=0
    return (start.weekday() + 1) % 7
