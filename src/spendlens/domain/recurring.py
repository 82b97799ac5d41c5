"""Recurring series domain service.

Keeps recurring bills (rent, subscriptions) present in the ledger between
statement uploads. ``reconcile`` is meant to run before every ledger view.
"""

from dataclasses import replace
from typing import Optional
from datetime import date

from spendlens.database.base import Database
from spendlens.domain.entities import LedgerEntry, NewEntry
from spendlens.domain.errors import (
    NotFoundError,
    ValidationError,
    entry_not_found,
    not_recurring,
    series_ends_before_start,
)
from spendlens.domain.recurrence import (
    amounts_match,
    next_occurrence,
    occurrence_dates,
    same_series,
    series_boundary,
    series_key,
    validate_anchor_day,
)
from spendlens.logging_setup import get_logger

logger = get_logger(__name__)


class RecurringService:
    """Service for projecting and deleting recurring series."""

    def __init__(self, db: Database):
        """Initialize recurring service.

        Args:
            db: Database instance
        """
        self.db = db

    def reconcile(self, user_id: str, today: Optional[date] = None) -> int:
        """Insert the upcoming occurrences of every recurring series.

        Every confirmed recurring entry acts as a template for its series.
        Starting after the latest existing occurrence of the series, each
        candidate date up to the boundary (the series end date, else the end
        of ``today``'s month) is inserted unless it is not after ``today``,
        was deleted by the user, or already exists. Past gaps are never
        backfilled here. Unconfirmed recurring entries are not
        templates, but they still count as the latest occurrence of their
        series and as existing occurrences.

        Args:
            user_id: Owner of the ledger
            today: Reference date; defaults to the current date

        Returns:
            Number of entries inserted
        """
        if today is None:
            today = date.today()

        known = self.db.list_entries(user_id)
        deleted_dates = self.db.get_deleted_dates(user_id)
        templates = [e for e in known if e.recurring is not None and e.confirmed]
        logger.debug(
            "Reconciling %d recurring templates for user %s as of %s",
            len(templates),
            user_id,
            today.isoformat(),
        )

        inserted = 0
        for template in templates:
            rule = template.recurring
            tombstones = deleted_dates.get(series_key(template), set())
            last = max(
                (e.date for e in known if same_series(e, template)),
                default=template.date,
            )
            boundary = series_boundary(today, rule.series_end_date)
            candidate = next_occurrence(last, rule.frequency)
            logger.debug(
                "Series %r: last occurrence %s, next %s, boundary %s",
                template.description,
                last.isoformat(),
                candidate.isoformat(),
                boundary.isoformat(),
            )

            while candidate <= boundary:
                if candidate <= today or candidate in tombstones:
                    candidate = next_occurrence(candidate, rule.frequency)
                    continue

                if self._occurrence_exists(known, template, candidate):
                    logger.debug("Occurrence %s of %r already exists", candidate, template.description)
                else:
                    entry_id = self.db.create_entry(
                        user_id=user_id,
                        date=candidate,
                        description=template.description,
                        amount=template.amount,
                        category=template.category,
                        confirmed=True,
                        recurring=rule,
                    )
                    known.append(replace(template, id=entry_id, date=candidate, confirmed=True))
                    inserted += 1

                candidate = next_occurrence(candidate, rule.frequency)

        if inserted:
            logger.info("Generated %d recurring entries for user %s", inserted, user_id)
        return inserted

    def delete_occurrence(self, user_id: str, entry: LedgerEntry) -> None:
        """Delete one occurrence and keep it from being regenerated.

        Raises:
            NotFoundError: If the entry no longer exists for this user
            ValidationError: If the entry is not part of a recurring series
        """
        self._require_owned(user_id, entry)
        if entry.recurring is None:
            raise ValidationError(not_recurring(entry.id))

        self.db.add_deleted_date(user_id, series_key(entry), entry.date)
        self.db.delete_entry(entry.id)
        logger.info("Deleted occurrence %s of series %r", entry.date.isoformat(), series_key(entry))

    def delete_series(self, user_id: str, entry: LedgerEntry) -> int:
        """Delete every recurring entry sharing ``entry``'s series identity.

        One-off entries with the same description, amount and category are
        kept. Recorded occurrence deletions are left in place.

        Returns:
            Number of entries deleted
        """
        members = [
            e.id
            for e in self.db.list_entries(user_id)
            if e.recurring is not None and same_series(e, entry)
        ]
        deleted = self.db.delete_entries(members)
        logger.info("Deleted %d entries of series %r", deleted, series_key(entry))
        return deleted

    def create_series(
        self, user_id: str, template: NewEntry, today: Optional[date] = None
    ) -> list[int]:
        """Create a recurring series and back-fill it up to the boundary.

        ``template.date`` is the first occurrence. Every occurrence from
        there through the series end date (or the end of ``today``'s month)
        is inserted at once, including ones already in the past.

        Args:
            user_id: Owner of the series
            template: First occurrence; ``template.recurring`` must be set
            today: Reference date; defaults to the current date

        Returns:
            IDs of the inserted entries in date order

        Raises:
            ValidationError: If the rule is missing or inconsistent
        """
        if today is None:
            today = date.today()

        rule = template.recurring
        if rule is None:
            raise ValidationError("A recurring series needs a frequency")
        validate_anchor_day(rule.frequency, rule.anchor_day)
        if rule.series_end_date is not None and rule.series_end_date < template.date:
            raise ValidationError(series_ends_before_start(template.date, rule.series_end_date))

        boundary = series_boundary(today, rule.series_end_date)
        dates = occurrence_dates(template.date, rule.frequency, boundary)
        if not dates:
            logger.warning(
                "Series %r starts %s, after its boundary %s; nothing inserted",
                template.description,
                template.date.isoformat(),
                boundary.isoformat(),
            )
            return []

        entries = [replace(template, date=d, confirmed=True) for d in dates]
        ids = self.db.create_entries(user_id, entries)
        logger.info(
            "Created series %r with %d occurrences for user %s",
            template.description,
            len(ids),
            user_id,
        )
        return ids

    def _require_owned(self, user_id: str, entry: LedgerEntry) -> None:
        stored = self.db.get_entry(entry.id)
        if stored is None or stored.user_id != user_id:
            raise NotFoundError(entry_not_found(entry.id))

    @staticmethod
    def _occurrence_exists(known: list[LedgerEntry], template: LedgerEntry, day: date) -> bool:
        return any(
            e.date == day
            and e.description == template.description
            and e.category == template.category
            and amounts_match(e.amount, template.amount)
            for e in known
        )
