"""Ledger domain service."""

from collections import defaultdict
from typing import Optional
from datetime import date
from decimal import Decimal

from dateutil.relativedelta import relativedelta

from spendlens.database.base import Database
from spendlens.domain.entities import (
    CategoryTotal,
    LedgerEntry,
    NewEntry,
    RecurringRule,
)
from spendlens.domain.errors import (
    NotFoundError,
    ValidationError,
    entry_not_found,
    entry_not_owned,
)
from spendlens.logging_setup import get_logger

logger = get_logger(__name__)


class LedgerService:
    """Service for managing a user's ledger entries."""

    def __init__(self, db: Database):
        """Initialize ledger service.

        Args:
            db: Database instance
        """
        self.db = db

    def add_entry(
        self,
        user_id: str,
        date: date,
        description: str,
        amount: Decimal,
        category: str,
        confirmed: bool = True,
        recurring: Optional[RecurringRule] = None,
    ) -> int:
        """Add a single entry to a user's ledger.

        Args:
            user_id: Owner of the entry
            date: Entry date
            description: Free-text description
            amount: Signed amount (negative for expenses)
            category: Category label
            confirmed: Whether the entry counts in totals
            recurring: Optional recurring rule

        Returns:
            Entry ID

        Raises:
            ValidationError: If description or category is blank
        """
        self._validate_text(description, category)
        return self.db.create_entry(
            user_id=user_id,
            date=date,
            description=description,
            amount=amount,
            category=category,
            confirmed=confirmed,
            recurring=recurring,
        )

    def add_entries(self, user_id: str, entries: list[NewEntry]) -> list[int]:
        """Add a batch of entries, e.g. the reviewed rows of an imported statement.

        Returns:
            Entry IDs in input order
        """
        for entry in entries:
            self._validate_text(entry.description, entry.category)
        ids = self.db.create_entries(user_id, entries)
        logger.info("Added %d entries for user %s", len(ids), user_id)
        return ids

    def get_entry(self, entry_id: int) -> Optional[LedgerEntry]:
        """Get entry by ID, or None if not found."""
        return self.db.get_entry(entry_id)

    def require_entry(self, user_id: str, entry_id: int) -> LedgerEntry:
        """Get an entry that must exist and belong to ``user_id``.

        Raises:
            NotFoundError: If the entry is missing or owned by another user
        """
        entry = self.db.get_entry(entry_id)
        if entry is None:
            raise NotFoundError(entry_not_found(entry_id))
        if entry.user_id != user_id:
            raise NotFoundError(entry_not_owned(entry_id, user_id))
        return entry

    def list_entries(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[LedgerEntry]:
        """List a user's entries, newest first."""
        return self.db.list_entries(user_id, start_date=start_date, end_date=end_date)

    def update_entry(
        self,
        user_id: str,
        entry_id: int,
        date: Optional[date] = None,
        description: Optional[str] = None,
        amount: Optional[Decimal] = None,
        category: Optional[str] = None,
        confirmed: Optional[bool] = None,
    ) -> None:
        """Update entry fields. Fields left as None are not changed.

        Editing description, amount or category of a recurring entry moves it
        to a different series.

        Raises:
            NotFoundError: If the entry doesn't exist for this user
            ValidationError: If a new description or category is blank
        """
        self.require_entry(user_id, entry_id)
        if description is not None and not description.strip():
            raise ValidationError("Description cannot be empty")
        if category is not None and not category.strip():
            raise ValidationError("Category cannot be empty")

        self.db.update_entry(
            entry_id=entry_id,
            date=date,
            description=description,
            amount=amount,
            category=category,
            confirmed=confirmed,
        )

    def confirm_entry(self, user_id: str, entry_id: int) -> None:
        """Mark an imported entry as reviewed so it counts in totals."""
        self.update_entry(user_id, entry_id, confirmed=True)

    def delete_entry(self, user_id: str, entry_id: int) -> None:
        """Delete a single entry.

        Deleting a recurring entry this way does not stop the projector from
        regenerating it; use ``RecurringService.delete_occurrence`` for that.

        Raises:
            NotFoundError: If the entry doesn't exist for this user
        """
        self.require_entry(user_id, entry_id)
        self.db.delete_entry(entry_id)

    def delete_month(self, user_id: str, year: int, month: int) -> int:
        """Delete every entry dated in the given calendar month.

        Returns:
            Number of entries deleted

        Raises:
            ValidationError: If month is not 1-12
        """
        if not 1 <= month <= 12:
            raise ValidationError(f"Invalid month: {month}")
        start = date(year, month, 1)
        end = start + relativedelta(day=31)
        entries = self.db.list_entries(user_id, start_date=start, end_date=end)
        deleted = self.db.delete_entries([entry.id for entry in entries])
        logger.info("Deleted %d entries for user %s in %04d-%02d", deleted, user_id, year, month)
        return deleted

    def category_totals(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[CategoryTotal]:
        """Sum confirmed expenses by category.

        Only confirmed entries with a negative amount are counted; totals are
        reported as positive amounts, largest first.
        """
        totals: dict[str, Decimal] = defaultdict(Decimal)
        counts: dict[str, int] = defaultdict(int)
        for entry in self.db.list_entries(user_id, start_date=start_date, end_date=end_date):
            if not entry.confirmed or entry.amount >= 0:
                continue
            totals[entry.category] += abs(entry.amount)
            counts[entry.category] += 1

        results = [
            CategoryTotal(category=name, total=total, count=counts[name])
            for name, total in totals.items()
        ]
        return sorted(results, key=lambda t: (-t.total, t.category))

    @staticmethod
    def _validate_text(description: str, category: str) -> None:
        if not description or not description.strip():
            raise ValidationError("Description cannot be empty")
        if not category or not category.strip():
            raise ValidationError("Category cannot be empty")
