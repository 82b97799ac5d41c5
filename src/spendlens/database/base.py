"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from spendlens.domain.entities import (
    EntitlementRecord,
    LedgerEntry,
    NewEntry,
    RecurringRule,
)


class Database(ABC):
    """Abstract database interface for spendlens.

    One interface covers the three stores the services talk to: ledger
    entries, recurring-deletion tombstones and entitlement records. Every
    operation is scoped to a single user. Implementations raise
    ``StorageUnavailableError`` when the backing store fails.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Ledger entry operations
    @abstractmethod
    def create_entry(
        self,
        user_id: str,
        date: date,
        description: str,
        amount: Decimal,
        category: str,
        confirmed: bool = True,
        recurring: Optional[RecurringRule] = None,
    ) -> int:
        """Create a ledger entry. Returns entry ID."""
        pass

    @abstractmethod
    def create_entries(self, user_id: str, entries: list[NewEntry]) -> list[int]:
        """Create several ledger entries in one commit. Returns IDs in input order."""
        pass

    @abstractmethod
    def get_entry(self, entry_id: int) -> Optional[LedgerEntry]:
        """Get ledger entry by ID."""
        pass

    @abstractmethod
    def list_entries(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[LedgerEntry]:
        """List a user's entries ordered by date descending.

        Args:
            user_id: Owner of the entries
            start_date: Optional inclusive lower date bound
            end_date: Optional inclusive upper date bound
        """
        pass

    @abstractmethod
    def update_entry(
        self,
        entry_id: int,
        date: Optional[date] = None,
        description: Optional[str] = None,
        amount: Optional[Decimal] = None,
        category: Optional[str] = None,
        confirmed: Optional[bool] = None,
    ) -> None:
        """Update the given entry fields; None leaves a field unchanged."""
        pass

    @abstractmethod
    def delete_entry(self, entry_id: int) -> None:
        """Delete a ledger entry."""
        pass

    @abstractmethod
    def delete_entries(self, entry_ids: list[int]) -> int:
        """Delete several entries in one commit. Returns the number deleted."""
        pass

    # Recurring deletion tombstones
    @abstractmethod
    def get_deleted_dates(self, user_id: str) -> dict[str, set[date]]:
        """Map each series key to the dates the user removed from that series."""
        pass

    @abstractmethod
    def add_deleted_date(self, user_id: str, series_key: str, date: date) -> None:
        """Record a removed occurrence date. Recording the same date twice is a no-op."""
        pass

    # Entitlement operations
    @abstractmethod
    def get_entitlement(self, user_id: str) -> Optional[EntitlementRecord]:
        """Get a user's entitlement record, or None if never written."""
        pass

    @abstractmethod
    def put_entitlement(self, record: EntitlementRecord) -> None:
        """Create or fully replace a user's entitlement record."""
        pass
