"""Shared pytest fixtures for spendlens tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from spendlens.database.factories import create_sqlite_database
from spendlens.domain.entities import Frequency, RecurringRule
from spendlens.domain.entitlement import EntitlementService
from spendlens.domain.ledger import LedgerService
from spendlens.domain.recurring import RecurringService

USER = "user-1"
OTHER_USER = "user-2"


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def ledger_service(temp_db):
    """Create a LedgerService with a temporary database."""
    return LedgerService(temp_db)


@pytest.fixture
def recurring_service(temp_db):
    """Create a RecurringService with a temporary database."""
    return RecurringService(temp_db)


@pytest.fixture
def entitlement_service(temp_db):
    """Create an EntitlementService with a temporary database."""
    return EntitlementService(temp_db)


@pytest.fixture
def add_recurring(temp_db):
    """Insert a recurring entry directly into the store."""

    def _add(
        entry_date: date,
        description: str = "Streaming",
        amount: str = "-15.99",
        category: str = "Subscriptions",
        frequency: Frequency = Frequency.MONTHLY,
        series_end_date: date | None = None,
        user_id: str = USER,
        confirmed: bool = True,
    ) -> int:
        anchor = entry_date.day if frequency is Frequency.MONTHLY else (entry_date.weekday() + 1) % 7
        return temp_db.create_entry(
            user_id=user_id,
            date=entry_date,
            description=description,
            amount=Decimal(amount),
            category=category,
            confirmed=confirmed,
            recurring=RecurringRule(
                frequency=frequency, anchor_day=anchor, series_end_date=series_end_date
            ),
        )

    return _add


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
