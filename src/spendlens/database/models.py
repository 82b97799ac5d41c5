"""SQLAlchemy models for spendlens database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Date,
    Numeric,
    Boolean,
    Index,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(UTC).replace(tzinfo=None)


class LedgerEntry(Base):
    """Ledger entry model.

    Recurring metadata lives in the ``recurring_*`` columns; ``is_recurring``
    marks an entry as part of a series.
    """

    __tablename__ = "ledger_entries"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    description = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    category = Column(String, nullable=False)
    confirmed = Column(Boolean, default=True, nullable=False)
    is_recurring = Column(Boolean, default=False, nullable=False)
    recurring_frequency = Column(String, nullable=True)
    recurring_anchor_day = Column(Integer, nullable=True)
    recurring_end_date = Column(Date, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    __table_args__ = (Index("ix_ledger_entries_user_date", "user_id", "date"),)


class RecurringDeletion(Base):
    """An occurrence date the user removed from a recurring series."""

    __tablename__ = "recurring_deletions"

    id = Column(Integer, primary_key=True)
    user_id = Column(String, nullable=False)
    series_key = Column(String, nullable=False)
    date = Column(Date, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "series_key", "date", name="uq_user_series_date"),
    )


class Entitlement(Base):
    """Per-user plan and usage record."""

    __tablename__ = "entitlements"

    user_id = Column(String, primary_key=True)
    plan = Column(String, nullable=True)
    stripe_customer_id = Column(String, nullable=True)
    stripe_subscription_id = Column(String, nullable=True)
    period_start = Column(DateTime, nullable=True)
    period_end = Column(DateTime, nullable=True)
    usage_this_period = Column(Integer, default=0, nullable=False)
    trial_used = Column(Boolean, default=False, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
