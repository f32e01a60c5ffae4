"""Shared pytest fixtures for kontor tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from kontor.database.factories import create_sqlite_database
from kontor.domain.chart_of_accounts import ChartOfAccountsService
from kontor.domain.entities import JournalEntryLine
from kontor.domain.ledger import LedgerService
from kontor.domain.trial_balance import TrialBalanceService
from kontor.logging_config import reset_logging


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop handlers installed by CLI invocations so caplog sees kontor records."""
    yield
    reset_logging()


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def second_db(temp_db):
    """Open a second, independent connection to the same database file."""
    db = create_sqlite_database(database_path=temp_db.database_path)
    db.connect()
    yield db
    db.disconnect()


@pytest.fixture
def chart_service(temp_db):
    """Create a ChartOfAccountsService with a temporary database."""
    return ChartOfAccountsService(temp_db)


@pytest.fixture
def ledger_service(temp_db, chart_service):
    """Create a LedgerService with a temporary database."""
    return LedgerService(temp_db, chart_service)


@pytest.fixture
def trial_balance_service(temp_db):
    """Create a TrialBalanceService with a temporary database."""
    return TrialBalanceService(temp_db)


@pytest.fixture
def seeded_chart(chart_service):
    """Seed the SKR03 chart and return accounts keyed by account number."""
    chart_service.seed_standard_accounts("SKR03")
    return {acc.account_number: acc for acc in chart_service.list_accounts(include_inactive=True)}


@pytest.fixture
def cash_sale(ledger_service, seeded_chart):
    """Create the draft 'Barverkauf' entry: 1000 Kasse to 8400 Erlöse, 500.00."""
    return ledger_service.create_entry(
        entry_date=date(2024, 3, 15),
        description="Barverkauf",
        lines=[
            JournalEntryLine.debit(seeded_chart["1000"].id, Decimal("500.00")),
            JournalEntryLine.credit(seeded_chart["8400"].id, Decimal("500.00")),
        ],
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
