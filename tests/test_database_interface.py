"""Tests for the SQLAlchemy Database implementation."""

import pytest
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy.exc import IntegrityError

from kontor.database.factories import create_sqlite_database
from kontor.database.models import JournalEntryRecord, NumberSequence
from kontor.database.sqlalchemy_db import JOURNAL_ENTRY_SEQUENCE, format_entry_number
from kontor.domain import entities
from kontor.domain.entities import (
    AccountClass,
    AccountType,
    EntryStatus,
    EntryType,
    JournalEntryLine,
)
from kontor.domain.errors import AccountNotFound
from kontor.domain.journal_entry import build_journal_entry, build_reversal


def _account(db, number="1000", name="Kasse", account_type=AccountType.ASSET, account_class=AccountClass.CURRENT_ASSET):
    return db.create_account(number, name, account_type, account_class)


@pytest.fixture
def two_accounts(temp_db):
    kasse = _account(temp_db)
    erloese = _account(temp_db, "8400", "Erlöse", AccountType.REVENUE, AccountClass.OPERATING_REVENUE)
    return kasse, erloese


def _new_entry(accounts, amount="500.00", entry_date=date(2024, 3, 15)):
    kasse, erloese = accounts
    return build_journal_entry(
        entry_date,
        "Barverkauf",
        [
            JournalEntryLine.debit(kasse, Decimal(amount), description="Kasse"),
            JournalEntryLine.credit(erloese, Decimal(amount)),
        ],
    )


class TestAccounts:
    """Chart of accounts persistence."""

    def test_get_account_returns_domain_model(self, temp_db):
        account_id = temp_db.create_account(
            "1576",
            "Vorsteuer",
            AccountType.ASSET,
            AccountClass.CURRENT_ASSET,
            tax_code="VSt19",
            tax_relevant=True,
        )

        account = temp_db.get_account(account_id)

        assert isinstance(account, entities.Account)
        assert account.account_number == "1576"
        assert account.tax_relevant
        assert account.is_active
        assert isinstance(account.created_at, datetime)

    def test_get_accounts_skips_missing(self, temp_db, two_accounts):
        accounts = temp_db.get_accounts([*two_accounts, 999])
        assert set(accounts) == set(two_accounts)
        assert temp_db.get_accounts([]) == {}

    def test_update_and_delete_missing_account(self, temp_db):
        with pytest.raises(AccountNotFound):
            temp_db.update_account(1, account_name="x")
        with pytest.raises(AccountNotFound):
            temp_db.delete_account(1)

    def test_session_is_usable_after_duplicate(self, temp_db):
        """A failed insert is rolled back and does not poison the session."""
        _account(temp_db)
        with pytest.raises(ValueError):
            _account(temp_db)
        assert _account(temp_db, "1200", "Bank") is not None
        assert len(temp_db.list_accounts()) == 2


class TestJournalEntries:
    """Journal entry persistence."""

    def test_create_journal_entry_assigns_number(self, temp_db, two_accounts):
        entry = temp_db.create_journal_entry(_new_entry(two_accounts))

        assert isinstance(entry, entities.JournalEntry)
        assert entry.entry_number == "JE-00001"
        assert entry.status is EntryStatus.DRAFT
        assert entry.version == 1
        assert entry.total_debit == Decimal("500.00")
        assert entry.lines[0].description == "Kasse"
        assert isinstance(entry.lines[0].debit_amount, Decimal)

    def test_entry_numbers_increase(self, temp_db, two_accounts):
        numbers = [temp_db.create_journal_entry(_new_entry(two_accounts)).entry_number for _ in range(3)]
        assert numbers == ["JE-00001", "JE-00002", "JE-00003"]

    def test_numbers_shared_across_connections(self, temp_db, second_db, two_accounts):
        first = temp_db.create_journal_entry(_new_entry(two_accounts))
        second = second_db.create_journal_entry(_new_entry(two_accounts))
        third = temp_db.create_journal_entry(_new_entry(two_accounts))
        assert [first.entry_number, second.entry_number, third.entry_number] == [
            "JE-00001",
            "JE-00002",
            "JE-00003",
        ]

    def test_initialize_schema_creates_sequence_row(self, temp_db, second_db, two_accounts):
        def next_value(db):
            return (
                db._get_session()
                .query(NumberSequence.next_value)
                .filter(NumberSequence.name == JOURNAL_ENTRY_SEQUENCE)
                .scalar()
            )

        assert next_value(temp_db) == 1

        temp_db.initialize_schema()
        second_db.initialize_schema()
        assert next_value(temp_db) == 1

        assert second_db.create_journal_entry(_new_entry(two_accounts)).entry_number == "JE-00001"
        assert next_value(temp_db) == 2

    def test_count_journal_entries(self, temp_db, two_accounts):
        temp_db.create_journal_entry(_new_entry(two_accounts, entry_date=date(2024, 1, 31)))
        temp_db.create_journal_entry(_new_entry(two_accounts, entry_date=date(2024, 2, 1)))
        temp_db.create_journal_entry(_new_entry(two_accounts, entry_date=date(2025, 2, 1)))

        assert temp_db.count_journal_entries() == 3
        assert temp_db.count_journal_entries(fiscal_year=2024) == 2
        assert temp_db.count_journal_entries(fiscal_period=2) == 2
        assert temp_db.count_journal_entries(fiscal_year=2024, fiscal_period=2) == 1
        assert temp_db.count_journal_entries(status=EntryStatus.POSTED) == 0

    def test_format_entry_number(self):
        assert format_entry_number(7) == "JE-00007"
        assert format_entry_number(123456) == "JE-123456"

    def test_lookup_by_number(self, temp_db, two_accounts):
        created = temp_db.create_journal_entry(_new_entry(two_accounts))
        assert temp_db.get_journal_entry_by_number("JE-00001").id == created.id
        assert temp_db.get_journal_entry_by_number("JE-00002") is None
        assert temp_db.get_journal_entry(created.id + 1) is None

    def test_transition_checks_status_and_version(self, temp_db, two_accounts):
        entry = temp_db.create_journal_entry(_new_entry(two_accounts))

        assert not temp_db.transition_entry_status(entry.id, EntryStatus.POSTED, 1, EntryStatus.REVERSED)
        assert not temp_db.transition_entry_status(entry.id, EntryStatus.DRAFT, 2, EntryStatus.POSTED)
        assert temp_db.transition_entry_status(
            entry.id, EntryStatus.DRAFT, 1, EntryStatus.POSTED, posted_at=datetime(2024, 3, 16, 8, 0)
        )

        posted = temp_db.get_journal_entry(entry.id)
        assert posted.status is EntryStatus.POSTED
        assert posted.version == 2
        assert posted.posted_at == datetime(2024, 3, 16, 8, 0)

    def test_stale_version_loses_on_second_connection(self, temp_db, second_db, two_accounts):
        entry = temp_db.create_journal_entry(_new_entry(two_accounts))
        stale = second_db.get_journal_entry(entry.id)

        assert temp_db.transition_entry_status(entry.id, EntryStatus.DRAFT, 1, EntryStatus.POSTED)
        assert not second_db.transition_entry_status(
            stale.id, stale.status, stale.version, EntryStatus.POSTED
        )
        assert second_db.get_journal_entry(entry.id).version == 2

    def test_record_reversal(self, temp_db, two_accounts):
        entry = temp_db.create_journal_entry(_new_entry(two_accounts))
        temp_db.transition_entry_status(entry.id, EntryStatus.DRAFT, 1, EntryStatus.POSTED)
        posted = temp_db.get_journal_entry(entry.id)

        reversal = temp_db.record_reversal(posted.id, posted.version, build_reversal(posted, "Storno", date(2024, 3, 20)))

        original = temp_db.get_journal_entry(entry.id)
        assert reversal.entry_number == "JE-00002"
        assert reversal.reverses == original.id
        assert reversal.entry_type is EntryType.REVERSAL
        assert original.status is EntryStatus.REVERSED
        assert original.reversed_by == reversal.id
        assert original.version == 3

    def test_record_reversal_stale_version_writes_nothing(self, temp_db, two_accounts):
        entry = temp_db.create_journal_entry(_new_entry(two_accounts))
        temp_db.transition_entry_status(entry.id, EntryStatus.DRAFT, 1, EntryStatus.POSTED)
        posted = temp_db.get_journal_entry(entry.id)

        result = temp_db.record_reversal(posted.id, posted.version + 1, build_reversal(posted, "Storno", date(2024, 3, 20)))

        assert result is None
        assert len(temp_db.list_journal_entries()) == 1
        assert temp_db.get_journal_entry(entry.id).status is EntryStatus.POSTED
        assert temp_db.create_journal_entry(_new_entry(two_accounts)).entry_number == "JE-00002"

    def test_balance_check_constraint(self, temp_db, two_accounts):
        """The schema itself refuses unbalanced headers."""
        entry = temp_db.create_journal_entry(_new_entry(two_accounts))
        session = temp_db._get_session()
        record = session.get(JournalEntryRecord, entry.id)
        record.total_credit_cents = record.total_credit_cents - 1
        with pytest.raises(IntegrityError):
            session.commit()
        session.rollback()

    def test_account_totals(self, temp_db, two_accounts):
        kasse, erloese = two_accounts
        temp_db.create_journal_entry(_new_entry(two_accounts, "10.00"))
        posted = temp_db.create_journal_entry(_new_entry(two_accounts, "500.00", date(2024, 4, 1)))
        temp_db.transition_entry_status(posted.id, EntryStatus.DRAFT, 1, EntryStatus.POSTED)

        totals = temp_db.get_account_totals([EntryStatus.POSTED])
        assert totals == {
            kasse: (Decimal("500.00"), Decimal("0.00")),
            erloese: (Decimal("0.00"), Decimal("500.00")),
        }
        assert temp_db.get_account_totals([EntryStatus.POSTED], as_of=date(2024, 3, 31)) == {}
        assert temp_db.get_account_totals([EntryStatus.DRAFT], account_id=kasse) == {
            kasse: (Decimal("10.00"), Decimal("0.00"))
        }

    def test_account_line_count(self, temp_db, two_accounts):
        kasse, _ = two_accounts
        temp_db.create_journal_entry(_new_entry(two_accounts))
        temp_db.create_journal_entry(_new_entry(two_accounts))
        assert temp_db.get_account_line_count(kasse) == 2
        assert temp_db.get_account_line_count(999) == 0


def test_create_sqlite_database_uses_env_path(tmp_path, monkeypatch):
    db_path = tmp_path / "env.db"
    monkeypatch.setenv("KONTOR_DB_PATH", str(db_path))

    db = create_sqlite_database()
    try:
        assert db.database_url == f"sqlite:///{db_path}"
        assert db_path.exists()
    finally:
        db.disconnect()


def test_create_sqlite_database_default_path(tmp_path, monkeypatch):
    monkeypatch.delenv("KONTOR_DB_PATH", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))

    db = create_sqlite_database()
    try:
        assert db.database_url == f"sqlite:///{tmp_path / '.kontor' / 'kontor.db'}"
    finally:
        db.disconnect()
