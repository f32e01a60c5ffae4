"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, including the translation between
Decimal amounts in the domain and integer cents in storage.
"""

from kontor.domain import entities as domain
from kontor.database.models import (
    ChartAccount as ORMAccount,
    JournalEntryRecord as ORMJournalEntry,
    JournalLine as ORMJournalLine,
)
from kontor.utils.amounts import from_cents, to_cents


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy ChartAccount model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        account_number=orm_account.account_number,
        account_name=orm_account.account_name,
        account_type=domain.AccountType(orm_account.account_type),
        account_class=domain.AccountClass(orm_account.account_class),
        tax_relevant=orm_account.tax_relevant,
        tax_code=orm_account.tax_code,
        is_active=orm_account.is_active,
        is_system_account=orm_account.is_system_account,
        description=orm_account.description,
        created_at=orm_account.created_at,
        updated_at=orm_account.updated_at,
    )


def journal_line_to_domain(orm_line: ORMJournalLine) -> domain.JournalEntryLine:
    """Convert SQLAlchemy JournalLine model to domain JournalEntryLine."""
    return domain.JournalEntryLine(
        account_id=orm_line.account_id,
        debit_amount=from_cents(orm_line.debit_cents),
        credit_amount=from_cents(orm_line.credit_cents),
        description=orm_line.description,
        line_number=orm_line.line_number,
        tax_code=orm_line.tax_code,
        tax_amount=from_cents(orm_line.tax_amount_cents) if orm_line.tax_amount_cents is not None else None,
    )


def journal_line_to_orm(line: domain.JournalEntryLine, line_number: int) -> ORMJournalLine:
    """Convert domain JournalEntryLine to a new SQLAlchemy JournalLine."""
    return ORMJournalLine(
        line_number=line_number,
        account_id=line.account_id,
        debit_cents=to_cents(line.debit_amount),
        credit_cents=to_cents(line.credit_amount),
        description=line.description,
        tax_code=line.tax_code,
        tax_amount_cents=to_cents(line.tax_amount) if line.tax_amount is not None else None,
    )


def journal_entry_to_domain(orm_entry: ORMJournalEntry) -> domain.JournalEntry:
    """Convert SQLAlchemy JournalEntryRecord model to domain JournalEntry."""
    return domain.JournalEntry(
        id=orm_entry.id,
        entry_number=orm_entry.entry_number,
        entry_date=orm_entry.entry_date,
        posting_date=orm_entry.posting_date,
        fiscal_year=orm_entry.fiscal_year,
        fiscal_period=orm_entry.fiscal_period,
        entry_type=domain.EntryType(orm_entry.entry_type),
        status=domain.EntryStatus(orm_entry.status),
        description=orm_entry.description,
        notes=orm_entry.notes,
        lines=tuple(journal_line_to_domain(line) for line in orm_entry.lines),
        total_debit=from_cents(orm_entry.total_debit_cents),
        total_credit=from_cents(orm_entry.total_credit_cents),
        version=orm_entry.version,
        created_at=orm_entry.created_at,
        posted_at=orm_entry.posted_at,
        reversed_by=orm_entry.reversed_by,
        reverses=orm_entry.reverses,
    )


def new_journal_entry_to_orm(entry: domain.NewJournalEntry, entry_number: str) -> ORMJournalEntry:
    """Build a SQLAlchemy JournalEntryRecord (with lines) from a validated new entry."""
    return ORMJournalEntry(
        entry_number=entry_number,
        entry_date=entry.entry_date,
        posting_date=entry.posting_date,
        fiscal_year=entry.fiscal_year,
        fiscal_period=entry.fiscal_period,
        entry_type=entry.entry_type.value,
        status=entry.status.value,
        description=entry.description,
        notes=entry.notes,
        total_debit_cents=to_cents(entry.total_debit),
        total_credit_cents=to_cents(entry.total_credit),
        version=1,
        posted_at=entry.posted_at,
        reverses=entry.reverses,
        lines=[journal_line_to_orm(line, number) for number, line in enumerate(entry.lines, start=1)],
    )
