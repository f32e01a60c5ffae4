"""Ledger domain service: journal entry lifecycle."""

from datetime import date
from typing import Optional, Sequence

from kontor.database.base import Database
from kontor.domain.chart_of_accounts import ChartOfAccountsService
from kontor.domain.entities import (
    EntryStatus,
    EntryType,
    JournalEntry,
    JournalEntryLine,
    utcnow,
)
from kontor.domain.errors import (
    DomainError,
    InvalidStateTransition,
    JournalEntryNotFound,
    ValidationError,
)
from kontor.domain.journal_entry import build_journal_entry, build_reversal, ensure_can_post
from kontor.logging_config import get_logger

logger = get_logger("ledger")


def _check_fiscal_period(fiscal_period: Optional[int]) -> None:
    if fiscal_period is not None and not 1 <= fiscal_period <= 12:
        raise ValidationError(f"Fiscal period must be between 1 and 12, got {fiscal_period}")


class LedgerService:
    """Service for creating, posting and reversing journal entries."""

    def __init__(self, db: Database, chart: Optional[ChartOfAccountsService] = None):
        """Initialize ledger service.

        Args:
            db: Database instance
            chart: Chart of accounts service, created from db if omitted
        """
        self.db = db
        self.chart = chart or ChartOfAccountsService(db)

    def create_entry(
        self,
        entry_date: date,
        description: str,
        lines: Sequence[JournalEntryLine],
        entry_type: EntryType | str = EntryType.MANUAL,
        notes: Optional[str] = None,
        posting_date: Optional[date] = None,
    ) -> JournalEntry:
        """Create a draft journal entry.

        Args:
            entry_date: Date of the business event
            description: Booking text
            lines: Debit and credit lines
            entry_type: Kind of entry (default manual)
            notes: Optional notes
            posting_date: Optional posting date, defaults to entry_date

        Returns:
            The persisted draft entry with its entry number

        Raises:
            AccountNotFound: If a line references an unknown account
            InactiveAccountReferenced: If a line references an inactive account
            EmptyDescription, InsufficientLines, UnbalancedEntry: On invalid input
        """
        try:
            self.chart.require_active_accounts(line.account_id for line in lines)
            new_entry = build_journal_entry(
                entry_date=entry_date,
                description=description,
                lines=lines,
                entry_type=EntryType(entry_type),
                notes=notes,
                posting_date=posting_date,
            )
        except DomainError as e:
            logger.info("Rejected journal entry: %s (%s)", e, e.code)
            raise

        entry = self.db.create_journal_entry(new_entry)
        logger.info(
            "Created journal entry %s (%s, %s)",
            entry.entry_number,
            entry.entry_type.value,
            entry.total_debit,
        )
        return entry

    def get_entry(self, entry_id: int) -> JournalEntry:
        """Get journal entry by ID.

        Raises:
            JournalEntryNotFound: If the entry does not exist
        """
        entry = self.db.get_journal_entry(entry_id)
        if entry is None:
            raise JournalEntryNotFound(entry_id)
        return entry

    def get_entry_by_number(self, entry_number: str) -> JournalEntry:
        """Get journal entry by entry number (e.g., "JE-00001").

        Raises:
            JournalEntryNotFound: If the entry does not exist
        """
        entry = self.db.get_journal_entry_by_number(entry_number)
        if entry is None:
            raise JournalEntryNotFound(entry_number)
        return entry

    def list_entries(
        self,
        status: Optional[EntryStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None,
        entry_type: Optional[EntryType] = None,
        account_id: Optional[int] = None,
        offset: int = 0,
        fiscal_year: Optional[int] = None,
        fiscal_period: Optional[int] = None,
    ) -> list[JournalEntry]:
        """List journal entries, newest first.

        Args:
            status: Optional status filter
            start_date: Optional start date filter (inclusive)
            end_date: Optional end date filter (inclusive)
            limit: Optional maximum number of entries
            entry_type: Optional entry type filter
            account_id: Only entries with a line on this account
            offset: Number of entries to skip
            fiscal_year: Optional fiscal year filter
            fiscal_period: Optional fiscal period (month, 1-12) filter

        Returns:
            List of journal entries

        Raises:
            ValidationError: If fiscal_period is outside 1-12
        """
        _check_fiscal_period(fiscal_period)
        return self.db.list_journal_entries(
            status=status,
            start_date=start_date,
            end_date=end_date,
            entry_type=entry_type,
            account_id=account_id,
            limit=limit,
            offset=offset,
            fiscal_year=fiscal_year,
            fiscal_period=fiscal_period,
        )

    def count_entries(
        self,
        status: Optional[EntryStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        entry_type: Optional[EntryType] = None,
        account_id: Optional[int] = None,
        fiscal_year: Optional[int] = None,
        fiscal_period: Optional[int] = None,
    ) -> int:
        """Count the entries list_entries would return without limit and offset."""
        _check_fiscal_period(fiscal_period)
        return self.db.count_journal_entries(
            status=status,
            start_date=start_date,
            end_date=end_date,
            entry_type=entry_type,
            account_id=account_id,
            fiscal_year=fiscal_year,
            fiscal_period=fiscal_period,
        )

    def post_entry(self, entry_id: int) -> JournalEntry:
        """Post a draft entry.

        Returns:
            The posted entry

        Raises:
            JournalEntryNotFound: If the entry does not exist
            InvalidStateTransition: If the entry is not a draft, also when a
                concurrent writer changed it first
            UnbalancedEntry: If the stored entry is not balanced
            InactiveAccountReferenced: If an account was deactivated since creation
        """
        entry = self.get_entry(entry_id)
        try:
            accounts = self.db.get_accounts(entry.account_ids)
            ensure_can_post(entry, accounts)
        except DomainError as e:
            logger.info("Rejected posting of %s: %s (%s)", entry.entry_number, e, e.code)
            raise

        posted = self.db.transition_entry_status(
            entry_id,
            expected_status=EntryStatus.DRAFT,
            expected_version=entry.version,
            new_status=EntryStatus.POSTED,
            posted_at=utcnow(),
        )
        if not posted:
            raise self._lost_race(entry_id, "post")

        logger.info("Posted journal entry %s", entry.entry_number)
        return self.get_entry(entry_id)

    def reverse_entry(
        self, entry_id: int, reason: str, reversal_date: Optional[date] = None
    ) -> JournalEntry:
        """Reverse a posted entry with an offsetting entry.

        The reversal is inserted and the original marked reversed in one
        transaction.

        Args:
            entry_id: ID of the posted entry
            reason: Why the entry is reversed
            reversal_date: Entry date of the reversal, defaults to today

        Returns:
            The new reversal entry

        Raises:
            JournalEntryNotFound: If the entry does not exist
            InvalidStateTransition: If the entry is not posted, also when a
                concurrent writer changed it first
            EmptyReversalReason: If reason is blank
        """
        entry = self.get_entry(entry_id)
        try:
            reversal = build_reversal(entry, reason, reversal_date or date.today())
        except DomainError as e:
            logger.info("Rejected reversal of %s: %s (%s)", entry.entry_number, e, e.code)
            raise

        reversal_entry = self.db.record_reversal(entry_id, entry.version, reversal)
        if reversal_entry is None:
            raise self._lost_race(entry_id, "reverse")

        logger.info(
            "Reversed journal entry %s with %s", entry.entry_number, reversal_entry.entry_number
        )
        return reversal_entry

    def _lost_race(self, entry_id: int, action: str) -> InvalidStateTransition:
        current = self.get_entry(entry_id)
        logger.warning(
            "Concurrent update: could not %s %s, status is now '%s' (version %d)",
            action,
            current.entry_number,
            current.status.value,
            current.version,
        )
        return InvalidStateTransition(current.entry_number, current.status.value, action)
