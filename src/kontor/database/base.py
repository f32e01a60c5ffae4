"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Iterable
from datetime import date, datetime
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from kontor.domain.entities import (
    Account,
    AccountClass,
    AccountType,
    EntryStatus,
    EntryType,
    JournalEntry,
    NewJournalEntry,
)


class Database(ABC):
    """Abstract database interface for kontor.

    Every write method is atomic: it either commits completely or leaves the
    database unchanged.
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

    # Chart of accounts operations
    @abstractmethod
    def create_account(
        self,
        account_number: str,
        account_name: str,
        account_type: AccountType,
        account_class: AccountClass,
        tax_code: Optional[str] = None,
        description: Optional[str] = None,
        is_system_account: bool = False,
        tax_relevant: bool = False,
    ) -> int:
        """Create an account. Returns account ID.

        Raises:
            DuplicateAccountNumber: If the account number is taken
        """
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def get_account_by_number(self, account_number: str) -> Optional[Account]:
        """Get account by account number."""
        pass

    @abstractmethod
    def get_accounts(self, account_ids: Iterable[int]) -> dict[int, Account]:
        """Get several accounts keyed by ID. Missing IDs are absent from the result."""
        pass

    @abstractmethod
    def list_accounts(
        self,
        account_type: Optional[AccountType] = None,
        account_class: Optional[AccountClass] = None,
        include_inactive: bool = True,
        search: Optional[str] = None,
    ) -> list[Account]:
        """List accounts ordered by account number.

        Args:
            account_type: Optional account type filter
            account_class: Optional account class filter
            include_inactive: If False, only active accounts are returned
            search: Optional case-insensitive substring of number or name
        """
        pass

    @abstractmethod
    def update_account(
        self,
        account_id: int,
        account_name: Optional[str] = None,
        description: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> None:
        """Update account fields that are not None."""
        pass

    @abstractmethod
    def delete_account(self, account_id: int) -> None:
        """Delete an account."""
        pass

    @abstractmethod
    def get_account_line_count(self, account_id: int) -> int:
        """Count journal lines referencing an account."""
        pass

    # Journal entry operations
    @abstractmethod
    def create_journal_entry(self, entry: NewJournalEntry) -> JournalEntry:
        """Persist a validated entry and assign the next entry number."""
        pass

    @abstractmethod
    def get_journal_entry(self, entry_id: int) -> Optional[JournalEntry]:
        """Get journal entry by ID."""
        pass

    @abstractmethod
    def get_journal_entry_by_number(self, entry_number: str) -> Optional[JournalEntry]:
        """Get journal entry by entry number."""
        pass

    @abstractmethod
    def list_journal_entries(
        self,
        status: Optional[EntryStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        entry_type: Optional[EntryType] = None,
        account_id: Optional[int] = None,
        limit: Optional[int] = None,
        offset: int = 0,
        fiscal_year: Optional[int] = None,
        fiscal_period: Optional[int] = None,
    ) -> list[JournalEntry]:
        """List journal entries, newest first."""
        pass

    @abstractmethod
    def count_journal_entries(
        self,
        status: Optional[EntryStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        entry_type: Optional[EntryType] = None,
        account_id: Optional[int] = None,
        fiscal_year: Optional[int] = None,
        fiscal_period: Optional[int] = None,
    ) -> int:
        """Count journal entries matching the same filters as list_journal_entries."""
        pass

    @abstractmethod
    def transition_entry_status(
        self,
        entry_id: int,
        expected_status: EntryStatus,
        expected_version: int,
        new_status: EntryStatus,
        posted_at: Optional[datetime] = None,
    ) -> bool:
        """Change an entry's status if it still has the expected status and version.

        Returns:
            True if the entry was updated, False if another writer got there first
        """
        pass

    @abstractmethod
    def record_reversal(
        self, original_id: int, expected_version: int, reversal: NewJournalEntry
    ) -> Optional[JournalEntry]:
        """Insert a reversal entry and mark the original reversed in one transaction.

        Returns:
            The persisted reversal entry, or None if the original was no longer
            posted at the expected version (nothing is written in that case)
        """
        pass

    @abstractmethod
    def get_account_totals(
        self,
        statuses: Iterable[EntryStatus],
        as_of: Optional[date] = None,
        account_id: Optional[int] = None,
    ) -> dict[int, tuple[Decimal, Decimal]]:
        """Sum debits and credits per account over entries with the given statuses.

        Returns a mapping of account ID to (total_debit, total_credit).
        """
        pass
