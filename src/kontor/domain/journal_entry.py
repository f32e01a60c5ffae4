"""Journal entry aggregate rules.

Pure functions over the entities in ``kontor.domain.entities``. They validate
and build entries; persistence and status changes are handled by
``LedgerService``.
"""

from collections import defaultdict
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Mapping, Optional, Sequence

from kontor.domain.entities import (
    ZERO,
    Account,
    EntryStatus,
    EntryType,
    JournalEntry,
    JournalEntryLine,
    NewJournalEntry,
    utcnow,
)
from kontor.domain.errors import (
    AccountNotFound,
    EmptyDescription,
    EmptyReversalReason,
    InactiveAccountReferenced,
    InsufficientLines,
    InvalidStateTransition,
    UnbalancedEntry,
    ValidationError,
)
from kontor.utils.amounts import CENT

MIN_LINES = 2


def compute_totals(lines: Iterable[JournalEntryLine]) -> tuple[Decimal, Decimal]:
    """Return (total_debit, total_credit) over the lines."""
    total_debit = ZERO
    total_credit = ZERO
    for line in lines:
        total_debit += line.debit_amount
        total_credit += line.credit_amount
    return total_debit, total_credit


def _check_balanced(total_debit: Decimal, total_credit: Decimal) -> None:
    if abs(total_debit - total_credit) >= CENT:
        raise UnbalancedEntry(total_debit, total_credit)


def build_journal_entry(
    entry_date: date,
    description: str,
    lines: Sequence[JournalEntryLine],
    entry_type: EntryType = EntryType.MANUAL,
    notes: Optional[str] = None,
    posting_date: Optional[date] = None,
) -> NewJournalEntry:
    """Validate input and build a draft journal entry.

    Args:
        entry_date: Date of the business event
        description: Booking text, must not be blank
        lines: At least two lines; total debits must equal total credits
        entry_type: Kind of entry
        notes: Optional free-form notes
        posting_date: Date of booking, defaults to entry_date

    Returns:
        Unpersisted entry in draft status

    Raises:
        EmptyDescription: If description is blank
        InsufficientLines: If fewer than two lines are given
        UnbalancedEntry: If debits and credits differ
    """
    if not isinstance(entry_date, date):
        raise ValidationError("Entry date is required")

    description = (description or "").strip()
    if not description:
        raise EmptyDescription()

    lines = tuple(lines)
    if len(lines) < MIN_LINES:
        raise InsufficientLines(len(lines))

    total_debit, total_credit = compute_totals(lines)
    _check_balanced(total_debit, total_credit)

    return NewJournalEntry(
        entry_date=entry_date,
        posting_date=posting_date or entry_date,
        fiscal_year=entry_date.year,
        fiscal_period=entry_date.month,
        entry_type=EntryType(entry_type),
        description=description,
        notes=notes or None,
        lines=lines,
        total_debit=total_debit,
        total_credit=total_credit,
    )


def ensure_can_post(entry: JournalEntry, accounts: Mapping[int, Account]) -> None:
    """Check that a persisted entry may move from draft to posted.

    Args:
        entry: Entry to post
        accounts: Accounts referenced by the entry, keyed by ID

    Raises:
        InvalidStateTransition: If the entry is not a draft
        UnbalancedEntry: If the line debits and credits differ
        AccountNotFound: If a referenced account is missing from ``accounts``
        InactiveAccountReferenced: If a referenced account is inactive
    """
    if entry.status != EntryStatus.DRAFT:
        raise InvalidStateTransition(entry.entry_number, entry.status.value, "post")

    _check_balanced(*compute_totals(entry.lines))

    for account_id in entry.account_ids:
        account = accounts.get(account_id)
        if account is None:
            raise AccountNotFound(account_id)
        if not account.is_active:
            raise InactiveAccountReferenced(account.account_number)


def ensure_can_reverse(entry: JournalEntry) -> None:
    """Raise InvalidStateTransition unless the entry is posted and not yet reversed."""
    if entry.status != EntryStatus.POSTED or entry.reversed_by is not None:
        raise InvalidStateTransition(entry.entry_number, entry.status.value, "reverse")


def build_reversal(
    entry: JournalEntry,
    reason: str,
    reversal_date: date,
    posted_at: Optional[datetime] = None,
) -> NewJournalEntry:
    """Build the offsetting entry for a posted journal entry.

    The reversal swaps debit and credit on every line and is created
    directly in posted status.

    Raises:
        InvalidStateTransition: If the entry is not posted
        EmptyReversalReason: If reason is blank
    """
    ensure_can_reverse(entry)

    reason = (reason or "").strip()
    if not reason:
        raise EmptyReversalReason()

    lines = tuple(line.swapped() for line in entry.lines)
    total_debit, total_credit = compute_totals(lines)

    return NewJournalEntry(
        entry_date=reversal_date,
        posting_date=reversal_date,
        fiscal_year=reversal_date.year,
        fiscal_period=reversal_date.month,
        entry_type=EntryType.REVERSAL,
        description=f"Reversal of {entry.entry_number}: {reason}",
        notes=f"Reverses entry {entry.entry_number}",
        lines=lines,
        total_debit=total_debit,
        total_credit=total_credit,
        status=EntryStatus.POSTED,
        posted_at=posted_at or utcnow(),
        reverses=entry.id,
    )


def net_effect_by_account(entries: Iterable[JournalEntry | NewJournalEntry]) -> dict[int, Decimal]:
    """Sum debit minus credit per account over the given entries."""
    effect: dict[int, Decimal] = defaultdict(lambda: ZERO)
    for entry in entries:
        for line in entry.lines:
            effect[line.account_id] += line.debit_amount - line.credit_amount
    return dict(effect)
