"""Tests for journal entry aggregate rules."""

import pytest
from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal

from kontor.domain.entities import (
    Account,
    AccountClass,
    AccountType,
    EntryStatus,
    EntryType,
    JournalEntry,
    JournalEntryLine,
)
from kontor.domain.errors import (
    AccountNotFound,
    EmptyDescription,
    EmptyReversalReason,
    InactiveAccountReferenced,
    InsufficientLines,
    InvalidStateTransition,
    UnbalancedEntry,
)
from kontor.domain.journal_entry import (
    build_journal_entry,
    build_reversal,
    compute_totals,
    ensure_can_post,
    ensure_can_reverse,
    net_effect_by_account,
)

KASSE = 1
ERLOESE = 2
UST = 3


def _account(account_id, number, is_active=True):
    return Account(
        id=account_id,
        account_number=number,
        account_name=f"Konto {number}",
        account_type=AccountType.ASSET,
        account_class=AccountClass.CURRENT_ASSET,
        tax_relevant=False,
        tax_code=None,
        is_active=is_active,
        is_system_account=False,
        description=None,
        created_at=datetime(2024, 1, 1),
        updated_at=datetime(2024, 1, 1),
    )


def _persisted(new_entry, status=EntryStatus.DRAFT, entry_id=10, reversed_by=None):
    return JournalEntry(
        id=entry_id,
        entry_number="JE-00010",
        entry_date=new_entry.entry_date,
        posting_date=new_entry.posting_date,
        fiscal_year=new_entry.fiscal_year,
        fiscal_period=new_entry.fiscal_period,
        entry_type=new_entry.entry_type,
        status=status,
        description=new_entry.description,
        notes=new_entry.notes,
        lines=new_entry.lines,
        total_debit=new_entry.total_debit,
        total_credit=new_entry.total_credit,
        version=1,
        created_at=datetime(2024, 1, 1),
        reversed_by=reversed_by,
    )


@pytest.fixture
def sale_lines():
    return [
        JournalEntryLine.debit(KASSE, Decimal("119.00")),
        JournalEntryLine.credit(ERLOESE, Decimal("100.00")),
        JournalEntryLine.credit(UST, Decimal("19.00")),
    ]


@pytest.fixture
def accounts():
    return {KASSE: _account(KASSE, "1000"), ERLOESE: _account(ERLOESE, "8400"), UST: _account(UST, "1776")}


class TestBuildJournalEntry:
    """Tests for building draft entries."""

    def test_builds_balanced_draft(self, sale_lines):
        entry = build_journal_entry(date(2024, 3, 15), "Barverkauf", sale_lines, EntryType.INVOICE)

        assert entry.status is EntryStatus.DRAFT
        assert entry.total_debit == Decimal("119.00")
        assert entry.total_credit == Decimal("119.00")
        assert entry.entry_type is EntryType.INVOICE
        assert entry.lines == tuple(sale_lines)
        assert entry.posted_at is None
        assert entry.reverses is None

    def test_fiscal_year_and_period_follow_entry_date(self, sale_lines):
        entry = build_journal_entry(date(2023, 11, 30), "Test", sale_lines)
        assert entry.fiscal_year == 2023
        assert entry.fiscal_period == 11

    def test_posting_date_defaults_to_entry_date(self, sale_lines):
        entry = build_journal_entry(date(2024, 1, 31), "Test", sale_lines)
        assert entry.posting_date == date(2024, 1, 31)

        entry = build_journal_entry(date(2024, 1, 31), "Test", sale_lines, posting_date=date(2024, 2, 2))
        assert entry.posting_date == date(2024, 2, 2)

    def test_description_is_stripped(self, sale_lines):
        entry = build_journal_entry(date(2024, 1, 1), "  Miete Januar ", sale_lines)
        assert entry.description == "Miete Januar"

    @pytest.mark.parametrize("description", ["", "   ", None])
    def test_empty_description(self, sale_lines, description):
        with pytest.raises(EmptyDescription) as exc_info:
            build_journal_entry(date(2024, 1, 1), description, sale_lines)
        assert exc_info.value.code == "EMPTY_DESCRIPTION"

    @pytest.mark.parametrize("count", [0, 1])
    def test_insufficient_lines(self, sale_lines, count):
        with pytest.raises(InsufficientLines) as exc_info:
            build_journal_entry(date(2024, 1, 1), "Test", sale_lines[:count])
        assert exc_info.value.line_count == count

    def test_unbalanced(self):
        lines = [
            JournalEntryLine.debit(KASSE, Decimal("500.00")),
            JournalEntryLine.credit(ERLOESE, Decimal("450.00")),
        ]
        with pytest.raises(UnbalancedEntry) as exc_info:
            build_journal_entry(date(2024, 1, 1), "Barverkauf", lines)

        assert exc_info.value.total_debit == Decimal("500.00")
        assert exc_info.value.total_credit == Decimal("450.00")
        assert exc_info.value.code == "UNBALANCED_ENTRY"

    def test_one_cent_difference_is_unbalanced(self):
        lines = [
            JournalEntryLine.debit(KASSE, Decimal("0.10")),
            JournalEntryLine.credit(ERLOESE, Decimal("0.09")),
        ]
        with pytest.raises(UnbalancedEntry):
            build_journal_entry(date(2024, 1, 1), "Test", lines)

    def test_decimal_amounts_sum_exactly(self):
        lines = [JournalEntryLine.debit(KASSE, Decimal("0.10")) for _ in range(3)]
        lines.append(JournalEntryLine.credit(ERLOESE, Decimal("0.30")))
        entry = build_journal_entry(date(2024, 1, 1), "Cent test", lines)
        assert entry.total_debit == entry.total_credit == Decimal("0.30")

    def test_description_checked_before_lines(self):
        with pytest.raises(EmptyDescription):
            build_journal_entry(date(2024, 1, 1), "", [])


class TestEnsureCanPost:
    """Tests for posting preconditions."""

    def test_draft_can_be_posted(self, sale_lines, accounts):
        entry = _persisted(build_journal_entry(date(2024, 1, 1), "Test", sale_lines))
        ensure_can_post(entry, accounts)

    @pytest.mark.parametrize("status", [EntryStatus.POSTED, EntryStatus.REVERSED])
    def test_only_drafts_can_be_posted(self, sale_lines, accounts, status):
        entry = _persisted(build_journal_entry(date(2024, 1, 1), "Test", sale_lines), status=status)
        with pytest.raises(InvalidStateTransition) as exc_info:
            ensure_can_post(entry, accounts)
        assert exc_info.value.current_status == status.value
        assert exc_info.value.action == "post"

    def test_line_sums_are_rechecked(self, sale_lines, accounts):
        """A line changed after creation is caught even though the stored totals still agree."""
        entry = _persisted(build_journal_entry(date(2024, 1, 1), "Test", sale_lines))
        tampered_lines = (entry.lines[0], entry.lines[1].with_credit(Decimal("50.00")), entry.lines[2])
        tampered = replace(entry, lines=tampered_lines)
        assert tampered.total_debit == tampered.total_credit

        with pytest.raises(UnbalancedEntry) as exc_info:
            ensure_can_post(tampered, accounts)
        assert exc_info.value.total_debit == Decimal("119.00")
        assert exc_info.value.total_credit == Decimal("69.00")

    def test_persisted_cash_sale_with_changed_line(self, cash_sale, temp_db):
        changed_credit = cash_sale.lines[1].with_credit(Decimal("450.00"))
        tampered = replace(cash_sale, lines=(cash_sale.lines[0], changed_credit))
        accounts = temp_db.get_accounts(cash_sale.account_ids)

        with pytest.raises(UnbalancedEntry):
            ensure_can_post(tampered, accounts)

    def test_inactive_account(self, sale_lines, accounts):
        entry = _persisted(build_journal_entry(date(2024, 1, 1), "Test", sale_lines))
        accounts[UST] = _account(UST, "1776", is_active=False)
        with pytest.raises(InactiveAccountReferenced, match="1776"):
            ensure_can_post(entry, accounts)

    def test_missing_account(self, sale_lines, accounts):
        entry = _persisted(build_journal_entry(date(2024, 1, 1), "Test", sale_lines))
        del accounts[ERLOESE]
        with pytest.raises(AccountNotFound):
            ensure_can_post(entry, accounts)


class TestBuildReversal:
    """Tests for reversal entries."""

    def test_reversal_swaps_lines(self, sale_lines):
        original = _persisted(
            build_journal_entry(date(2024, 3, 15), "Barverkauf", sale_lines), status=EntryStatus.POSTED
        )
        reversal = build_reversal(original, "Falsches Konto", date(2024, 3, 20))

        assert [line.credit_amount for line in reversal.lines] == [Decimal("119.00"), 0, 0]
        assert [line.debit_amount for line in reversal.lines] == [0, Decimal("100.00"), Decimal("19.00")]
        assert [line.account_id for line in reversal.lines] == [KASSE, ERLOESE, UST]
        assert reversal.total_debit == reversal.total_credit == Decimal("119.00")

    def test_reversal_metadata(self, sale_lines):
        original = _persisted(
            build_journal_entry(date(2024, 3, 15), "Barverkauf", sale_lines), status=EntryStatus.POSTED
        )
        posted_at = datetime(2024, 3, 20, 9, 30)
        reversal = build_reversal(original, " Falsches Konto ", date(2024, 3, 20), posted_at=posted_at)

        assert reversal.entry_type is EntryType.REVERSAL
        assert reversal.status is EntryStatus.POSTED
        assert reversal.posted_at == posted_at
        assert reversal.reverses == original.id
        assert reversal.description == "Reversal of JE-00010: Falsches Konto"
        assert reversal.notes == "Reverses entry JE-00010"
        assert reversal.entry_date == date(2024, 3, 20)
        assert reversal.fiscal_period == 3

    def test_reversal_nets_to_zero(self, sale_lines):
        original = _persisted(
            build_journal_entry(date(2024, 3, 15), "Barverkauf", sale_lines), status=EntryStatus.POSTED
        )
        reversal = build_reversal(original, "Storno", date(2024, 3, 20))

        effect = net_effect_by_account([original, reversal])
        assert effect == {KASSE: Decimal("0.00"), ERLOESE: Decimal("0.00"), UST: Decimal("0.00")}

    def test_reversal_negates_tax_amounts(self):
        lines = [
            JournalEntryLine.debit(KASSE, Decimal("119.00")),
            JournalEntryLine.credit(ERLOESE, Decimal("100.00")),
            JournalEntryLine.credit(UST, Decimal("19.00"), tax_code="USt19", tax_amount=Decimal("19.00")),
        ]
        original = _persisted(build_journal_entry(date(2024, 3, 15), "Barverkauf", lines), status=EntryStatus.POSTED)

        reversal = build_reversal(original, "Storno", date(2024, 3, 20))

        assert reversal.lines[2].tax_code == "USt19"
        assert reversal.lines[2].tax_amount == Decimal("-19.00")
        assert reversal.lines[0].tax_amount is None

    @pytest.mark.parametrize("status", [EntryStatus.DRAFT, EntryStatus.REVERSED])
    def test_only_posted_entries_can_be_reversed(self, sale_lines, status):
        entry = _persisted(build_journal_entry(date(2024, 1, 1), "Test", sale_lines), status=status)
        with pytest.raises(InvalidStateTransition) as exc_info:
            build_reversal(entry, "Storno", date(2024, 1, 2))
        assert exc_info.value.action == "reverse"

    def test_already_reversed_entry_cannot_be_reversed(self, sale_lines):
        entry = _persisted(
            build_journal_entry(date(2024, 1, 1), "Test", sale_lines),
            status=EntryStatus.POSTED,
            reversed_by=11,
        )
        with pytest.raises(InvalidStateTransition):
            ensure_can_reverse(entry)

    @pytest.mark.parametrize("reason", ["", "  ", None])
    def test_reason_required(self, sale_lines, reason):
        entry = _persisted(
            build_journal_entry(date(2024, 1, 1), "Test", sale_lines), status=EntryStatus.POSTED
        )
        with pytest.raises(EmptyReversalReason):
            build_reversal(entry, reason, date(2024, 1, 2))


def test_compute_totals(sale_lines):
    assert compute_totals(sale_lines) == (Decimal("119.00"), Decimal("119.00"))
    assert compute_totals([]) == (Decimal("0.00"), Decimal("0.00"))


def test_net_effect_by_account(sale_lines):
    entry = build_journal_entry(date(2024, 1, 1), "Test", sale_lines)
    assert net_effect_by_account([entry]) == {
        KASSE: Decimal("119.00"),
        ERLOESE: Decimal("-100.00"),
        UST: Decimal("-19.00"),
    }
