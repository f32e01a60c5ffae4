"""Domain model entities for kontor.

These are pure data classes representing bookkeeping concepts, independent of
the database schema. Amounts are exact two-place Decimals; persistence stores
them as integer cents.
"""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, date
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Optional

from kontor.domain.errors import InvalidLineAmounts
from kontor.utils.amounts import CENT

ZERO = Decimal("0.00")


def utcnow() -> datetime:
    """Timezone-aware current UTC time, used for every stored timestamp."""
    return datetime.now(UTC)


class AccountType(str, Enum):
    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSE = "expense"
    CONTRA_ASSET = "contra_asset"
    CONTRA_LIABILITY = "contra_liability"

    @property
    def is_debit_normal(self) -> bool:
        """True if the account's balance grows with debits."""
        return self in (AccountType.ASSET, AccountType.EXPENSE, AccountType.CONTRA_LIABILITY)


class AccountClass(str, Enum):
    CURRENT_ASSET = "current_asset"
    FIXED_ASSET = "fixed_asset"
    CURRENT_LIABILITY = "current_liability"
    LONG_TERM_LIABILITY = "long_term_liability"
    EQUITY = "equity"
    OPERATING_REVENUE = "operating_revenue"
    OTHER_REVENUE = "other_revenue"
    OPERATING_EXPENSE = "operating_expense"
    OTHER_EXPENSE = "other_expense"


# Account classes offered for each account type
ALLOWED_ACCOUNT_CLASSES: dict[AccountType, frozenset[AccountClass]] = {
    AccountType.ASSET: frozenset({AccountClass.CURRENT_ASSET, AccountClass.FIXED_ASSET}),
    AccountType.CONTRA_ASSET: frozenset({AccountClass.CURRENT_ASSET, AccountClass.FIXED_ASSET}),
    AccountType.LIABILITY: frozenset(
        {AccountClass.CURRENT_LIABILITY, AccountClass.LONG_TERM_LIABILITY}
    ),
    AccountType.CONTRA_LIABILITY: frozenset(
        {AccountClass.CURRENT_LIABILITY, AccountClass.LONG_TERM_LIABILITY}
    ),
    AccountType.EQUITY: frozenset({AccountClass.EQUITY}),
    AccountType.REVENUE: frozenset({AccountClass.OPERATING_REVENUE, AccountClass.OTHER_REVENUE}),
    AccountType.EXPENSE: frozenset({AccountClass.OPERATING_EXPENSE, AccountClass.OTHER_EXPENSE}),
}


def is_valid_pairing(account_type: AccountType, account_class: AccountClass) -> bool:
    """Check whether an account class may be used with an account type."""
    return account_class in ALLOWED_ACCOUNT_CLASSES[account_type]


class EntryType(str, Enum):
    MANUAL = "manual"
    INVOICE = "invoice"
    PAYMENT = "payment"
    EXPENSE = "expense"
    OPENING_BALANCE = "opening_balance"
    CLOSING = "closing"
    ADJUSTMENT = "adjustment"
    REVERSAL = "reversal"


class EntryStatus(str, Enum):
    DRAFT = "draft"
    POSTED = "posted"
    REVERSED = "reversed"


@dataclass(frozen=True)
class Account:
    """Chart of accounts entry."""

    id: int
    account_number: str
    account_name: str
    account_type: AccountType
    account_class: AccountClass
    tax_relevant: bool
    tax_code: Optional[str]
    is_active: bool
    is_system_account: bool
    description: Optional[str]
    created_at: datetime
    updated_at: datetime

    @property
    def label(self) -> str:
        return f"{self.account_number} {self.account_name}"


def _coerce_amount(value, label: str) -> Decimal:
    """Convert a line amount to an exact two-place Decimal.

    Raises:
        InvalidLineAmounts: If the value is not a finite number with at most two decimals
    """
    if not isinstance(value, Decimal):
        try:
            value = Decimal(str(value))
        except InvalidOperation:
            raise InvalidLineAmounts(f"Line {label} '{value}' is not a number")
    if not value.is_finite():
        raise InvalidLineAmounts(f"Line {label} must be a finite number")
    if value.quantize(CENT) != value:
        raise InvalidLineAmounts(f"Line {label} {value} has sub-cent precision")
    return value.quantize(CENT)


@dataclass(frozen=True)
class JournalEntryLine:
    """One debit or credit posting within a journal entry.

    Exactly one of ``debit_amount`` and ``credit_amount`` is nonzero.
    ``tax_amount`` is the tax share of the line (may be negative on reversals).
    """

    account_id: int
    debit_amount: Decimal = ZERO
    credit_amount: Decimal = ZERO
    description: Optional[str] = None
    line_number: Optional[int] = None
    tax_code: Optional[str] = None
    tax_amount: Optional[Decimal] = None

    def __post_init__(self):
        for side in ("debit_amount", "credit_amount"):
            label = side.replace("_", " ")
            value = _coerce_amount(getattr(self, side), label)
            if value < 0:
                raise InvalidLineAmounts(f"Line {label} must not be negative")
            object.__setattr__(self, side, value)
        if self.tax_amount is not None:
            object.__setattr__(self, "tax_amount", _coerce_amount(self.tax_amount, "tax amount"))

        if self.debit_amount > 0 and self.credit_amount > 0:
            raise InvalidLineAmounts("Line cannot have both debit and credit amounts")
        if self.debit_amount == 0 and self.credit_amount == 0:
            raise InvalidLineAmounts("Line must have either a debit or credit amount")

    @classmethod
    def debit(
        cls,
        account_id: int,
        amount: Decimal,
        description: Optional[str] = None,
        tax_code: Optional[str] = None,
        tax_amount: Optional[Decimal] = None,
    ) -> "JournalEntryLine":
        return cls(
            account_id=account_id,
            debit_amount=amount,
            description=description,
            tax_code=tax_code,
            tax_amount=tax_amount,
        )

    @classmethod
    def credit(
        cls,
        account_id: int,
        amount: Decimal,
        description: Optional[str] = None,
        tax_code: Optional[str] = None,
        tax_amount: Optional[Decimal] = None,
    ) -> "JournalEntryLine":
        return cls(
            account_id=account_id,
            credit_amount=amount,
            description=description,
            tax_code=tax_code,
            tax_amount=tax_amount,
        )

    @property
    def is_debit(self) -> bool:
        return self.debit_amount > 0

    @property
    def amount(self) -> Decimal:
        """The nonzero side of the line."""
        return self.debit_amount if self.is_debit else self.credit_amount

    def with_debit(self, amount: Decimal) -> "JournalEntryLine":
        """Return a copy booked as a debit; the credit side is cleared."""
        return replace(self, debit_amount=amount, credit_amount=ZERO)

    def with_credit(self, amount: Decimal) -> "JournalEntryLine":
        """Return a copy booked as a credit; the debit side is cleared."""
        return replace(self, debit_amount=ZERO, credit_amount=amount)

    def swapped(self) -> "JournalEntryLine":
        """Return the offsetting line with debit and credit exchanged and the tax amount negated."""
        return replace(
            self,
            debit_amount=self.credit_amount,
            credit_amount=self.debit_amount,
            tax_amount=-self.tax_amount if self.tax_amount is not None else None,
        )


@dataclass(frozen=True)
class NewJournalEntry:
    """A validated journal entry that has not been persisted yet."""

    entry_date: date
    posting_date: date
    fiscal_year: int
    fiscal_period: int
    entry_type: EntryType
    description: str
    notes: Optional[str]
    lines: tuple[JournalEntryLine, ...]
    total_debit: Decimal
    total_credit: Decimal
    status: EntryStatus = EntryStatus.DRAFT
    posted_at: Optional[datetime] = None
    reverses: Optional[int] = None


@dataclass(frozen=True)
class JournalEntry:
    """Persisted journal entry (Buchungssatz)."""

    id: int
    entry_number: str
    entry_date: date
    posting_date: date
    fiscal_year: int
    fiscal_period: int
    entry_type: EntryType
    status: EntryStatus
    description: str
    notes: Optional[str]
    lines: tuple[JournalEntryLine, ...]
    total_debit: Decimal
    total_credit: Decimal
    version: int
    created_at: datetime
    posted_at: Optional[datetime] = None
    reversed_by: Optional[int] = None
    reverses: Optional[int] = None

    @property
    def is_balanced(self) -> bool:
        return abs(self.total_debit - self.total_credit) < CENT

    @property
    def account_ids(self) -> tuple[int, ...]:
        """Distinct account IDs in line order."""
        return tuple(dict.fromkeys(line.account_id for line in self.lines))


@dataclass(frozen=True)
class SeedResult:
    """Outcome of seeding a standard chart of accounts."""

    created: int
    skipped: int


@dataclass(frozen=True)
class TrialBalanceRow:
    account_id: int
    account_number: str
    account_name: str
    account_type: AccountType
    total_debit: Decimal
    total_credit: Decimal

    @property
    def balance(self) -> Decimal:
        """Debit minus credit."""
        return self.total_debit - self.total_credit


@dataclass(frozen=True)
class TrialBalance:
    as_of: date
    rows: tuple[TrialBalanceRow, ...] = field(default_factory=tuple)

    @property
    def total_debit(self) -> Decimal:
        return sum((row.total_debit for row in self.rows), ZERO)

    @property
    def total_credit(self) -> Decimal:
        return sum((row.total_credit for row in self.rows), ZERO)

    @property
    def is_balanced(self) -> bool:
        return abs(self.total_debit - self.total_credit) < CENT
