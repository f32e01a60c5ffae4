"""Account balance and trial balance reporting."""

from datetime import date
from decimal import Decimal
from typing import Optional

from kontor.database.base import Database
from kontor.domain.entities import (
    ZERO,
    EntryStatus,
    TrialBalance,
    TrialBalanceRow,
)
from kontor.domain.errors import AccountNotFound

# A reversed original stays on the books next to its posted reversal
REPORTED_STATUSES = (EntryStatus.POSTED, EntryStatus.REVERSED)


class TrialBalanceService:
    """Service for building balances from the journal."""

    def __init__(self, db: Database):
        """Initialize trial balance service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_account_balance(self, account_id: int, as_of: Optional[date] = None) -> Decimal:
        """Get an account's balance on its normal side.

        Debit-normal accounts return debit minus credit, all others credit
        minus debit.

        Args:
            account_id: Account ID
            as_of: Only entries dated on or before this date count

        Raises:
            AccountNotFound: If the account does not exist
        """
        account = self.db.get_account(account_id)
        if account is None:
            raise AccountNotFound(account_id)

        totals = self.db.get_account_totals(REPORTED_STATUSES, as_of=as_of, account_id=account_id)
        total_debit, total_credit = totals.get(account_id, (ZERO, ZERO))

        if account.account_type.is_debit_normal:
            return total_debit - total_credit
        return total_credit - total_debit

    def get_trial_balance(self, as_of: Optional[date] = None) -> TrialBalance:
        """Build the trial balance (Summen- und Saldenliste).

        Args:
            as_of: Cut-off date, defaults to today

        Returns:
            TrialBalance with one row per account that has activity
        """
        as_of = as_of or date.today()
        totals = self.db.get_account_totals(REPORTED_STATUSES, as_of=as_of)
        accounts = self.db.get_accounts(totals.keys())

        rows = []
        for account_id, (total_debit, total_credit) in totals.items():
            if total_debit == 0 and total_credit == 0:
                continue
            account = accounts[account_id]
            rows.append(
                TrialBalanceRow(
                    account_id=account.id,
                    account_number=account.account_number,
                    account_name=account.account_name,
                    account_type=account.account_type,
                    total_debit=total_debit,
                    total_credit=total_credit,
                )
            )

        rows.sort(key=lambda row: row.account_number)
        return TrialBalance(as_of=as_of, rows=tuple(rows))
