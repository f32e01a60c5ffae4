"""Chart of accounts domain service."""

from typing import Iterable, Optional
from kontor.database.base import Database
from kontor.domain.charts import CHART_TEMPLATES
from kontor.domain.entities import (
    Account,
    AccountClass,
    AccountType,
    SeedResult,
    is_valid_pairing,
)
from kontor.domain.errors import (
    AccountInUse,
    AccountNotFound,
    DuplicateAccountNumber,
    InactiveAccountReferenced,
    InvalidTypeClassPairing,
    UnsupportedChartTemplate,
    ValidationError,
)
from kontor.logging_config import get_logger

logger = get_logger("chart_of_accounts")


class ChartOfAccountsService:
    """Service for managing the chart of accounts.

    The chart is the source of truth for valid posting targets.
    """

    def __init__(self, db: Database):
        """Initialize chart of accounts service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        account_number: str,
        account_name: str,
        account_type: AccountType | str,
        account_class: AccountClass | str,
        description: Optional[str] = None,
        tax_code: Optional[str] = None,
        tax_relevant: Optional[bool] = None,
    ) -> Account:
        """Create a new account.

        Args:
            account_number: Unique account number (e.g., SKR03 "1000")
            account_name: Account name
            account_type: Account type
            account_class: Account class, must fit the account type
            description: Optional description
            tax_code: Optional tax code (e.g., "USt19")
            tax_relevant: Whether bookings on the account matter for VAT;
                defaults to whether a tax code is given

        Returns:
            The created account

        Raises:
            DuplicateAccountNumber: If the account number already exists
            InvalidTypeClassPairing: If the class is not allowed for the type
        """
        account_number = (account_number or "").strip()
        account_name = (account_name or "").strip()
        if not account_number:
            raise ValidationError("Account number is required")
        if not account_name:
            raise ValidationError("Account name is required")

        account_type, account_class = self._coerce_type_and_class(account_type, account_class)
        if not is_valid_pairing(account_type, account_class):
            raise InvalidTypeClassPairing(account_type.value, account_class.value)

        # The unique constraint is authoritative; this only gives a fast answer
        if self.db.get_account_by_number(account_number) is not None:
            raise DuplicateAccountNumber(account_number)

        account_id = self.db.create_account(
            account_number=account_number,
            account_name=account_name,
            account_type=account_type,
            account_class=account_class,
            tax_code=tax_code or None,
            description=description,
            tax_relevant=bool(tax_code) if tax_relevant is None else tax_relevant,
        )
        logger.info("Created account %s %s", account_number, account_name)
        return self.get_account(account_id)

    @staticmethod
    def _coerce_type_and_class(
        account_type: AccountType | str, account_class: AccountClass | str
    ) -> tuple[AccountType, AccountClass]:
        try:
            account_type = AccountType(account_type)
        except ValueError:
            raise ValidationError(f"Unknown account type '{account_type}'")
        try:
            account_class = AccountClass(account_class)
        except ValueError:
            raise ValidationError(f"Unknown account class '{account_class}'")
        return account_type, account_class

    def seed_standard_accounts(self, chart_template: str = "SKR03") -> SeedResult:
        """Insert the accounts of a standard chart, skipping numbers that exist.

        Safe to call repeatedly.

        Args:
            chart_template: Template name (only "SKR03" is available)

        Returns:
            Counts of created and skipped accounts

        Raises:
            UnsupportedChartTemplate: If the template is unknown
        """
        template = CHART_TEMPLATES.get(chart_template.upper())
        if template is None:
            raise UnsupportedChartTemplate(chart_template, tuple(CHART_TEMPLATES))

        created = 0
        skipped = 0
        for standard in template:
            if self.db.get_account_by_number(standard.account_number) is not None:
                skipped += 1
                continue
            try:
                self.db.create_account(
                    account_number=standard.account_number,
                    account_name=standard.account_name,
                    account_type=standard.account_type,
                    account_class=standard.account_class,
                    tax_code=standard.tax_code,
                    description=standard.description,
                    is_system_account=True,
                    tax_relevant=bool(standard.tax_code),
                )
                created += 1
            except DuplicateAccountNumber:
                # Lost a race with a concurrent writer
                skipped += 1

        logger.info(
            "Seeded %s chart: %d created, %d skipped", chart_template.upper(), created, skipped
        )
        return SeedResult(created=created, skipped=skipped)

    def get_account(self, account_id: int) -> Account:
        """Get account by ID.

        Raises:
            AccountNotFound: If the account does not exist
        """
        account = self.db.get_account(account_id)
        if account is None:
            raise AccountNotFound(account_id)
        return account

    def get_account_by_number(self, account_number: str) -> Optional[Account]:
        """Get account by account number, or None if absent."""
        return self.db.get_account_by_number(account_number)

    def list_accounts(
        self,
        account_type: Optional[AccountType] = None,
        account_class: Optional[AccountClass] = None,
        include_inactive: bool = False,
        search: Optional[str] = None,
    ) -> list[Account]:
        """List accounts ordered by account number.

        Args:
            account_type: Optional account type filter
            account_class: Optional account class filter
            include_inactive: If True, deactivated accounts are included
            search: Optional case-insensitive substring of number or name

        Returns:
            List of accounts
        """
        return self.db.list_accounts(
            account_type=account_type,
            account_class=account_class,
            include_inactive=include_inactive,
            search=search,
        )

    def find_by_number_or_name(
        self, query: str, account_type: Optional[AccountType] = None
    ) -> list[Account]:
        """Case-insensitive substring search over account number and name."""
        return self.db.list_accounts(account_type=account_type, include_inactive=True, search=query)

    def require_active_accounts(self, account_ids: Iterable[int]) -> dict[int, Account]:
        """Load accounts and check they can be posted to.

        Raises:
            AccountNotFound: If any account does not exist
            InactiveAccountReferenced: If any account is inactive
        """
        ids = list(dict.fromkeys(account_ids))
        accounts = self.db.get_accounts(ids)
        for account_id in ids:
            account = accounts.get(account_id)
            if account is None:
                raise AccountNotFound(account_id)
            if not account.is_active:
                raise InactiveAccountReferenced(account.account_number)
        return accounts

    def update_account(
        self,
        account_id: int,
        account_name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Account:
        """Rename an account or change its description.

        Number, type and class are immutable once created.
        """
        self.get_account(account_id)
        if account_name is not None and not account_name.strip():
            raise ValidationError("Account name is required")
        if account_name is None and description is None:
            raise ValidationError("No fields to update")

        self.db.update_account(
            account_id=account_id,
            account_name=account_name.strip() if account_name is not None else None,
            description=description,
        )
        return self.get_account(account_id)

    def deactivate_account(self, account_id: int) -> Account:
        """Deactivate an account so it can no longer be posted to."""
        account = self.get_account(account_id)
        if account.is_active:
            self.db.update_account(account_id=account_id, is_active=False)
            logger.info("Deactivated account %s", account.account_number)
        return self.get_account(account_id)

    def activate_account(self, account_id: int) -> Account:
        """Reactivate a deactivated account."""
        account = self.get_account(account_id)
        if not account.is_active:
            self.db.update_account(account_id=account_id, is_active=True)
            logger.info("Activated account %s", account.account_number)
        return self.get_account(account_id)

    def delete_account(self, account_id: int) -> None:
        """Delete an account that no journal line references.

        Raises:
            AccountNotFound: If the account does not exist
            AccountInUse: If journal lines reference the account
        """
        account = self.get_account(account_id)

        line_count = self.db.get_account_line_count(account_id)
        if line_count > 0:
            raise AccountInUse(account.account_number, line_count)

        self.db.delete_account(account_id)
        logger.info("Deleted account %s", account.account_number)
