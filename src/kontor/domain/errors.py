"""Shared domain error types.

Every concrete error carries a machine-readable ``code`` so that an API layer
can translate it into a 4xx response without parsing messages.
"""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """

    code = "DOMAIN_ERROR"


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""

    code = "VALIDATION_ERROR"


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""

    code = "NOT_FOUND"


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""

    code = "CONFLICT"


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""

    code = "DEPENDENCY"


# Chart of accounts


class DuplicateAccountNumber(ConflictError):
    code = "DUPLICATE_ACCOUNT_NUMBER"

    def __init__(self, account_number: str):
        self.account_number = account_number
        super().__init__(f"Account number {account_number} already exists")


class InvalidTypeClassPairing(ValidationError):
    code = "INVALID_TYPE_CLASS_PAIRING"

    def __init__(self, account_type: str, account_class: str):
        self.account_type = account_type
        self.account_class = account_class
        super().__init__(
            f"Account class '{account_class}' is not allowed for account type '{account_type}'"
        )


class AccountNotFound(NotFoundError):
    code = "ACCOUNT_NOT_FOUND"

    def __init__(self, account_ref: int | str):
        self.account_ref = account_ref
        super().__init__(f"Account {account_ref} not found")


class AccountInUse(DependencyError):
    code = "ACCOUNT_IN_USE"

    def __init__(self, account_number: str, line_count: int):
        self.account_number = account_number
        self.line_count = line_count
        super().__init__(
            f"Cannot delete account {account_number}: it is referenced by "
            f"{line_count} journal line{'s' if line_count != 1 else ''}. "
            "Deactivate it instead."
        )


class UnsupportedChartTemplate(ValidationError):
    code = "UNSUPPORTED_CHART_TEMPLATE"

    def __init__(self, template: str, supported: tuple[str, ...]):
        self.template = template
        super().__init__(
            f"Chart template '{template}' is not supported (supported: {', '.join(supported)})"
        )


# Journal entries


class InactiveAccountReferenced(ValidationError):
    code = "INACTIVE_ACCOUNT_REFERENCED"

    def __init__(self, account_number: str):
        self.account_number = account_number
        super().__init__(f"Account {account_number} is inactive and cannot be posted to")


class InvalidLineAmounts(ValidationError):
    code = "INVALID_LINE_AMOUNTS"


class UnbalancedEntry(ValidationError):
    code = "UNBALANCED_ENTRY"

    def __init__(self, total_debit: Decimal, total_credit: Decimal):
        self.total_debit = total_debit
        self.total_credit = total_credit
        super().__init__(
            f"Journal entry is not balanced. Debits: {total_debit}, Credits: {total_credit}"
        )


class InsufficientLines(ValidationError):
    code = "INSUFFICIENT_LINES"

    def __init__(self, line_count: int):
        self.line_count = line_count
        super().__init__(f"Journal entry needs at least 2 lines, got {line_count}")


class EmptyDescription(ValidationError):
    code = "EMPTY_DESCRIPTION"

    def __init__(self):
        super().__init__("Journal entry description is required")


class EmptyReversalReason(ValidationError):
    code = "EMPTY_REVERSAL_REASON"

    def __init__(self):
        super().__init__("Reason for reversal is required")


class InvalidStateTransition(ConflictError):
    code = "INVALID_STATE_TRANSITION"

    def __init__(self, entry_number: str, current_status: str, action: str):
        self.entry_number = entry_number
        self.current_status = current_status
        self.action = action
        super().__init__(f"Cannot {action} journal entry {entry_number} in status '{current_status}'")


class JournalEntryNotFound(NotFoundError):
    code = "JOURNAL_ENTRY_NOT_FOUND"

    def __init__(self, entry_ref: int | str):
        self.entry_ref = entry_ref
        super().__init__(f"Journal entry {entry_ref} not found")
