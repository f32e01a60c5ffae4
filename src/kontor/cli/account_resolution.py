"""CLI helpers for resolving accounts and journal entries from user input."""

from __future__ import annotations

import click
from kontor.domain.chart_of_accounts import ChartOfAccountsService
from kontor.domain.entities import Account, JournalEntry
from kontor.domain.errors import AccountNotFound, JournalEntryNotFound, ValidationError
from kontor.domain.ledger import LedgerService
from kontor.cli.error_handling import handle_domain_error


def resolve_account(service: ChartOfAccountsService, account: str) -> Account:
    """Resolve an account number or name to an account.

    The account number wins; otherwise the name must match exactly
    (case-insensitive) or be the only substring match.

    Raises:
        AccountNotFound: If nothing matches
        ValidationError: If a name matches several accounts
    """
    account = account.strip()
    by_number = service.get_account_by_number(account)
    if by_number is not None:
        return by_number

    candidates = service.find_by_number_or_name(account)
    exact = [acc for acc in candidates if acc.account_name.lower() == account.lower()]
    if len(exact) == 1:
        return exact[0]
    if len(candidates) == 1:
        return candidates[0]
    if not candidates:
        raise AccountNotFound(account)

    labels = ", ".join(acc.label for acc in candidates[:5])
    raise ValidationError(f"Account '{account}' is ambiguous: {labels}")


def resolve_entry(service: LedgerService, entry: str) -> JournalEntry:
    """Resolve a journal entry number (e.g., JE-00001) or ID.

    Raises:
        JournalEntryNotFound: If nothing matches
    """
    entry = entry.strip()
    if entry.isdigit():
        return service.get_entry(int(entry))
    return service.get_entry_by_number(entry.upper())


def resolve_account_or_exit(
    ctx: click.Context, service: ChartOfAccountsService, account: str
) -> Account:
    """Resolve account number or name, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_account(service, account)
    except (AccountNotFound, ValidationError) as exc:
        handle_domain_error(ctx, exc)


def resolve_entry_or_exit(ctx: click.Context, service: LedgerService, entry: str) -> JournalEntry:
    """Resolve journal entry number or ID, or exit with a CLI error."""
    try:
        return resolve_entry(service, entry)
    except JournalEntryNotFound as exc:
        handle_domain_error(ctx, exc)
