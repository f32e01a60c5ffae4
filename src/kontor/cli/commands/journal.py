"""Journal entry commands."""

import click
from decimal import Decimal
from kontor.cli.account_resolution import resolve_account, resolve_entry_or_exit
from kontor.cli.date_filters import period_options, pop_period_flags, resolve_cli_date_range
from kontor.cli.error_handling import handle_domain_error
from kontor.domain.chart_of_accounts import ChartOfAccountsService
from kontor.domain.entities import EntryStatus, EntryType, JournalEntry, JournalEntryLine
from kontor.domain.errors import DomainError
from kontor.domain.ledger import LedgerService
from kontor.utils.amounts import format_amount, parse_amount
from kontor.utils.date_parser import parse_date

ENTRY_TYPES = [t.value for t in EntryType if t is not EntryType.REVERSAL]
ENTRY_STATUSES = [s.value for s in EntryStatus]


def _format_date(value) -> str:
    return value.strftime("%d.%m.%Y")


def parse_posting(spec: str) -> tuple[str, Decimal]:
    """Split an ``ACCOUNT=AMOUNT`` option value.

    Raises:
        ValueError: If the value has no '=' or the amount is invalid
    """
    account, sep, amount = spec.rpartition("=")
    if not sep or not account.strip():
        raise ValueError(f"Expected ACCOUNT=AMOUNT, got '{spec}'")
    return account.strip(), parse_amount(amount)


def _build_lines(
    chart: ChartOfAccountsService, debits: tuple[str, ...], credits: tuple[str, ...]
) -> list[JournalEntryLine]:
    lines = []
    for specs, factory in ((debits, JournalEntryLine.debit), (credits, JournalEntryLine.credit)):
        for spec in specs:
            account_ref, amount = parse_posting(spec)
            account = resolve_account(chart, account_ref)
            lines.append(factory(account.id, amount))
    return lines


@click.group()
def journal_group():
    """Manage journal entries (Buchungssätze)."""
    pass


@journal_group.command("create")
@click.option("--date", "entry_date", default="today", show_default=True, help="Entry date (31.01.2024, 2024-01-31, today)")
@click.option("--description", required=True, help="Booking text")
@click.option("--debit", "debits", multiple=True, metavar="ACCOUNT=AMOUNT", help="Debit line (Soll), repeatable")
@click.option("--credit", "credits", multiple=True, metavar="ACCOUNT=AMOUNT", help="Credit line (Haben), repeatable")
@click.option("--type", "entry_type", type=click.Choice(ENTRY_TYPES), default="manual", show_default=True, help="Entry type")
@click.option("--notes", help="Notes")
@click.option("--post", "post_now", is_flag=True, help="Post the entry right after creating it")
@click.pass_context
def create_entry(
    ctx,
    entry_date: str,
    description: str,
    debits: tuple[str, ...],
    credits: tuple[str, ...],
    entry_type: str,
    notes: str | None,
    post_now: bool,
) -> None:
    """Create a draft journal entry.

    ACCOUNT is an account number or name. Amounts accept 1234.56 or 1.234,56.

    Examples:
        kontor journal create --description "Barverkauf" --debit 1000=500 --credit 8400=500
        kontor journal create --date 15.01.2024 --description "Büromaterial" \\
            --debit 4930=100 --debit 1576=19 --credit 1200=119
    """
    db = ctx.obj["db"]
    chart = ChartOfAccountsService(db)
    ledger = LedgerService(db, chart)

    try:
        parsed_date = parse_date(entry_date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        lines = _build_lines(chart, debits, credits)
        entry = ledger.create_entry(
            entry_date=parsed_date,
            description=description,
            lines=lines,
            entry_type=EntryType(entry_type),
            notes=notes,
        )
        click.echo(f"Created journal entry {entry.entry_number} (ID: {entry.id}) as draft")
        if post_now:
            entry = ledger.post_entry(entry.id)
            click.echo(f"Posted journal entry {entry.entry_number}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@journal_group.command("list")
@click.option("--status", type=click.Choice(ENTRY_STATUSES), help="Filter by status")
@click.option("--type", "entry_type", type=click.Choice([t.value for t in EntryType]), help="Filter by entry type")
@click.option("--account", help="Only entries with a line on this account (number or name)")
@click.option("--start-date", help="Start date (31.01.2024, 2024-01-31)")
@click.option("--end-date", help="End date")
@click.option("--fiscal-year", type=int, help="Filter by fiscal year")
@click.option("--fiscal-period", type=click.IntRange(1, 12), help="Filter by fiscal period (month)")
@period_options
@click.option("--limit", type=int, default=50, show_default=True, help="Maximum number of entries")
@click.pass_context
def list_entries(
    ctx,
    status: str | None,
    entry_type: str | None,
    account: str | None,
    start_date: str | None,
    end_date: str | None,
    fiscal_year: int | None,
    fiscal_period: int | None,
    limit: int,
    **period_kwargs,
) -> None:
    """List journal entries, newest first.

    Examples:
        kontor journal list --status draft
        kontor journal list --last-quarter --account 1200
        kontor journal list --fiscal-year 2024 --fiscal-period 3
    """
    db = ctx.obj["db"]
    chart = ChartOfAccountsService(db)
    ledger = LedgerService(db, chart)

    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=pop_period_flags(period_kwargs),
    )

    account_id = None
    if account is not None:
        try:
            account_id = resolve_account(chart, account).id
        except DomainError as e:
            handle_domain_error(ctx, e)

    filters = dict(
        status=EntryStatus(status) if status else None,
        start_date=start,
        end_date=end,
        entry_type=EntryType(entry_type) if entry_type else None,
        account_id=account_id,
        fiscal_year=fiscal_year,
        fiscal_period=fiscal_period,
    )
    entries = ledger.list_entries(limit=limit, **filters)
    if not entries:
        click.echo("No journal entries found.")
        return

    click.echo("\nJournal entries:")
    click.echo("-" * 90)
    for entry in entries:
        click.echo(
            f"{entry.entry_number} | {_format_date(entry.entry_date)} | {entry.status.value:8s} | "
            f"{entry.entry_type.value:15s} | {format_amount(entry.total_debit):>14s} | {entry.description}"
        )

    total = ledger.count_entries(**filters)
    if total > len(entries):
        click.echo(f"\nShowing {len(entries)} of {total} entries (use --limit to see more)")


def _echo_entry(entry: JournalEntry, chart: ChartOfAccountsService) -> None:
    click.echo(f"\nJournal entry {entry.entry_number} (ID: {entry.id})")
    click.echo("-" * 70)
    click.echo(f"Date:        {_format_date(entry.entry_date)}")
    click.echo(f"Period:      {entry.fiscal_year}/{entry.fiscal_period:02d}")
    click.echo(f"Type:        {entry.entry_type.value}")
    click.echo(f"Status:      {entry.status.value}")
    click.echo(f"Description: {entry.description}")
    if entry.notes:
        click.echo(f"Notes:       {entry.notes}")
    if entry.posted_at:
        click.echo(f"Posted at:   {entry.posted_at.strftime('%d.%m.%Y %H:%M')} UTC")

    accounts = chart.db.get_accounts(entry.account_ids)
    click.echo("")
    click.echo(f"{'Account':42s} {'Debit':>14s} {'Credit':>14s}")
    for line in entry.lines:
        account = accounts.get(line.account_id)
        label = account.label if account else str(line.account_id)
        debit = format_amount(line.debit_amount) if line.is_debit else ""
        credit = "" if line.is_debit else format_amount(line.credit_amount)
        click.echo(f"{label[:42]:42s} {debit:>14s} {credit:>14s}")
        if line.tax_code or line.tax_amount is not None:
            tax_amount = format_amount(line.tax_amount) if line.tax_amount is not None else "-"
            click.echo(f"    Tax: {line.tax_code or '-'} {tax_amount}")
    click.echo(
        f"{'Total':42s} {format_amount(entry.total_debit):>14s} {format_amount(entry.total_credit):>14s}"
    )


@journal_group.command("show")
@click.argument("entry", metavar="ENTRY")
@click.pass_context
def show_entry(ctx, entry: str) -> None:
    """Show a journal entry with its lines.

    ENTRY can be an entry number (JE-00001) or ID.
    """
    db = ctx.obj["db"]
    chart = ChartOfAccountsService(db)
    ledger = LedgerService(db, chart)

    journal_entry = resolve_entry_or_exit(ctx, ledger, entry)
    _echo_entry(journal_entry, chart)


@journal_group.command("post")
@click.argument("entry", metavar="ENTRY")
@click.pass_context
def post_entry(ctx, entry: str) -> None:
    """Post a draft journal entry.

    Posted entries are final; correct them with 'journal reverse'.
    """
    db = ctx.obj["db"]
    ledger = LedgerService(db)

    journal_entry = resolve_entry_or_exit(ctx, ledger, entry)
    try:
        posted = ledger.post_entry(journal_entry.id)
        click.echo(f"Posted journal entry {posted.entry_number}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@journal_group.command("reverse")
@click.argument("entry", metavar="ENTRY")
@click.option("--reason", required=True, help="Reason for the reversal (Storno)")
@click.option("--date", "reversal_date", help="Date of the reversal entry (default: today)")
@click.pass_context
def reverse_entry(ctx, entry: str, reason: str, reversal_date: str | None) -> None:
    """Reverse a posted journal entry with an offsetting entry.

    Examples:
        kontor journal reverse JE-00001 --reason "Falsches Konto"
    """
    db = ctx.obj["db"]
    ledger = LedgerService(db)

    journal_entry = resolve_entry_or_exit(ctx, ledger, entry)

    parsed_date = None
    if reversal_date is not None:
        try:
            parsed_date = parse_date(reversal_date)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    try:
        reversal = ledger.reverse_entry(journal_entry.id, reason, reversal_date=parsed_date)
        click.echo(
            f"Reversed journal entry {journal_entry.entry_number} with {reversal.entry_number}"
        )
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register journal commands with main CLI."""
    cli.add_command(journal_group, name="journal")
