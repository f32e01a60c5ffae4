"""Chart of accounts commands."""

import click
from kontor.cli.account_resolution import resolve_account_or_exit
from kontor.cli.error_handling import handle_domain_error
from kontor.domain.chart_of_accounts import ChartOfAccountsService
from kontor.domain.entities import AccountClass, AccountType
from kontor.domain.errors import DomainError
from kontor.domain.trial_balance import TrialBalanceService
from kontor.utils.amounts import format_amount
from kontor.utils.date_parser import parse_date

ACCOUNT_TYPES = [t.value for t in AccountType]
ACCOUNT_CLASSES = [c.value for c in AccountClass]


@click.group()
def account_group():
    """Manage the chart of accounts (Kontenrahmen)."""
    pass


@account_group.command("create")
@click.argument("number", metavar="ACCOUNT_NUMBER")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--type", "account_type", type=click.Choice(ACCOUNT_TYPES), required=True, help="Account type")
@click.option("--class", "account_class", type=click.Choice(ACCOUNT_CLASSES), required=True, help="Account class")
@click.option("--description", help="Account description")
@click.option("--tax-code", help="Tax code (e.g., USt19, VSt19)")
@click.option(
    "--tax-relevant/--not-tax-relevant",
    default=None,
    help="Mark the account as VAT relevant (default: when a tax code is given)",
)
@click.pass_context
def create_account(
    ctx,
    number: str,
    name: str,
    account_type: str,
    account_class: str,
    description: str | None,
    tax_code: str | None,
    tax_relevant: bool | None,
):
    """Create a new account.

    Examples:
        kontor account create 1210 "Sparkasse" --type asset --class current_asset
        kontor account create 8410 "Erlöse Export" --type revenue --class operating_revenue
    """
    db = ctx.obj["db"]
    service = ChartOfAccountsService(db)

    try:
        account = service.create_account(
            account_number=number,
            account_name=name,
            account_type=account_type,
            account_class=account_class,
            description=description,
            tax_code=tax_code,
            tax_relevant=tax_relevant,
        )
        click.echo(f"Created account {account.label} (ID: {account.id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("seed")
@click.argument("template", default="SKR03", metavar="[TEMPLATE]")
@click.pass_context
def seed_accounts(ctx, template: str):
    """Load a standard chart of accounts (default: SKR03).

    Accounts whose numbers already exist are skipped, so seeding again is safe.
    """
    db = ctx.obj["db"]
    service = ChartOfAccountsService(db)

    try:
        result = service.seed_standard_accounts(template)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Seeded {template.upper()}: {result.created} created, {result.skipped} skipped")


@account_group.command("list")
@click.option("--search", help="Filter by number or name (substring)")
@click.option("--type", "account_type", type=click.Choice(ACCOUNT_TYPES), help="Filter by account type")
@click.option("--class", "account_class", type=click.Choice(ACCOUNT_CLASSES), help="Filter by account class")
@click.option("--all", "include_inactive", is_flag=True, help="Include deactivated accounts")
@click.pass_context
def list_accounts(
    ctx,
    search: str | None,
    account_type: str | None,
    account_class: str | None,
    include_inactive: bool,
):
    """List accounts ordered by account number."""
    db = ctx.obj["db"]
    service = ChartOfAccountsService(db)

    accounts = service.list_accounts(
        account_type=AccountType(account_type) if account_type else None,
        account_class=AccountClass(account_class) if account_class else None,
        include_inactive=include_inactive,
        search=search,
    )
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 80)
    for acc in accounts:
        status = "" if acc.is_active else " (inactive)"
        tax = f" [{acc.tax_code}]" if acc.tax_code else ""
        click.echo(
            f"{acc.account_number:>6s} | {acc.account_name:35s} | {acc.account_type.value:16s}{tax}{status}"
        )


@account_group.command("show")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def show_account(ctx, account: str) -> None:
    """Show account details.

    ACCOUNT can be an account number or name.
    """
    db = ctx.obj["db"]
    service = ChartOfAccountsService(db)
    acc = resolve_account_or_exit(ctx, service, account)

    click.echo(f"\nAccount {acc.label}")
    click.echo("-" * 60)
    click.echo(f"ID:          {acc.id}")
    click.echo(f"Type:        {acc.account_type.value}")
    click.echo(f"Class:       {acc.account_class.value}")
    click.echo(f"Tax code:    {acc.tax_code or '-'}")
    click.echo(f"Tax relevant: {'yes' if acc.tax_relevant else 'no'}")
    click.echo(f"Active:      {'yes' if acc.is_active else 'no'}")
    click.echo(f"System:      {'yes' if acc.is_system_account else 'no'}")
    if acc.description:
        click.echo(f"Description: {acc.description}")


@account_group.command("update")
@click.argument("account", metavar="ACCOUNT")
@click.option("--name", help="New account name")
@click.option("--description", help="New description")
@click.pass_context
def update_account(ctx, account: str, name: str | None, description: str | None) -> None:
    """Rename an account or change its description.

    Examples:
        kontor account update 1200 --name "Bank Sparkasse"
    """
    db = ctx.obj["db"]
    service = ChartOfAccountsService(db)
    acc = resolve_account_or_exit(ctx, service, account)

    try:
        updated = service.update_account(acc.id, account_name=name, description=description)
        click.echo(f"Updated account {updated.label}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("deactivate")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def deactivate_account(ctx, account: str) -> None:
    """Deactivate an account so no new entries can use it."""
    db = ctx.obj["db"]
    service = ChartOfAccountsService(db)
    acc = resolve_account_or_exit(ctx, service, account)

    service.deactivate_account(acc.id)
    click.echo(f"Deactivated account {acc.label}")


@account_group.command("activate")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def activate_account(ctx, account: str) -> None:
    """Reactivate a deactivated account."""
    db = ctx.obj["db"]
    service = ChartOfAccountsService(db)
    acc = resolve_account_or_exit(ctx, service, account)

    service.activate_account(acc.id)
    click.echo(f"Activated account {acc.label}")


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account.

    The account can only be deleted if no journal line references it.
    Deactivate accounts that have bookings instead.
    """
    db = ctx.obj["db"]
    service = ChartOfAccountsService(db)
    acc = resolve_account_or_exit(ctx, service, account)

    if not yes and not click.confirm(f"Are you sure you want to delete account {acc.label}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(acc.id)
        click.echo(f"Deleted account {acc.label}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("balance")
@click.argument("account", metavar="ACCOUNT")
@click.option("--as-of", help="Balance as of date (default: all entries)")
@click.pass_context
def account_balance(ctx, account: str, as_of: str | None) -> None:
    """Show an account's balance on its normal side.

    Examples:
        kontor account balance 1200
        kontor account balance Kasse --as-of 31.12.2024
    """
    db = ctx.obj["db"]
    service = ChartOfAccountsService(db)
    acc = resolve_account_or_exit(ctx, service, account)

    as_of_date = None
    if as_of is not None:
        try:
            as_of_date = parse_date(as_of)
        except ValueError as e:
            click.echo(f"Error: Invalid date format: {e}", err=True)
            ctx.exit(1)

    balance = TrialBalanceService(db).get_account_balance(acc.id, as_of=as_of_date)
    suffix = f" as of {as_of_date.strftime('%d.%m.%Y')}" if as_of_date else ""
    click.echo(f"Balance of {acc.label}{suffix}: {format_amount(balance)}")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
