"""Trial balance command."""

import click
from kontor.domain.trial_balance import TrialBalanceService
from kontor.utils.amounts import format_amount
from kontor.utils.date_parser import parse_date


@click.command("trial-balance")
@click.option("--as-of", default="today", show_default=True, help="Cut-off date (31.12.2024, 2024-12-31, today)")
@click.pass_context
def trial_balance(ctx, as_of: str) -> None:
    """Print the trial balance (Summen- und Saldenliste).

    Counts posted entries and reversed originals together with their
    reversals, dated on or before the cut-off date.

    Examples:
        kontor trial-balance
        kontor trial-balance --as-of 31.12.2024
    """
    db = ctx.obj["db"]
    service = TrialBalanceService(db)

    try:
        as_of_date = parse_date(as_of)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    report = service.get_trial_balance(as_of_date)
    click.echo(f"\nTrial balance as of {as_of_date.strftime('%d.%m.%Y')}")
    if not report.rows:
        click.echo("No posted entries found.")
        return

    click.echo("-" * 90)
    click.echo(f"{'Account':40s} {'Debit':>15s} {'Credit':>15s} {'Balance':>15s}")
    click.echo("-" * 90)
    for row in report.rows:
        label = f"{row.account_number} {row.account_name}"
        click.echo(
            f"{label[:40]:40s} {format_amount(row.total_debit):>15s} "
            f"{format_amount(row.total_credit):>15s} {format_amount(row.balance):>15s}"
        )
    click.echo("-" * 90)
    click.echo(
        f"{'Total':40s} {format_amount(report.total_debit):>15s} {format_amount(report.total_credit):>15s}"
    )
    click.echo("Balanced" if report.is_balanced else "NOT BALANCED")


def register_commands(cli):
    """Register trial balance command with main CLI."""
    cli.add_command(trial_balance, name="trial-balance")
