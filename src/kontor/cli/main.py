"""Main CLI entry point."""

import click
from kontor.database.factories import create_sqlite_database
from kontor.logging_config import configure_logging

# Import and register all commands at module level
from kontor.cli.commands import account, journal, trial_balance

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides KONTOR_DB_PATH environment variable)",
    envvar="KONTOR_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging level for diagnostics on stderr",
    envvar="KONTOR_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str):
    """Kontor - double-entry ledger for German small businesses.

    Maintain an SKR03 chart of accounts, record balanced journal entries
    (Buchungssätze), post and reverse them, and print a trial balance.
    """
    ctx.ensure_object(dict)
    configure_logging(level=log_level)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
journal.register_commands(cli)
trial_balance.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
