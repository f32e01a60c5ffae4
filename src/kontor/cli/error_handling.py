"""CLI error handling helpers."""

import click

from kontor.domain.errors import DomainError
from kontor.logging_config import get_logger

logger = get_logger("cli")


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Print ``Error: <message>`` to stderr and exit with status 1.

    Domain errors also log their machine-readable code at DEBUG level.
    """
    if isinstance(error, DomainError):
        logger.debug("Command failed with %s: %s", error.code, error)
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
