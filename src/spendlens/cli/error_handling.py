"""CLI error handling helpers."""

import click

from spendlens.domain.errors import DomainError, StorageUnavailableError


def handle_domain_error(
    ctx: click.Context, error: DomainError | ValueError | StorageUnavailableError
) -> None:
    """Render a domain or storage error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
