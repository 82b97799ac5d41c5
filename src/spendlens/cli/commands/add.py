"""Add entry command."""

import click
from spendlens.domain.errors import StorageUnavailableError
from spendlens.domain.ledger import LedgerService
from spendlens.cli.error_handling import handle_domain_error
from spendlens.utils.date_parser import parse_date
from spendlens.utils.amount_parser import parse_amount


@click.command("add")
@click.option(
    "--date",
    "entry_date",
    required=True,
    help="Entry date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option("--amount", required=True, help="Amount (negative for expenses, e.g. -45.20)")
@click.option("--description", required=True, help="Entry description")
@click.option("--category", required=True, help="Category name (e.g., 'Groceries')")
@click.option("--unconfirmed", is_flag=True, help="Add as pending review (excluded from totals)")
@click.pass_context
def add_entry(
    ctx,
    entry_date: str,
    amount: str,
    description: str,
    category: str,
    unconfirmed: bool,
):
    """Add a one-off ledger entry.

    Examples:
        spendlens add --date 2026-02-03 --amount -45.20 --description "Corner Market" --category Groceries
        spendlens add --date today --amount 2500 --description Payroll --category Income
    """
    db = ctx.obj["db"]
    user_id = ctx.obj["user_id"]
    service = LedgerService(db)

    try:
        parsed_date = parse_date(entry_date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        parsed_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        entry_id = service.add_entry(
            user_id=user_id,
            date=parsed_date,
            description=description,
            amount=parsed_amount,
            category=category,
            confirmed=not unconfirmed,
        )
    except (ValueError, StorageUnavailableError) as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created entry {entry_id}")
    click.echo(f"  Date: {parsed_date.isoformat()}")
    click.echo(f"  Amount: ${parsed_amount:,.2f}")
    click.echo(f"  Description: {description}")
    click.echo(f"  Category: {category}")
    if unconfirmed:
        click.echo("  Status: pending review")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_entry)
