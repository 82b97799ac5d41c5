"""Entry editing and deletion commands."""

import click
from spendlens.domain.errors import StorageUnavailableError
from spendlens.domain.ledger import LedgerService
from spendlens.cli.error_handling import handle_domain_error
from spendlens.utils.amount_parser import parse_amount
from spendlens.utils.date_parser import parse_date, parse_month


@click.command("edit")
@click.argument("entry_id", type=int)
@click.option("--date", "entry_date", help="New date")
@click.option("--amount", help="New amount")
@click.option("--description", help="New description")
@click.option("--category", help="New category")
@click.pass_context
def edit_entry(
    ctx,
    entry_id: int,
    entry_date: str | None,
    amount: str | None,
    description: str | None,
    category: str | None,
):
    """Edit an entry.

    Changing the description, amount or category of a recurring entry moves
    it out of its series.
    """
    db = ctx.obj["db"]
    user_id = ctx.obj["user_id"]
    service = LedgerService(db)

    if all(v is None for v in (entry_date, amount, description, category)):
        click.echo("Error: Nothing to update. Pass at least one field option.", err=True)
        ctx.exit(1)

    try:
        new_date = parse_date(entry_date) if entry_date else None
        new_amount = parse_amount(amount) if amount else None
        service.update_entry(
            user_id,
            entry_id,
            date=new_date,
            amount=new_amount,
            description=description,
            category=category,
        )
    except (ValueError, StorageUnavailableError) as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated entry {entry_id}")


@click.command("confirm")
@click.argument("entry_ids", type=int, nargs=-1, required=True)
@click.pass_context
def confirm_entries(ctx, entry_ids: tuple[int, ...]):
    """Mark reviewed entries as confirmed so they count in totals."""
    db = ctx.obj["db"]
    user_id = ctx.obj["user_id"]
    service = LedgerService(db)

    try:
        for entry_id in entry_ids:
            service.confirm_entry(user_id, entry_id)
    except (ValueError, StorageUnavailableError) as e:
        handle_domain_error(ctx, e)

    click.echo(f"Confirmed {len(entry_ids)} entr{'ies' if len(entry_ids) != 1 else 'y'}")


@click.command("delete")
@click.argument("entry_id", type=int)
@click.pass_context
def delete_entry(ctx, entry_id: int):
    """Delete a single entry.

    Recurring entries removed this way come back on the next projection;
    use 'spendlens recurring delete' to remove them for good.
    """
    db = ctx.obj["db"]
    user_id = ctx.obj["user_id"]
    service = LedgerService(db)

    try:
        service.delete_entry(user_id, entry_id)
    except (ValueError, StorageUnavailableError) as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deleted entry {entry_id}")


@click.command("delete-month")
@click.argument("month", metavar="YYYY-MM")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_month(ctx, month: str, yes: bool):
    """Delete every entry dated in MONTH (e.g. 2026-02)."""
    db = ctx.obj["db"]
    user_id = ctx.obj["user_id"]
    service = LedgerService(db)

    try:
        year, month_number = parse_month(month)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    if not yes:
        click.confirm(f"Delete all entries in {month}?", abort=True)

    try:
        deleted = service.delete_month(user_id, year, month_number)
    except (ValueError, StorageUnavailableError) as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deleted {deleted} entr{'ies' if deleted != 1 else 'y'} from {month}")


def register_commands(cli):
    """Register entry commands with main CLI."""
    cli.add_command(edit_entry)
    cli.add_command(confirm_entries)
    cli.add_command(delete_entry)
    cli.add_command(delete_month)
