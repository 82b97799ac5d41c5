"""Recurring series commands."""

import click
from spendlens.domain.entities import Frequency, NewEntry, RecurringRule
from spendlens.domain.errors import StorageUnavailableError
from spendlens.domain.ledger import LedgerService
from spendlens.domain.recurrence import default_anchor_day
from spendlens.domain.recurring import RecurringService
from spendlens.cli.date_filters import resolve_as_of_date
from spendlens.cli.error_handling import handle_domain_error
from spendlens.utils.amount_parser import parse_amount
from spendlens.utils.date_parser import parse_date


@click.group("recurring")
def recurring_group():
    """Manage recurring entries (rent, subscriptions, payroll)."""
    pass


@recurring_group.command("add")
@click.option("--date", "start_date", required=True, help="Date of the first occurrence")
@click.option("--amount", required=True, help="Amount per occurrence (negative for expenses)")
@click.option("--description", required=True, help="Entry description")
@click.option("--category", required=True, help="Category name")
@click.option(
    "--frequency",
    type=click.Choice([f.value for f in Frequency]),
    default=Frequency.MONTHLY.value,
    show_default=True,
    help="How often the entry repeats",
)
@click.option(
    "--anchor-day",
    type=int,
    help="Day of month (monthly) or weekday 0-6 with Sunday=0; defaults from --date",
)
@click.option("--end-date", help="Last date the series may occur on")
@click.option("--as-of", help="Reference date (defaults to today)")
@click.pass_context
def add_recurring(
    ctx,
    start_date: str,
    amount: str,
    description: str,
    category: str,
    frequency: str,
    anchor_day: int | None,
    end_date: str | None,
    as_of: str | None,
):
    """Create a recurring series.

    Every occurrence from --date through the end of the current month (or
    --end-date) is added immediately.

    Examples:
        spendlens recurring add --date 2026-01-01 --amount -1800 --description Rent --category Housing
        spendlens recurring add --date 2026-01-09 --amount 2100 --description Payroll --category Income --frequency bi-weekly
    """
    db = ctx.obj["db"]
    user_id = ctx.obj["user_id"]
    service = RecurringService(db)
    today = resolve_as_of_date(ctx, as_of)

    try:
        first = parse_date(start_date, today=today)
        series_end = parse_date(end_date, today=today) if end_date else None
        parsed_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    freq = Frequency(frequency)
    template = NewEntry(
        date=first,
        description=description,
        amount=parsed_amount,
        category=category,
        recurring=RecurringRule(
            frequency=freq,
            anchor_day=anchor_day if anchor_day is not None else default_anchor_day(first, freq),
            series_end_date=series_end,
        ),
    )

    try:
        ids = service.create_series(user_id, template, today=today)
    except (ValueError, StorageUnavailableError) as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created recurring series '{description}' ({freq.value}) with {len(ids)} entr{'ies' if len(ids) != 1 else 'y'}")


@recurring_group.command("reconcile")
@click.option("--as-of", help="Reference date (defaults to today)")
@click.pass_context
def reconcile(ctx, as_of: str | None):
    """Generate upcoming occurrences of every recurring series."""
    db = ctx.obj["db"]
    user_id = ctx.obj["user_id"]
    service = RecurringService(db)
    today = resolve_as_of_date(ctx, as_of)

    try:
        generated = service.reconcile(user_id, today=today)
    except (ValueError, StorageUnavailableError) as e:
        handle_domain_error(ctx, e)

    click.echo(f"Generated {generated} recurring entr{'ies' if generated != 1 else 'y'}")


@recurring_group.command("delete")
@click.argument("entry_id", type=int)
@click.option("--series", is_flag=True, help="Delete the entire series instead of this occurrence")
@click.pass_context
def delete_recurring(ctx, entry_id: int, series: bool):
    """Delete a recurring occurrence, or with --series the whole series.

    A single deleted occurrence is remembered and never regenerated.
    """
    db = ctx.obj["db"]
    user_id = ctx.obj["user_id"]
    ledger = LedgerService(db)
    service = RecurringService(db)

    try:
        entry = ledger.require_entry(user_id, entry_id)
        if series:
            deleted = service.delete_series(user_id, entry)
            click.echo(f"Deleted {deleted} entr{'ies' if deleted != 1 else 'y'} from series '{entry.description}'")
        else:
            service.delete_occurrence(user_id, entry)
            click.echo(f"Deleted occurrence {entry.date.isoformat()} of '{entry.description}'")
    except (ValueError, StorageUnavailableError) as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register recurring commands with main CLI."""
    cli.add_command(recurring_group)
