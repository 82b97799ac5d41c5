"""Ledger viewing command."""

import click
from spendlens.domain.errors import StorageUnavailableError
from spendlens.domain.ledger import LedgerService
from spendlens.domain.recurring import RecurringService
from spendlens.cli.date_filters import resolve_as_of_date, resolve_cli_date_range
from spendlens.cli.error_handling import handle_domain_error


def _frequency_label(entry) -> str:
    if entry.recurring is None:
        return ""
    return entry.recurring.frequency.value


@click.command("view")
@click.option("--start-date", help="Start date (YYYY-MM-DD)")
@click.option("--end-date", help="End date (YYYY-MM-DD)")
@click.option(
    "--period",
    type=click.Choice(["this-month", "last-month", "this-year", "last-year"]),
    help="Named period instead of explicit dates",
)
@click.option("--as-of", help="Reference date for recurring projection (defaults to today)")
@click.option("--no-reconcile", is_flag=True, help="Skip generating upcoming recurring entries")
@click.pass_context
def view_entries(
    ctx,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
    as_of: str | None,
    no_reconcile: bool,
):
    """View ledger entries, newest first.

    Upcoming recurring entries are generated before listing unless
    --no-reconcile is given.
    """
    db = ctx.obj["db"]
    user_id = ctx.obj["user_id"]
    ledger = LedgerService(db)
    recurring = RecurringService(db)

    today = resolve_as_of_date(ctx, as_of)
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period=period, today=today
    )

    try:
        if not no_reconcile:
            generated = recurring.reconcile(user_id, today=today)
            if generated:
                click.echo(f"Generated {generated} upcoming recurring entr{'ies' if generated != 1 else 'y'}.")
        entries = ledger.list_entries(user_id, start_date=start, end_date=end)
    except (ValueError, StorageUnavailableError) as e:
        handle_domain_error(ctx, e)

    if not entries:
        click.echo("No entries found.")
        return

    click.echo(f"\nFound {len(entries)} entr{'ies' if len(entries) != 1 else 'y'}:")
    click.echo("-" * 100)
    click.echo(
        f"{'ID':<6} {'Date':<12} {'Amount':<12} {'Category':<20} {'Repeats':<10} {'Description':<30}"
    )
    click.echo("-" * 100)

    for entry in entries:
        amount_str = f"${entry.amount:,.2f}"
        description = entry.description[:30]
        if not entry.confirmed:
            description = f"{description} (pending)"
        click.echo(
            f"{entry.id:<6} {entry.date.isoformat():<12} {amount_str:<12} {entry.category[:20]:<20} "
            f"{_frequency_label(entry):<10} {description:<30}"
        )


def register_commands(cli):
    """Register view command with main CLI."""
    cli.add_command(view_entries)
