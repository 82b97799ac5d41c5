"""Summary command."""

import click
from spendlens.domain.errors import StorageUnavailableError
from spendlens.domain.ledger import LedgerService
from spendlens.cli.date_filters import resolve_cli_date_range
from spendlens.cli.error_handling import handle_domain_error


@click.command("summary")
@click.option("--start-date", help="Start date (YYYY-MM-DD)")
@click.option("--end-date", help="End date (YYYY-MM-DD)")
@click.option(
    "--period",
    type=click.Choice(["this-month", "last-month", "this-year", "last-year"]),
    help="Named period instead of explicit dates",
)
@click.pass_context
def summary(ctx, start_date: str | None, end_date: str | None, period: str | None):
    """Show confirmed spending by category, largest first.

    Examples:
        spendlens summary --period this-month
        spendlens summary --start-date 2026-01-01 --end-date 2026-03-31
    """
    db = ctx.obj["db"]
    user_id = ctx.obj["user_id"]
    service = LedgerService(db)

    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period=period
    )

    try:
        totals = service.category_totals(user_id, start_date=start, end_date=end)
    except (ValueError, StorageUnavailableError) as e:
        handle_domain_error(ctx, e)

    if not totals:
        click.echo("No confirmed expenses found.")
        return

    grand_total = sum(t.total for t in totals)
    click.echo(f"\n{'Category':<30} {'Count':>6} {'Spent':>14} {'Share':>7}")
    click.echo("-" * 60)
    for t in totals:
        share = (t.total / grand_total * 100) if grand_total else 0
        click.echo(f"{t.category[:30]:<30} {t.count:>6} {f'${t.total:,.2f}':>14} {share:>6.1f}%")
    click.echo("-" * 60)
    click.echo(f"{'Total':<30} {'':>6} {f'${grand_total:,.2f}':>14}")


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
