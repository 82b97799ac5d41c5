"""CLI helpers for date resolution."""

from datetime import date, datetime

import click

from spendlens.utils.date_parser import get_date_range, parse_date, parse_datetime


def resolve_as_of_date(ctx: click.Context, as_of: str | None) -> date:
    """Return the reference date for a command, or exit on a bad value."""
    if as_of is None:
        return date.today()
    try:
        return parse_date(as_of)
    except ValueError as e:
        click.echo(f"Error: Invalid --as-of date: {e}", err=True)
        ctx.exit(1)


def resolve_as_of_datetime(ctx: click.Context, as_of: str | None) -> datetime | None:
    """Return the reference timestamp for a command (None means now)."""
    if as_of is None:
        return None
    try:
        return parse_datetime(as_of)
    except ValueError as e:
        click.echo(f"Error: Invalid --as-of timestamp: {e}", err=True)
        ctx.exit(1)


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
    today: date | None = None,
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from a named period or explicit dates."""
    if period and (start_date or end_date):
        click.echo(
            "Error: --period cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    if period:
        try:
            return get_date_range(period, today=today)
        except ValueError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)

    start = None
    end = None
    if start_date:
        try:
            start = parse_date(start_date, today=today)
        except ValueError as e:
            click.echo(f"Error: Invalid start date: {e}", err=True)
            ctx.exit(1)

    if end_date:
        try:
            end = parse_date(end_date, today=today)
        except ValueError as e:
            click.echo(f"Error: Invalid end date: {e}", err=True)
            ctx.exit(1)

    return start, end
