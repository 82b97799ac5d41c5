"""Plan and import-entitlement commands."""

import click
from spendlens.domain.entitlement import EntitlementService
from spendlens.domain.entities import Plan
from spendlens.domain.errors import StorageUnavailableError
from spendlens.cli.date_filters import resolve_as_of_datetime
from spendlens.cli.error_handling import handle_domain_error
from spendlens.utils.date_parser import parse_datetime

PAID_PLANS = [Plan.BASIC.value, Plan.PRO.value]


@click.group("plan")
def plan_group():
    """Inspect and change a user's import plan."""
    pass


@plan_group.command("status")
@click.option("--as-of", help="Reference timestamp (defaults to now)")
@click.pass_context
def status(ctx, as_of: str | None):
    """Show whether another statement import is allowed."""
    db = ctx.obj["db"]
    user_id = ctx.obj["user_id"]
    service = EntitlementService(db)
    now = resolve_as_of_datetime(ctx, as_of)

    try:
        result = service.check_status(user_id, now=now)
    except (ValueError, StorageUnavailableError) as e:
        handle_domain_error(ctx, e)

    click.echo(f"Plan: {result.plan.value if result.plan else 'none'}")
    click.echo(f"Can import: {'yes' if result.can_import else 'no'}")
    click.echo(f"Remaining: {result.remaining}")
    click.echo(f"Limit: {result.limit}")
    click.echo(f"Used this period: {result.usage_this_period}")


@plan_group.command("record-import")
@click.option("--as-of", help="Reference timestamp (defaults to now)")
@click.pass_context
def record_import(ctx, as_of: str | None):
    """Record one completed statement import."""
    db = ctx.obj["db"]
    user_id = ctx.obj["user_id"]
    service = EntitlementService(db)
    now = resolve_as_of_datetime(ctx, as_of)

    try:
        usage = service.record_import(user_id, now=now)
    except (ValueError, StorageUnavailableError) as e:
        handle_domain_error(ctx, e)

    click.echo(f"Recorded import. Remaining: {usage.remaining}")
    if not usage.allowed:
        click.echo("No further imports are available in this period.")


def _apply_plan(ctx, renewal: bool, plan: str, period_end: str, customer: str | None, subscription: str | None):
    db = ctx.obj["db"]
    user_id = ctx.obj["user_id"]
    service = EntitlementService(db)

    try:
        end = parse_datetime(period_end)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    transition = service.plan_renewed if renewal else service.plan_activated
    try:
        record = transition(
            user_id,
            plan,
            end,
            stripe_customer_id=customer,
            stripe_subscription_id=subscription,
        )
    except (ValueError, StorageUnavailableError) as e:
        handle_domain_error(ctx, e)

    verb = "Renewed" if renewal else "Activated"
    click.echo(f"{verb} plan '{record.plan.value}' until {record.period_end.isoformat()}")


@plan_group.command("activate")
@click.argument("plan", type=click.Choice(PAID_PLANS))
@click.option("--period-end", required=True, help="End of the paid period (ISO timestamp)")
@click.option("--customer", help="Billing customer reference")
@click.option("--subscription", help="Billing subscription reference")
@click.pass_context
def activate(ctx, plan: str, period_end: str, customer: str | None, subscription: str | None):
    """Activate a paid plan for the user."""
    _apply_plan(ctx, False, plan, period_end, customer, subscription)


@plan_group.command("renew")
@click.argument("plan", type=click.Choice(PAID_PLANS))
@click.option("--period-end", required=True, help="End of the new paid period (ISO timestamp)")
@click.option("--customer", help="Billing customer reference")
@click.option("--subscription", help="Billing subscription reference")
@click.pass_context
def renew(ctx, plan: str, period_end: str, customer: str | None, subscription: str | None):
    """Renew or change the user's paid plan."""
    _apply_plan(ctx, True, plan, period_end, customer, subscription)


@plan_group.command("cancel")
@click.pass_context
def cancel(ctx):
    """Cancel the user's paid plan. The free trial is not restored."""
    db = ctx.obj["db"]
    user_id = ctx.obj["user_id"]
    service = EntitlementService(db)

    try:
        service.plan_canceled_or_expired(user_id)
    except (ValueError, StorageUnavailableError) as e:
        handle_domain_error(ctx, e)

    click.echo("Plan canceled")


def register_commands(cli):
    """Register plan commands with main CLI."""
    cli.add_command(plan_group)
