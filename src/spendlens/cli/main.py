"""Main CLI entry point."""

import click
from spendlens.database.factories import create_sqlite_database
from spendlens.logging_setup import configure_logging

# Import and register all commands at module level
from spendlens.cli.commands import (
    add,
    entry,
    plan,
    recurring,
    summary,
    view,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides SPENDLENS_DB_PATH environment variable)",
    envvar="SPENDLENS_DB_PATH",
)
@click.option(
    "--user",
    "user_id",
    default="local",
    show_default=True,
    envvar="SPENDLENS_USER",
    help="User whose ledger and plan to operate on",
)
@click.option(
    "--log-level",
    envvar="SPENDLENS_LOG_LEVEL",
    help="Logging level (DEBUG, INFO, WARNING, ...)",
)
@click.pass_context
def cli(ctx, db_path: str | None, user_id: str, log_level: str | None):
    """SpendLens - personal spending ledger.

    Keeps a running ledger of imported statement entries, projects recurring
    bills forward and meters statement imports per billing period.
    """
    ctx.ensure_object(dict)
    configure_logging(log_level)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["user_id"] = user_id
        ctx.call_on_close(db.disconnect)


# Register all commands
add.register_commands(cli)
entry.register_commands(cli)
view.register_commands(cli)
summary.register_commands(cli)
recurring.register_commands(cli)
plan.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
