"""Main CLI entry point."""

import logging

import click
from smartledger.domain.errors import PersistenceError
from smartledger.domain.ledger import LedgerEngine
from smartledger.storage.factories import create_sqlite_store

# Import and register all commands at module level
from smartledger.cli.commands import (
    account,
    transaction,
    report,
    department,
    search,
    check,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides SMARTLEDGER_DB_PATH environment variable)",
    envvar="SMARTLEDGER_DB_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """SmartLedger - double-entry bookkeeping.

    Manage a chart of accounts, post balanced journal entries and review
    balances, the ledger and the balance sheet.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Load the ledger only when actually running a command (not when showing help)
    if ctx.invoked_subcommand is not None:
        store = create_sqlite_store(database_path=db_path)
        ctx.call_on_close(store.close)
        try:
            ctx.obj["engine"] = LedgerEngine.load(store)
        except PersistenceError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)


# Register all commands
account.register_commands(cli)
transaction.register_commands(cli)
report.register_commands(cli)
department.register_commands(cli)
search.register_commands(cli)
check.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
