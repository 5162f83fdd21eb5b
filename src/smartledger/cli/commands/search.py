"""Global search command."""

import click
from smartledger.cli.error_handling import format_amount
from smartledger.domain.reports import search


@click.command("search")
@click.argument("query")
@click.option("--limit", type=int, default=5, help="Maximum results per kind (default: 5)")
@click.pass_context
def search_ledger(ctx, query: str, limit: int):
    """Search accounts, transactions and departments.

    Examples:
        smartledger search rent
        smartledger search 1120
    """
    engine = ctx.obj["engine"]
    results = search(engine.accounts, engine.transactions, engine.departments, query, limit=limit)

    if results.total == 0:
        click.echo("No results found.")
        return

    if results.accounts:
        click.echo("\nAccounts:")
        for acc in results.accounts:
            click.echo(f"  {acc.code} {acc.name} ({format_amount(acc.balance)})")
    if results.transactions:
        click.echo("\nTransactions:")
        for txn in results.transactions:
            click.echo(f"  {txn.id} {txn.date} {txn.description}")
    if results.departments:
        click.echo("\nDepartments:")
        for dept in results.departments:
            click.echo(f"  {dept.id} {dept.name} ({dept.manager})")


def register_commands(cli):
    """Register search command with main CLI."""
    cli.add_command(search_ledger)
