"""Journal transaction commands."""

import click
from smartledger.cli.error_handling import format_amount, handle_domain_error, resolve_account_or_exit
from smartledger.domain.entities import Transaction, TransactionEntry
from smartledger.domain.errors import transaction_not_found
from smartledger.domain.journal import JournalService
from smartledger.domain.reports import filter_transactions
from smartledger.utils.amount_parser import parse_entry_amount
from smartledger.utils.date_parser import parse_iso_date


def print_transaction(txn: Transaction, account_names: dict[str, str], verbose: bool = False) -> None:
    """Print one transaction with its entries."""
    click.echo(f"{txn.id} | {txn.date} | {txn.description} | {format_amount(txn.total_debit)}")
    if not verbose:
        return
    for entry in txn.entries:
        name = account_names.get(entry.account_id, "Unknown account")
        click.echo(
            f"    {name:30s} Dr {format_amount(entry.debit):>15s}  Cr {format_amount(entry.credit):>15s}"
        )
    references = [
        f"{label}: {value}"
        for label, value in (
            ("Receipt", txn.receipt_number),
            ("Check", txn.check_number),
            ("Deposit", txn.deposit_number),
            ("Deleted at", txn.deleted_at),
        )
        if value
    ]
    if references:
        click.echo(f"    {' | '.join(references)}")


def _parse_date_or_exit(ctx, value: str, label: str) -> str:
    try:
        return parse_iso_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def _find_transaction_or_exit(ctx, transaction_id: str, deleted: bool) -> Transaction:
    engine = ctx.obj["engine"]
    txn = engine.state.get_transaction(transaction_id)
    if txn is None or txn.is_deleted != deleted:
        where = "in the trash" if deleted else "among active transactions"
        click.echo(f"Error: {transaction_not_found(transaction_id)} {where}", err=True)
        ctx.exit(1)
    return txn


@click.group()
def transaction_group():
    """Manage journal transactions."""
    pass


@transaction_group.command("add")
@click.option("--date", "txn_date", default="today", help="Transaction date (YYYY-MM-DD or relative like 'today')")
@click.option("--description", required=True, help="Transaction description")
@click.option("--debit", "debits", nargs=2, multiple=True, metavar="ACCOUNT AMOUNT", help="Debit an account (repeatable)")
@click.option("--credit", "credits", nargs=2, multiple=True, metavar="ACCOUNT AMOUNT", help="Credit an account (repeatable)")
@click.option("--receipt", help="Receipt number")
@click.option("--check", "check_number", help="Check number")
@click.option("--deposit", help="Deposit number")
@click.pass_context
def add_transaction(
    ctx,
    txn_date: str,
    description: str,
    debits: tuple[tuple[str, str], ...],
    credits: tuple[tuple[str, str], ...],
    receipt: str | None,
    check_number: str | None,
    deposit: str | None,
) -> None:
    """Post a balanced journal entry.

    Accounts can be given by ID, code or name. Total debits must equal
    total credits.

    Examples:
        smartledger transaction add --description "Capital" --debit 1120 500000 --credit 3100 500000
        smartledger transaction add --date 2024-03-02 --description "Rent" --debit 5100 5000 --credit 1120 5000
    """
    engine = ctx.obj["engine"]
    journal = JournalService(engine)

    iso_date = _parse_date_or_exit(ctx, txn_date, "date")

    entries = []
    try:
        for account, amount in debits:
            entries.append(
                TransactionEntry(account_id=resolve_account_or_exit(ctx, account), debit=parse_entry_amount(amount))
            )
        for account, amount in credits:
            entries.append(
                TransactionEntry(account_id=resolve_account_or_exit(ctx, account), credit=parse_entry_amount(amount))
            )
        state = journal.post(
            date=iso_date,
            description=description,
            entries=entries,
            receipt_number=receipt,
            check_number=check_number,
            deposit_number=deposit,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    txn = state.transactions[-1]
    click.echo(f"Created transaction {txn.id}: {description} ({format_amount(txn.total_debit)})")


@transaction_group.command("list")
@click.option("--search", help="Text to look for in descriptions")
@click.option("--account", help="Only transactions posting to this account (ID, code or name)")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'this month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--verbose", "-v", is_flag=True, help="Show entries and reference numbers")
@click.pass_context
def list_transactions(
    ctx, search: str | None, account: str | None, start_date: str | None, end_date: str | None, verbose: bool
):
    """View active transactions, newest first."""
    engine = ctx.obj["engine"]

    account_id = resolve_account_or_exit(ctx, account) if account is not None else None
    start = _parse_date_or_exit(ctx, start_date, "start date") if start_date else None
    end = _parse_date_or_exit(ctx, end_date, "end date") if end_date else None

    transactions = filter_transactions(
        engine.transactions, search=search, account_id=account_id, date_from=start, date_to=end
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    account_names = {a.id: a.name for a in engine.state.accounts}
    click.echo(f"\nTransactions ({len(transactions)}):")
    click.echo("-" * 80)
    for txn in transactions:
        print_transaction(txn, account_names, verbose)


@transaction_group.command("delete")
@click.argument("transaction_id")
@click.pass_context
def delete_transaction(ctx, transaction_id: str) -> None:
    """Move a transaction to the trash.

    Its entries stop counting towards balances until it is restored.
    """
    engine = ctx.obj["engine"]
    _find_transaction_or_exit(ctx, transaction_id, deleted=False)
    engine.delete_transaction(transaction_id)
    click.echo(f"Moved transaction {transaction_id} to the trash")


@transaction_group.command("restore")
@click.argument("transaction_id")
@click.pass_context
def restore_transaction(ctx, transaction_id: str) -> None:
    """Restore a transaction from the trash."""
    engine = ctx.obj["engine"]
    _find_transaction_or_exit(ctx, transaction_id, deleted=True)
    try:
        engine.restore_transaction(transaction_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Restored transaction {transaction_id}")


@transaction_group.command("purge")
@click.argument("transaction_id")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def purge_transaction(ctx, transaction_id: str, yes: bool) -> None:
    """Permanently delete a transaction. This cannot be undone."""
    engine = ctx.obj["engine"]
    if engine.state.get_transaction(transaction_id) is None:
        click.echo(f"Error: {transaction_not_found(transaction_id)}", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(f"Permanently delete transaction {transaction_id}?"):
        click.echo("Deletion cancelled.")
        return

    engine.permanent_delete_transaction(transaction_id)
    click.echo(f"Permanently deleted transaction {transaction_id}")


@transaction_group.command("trash")
@click.option("--search", help="Text to look for in descriptions")
@click.pass_context
def list_trash(ctx, search: str | None) -> None:
    """List soft-deleted transactions."""
    engine = ctx.obj["engine"]

    transactions = filter_transactions(engine.deleted_transactions, search=search)
    if not transactions:
        click.echo("Trash is empty.")
        return

    account_names = {a.id: a.name for a in engine.state.accounts}
    click.echo(f"\nDeleted transactions ({len(transactions)}):")
    click.echo("-" * 80)
    for txn in transactions:
        print_transaction(txn, account_names, verbose=True)


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
