"""Account management commands."""

import click
from smartledger.cli.error_handling import format_amount, handle_domain_error, resolve_account_or_exit
from smartledger.domain.entities import Account, AccountType
from smartledger.utils.amount_parser import parse_amount

ACCOUNT_TYPES = [t.value.lower() for t in AccountType]


def print_account_tree(accounts: list[Account], parent_id: str | None = None, indent: int = 0) -> None:
    """Recursively print the account tree with balances."""
    children = sorted((a for a in accounts if a.parent_id == parent_id), key=lambda a: a.code)
    for acc in children:
        prefix = "  " * indent
        click.echo(f"{prefix}{acc.code} {acc.name} ({acc.type.value}): {format_amount(acc.balance)}")
        print_account_tree(accounts, acc.id, indent + 1)


@click.group()
def account_group():
    """Manage the chart of accounts."""
    pass


@account_group.command("list")
@click.option("--type", "account_type", type=click.Choice(ACCOUNT_TYPES, case_sensitive=False), help="Only accounts of this type")
@click.pass_context
def list_accounts(ctx, account_type: str | None):
    """List active accounts ordered by code."""
    engine = ctx.obj["engine"]

    accounts = engine.accounts
    if account_type is not None:
        accounts = [a for a in accounts if a.type == AccountType(account_type.upper())]
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 80)
    for acc in sorted(accounts, key=lambda a: a.code):
        click.echo(
            f"{acc.code:>6s} | {acc.name:30s} | {acc.type.value:9s} | "
            f"{format_amount(acc.balance):>15s} | ID: {acc.id}"
        )


@account_group.command("tree")
@click.pass_context
def account_tree(ctx):
    """Show the chart of accounts as a tree with rolled-up balances."""
    engine = ctx.obj["engine"]

    if not engine.accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nChart of accounts:")
    print_account_tree(engine.accounts)


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--code", required=True, help="Account code (e.g., 1130)")
@click.option("--type", "account_type", type=click.Choice(ACCOUNT_TYPES, case_sensitive=False), required=True, help="Account type")
@click.option("--parent", help="Parent account ID, code or name")
@click.option("--budget", help="Optional budget amount")
@click.pass_context
def create_account(ctx, name: str, code: str, account_type: str, parent: str | None, budget: str | None):
    """Create a new account.

    Examples:
        smartledger account create "Petty Cash" --code 1115 --type asset --parent 1100
        smartledger account create "Bank Loans" --code 2300 --type liability --parent Liabilities
    """
    engine = ctx.obj["engine"]

    parent_id = resolve_account_or_exit(ctx, parent) if parent is not None else None

    try:
        budget_amount = parse_amount(budget) if budget is not None else None
        state = engine.add_account(
            name=name,
            code=code,
            account_type=AccountType(account_type.upper()),
            parent_id=parent_id,
            budget=budget_amount,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    created = state.accounts[-1]
    click.echo(f"Created account '{name}' (code {code}, ID: {created.id})")


@account_group.command("update")
@click.argument("account", metavar="ACCOUNT")
@click.option("--name", help="New account name")
@click.option("--code", help="New account code")
@click.option("--type", "account_type", type=click.Choice(ACCOUNT_TYPES, case_sensitive=False), help="New account type")
@click.option("--parent", help="New parent account ID, code or name")
@click.option("--root", is_flag=True, help="Make the account a top-level account")
@click.option("--budget", help="New budget amount")
@click.pass_context
def update_account(
    ctx,
    account: str,
    name: str | None,
    code: str | None,
    account_type: str | None,
    parent: str | None,
    root: bool,
    budget: str | None,
) -> None:
    """Update an account.

    ACCOUNT can be an account ID, code or name. Only the options given are changed.

    Examples:
        smartledger account update 1130 --name "Trade Receivables"
        smartledger account update 2200 --parent 2100
        smartledger account update 2200 --root
    """
    engine = ctx.obj["engine"]

    account_id = resolve_account_or_exit(ctx, account)
    parent_id = resolve_account_or_exit(ctx, parent) if parent is not None else None

    try:
        budget_amount = parse_amount(budget) if budget is not None else None
        engine.update_account(
            account_id,
            name=name,
            code=code,
            account_type=AccountType(account_type.upper()) if account_type else None,
            parent_id=parent_id,
            clear_parent=root,
            budget=budget_amount,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated account {account_id}")


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account.

    ACCOUNT can be an account ID, code or name.

    The account can only be deleted if it has no active sub-accounts and no
    active transactions post to it. Deleted accounts cannot be restored.

    Examples:
        smartledger account delete 2200
        smartledger account delete "Short-term Loans" --yes
    """
    engine = ctx.obj["engine"]

    account_id = resolve_account_or_exit(ctx, account)
    account_obj = engine.state.get_account(account_id)

    if not yes and not click.confirm(f"Are you sure you want to delete account '{account_obj.name}' ({account_obj.code})?"):
        click.echo("Deletion cancelled.")
        return

    try:
        engine.delete_account(account_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deleted account '{account_obj.name}'")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
