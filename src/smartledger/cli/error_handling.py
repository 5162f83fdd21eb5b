"""CLI error handling helpers."""

import click

from smartledger.domain.errors import DomainError
from smartledger.utils.account_resolver import resolve_account


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def resolve_account_or_exit(ctx: click.Context, account: str) -> str:
    """Resolve an account ID, code or name among active accounts, or exit.

    This keeps error messaging and exit behavior consistent across commands.
    """
    engine = ctx.obj["engine"]
    try:
        return resolve_account(engine.accounts, account)
    except ValueError as e:
        handle_domain_error(ctx, e)


def format_amount(amount) -> str:
    """Format an amount with thousands separators and two decimals."""
    return f"{amount:,.2f}"
