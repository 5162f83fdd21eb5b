"""Utility for resolving account references to IDs."""

from typing import Sequence

from smartledger.domain.entities import Account


def resolve_account(accounts: Sequence[Account], account: str) -> str:
    """Resolve an account ID, code or name to an account ID.

    IDs are tried first, then codes, then exact names.

    Args:
        accounts: Accounts to search (normally the active accounts)
        account: Account ID, code or name

    Returns:
        Account ID

    Raises:
        ValueError: If no account matches, or a name matches more than one account
    """
    for acc in accounts:
        if acc.id == account:
            return acc.id

    for acc in accounts:
        if acc.code == account:
            return acc.id

    matches = [acc for acc in accounts if acc.name == account]
    if len(matches) > 1:
        raise ValueError(f"Account name '{account}' is ambiguous; use the account code")
    if matches:
        return matches[0].id

    raise ValueError(f"Account '{account}' not found")
