"""Double-entry balance recalculation.

Balances are never stored as a source of truth. Every account balance is
derived from the complete list of active transactions and then rolled up
the chart-of-accounts tree, so the result is always fresh relative to the
inputs.
"""

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Iterable, Sequence

from smartledger.domain.entities import Account, AccountType, Transaction

logger = logging.getLogger(__name__)

ZERO = Decimal("0")


def signed_amount(account_type: AccountType, debit: Decimal, credit: Decimal) -> Decimal:
    """Return the effect of a debit/credit pair on an account of the given type."""
    if account_type.is_debit_normal:
        return debit - credit
    return credit - debit


def accumulate_entries(
    transactions: Iterable[Transaction], accounts: Sequence[Account]
) -> dict[str, Decimal]:
    """Sum the signed entries of every active transaction per account.

    Every account gets a slot, deleted or not. Entries that reference an
    unknown account id contribute nothing.

    Args:
        transactions: All transactions, including soft-deleted ones
        accounts: All accounts, including soft-deleted ones

    Returns:
        Mapping of account ID to the account's own (un-rolled) balance
    """
    by_id = {acc.id: acc for acc in accounts}
    totals = {acc.id: ZERO for acc in accounts}

    for txn in transactions:
        if txn.is_deleted:
            continue
        for entry in txn.entries:
            account = by_id.get(entry.account_id)
            if account is None:
                logger.debug(
                    "Skipping entry of transaction %s for unknown account %s",
                    txn.id,
                    entry.account_id,
                )
                continue
            totals[account.id] += signed_amount(account.type, entry.debit, entry.credit)

    return totals


def child_index(accounts: Sequence[Account]) -> dict[str, list[str]]:
    """Map each parent ID to the IDs of its non-deleted direct children."""
    children: dict[str, list[str]] = {}
    for acc in accounts:
        if acc.parent_id is None or acc.is_deleted:
            continue
        children.setdefault(acc.parent_id, []).append(acc.id)
    return children


def roll_up(own: dict[str, Decimal], children: dict[str, list[str]]) -> dict[str, Decimal]:
    """Add the rolled-up balances of children into their parents.

    Uses an explicit post-order traversal so arbitrarily deep trees cannot
    exhaust the interpreter stack. A child reached again while its own
    subtree is still open (a parent cycle) contributes zero at that point.

    Args:
        own: Own balance per account ID
        children: Non-deleted direct children per parent ID

    Returns:
        Rolled-up balance per account ID
    """
    totals: dict[str, Decimal] = {}
    open_nodes: set[str] = set()

    for start in own:
        if start in totals:
            continue
        stack = [(start, False)]
        while stack:
            node, expanded = stack.pop()
            if expanded:
                open_nodes.discard(node)
                subtotal = sum((totals.get(c, ZERO) for c in children.get(node, ())), ZERO)
                totals[node] = own.get(node, ZERO) + subtotal
                continue
            if node in totals or node in open_nodes:
                continue
            open_nodes.add(node)
            stack.append((node, True))
            for child in reversed(children.get(node, ())):
                if child not in totals and child not in open_nodes:
                    stack.append((child, False))

    return totals


def recompute_balances(
    transactions: Sequence[Transaction], accounts: Sequence[Account]
) -> list[Account]:
    """Derive every account balance from the transaction list.

    Pure function: output depends only on the arguments. Any ``balance``
    already present on the input accounts is ignored.

    Args:
        transactions: Complete transaction list (soft-deleted ones are skipped)
        accounts: Complete account list (soft-deleted ones are left out of roll-ups)

    Returns:
        New account list in input order with ``balance`` replaced
    """
    own = accumulate_entries(transactions, accounts)
    totals = roll_up(own, child_index(accounts))
    return [replace(acc, balance=totals.get(acc.id, ZERO)) for acc in accounts]
