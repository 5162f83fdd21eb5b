"""Explicit integrity check over stored ledger data.

Balance recalculation tolerates dangling references and unbalanced
transactions without raising. This module reports them separately so
they can be reviewed without making recompute fragile.
"""

from typing import Sequence

from smartledger.domain.entities import Account, IntegrityIssue, Transaction
from smartledger.domain.journal import entry_totals

DANGLING_ENTRY = "dangling_entry"
DANGLING_PARENT = "dangling_parent"
ENTRY_ON_DELETED_ACCOUNT = "entry_on_deleted_account"
PARENT_CYCLE = "parent_cycle"
UNBALANCED_TRANSACTION = "unbalanced_transaction"


def _find_cycles(accounts: Sequence[Account]) -> list[tuple[str, ...]]:
    parents = {a.id: a.parent_id for a in accounts}
    cycles = []
    settled: set[str] = set()

    for start in parents:
        path: list[str] = []
        on_path: set[str] = set()
        current = start
        while current is not None and current in parents and current not in settled:
            if current in on_path:
                cycles.append(tuple(path[path.index(current):]))
                break
            path.append(current)
            on_path.add(current)
            current = parents[current]
        settled.update(path)

    return cycles


def check_integrity(
    accounts: Sequence[Account], transactions: Sequence[Transaction]
) -> list[IntegrityIssue]:
    """Report dangling references, parent cycles and unbalanced transactions.

    Soft-deleted transactions may still point at soft-deleted accounts. An
    active transaction posting to a deleted account is reported, since its
    amounts drop out of every report total. Only active transactions are
    checked for balance.

    Args:
        accounts: All accounts, including soft-deleted ones
        transactions: All transactions, including soft-deleted ones

    Returns:
        List of issues, empty when the data is consistent
    """
    issues = []
    known_ids = {a.id for a in accounts}
    deleted_ids = {a.id for a in accounts if a.is_deleted}

    for acc in accounts:
        if acc.parent_id is not None and acc.parent_id not in known_ids:
            issues.append(
                IntegrityIssue(
                    kind=DANGLING_PARENT,
                    record_id=acc.id,
                    message=f"Account {acc.id} has unknown parent {acc.parent_id}",
                    related_ids=(acc.parent_id,),
                )
            )

    for cycle in _find_cycles(accounts):
        issues.append(
            IntegrityIssue(
                kind=PARENT_CYCLE,
                record_id=cycle[0],
                message=f"Accounts form a parent cycle: {' -> '.join(cycle)}",
                related_ids=cycle,
            )
        )

    for txn in transactions:
        for entry in txn.entries:
            if entry.account_id not in known_ids:
                issues.append(
                    IntegrityIssue(
                        kind=DANGLING_ENTRY,
                        record_id=txn.id,
                        message=f"Transaction {txn.id} posts to unknown account {entry.account_id}",
                        related_ids=(entry.account_id,),
                    )
                )
            elif entry.account_id in deleted_ids and not txn.is_deleted:
                issues.append(
                    IntegrityIssue(
                        kind=ENTRY_ON_DELETED_ACCOUNT,
                        record_id=txn.id,
                        message=f"Active transaction {txn.id} posts to deleted account {entry.account_id}",
                        related_ids=(entry.account_id,),
                    )
                )
        if txn.is_deleted:
            continue
        total_debit, total_credit = entry_totals(txn.entries)
        if total_debit != total_credit or total_debit <= 0:
            issues.append(
                IntegrityIssue(
                    kind=UNBALANCED_TRANSACTION,
                    record_id=txn.id,
                    message=(
                        f"Transaction {txn.id} is unbalanced: "
                        f"debits {total_debit}, credits {total_credit}"
                    ),
                )
            )

    return issues
