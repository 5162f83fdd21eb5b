"""Read-only reports built from the engine's active views."""

from decimal import Decimal
from typing import Optional, Sequence

from smartledger.domain.entities import (
    Account,
    AccountType,
    BalanceSheet,
    BalanceSheetSection,
    Department,
    FinancialSummary,
    SearchResults,
    Transaction,
)

MIN_SEARCH_LENGTH = 2


def root_total(accounts: Sequence[Account], account_type: AccountType) -> Decimal:
    """Sum the balances of the root accounts of one type.

    Root balances already include their children, so summing every account
    would count the same money more than once.
    """
    return sum(
        (a.balance for a in accounts if a.type == account_type and a.parent_id is None),
        Decimal("0"),
    )


def financial_summary(accounts: Sequence[Account]) -> FinancialSummary:
    """Build headline totals from active accounts."""
    return FinancialSummary(
        total_assets=root_total(accounts, AccountType.ASSET),
        total_liabilities=root_total(accounts, AccountType.LIABILITY),
        total_equity=root_total(accounts, AccountType.EQUITY),
        total_revenue=root_total(accounts, AccountType.REVENUE),
        total_expenses=root_total(accounts, AccountType.EXPENSE),
    )


def _section(accounts: Sequence[Account], account_type: AccountType) -> BalanceSheetSection:
    members = sorted(
        (a for a in accounts if a.type == account_type and a.parent_id is not None),
        key=lambda a: a.code,
    )
    return BalanceSheetSection(
        account_type=account_type,
        accounts=tuple(members),
        total=root_total(accounts, account_type),
    )


def balance_sheet(accounts: Sequence[Account]) -> BalanceSheet:
    """Build the balance sheet from active accounts.

    Revenue and expense accounts are not closed into equity, so the
    difference between them is reported separately as net income.
    """
    summary = financial_summary(accounts)
    return BalanceSheet(
        assets=_section(accounts, AccountType.ASSET),
        liabilities=_section(accounts, AccountType.LIABILITY),
        equity=_section(accounts, AccountType.EQUITY),
        net_income=summary.net_income,
    )


def filter_transactions(
    transactions: Sequence[Transaction],
    search: Optional[str] = None,
    account_id: Optional[str] = None,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
) -> list[Transaction]:
    """Filter transactions for the ledger view, newest first.

    Args:
        transactions: Transactions to filter
        search: Case-insensitive substring of the description
        account_id: Only transactions with an entry for this account
        date_from: Inclusive lower bound (ISO date)
        date_to: Inclusive upper bound (ISO date)

    Returns:
        Matching transactions sorted by date descending
    """
    needle = search.lower() if search else None

    def matches(txn: Transaction) -> bool:
        if needle is not None and needle not in txn.description.lower():
            return False
        if account_id is not None and not txn.references(account_id):
            return False
        if date_from is not None and txn.date < date_from:
            return False
        if date_to is not None and txn.date > date_to:
            return False
        return True

    return sorted(
        (t for t in transactions if matches(t)), key=lambda t: t.date, reverse=True
    )


def search(
    accounts: Sequence[Account],
    transactions: Sequence[Transaction],
    departments: Sequence[Department],
    query: str,
    limit: int = 5,
) -> SearchResults:
    """Search accounts, transactions and departments at once.

    Queries shorter than two characters return no results.
    """
    query = query.strip()
    if len(query) < MIN_SEARCH_LENGTH:
        return SearchResults()

    needle = query.lower()
    found_accounts = [
        a for a in accounts if needle in a.name.lower() or needle in a.code.lower()
    ]
    found_transactions = [
        t for t in transactions if needle in t.description.lower() or needle in t.id.lower()
    ]
    found_departments = [
        d for d in departments if needle in d.name.lower() or needle in d.manager.lower()
    ]
    return SearchResults(
        accounts=tuple(found_accounts[:limit]),
        transactions=tuple(found_transactions[:limit]),
        departments=tuple(found_departments[:limit]),
    )
