"""Default starter ledger used when no snapshot has been saved yet."""

from datetime import date
from decimal import Decimal
from typing import Optional

from smartledger.domain.entities import (
    Account,
    AccountType,
    Department,
    LedgerSnapshot,
    Specialization,
    Transaction,
    TransactionEntry,
)

# (id, name, type, parent_id, code)
INITIAL_ACCOUNTS = [
    ("1", "Assets", AccountType.ASSET, None, "1000"),
    ("1.1", "Current Assets", AccountType.ASSET, "1", "1100"),
    ("1.1.1", "Cash on Hand", AccountType.ASSET, "1.1", "1110"),
    ("1.1.2", "Commercial Bank", AccountType.ASSET, "1.1", "1120"),
    ("1.1.3", "Accounts Receivable", AccountType.ASSET, "1.1", "1130"),
    ("1.2", "Fixed Assets", AccountType.ASSET, "1", "1200"),
    ("1.2.1", "Office Furniture & Equipment", AccountType.ASSET, "1.2", "1210"),
    ("1.2.2", "Computer Hardware", AccountType.ASSET, "1.2", "1220"),
    ("2", "Liabilities", AccountType.LIABILITY, None, "2000"),
    ("2.1", "Accounts Payable", AccountType.LIABILITY, "2", "2100"),
    ("2.2", "Short-term Loans", AccountType.LIABILITY, "2", "2200"),
    ("3", "Equity", AccountType.EQUITY, None, "3000"),
    ("3.1", "Paid-in Capital", AccountType.EQUITY, "3", "3100"),
    ("3.2", "Retained Earnings", AccountType.EQUITY, "3", "3200"),
    ("4", "Revenue", AccountType.REVENUE, None, "4000"),
    ("4.1", "Service Sales", AccountType.REVENUE, "4", "4100"),
    ("4.2", "Financial Consulting", AccountType.REVENUE, "4", "4200"),
    ("5", "Expenses", AccountType.EXPENSE, None, "5000"),
    ("5.1", "Head Office Rent", AccountType.EXPENSE, "5", "5100"),
    ("5.2", "Salaries & Wages", AccountType.EXPENSE, "5", "5200"),
    ("5.3", "Utilities & Internet", AccountType.EXPENSE, "5", "5300"),
    ("5.4", "Marketing & Advertising", AccountType.EXPENSE, "5", "5400"),
]

# (id, day of month, description, debit account, credit account, amount)
INITIAL_TRANSACTIONS = [
    ("tx-001", 1, "Company capital deposited at the bank", "1.1.2", "3.1", "500000"),
    ("tx-002", 2, "Office rent for the month", "5.1", "1.1.2", "5000"),
    ("tx-003", 5, "Computers purchased for staff", "1.2.2", "1.1.2", "12000"),
    ("tx-004", 8, "Consulting revenue - client A", "1.1.2", "4.2", "15000"),
    ("tx-005", 12, "Internet and electricity bill", "5.3", "1.1.1", "850"),
    ("tx-006", 15, "Social media advertising campaign", "5.4", "1.1.2", "2500"),
    ("tx-007", 20, "Software services sales", "1.1.2", "4.1", "32000"),
    ("tx-008", 25, "Office furniture bought on credit", "1.2.1", "2.1", "6000"),
    ("tx-009", 28, "Staff salaries for the month", "5.2", "1.1.2", "45000"),
    ("tx-010", 30, "Cash collected from receivables", "1.1.1", "1.1.3", "2000"),
]

INITIAL_DEPARTMENTS = [
    Department(
        id="dep-1",
        name="Information Technology",
        manager="Ahmed Al-Salem",
        description="Infrastructure and software",
        budget=Decimal("150000"),
        expenses=Decimal("85000"),
        specializations=(
            Specialization(id="spec-1-1", name="Software Engineering", active_students=45, revenue=Decimal("120000")),
            Specialization(id="spec-1-2", name="Cyber Security", active_students=30, revenue=Decimal("95000")),
            Specialization(id="spec-1-3", name="Artificial Intelligence", active_students=25, revenue=Decimal("88000")),
        ),
    ),
    Department(
        id="dep-2",
        name="Human Resources",
        manager="Sara Al-Ali",
        description="Staff affairs and payroll",
        budget=Decimal("80000"),
        expenses=Decimal("45000"),
        specializations=(
            Specialization(id="spec-2-1", name="Recruitment"),
            Specialization(id="spec-2-2", name="Training & Development", revenue=Decimal("15000")),
        ),
    ),
    Department(
        id="dep-3",
        name="Marketing & Sales",
        manager="Fahad Al-Mansour",
        description="Product marketing and sales growth",
        budget=Decimal("120000"),
        expenses=Decimal("110000"),
        specializations=(
            Specialization(id="spec-3-1", name="Digital Marketing", revenue=Decimal("250000")),
            Specialization(id="spec-3-2", name="Public Relations"),
        ),
    ),
]


def default_seed(today: Optional[date] = None) -> LedgerSnapshot:
    """Build the starter chart of accounts and example transactions.

    Args:
        today: Date whose month the example transactions are placed in
            (defaults to the current date)

    Returns:
        Snapshot with zero balances; the engine computes them on load
    """
    today = today or date.today()
    month = f"{today.year:04d}-{today.month:02d}"

    accounts = tuple(
        Account(id=acc_id, name=name, code=code, type=account_type, parent_id=parent_id)
        for acc_id, name, account_type, parent_id, code in INITIAL_ACCOUNTS
    )
    # Day 30 does not exist in February; clamp to the 28th.
    transactions = tuple(
        Transaction(
            id=txn_id,
            date=f"{month}-{min(day, 28) if today.month == 2 else day:02d}",
            description=description,
            entries=(
                TransactionEntry(account_id=debit_id, debit=Decimal(amount)),
                TransactionEntry(account_id=credit_id, credit=Decimal(amount)),
            ),
        )
        for txn_id, day, description, debit_id, credit_id, amount in INITIAL_TRANSACTIONS
    )
    return LedgerSnapshot(
        accounts=accounts,
        transactions=transactions,
        departments=tuple(INITIAL_DEPARTMENTS),
    )
