"""Domain model entities for smartledger.

These are pure data classes representing bookkeeping concepts, independent of
how a snapshot is stored. Balances are derived values: they are only ever
produced by the balance recalculation in ``smartledger.domain.balances``.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional


class AccountType(str, Enum):
    """Account classification; determines the balance sign convention."""

    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    REVENUE = "REVENUE"
    EXPENSE = "EXPENSE"

    @property
    def is_debit_normal(self) -> bool:
        """True for accounts that grow with debits (assets and expenses)."""
        return self in (AccountType.ASSET, AccountType.EXPENSE)


class UserRole(str, Enum):
    """Role of an application user."""

    ADMIN = "ADMIN"
    ACCOUNTANT = "ACCOUNTANT"
    VIEWER = "VIEWER"


@dataclass(frozen=True)
class Account:
    """Chart-of-accounts entry."""

    id: str
    name: str
    code: str
    type: AccountType
    parent_id: Optional[str]
    balance: Decimal = Decimal("0")
    is_deleted: bool = False
    budget: Optional[Decimal] = None


@dataclass(frozen=True)
class TransactionEntry:
    """One debit/credit line of a journal transaction."""

    account_id: str
    debit: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")


@dataclass(frozen=True)
class Transaction:
    """Journal transaction made of one or more entries."""

    id: str
    date: str
    description: str
    entries: tuple[TransactionEntry, ...]
    is_deleted: bool = False
    deleted_at: Optional[str] = None
    receipt_number: Optional[str] = None
    check_number: Optional[str] = None
    deposit_number: Optional[str] = None

    @property
    def total_debit(self) -> Decimal:
        return sum((e.debit for e in self.entries), Decimal("0"))

    @property
    def total_credit(self) -> Decimal:
        return sum((e.credit for e in self.entries), Decimal("0"))

    def references(self, account_id: str) -> bool:
        """Return True if any entry posts to the given account."""
        return any(e.account_id == account_id for e in self.entries)


@dataclass(frozen=True)
class Specialization:
    """Specialization offered by a department."""

    id: str
    name: str
    description: Optional[str] = None
    active_students: int = 0
    revenue: Decimal = Decimal("0")


@dataclass(frozen=True)
class Department:
    """Department record. Flat CRUD data without derived state."""

    id: str
    name: str
    manager: str = ""
    description: str = ""
    budget: Decimal = Decimal("0")
    expenses: Decimal = Decimal("0")
    specializations: tuple[Specialization, ...] = ()
    is_deleted: bool = False


@dataclass(frozen=True)
class User:
    """Application user. Held in memory only, never persisted."""

    id: str
    username: str
    full_name: str
    role: UserRole
    email: str
    active: bool = True
    last_login: Optional[str] = None


@dataclass(frozen=True)
class LedgerSnapshot:
    """Full persisted snapshot: every record, including soft-deleted ones."""

    accounts: tuple[Account, ...] = ()
    transactions: tuple[Transaction, ...] = ()
    departments: tuple[Department, ...] = ()


@dataclass(frozen=True)
class LedgerState(LedgerSnapshot):
    """Engine state with the derived views consumers read from."""

    @property
    def active_accounts(self) -> list[Account]:
        return [a for a in self.accounts if not a.is_deleted]

    @property
    def active_transactions(self) -> list[Transaction]:
        return [t for t in self.transactions if not t.is_deleted]

    @property
    def deleted_transactions(self) -> list[Transaction]:
        return [t for t in self.transactions if t.is_deleted]

    def get_account(self, account_id: str) -> Optional[Account]:
        for acc in self.accounts:
            if acc.id == account_id:
                return acc
        return None

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        for txn in self.transactions:
            if txn.id == transaction_id:
                return txn
        return None

    def get_department(self, department_id: str) -> Optional[Department]:
        for dept in self.departments:
            if dept.id == department_id:
                return dept
        return None


@dataclass(frozen=True)
class FinancialSummary:
    """Totals of the root accounts of each type."""

    total_assets: Decimal
    total_liabilities: Decimal
    total_equity: Decimal
    total_revenue: Decimal
    total_expenses: Decimal

    @property
    def net_income(self) -> Decimal:
        return self.total_revenue - self.total_expenses


@dataclass(frozen=True)
class BalanceSheetSection:
    """Accounts of one type with the total of its root accounts."""

    account_type: AccountType
    accounts: tuple[Account, ...]
    total: Decimal


@dataclass(frozen=True)
class BalanceSheet:
    """Assets against liabilities plus equity."""

    assets: BalanceSheetSection
    liabilities: BalanceSheetSection
    equity: BalanceSheetSection
    net_income: Decimal = Decimal("0")

    @property
    def total_liabilities_and_equity(self) -> Decimal:
        return self.liabilities.total + self.equity.total

    @property
    def is_balanced(self) -> bool:
        """Assets equal liabilities, equity and unclosed net income."""
        return self.assets.total == self.total_liabilities_and_equity + self.net_income


@dataclass(frozen=True)
class SearchResults:
    """Matches from a global search across the ledger."""

    accounts: tuple[Account, ...] = ()
    transactions: tuple[Transaction, ...] = ()
    departments: tuple[Department, ...] = ()

    @property
    def total(self) -> int:
        return len(self.accounts) + len(self.transactions) + len(self.departments)


@dataclass(frozen=True)
class IntegrityIssue:
    """A problem found by the integrity check."""

    kind: str
    record_id: str
    message: str
    related_ids: tuple[str, ...] = field(default_factory=tuple)
