"""Ledger engine: owns accounts, transactions and departments.

Every mutator builds the next immutable ``LedgerState``, recomputes all
balances from scratch and hands the snapshot to the store. Mutators on IDs
that do not exist leave the state unchanged; callers that need a "not found"
error check with ``state.get_*`` first.
"""

import logging
import uuid
from dataclasses import replace
from datetime import datetime, UTC
from decimal import Decimal
from typing import TYPE_CHECKING, Callable, Optional, Sequence

from smartledger.domain.balances import recompute_balances
from smartledger.domain.entities import (
    Account,
    AccountType,
    Department,
    LedgerSnapshot,
    LedgerState,
    Specialization,
    Transaction,
    TransactionEntry,
)
from smartledger.domain.errors import (
    DeletedAccountReferenceError,
    HasChildrenError,
    HasTransactionsError,
    InvalidParentError,
    PersistenceError,
    ValidationError,
    invalid_parent,
)
from smartledger.domain.seed import default_seed

if TYPE_CHECKING:
    # Storage imports domain entities, so the store type is only needed for hints.
    from smartledger.storage.base import SnapshotStore

logger = logging.getLogger(__name__)

IdFactory = Callable[[str], str]
Clock = Callable[[], str]


def new_id(prefix: str) -> str:
    """Return a fresh identifier such as ``acc-3f9a1c0b2d4e``."""
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def utc_now() -> str:
    """Return the current UTC time as an ISO 8601 string."""
    return datetime.now(UTC).isoformat()


class LedgerEngine:
    """In-process owner of the ledger state."""

    def __init__(
        self,
        snapshot: Optional[LedgerSnapshot] = None,
        store: Optional["SnapshotStore"] = None,
        id_factory: IdFactory = new_id,
        clock: Clock = utc_now,
    ):
        """Initialize the engine.

        Balances in ``snapshot`` are treated as stale and recomputed.

        Args:
            snapshot: Initial records (empty ledger if None)
            store: Optional store that receives a snapshot after each mutation
            id_factory: Callable producing a new ID for a given prefix
            clock: Callable returning the current time as an ISO string
        """
        snapshot = snapshot if snapshot is not None else LedgerSnapshot()
        self.store = store
        self._new_id = id_factory
        self._clock = clock
        self._state = self._build_state(
            snapshot.accounts, snapshot.transactions, snapshot.departments
        )

    @classmethod
    def load(
        cls,
        store: "SnapshotStore",
        seed: Callable[[], LedgerSnapshot] = default_seed,
        **kwargs,
    ) -> "LedgerEngine":
        """Create an engine from the stored snapshot, or from the seed if none exists.

        Args:
            store: Snapshot store to load from and save to
            seed: Factory for the starter ledger used when nothing is stored

        Raises:
            PersistenceError: If the stored snapshot cannot be read
        """
        snapshot = store.load()
        if snapshot is None:
            logger.info("No saved ledger found, starting from the default chart of accounts")
            snapshot = seed()
        return cls(snapshot, store=store, **kwargs)

    # State access
    @property
    def state(self) -> LedgerState:
        return self._state

    @property
    def accounts(self) -> list[Account]:
        """Active accounts."""
        return self._state.active_accounts

    @property
    def transactions(self) -> list[Transaction]:
        """Active transactions."""
        return self._state.active_transactions

    @property
    def deleted_transactions(self) -> list[Transaction]:
        """Soft-deleted transactions, for recovery."""
        return self._state.deleted_transactions

    @property
    def departments(self) -> list[Department]:
        return list(self._state.departments)

    # Transaction operations
    def add_transaction(
        self,
        date: str,
        description: str,
        entries: Sequence[TransactionEntry],
        receipt_number: Optional[str] = None,
        check_number: Optional[str] = None,
        deposit_number: Optional[str] = None,
    ) -> LedgerState:
        """Append a transaction. The new transaction is last in ``state.transactions``.

        Entries are not checked for balance here; see ``JournalService``.
        """
        txn = Transaction(
            id=self._new_id("tx"),
            date=date,
            description=description,
            entries=tuple(entries),
            is_deleted=False,
            receipt_number=receipt_number,
            check_number=check_number,
            deposit_number=deposit_number,
        )
        logger.debug("Adding transaction %s with %d entries", txn.id, len(txn.entries))
        return self._commit(transactions=(*self._state.transactions, txn))

    def delete_transaction(self, transaction_id: str) -> LedgerState:
        """Soft-delete a transaction, removing its entries from all balances."""
        deleted_at = self._clock()
        return self._update_transaction(
            transaction_id, lambda t: replace(t, is_deleted=True, deleted_at=deleted_at)
        )

    def restore_transaction(self, transaction_id: str) -> LedgerState:
        """Bring a soft-deleted transaction back into the balances.

        Raises:
            DeletedAccountReferenceError: If an entry posts to an account that
                was deleted while the transaction was in the trash
        """
        txn = self._state.get_transaction(transaction_id)
        if txn is not None and txn.is_deleted:
            deleted_ids: list[str] = []
            for entry in txn.entries:
                account = self._state.get_account(entry.account_id)
                if account is not None and account.is_deleted and account.id not in deleted_ids:
                    deleted_ids.append(account.id)
            if deleted_ids:
                raise DeletedAccountReferenceError(transaction_id, tuple(deleted_ids))

        return self._update_transaction(
            transaction_id, lambda t: replace(t, is_deleted=False, deleted_at=None)
        )

    def permanent_delete_transaction(self, transaction_id: str) -> LedgerState:
        """Remove a transaction record entirely. Cannot be undone."""
        remaining = tuple(t for t in self._state.transactions if t.id != transaction_id)
        if len(remaining) == len(self._state.transactions):
            logger.warning("Transaction %s not found, nothing purged", transaction_id)
            return self._state
        return self._commit(transactions=remaining)

    def _update_transaction(
        self, transaction_id: str, change: Callable[[Transaction], Transaction]
    ) -> LedgerState:
        if self._state.get_transaction(transaction_id) is None:
            logger.warning("Transaction %s not found, state unchanged", transaction_id)
            return self._state
        transactions = tuple(
            change(t) if t.id == transaction_id else t for t in self._state.transactions
        )
        return self._commit(transactions=transactions)

    # Account operations
    def add_account(
        self,
        name: str,
        code: str,
        account_type: AccountType,
        parent_id: Optional[str] = None,
        budget: Optional[Decimal] = None,
    ) -> LedgerState:
        """Append an account. The new account is last in ``state.accounts``.

        Raises:
            InvalidParentError: If parent_id does not name an active account
        """
        account_id = self._new_id("acc")
        if parent_id is not None:
            self._check_parent(account_id, parent_id)

        account = Account(
            id=account_id,
            name=name,
            code=code,
            type=account_type,
            parent_id=parent_id,
            balance=Decimal("0"),
            is_deleted=False,
            budget=budget,
        )
        logger.debug("Adding account %s (%s)", account.id, account.code)
        return self._commit(accounts=(*self._state.accounts, account))

    def update_account(
        self,
        account_id: str,
        name: Optional[str] = None,
        code: Optional[str] = None,
        account_type: Optional[AccountType] = None,
        parent_id: Optional[str] = None,
        clear_parent: bool = False,
        budget: Optional[Decimal] = None,
    ) -> LedgerState:
        """Update the editable fields of an account.

        Only name, code, type, parent and budget can change; balance and the
        deletion flag are never set through this path.

        Args:
            account_id: Account to update
            name: Optional new name
            code: Optional new code
            account_type: Optional new type
            parent_id: Optional new parent account ID
            clear_parent: If True, make the account a root (parent_id must be None)
            budget: Optional new budget

        Raises:
            ValidationError: If both parent_id and clear_parent are given
            InvalidParentError: If the new parent is missing, deleted, itself or a descendant
        """
        if clear_parent and parent_id is not None:
            raise ValidationError("Cannot set both parent_id and clear_parent")

        account = self._state.get_account(account_id)
        if account is None:
            logger.warning("Account %s not found, state unchanged", account_id)
            return self._state
        if account.is_deleted:
            logger.warning("Account %s is deleted, state unchanged", account_id)
            return self._state

        changes: dict = {}
        if name is not None:
            changes["name"] = name
        if code is not None:
            changes["code"] = code
        if account_type is not None:
            changes["type"] = account_type
        if budget is not None:
            changes["budget"] = budget
        if clear_parent:
            changes["parent_id"] = None
        elif parent_id is not None:
            self._check_parent(account_id, parent_id)
            changes["parent_id"] = parent_id

        updated = replace(account, **changes)
        accounts = tuple(updated if a.id == account_id else a for a in self._state.accounts)
        return self._commit(accounts=accounts)

    def delete_account(self, account_id: str) -> LedgerState:
        """Soft-delete an account that has no active children or transactions.

        Raises:
            HasChildrenError: If any active account has this account as parent
            HasTransactionsError: If any active transaction posts to this account
        """
        account = self._state.get_account(account_id)
        if account is None:
            logger.warning("Account %s not found, state unchanged", account_id)
            return self._state
        if account.is_deleted:
            logger.debug("Account %s is already deleted", account_id)
            return self._state

        child_count = sum(
            1 for a in self._state.accounts if a.parent_id == account_id and not a.is_deleted
        )
        if child_count > 0:
            raise HasChildrenError(account_id, child_count)

        transaction_count = sum(1 for t in self._state.active_transactions if t.references(account_id))
        if transaction_count > 0:
            raise HasTransactionsError(account_id, transaction_count)

        accounts = tuple(
            replace(a, is_deleted=True) if a.id == account_id else a for a in self._state.accounts
        )
        return self._commit(accounts=accounts)

    def _check_parent(self, account_id: str, parent_id: str) -> None:
        """Reject a parent that is missing, deleted, the account itself or below it."""
        parent = self._state.get_account(parent_id)
        if parent is None:
            raise InvalidParentError(invalid_parent(account_id, parent_id, "it does not exist"))
        if parent.is_deleted:
            raise InvalidParentError(invalid_parent(account_id, parent_id, "it is deleted"))
        if parent_id == account_id:
            raise InvalidParentError(
                invalid_parent(account_id, parent_id, "an account cannot be its own parent")
            )

        # Walk up from the proposed parent; meeting the account means a cycle.
        seen = {parent_id}
        current = parent.parent_id
        while current is not None and current not in seen:
            if current == account_id:
                raise InvalidParentError(
                    invalid_parent(account_id, parent_id, "it is a sub-account of this account")
                )
            seen.add(current)
            ancestor = self._state.get_account(current)
            current = ancestor.parent_id if ancestor is not None else None

    # Department operations
    def add_department(
        self,
        name: str,
        manager: str = "",
        description: str = "",
        budget: Decimal = Decimal("0"),
        expenses: Decimal = Decimal("0"),
        specializations: Sequence[Specialization] = (),
    ) -> LedgerState:
        """Append a department. The new department is last in ``state.departments``."""
        department = Department(
            id=self._new_id("dep"),
            name=name,
            manager=manager,
            description=description,
            budget=budget,
            expenses=expenses,
            specializations=tuple(specializations),
        )
        return self._commit(departments=(*self._state.departments, department))

    def update_department(
        self,
        department_id: str,
        name: Optional[str] = None,
        manager: Optional[str] = None,
        description: Optional[str] = None,
        budget: Optional[Decimal] = None,
        expenses: Optional[Decimal] = None,
    ) -> LedgerState:
        """Update department fields that are provided."""
        changes = {
            key: value
            for key, value in (
                ("name", name),
                ("manager", manager),
                ("description", description),
                ("budget", budget),
                ("expenses", expenses),
            )
            if value is not None
        }
        if self._state.get_department(department_id) is None:
            logger.warning("Department %s not found, state unchanged", department_id)
            return self._state
        departments = tuple(
            replace(d, **changes) if d.id == department_id else d for d in self._state.departments
        )
        return self._commit(departments=departments)

    def delete_department(self, department_id: str) -> LedgerState:
        """Remove a department record."""
        remaining = tuple(d for d in self._state.departments if d.id != department_id)
        if len(remaining) == len(self._state.departments):
            logger.warning("Department %s not found, state unchanged", department_id)
            return self._state
        return self._commit(departments=remaining)

    # Internals
    @staticmethod
    def _build_state(
        accounts: Sequence[Account],
        transactions: Sequence[Transaction],
        departments: Sequence[Department],
    ) -> LedgerState:
        return LedgerState(
            accounts=tuple(recompute_balances(transactions, accounts)),
            transactions=tuple(transactions),
            departments=tuple(departments),
        )

    def _commit(
        self,
        accounts: Optional[Sequence[Account]] = None,
        transactions: Optional[Sequence[Transaction]] = None,
        departments: Optional[Sequence[Department]] = None,
    ) -> LedgerState:
        """Recompute balances, install the new state and save it."""
        self._state = self._build_state(
            accounts if accounts is not None else self._state.accounts,
            transactions if transactions is not None else self._state.transactions,
            departments if departments is not None else self._state.departments,
        )
        self._persist()
        return self._state

    def _persist(self) -> None:
        if self.store is None:
            return
        try:
            self.store.save(self._state)
        except PersistenceError:
            # In-memory state stays authoritative for the rest of the session.
            logger.warning("Could not save ledger snapshot", exc_info=True)
