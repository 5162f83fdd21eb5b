"""Tests for the ledger engine mutators and invariants."""

from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from smartledger.domain.entities import AccountType, LedgerSnapshot
from smartledger.domain.errors import (
    DeletedAccountReferenceError,
    HasChildrenError,
    HasTransactionsError,
    InvalidParentError,
    PersistenceError,
    ValidationError,
)
from smartledger.domain.ledger import LedgerEngine
from smartledger.domain.reports import financial_summary
from smartledger.domain.seed import default_seed
from smartledger.storage.base import MemorySnapshotStore, SnapshotStore

from conftest import FIXED_NOW, balances, credit, debit, make_engine


class FailingStore(SnapshotStore):
    """Store whose save always fails."""

    def __init__(self):
        self.attempts = 0

    def load(self):
        return None

    def save(self, snapshot):
        self.attempts += 1
        raise PersistenceError("disk full")


def _ancestors(state, account_id):
    result = set()
    current = state.get_account(account_id).parent_id
    while current is not None:
        result.add(current)
        current = state.get_account(current).parent_id
    return result


class TestCashCapitalScenario:
    """The basic capital contribution lifecycle."""

    def test_post_delete_restore_purge(self, cash_capital_engine):
        engine = cash_capital_engine

        state = engine.add_transaction(
            "2024-03-01", "Capital contribution", [debit("cash", 500000), credit("capital", 500000)]
        )
        txn_id = state.transactions[-1].id
        assert state.get_account("cash").balance == Decimal("500000")
        assert state.get_account("capital").balance == Decimal("500000")

        state = engine.delete_transaction(txn_id)
        assert state.get_account("cash").balance == Decimal("0")
        assert state.get_account("capital").balance == Decimal("0")

        state = engine.restore_transaction(txn_id)
        assert state.get_account("cash").balance == Decimal("500000")

        count_before = len(state.transactions)
        state = engine.permanent_delete_transaction(txn_id)
        assert state.get_account("cash").balance == Decimal("0")
        assert state.get_account("capital").balance == Decimal("0")
        assert len(state.transactions) == count_before - 1
        assert state.get_transaction(txn_id) is None


class TestTransactions:
    """Tests for transaction mutators."""

    def test_add_assigns_fresh_id_and_active_flag(self, cash_capital_engine):
        first = cash_capital_engine.add_transaction("2024-03-01", "One", [debit("cash", 1), credit("capital", 1)])
        first_id = first.transactions[-1].id
        second = cash_capital_engine.add_transaction("2024-03-02", "Two", [debit("cash", 2), credit("capital", 2)])
        second_id = second.transactions[-1].id

        assert first_id != second_id
        assert second.transactions[-1].is_deleted is False
        assert second.transactions[-1].deleted_at is None

    def test_add_accepts_unbalanced_entries(self, cash_capital_engine):
        state = cash_capital_engine.add_transaction("2024-03-01", "Odd", [debit("cash", 10)])

        assert state.get_account("cash").balance == Decimal("10")
        assert state.get_account("capital").balance == Decimal("0")

    def test_soft_delete_sets_deleted_at_and_moves_to_trash(self, seeded_engine):
        state = seeded_engine.delete_transaction("tx-004")
        txn = state.get_transaction("tx-004")

        assert txn.is_deleted is True
        assert txn.deleted_at == FIXED_NOW
        assert txn in seeded_engine.deleted_transactions
        assert txn not in seeded_engine.transactions

    def test_restore_clears_deleted_at(self, seeded_engine):
        seeded_engine.delete_transaction("tx-004")
        state = seeded_engine.restore_transaction("tx-004")
        txn = state.get_transaction("tx-004")

        assert txn.is_deleted is False
        assert txn.deleted_at is None
        assert seeded_engine.deleted_transactions == []

    def test_soft_delete_changes_only_referenced_accounts_and_ancestors(self, seeded_engine):
        before = balances(seeded_engine.state)
        txn = seeded_engine.state.get_transaction("tx-008")

        state = seeded_engine.delete_transaction("tx-008")
        after = balances(state)

        touched = set()
        for entry in txn.entries:
            touched.add(entry.account_id)
            touched |= _ancestors(state, entry.account_id)
        changed = {acc_id for acc_id in before if before[acc_id] != after[acc_id]}
        assert changed == touched

    def test_delete_then_restore_is_a_no_op(self, seeded_engine):
        before = balances(seeded_engine.state)

        seeded_engine.delete_transaction("tx-001")
        seeded_engine.delete_transaction("tx-007")
        seeded_engine.restore_transaction("tx-007")
        state = seeded_engine.restore_transaction("tx-001")

        assert balances(state) == before

    def test_unknown_transaction_ids_leave_state_unchanged(self, seeded_engine, memory_store):
        state = seeded_engine.state
        saves = memory_store.save_count

        assert seeded_engine.delete_transaction("nope") is state
        assert seeded_engine.restore_transaction("nope") is state
        assert seeded_engine.permanent_delete_transaction("nope") is state
        assert memory_store.save_count == saves

    def test_permanent_delete_of_soft_deleted_transaction(self, seeded_engine):
        seeded_engine.delete_transaction("tx-002")
        state = seeded_engine.permanent_delete_transaction("tx-002")

        assert state.get_transaction("tx-002") is None
        assert seeded_engine.deleted_transactions == []


class TestAccounts:
    """Tests for account mutators and deletion guards."""

    def test_add_account_starts_at_zero(self, seeded_engine):
        state = seeded_engine.add_account("Petty Cash", "1115", AccountType.ASSET, parent_id="1.1")
        created = state.accounts[-1]

        assert created.balance == Decimal("0")
        assert created.is_deleted is False
        assert created.parent_id == "1.1"
        assert created.id not in {"1", "1.1"}

    def test_add_account_rejects_missing_parent(self, seeded_engine):
        count = len(seeded_engine.state.accounts)

        with pytest.raises(InvalidParentError, match="does not exist"):
            seeded_engine.add_account("Orphan", "9999", AccountType.ASSET, parent_id="nope")

        assert len(seeded_engine.state.accounts) == count

    def test_add_account_rejects_deleted_parent(self, seeded_engine):
        seeded_engine.delete_account("2.2")

        with pytest.raises(InvalidParentError, match="deleted"):
            seeded_engine.add_account("Bank Loan", "2210", AccountType.LIABILITY, parent_id="2.2")

    def test_update_account_changes_allowed_fields(self, seeded_engine):
        state = seeded_engine.update_account("1.1.3", name="Trade Receivables", code="1131", budget=Decimal("500"))
        acc = state.get_account("1.1.3")

        assert acc.name == "Trade Receivables"
        assert acc.code == "1131"
        assert acc.budget == Decimal("500")
        assert acc.type == AccountType.ASSET

    def test_update_account_type_changes_sign(self, cash_capital_engine):
        cash_capital_engine.add_transaction("2024-03-01", "Capital", [debit("cash", 100), credit("capital", 100)])

        state = cash_capital_engine.update_account("capital", account_type=AccountType.ASSET)

        assert state.get_account("capital").balance == Decimal("-100")

    def test_update_account_parent_moves_balance(self, seeded_engine):
        before = seeded_engine.state
        moved = before.get_account("1.2.2").balance

        state = seeded_engine.update_account("1.2.2", parent_id="1.1")

        assert state.get_account("1.1").balance == before.get_account("1.1").balance + moved
        assert state.get_account("1.2").balance == before.get_account("1.2").balance - moved
        assert state.get_account("1").balance == before.get_account("1").balance

    def test_update_account_clear_parent(self, seeded_engine):
        state = seeded_engine.update_account("2.2", clear_parent=True)

        assert state.get_account("2.2").parent_id is None

    def test_update_account_rejects_parent_and_clear_parent(self, seeded_engine):
        with pytest.raises(ValidationError):
            seeded_engine.update_account("2.2", parent_id="2", clear_parent=True)

    def test_update_account_rejects_self_parent(self, seeded_engine):
        with pytest.raises(InvalidParentError, match="own parent"):
            seeded_engine.update_account("1.1", parent_id="1.1")

    def test_update_account_rejects_descendant_parent(self, seeded_engine):
        before = seeded_engine.state

        with pytest.raises(InvalidParentError, match="sub-account"):
            seeded_engine.update_account("1", parent_id="1.1.2")

        assert seeded_engine.state is before

    def test_update_unknown_account_is_a_no_op(self, seeded_engine):
        state = seeded_engine.state
        assert seeded_engine.update_account("nope", name="X") is state

    def test_delete_account_with_children_fails(self, seeded_engine):
        before = seeded_engine.state

        with pytest.raises(HasChildrenError) as exc_info:
            seeded_engine.delete_account("1.2")

        assert exc_info.value.child_count == 2
        assert "sub-account" in str(exc_info.value)
        assert seeded_engine.state is before

    def test_delete_account_with_transactions_fails(self, seeded_engine):
        before = seeded_engine.state

        with pytest.raises(HasTransactionsError) as exc_info:
            seeded_engine.delete_account("1.1.2")

        assert exc_info.value.transaction_count == 7
        assert "transaction" in str(exc_info.value)
        assert seeded_engine.state is before

    def test_children_are_checked_before_transactions(self, seeded_engine):
        seeded_engine.add_transaction("2024-03-01", "On parent", [debit("1.1", 1), credit("3.1", 1)])

        with pytest.raises(HasChildrenError):
            seeded_engine.delete_account("1.1")

    def test_soft_deleted_references_do_not_block_deletion(self, seeded_engine):
        seeded_engine.delete_transaction("tx-008")

        state = seeded_engine.delete_account("1.2.1")

        assert state.get_account("1.2.1").is_deleted is True

    def test_delete_leaf_account(self, seeded_engine):
        state = seeded_engine.delete_account("2.2")

        assert state.get_account("2.2").is_deleted is True
        assert "2.2" not in {a.id for a in seeded_engine.accounts}
        assert state.get_account("2").balance == state.get_account("2.1").balance

    def test_deleted_children_do_not_block_parent_deletion(self, seeded_engine):
        seeded_engine.delete_account("2.2")
        seeded_engine.delete_transaction("tx-008")
        seeded_engine.delete_account("2.1")

        state = seeded_engine.delete_account("2")

        assert state.get_account("2").is_deleted is True

    def test_delete_deleted_account_is_a_no_op(self, seeded_engine, memory_store):
        state = seeded_engine.delete_account("2.2")
        saves = memory_store.save_count

        assert seeded_engine.delete_account("2.2") is state
        assert memory_store.save_count == saves

    def test_update_deleted_account_is_a_no_op(self, seeded_engine, memory_store):
        state = seeded_engine.delete_account("2.2")
        saves = memory_store.save_count

        assert seeded_engine.update_account("2.2", name="Revived", budget=Decimal("10")) is state
        assert state.get_account("2.2").name != "Revived"
        assert memory_store.save_count == saves


class TestAccountingIdentity:
    """Balanced postings keep the accounting equation intact."""

    def _assert_identity(self, accounts):
        summary = financial_summary(accounts)
        assert summary.total_assets == (
            summary.total_liabilities + summary.total_equity + summary.net_income
        )

    def test_identity_after_mixed_operations(self, seeded_engine):
        self._assert_identity(seeded_engine.accounts)

        seeded_engine.add_transaction("2024-03-31", "Loan", [debit("1.1.2", 20000), credit("2.2", 20000)])
        self._assert_identity(seeded_engine.accounts)

        seeded_engine.delete_transaction("tx-001")
        self._assert_identity(seeded_engine.accounts)

        seeded_engine.permanent_delete_transaction("tx-009")
        self._assert_identity(seeded_engine.accounts)

        seeded_engine.restore_transaction("tx-001")
        self._assert_identity(seeded_engine.accounts)

    def test_balance_sheet_only_postings(self, engine):
        state = engine.add_account("Assets", "1000", AccountType.ASSET)
        assets = state.accounts[-1].id
        state = engine.add_account("Cash", "1100", AccountType.ASSET, parent_id=assets)
        cash = state.accounts[-1].id
        state = engine.add_account("Loans", "2000", AccountType.LIABILITY)
        loans = state.accounts[-1].id
        state = engine.add_account("Capital", "3000", AccountType.EQUITY)
        capital = state.accounts[-1].id

        engine.add_transaction("2024-01-01", "Capital", [debit(cash, 1000), credit(capital, 1000)])
        engine.add_transaction("2024-01-02", "Loan", [debit(cash, 300), credit(loans, 300)])
        state = engine.add_transaction("2024-01-03", "Repay", [debit(loans, 100), credit(cash, 100)])

        summary = financial_summary(state.active_accounts)
        assert summary.total_assets == Decimal("1200")
        assert summary.total_assets == summary.total_liabilities + summary.total_equity

    def test_restore_onto_deleted_account_is_rejected(self, engine, memory_store):
        state = engine.add_account("Assets", "1000", AccountType.ASSET)
        assets = state.accounts[-1].id
        state = engine.add_account("Petty Cash", "1100", AccountType.ASSET, parent_id=assets)
        petty = state.accounts[-1].id
        state = engine.add_account("Capital", "3000", AccountType.EQUITY)
        capital = state.accounts[-1].id

        state = engine.add_transaction("2024-01-01", "Float", [debit(petty, 100), credit(capital, 100)])
        txn_id = state.transactions[-1].id
        engine.delete_transaction(txn_id)
        before = engine.delete_account(petty)
        saves = memory_store.save_count

        with pytest.raises(DeletedAccountReferenceError) as exc_info:
            engine.restore_transaction(txn_id)

        assert exc_info.value.account_ids == (petty,)
        assert petty in str(exc_info.value)
        assert engine.state is before
        assert engine.state.get_transaction(txn_id).is_deleted is True
        assert memory_store.save_count == saves
        self._assert_identity(engine.accounts)


class TestDepartments:
    """Tests for department CRUD."""

    def test_add_update_delete(self, engine):
        state = engine.add_department("Finance", manager="Lina", budget=Decimal("1000"))
        dept_id = state.departments[-1].id

        state = engine.update_department(dept_id, expenses=Decimal("250"), manager="Omar")
        dept = state.get_department(dept_id)
        assert dept.expenses == Decimal("250")
        assert dept.manager == "Omar"
        assert dept.budget == Decimal("1000")

        state = engine.delete_department(dept_id)
        assert state.get_department(dept_id) is None

    def test_unknown_department_is_a_no_op(self, seeded_engine):
        state = seeded_engine.state
        assert seeded_engine.update_department("nope", name="X") is state
        assert seeded_engine.delete_department("nope") is state


class TestPersistence:
    """Tests for snapshot loading and saving."""

    def test_every_mutation_is_saved(self, cash_capital_engine, memory_store):
        cash_capital_engine.add_transaction("2024-03-01", "Capital", [debit("cash", 5), credit("capital", 5)])
        cash_capital_engine.add_account("Bank", "1120", AccountType.ASSET)

        assert memory_store.save_count == 2
        saved = memory_store.snapshot
        assert len(saved.transactions) == 1
        assert len(saved.accounts) == 3

    def test_failed_rejection_does_not_save(self, seeded_engine, memory_store):
        with pytest.raises(HasTransactionsError):
            seeded_engine.delete_account("1.1.2")

        assert memory_store.save_count == 0

    def test_save_failure_keeps_in_memory_state(self, cash_capital_engine, caplog):
        store = FailingStore()
        cash_capital_engine.store = store

        state = cash_capital_engine.add_transaction(
            "2024-03-01", "Capital", [debit("cash", 5), credit("capital", 5)]
        )

        assert store.attempts == 1
        assert cash_capital_engine.state is state
        assert state.get_account("cash").balance == Decimal("5")
        assert "Could not save ledger snapshot" in caplog.text

    def test_load_uses_seed_when_store_is_empty(self):
        engine = LedgerEngine.load(MemorySnapshotStore(), seed=lambda: default_seed(date(2024, 3, 1)))

        assert len(engine.accounts) == 22
        assert len(engine.transactions) == 10
        assert len(engine.departments) == 3

    def test_load_recomputes_stale_balances(self, seeded_engine):
        stale = seeded_engine.state.accounts

        snapshot = LedgerSnapshot(
            accounts=tuple(replace(a, balance=Decimal("123")) for a in stale),
            transactions=seeded_engine.state.transactions,
        )
        engine = LedgerEngine.load(MemorySnapshotStore(snapshot))

        assert balances(engine.state) == balances(seeded_engine.state)

    def test_seed_balances(self, seeded_engine):
        state = seeded_engine.state

        assert state.get_account("1.1.2").balance == Decimal("482500")
        assert state.get_account("1.1.1").balance == Decimal("1150")
        assert state.get_account("1.1").balance == Decimal("481650")
        assert state.get_account("1").balance == Decimal("499650")
        assert state.get_account("2").balance == Decimal("6000")
        assert state.get_account("3").balance == Decimal("500000")
        assert state.get_account("4").balance == Decimal("47000")
        assert state.get_account("5").balance == Decimal("53350")


def test_make_engine_ids_are_deterministic():
    engine = make_engine()
    state = engine.add_account("Cash", "1000", AccountType.ASSET)
    assert state.accounts[-1].id == "acc-1"
