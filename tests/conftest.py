"""Shared pytest fixtures for smartledger tests."""

import itertools
import os
import tempfile
from datetime import date
from decimal import Decimal

import pytest

from smartledger.domain.entities import Account, AccountType, LedgerSnapshot, TransactionEntry
from smartledger.domain.ledger import LedgerEngine
from smartledger.domain.seed import default_seed
from smartledger.storage.base import MemorySnapshotStore
from smartledger.storage.factories import create_sqlite_store

FIXED_NOW = "2024-03-31T12:00:00+00:00"
SEED_DAY = date(2024, 3, 15)


def make_id_factory():
    """Return an ID factory producing tx-1, acc-2, ... in call order."""
    counter = itertools.count(1)
    return lambda prefix: f"{prefix}-{next(counter)}"


def make_engine(snapshot=None, store=None) -> LedgerEngine:
    """Create an engine with deterministic IDs and clock."""
    return LedgerEngine(
        snapshot, store=store, id_factory=make_id_factory(), clock=lambda: FIXED_NOW
    )


def debit(account_id: str, amount) -> TransactionEntry:
    return TransactionEntry(account_id=account_id, debit=Decimal(str(amount)))


def credit(account_id: str, amount) -> TransactionEntry:
    return TransactionEntry(account_id=account_id, credit=Decimal(str(amount)))


def balances(state) -> dict[str, Decimal]:
    """Map account ID to balance for every account in a state."""
    return {a.id: a.balance for a in state.accounts}


@pytest.fixture
def temp_store():
    """Create a snapshot store backed by a temporary SQLite file."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    store = create_sqlite_store(database_path=db_path)
    # Store the path for tests that need it
    store.database_path = db_path

    yield store

    store.close()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def db_path():
    """Path to a fresh temporary database file for CLI tests."""
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    os.unlink(path)
    yield path
    if os.path.exists(path):
        os.unlink(path)


@pytest.fixture
def memory_store():
    """Create an in-memory snapshot store."""
    return MemorySnapshotStore()


@pytest.fixture
def engine(memory_store):
    """Create an empty engine saving to an in-memory store."""
    return make_engine(store=memory_store)


@pytest.fixture
def seed_snapshot():
    """Default starter ledger with transactions dated March 2024."""
    return default_seed(SEED_DAY)


@pytest.fixture
def seeded_engine(seed_snapshot, memory_store):
    """Create an engine loaded with the default starter ledger."""
    return make_engine(seed_snapshot, store=memory_store)


@pytest.fixture
def cash_capital_engine(memory_store):
    """Engine with a Cash asset account and a Capital equity account."""
    snapshot = LedgerSnapshot(
        accounts=(
            Account(id="cash", name="Cash", code="1110", type=AccountType.ASSET, parent_id=None),
            Account(id="capital", name="Capital", code="3100", type=AccountType.EQUITY, parent_id=None),
        )
    )
    return make_engine(snapshot, store=memory_store)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
