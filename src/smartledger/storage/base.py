"""Abstract snapshot store interface."""

from abc import ABC, abstractmethod
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from smartledger.domain.entities import LedgerSnapshot

STORAGE_KEY = "smart_ledger_data_v1"


class SnapshotStore(ABC):
    """Abstract full-snapshot storage for smartledger.

    Implementations raise ``PersistenceError`` for any storage failure.
    """

    @abstractmethod
    def load(self) -> Optional[LedgerSnapshot]:
        """Return the saved snapshot, or None if nothing has been saved."""
        pass

    @abstractmethod
    def save(self, snapshot: LedgerSnapshot) -> None:
        """Replace the saved snapshot with the given one."""
        pass

    def close(self) -> None:
        """Release any held resources."""
        pass


class MemorySnapshotStore(SnapshotStore):
    """Snapshot store that keeps the last saved snapshot in memory."""

    def __init__(self, snapshot: Optional[LedgerSnapshot] = None):
        self.snapshot = snapshot
        self.save_count = 0

    def load(self) -> Optional[LedgerSnapshot]:
        return self.snapshot

    def save(self, snapshot: LedgerSnapshot) -> None:
        self.snapshot = LedgerSnapshot(
            accounts=snapshot.accounts,
            transactions=snapshot.transactions,
            departments=snapshot.departments,
        )
        self.save_count += 1
