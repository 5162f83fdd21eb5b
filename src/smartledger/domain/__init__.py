"""Domain layer for smartledger application."""

from smartledger.domain.ledger import LedgerEngine
from smartledger.domain.journal import JournalService
from smartledger.domain.balances import recompute_balances
from smartledger.domain.users import UserDirectory

__all__ = [
    "LedgerEngine",
    "JournalService",
    "recompute_balances",
    "UserDirectory",
]
