"""Journal entry authoring: validation that runs before posting."""

from decimal import Decimal
from typing import Iterable, Optional, Sequence

from smartledger.domain.entities import Account, LedgerState, TransactionEntry
from smartledger.domain.errors import UnbalancedEntryError, UnknownAccountError, account_not_found
from smartledger.domain.ledger import LedgerEngine


def entry_totals(entries: Iterable[TransactionEntry]) -> tuple[Decimal, Decimal]:
    """Return (total_debit, total_credit) for a set of entries."""
    total_debit = Decimal("0")
    total_credit = Decimal("0")
    for entry in entries:
        total_debit += entry.debit
        total_credit += entry.credit
    return total_debit, total_credit


def is_balanced(entries: Iterable[TransactionEntry]) -> bool:
    """True when debits equal credits and the total is positive."""
    total_debit, total_credit = entry_totals(entries)
    return total_debit == total_credit and total_debit > 0


def clean_entries(entries: Iterable[TransactionEntry]) -> list[TransactionEntry]:
    """Drop draft rows that have no account or no amount."""
    return [e for e in entries if e.account_id and (e.debit > 0 or e.credit > 0)]


def postable_accounts(accounts: Sequence[Account]) -> list[Account]:
    """Return the leaf accounts, the only ones entries should post to."""
    parent_ids = {a.parent_id for a in accounts if a.parent_id is not None}
    return [a for a in accounts if a.id not in parent_ids]


class JournalService:
    """Service for posting validated journal entries."""

    def __init__(self, engine: LedgerEngine):
        """Initialize journal service.

        Args:
            engine: Ledger engine to post to
        """
        self.engine = engine

    def post(
        self,
        date: str,
        description: str,
        entries: Sequence[TransactionEntry],
        receipt_number: Optional[str] = None,
        check_number: Optional[str] = None,
        deposit_number: Optional[str] = None,
    ) -> LedgerState:
        """Validate a draft journal entry and post it.

        Args:
            date: ISO date of the transaction
            description: Transaction description
            entries: Draft entries; empty rows are dropped before validation
            receipt_number: Optional receipt number
            check_number: Optional check number
            deposit_number: Optional deposit number

        Returns:
            New ledger state, with the posted transaction last

        Raises:
            UnknownAccountError: If an entry posts to a missing or deleted account
            UnbalancedEntryError: If debits and credits differ or are zero
        """
        cleaned = clean_entries(entries)

        active_ids = {a.id for a in self.engine.accounts}
        for entry in cleaned:
            if entry.account_id not in active_ids:
                raise UnknownAccountError(account_not_found(entry.account_id))

        if not is_balanced(cleaned):
            total_debit, total_credit = entry_totals(cleaned)
            raise UnbalancedEntryError(total_debit, total_credit)

        return self.engine.add_transaction(
            date=date,
            description=description,
            entries=cleaned,
            receipt_number=receipt_number,
            check_number=check_number,
            deposit_number=deposit_number,
        )
