"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class HasChildrenError(DependencyError):
    """Account cannot be deleted while it has active child accounts."""

    def __init__(self, account_id: str, child_count: int):
        self.account_id = account_id
        self.child_count = child_count
        super().__init__(account_has_children(account_id, child_count))


class HasTransactionsError(DependencyError):
    """Account cannot be deleted while active transactions post to it."""

    def __init__(self, account_id: str, transaction_count: int):
        self.account_id = account_id
        self.transaction_count = transaction_count
        super().__init__(account_has_transactions(account_id, transaction_count))


class DeletedAccountReferenceError(DependencyError):
    """Transaction cannot be restored while it posts to a deleted account."""

    def __init__(self, transaction_id: str, account_ids: tuple[str, ...]):
        self.transaction_id = transaction_id
        self.account_ids = account_ids
        super().__init__(transaction_uses_deleted_accounts(transaction_id, account_ids))


class InvalidParentError(ValidationError):
    """Parent reference is missing, deleted, or would create a cycle."""


class UnbalancedEntryError(ValidationError):
    """Journal entry debits and credits do not match, or are zero."""

    def __init__(self, total_debit: Decimal, total_credit: Decimal):
        self.total_debit = total_debit
        self.total_credit = total_credit
        super().__init__(unbalanced_entry(total_debit, total_credit))


class UnknownAccountError(ValidationError):
    """Journal entry posts to an account that is missing or deleted."""


class PersistenceError(Exception):
    """Snapshot could not be loaded from or written to storage."""


def account_not_found(account_id: str) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def transaction_not_found(transaction_id: str) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def department_not_found(department_id: str) -> str:
    """Return message for missing department."""
    return f"Department {department_id} not found"


def user_not_found(user_id: str) -> str:
    """Return message for missing user."""
    return f"User {user_id} not found"


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}{'s' if count != 1 else ''}"


def account_has_children(account_id: str, child_count: int) -> str:
    """Return message when an account still has active sub-accounts."""
    return (
        f"Cannot delete account {account_id}: it has {_plural(child_count, 'sub-account')}. "
        "Please delete the sub-accounts first."
    )


def account_has_transactions(account_id: str, transaction_count: int) -> str:
    """Return message when active transactions still post to an account."""
    return (
        f"Cannot delete account {account_id}: it is used by {_plural(transaction_count, 'transaction')}. "
        "Please delete the transactions first."
    )


def transaction_uses_deleted_accounts(transaction_id: str, account_ids: tuple[str, ...]) -> str:
    """Return message when a restore would post to deleted accounts."""
    return (
        f"Cannot restore transaction {transaction_id}: it posts to deleted "
        f"account{'s' if len(account_ids) != 1 else ''} {', '.join(account_ids)}. "
        "Permanently delete the transaction instead."
    )


def invalid_parent(account_id: str, parent_id: str, reason: str) -> str:
    """Return message for a rejected parent assignment."""
    return f"Cannot use account {parent_id} as parent of {account_id}: {reason}"


def unbalanced_entry(total_debit: Decimal, total_credit: Decimal) -> str:
    """Return message for an entry that cannot be posted."""
    if total_debit == 0 and total_credit == 0:
        return "Journal entry has no amounts"
    difference = abs(total_debit - total_credit)
    return (
        f"Journal entry is out of balance: debits {total_debit}, credits {total_credit} "
        f"(difference {difference})"
    )
