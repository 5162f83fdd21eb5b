"""Mapper functions between domain entities and the stored snapshot document.

The document uses the camelCase keys of the browser application's storage
format, so snapshots exported from it load unchanged.
Amounts are written as strings and accepted as strings or numbers.
"""

from decimal import Decimal
from typing import Any, Optional

from smartledger.domain import entities as domain
from smartledger.domain.seed import INITIAL_DEPARTMENTS


def _decimal(value: Any, default: str = "0") -> Decimal:
    if value is None:
        return Decimal(default)
    return Decimal(str(value))


def _optional_decimal(value: Any) -> Optional[Decimal]:
    return None if value is None else Decimal(str(value))


def _optional_str(value: Optional[Decimal]) -> Optional[str]:
    return None if value is None else str(value)


def account_to_dict(account: domain.Account) -> dict[str, Any]:
    """Convert an Account entity to its stored form."""
    return {
        "id": account.id,
        "name": account.name,
        "code": account.code,
        "type": account.type.value,
        "parentId": account.parent_id,
        "balance": str(account.balance),
        "budget": _optional_str(account.budget),
        "isDeleted": account.is_deleted,
    }


def account_from_dict(data: dict[str, Any]) -> domain.Account:
    """Convert a stored account to an Account entity.

    The stored balance is not trusted; it is reset to zero and rebuilt by
    the engine when the snapshot is loaded.
    """
    return domain.Account(
        id=str(data["id"]),
        name=data["name"],
        code=str(data.get("code", "")),
        type=domain.AccountType(data["type"]),
        parent_id=None if data.get("parentId") is None else str(data["parentId"]),
        balance=Decimal("0"),
        is_deleted=bool(data.get("isDeleted", False)),
        budget=_optional_decimal(data.get("budget")),
    )


def entry_to_dict(entry: domain.TransactionEntry) -> dict[str, Any]:
    """Convert a TransactionEntry entity to its stored form."""
    return {
        "accountId": entry.account_id,
        "debit": str(entry.debit),
        "credit": str(entry.credit),
    }


def entry_from_dict(data: dict[str, Any]) -> domain.TransactionEntry:
    """Convert a stored entry to a TransactionEntry entity."""
    return domain.TransactionEntry(
        account_id=str(data["accountId"]),
        debit=_decimal(data.get("debit")),
        credit=_decimal(data.get("credit")),
    )


def transaction_to_dict(txn: domain.Transaction) -> dict[str, Any]:
    """Convert a Transaction entity to its stored form."""
    data = {
        "id": txn.id,
        "date": txn.date,
        "description": txn.description,
        "entries": [entry_to_dict(e) for e in txn.entries],
        "isDeleted": txn.is_deleted,
    }
    optional = {
        "deletedAt": txn.deleted_at,
        "receiptNumber": txn.receipt_number,
        "checkNumber": txn.check_number,
        "depositNumber": txn.deposit_number,
    }
    data.update({key: value for key, value in optional.items() if value is not None})
    return data


def transaction_from_dict(data: dict[str, Any]) -> domain.Transaction:
    """Convert a stored transaction to a Transaction entity."""
    return domain.Transaction(
        id=str(data["id"]),
        date=data["date"],
        description=data.get("description", ""),
        entries=tuple(entry_from_dict(e) for e in data.get("entries", [])),
        is_deleted=bool(data.get("isDeleted", False)),
        deleted_at=data.get("deletedAt"),
        receipt_number=data.get("receiptNumber"),
        check_number=data.get("checkNumber"),
        deposit_number=data.get("depositNumber"),
    )


def specialization_to_dict(spec: domain.Specialization) -> dict[str, Any]:
    """Convert a Specialization entity to its stored form."""
    return {
        "id": spec.id,
        "name": spec.name,
        "description": spec.description,
        "activeStudents": spec.active_students,
        "revenue": str(spec.revenue),
    }


def specialization_from_dict(data: dict[str, Any]) -> domain.Specialization:
    """Convert a stored specialization to a Specialization entity."""
    return domain.Specialization(
        id=str(data["id"]),
        name=data["name"],
        description=data.get("description"),
        active_students=int(data.get("activeStudents") or 0),
        revenue=_decimal(data.get("revenue")),
    )


def department_to_dict(dept: domain.Department) -> dict[str, Any]:
    """Convert a Department entity to its stored form."""
    return {
        "id": dept.id,
        "name": dept.name,
        "manager": dept.manager,
        "description": dept.description,
        "budget": str(dept.budget),
        "expenses": str(dept.expenses),
        "specializations": [specialization_to_dict(s) for s in dept.specializations],
        "isDeleted": dept.is_deleted,
    }


def department_from_dict(data: dict[str, Any]) -> domain.Department:
    """Convert a stored department to a Department entity."""
    return domain.Department(
        id=str(data["id"]),
        name=data["name"],
        manager=data.get("manager", ""),
        description=data.get("description", ""),
        budget=_decimal(data.get("budget")),
        expenses=_decimal(data.get("expenses")),
        specializations=tuple(
            specialization_from_dict(s) for s in data.get("specializations", [])
        ),
        is_deleted=bool(data.get("isDeleted", False)),
    )


def snapshot_to_dict(snapshot: domain.LedgerSnapshot) -> dict[str, Any]:
    """Convert a full snapshot to its stored document."""
    return {
        "accounts": [account_to_dict(a) for a in snapshot.accounts],
        "transactions": [transaction_to_dict(t) for t in snapshot.transactions],
        "departments": [department_to_dict(d) for d in snapshot.departments],
    }


def snapshot_from_dict(data: dict[str, Any]) -> domain.LedgerSnapshot:
    """Convert a stored document to a snapshot.

    A document without departments gets the starter departments; an
    explicit empty list stays empty.

    Raises:
        KeyError: If a required key is missing
        ValueError: If a value has the wrong format
    """
    stored_departments = data.get("departments")
    if stored_departments is None:
        departments = tuple(INITIAL_DEPARTMENTS)
    else:
        departments = tuple(department_from_dict(d) for d in stored_departments)

    return domain.LedgerSnapshot(
        accounts=tuple(account_from_dict(a) for a in data["accounts"]),
        transactions=tuple(transaction_from_dict(t) for t in data["transactions"]),
        departments=departments,
    )
