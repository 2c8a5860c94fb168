"""
Transaction service: ledger store operations for transactions and splits.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple, Union
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload
from splitledger.core.config import settings
from splitledger.core.exceptions import NotFoundError, PartialConsistencyWarning, ValidationError
from splitledger.core.utils import MAX_AMOUNT, as_naive_utc, to_money, utcnow
from splitledger.models.group import Group
from splitledger.models.transaction import Transaction, TransactionSplit, TransactionType
from splitledger.services.split_service import (
    SplitStrategy, default_strategy, create_splits_for_transaction, redistribute_split_amounts
)

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("type", "amount", "description", "category", "date", "paid_by")


@dataclass
class TransactionFilters:
    """Conjunctive filters for listing transactions. Unset fields match everything."""
    group_id: Optional[int] = None
    type: Optional[Union[TransactionType, str]] = None
    category: Optional[str] = None
    paid_by: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    search: Optional[str] = None


def _validate_amount(amount: Any) -> Decimal:
    """Round to cents first, so a sub-cent amount cannot be stored as zero."""
    try:
        value = Decimal(str(amount))
        if not value.is_finite():
            raise ValueError(amount)
        value = to_money(value)
    except (ArithmeticError, ValueError):
        raise ValidationError("Amount must be a decimal number", field="amount")
    if value <= 0:
        raise ValidationError("Amount must be at least 0.01", field="amount")
    if value > MAX_AMOUNT:
        raise ValidationError(f"Amount must not exceed {MAX_AMOUNT}", field="amount")
    return value


def _parse_type(value: Any) -> TransactionType:
    try:
        return TransactionType(value)
    except ValueError:
        raise ValidationError("type must be 'expense' or 'income'", field="type")


def _require_text(value: Optional[str], field: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} is required", field=field)
    return str(value).strip()


def create_transaction(
    type: Union[TransactionType, str],
    amount: Any,
    description: str,
    date: datetime,
    paid_by: str,
    category: Optional[str] = None,
    is_shared: bool = False,
    group_id: Optional[int] = None,
    db: Session = None,
    atomic: Optional[bool] = None,
    strategy: SplitStrategy = default_strategy
) -> Tuple[Transaction, List[PartialConsistencyWarning]]:
    """
    Create a transaction and, when shared, its per-member splits.

    In atomic mode the transaction and its splits commit together. Otherwise
    the transaction commits first and a split failure is returned as a
    warning while the transaction stays committed.
    """
    if atomic is None:
        atomic = settings.ATOMIC_DUAL_WRITES

    amount = _validate_amount(amount)
    description = _require_text(description, "description")
    paid_by = _require_text(paid_by, "paidBy")
    if date is None:
        raise ValidationError("date is required", field="date")

    group = None
    if is_shared:
        if group_id is None:
            raise ValidationError("Shared transactions require a group", field="groupId")
        group = db.query(Group).filter(Group.id == group_id).first()
        if not group:
            raise NotFoundError("Group", group_id)
    elif group_id is not None:
        raise ValidationError("Only shared transactions can reference a group", field="groupId")

    transaction = Transaction(
        type=_parse_type(type),
        amount=amount,
        description=description,
        category=category,
        date=as_naive_utc(date),
        paid_by=paid_by,
        is_shared=bool(is_shared),
        group_id=group_id if is_shared else None
    )
    db.add(transaction)

    warnings: List[PartialConsistencyWarning] = []
    if atomic:
        try:
            db.flush()
            if group is not None:
                create_splits_for_transaction(transaction, group, db, strategy)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
    else:
        db.commit()
        if group is not None:
            try:
                create_splits_for_transaction(transaction, group, db, strategy)
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                logger.error(f"Split creation failed for transaction {transaction.id}: {e}")
                warnings.append(PartialConsistencyWarning(
                    operation="create_splits",
                    message="Transaction saved but its splits could not be created",
                    entity_id=transaction.id
                ))

    db.refresh(transaction)
    return transaction, warnings


def get_transaction(transaction_id: int, db: Session) -> Transaction:
    """Get a transaction with its splits."""
    transaction = db.query(Transaction).options(
        selectinload(Transaction.splits)
    ).filter(Transaction.id == transaction_id).first()
    if not transaction:
        raise NotFoundError("Transaction", transaction_id)
    return transaction


def update_transaction(transaction_id: int, updates: Dict[str, Any], db: Session) -> Transaction:
    """
    Apply a partial update and re-stamp `updated_at`.

    Shared membership and group are fixed at creation; a new amount is
    re-divided over the existing split rows.
    """
    transaction = get_transaction(transaction_id, db)

    unknown = set(updates) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Field(s) cannot be updated: {', '.join(sorted(unknown))}")

    if "amount" in updates:
        transaction.amount = _validate_amount(updates["amount"])
        redistribute_split_amounts(transaction)
    if "description" in updates:
        transaction.description = _require_text(updates["description"], "description")
    if "paid_by" in updates:
        transaction.paid_by = _require_text(updates["paid_by"], "paidBy")
    if "type" in updates:
        transaction.type = _parse_type(updates["type"])
    if "category" in updates:
        transaction.category = updates["category"]
    if "date" in updates:
        if updates["date"] is None:
            raise ValidationError("date is required", field="date")
        transaction.date = as_naive_utc(updates["date"])

    transaction.updated_at = utcnow()
    db.commit()
    db.refresh(transaction)
    return transaction


def delete_transaction(transaction_id: int, db: Session) -> None:
    """Delete a transaction; its splits go with it."""
    transaction = db.query(Transaction).filter(Transaction.id == transaction_id).first()
    if not transaction:
        raise NotFoundError("Transaction", transaction_id)
    db.delete(transaction)
    db.commit()


def apply_filters(query, filters: TransactionFilters):
    """Add the WHERE clauses for `filters` to a Transaction query."""
    if filters.group_id is not None:
        query = query.filter(Transaction.group_id == filters.group_id)
    if filters.type:
        query = query.filter(Transaction.type == _parse_type(filters.type))
    if filters.category:
        query = query.filter(Transaction.category == filters.category)
    if filters.paid_by:
        query = query.filter(Transaction.paid_by == filters.paid_by)
    if filters.start_date:
        query = query.filter(Transaction.date >= as_naive_utc(filters.start_date))
    if filters.end_date:
        query = query.filter(Transaction.date <= as_naive_utc(filters.end_date))
    if filters.search:
        escaped = filters.search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        pattern = f"%{escaped}%"
        query = query.filter(or_(
            Transaction.description.ilike(pattern, escape="\\"),
            Transaction.paid_by.ilike(pattern, escape="\\")
        ))
    return query


def list_transactions(filters: Optional[TransactionFilters], db: Session) -> List[Transaction]:
    """List transactions matching all filters, newest first, with splits."""
    query = db.query(Transaction).options(selectinload(Transaction.splits))
    query = apply_filters(query, filters or TransactionFilters())
    return query.order_by(Transaction.date.desc(), Transaction.id.desc()).all()


def update_split(split_id: int, is_paid: bool, db: Session) -> TransactionSplit:
    """Mark a split paid or unpaid."""
    split = db.query(TransactionSplit).filter(TransactionSplit.id == split_id).first()
    if not split:
        raise NotFoundError("Split", split_id)
    split.is_paid = bool(is_paid)
    db.commit()
    db.refresh(split)
    return split
