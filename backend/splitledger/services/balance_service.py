"""
Balance service: statistics and member balances computed on read.

Nothing here is materialized; every figure reflects the current
transaction and split rows.
"""
import logging
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from splitledger.core.config import settings
from splitledger.core.exceptions import NotFoundError, PartialConsistencyWarning, ValidationError
from splitledger.core.utils import MAX_AMOUNT, money_str, to_money, utcnow
from splitledger.models.group import Group, GroupMember
from splitledger.models.transaction import Transaction, TransactionSplit, TransactionType
from splitledger.services.transaction_service import TransactionFilters, apply_filters

logger = logging.getLogger(__name__)


def _sum_amounts(transaction_type: TransactionType, filters: TransactionFilters, db: Session) -> Decimal:
    query = db.query(func.coalesce(func.sum(Transaction.amount), 0)).filter(
        Transaction.type == transaction_type
    )
    query = apply_filters(query, filters)
    return to_money(query.scalar())


def compute_stats(
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    group_id: Optional[int] = None,
    paid_by: Optional[str] = None,
    db: Session = None
) -> Dict[str, str]:
    """
    Total income, total expenses and net balance for a period.

    Either bound may be omitted for an open-ended range. Amounts are
    returned as 2-place decimal strings.
    """
    filters = TransactionFilters(
        group_id=group_id,
        paid_by=paid_by,
        start_date=start_date,
        end_date=end_date
    )
    total_income = _sum_amounts(TransactionType.INCOME, filters, db)
    total_expenses = _sum_amounts(TransactionType.EXPENSE, filters, db)

    return {
        "total_income": money_str(total_income),
        "total_expenses": money_str(total_expenses),
        "net_balance": money_str(total_income - total_expenses),
    }


def get_total_shared(group_id: int, db: Session) -> Decimal:
    """Sum of shared expenses recorded against a group."""
    total = db.query(func.coalesce(func.sum(Transaction.amount), 0)).filter(
        Transaction.group_id == group_id,
        Transaction.is_shared.is_(True),
        Transaction.type == TransactionType.EXPENSE
    ).scalar()
    return to_money(total)


def compute_group_balances(group_id: int, db: Session) -> Dict[str, Any]:
    """
    Per-member balance: opening balance minus the member's unpaid splits.

    Splits are attributed by member name. Paid splits are settled and do not
    move the balance; each split is counted on its own.
    """
    group = db.query(Group).filter(Group.id == group_id).first()
    if not group:
        raise NotFoundError("Group", group_id)

    owed_rows = db.query(
        TransactionSplit.member_name,
        func.coalesce(func.sum(TransactionSplit.amount), 0)
    ).join(
        Transaction, TransactionSplit.transaction_id == Transaction.id
    ).filter(
        Transaction.group_id == group_id,
        TransactionSplit.is_paid.is_(False)
    ).group_by(TransactionSplit.member_name).all()
    owed_by_name = {name: to_money(total) for name, total in owed_rows}

    balances: List[Dict[str, Any]] = []
    for member in group.members:
        opening = to_money(member.opening_balance)
        owed = owed_by_name.get(member.name, Decimal("0.00"))
        balances.append({
            "member_id": member.id,
            "member_name": member.name,
            "opening_balance": money_str(opening),
            "owed": money_str(owed),
            "balance": money_str(opening - owed),
        })

    return {
        "group_id": group.id,
        "total_shared": money_str(get_total_shared(group.id, db)),
        "balances": balances,
    }


def _record_adjustment(member: GroupMember, new_balance: Decimal, db: Session) -> Transaction:
    """Add the audit transaction for an opening-balance edit to the session."""
    adjustment = Transaction(
        type=TransactionType.INCOME,
        amount=new_balance,
        description=f"Opening balance adjusted for member {member.name}",
        category=settings.ADJUSTMENT_CATEGORY,
        date=utcnow(),
        paid_by=member.name,
        is_shared=False,
        group_id=None
    )
    db.add(adjustment)
    db.flush()
    return adjustment


def adjust_opening_balance(
    group_id: int,
    member_id: int,
    opening_balance: Any,
    db: Session,
    atomic: Optional[bool] = None
) -> Tuple[GroupMember, Optional[Transaction], List[PartialConsistencyWarning]]:
    """
    Set a member's opening balance and record an adjustment transaction.

    An unchanged value is a no-op and records nothing. In non-atomic mode
    the balance commits first and a failed adjustment insert is returned as
    a warning; the balance is not rolled back.
    """
    if atomic is None:
        atomic = settings.ATOMIC_DUAL_WRITES

    try:
        new_balance = to_money(opening_balance)
    except (ArithmeticError, ValueError):
        raise ValidationError("Opening balance must be a decimal number", field="openingBalance")
    if not new_balance.is_finite():
        raise ValidationError("Opening balance must be a decimal number", field="openingBalance")
    if abs(new_balance) > MAX_AMOUNT:
        raise ValidationError(f"Opening balance must not exceed {MAX_AMOUNT}", field="openingBalance")

    member = db.query(GroupMember).filter(
        GroupMember.id == member_id,
        GroupMember.group_id == group_id
    ).first()
    if not member:
        raise NotFoundError("Member", member_id)

    if to_money(member.opening_balance) == new_balance:
        return member, None, []

    member.opening_balance = new_balance
    member.updated_at = utcnow()

    warnings: List[PartialConsistencyWarning] = []
    adjustment = None
    if atomic:
        try:
            adjustment = _record_adjustment(member, new_balance, db)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise
    else:
        db.commit()
        try:
            adjustment = _record_adjustment(member, new_balance, db)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            adjustment = None
            logger.error(f"Adjustment transaction failed for member {member.id}: {e}")
            warnings.append(PartialConsistencyWarning(
                operation="record_adjustment",
                message="Opening balance saved but its adjustment transaction could not be recorded",
                entity_id=member.id
            ))

    db.refresh(member)
    if adjustment is not None:
        db.refresh(adjustment)
    return member, adjustment, warnings
