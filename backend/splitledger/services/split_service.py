"""
Split engine: turns a shared transaction into per-member obligations.
"""
import logging
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Sequence, Tuple
from sqlalchemy.orm import Session
from splitledger.core.utils import to_money
from splitledger.models.group import Group, GroupMember
from splitledger.models.transaction import Transaction, TransactionSplit

logger = logging.getLogger(__name__)


class SplitStrategy(ABC):
    """Abstract strategy for dividing an amount among group members."""

    @abstractmethod
    def compute_shares(
        self,
        amount: Decimal,
        members: Sequence[GroupMember]
    ) -> List[Tuple[GroupMember, Decimal]]:
        """Return one (member, share) pair per member that owes a share."""
        pass


class EqualSplitStrategy(SplitStrategy):
    """
    Split equally among all members.

    Shares are rounded to cents independently; no remainder is
    redistributed, so the shares may differ from the amount by up to one
    cent per member.
    """

    def compute_shares(
        self,
        amount: Decimal,
        members: Sequence[GroupMember]
    ) -> List[Tuple[GroupMember, Decimal]]:
        if not members:
            return []
        share = to_money(Decimal(amount) / len(members))
        return [(member, share) for member in members]


default_strategy = EqualSplitStrategy()


def create_splits_for_transaction(
    transaction: Transaction,
    group: Group,
    db: Session,
    strategy: SplitStrategy = default_strategy
) -> List[TransactionSplit]:
    """
    Add split rows for a shared transaction to the session.

    The split matching `paid_by` is pre-marked paid. A group without members
    leaves the transaction unsplit. The caller owns the commit.
    """
    members = list(group.members)
    if not members:
        logger.warning(
            f"Group {group.id} has no members; transaction {transaction.id} left unsplit"
        )
        return []

    splits = []
    for member, share in strategy.compute_shares(transaction.amount, members):
        split = TransactionSplit(
            transaction_id=transaction.id,
            member_id=member.id,
            member_name=member.name,
            amount=share,
            is_paid=(member.name == transaction.paid_by)
        )
        db.add(split)
        splits.append(split)

    db.flush()
    return splits


def redistribute_split_amounts(transaction: Transaction) -> None:
    """Re-divide a transaction's amount equally over its existing split rows."""
    if not transaction.splits:
        return
    share = to_money(Decimal(transaction.amount) / len(transaction.splits))
    for split in transaction.splits:
        split.amount = share
