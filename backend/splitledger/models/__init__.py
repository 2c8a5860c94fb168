"""Models package - Import all models for SQLAlchemy registration."""
from splitledger.models.group import Group, GroupMember, GroupInvite
from splitledger.models.transaction import Transaction, TransactionSplit, TransactionType
from splitledger.models.profile import UserProfile

__all__ = [
    "Group",
    "GroupMember",
    "GroupInvite",
    "Transaction",
    "TransactionSplit",
    "TransactionType",
    "UserProfile",
]
