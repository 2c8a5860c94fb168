"""
Transaction models for income/expense entries and their per-member splits.
"""
from sqlalchemy import Column, String, Numeric, DateTime, Boolean, Enum as SQLEnum, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from splitledger.db.base import BaseModel
import enum


class TransactionType(str, enum.Enum):
    """Transaction type enumeration."""
    EXPENSE = "expense"
    INCOME = "income"


class Transaction(BaseModel):
    """Single income or expense entry, optionally shared across a group."""
    __tablename__ = "transactions"

    group_id = Column(Integer, ForeignKey("groups.id", ondelete="CASCADE"), nullable=True, index=True)
    type = Column(
        SQLEnum(TransactionType, values_callable=lambda e: [m.value for m in e], name="transaction_type"),
        nullable=False, index=True
    )
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(100), nullable=True, index=True)
    date = Column(DateTime, nullable=False, index=True)
    paid_by = Column(String(255), nullable=False, index=True)  # Name of who paid
    is_shared = Column(Boolean, nullable=False, default=False)

    # Relationships
    group = relationship("Group", back_populates="transactions")
    splits = relationship(
        "TransactionSplit", back_populates="transaction", cascade="all, delete-orphan",
        order_by="TransactionSplit.id"
    )


class TransactionSplit(BaseModel):
    """One member's share of a shared transaction (point-in-time snapshot)."""
    __tablename__ = "transaction_splits"

    transaction_id = Column(Integer, ForeignKey("transactions.id", ondelete="CASCADE"), nullable=False, index=True)
    member_id = Column(Integer, ForeignKey("group_members.id", ondelete="SET NULL"), nullable=True, index=True)
    member_name = Column(String(255), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    is_paid = Column(Boolean, nullable=False, default=False)

    # Relationships
    transaction = relationship("Transaction", back_populates="splits")
    member = relationship("GroupMember", back_populates="splits")
