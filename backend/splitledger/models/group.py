"""
Group models for shared-expense groups, their members and invite links.
"""
from sqlalchemy import Column, String, Text, Numeric, Boolean, DateTime, ForeignKey, Integer
from sqlalchemy.orm import relationship
from splitledger.core.utils import utcnow
from splitledger.db.base import BaseModel


class Group(BaseModel):
    """Group whose members share expenses."""
    __tablename__ = "groups"

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)

    # Relationships
    members = relationship(
        "GroupMember", back_populates="group", cascade="all, delete-orphan",
        order_by="GroupMember.id"
    )
    transactions = relationship("Transaction", back_populates="group", cascade="all, delete-orphan")
    invites = relationship("GroupInvite", back_populates="group", cascade="all, delete-orphan")

    @property
    def member_count(self) -> int:
        return len(self.members)


class GroupMember(BaseModel):
    """Named member of a group. Members are matched against `paid_by` by name."""
    __tablename__ = "group_members"

    group_id = Column(Integer, ForeignKey("groups.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    opening_balance = Column(Numeric(12, 2), nullable=False, default=0)  # Signed starting credit/debit
    joined_at = Column(DateTime, default=utcnow, nullable=False)

    # Relationships
    group = relationship("Group", back_populates="members")
    splits = relationship("TransactionSplit", back_populates="member")


class GroupInvite(BaseModel):
    """Redeemable invite link granting membership of a group."""
    __tablename__ = "group_invites"

    group_id = Column(Integer, ForeignKey("groups.id", ondelete="CASCADE"), nullable=False, index=True)
    invite_code = Column(String(64), unique=True, nullable=False, index=True)
    invited_by = Column(String(255), nullable=False)
    expires_at = Column(DateTime, nullable=True)
    max_uses = Column(Integer, nullable=True)  # None = unlimited
    current_uses = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    # Relationships
    group = relationship("Group", back_populates="invites")
