"""
Pydantic schemas for Group and GroupMember entities.
"""
from pydantic import EmailStr, Field
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from splitledger.schemas.common import APIModel, WarningResponse
from splitledger.schemas.transaction import TransactionResponse


class GroupMemberCreate(APIModel):
    """Schema for adding a member to a group."""
    name: str = Field(min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    opening_balance: Decimal = Decimal(0)


class GroupMemberUpdate(APIModel):
    """Schema for renaming a member or changing their email."""
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None


class GroupMemberResponse(APIModel):
    """Schema for group member response."""
    id: int
    group_id: int
    name: str
    email: Optional[str] = None
    opening_balance: Decimal
    joined_at: datetime


class GroupCreate(APIModel):
    """Schema for group creation."""
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    members: List[GroupMemberCreate] = []


class GroupResponse(APIModel):
    """Schema for group response with members."""
    id: int
    name: str
    description: Optional[str] = None
    members: List[GroupMemberResponse] = []
    member_count: int = 0
    created_at: datetime
    updated_at: datetime


class GroupDetailResponse(GroupResponse):
    """Schema for detailed group response."""
    total_shared: Decimal = Decimal(0)  # Sum of shared expenses in the group


class OpeningBalanceUpdate(APIModel):
    """Schema for editing a member's opening balance."""
    opening_balance: Decimal


class OpeningBalanceResponse(APIModel):
    """Result of an opening-balance edit and its audit transaction."""
    member: GroupMemberResponse
    adjustment: Optional[TransactionResponse] = None
    warnings: List[WarningResponse] = []


class MemberBalance(APIModel):
    """Computed balance of a single member (decimal strings)."""
    member_id: int
    member_name: str
    opening_balance: str
    owed: str  # Sum of unpaid splits
    balance: str


class GroupBalancesResponse(APIModel):
    """Computed balances for every member of a group."""
    group_id: int
    total_shared: str
    balances: List[MemberBalance] = []
