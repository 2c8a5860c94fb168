"""
Pydantic schemas for Transaction and TransactionSplit entities.
"""
from pydantic import Field
from typing import List, Optional
from datetime import datetime
from decimal import Decimal
from splitledger.models.transaction import TransactionType
from splitledger.schemas.common import APIModel, WarningResponse


class TransactionBase(APIModel):
    """Base transaction schema."""
    type: TransactionType
    amount: Decimal = Field(gt=0)
    description: str = Field(min_length=1)
    category: Optional[str] = None
    date: datetime
    paid_by: str = Field(min_length=1)


class TransactionCreate(TransactionBase):
    """Schema for transaction creation."""
    is_shared: bool = False
    group_id: Optional[int] = None


class TransactionUpdate(APIModel):
    """Schema for partial transaction update."""
    type: Optional[TransactionType] = None
    amount: Optional[Decimal] = Field(default=None, gt=0)
    description: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = None
    date: Optional[datetime] = None
    paid_by: Optional[str] = Field(default=None, min_length=1)


class TransactionSplitResponse(APIModel):
    """Schema for transaction split response."""
    id: int
    transaction_id: int
    member_id: Optional[int] = None
    member_name: str
    amount: Decimal
    is_paid: bool
    created_at: datetime


class SplitUpdate(APIModel):
    """Schema for marking a split paid or unpaid."""
    is_paid: bool


class TransactionResponse(APIModel):
    """Schema for transaction response. Adjustment entries may carry a zero or negative amount."""
    id: int
    type: TransactionType
    amount: Decimal
    description: str
    category: Optional[str] = None
    date: datetime
    paid_by: str
    is_shared: bool
    group_id: Optional[int] = None
    splits: List[TransactionSplitResponse] = []
    created_at: datetime
    updated_at: datetime


class TransactionWriteResponse(TransactionResponse):
    """Transaction response carrying partial-consistency warnings."""
    warnings: List[WarningResponse] = []
