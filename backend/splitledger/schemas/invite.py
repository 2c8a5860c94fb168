"""
Pydantic schemas for GroupInvite entity.
"""
from pydantic import EmailStr, Field
from typing import Optional
from datetime import datetime
from splitledger.schemas.common import APIModel
from splitledger.schemas.group import GroupResponse, GroupMemberResponse


class InviteCreate(APIModel):
    """Schema for invite creation."""
    invited_by: Optional[str] = None  # Defaults to the caller identity
    max_uses: Optional[int] = Field(default=None, ge=1)  # None = unlimited
    expires_at: Optional[datetime] = None


class InviteResponse(APIModel):
    """Schema for invite response."""
    id: int
    group_id: int
    invite_code: str
    invited_by: str
    expires_at: Optional[datetime] = None
    max_uses: Optional[int] = None
    current_uses: int
    is_active: bool
    created_at: datetime


class InviteGroupSummary(APIModel):
    """Public summary of the group an invite leads to."""
    id: int
    name: str
    description: Optional[str] = None


class InviteInfoResponse(APIModel):
    """Schema for invite lookup by code."""
    invite: InviteResponse
    group: Optional[InviteGroupSummary] = None


class InviteJoin(APIModel):
    """Schema for joining a group through an invite."""
    member_name: str = Field(min_length=1, max_length=255)
    member_email: Optional[EmailStr] = None


class InviteJoinResponse(APIModel):
    """Schema for a successful invite redemption."""
    group: GroupResponse
    member: GroupMemberResponse
