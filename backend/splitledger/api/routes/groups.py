"""
Group, member and balance routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from splitledger.db.session import get_db
from splitledger.schemas.common import WarningResponse
from splitledger.schemas.group import (
    GroupCreate, GroupResponse, GroupDetailResponse,
    GroupMemberCreate, GroupMemberUpdate, GroupMemberResponse,
    OpeningBalanceUpdate, OpeningBalanceResponse, GroupBalancesResponse
)
from splitledger.schemas.transaction import TransactionResponse
from splitledger.api.dependencies import get_current_identity, get_event_publisher
from splitledger.services import balance_service, group_service
from splitledger.services.event_service import EventPublisher

router = APIRouter(prefix="/groups", tags=["groups"])


@router.get("", response_model=List[GroupResponse])
async def list_groups(
    caller: str = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """List all groups with their members."""
    return group_service.list_groups(db)


@router.post("", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def create_group(
    group_data: GroupCreate,
    caller: str = Depends(get_current_identity),
    db: Session = Depends(get_db),
    events: EventPublisher = Depends(get_event_publisher)
):
    """Create a group with optional initial members."""
    group = group_service.create_group(
        name=group_data.name,
        description=group_data.description,
        members=[member.model_dump() for member in group_data.members],
        db=db
    )

    response = GroupResponse.model_validate(group)
    events.publish("group_created", response)
    return response


@router.get("/{group_id}", response_model=GroupDetailResponse)
async def get_group(
    group_id: int,
    caller: str = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Get group details including the shared expense total."""
    group = group_service.get_group(group_id, db)

    response = GroupDetailResponse.model_validate(group)
    response.total_shared = balance_service.get_total_shared(group_id, db)
    return response


@router.delete("/{group_id}")
async def delete_group(
    group_id: int,
    caller: str = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Delete a group and everything recorded against it."""
    group_service.delete_group(group_id, db)
    return {"message": "Group deleted successfully"}


@router.post("/{group_id}/members", response_model=GroupMemberResponse, status_code=status.HTTP_201_CREATED)
async def add_member(
    group_id: int,
    member_data: GroupMemberCreate,
    caller: str = Depends(get_current_identity),
    db: Session = Depends(get_db),
    events: EventPublisher = Depends(get_event_publisher)
):
    """Add a member to a group."""
    member = group_service.add_member(
        group_id,
        name=member_data.name,
        email=member_data.email,
        opening_balance=member_data.opening_balance,
        db=db
    )

    response = GroupMemberResponse.model_validate(member)
    events.publish("group_member_added", response)
    return response


@router.patch("/{group_id}/members/{member_id}", response_model=GroupMemberResponse)
async def update_member(
    group_id: int,
    member_id: int,
    member_data: GroupMemberUpdate,
    caller: str = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Rename a member or change their email."""
    updates = member_data.model_dump(exclude_unset=True)
    return group_service.update_member(group_id, member_id, updates, db)


@router.delete("/{group_id}/members/{member_id}")
async def remove_member(
    group_id: int,
    member_id: int,
    caller: str = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Remove a member from a group."""
    group_service.remove_member(group_id, member_id, db)
    return {"message": "Member removed successfully"}


@router.get("/{group_id}/balances", response_model=GroupBalancesResponse)
async def get_group_balances(
    group_id: int,
    caller: str = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Per-member balances: opening balance minus unpaid splits."""
    return balance_service.compute_group_balances(group_id, db)


@router.put("/{group_id}/members/{member_id}/balance", response_model=OpeningBalanceResponse)
async def update_opening_balance(
    group_id: int,
    member_id: int,
    balance_data: OpeningBalanceUpdate,
    caller: str = Depends(get_current_identity),
    db: Session = Depends(get_db),
    events: EventPublisher = Depends(get_event_publisher)
):
    """Set a member's opening balance and record the adjustment."""
    member, adjustment, warnings = balance_service.adjust_opening_balance(
        group_id, member_id, balance_data.opening_balance, db
    )

    response = OpeningBalanceResponse(
        member=GroupMemberResponse.model_validate(member),
        adjustment=TransactionResponse.model_validate(adjustment) if adjustment else None,
        warnings=[WarningResponse(**w.to_dict()) for w in warnings]
    )
    if adjustment is not None:
        events.publish("transaction_created", response.adjustment)
    return response
