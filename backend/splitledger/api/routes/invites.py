"""
Invite link routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from splitledger.db.session import get_db
from splitledger.schemas.group import GroupResponse, GroupMemberResponse
from splitledger.schemas.invite import (
    InviteCreate, InviteResponse, InviteInfoResponse, InviteGroupSummary,
    InviteJoin, InviteJoinResponse
)
from splitledger.api.dependencies import get_current_identity, get_event_publisher
from splitledger.services import invite_service
from splitledger.services.event_service import EventPublisher

router = APIRouter(tags=["invites"])


@router.post("/groups/{group_id}/invites", response_model=InviteResponse, status_code=status.HTTP_201_CREATED)
async def create_invite(
    group_id: int,
    invite_data: InviteCreate,
    caller: str = Depends(get_current_identity),
    db: Session = Depends(get_db),
    events: EventPublisher = Depends(get_event_publisher)
):
    """Create an invite link for a group."""
    invite = invite_service.create_invite(
        group_id,
        invited_by=invite_data.invited_by or caller,
        max_uses=invite_data.max_uses,
        expires_at=invite_data.expires_at,
        db=db
    )

    response = InviteResponse.model_validate(invite)
    events.publish("invite_created", response)
    return response


@router.get("/groups/{group_id}/invites", response_model=List[InviteResponse])
async def list_invites(
    group_id: int,
    caller: str = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """List a group's invites, newest first."""
    return invite_service.list_invites(group_id, db)


@router.get("/invites/{invite_code}", response_model=InviteInfoResponse)
async def get_invite(
    invite_code: str,
    caller: str = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Look up an active invite and the group it leads to."""
    invite = invite_service.get_invite(invite_code, db)
    return InviteInfoResponse(
        invite=InviteResponse.model_validate(invite),
        group=InviteGroupSummary.model_validate(invite.group) if invite.group else None
    )


@router.post("/invites/{invite_code}/join", response_model=InviteJoinResponse)
async def join_with_invite(
    invite_code: str,
    join_data: InviteJoin,
    caller: str = Depends(get_current_identity),
    db: Session = Depends(get_db),
    events: EventPublisher = Depends(get_event_publisher)
):
    """Join a group through an invite code."""
    group, member = invite_service.redeem_invite(
        invite_code,
        member_name=join_data.member_name,
        member_email=join_data.member_email,
        db=db
    )

    response = InviteJoinResponse(
        group=GroupResponse.model_validate(group),
        member=GroupMemberResponse.model_validate(member)
    )
    events.publish("member_joined", response)
    return response


@router.patch("/invites/{invite_id}/deactivate", response_model=InviteResponse)
async def deactivate_invite(
    invite_id: int,
    caller: str = Depends(get_current_identity),
    db: Session = Depends(get_db),
    events: EventPublisher = Depends(get_event_publisher)
):
    """Deactivate an invite; repeating the call is harmless."""
    invite = invite_service.deactivate_invite(invite_id, db)

    response = InviteResponse.model_validate(invite)
    events.publish("invite_deactivated", response)
    return response
