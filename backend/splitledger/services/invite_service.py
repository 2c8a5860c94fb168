"""
Invite service: invite-code generation and redemption.

An invite is usable while active, unexpired and under its use cap.
Redemption claims a use with a single conditional UPDATE so concurrent
redemptions cannot exceed `max_uses`.
"""
import logging
import secrets
import string
from datetime import datetime
from typing import List, Optional, Tuple
from sqlalchemy import or_, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from splitledger.core.config import settings
from splitledger.core.exceptions import (
    ConflictError, InviteExhaustedError, InviteExpiredError, NotFoundError, ValidationError
)
from splitledger.core.utils import as_naive_utc, utcnow
from splitledger.models.group import Group, GroupInvite, GroupMember

logger = logging.getLogger(__name__)

INVITE_ALPHABET = string.ascii_letters + string.digits


def generate_invite_code(length: Optional[int] = None) -> str:
    """Random alphanumeric invite code."""
    length = length or settings.INVITE_CODE_LENGTH
    return "".join(secrets.choice(INVITE_ALPHABET) for _ in range(length))


def create_invite(
    group_id: int,
    invited_by: str,
    max_uses: Optional[int] = None,
    expires_at: Optional[datetime] = None,
    db: Session = None
) -> GroupInvite:
    """Create an active invite with zero uses."""
    if not invited_by or not invited_by.strip():
        raise ValidationError("invitedBy is required", field="invitedBy")
    if max_uses is not None and max_uses < 1:
        raise ValidationError("maxUses must be at least 1", field="maxUses")

    group = db.query(Group).filter(Group.id == group_id).first()
    if not group:
        raise NotFoundError("Group", group_id)

    for _ in range(settings.INVITE_CODE_MAX_ATTEMPTS):
        code = generate_invite_code()
        taken = db.query(GroupInvite.id).filter(GroupInvite.invite_code == code).first()
        if not taken:
            break
    else:
        raise ConflictError("Could not generate a unique invite code")

    invite = GroupInvite(
        group_id=group_id,
        invite_code=code,
        invited_by=invited_by.strip(),
        expires_at=as_naive_utc(expires_at),
        max_uses=max_uses,
        current_uses=0,
        is_active=True
    )
    db.add(invite)
    db.commit()
    db.refresh(invite)
    return invite


def get_invite(invite_code: str, db: Session) -> GroupInvite:
    """Get an active invite by code."""
    invite = db.query(GroupInvite).filter(
        GroupInvite.invite_code == invite_code,
        GroupInvite.is_active.is_(True)
    ).first()
    if not invite:
        raise NotFoundError("Invite", invite_code)
    return invite


def list_invites(group_id: int, db: Session) -> List[GroupInvite]:
    """All invites of a group, newest first."""
    group = db.query(Group).filter(Group.id == group_id).first()
    if not group:
        raise NotFoundError("Group", group_id)
    return db.query(GroupInvite).filter(
        GroupInvite.group_id == group_id
    ).order_by(GroupInvite.created_at.desc(), GroupInvite.id.desc()).all()


def redeem_invite(
    invite_code: str,
    member_name: str,
    member_email: Optional[str] = None,
    db: Session = None
) -> Tuple[Group, GroupMember]:
    """
    Join the invite's group as a new member.

    The use counter and the new member are written in one transaction; a
    failed member insert releases the claimed use.
    """
    if not member_name or not member_name.strip():
        raise ValidationError("Member name is required", field="memberName")

    invite = get_invite(invite_code, db)

    if invite.expires_at and utcnow() > invite.expires_at:
        logger.info(f"Refused expired invite {invite.id}")
        raise InviteExpiredError(invite_code)

    if invite.max_uses is not None and invite.current_uses >= invite.max_uses:
        logger.info(f"Refused exhausted invite {invite.id}")
        raise InviteExhaustedError(invite_code)

    claim = update(GroupInvite).where(
        GroupInvite.id == invite.id,
        GroupInvite.is_active.is_(True),
        or_(
            GroupInvite.max_uses.is_(None),
            GroupInvite.current_uses < GroupInvite.max_uses
        )
    ).values(
        current_uses=GroupInvite.current_uses + 1
    ).execution_options(synchronize_session=False)

    try:
        result = db.execute(claim)
        if result.rowcount != 1:
            db.rollback()
            logger.info(f"Refused invite {invite.id}: use cap reached concurrently")
            raise InviteExhaustedError(invite_code)

        member = GroupMember(
            group_id=invite.group_id,
            name=member_name.strip(),
            email=member_email,
            opening_balance=0
        )
        db.add(member)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    db.refresh(invite)
    db.refresh(member)
    group = db.query(Group).filter(Group.id == invite.group_id).first()
    db.refresh(group)
    return group, member


def deactivate_invite(invite_id: int, db: Session) -> GroupInvite:
    """Deactivate an invite. Deactivating an inactive invite is a no-op."""
    invite = db.query(GroupInvite).filter(GroupInvite.id == invite_id).first()
    if not invite:
        raise NotFoundError("Invite", invite_id)
    if invite.is_active:
        invite.is_active = False
        db.commit()
        db.refresh(invite)
    return invite
