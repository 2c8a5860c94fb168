"""
Group service for group and member management.
"""
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional
from sqlalchemy.orm import Session, selectinload
from splitledger.core.exceptions import NotFoundError, ValidationError
from splitledger.core.utils import to_money, utcnow
from splitledger.models.group import Group, GroupMember


def create_group(
    name: str,
    description: Optional[str] = None,
    members: Optional[Iterable[Dict[str, Any]]] = None,
    db: Session = None
) -> Group:
    """Create a group, optionally with its initial members."""
    if not name or not name.strip():
        raise ValidationError("Group name is required", field="name")

    group = Group(name=name.strip(), description=description)
    db.add(group)
    db.flush()

    for member_data in members or []:
        db.add(_build_member(group.id, **member_data))

    db.commit()
    db.refresh(group)
    return group


def list_groups(db: Session) -> List[Group]:
    """All groups with members, newest first."""
    return db.query(Group).options(
        selectinload(Group.members)
    ).order_by(Group.created_at.desc(), Group.id.desc()).all()


def get_group(group_id: int, db: Session) -> Group:
    """Get a group with its members."""
    group = db.query(Group).options(
        selectinload(Group.members)
    ).filter(Group.id == group_id).first()
    if not group:
        raise NotFoundError("Group", group_id)
    return group


def delete_group(group_id: int, db: Session) -> None:
    """Delete a group with its members, invites, transactions and splits."""
    group = get_group(group_id, db)
    db.delete(group)
    db.commit()


def _build_member(
    group_id: int,
    name: str,
    email: Optional[str] = None,
    opening_balance: Any = Decimal(0)
) -> GroupMember:
    if not name or not name.strip():
        raise ValidationError("Member name is required", field="name")
    return GroupMember(
        group_id=group_id,
        name=name.strip(),
        email=email,
        opening_balance=to_money(opening_balance)
    )


def get_member(group_id: int, member_id: int, db: Session) -> GroupMember:
    """Get a member of a specific group."""
    member = db.query(GroupMember).filter(
        GroupMember.id == member_id,
        GroupMember.group_id == group_id
    ).first()
    if not member:
        raise NotFoundError("Member", member_id)
    return member


def add_member(
    group_id: int,
    name: str,
    email: Optional[str] = None,
    opening_balance: Any = Decimal(0),
    db: Session = None
) -> GroupMember:
    """Add a member to an existing group."""
    get_group(group_id, db)
    member = _build_member(group_id, name, email, opening_balance)
    db.add(member)
    db.commit()
    db.refresh(member)
    return member


def update_member(group_id: int, member_id: int, updates: Dict[str, Any], db: Session) -> GroupMember:
    """
    Rename a member or change their email.

    Splits keep the name they were created with, so a renamed member no
    longer matches splits recorded under the old name.
    """
    member = get_member(group_id, member_id, db)
    if "name" in updates:
        name = updates["name"]
        if not name or not name.strip():
            raise ValidationError("Member name is required", field="name")
        member.name = name.strip()
    if "email" in updates:
        member.email = updates["email"]
    member.updated_at = utcnow()
    db.commit()
    db.refresh(member)
    return member


def remove_member(group_id: int, member_id: int, db: Session) -> None:
    """Remove a member; their splits keep the recorded name."""
    member = get_member(group_id, member_id, db)
    db.delete(member)
    db.commit()
