"""
Profile service for user profiles with globally unique public names.
"""
from typing import Any, Dict, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from splitledger.core.config import settings
from splitledger.core.exceptions import ConflictError, DuplicatePublicNameError, NotFoundError, ValidationError
from splitledger.core.utils import utcnow
from splitledger.models.profile import UserProfile


def _ensure_name_available(public_name: str, db: Session, exclude_id: Optional[int] = None) -> None:
    query = db.query(UserProfile).filter(UserProfile.public_name == public_name)
    if exclude_id is not None:
        query = query.filter(UserProfile.id != exclude_id)
    if query.first():
        raise DuplicatePublicNameError(public_name)


def _commit_profile(profile: UserProfile, db: Session) -> UserProfile:
    public_name = profile.public_name
    # The unique index still guards a check-then-write race
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicatePublicNameError(public_name)
    db.refresh(profile)
    return profile


def create_profile(
    user_id: str,
    public_name: str,
    email: Optional[str] = None,
    currency: Optional[str] = None,
    language: Optional[str] = None,
    db: Session = None
) -> UserProfile:
    """Create the profile of a caller identity."""
    if not public_name or not public_name.strip():
        raise ValidationError("publicName is required", field="publicName")
    public_name = public_name.strip()

    if db.query(UserProfile).filter(UserProfile.user_id == user_id).first():
        raise ConflictError("Profile already exists for this user")
    _ensure_name_available(public_name, db)

    profile = UserProfile(
        user_id=user_id,
        public_name=public_name,
        email=email,
        currency=(currency or settings.DEFAULT_CURRENCY).upper(),
        language=(language or settings.DEFAULT_LANGUAGE).lower()
    )
    db.add(profile)
    return _commit_profile(profile, db)


def get_profile(profile_id: int, db: Session) -> UserProfile:
    """Get a profile by id."""
    profile = db.query(UserProfile).filter(UserProfile.id == profile_id).first()
    if not profile:
        raise NotFoundError("Profile", profile_id)
    return profile


def get_profile_for_user(user_id: str, db: Session) -> UserProfile:
    """Get the profile owned by a caller identity."""
    profile = db.query(UserProfile).filter(UserProfile.user_id == user_id).first()
    if not profile:
        raise NotFoundError("Profile", user_id)
    return profile


def update_profile(profile_id: int, updates: Dict[str, Any], db: Session) -> UserProfile:
    """Partially update a profile, re-checking public name uniqueness."""
    profile = get_profile(profile_id, db)

    if "public_name" in updates:
        public_name = updates["public_name"]
        if not public_name or not public_name.strip():
            raise ValidationError("publicName is required", field="publicName")
        public_name = public_name.strip()
        _ensure_name_available(public_name, db, exclude_id=profile.id)
        profile.public_name = public_name
    if "email" in updates:
        profile.email = updates["email"]
    if updates.get("currency"):
        profile.currency = updates["currency"].upper()
    if updates.get("language"):
        profile.language = updates["language"].lower()

    profile.updated_at = utcnow()
    return _commit_profile(profile, db)


def delete_profile(profile_id: int, db: Session) -> None:
    """Delete a profile."""
    profile = get_profile(profile_id, db)
    db.delete(profile)
    db.commit()
