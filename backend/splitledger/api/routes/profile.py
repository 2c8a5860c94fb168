"""
User profile routes.
"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from splitledger.db.session import get_db
from splitledger.schemas.profile import ProfileCreate, ProfileUpdate, ProfileResponse
from splitledger.api.dependencies import get_current_identity, get_event_publisher
from splitledger.services import profile_service
from splitledger.services.event_service import EventPublisher

router = APIRouter(prefix="/profile", tags=["profile"])


@router.post("", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
async def create_profile(
    profile_data: ProfileCreate,
    caller: str = Depends(get_current_identity),
    db: Session = Depends(get_db),
    events: EventPublisher = Depends(get_event_publisher)
):
    """Create the caller's profile."""
    profile = profile_service.create_profile(
        user_id=caller,
        public_name=profile_data.public_name,
        email=profile_data.email,
        currency=profile_data.currency,
        language=profile_data.language,
        db=db
    )

    response = ProfileResponse.model_validate(profile)
    events.publish("profile_created", response)
    return response


@router.get("", response_model=ProfileResponse)
async def get_my_profile(
    caller: str = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Get the caller's profile."""
    return profile_service.get_profile_for_user(caller, db)


@router.get("/{profile_id}", response_model=ProfileResponse)
async def get_profile(
    profile_id: int,
    caller: str = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Get a profile by id."""
    return profile_service.get_profile(profile_id, db)


@router.patch("/{profile_id}", response_model=ProfileResponse)
async def update_profile(
    profile_id: int,
    profile_data: ProfileUpdate,
    caller: str = Depends(get_current_identity),
    db: Session = Depends(get_db),
    events: EventPublisher = Depends(get_event_publisher)
):
    """Update a profile."""
    updates = profile_data.model_dump(exclude_unset=True)
    profile = profile_service.update_profile(profile_id, updates, db)

    response = ProfileResponse.model_validate(profile)
    events.publish("profile_updated", response)
    return response


@router.delete("/{profile_id}")
async def delete_profile(
    profile_id: int,
    caller: str = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Delete a profile."""
    profile_service.delete_profile(profile_id, db)
    return {"message": "Profile deleted successfully"}
