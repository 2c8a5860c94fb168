"""
Shared route dependencies.
"""
from datetime import datetime
from typing import Optional, Tuple
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from splitledger.core.exceptions import ValidationError
from splitledger.core.security import identity_from_token
from splitledger.core.utils import parse_date_param
from splitledger.services.event_service import EventPublisher

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)
) -> str:
    """Resolve the caller identity from the bearer token."""
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"}
        )
    identity = identity_from_token(credentials.credentials)
    if not identity:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"}
        )
    return identity


def get_event_publisher(request: Request) -> EventPublisher:
    """The application's event publisher."""
    return request.app.state.events


def parse_date_range(
    start_date: Optional[str],
    end_date: Optional[str]
) -> Tuple[Optional[datetime], Optional[datetime]]:
    """Parse optional query-string bounds; a date-only end bound covers the whole day."""
    try:
        start = parse_date_param(start_date)
    except ValueError:
        raise ValidationError("startDate must be an ISO date or timestamp", field="startDate")
    try:
        end = parse_date_param(end_date, end_of_day=True)
    except ValueError:
        raise ValidationError("endDate must be an ISO date or timestamp", field="endDate")
    return start, end
