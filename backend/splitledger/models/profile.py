"""
User profile model.
"""
from sqlalchemy import Column, String
from splitledger.db.base import BaseModel


class UserProfile(BaseModel):
    """Public profile of a caller identity."""
    __tablename__ = "user_profiles"

    user_id = Column(String(255), unique=True, nullable=False, index=True)  # Caller identity
    public_name = Column(String(100), unique=True, nullable=False, index=True)
    email = Column(String(255), nullable=True)
    currency = Column(String(3), nullable=False)
    language = Column(String(10), nullable=False)
