"""
Shared pydantic configuration for API schemas.
"""
from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import Any, Optional


class APIModel(BaseModel):
    """Base schema: snake_case in Python, camelCase on the wire."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


class WarningResponse(APIModel):
    """A secondary write that failed after its primary write committed."""
    operation: str
    message: str
    entity_id: Optional[Any] = None
